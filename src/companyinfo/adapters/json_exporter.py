"""JSON export of lookup results (the same shape the tool adapter returns)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def to_json_text(result: BaseModel | None) -> str:
    """Stable UTF-8 JSON (sorted keys, 2-space indent). `None` dumps as `null`."""

    payload: Any = result.model_dump(mode="json") if result is not None else None
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_json(*, result: BaseModel | None, output_path: Path) -> Path:
    """Write `result` to `output_path`, creating parent directories."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(to_json_text(result), encoding="utf-8")
    return output_path

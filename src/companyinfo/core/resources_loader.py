"""Bundled resources loader.

This module lives in `core/` because:
- it centralizes *which* data the scrapers need (label locators) without
  coupling to the CLI
- it avoids duplicating path logic across adapters.

The default locators ship inside the package (`companyinfo/resources`); a
local JSON file can override them when the registry markup drifts.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path

from companyinfo.core.domain.locators import RegistryLocators

REGISTRY_LOCATORS_RESOURCE = "registry_locators.json"


def _read_bundled(name: str) -> str:
    return resources.files("companyinfo.resources").joinpath(name).read_text(encoding="utf-8")


@lru_cache(maxsize=1)
def _bundled_registry_locators() -> RegistryLocators:
    return RegistryLocators.model_validate(json.loads(_read_bundled(REGISTRY_LOCATORS_RESOURCE)))


def load_registry_locators(path: Path | None = None) -> RegistryLocators:
    """Load the registry locators.

    Order:
    1) `path` when given (raises if the file is missing or invalid)
    2) the bundled `registry_locators.json`
    """

    if path is None:
        return _bundled_registry_locators()
    raw = path.read_text(encoding="utf-8")
    return RegistryLocators.model_validate(json.loads(raw))

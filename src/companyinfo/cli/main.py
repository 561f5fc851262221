"""CLI entry point (Typer).

Thin adapter over `CompanyLookupService`: parses arguments, runs the async
pipeline, renders with Rich or dumps JSON. Exit codes: 0 ok, 1 nothing found,
2 registry search/detail failure (`registry` command only).
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import BaseModel
from rich.console import Console

from companyinfo.adapters.json_exporter import export_json, to_json_text
from companyinfo.adapters.tool_handler import list_tools
from companyinfo.cli import doctor
from companyinfo.cli.ui_components import (
    build_tax_panel,
    print_banner,
    print_combined,
    print_registry,
)
from companyinfo.core.config import AppSettings
from companyinfo.core.domain.models import RegistryNotFound
from companyinfo.core.errors import FatalPipelineError
from companyinfo.core.logging_setup import init_logging
from companyinfo.core.services.company_pipeline import CompanyLookupService

app = typer.Typer(
    no_args_is_help=True,
    help="Company information from the tax authority and the business registry.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
# Status notices go to stderr; stdout carries only results.
_notices = Console(stderr=True)

EXIT_NOT_FOUND = 1
EXIT_REGISTRY_FAILURE = 2

CompanyIdArg = typer.Argument(..., help="Company identifier (tax ID / identification code).")
JsonOpt = typer.Option(None, "--json", help="Also export the result as JSON to this path.")
RawOpt = typer.Option(False, "--raw", help="Print JSON to stdout instead of tables.")
LogLevelOpt = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING or ERROR.")


def _service(log_level: str | None) -> CompanyLookupService:
    settings = AppSettings()
    init_logging(log_level, settings=settings)
    return CompanyLookupService(settings=settings)


def _validate_id(company_id: str) -> str:
    if not company_id.strip():
        raise typer.BadParameter("company ID is required")
    return company_id


def _emit(result: BaseModel | None, *, raw: bool, json_path: Path | None) -> None:
    if json_path is not None:
        out = export_json(result=result, output_path=json_path)
        _notices.print(f"[green]JSON written to:[/green] {out}", highlight=False)
    if raw:
        typer.echo(to_json_text(result), nl=False)


@app.command()
def lookup(
    company_id: str = CompanyIdArg,
    json_path: Optional[Path] = JsonOpt,
    raw: bool = RawOpt,
    log_level: Optional[str] = LogLevelOpt,
) -> None:
    """Combined lookup: both sources, merged into one record."""

    company_id = _validate_id(company_id)
    service = _service(log_level)
    info = asyncio.run(service.aggregate(company_id))

    _emit(info, raw=raw, json_path=json_path)
    if not raw:
        print_banner(_console)
        print_combined(_console, info)
    if not info.has_data:
        _notices.print("[yellow]No information found for this company ID in any source.[/yellow]")
        raise typer.Exit(code=EXIT_NOT_FOUND)


@app.command()
def tax(
    company_id: str = CompanyIdArg,
    json_path: Optional[Path] = JsonOpt,
    raw: bool = RawOpt,
    log_level: Optional[str] = LogLevelOpt,
) -> None:
    """Tax authority record only."""

    company_id = _validate_id(company_id)
    service = _service(log_level)
    record = asyncio.run(service.fetch_tax_record(company_id))

    _emit(record, raw=raw, json_path=json_path)
    if not raw:
        _console.print(build_tax_panel(record))
    if record is None:
        raise typer.Exit(code=EXIT_NOT_FOUND)


@app.command()
def registry(
    company_id: str = CompanyIdArg,
    json_path: Optional[Path] = JsonOpt,
    raw: bool = RawOpt,
    log_level: Optional[str] = LogLevelOpt,
) -> None:
    """Business registry record only (entity page + every application)."""

    company_id = _validate_id(company_id)
    service = _service(log_level)
    try:
        record = asyncio.run(service.fetch_registry_record(company_id))
    except FatalPipelineError as exc:
        _notices.print(f"[red]Registry lookup failed:[/red] {exc}", highlight=False)
        raise typer.Exit(code=EXIT_REGISTRY_FAILURE) from exc

    _emit(record, raw=raw, json_path=json_path)
    if not raw:
        print_registry(_console, record)
    if isinstance(record, RegistryNotFound):
        raise typer.Exit(code=EXIT_NOT_FOUND)


@app.command()
def tools() -> None:
    """Print the tool declarations exposed to agent hosts."""

    typer.echo(json.dumps(list_tools(), ensure_ascii=False, indent=2))


def run() -> None:
    app()

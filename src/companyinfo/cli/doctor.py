"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from companyinfo.adapters.http_client import build_async_client
from companyinfo.core.config import AppSettings, get_user_env_file
from companyinfo.core.resources_loader import load_registry_locators

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or exc.__class__.__name__


def _check_locators(settings: AppSettings) -> tuple[bool, str]:
    try:
        locators = load_registry_locators(settings.registry_locators_path)
    except Exception as exc:
        return False, str(exc)
    source = str(settings.registry_locators_path) if settings.registry_locators_path else "bundled"
    return True, f"version {locators.version} ({source})"


@app.command()
def run() -> None:
    """Run baseline diagnostics against both upstreams."""

    settings = AppSettings()

    table = Table(title="companyinfo doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    env_file = get_user_env_file()
    table.add_row("User .env", "OK" if env_file.exists() else "OPTIONAL", str(env_file))
    table.add_row("User-Agent", "OK", settings.user_agent)
    table.add_row(
        "Timeouts",
        "OK",
        f"tax {settings.tax_timeout_seconds}s / registry {settings.registry_timeout_seconds}s",
    )

    ok_loc, detail_loc = _check_locators(settings)
    table.add_row("Registry locators", "OK" if ok_loc else "FAIL", detail_loc)

    # Connectivity (best-effort)
    for label, url in (
        ("Tax authority", settings.tax_public_info_url),
        ("Business registry", settings.registry_url),
    ):
        ok_http, detail_http = asyncio.run(_check_http(url, settings))
        table.add_row(label, "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

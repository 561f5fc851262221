"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (tax source, registry scraper) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "companyinfo"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "companyinfo"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "companyinfo"
    return Path.home() / ".config" / "companyinfo"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings, read from `COMPANYINFO_*` env vars and `.env` files."""

    model_config = SettingsConfigDict(
        env_prefix="COMPANYINFO_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the user-level file.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    tax_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Per-request timeout for the tax authority endpoints (seconds).",
    )
    registry_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Per-request timeout for the business registry pages (seconds).",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; CompanyInfoFetcher/1.0)",
        min_length=1,
        description="Stable User-Agent sent on every outbound request.",
    )

    tax_search_url: str = Field(
        default="https://www.rs.ge/RsGe.Module/TaxpayersRegistry/GrdSearchTaxPayers",
        min_length=8,
        description="Tabular taxpayer search endpoint (form POST, field `tin`).",
    )
    tax_public_info_url: str = Field(
        default="https://xdata.rs.ge/TaxPayer/PublicInfo",
        min_length=8,
        description="Taxpayer public-info endpoint (GET, query `IdentCode`).",
    )
    registry_url: str = Field(
        default="https://enreg.reestri.gov.ge/_dea/main.php",
        min_length=8,
        description="Business registry front controller (search, entity and application pages).",
    )
    registry_origin: str = Field(
        default="https://enreg.reestri.gov.ge",
        min_length=8,
        description="Origin header expected by the registry.",
    )

    registry_locators_path: Path | None = Field(
        default=None,
        description="Optional JSON file overriding the bundled registry label locators.",
    )

    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )

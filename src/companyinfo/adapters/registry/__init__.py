"""Business registry source (HTML scraping): workflow in `source`, page parsers in `parsers`."""

from companyinfo.adapters.registry.source import (
    RegistryPipeline,
    fetch_application_detail,
    fetch_registry_record,
)

__all__ = [
    "RegistryPipeline",
    "fetch_application_detail",
    "fetch_registry_record",
]

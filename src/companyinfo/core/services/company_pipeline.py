"""Company lookup orchestration.

This module runs both sources for one identifier and folds their outcomes into
a single `CombinedCompanyInfo`. Entry points (CLI, tool handler, a future HTTP
route) only translate their input/output to these calls, which keeps
presentation and transport concerns out of the pipeline.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from companyinfo.adapters.registry import RegistryPipeline
from companyinfo.adapters.tax_source import TaxSourceFetcher
from companyinfo.core.config import AppSettings
from companyinfo.core.domain.models import (
    CombinedCompanyInfo,
    RegistryFound,
    RegistryNotFound,
    TaxRecord,
)
from companyinfo.core.errors import FatalPipelineError, require_company_id
from companyinfo.core.interfaces.sources import RegistrySource, TaxSource

logger = logging.getLogger(__name__)


@dataclass
class CompanyLookupService:
    """Aggregates the tax authority and the business registry.

    Sources default to the real adapters; pass fakes to test the merge logic.
    """

    settings: AppSettings = field(default_factory=AppSettings)
    tax_source: TaxSource | None = None
    registry_source: RegistrySource | None = None
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.tax_source is None:
            self.tax_source = TaxSourceFetcher(self.settings, transport=self.transport)
        if self.registry_source is None:
            self.registry_source = RegistryPipeline(self.settings, transport=self.transport)

    async def fetch_tax_record(self, company_id: str) -> TaxRecord | None:
        require_company_id(company_id)
        assert self.tax_source is not None
        return await self.tax_source.fetch(company_id)

    async def fetch_registry_record(self, company_id: str) -> RegistryFound | RegistryNotFound:
        require_company_id(company_id)
        assert self.registry_source is not None
        return await self.registry_source.fetch(company_id)

    async def aggregate(self, company_id: str) -> CombinedCompanyInfo:
        """Both sources concurrently; each failing source leaves its slot null.

        Never raises for a non-empty identifier.
        """

        require_company_id(company_id)
        tax_result, registry_result = await asyncio.gather(
            self.fetch_tax_record(company_id),
            self.fetch_registry_record(company_id),
            return_exceptions=True,
        )

        tax: TaxRecord | None = None
        if isinstance(tax_result, BaseException):
            logger.error("aggregate: tax source failed for %s: %s", company_id, tax_result)
        else:
            tax = tax_result

        registry: RegistryFound | RegistryNotFound | None = None
        if isinstance(registry_result, FatalPipelineError):
            logger.warning("aggregate: %s", registry_result)
        elif isinstance(registry_result, BaseException):
            logger.error("aggregate: registry source failed for %s: %s", company_id, registry_result)
        else:
            registry = registry_result

        info = CombinedCompanyInfo(
            company_id=company_id,
            revenue_service_info=tax,
            entrepreneurial_registry_info=registry,
        )
        if not info.has_data:
            logger.warning("aggregate: no information found for %s in any source", company_id)
        return info


async def get_combined_company_info(
    company_id: str,
    *,
    settings: AppSettings | None = None,
) -> CombinedCompanyInfo:
    return await CompanyLookupService(settings=settings or AppSettings()).aggregate(company_id)

"""Contracts of the company-data sources.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The tax fetcher, the registry pipeline and test doubles are interchangeable.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from companyinfo.core.domain.models import RegistryFound, RegistryNotFound, TaxRecord


@runtime_checkable
class TaxSource(Protocol):
    """Tax authority view: a merged record, or None when nothing was found.

    Transport failures degrade to "unavailable" inside `fetch`; it does not raise
    for upstream problems.
    """

    async def fetch(self, company_id: str) -> TaxRecord | None:
        ...


@runtime_checkable
class RegistrySource(Protocol):
    """Business registry view.

    `fetch` returns `RegistryFound` / `RegistryNotFound` and raises
    `FatalPipelineError` when the search or entity step is unusable.
    """

    async def fetch(self, company_id: str) -> RegistryFound | RegistryNotFound:
        ...

"""Error taxonomy of the acquisition pipeline.

Only transport failures and unusable search/detail steps are exceptions.
"Not found" is a data variant (`RegistryNotFound`) and missing fields or
sections are represented as empty defaults.
"""

from __future__ import annotations


class CompanyInfoError(Exception):
    """Base class for every error raised by this package."""


class TransportError(CompanyInfoError):
    """Request-level failure (DNS, refused connection, timeout, redirect loop). No usable response exists."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class UpstreamStatusError(CompanyInfoError):
    """The upstream answered, but not with HTTP 200."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"{url}: unexpected status {status_code}")
        self.url = url
        self.status_code = status_code


class FatalPipelineError(CompanyInfoError):
    """The registry search or detail step is unusable; aborts that source only."""

    def __init__(self, company_id: str, step: str, reason: str) -> None:
        super().__init__(f"registry {step} failed for {company_id}: {reason}")
        self.company_id = company_id
        self.step = step
        self.reason = reason


def require_company_id(company_id: str) -> str:
    """Return the identifier unchanged, or raise `ValueError` when it is empty."""

    if not isinstance(company_id, str) or not company_id:
        raise ValueError("company_id must be a non-empty string")
    return company_id

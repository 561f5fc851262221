"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-contained documentation (Field) without coupling
  the core to I/O libraries.
- Makes normalizing two heterogeneous sources into one record explicit.

Notes:
- These models describe *what* the information is, not *how* it is fetched.
- Every record is frozen: pipelines build them once per request and return them.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, computed_field
from pydantic.config import ConfigDict


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


# --- Tax authority -----------------------------------------------------------


class Director(_Record):
    full_name: str = Field(default="", description="Director full name.")
    personal_id: str = Field(default="", description="Personal identification number.")
    role: str = Field(default="", description="Role as reported by the tax authority.")


class Founder(_Record):
    full_name: str = Field(default="", description="Founder full name.")
    personal_id: str = Field(default="", description="Personal or company identification number.")
    ownership_percentage: int | float | None = Field(
        default=None,
        description="Share in percent; null when the source omits it (distinct from 0).",
    )


class TaxRecord(_Record):
    """Tax authority view of a company, merged from the tabular search and public info."""

    id: str = ""
    name: str = ""
    entity_type: str = ""
    status: str = ""
    create_date: str = ""
    registration_number: str = ""
    registration_date: str = ""
    address: str = ""
    directors: list[Director] = Field(default_factory=list)
    founders: list[Founder] = Field(default_factory=list)


# --- Business registry -------------------------------------------------------


class EntityMetadata(_Record):
    """Scalar fields of the registry entity page plus discovered document links."""

    identification_code: str = ""
    name: str = ""
    legal_form: str = ""
    registration_date: str = ""
    status_text: str = ""
    reporting_link: str = ""
    documents: dict[str, str] = Field(
        default_factory=dict,
        description="Named document links; keys are present only when discovered.",
    )


class ApplicationStub(_Record):
    """One row of the entity's application list."""

    app_id: str = Field(..., min_length=1)
    registration_number: str = ""
    service_type: str = ""
    status: str = ""
    date: str = ""


class PreparedDocument(_Record):
    name: str = ""
    date: str = ""
    link: str | None = None
    type: str | None = None


class StatusHistoryEntry(_Record):
    id: str = ""
    date: str = ""
    status_text: str = ""
    decision: str | None = None
    link: str | None = None
    type: str | None = None


class ScannedDocument(_Record):
    name: str = ""
    date: str = ""
    link: str | None = None


class Payment(_Record):
    status: str = ""
    amount: str = ""
    bank: str = ""
    receipt_number: str = ""
    date: str = ""


class ApplicationMetadata(_Record):
    registration_number: str = ""
    service_type: str = ""
    service_cost_description: str = ""
    payable_amount_balance: str = ""
    applicant_name_id: str = ""
    applicant_address: str = ""
    representative_name_id: str = ""
    representative_address: str = ""
    attached_documents: list[str] = Field(default_factory=list)
    note: str = ""


class ApplicationDetail(_Record):
    """Parsed application page. Absent sections are empty lists, never missing."""

    prepared_documents: list[PreparedDocument] = Field(default_factory=list)
    status_history: list[StatusHistoryEntry] = Field(default_factory=list)
    scanned_documents: list[ScannedDocument] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    metadata: ApplicationMetadata = Field(default_factory=ApplicationMetadata)


class ApplicationError(_Record):
    """Error marker standing in for an application detail that could not be fetched."""

    error: str = Field(..., min_length=1)
    reason: str | None = None


class Application(ApplicationStub):
    """Stub enriched with its detail (or the error marker that replaced it)."""

    details: ApplicationDetail | ApplicationError


class RegistryNotFound(_Record):
    status: Literal["NotFound"] = "NotFound"


class RegistryFound(_Record):
    status: Literal["Found"] = "Found"
    internal_handle: str = Field(..., min_length=1, description="Numeric registry handle.")
    entity_metadata: EntityMetadata = Field(default_factory=EntityMetadata)
    applications: list[Application] = Field(default_factory=list)


RegistryRecord = Annotated[
    Union[RegistryFound, RegistryNotFound],
    Field(discriminator="status"),
]


# --- Aggregate ---------------------------------------------------------------


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CombinedCompanyInfo(_Record):
    """Top-level response envelope: both sources, each slot nullable."""

    company_id: str = Field(..., min_length=1)
    revenue_service_info: TaxRecord | None = None
    entrepreneurial_registry_info: RegistryRecord | None = None
    last_updated: datetime = Field(default_factory=_utcnow)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_data(self) -> bool:
        """False when no source produced anything ("no information found")."""

        if self.revenue_service_info is not None:
            return True
        return isinstance(self.entrepreneurial_registry_info, RegistryFound)


def comparable_dump(info: CombinedCompanyInfo) -> dict[str, Any]:
    """Dump without the generation timestamp (for idempotence comparisons)."""

    return info.model_dump(mode="json", exclude={"last_updated"})

"""Declarative locators for the business registry pages.

The registry markup has no stable ids/classes for most fields: only the
caption/label text is stable. Every literal used to find a value lives here,
validated from a versioned JSON resource, so markup drift is a data change.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class _Locators(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class SearchPageLocators(_Locators):
    handle_anchor_prefix: str = Field(..., min_length=1)
    handle_pattern: str = Field(..., min_length=1, description="Regex with one numeric group.")


class EntityPageLocators(_Locators):
    identification_code_label: str = Field(..., min_length=1)
    name_label: str = Field(..., min_length=1)
    legal_form_label: str = Field(..., min_length=1)
    registration_date_label: str = Field(..., min_length=1)
    status_label: str = Field(..., min_length=1)
    documents_label: str = Field(..., min_length=1)
    document_links: dict[str, str] = Field(
        default_factory=dict,
        description="Output key -> substring of the anchor text.",
    )
    reporting_link_substring: str = Field(..., min_length=1)
    applications_table_selector: str = Field(..., min_length=1)
    application_cell_count: int = Field(default=5, ge=1)
    application_id_pattern: str = Field(..., min_length=1)


class ApplicationPageLocators(_Locators):
    section_table_class: str = Field(..., min_length=1)
    prepared_documents_caption: str = Field(..., min_length=1)
    status_history_caption: str = Field(..., min_length=1)
    scanned_documents_caption: str = Field(..., min_length=1)
    metadata_caption_template: str = Field(
        ...,
        min_length=1,
        description="Caption of the metadata table; `{app_id}` is substituted.",
    )
    registration_number_label: str = Field(..., min_length=1)
    service_type_label: str = Field(..., min_length=1)
    service_cost_label: str = Field(..., min_length=1)
    balance_label: str = Field(..., min_length=1)
    payments_table_class: str = Field(..., min_length=1)
    payment_cell_count: int = Field(default=5, ge=1)
    payment_debt_marker: str = Field(..., min_length=1)
    applicant_region_selector: str = Field(..., min_length=1)
    applicant_label: str = Field(..., min_length=1)
    representative_label: str = Field(..., min_length=1)
    attached_documents_label: str = Field(..., min_length=1)
    additional_documents_label: str = Field(..., min_length=1)
    additional_documents_suffix: str = Field(default=" (Additionally Submitted)")
    note_label: str = Field(..., min_length=1)


class RegistryLocators(_Locators):
    version: str = Field(..., min_length=1)
    search: SearchPageLocators
    entity: EntityPageLocators
    application: ApplicationPageLocators

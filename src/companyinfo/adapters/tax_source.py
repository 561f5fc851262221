"""Tax authority source.

Two endpoints are queried in parallel for the same identifier:
- tabular search (form POST, field `tin`) -> `{"Data": {"Rows": [[...], ...]}}`
- public info (GET, query `IdentCode`) -> flat object, or `{"Status": -100, ...}`

Each call settles independently: a failure on one side only makes that side's
data unavailable. The two replies are merged field by field (`merge_tax_record`).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

import httpx

from companyinfo.adapters.http_client import RawResponse, build_async_client, send
from companyinfo.core.config import AppSettings
from companyinfo.core.domain.models import Director, Founder, TaxRecord
from companyinfo.core.errors import require_company_id

logger = logging.getLogger(__name__)

# Public-info `Status` value meaning "internal system error".
PUBLIC_INFO_SYSTEM_ERROR = -100

# Positions inside one tabular search row. Inferred from live replies; the
# columns at 3 and 6 are not used.
ROW_STATUS = 0
ROW_ENTITY_TYPE = 1
ROW_NAME = 2
ROW_ID = 4
ROW_REGISTRATION_NUMBER = 5
ROW_REGISTRATION_DATE = 7


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value)


def _cell(row: Sequence[Any] | None, index: int) -> str:
    if not row or index >= len(row):
        return ""
    return _text(row[index])


def _first(*values: str) -> str:
    for value in values:
        if value:
            return value
    return ""


def _percentage(value: Any) -> int | float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    try:
        return float(str(value).replace("%", "").strip())
    except ValueError:
        return None


def extract_tabular_row(payload: Any) -> list[Any] | None:
    """First row of the tabular reply, or None when the reply has no rows."""

    if not isinstance(payload, dict):
        return None
    data = payload.get("Data")
    if not isinstance(data, dict):
        return None
    rows = data.get("Rows")
    if not isinstance(rows, list) or not rows or not isinstance(rows[0], list):
        return None
    return rows[0]


def extract_public_info(payload: Any) -> dict[str, Any] | None:
    """Public-info object, or None for empty replies and the system-error sentinel."""

    if not isinstance(payload, dict) or not payload:
        return None
    if payload.get("Status") == PUBLIC_INFO_SYSTEM_ERROR:
        return None
    return payload


def merge_tax_record(row: Sequence[Any] | None, public: dict[str, Any] | None) -> TaxRecord | None:
    """Merge one tabular row and one public-info object into a `TaxRecord`.

    Per field, the first non-empty value wins. Returns None when neither
    source has data.
    """

    if not row and not public:
        return None
    public = public or {}

    directors = [
        Director(
            full_name=_text(d.get("name")),
            personal_id=_text(d.get("id")),
            role=_text(d.get("type")),
        )
        for d in public.get("Directors") or []
        if isinstance(d, dict)
    ]
    founders = [
        Founder(
            full_name=_text(f.get("name")),
            personal_id=_text(f.get("id")),
            ownership_percentage=_percentage(f.get("percent")),
        )
        for f in public.get("Founders") or []
        if isinstance(f, dict)
    ]

    return TaxRecord(
        id=_first(_text(public.get("id")), _cell(row, ROW_ID)),
        name=_first(_cell(row, ROW_NAME), _text(public.get("name"))),
        entity_type=_first(_text(public.get("legal_form")), _cell(row, ROW_ENTITY_TYPE)),
        status=_first(_cell(row, ROW_STATUS), _text(public.get("status"))),
        create_date=_text(public.get("id_date")),
        registration_number=_cell(row, ROW_REGISTRATION_NUMBER),
        registration_date=_cell(row, ROW_REGISTRATION_DATE),
        address=_text(public.get("address")),
        directors=directors,
        founders=founders,
    )


class TaxSourceFetcher:
    """Fetches and normalizes the tax authority view of a company."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def fetch(self, company_id: str) -> TaxRecord | None:
        require_company_id(company_id)
        timeout = self._settings.tax_timeout_seconds

        async with build_async_client(self._settings, transport=self._transport) as client:
            logger.debug("tax: fetching tabular search and public info for %s", company_id)
            search_result, public_result = await asyncio.gather(
                send(
                    client,
                    "POST",
                    self._settings.tax_search_url,
                    data={"tin": company_id},
                    timeout_seconds=timeout,
                ),
                send(
                    client,
                    "GET",
                    self._settings.tax_public_info_url,
                    params={"IdentCode": company_id},
                    timeout_seconds=timeout,
                ),
                return_exceptions=True,
            )

        search_payload = self._decode(search_result, "tabular search", company_id)
        row = extract_tabular_row(search_payload)
        if row is None and search_payload is not None:
            logger.warning("tax: tabular search for %s returned no rows", company_id)

        public_payload = self._decode(public_result, "public info", company_id)
        public = extract_public_info(public_payload)
        if isinstance(public_payload, dict) and public_payload.get("Status") == PUBLIC_INFO_SYSTEM_ERROR:
            logger.warning(
                "tax: public info for %s returned system error: %s",
                company_id,
                public_payload.get("Message"),
            )

        record = merge_tax_record(row, public)
        if record is None:
            logger.warning("tax: no usable data for %s in either endpoint", company_id)
        return record

    @staticmethod
    def _decode(result: RawResponse | BaseException, label: str, company_id: str) -> Any:
        """JSON payload of a settled call, or None when that side is unavailable."""

        if isinstance(result, BaseException):
            logger.error("tax: %s request failed for %s: %s", label, company_id, result)
            return None
        if not 200 <= result.status < 300:
            logger.warning("tax: %s for %s answered with status %s", label, company_id, result.status)
            return None
        try:
            return result.json()
        except ValueError:
            logger.warning("tax: %s for %s returned a non-JSON body", label, company_id)
            return None


async def fetch_tax_record(
    company_id: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TaxRecord | None:
    """Tax authority record for `company_id`, or None when nothing was found."""

    return await TaxSourceFetcher(settings, transport=transport).fetch(company_id)

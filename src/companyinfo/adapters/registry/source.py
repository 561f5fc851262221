"""Business registry source (multi-step scraping workflow).

The registry has no API: each company takes N+2 page fetches.

1) search by identifier (form POST) -> internal numeric handle, or NotFound
2) entity page by handle -> metadata + application stubs
3) one application page per stub, fetched concurrently (all settled)
4) stubs + details merged back in the original order

Steps 1 and 2 are sequential and fatal on failure (`FatalPipelineError`).
Step 3 contains failures per application as `ApplicationError` markers.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from companyinfo.adapters.http_client import HTML_ACCEPT, build_async_client, send
from companyinfo.adapters.registry.parsers import (
    parse_application_detail,
    parse_application_stubs,
    parse_entity_metadata,
    parse_search_handle,
)
from companyinfo.core.config import AppSettings
from companyinfo.core.domain.locators import RegistryLocators
from companyinfo.core.domain.models import (
    Application,
    ApplicationDetail,
    ApplicationError,
    ApplicationStub,
    RegistryFound,
    RegistryNotFound,
)
from companyinfo.core.errors import (
    FatalPipelineError,
    TransportError,
    UpstreamStatusError,
    require_company_id,
)
from companyinfo.core.resources_loader import load_registry_locators

logger = logging.getLogger(__name__)


class RegistryPipeline:
    """Drives the search -> entity -> applications workflow for one identifier at a time."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        locators: RegistryLocators | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._locators = locators or load_registry_locators(self._settings.registry_locators_path)
        self._transport = transport

    @property
    def _url(self) -> str:
        return self._settings.registry_url

    def _base_headers(self) -> dict[str, str]:
        # The registry rejects requests without these (undocumented).
        return {
            "Accept": "*/*",
            "Origin": self._settings.registry_origin,
            "Referer": f"{self._url}?m=new_index",
        }

    def _application_headers(self) -> dict[str, str]:
        return {
            "Accept": HTML_ACCEPT,
            "Origin": self._settings.registry_origin,
            "Referer": f"{self._url}?c=app&m=show_legal_person",
        }

    async def fetch(self, company_id: str) -> RegistryFound | RegistryNotFound:
        """Run the whole workflow.

        Raises `FatalPipelineError` when search or entity page are unusable.
        """

        require_company_id(company_id)
        async with build_async_client(self._settings, transport=self._transport) as client:
            handle = await self._search(client, company_id)
            if handle is None:
                logger.info("registry: %s not found in search results", company_id)
                return RegistryNotFound()

            entity_html = await self._entity_page(client, company_id, handle)
            metadata = parse_entity_metadata(entity_html, self._locators.entity)
            stubs = parse_application_stubs(entity_html, self._locators.entity)

            logger.debug("registry: fetching %d applications for %s", len(stubs), company_id)
            applications = await self._applications(client, stubs)

        logger.info("registry: processed %s (handle %s, %d applications)", company_id, handle, len(applications))
        return RegistryFound(
            internal_handle=handle,
            entity_metadata=metadata,
            applications=applications,
        )

    async def _search(self, client: httpx.AsyncClient, company_id: str) -> str | None:
        logger.debug("registry: searching %s", company_id)
        try:
            resp = await send(
                client,
                "POST",
                self._url,
                data={
                    "c": "search",
                    "m": "find_legal_persons",
                    "s_legal_person_idnumber": company_id,
                    "s_legal_person_name": "",
                    "s_legal_person_form": "0",
                    "s_legal_person_email": "",
                },
                headers=self._base_headers(),
                timeout_seconds=self._settings.registry_timeout_seconds,
            )
        except TransportError as exc:
            raise FatalPipelineError(company_id, "search", exc.reason) from exc
        if not resp.ok:
            error = UpstreamStatusError(self._url, resp.status)
            raise FatalPipelineError(company_id, "search", str(error)) from error

        return parse_search_handle(resp.body, company_id, self._locators.search)

    async def _entity_page(self, client: httpx.AsyncClient, company_id: str, handle: str) -> str:
        logger.debug("registry: fetching entity page %s for %s", handle, company_id)
        try:
            resp = await send(
                client,
                "GET",
                self._url,
                params={
                    "c": "app",
                    "m": "show_legal_person",
                    "legal_code_id": handle,
                    "enteredCaptcha": "1",
                },
                headers=self._base_headers(),
                timeout_seconds=self._settings.registry_timeout_seconds,
            )
        except TransportError as exc:
            raise FatalPipelineError(company_id, "detail", exc.reason) from exc
        if not resp.ok:
            error = UpstreamStatusError(self._url, resp.status)
            raise FatalPipelineError(company_id, "detail", str(error)) from error
        return resp.body

    async def _applications(
        self,
        client: httpx.AsyncClient,
        stubs: list[ApplicationStub],
    ) -> list[Application]:
        results = await asyncio.gather(
            *(self.fetch_application_detail(stub.app_id, client=client) for stub in stubs),
            return_exceptions=True,
        )

        applications: list[Application] = []
        for stub, result in zip(stubs, results):
            if isinstance(result, BaseException):
                logger.error("registry: application %s crashed: %s", stub.app_id, result)
                details: ApplicationDetail | ApplicationError = ApplicationError(
                    error="Failed to fetch/parse details",
                    reason=str(result) or result.__class__.__name__,
                )
            else:
                details = result
            applications.append(Application(**stub.model_dump(), details=details))
        return applications

    async def fetch_application_detail(
        self,
        app_id: str,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> ApplicationDetail | ApplicationError:
        """Fetch and parse one application page. Never raises."""

        if client is None:
            async with build_async_client(self._settings, transport=self._transport) as own_client:
                return await self.fetch_application_detail(app_id, client=own_client)

        logger.debug("registry: fetching application %s", app_id)
        try:
            resp = await send(
                client,
                "GET",
                self._url,
                params={
                    "c": "app",
                    "m": "show_app",
                    "app_id": app_id,
                    "parent": "personPage",
                    "personID": "",
                },
                headers=self._application_headers(),
                timeout_seconds=self._settings.registry_timeout_seconds,
            )
        except TransportError as exc:
            logger.error("registry: application %s request failed: %s", app_id, exc.reason)
            return ApplicationError(error="Failed to process application details", reason=exc.reason)

        if not resp.ok:
            logger.error("registry: application %s answered with status %s", app_id, resp.status)
            return ApplicationError(error=f"Failed to fetch details, status: {resp.status}")

        try:
            return parse_application_detail(resp.body, app_id, self._locators.application)
        except Exception as exc:  # noqa: BLE001
            logger.error("registry: application %s could not be parsed: %s", app_id, exc)
            return ApplicationError(error="Failed to process application details", reason=str(exc))


async def fetch_registry_record(
    company_id: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RegistryFound | RegistryNotFound:
    """Registry record for `company_id`. Raises `FatalPipelineError` on search/detail failure."""

    return await RegistryPipeline(settings, transport=transport).fetch(company_id)


async def fetch_application_detail(
    app_id: str,
    *,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ApplicationDetail | ApplicationError:
    return await RegistryPipeline(settings, transport=transport).fetch_application_detail(app_id)

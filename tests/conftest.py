from __future__ import annotations

from pathlib import Path
from typing import Callable, Union
from urllib.parse import parse_qs

import httpx
import pytest

from companyinfo.core.config import AppSettings

FIXTURES = Path(__file__).resolve().parent / "fixtures"

TAX_SEARCH_URL = "https://tax.test/TaxpayersRegistry/GrdSearchTaxPayers"
TAX_PUBLIC_URL = "https://xdata.test/TaxPayer/PublicInfo"
REGISTRY_URL = "https://registry.test/_dea/main.php"
REGISTRY_ORIGIN = "https://registry.test"

Responder = Union[httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")


class Upstream:
    """Routes fake upstream replies by (method, path, `m` parameter)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    @staticmethod
    def key_of(request: httpx.Request) -> tuple[str, str, str]:
        action = request.url.params.get("m", "")
        if not action and request.content:
            form = parse_qs(request.content.decode("utf-8"), keep_blank_values=True)
            action = form.get("m", [""])[0]
        return request.method, request.url.path, action

    def on(self, method: str, url: str, responder: Responder, *, action: str = "") -> "Upstream":
        self.routes[(method, httpx.URL(url).path, action)] = responder
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self.routes.get(self.key_of(request))
        if responder is None:
            return httpx.Response(404, text="no route")
        if isinstance(responder, Exception):
            raise responder
        if not isinstance(responder, httpx.Response):
            responder = responder(request)
        # Fresh copy: the same canned reply may be served many times.
        return httpx.Response(responder.status_code, content=responder.content, headers=responder.headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def requests_for(self, action: str) -> list[httpx.Request]:
        return [r for r in self.requests if self.key_of(r)[2] == action]


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        tax_search_url=TAX_SEARCH_URL,
        tax_public_info_url=TAX_PUBLIC_URL,
        registry_url=REGISTRY_URL,
        registry_origin=REGISTRY_ORIGIN,
        tax_timeout_seconds=2,
        registry_timeout_seconds=2,
    )


@pytest.fixture
def upstream() -> Upstream:
    return Upstream()


@pytest.fixture
def load_fixture() -> Callable[[str], str]:
    def _load(name: str) -> str:
        return (FIXTURES / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def registry_upstream(upstream: Upstream, load_fixture) -> Upstream:
    """Registry serving the search page, the entity page and both application pages."""

    pages = {
        "5001": httpx.Response(200, text=load_fixture("application_5001.html")),
        "5002": httpx.Response(200, text=load_fixture("application_empty.html")),
        "5003": httpx.Response(200, text=load_fixture("application_empty.html")),
    }
    upstream.on("POST", REGISTRY_URL, httpx.Response(200, text=load_fixture("search_results.html")), action="find_legal_persons")
    upstream.on("GET", REGISTRY_URL, httpx.Response(200, text=load_fixture("entity_page.html")), action="show_legal_person")
    upstream.on(
        "GET",
        REGISTRY_URL,
        lambda request: pages.get(request.url.params["app_id"], httpx.Response(404)),
        action="show_app",
    )
    return upstream

from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from companyinfo.adapters.registry import RegistryPipeline, fetch_application_detail
from companyinfo.core.domain.models import (
    ApplicationDetail,
    ApplicationError,
    RegistryFound,
    RegistryNotFound,
)
from companyinfo.core.errors import FatalPipelineError

from conftest import REGISTRY_ORIGIN, REGISTRY_URL


async def test_found_with_applications_in_page_order(settings, registry_upstream):
    record = await RegistryPipeline(settings, transport=registry_upstream.transport).fetch("404123456")

    assert isinstance(record, RegistryFound)
    assert record.status == "Found"
    assert record.internal_handle == "987654"
    assert record.entity_metadata.name == "შპს აკმე"
    assert [a.app_id for a in record.applications] == ["5001", "5002", "5003"]

    first = record.applications[0]
    assert first.registration_number == "B15012345"
    assert isinstance(first.details, ApplicationDetail)
    assert first.details.metadata.registration_number == "B15012345"
    assert len(first.details.payments) == 1

    # Pages without any section still produce a full, empty detail.
    assert isinstance(record.applications[1].details, ApplicationDetail)
    assert record.applications[1].details.prepared_documents == []


async def test_request_sequence_and_headers(settings, registry_upstream):
    await RegistryPipeline(settings, transport=registry_upstream.transport).fetch("404123456")

    search, = registry_upstream.requests_for("find_legal_persons")
    form = parse_qs(search.content.decode("utf-8"), keep_blank_values=True)
    assert form == {
        "c": ["search"],
        "m": ["find_legal_persons"],
        "s_legal_person_idnumber": ["404123456"],
        "s_legal_person_name": [""],
        "s_legal_person_form": ["0"],
        "s_legal_person_email": [""],
    }
    assert search.headers["Origin"] == REGISTRY_ORIGIN
    assert search.headers["User-Agent"] == settings.user_agent

    entity, = registry_upstream.requests_for("show_legal_person")
    assert entity.url.params["legal_code_id"] == "987654"
    assert entity.url.params["enteredCaptcha"] == "1"

    apps = registry_upstream.requests_for("show_app")
    assert sorted(r.url.params["app_id"] for r in apps) == ["5001", "5002", "5003"]
    for request in apps:
        assert request.url.params["parent"] == "personPage"
        assert request.url.params["personID"] == ""
        assert request.headers["Referer"] == f"{REGISTRY_URL}?c=app&m=show_legal_person"

    # Strict ordering: search, then entity page, then the applications.
    actions = [registry_upstream.key_of(r)[2] for r in registry_upstream.requests]
    assert actions[:2] == ["find_legal_persons", "show_legal_person"]
    assert set(actions[2:]) == {"show_app"}


async def test_search_without_match_is_not_found(settings, upstream, load_fixture):
    upstream.on(
        "POST",
        REGISTRY_URL,
        httpx.Response(200, text=load_fixture("search_no_match.html")),
        action="find_legal_persons",
    )

    record = await RegistryPipeline(settings, transport=upstream.transport).fetch("404123456")

    assert isinstance(record, RegistryNotFound)
    assert record.status == "NotFound"
    assert upstream.requests_for("show_legal_person") == []


async def test_search_error_status_is_fatal(settings, upstream):
    upstream.on("POST", REGISTRY_URL, httpx.Response(500, text="oops"), action="find_legal_persons")

    with pytest.raises(FatalPipelineError) as excinfo:
        await RegistryPipeline(settings, transport=upstream.transport).fetch("404123456")

    assert excinfo.value.step == "search"
    assert excinfo.value.company_id == "404123456"


async def test_search_transport_failure_is_fatal(settings, upstream):
    upstream.on("POST", REGISTRY_URL, httpx.ConnectError("refused"), action="find_legal_persons")

    with pytest.raises(FatalPipelineError) as excinfo:
        await RegistryPipeline(settings, transport=upstream.transport).fetch("404123456")

    assert excinfo.value.step == "search"


async def test_detail_failure_is_fatal(settings, upstream, load_fixture):
    upstream.on(
        "POST",
        REGISTRY_URL,
        httpx.Response(200, text=load_fixture("search_results.html")),
        action="find_legal_persons",
    )
    upstream.on("GET", REGISTRY_URL, httpx.Response(403, text="denied"), action="show_legal_person")

    with pytest.raises(FatalPipelineError) as excinfo:
        await RegistryPipeline(settings, transport=upstream.transport).fetch("404123456")

    assert excinfo.value.step == "detail"
    assert upstream.requests_for("show_app") == []


async def test_one_failing_application_keeps_siblings(settings, registry_upstream, load_fixture):
    pages = {
        "5001": httpx.Response(200, text=load_fixture("application_5001.html")),
        "5002": httpx.Response(500, text="server error"),
    }

    def app_page(request: httpx.Request) -> httpx.Response:
        app_id = request.url.params["app_id"]
        if app_id == "5003":
            raise httpx.ReadTimeout("read timed out", request=request)
        return pages[app_id]

    registry_upstream.on("GET", REGISTRY_URL, app_page, action="show_app")

    record = await RegistryPipeline(settings, transport=registry_upstream.transport).fetch("404123456")

    assert isinstance(record, RegistryFound)
    ok, failed, timed_out = record.applications
    assert [ok.app_id, failed.app_id, timed_out.app_id] == ["5001", "5002", "5003"]

    assert isinstance(ok.details, ApplicationDetail)
    assert ok.details.metadata.applicant_name_id == "გიორგი ბერიძე (01001000001)"
    assert len(ok.details.status_history) == 2

    assert isinstance(failed.details, ApplicationError)
    assert failed.details.error == "Failed to fetch details, status: 500"
    assert failed.registration_number == "B16000001"

    assert isinstance(timed_out.details, ApplicationError)
    assert timed_out.details.error == "Failed to process application details"
    assert timed_out.details.reason


async def test_crashing_application_task_is_contained(settings, registry_upstream, monkeypatch):
    pipeline = RegistryPipeline(settings, transport=registry_upstream.transport)
    original = pipeline.fetch_application_detail

    async def flaky(app_id, *, client=None):
        if app_id == "5002":
            raise RuntimeError("boom")
        return await original(app_id, client=client)

    monkeypatch.setattr(pipeline, "fetch_application_detail", flaky)

    record = await pipeline.fetch("404123456")

    assert isinstance(record, RegistryFound)
    crashed = record.applications[1]
    assert isinstance(crashed.details, ApplicationError)
    assert crashed.details.error == "Failed to fetch/parse details"
    assert crashed.details.reason == "boom"
    assert isinstance(record.applications[0].details, ApplicationDetail)


async def test_standalone_application_detail_never_raises(settings, upstream):
    upstream.on("GET", REGISTRY_URL, httpx.ConnectError("unreachable"), action="show_app")

    result = await fetch_application_detail("5001", settings=settings, transport=upstream.transport)

    assert isinstance(result, ApplicationError)
    assert result.reason == "unreachable"


async def test_repeated_runs_are_structurally_identical(settings, registry_upstream):
    pipeline = RegistryPipeline(settings, transport=registry_upstream.transport)

    first = await pipeline.fetch("404123456")
    second = await pipeline.fetch("404123456")

    assert first.model_dump(mode="json") == second.model_dump(mode="json")
    assert len(registry_upstream.requests_for("find_legal_persons")) == 2


def _redirect_loop(request: httpx.Request) -> httpx.Response:
    return httpx.Response(302, headers={"Location": str(request.url)})


async def test_application_redirect_loop_becomes_error_marker(settings):
    transport = httpx.MockTransport(_redirect_loop)

    result = await fetch_application_detail("5001", settings=settings, transport=transport)

    assert isinstance(result, ApplicationError)
    assert result.error == "Failed to process application details"
    assert result.reason


async def test_search_redirect_loop_is_fatal(settings):
    transport = httpx.MockTransport(_redirect_loop)

    with pytest.raises(FatalPipelineError) as excinfo:
        await RegistryPipeline(settings, transport=transport).fetch("404123456")

    assert excinfo.value.step == "search"


async def test_search_results_inside_layout_table(settings, upstream, load_fixture):
    upstream.on(
        "POST",
        REGISTRY_URL,
        httpx.Response(200, text=load_fixture("search_results_nested.html")),
        action="find_legal_persons",
    )
    upstream.on("GET", REGISTRY_URL, httpx.Response(200, text=load_fixture("entity_page.html")), action="show_legal_person")

    record = await RegistryPipeline(settings, transport=upstream.transport).fetch("404123456")

    assert isinstance(record, RegistryFound)
    assert record.internal_handle == "987654"
    entity, = upstream.requests_for("show_legal_person")
    assert entity.url.params["legal_code_id"] == "987654"

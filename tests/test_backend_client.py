import asyncio
import json
import time

import httpx
import pytest
import respx

from auth import AuthClient
from backend import BackendTest, NetworkFailure, ParseFailure, PendingResult, TestOptions, TestReport
from .conftest import BASE_URL, CLIENT_ID, CLIENT_SECRET, GatedTransport

STATUS_URL = f"{BASE_URL}/lightswitch/api/service/Fortnite/status"


@pytest.mark.asyncio
@respx.mock
async def test_get_returns_parsed_result():
    respx.get(STATUS_URL).respond(200, json={"status": "UP"}, headers={"X-Request-Id": "abc"})

    async with BackendTest(BASE_URL, "tok") as backend:
        pending = backend.get("Fortnite status", "/lightswitch/api/service/Fortnite/status")
        assert isinstance(pending, PendingResult)
        result = await pending

    assert result.status == 200
    assert result.status_text == "OK"
    assert result.data == {"status": "UP"}
    assert result.headers["x-request-id"] == "abc"
    assert result.description == "Fortnite status"
    assert result.response_time >= 0


@pytest.mark.asyncio
@respx.mock
async def test_chained_assertions_issue_one_request():
    route = respx.get(STATUS_URL).respond(200, json={"status": "UP", "banned": False})
    report = TestReport()

    async with BackendTest(BASE_URL, "tok", report=report) as backend:
        result = await (
            backend.get("Fortnite status", "/lightswitch/api/service/Fortnite/status")
            .expects.to_have_status(200)
            .expects.to_have_property("status", "UP")
            .expects.to_have_property("banned", False)
            .expects.to_have_header("content-type")
        )

    assert route.call_count == 1
    assert result.status == 200
    assert [o.check for o in report.outcomes] == [
        "to_have_status",
        "to_have_property",
        "to_have_property",
        "to_have_header",
    ]
    assert report.ok


@pytest.mark.asyncio
async def test_chain_waits_for_response_before_evaluating():
    transport = GatedTransport({"status": "UP"})
    report = TestReport()

    async with BackendTest(BASE_URL, "tok", transport=transport, report=report) as backend:
        chain = backend.get("Gated", "/status").expects.to_have_status(200).expects.to_have_property("status", "UP")
        for _ in range(5):
            await asyncio.sleep(0)

        assert transport.calls == 1
        assert not chain.done()
        assert report.outcomes == []

        transport.release.set()
        result = await chain

    assert transport.calls == 1
    assert result.data == {"status": "UP"}
    assert [o.passed for o in report.outcomes] == [True, True]


@pytest.mark.asyncio
async def test_cancelled_awaiter_does_not_cancel_shared_request():
    transport = GatedTransport({"status": "UP"})

    async with BackendTest(BASE_URL, "tok", transport=transport) as backend:
        pending = backend.get("Gated", "/status")
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(pending, timeout=0.01)

        transport.release.set()
        result = await pending

    assert result.status == 200
    assert transport.calls == 1


@pytest.mark.asyncio
@respx.mock
async def test_bearer_token_only_when_requested():
    route = respx.get(STATUS_URL).respond(200, json={})

    async with BackendTest(BASE_URL, "tok") as backend:
        await backend.get("with bearer", "/lightswitch/api/service/Fortnite/status", bearer_auth=True)
        await backend.get("without bearer", "/lightswitch/api/service/Fortnite/status")

    assert route.calls[0].request.headers["authorization"] == "Bearer tok"
    assert "authorization" not in route.calls[1].request.headers


@pytest.mark.asyncio
@respx.mock
async def test_send_token_by_default():
    route = respx.get(STATUS_URL).respond(200, json={})

    async with BackendTest(BASE_URL, "tok", send_token_by_default=True) as backend:
        await backend.get("default bearer", "/lightswitch/api/service/Fortnite/status")

    assert route.calls.last.request.headers["authorization"] == "Bearer tok"


@pytest.mark.asyncio
@respx.mock
async def test_json_body_sent_for_post():
    route = respx.post(f"{BASE_URL}/items").respond(201, json={"id": 1})

    async with BackendTest(BASE_URL) as backend:
        result = await backend.post("create item", "/items", body={"name": "pickaxe", "rarity": None})

    request = route.calls.last.request
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content) == {"name": "pickaxe", "rarity": None}
    assert result.status == 201


@pytest.mark.asyncio
@respx.mock
async def test_body_ignored_for_get():
    route = respx.get(f"{BASE_URL}/items").respond(200, json=[])

    async with BackendTest(BASE_URL) as backend:
        await backend.test("list items", TestOptions(endpoint="/items", method="GET", body={"ignored": True}))

    request = route.calls.last.request
    assert request.content == b""
    assert "content-type" not in request.headers


@pytest.mark.asyncio
@respx.mock
async def test_form_body():
    route = respx.put(f"{BASE_URL}/profile").respond(204)

    async with BackendTest(BASE_URL) as backend:
        result = await backend.put("update profile", "/profile", body_type="form", body={"name": "a b", "public": True})

    request = route.calls.last.request
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert request.content == b"name=a+b&public=true"
    assert result.data == ""


@pytest.mark.asyncio
@respx.mock
async def test_form_data_lets_client_set_multipart_boundary():
    route = respx.post(f"{BASE_URL}/upload").respond(200, json={"ok": True})

    async with BackendTest(BASE_URL, default_headers={"Content-Type": "application/json"}) as backend:
        await backend.post(
            "upload",
            "/upload",
            body_type="formData",
            body={"name": "avatar", "file": b"\x89PNG"},
            headers={"Content-Type": "multipart/form-data"},
        )

    request = route.calls.last.request
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    content = request.read()
    assert b'name="name"' in content
    assert b'name="file"; filename="file"' in content


@pytest.mark.asyncio
@respx.mock
async def test_query_params_keep_order_and_stringify():
    route = respx.get(f"{BASE_URL}/items").respond(200, json=[])

    async with BackendTest(BASE_URL) as backend:
        await backend.get(
            "page two", "/items", query_params={"page": 2, "active": True, "tag": ["a", "b"], "cursor": None}
        )

    request = route.calls.last.request
    assert str(request.url) == f"{BASE_URL}/items?page=2&active=true&tag=a&tag=b&cursor="


@pytest.mark.asyncio
@respx.mock
async def test_query_params_merge_with_endpoint_query():
    route = respx.get(f"{BASE_URL}/items").respond(200, json=[])

    async with BackendTest(BASE_URL) as backend:
        await backend.get("sorted page", "/items?sort=asc", query_params={"page": 2})

    assert str(route.calls.last.request.url) == f"{BASE_URL}/items?sort=asc&page=2"


@pytest.mark.asyncio
async def test_timeout_bounds_the_whole_exchange(trickle_server):
    async with BackendTest(trickle_server, timeout=30.0) as backend:
        start = time.perf_counter()
        with pytest.raises(NetworkFailure) as exc_info:
            await backend.get("trickle", "/slow", timeout=1.0)
        elapsed = time.perf_counter() - start

    assert elapsed < 2.0
    assert "timed out after 1.0s" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)


@pytest.mark.asyncio
async def test_engine_default_timeout_applies(trickle_server):
    async with BackendTest(trickle_server, timeout=0.5) as backend:
        with pytest.raises(NetworkFailure):
            await backend.get("trickle", "/slow")


@pytest.mark.asyncio
async def test_slow_exchange_within_timeout_completes(trickle_server):
    async with BackendTest(trickle_server) as backend:
        result = await backend.get("trickle", "/slow", timeout=10.0)

    assert result.data == "xxxxxxxx"


@pytest.mark.asyncio
@respx.mock
async def test_text_response_is_kept_as_text():
    respx.get(f"{BASE_URL}/motd").respond(200, text="hello", headers={"Content-Type": "text/plain"})

    async with BackendTest(BASE_URL) as backend:
        result = await backend.get("motd", "/motd")

    assert result.data == "hello"


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json_raises_parse_failure():
    respx.get(f"{BASE_URL}/broken").respond(200, content=b"{not json", headers={"Content-Type": "application/json"})

    async with BackendTest(BASE_URL) as backend:
        with pytest.raises(ParseFailure) as exc_info:
            await backend.get("broken body", "/broken")

    assert exc_info.value.body == "{not json"


@pytest.mark.asyncio
@respx.mock
async def test_empty_json_body_raises_parse_failure():
    respx.get(f"{BASE_URL}/empty").respond(200, content=b"", headers={"Content-Type": "application/json"})

    async with BackendTest(BASE_URL) as backend:
        with pytest.raises(ParseFailure):
            await backend.get("empty body", "/empty")


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [204, 304])
@respx.mock
async def test_bodyless_status_with_json_content_type(status):
    respx.delete(f"{BASE_URL}/items/1").respond(status, headers={"Content-Type": "application/json"})

    async with BackendTest(BASE_URL) as backend:
        result = await backend.delete("delete item", "/items/1")

    assert result.status == status
    assert result.data is None


@pytest.mark.asyncio
@respx.mock
async def test_finished_requests_are_not_retained():
    respx.get(f"{BASE_URL}/health").respond(200, json={"status": "healthy"})
    respx.get(STATUS_URL).mock(side_effect=httpx.ConnectError)

    async with BackendTest(BASE_URL) as backend:
        for _ in range(3):
            await backend.get("health", "/health").expects.to_have_status(200)
        failed = backend.get("unreachable", "/lightswitch/api/service/Fortnite/status")
        with pytest.raises(NetworkFailure):
            await failed
        await asyncio.sleep(0)

        assert len(backend._tasks) == 1
        errors = await backend.settle()

    assert [type(error) for error in errors] == [NetworkFailure]
    assert backend._tasks == []


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ConnectTimeout, httpx.ReadTimeout])
@respx.mock
async def test_transport_errors_raise_network_failure(error):
    respx.get(STATUS_URL).mock(side_effect=error)

    async with BackendTest(BASE_URL) as backend:
        with pytest.raises(NetworkFailure) as exc_info:
            await backend.get("unreachable", "/lightswitch/api/service/Fortnite/status")

    assert isinstance(exc_info.value.__cause__, error)
    assert exc_info.value.method == "GET"
    assert exc_info.value.url == STATUS_URL


@pytest.mark.asyncio
@respx.mock
async def test_settle_collects_each_error_once():
    respx.get(STATUS_URL).mock(side_effect=httpx.ConnectError)
    respx.get(f"{BASE_URL}/health").respond(200, json={"status": "healthy"})
    report = TestReport()

    async with BackendTest(BASE_URL, report=report) as backend:
        backend.get("unreachable", "/lightswitch/api/service/Fortnite/status").expects.to_have_status(200)
        backend.get("health", "/health").expects.to_have_status(200)
        errors = await backend.settle()

    assert len(errors) == 1
    assert isinstance(errors[0], NetworkFailure)
    assert [(o.description, o.passed) for o in report.outcomes] == [("health", True)]


def test_requests_need_a_running_event_loop():
    backend = BackendTest(BASE_URL)
    with pytest.raises(RuntimeError):
        backend.get("no loop", "/health")


@pytest.mark.asyncio
async def test_lightswitch_against_stub(stub_transport):
    auth = AuthClient(CLIENT_ID, CLIENT_SECRET, "client_credentials", BASE_URL, transport=stub_transport)
    token = await auth.get_access_token()
    report = TestReport()

    async with BackendTest.create(BASE_URL, token, transport=stub_transport, report=report) as backend:
        await (
            backend.get("Lightswitch test", "/lightswitch/api/service/Fortnite/status", bearer_auth=True)
            .expects.to_have_status(200)
            .expects.to_have_property("serviceInstanceId", "fortnite")
            .expects.to_have_property("status", "UP")
            .expects.to_have_property("banned", False)
        )
        await (
            backend.get("Lightswitch without auth", "/lightswitch/api/service/Fortnite/status")
            .expects.to_have_status(401)
        )

    assert [o.passed for o in report.outcomes] == [True, True, True, True, True]
    assert report.exit_code == 0

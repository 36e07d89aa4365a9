"""HTTP requester over ``httpx.MockTransport`` and the shared client pool.

Covers:
- Pooled clients are reused per ``(base_url, purpose)``.
- ``post_json`` returns parsed bodies, wraps non-JSON error bodies and raises
  ``ProviderError`` on transport failures.
- ``post_streaming`` delivers chunks, then exactly one terminal callback.
- End to end: a Vertex ``stream_chat`` over real worker threads.
"""
from __future__ import annotations

import concurrent.futures as cf
import json

import httpx
import pytest

from gemini_providers.base.errors import ErrorCode, ProviderError
from gemini_providers.base.http import HttpRequester, close_all_clients, get_httpx_client, redact_url
from gemini_providers.base.models import ChatPrompt
from gemini_providers.base.streaming import accumulate_events


def setup_function(_):
    close_all_clients()


def teardown_function(_):
    close_all_clients()


@pytest.fixture()
def executor():
    pool = cf.ThreadPoolExecutor(max_workers=2)
    yield pool
    pool.shutdown(wait=True)


def _requester(handler, executor=None) -> HttpRequester:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpRequester(client=client, executor=executor)


def test_same_key_returns_same_instance():
    c1 = get_httpx_client(None, purpose="vertex.http")
    c2 = get_httpx_client(None, purpose="vertex.http")
    assert c1 is c2, "Expected pooled client instances to be identical for same key"  # nosec B101
    assert get_httpx_client(None, purpose="gemini.http") is not c1  # nosec B101


def test_redact_url_drops_query():
    assert redact_url("https://h/v1beta/models/m:countTokens?key=SECRET") == "https://h/v1beta/models/m:countTokens"  # nosec B101


def test_post_json_success_sends_body_and_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"totalTokens": 3})

    out = _requester(handler).post_json("https://x.invalid/count", {"Authorization": b"Bearer tok"}, {"contents": []})
    assert out == {"totalTokens": 3}  # nosec B101
    assert seen == {"auth": "Bearer tok", "body": {"contents": []}}  # nosec B101


def test_post_json_error_status_keeps_json_error_body():
    body = {"error": {"code": 403, "message": "denied", "status": "PERMISSION_DENIED"}}
    out = _requester(lambda _r: httpx.Response(403, json=body)).post_json("https://x.invalid", {}, {})
    assert out == body  # nosec B101


def test_post_json_error_status_wraps_text_body():
    out = _requester(lambda _r: httpx.Response(502, text="Bad Gateway")).post_json("https://x.invalid", {}, {})
    assert out == {"error": {"code": 502, "message": "Bad Gateway"}}  # nosec B101


def test_post_json_transport_error_raises_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as info:
        _requester(handler).post_json("https://x.invalid", {}, {})
    assert info.value.code is ErrorCode.UNAVAILABLE  # nosec B101


def test_post_streaming_chunks_then_success(executor):
    parts = [b'[{"a": 1}\n', b',\n{"a": 2}', b"\n]"]
    events: list = []

    def handler(_request):
        return httpx.Response(200, content=iter(parts))

    future = _requester(handler, executor).post_streaming(
        "https://x.invalid/stream",
        {},
        {},
        on_partial=lambda chunk: events.append(("chunk", chunk)),
        on_success=lambda payload: events.append(("ok", payload)),
        on_error=lambda status, payload: events.append(("err", status, payload)),
    )
    future.result(timeout=5)
    assert [e for e in events if e[0] == "chunk"] == [("chunk", p) for p in parts]  # nosec B101
    assert events[-1] == ("ok", [{"a": 1}, {"a": 2}])  # nosec B101


def test_post_streaming_error_status(executor):
    body = [{"error": {"code": 404, "message": "not found"}}]
    events: list = []
    _requester(lambda _r: httpx.Response(404, json=body), executor).post_streaming(
        "https://x.invalid",
        {},
        {},
        on_partial=lambda chunk: events.append("chunk"),
        on_success=lambda payload: events.append("ok"),
        on_error=lambda status, payload: events.append((status, payload)),
    ).result(timeout=5)
    assert events == [(404, body)]  # nosec B101


def test_post_streaming_transport_timeout(executor):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    events: list = []
    _requester(handler, executor).post_streaming(
        "https://x.invalid",
        {},
        {},
        on_success=lambda payload: events.append("ok"),
        on_error=lambda status, payload: events.append((status, payload)),
    ).result(timeout=5)
    status, payload = events[0]
    assert status is None  # nosec B101
    assert payload["error"]["code"] == ErrorCode.TIMEOUT.value  # nosec B101


def test_vertex_stream_chat_over_worker_threads(executor, token_runner, fake_clock, make_stream):
    from gemini_providers.vertex import VertexProvider

    body = make_stream("Bonjour", " le", " monde")
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["url"] = str(request.url)
        return httpx.Response(200, content=iter([body[i:i + 16] for i in range(0, len(body), 16)]))

    provider = VertexProvider(
        project_id="proj-1",
        requester=_requester(handler, executor),
        runner=token_runner,
        clock=fake_clock,
    )
    prompt = ChatPrompt()
    prompt.add_user("Say hello in French")
    assert accumulate_events(provider.stream_chat(prompt)) == "Bonjour le monde"  # nosec B101
    assert prompt.interactions[-1].content == "Bonjour le monde"  # nosec B101
    assert seen["auth"] == "Bearer ya29.fake-token"  # nosec B101
    assert seen["url"].endswith("/publishers/google/models/gemini-1.0-pro:streamGenerateContent")  # nosec B101


def _vertex_over(handler, executor, token_runner, fake_clock):
    from gemini_providers.vertex import VertexProvider

    return VertexProvider(
        project_id="proj-1",
        requester=_requester(handler, executor),
        runner=token_runner,
        clock=fake_clock,
    )


def test_chat_streaming_malformed_content_still_terminates(executor, token_runner, fake_clock):
    body = b'[{"candidates":[{"content":"oops"}]}\n,\n{"candidates":[]}\n]'
    provider = _vertex_over(lambda _r: httpx.Response(200, content=iter([body])), executor, token_runner, fake_clock)
    events: list = []
    prompt = ChatPrompt()
    prompt.add_user("hi")
    provider.chat_streaming(
        prompt,
        on_partial=lambda text: events.append(("partial", text)),
        on_complete=lambda text: events.append(("complete", text)),
        on_error=lambda exc: events.append(("error", exc)),
    ).result(timeout=5)
    assert [kind for kind, _ in events if kind != "partial"] == ["complete"]  # nosec B101
    assert events[-1] == ("complete", "")  # nosec B101


def test_chat_streaming_raising_partial_callback_reports_error(executor, token_runner, fake_clock, make_stream):
    body = make_stream("one", "two", "three")
    provider = _vertex_over(lambda _r: httpx.Response(200, content=iter([body])), executor, token_runner, fake_clock)
    events: list = []

    def on_partial(text):
        raise RuntimeError("ui glitch")

    prompt = ChatPrompt()
    prompt.add_user("hi")
    provider.chat_streaming(
        prompt,
        on_partial=on_partial,
        on_complete=lambda text: events.append(("complete", text)),
        on_error=lambda exc: events.append(("error", exc)),
    ).result(timeout=5)
    assert [kind for kind, _ in events] == ["error"]  # nosec B101
    exc = events[0][1]
    assert isinstance(exc, ProviderError) and exc.code is ErrorCode.INTERNAL  # nosec B101
    assert "ui glitch" in exc.message  # nosec B101
    assert len(prompt.interactions) == 1  # nosec B101

"""Vertex AI adapter with a fake requester and fake token command."""
from __future__ import annotations

import pydantic
import pytest

from gemini_providers.base.credentials import TOKEN_TTL_SECONDS
from gemini_providers.base.errors import ApiError, AuthError, ErrorCode, ProviderError
from gemini_providers.base.interfaces import ChatEmbeddingProvider
from gemini_providers.base.models import ChatPrompt, Role
from gemini_providers.vertex import VertexProvider

_MODEL_PATH = "https://us-central1-aiplatform.googleapis.com/{version}/projects/proj-1/locations/us-central1/publishers/google/models/{model}:{method}"


def _prompt(**kwargs) -> ChatPrompt:
    prompt = ChatPrompt(**kwargs)
    prompt.add_user("What is the capital of France?")
    return prompt


def _element(text: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def test_satisfies_capability_protocol(vertex):
    assert isinstance(vertex, ChatEmbeddingProvider)  # nosec B101
    assert vertex.provider_name == "vertex"  # nosec B101


def test_embed_request_shape_and_result(vertex, requester):
    requester.responses = [{"predictions": [{"embeddings": {"values": [0.1, 0.2, 0.3]}}]}]
    assert vertex.embed("hello") == [0.1, 0.2, 0.3]  # nosec B101
    call = requester.calls[0]
    assert call["url"] == _MODEL_PATH.format(version="v1", model="textembedding-gecko@003", method="predict")  # nosec B101
    assert call["body"] == {"instances": [{"content": "hello"}]}  # nosec B101
    assert call["headers"]["Authorization"] == b"Bearer ya29.fake-token"  # nosec B101
    assert call["headers"]["Content-Type"] == "application/json"  # nosec B101


def test_token_refreshed_once_per_ttl(vertex, requester, token_runner, fake_clock):
    requester.responses = [{"predictions": [{"embeddings": {"values": [1]}}]}] * 3
    vertex.embed("a")
    vertex.embed("b")
    assert len(token_runner.calls) == 1  # nosec B101
    assert vertex.credential_generated_at == fake_clock.now  # nosec B101
    fake_clock.advance(TOKEN_TTL_SECONDS + 1)
    vertex.embed("c")
    assert len(token_runner.calls) == 2  # nosec B101


def test_token_error_raises_before_any_request(requester, fake_clock):
    provider = VertexProvider(
        project_id="proj-1",
        requester=requester,
        runner=lambda _cmd: "ERROR: no active account",
        clock=fake_clock,
    )
    with pytest.raises(AuthError) as info:
        provider.embed("x")
    assert "no active account" in str(info.value)  # nosec B101
    assert requester.calls == []  # nosec B101


def test_chat_appends_assistant_reply(vertex, requester):
    requester.responses = [[_element("Par"), _element("is")]]
    prompt = _prompt(temperature=0.3)
    assert vertex.chat(prompt) == "Paris"  # nosec B101
    call = requester.calls[0]
    assert call["url"] == _MODEL_PATH.format(version="v1", model="gemini-1.0-pro", method="streamGenerateContent")  # nosec B101
    assert call["body"]["generation_config"] == {"temperature": 0.3}  # nosec B101
    assert prompt.interactions[-1].role is Role.ASSISTANT  # nosec B101
    assert prompt.interactions[-1].content == "Paris"  # nosec B101


def test_chat_error_raises_api_error_without_appending(vertex, requester):
    requester.responses = [[{"error": {"code": 429, "message": "rate limited", "status": "RESOURCE_EXHAUSTED"}}]]
    prompt = _prompt()
    with pytest.raises(ApiError) as info:
        vertex.chat(prompt)
    err = info.value
    assert err.status == 429 and err.detail == "rate limited"  # nosec B101
    assert err.code is ErrorCode.RATE_LIMIT  # nosec B101
    assert str(err) == "Problem calling Vertex AI: status: 429 message: rate limited"  # nosec B101
    assert len(prompt.interactions) == 1  # nosec B101


def test_count_tokens_uses_v1beta1_and_strips_generation(vertex, requester):
    requester.responses = [{"totalTokens": 12, "totalBillableCharacters": 40}]
    prompt = _prompt(temperature=0.9, max_output_tokens=5)
    assert vertex.count_tokens(prompt) == 12  # nosec B101
    call = requester.calls[0]
    assert call["url"] == _MODEL_PATH.format(version="v1beta1", model="gemini-1.0-pro", method="countTokens")  # nosec B101
    assert "generation_config" not in call["body"]  # nosec B101


def test_count_tokens_error(vertex, requester):
    requester.responses = [{"error": {"code": 400, "message": "bad request", "status": "INVALID_ARGUMENT"}}]
    with pytest.raises(ApiError) as info:
        vertex.count_tokens(_prompt())
    assert info.value.code is ErrorCode.VALIDATION  # nosec B101


def test_malformed_embedding_is_internal_error(vertex, requester):
    requester.responses = [{"predictions": []}]
    with pytest.raises(ProviderError) as info:
        vertex.embed("x")
    assert info.value.code is ErrorCode.INTERNAL  # nosec B101


def test_embed_async_success(vertex, requester):
    requester.responses = [{"predictions": [{"embeddings": {"values": [0.5]}}]}]
    got: list = []
    future = vertex.embed_async("x", got.append, lambda exc: got.append(("err", exc)))
    future.result()
    assert got == [[0.5]]  # nosec B101
    assert requester.calls[0]["kind"] == "stream"  # nosec B101


def test_embed_async_error_payload(vertex, requester):
    requester.failure = (403, {"error": {"code": 403, "message": "denied", "status": "PERMISSION_DENIED"}})
    errors: list = []
    vertex.embed_async("x", lambda _v: None, errors.append).result()
    assert isinstance(errors[0], ApiError)  # nosec B101
    assert errors[0].code is ErrorCode.AUTH  # nosec B101


def test_embed_async_auth_error_goes_to_on_error(requester, fake_clock):
    provider = VertexProvider(project_id="p", requester=requester, runner=lambda _c: "ERROR", clock=fake_clock)
    errors: list = []
    future = provider.embed_async("x", lambda _v: None, errors.append)
    assert future.done()  # nosec B101
    assert isinstance(errors[0], AuthError)  # nosec B101
    assert requester.calls == []  # nosec B101


def test_chat_streaming_callbacks(vertex, requester, make_stream):
    body = make_stream("Bon", "jour")
    requester.chunks = [body]
    seen: list = []
    prompt = _prompt()
    vertex.chat_streaming(
        prompt,
        lambda text: seen.append(("partial", text)),
        lambda text: seen.append(("complete", text)),
        lambda exc: seen.append(("error", exc)),
    ).result()
    assert seen == [("partial", "Bon"), ("complete", "Bonjour")]  # nosec B101
    assert prompt.interactions[-1].content == "Bonjour"  # nosec B101
    assert requester.calls[0]["url"].endswith(":streamGenerateContent")  # nosec B101


def test_settings_from_environment(monkeypatch, requester, token_runner):
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "env-project")
    monkeypatch.setenv("VERTEX_REGION", "europe-west4")
    provider = VertexProvider(requester=requester, runner=token_runner)
    assert provider.project_id == "env-project"  # nosec B101
    requester.responses = [{"predictions": [{"embeddings": {"values": [1.0]}}]}]
    provider.embed("x")
    assert requester.calls[0]["url"].startswith(  # nosec B101
        "https://europe-west4-aiplatform.googleapis.com/v1/projects/env-project/locations/europe-west4/"
    )


def test_missing_project_fails_validation(requester):
    with pytest.raises(pydantic.ValidationError):
        VertexProvider(requester=requester)

"""Pytest configuration for the provider test suite.

Every test runs offline: adapters get a :class:`FakeRequester` instead of a
network client, and the Vertex token command is replaced by a counting fake
runner driven by a manual clock. Provider-related environment variables are
cleared so a developer's shell or ``.env`` never leaks into assertions.
"""

from __future__ import annotations

import concurrent.futures as cf
import json
from typing import Any, Dict, Iterator, List, Optional, Sequence

import pytest

from gemini_providers.config import reset_config_cache

_ENV_VARS = (
    "VERTEX_PROJECT_ID",
    "GOOGLE_CLOUD_PROJECT",
    "VERTEX_REGION",
    "VERTEX_MODEL",
    "VERTEX_EMBEDDING_MODEL",
    "VERTEX_TOKEN_COMMAND",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_EMBEDDING_MODEL",
    "PROVIDERS_CONFIG_FILE",
    "PROVIDERS_DIAGNOSTICS_FILE",
    "PT_TIMEOUT_HTTP_SECONDS",
    "PT_TIMEOUT_STREAM_SECONDS",
    "PT_TIMEOUT_COMMAND_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear provider env vars and point dotenv loading at an empty path."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class FakeClock:
    """Manually advanced epoch clock."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTokenRunner:
    """Stands in for ``gcloud``: returns queued outputs and counts runs."""

    def __init__(self, *outputs: str) -> None:
        self._outputs = list(outputs) or ["ya29.fake-token\n"]
        self.calls: List[Sequence[str]] = []

    def __call__(self, command: Sequence[str]) -> str:
        self.calls.append(tuple(command))
        if len(self._outputs) > 1:
            return self._outputs.pop(0)
        return self._outputs[0]


class FakeRequester:
    """Records requests and replays scripted responses synchronously.

    ``post_json`` returns the next queued response. ``post_streaming`` feeds
    the queued chunks to ``on_partial`` and then calls ``on_success`` with the
    parsed concatenation, or ``on_error`` when a failure was scripted.
    """

    def __init__(self) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[Any] = []
        self.chunks: List[bytes] = []
        self.failure: Optional[tuple] = None
        self.raise_in_worker: Optional[BaseException] = None

    def post_json(self, url: str, headers, body: Any) -> Any:
        self.calls.append({"url": url, "headers": dict(headers), "body": body, "kind": "json"})
        return self.responses.pop(0) if self.responses else {}

    def post_streaming(self, url: str, headers, body: Any, *, on_success, on_error, on_partial=None):
        self.calls.append({"url": url, "headers": dict(headers), "body": body, "kind": "stream"})
        future: "cf.Future[None]" = cf.Future()
        if self.raise_in_worker is not None:
            future.set_exception(self.raise_in_worker)
            return future
        if self.failure is not None:
            on_error(*self.failure)
        elif self.chunks:
            for chunk in self.chunks:
                if on_partial is not None:
                    on_partial(chunk)
            on_success(json.loads(b"".join(self.chunks)))
        else:
            on_success(self.responses.pop(0) if self.responses else {})
        future.set_result(None)
        return future


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def token_runner() -> FakeTokenRunner:
    return FakeTokenRunner()


@pytest.fixture()
def requester() -> FakeRequester:
    return FakeRequester()


@pytest.fixture()
def vertex(requester, token_runner, fake_clock):
    from gemini_providers.vertex import VertexProvider

    return VertexProvider(
        project_id="proj-1",
        region="us-central1",
        model="gemini-1.0-pro",
        embedding_model="textembedding-gecko@003",
        requester=requester,
        runner=token_runner,
        clock=fake_clock,
    )


@pytest.fixture()
def gemini(requester):
    from gemini_providers.gemini import GeminiProvider

    return GeminiProvider(api_key="AIza-test-key", requester=requester)


def stream_element(text: str) -> Dict[str, Any]:
    """One ``streamGenerateContent`` array element carrying ``text``."""
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def pretty_stream(*texts: str) -> bytes:
    """Serialize elements the way the backend pretty-prints a streamed array."""
    body = "\n,\n".join(json.dumps(stream_element(t), indent=2) for t in texts)
    return f"[{body}\n]".encode("utf-8")


@pytest.fixture()
def make_stream():
    return pretty_stream

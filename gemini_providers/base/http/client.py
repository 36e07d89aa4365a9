"""Shared HTTP client pool and worker executor for providers.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances and a
    single background executor used by non-blocking requests, so adapters never
    allocate per-call clients or threads.

Timeout strategy:
    Pooled clients carry the blocking timeout from :func:`get_timeout_config`;
    streamed requests pass their own ``httpx.Timeout`` per call.

Lifecycle & cleanup:
    Clients are cached by ``(base_url, purpose)``. Clients and the executor are
    released at interpreter exit via ``atexit``; tests may call
    :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import concurrent.futures as cf
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_EXECUTOR: Optional[cf.ThreadPoolExecutor] = None
_LOCK = threading.RLock()

# Upper bound on concurrently running non-blocking requests.
EXECUTOR_MAX_WORKERS = 8


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    Parameters:
        base_url: Optional API base URL. ``None`` groups clients under a
            shared key and callers pass absolute URLs.
        purpose: Short string discriminating separate pools (e.g.
            ``"vertex.chat"``). Keep stable to maximize reuse.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None:
            return client
        timeout = get_timeout_config().httpx_timeout()
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def get_executor() -> cf.ThreadPoolExecutor:
    """Return the shared executor running non-blocking requests."""
    global _EXECUTOR  # noqa: PLW0603 - module-level singleton
    with _LOCK:
        if _EXECUTOR is None:
            _EXECUTOR = cf.ThreadPoolExecutor(
                max_workers=EXECUTOR_MAX_WORKERS,
                thread_name_prefix="gemini-providers-http",
            )
        return _EXECUTOR


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            try:
                c.close()
            except Exception:  # nosec B110 - best-effort shutdown
                pass
        _CLIENTS.clear()


def _cleanup_at_exit() -> None:
    """atexit hook closing clients and stopping the executor."""
    global _EXECUTOR  # noqa: PLW0603
    close_all_clients()
    with _LOCK:
        if _EXECUTOR is not None:
            _EXECUTOR.shutdown(wait=False)
            _EXECUTOR = None


atexit.register(_cleanup_at_exit)

__all__ = ["get_httpx_client", "get_executor", "close_all_clients", "EXECUTOR_MAX_WORKERS"]

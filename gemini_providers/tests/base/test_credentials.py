"""Credential staleness and refresh-on-demand.

Covers:
- ``Credential.is_stale`` boundaries (missing value, TTL edge).
- At most one token command run per TTL window.
- Refresh once the TTL has elapsed, with the new issue time recorded.
- ``ERROR`` output or empty output raises ``AuthError`` and keeps the old value.
"""
from __future__ import annotations

import pytest

from gemini_providers.base.credentials import Credential, CredentialManager, TOKEN_TTL_SECONDS
from gemini_providers.base.errors import AuthError, ErrorCode


def test_credential_is_stale_boundaries():
    assert Credential().is_stale(0.0, 10.0)  # nosec B101
    assert Credential(b"tok", None).is_stale(0.0, 10.0)  # nosec B101
    cred = Credential(b"tok", 100.0)
    assert not cred.is_stale(109.9, 10.0)  # nosec B101
    assert cred.is_stale(110.0, 10.0)  # nosec B101


def test_credential_repr_hides_value():
    cred = Credential.from_text("secret-value", 5.0)
    assert "secret-value" not in repr(cred)  # nosec B101
    assert cred.as_text() == "secret-value"  # nosec B101
    assert cred.value == b"secret-value"  # nosec B101


def test_from_text_blank_is_unset():
    assert Credential.from_text("").value is None  # nosec B101
    assert Credential.from_text(None).value is None  # nosec B101


def test_refresh_runs_once_within_ttl(token_runner, fake_clock):
    mgr = CredentialManager(runner=token_runner, clock=fake_clock)
    cred = Credential()
    mgr.ensure_fresh(cred)
    fake_clock.advance(TOKEN_TTL_SECONDS - 1)
    mgr.ensure_fresh(cred)
    mgr.ensure_fresh(cred)
    assert len(token_runner.calls) == 1  # nosec B101
    assert cred.value == b"ya29.fake-token"  # nosec B101


def test_refresh_after_ttl_updates_issue_time(token_runner, fake_clock):
    mgr = CredentialManager(runner=token_runner, clock=fake_clock)
    cred = Credential()
    mgr.ensure_fresh(cred)
    first_issue = cred.issued_at
    fake_clock.advance(TOKEN_TTL_SECONDS)
    mgr.ensure_fresh(cred)
    assert len(token_runner.calls) == 2  # nosec B101
    assert cred.issued_at == first_issue + TOKEN_TTL_SECONDS  # nosec B101


def test_refresh_passes_configured_command(token_runner, fake_clock):
    mgr = CredentialManager(command=("mytool", "token"), runner=token_runner, clock=fake_clock)
    mgr.ensure_fresh(Credential())
    assert token_runner.calls == [("mytool", "token")]  # nosec B101


def test_error_output_raises_auth_error_and_keeps_old_value(fake_clock):
    mgr = CredentialManager(runner=lambda _cmd: "ERROR: no active account\n", clock=fake_clock)
    cred = Credential(b"old", fake_clock() - TOKEN_TTL_SECONDS * 2)
    with pytest.raises(AuthError) as info:
        mgr.ensure_fresh(cred)
    assert info.value.message == "ERROR: no active account"  # nosec B101
    assert info.value.code is ErrorCode.AUTH  # nosec B101
    assert info.value.provider == "vertex"  # nosec B101
    assert cred.value == b"old"  # nosec B101


def test_empty_output_raises_auth_error(fake_clock):
    mgr = CredentialManager(provider="vertex", runner=lambda _cmd: "  \n", clock=fake_clock)
    with pytest.raises(AuthError):
        mgr.ensure_fresh(Credential())


def test_runner_auth_error_is_tagged_with_provider(fake_clock):
    def _runner(_cmd):
        raise AuthError(message="'gcloud' executable not found on PATH")

    mgr = CredentialManager(provider="vertex", runner=_runner, clock=fake_clock)
    with pytest.raises(AuthError) as info:
        mgr.ensure_fresh(Credential())
    assert info.value.provider == "vertex"  # nosec B101

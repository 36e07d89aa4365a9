"""Credential refresh-on-demand.

:class:`CredentialManager` keeps a :class:`Credential` usable: when the value
is missing or older than the TTL it synchronously runs the token command and
stores the trimmed output, UTF-8 encoded, together with the refresh time.

Refresh is blocking. It gates every request and happens at most
once per TTL window per provider. The clock and command runner are injectable
so staleness can be tested without real delays or a real ``gcloud``.
"""

from __future__ import annotations

import time
from typing import Callable, Optional, Sequence

from ..errors import AuthError
from ..logging import LogContext, get_logger, normalized_log_event
from .credential import Credential
from .token_command import DEFAULT_TOKEN_COMMAND, run_token_command

# Access tokens issued by gcloud live for one hour.
TOKEN_TTL_SECONDS = 3600.0
ERROR_MARKER = "ERROR"

TokenRunner = Callable[[Sequence[str]], str]
Clock = Callable[[], float]


class CredentialManager:
    """Refresh a bearer token through an external command when stale.

    Parameters:
        provider: Provider key used in errors and log events.
        command: Argument vector printing a token on stdout.
        runner: Callable executing ``command`` and returning its output.
        clock: Epoch-seconds clock.
        ttl_seconds: Maximum credential age before a refresh.
    """

    def __init__(
        self,
        *,
        provider: str = "vertex",
        command: Sequence[str] = DEFAULT_TOKEN_COMMAND,
        runner: Optional[TokenRunner] = None,
        clock: Optional[Clock] = None,
        ttl_seconds: float = TOKEN_TTL_SECONDS,
    ) -> None:
        self._provider = provider
        self._command = tuple(command)
        self._runner = runner or run_token_command
        self._clock = clock or time.time
        self._ttl = ttl_seconds
        self._logger = get_logger("credentials")

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def ensure_fresh(self, credential: Credential) -> Credential:
        """Refresh ``credential`` in place if needed and return it.

        Raises:
            AuthError: the command output contains ``ERROR`` or is empty.
        """
        now = self._clock()
        if not credential.is_stale(now, self._ttl):
            return credential

        ctx = LogContext(provider=self._provider, operation="credential.refresh")
        normalized_log_event(self._logger, "credential.refresh.start", ctx, phase="start")
        try:
            output = self._runner(self._command).strip()
        except AuthError as exc:
            exc.provider = self._provider
            normalized_log_event(self._logger, "credential.refresh.error", ctx, phase="finalize", error_code=exc.code.value)
            raise
        if not output or ERROR_MARKER in output:
            normalized_log_event(self._logger, "credential.refresh.error", ctx, phase="finalize", error_code="auth")
            raise AuthError(message=output or "token command produced no output", provider=self._provider)

        credential.value = output.encode("utf-8")
        credential.issued_at = now
        normalized_log_event(self._logger, "credential.refresh.end", ctx, phase="finalize", emitted=True)
        return credential


__all__ = ["CredentialManager", "TOKEN_TTL_SECONDS", "ERROR_MARKER"]

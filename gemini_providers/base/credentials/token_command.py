"""Token-issuing command helpers.

Purpose
    Resolve and run the external command that prints a short-lived access
    token (``gcloud auth print-access-token`` by default).

External Dependencies
    * Local ``gcloud`` CLI (or a configured replacement) executed via
      :mod:`subprocess` with a fixed argument list and ``shell=False``.

Failure Semantics
    The command's own failures are reported through its output (the issuing
    tool prints ``ERROR`` on failure), so stdout and stderr are merged and the
    exit status is not checked here. A missing executable or a timeout raises
    :class:`AuthError` directly.

Timeout Strategy
    Bounded by ``get_timeout_config().command_timeout_seconds``.
"""

from __future__ import annotations

import os
import shutil
import subprocess  # nosec B404 - fixed arg list for a trusted local CLI
from typing import List, Sequence

from ..errors import AuthError, ErrorCode
from ..timeouts import get_timeout_config

DEFAULT_TOKEN_COMMAND = ("gcloud", "auth", "print-access-token")


def resolve_command(command: Sequence[str]) -> List[str]:
    """Return ``command`` with its executable resolved to an absolute path.

    Raises
    ------
    AuthError
        If the executable cannot be located on ``PATH``.
    """
    if not command:
        raise AuthError(message="token command is empty")
    exe_path = shutil.which(command[0])
    if not exe_path:
        raise AuthError(message=f"'{command[0]}' executable not found on PATH")
    return [os.path.abspath(exe_path), *command[1:]]


def run_token_command(command: Sequence[str]) -> str:
    """Run the token command and return its combined output.

    Raises
    ------
    AuthError
        If the executable is missing, cannot be started, or times out.
    """
    cmd = resolve_command(command)
    timeout = get_timeout_config().command_timeout_seconds
    try:
        completed = subprocess.run(  # nosec B603 - validated arg list; shell=False
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        raise AuthError(code=ErrorCode.TIMEOUT, message=f"token command exceeded {timeout}s", raw=exc) from exc
    except OSError as exc:
        raise AuthError(message=f"cannot run token command: {exc}", raw=exc) from exc
    return completed.stdout or ""


__all__ = ["DEFAULT_TOKEN_COMMAND", "resolve_command", "run_token_command"]

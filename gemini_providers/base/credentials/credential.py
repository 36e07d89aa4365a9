"""Short-lived credential value with an explicit staleness rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Credential:
    """A cached secret and the time it was issued.

    Attributes:
        value: UTF-8 encoded secret, or ``None`` before the first refresh.
        issued_at: Epoch seconds of the refresh that produced ``value``.
    """

    value: Optional[bytes] = None
    issued_at: Optional[float] = None

    @classmethod
    def from_text(cls, text: Optional[str], issued_at: Optional[float] = None) -> "Credential":
        return cls(text.encode("utf-8") if text else None, issued_at)

    def is_stale(self, now: float, ttl: float) -> bool:
        """Return True when the value is missing or at least ``ttl`` seconds old."""
        if not self.value or self.issued_at is None:
            return True
        return now - self.issued_at >= ttl

    def as_text(self) -> str:
        """Return the secret as text for header or query construction."""
        return self.value.decode("utf-8") if self.value else ""

    def __repr__(self) -> str:
        state = "set" if self.value else "unset"
        return f"Credential(value=<{state}>, issued_at={self.issued_at!r})"


__all__ = ["Credential"]

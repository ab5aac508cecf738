from __future__ import annotations

from typing import Protocol


class CredentialVerifier(Protocol):
    """Compare a plaintext secret with a stored hash."""

    def verify(self, plaintext: str, hashed: str) -> bool: ...

# auth_service/infra/security/password.py
from __future__ import annotations

from werkzeug.security import check_password_hash

from auth_service.services._shared.ports import CredentialVerifier


class PasswordHashVerifier(CredentialVerifier):
    """Check passwords against hashes produced by ``werkzeug.security``."""

    def verify(self, plaintext: str, hashed: str) -> bool:
        if not plaintext or not hashed:
            return False
        return check_password_hash(hashed, plaintext)

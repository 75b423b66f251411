"""
Single-use form nonces signed with HMAC-SHA256.

A nonce is ``salt + expiry + signature`` where the signature covers the salt,
the expiry and a caller supplied token (e.g. customer + session ID), so a
nonce only validates for the session it was issued to.
"""

import hashlib
import hmac
import secrets
import time

SALT_LENGTH = 8
EXPIRY_LENGTH = 8


class Nonce:
    """Nonce generator and checker."""

    def __init__(self, secret: str, length: int = 40):
        if length <= SALT_LENGTH + EXPIRY_LENGTH:
            raise ValueError(f"Nonce length must be greater than {SALT_LENGTH + EXPIRY_LENGTH}")

        self.secret = secret.encode() if isinstance(secret, str) else secret
        self.length = length

    def _sign(self, salt: str, expiry: str, token: str) -> str:
        message = f"{salt}{expiry}{token}".encode()
        digest = hmac.new(self.secret, message, hashlib.sha256).hexdigest()
        return digest[:self.length - SALT_LENGTH - EXPIRY_LENGTH]

    def create(self, token: str, timeout: int = 3600) -> str:
        """Create a nonce for token, valid for timeout seconds."""
        salt = secrets.token_hex(SALT_LENGTH // 2)
        expiry = f"{int(time.time()) + timeout:08x}"

        return salt + expiry + self._sign(salt, expiry, token)

    def check(self, nonce: str, token: str) -> bool:
        """Check that nonce was created for token and has not expired."""
        if not nonce or len(nonce) != self.length:
            return False

        salt = nonce[:SALT_LENGTH]
        expiry = nonce[SALT_LENGTH:SALT_LENGTH + EXPIRY_LENGTH]
        signature = nonce[SALT_LENGTH + EXPIRY_LENGTH:]

        try:
            expires_at = int(expiry, 16)
        except ValueError:
            return False

        if expires_at < time.time():
            return False

        return hmac.compare_digest(signature, self._sign(salt, expiry, token))

"""
Warden - Remember cookie codecs.

A codec wraps the raw user id before it goes into the remember cookie and
unwraps it on the way back. ``decode`` returns None for anything that was
not produced by the same codec and key.

- CookieSigner: HMAC signature, value stays readable
- CookieEncryptor: Fernet authenticated encryption, value is opaque
"""

from __future__ import annotations

import hashlib
import hmac
from base64 import urlsafe_b64decode, urlsafe_b64encode
from typing import Optional, Protocol, Union

from cryptography.fernet import Fernet, InvalidToken


class CookieCodec(Protocol):
    """Integrity (and optionally confidentiality) layer for cookie values."""

    def encode(self, value: str) -> str:
        ...

    def decode(self, value: str) -> Optional[str]:
        ...


class CookieSigner:
    """
    Cookie signer with HMAC-based signing.

    Uses urlsafe base64 encoding: ``signature.value``.
    """

    def __init__(self, secret_key: Union[str, bytes], algorithm: str = "sha256"):
        """
        Initialize cookie signer.

        Args:
            secret_key: Secret key for signing
            algorithm: Hash algorithm (sha256, sha384, sha512)
        """
        if isinstance(secret_key, str):
            secret_key = secret_key.encode("utf-8")
        if not secret_key:
            raise ValueError("secret_key must not be empty")

        self.secret_key = secret_key
        self.algorithm = algorithm
        self._hash_func = getattr(hashlib, algorithm)

    def _signature(self, value_bytes: bytes) -> bytes:
        return hmac.new(self.secret_key, value_bytes, self._hash_func).digest()

    def encode(self, value: str) -> str:
        value_bytes = value.encode("utf-8")
        sig_b64 = urlsafe_b64encode(self._signature(value_bytes)).decode("ascii").rstrip("=")
        val_b64 = urlsafe_b64encode(value_bytes).decode("ascii").rstrip("=")
        return f"{sig_b64}.{val_b64}"

    def decode(self, value: str) -> Optional[str]:
        try:
            sig_b64, val_b64 = value.split(".", 1)

            sig_b64 += "=" * (-len(sig_b64) % 4)
            val_b64 += "=" * (-len(val_b64) % 4)

            signature = urlsafe_b64decode(sig_b64)
            value_bytes = urlsafe_b64decode(val_b64)
        except ValueError:
            return None

        if not hmac.compare_digest(signature, self._signature(value_bytes)):
            return None

        try:
            return value_bytes.decode("utf-8")
        except UnicodeDecodeError:
            return None


class CookieEncryptor:
    """
    Fernet-based cookie codec.

    Args:
        key: 32-byte urlsafe base64 Fernet key (see ``generate_key``)
        ttl: Optional maximum token age in seconds, checked on decode
    """

    def __init__(self, key: Union[str, bytes], ttl: Optional[int] = None):
        self._fernet = Fernet(key)
        self.ttl = ttl

    @staticmethod
    def generate_key() -> bytes:
        return Fernet.generate_key()

    def encode(self, value: str) -> str:
        return self._fernet.encrypt(value.encode("utf-8")).decode("ascii")

    def decode(self, value: str) -> Optional[str]:
        try:
            return self._fernet.decrypt(value.encode("ascii"), ttl=self.ttl).decode("utf-8")
        except (InvalidToken, UnicodeError):
            return None


__all__ = ["CookieCodec", "CookieSigner", "CookieEncryptor"]

"""Signed message envelope: salt, creation time and privilege expiries."""
from __future__ import annotations

import hmac
from dataclasses import dataclass, field
from hashlib import sha256
from typing import Mapping

from .errors import ConfigurationError
from .packing import ByteReader, pack_map_uint32, pack_uint32

SIGNATURE_LENGTH = sha256().digest_size


def secret_bytes(secret: str | bytes) -> bytes:
    """Normalise the app certificate into HMAC key bytes."""

    key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
    if not key:
        raise ConfigurationError("app certificate is empty")
    return key


def sign(secret: str | bytes, packed_message: bytes) -> bytes:
    """Return the HMAC-SHA256 signature of ``packed_message``."""

    return hmac.new(secret_bytes(secret), packed_message, sha256).digest()


@dataclass(frozen=True, slots=True)
class Message:
    salt: int
    created_at: int
    privileges: Mapping[int, int] = field(default_factory=dict)

    def pack(self) -> bytes:
        return pack_uint32(self.salt) + pack_uint32(self.created_at) + pack_map_uint32(self.privileges)

    def sign(self, secret: str | bytes) -> tuple[bytes, bytes]:
        """Pack the message and return ``(packed_message, signature)``."""

        packed = self.pack()
        return packed, sign(secret, packed)

    @classmethod
    def unpack(cls, packed_message: bytes) -> "Message":
        reader = ByteReader(packed_message)
        salt = reader.unpack_uint32()
        created_at = reader.unpack_uint32()
        privileges = reader.unpack_map_uint32()
        reader.expect_end()
        return cls(salt=salt, created_at=created_at, privileges=privileges)

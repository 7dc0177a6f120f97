"""Version 007 RTC access tokens.

Layout of a token::

    "007" + base64(
        pack_string(base64(signature))
        + pack_string(app_id)
        + pack_string(channel_name)
        + pack_string(str(uid))
        + pack_uint32(salt) + pack_uint32(created_at) + pack_map_uint32(privileges)
    )

The signature is HMAC-SHA256 keyed by the app certificate over the trailing
salt/created_at/privileges block only.
"""
from __future__ import annotations

import base64
import binascii
import enum
import hmac
import secrets
import time
from dataclasses import dataclass, field
from typing import Mapping

from .errors import (
    ConfigurationError,
    InvalidSignatureError,
    MalformedInputError,
    TokenExpiredError,
    UnsupportedVersionError,
    ValueOutOfRangeError,
)
from .message import Message, sign
from .packing import UINT32_MAX, ByteReader, pack_string

VERSION = "007"
VERSION_LENGTH = len(VERSION)

SALT_UPPER_BOUND = 100_000_000


class Privilege(enum.IntEnum):
    JOIN_CHANNEL = 1
    PUBLISH_AUDIO_STREAM = 2
    PUBLISH_VIDEO_STREAM = 3
    PUBLISH_DATA_STREAM = 4


class Role(enum.IntEnum):
    PUBLISHER = 1
    SUBSCRIBER = 2


PUBLISH_PRIVILEGES = (
    Privilege.PUBLISH_AUDIO_STREAM,
    Privilege.PUBLISH_VIDEO_STREAM,
    Privilege.PUBLISH_DATA_STREAM,
)


def privileges_for_role(role: Role, expire_ts: int) -> dict[int, int]:
    """Every role may join; only publishers get the publish privileges."""

    privileges = {int(Privilege.JOIN_CHANNEL): expire_ts}
    if role is Role.PUBLISHER:
        for privilege in PUBLISH_PRIVILEGES:
            privileges[int(privilege)] = expire_ts
    return privileges


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _b64decode(value: str | bytes, label: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedInputError(f"{label} is not valid base64") from exc


def _check_uid(uid: int) -> int:
    if isinstance(uid, bool) or not isinstance(uid, int) or not 0 <= uid <= UINT32_MAX:
        raise ValueOutOfRangeError(f"uid must be an integer in [0, {UINT32_MAX}]")
    return uid


def build_access_token(
    app_id: str,
    secret: str | bytes,
    channel_name: str,
    uid: int,
    privileges: Mapping[int, int],
    created_at: int | None = None,
    salt: int | None = None,
) -> str:
    """Build a signed ``007`` token.

    ``created_at`` defaults to the current time and ``salt`` to a fresh random
    value below 10**8; pass both to make the output deterministic.
    """

    if not app_id:
        raise ConfigurationError("app id is empty")
    if not secret:
        raise ConfigurationError("app certificate is empty")
    _check_uid(uid)

    if salt is None:
        salt = secrets.randbelow(SALT_UPPER_BOUND)
    if created_at is None:
        created_at = int(time.time())

    packed_message, signature = Message(salt=salt, created_at=created_at, privileges=privileges).sign(secret)

    content = pack_string(app_id) + pack_string(channel_name) + pack_string(str(uid)) + packed_message
    signed_payload = pack_string(_b64encode(signature)) + content
    return VERSION + _b64encode(signed_payload)


def build_token_with_uid(
    app_id: str,
    secret: str | bytes,
    channel_name: str,
    uid: int,
    role: Role,
    privilege_expired_ts: int,
    *,
    created_at: int | None = None,
    salt: int | None = None,
) -> str:
    """Build a token granting ``role``'s privileges until ``privilege_expired_ts``."""

    return build_access_token(
        app_id,
        secret,
        channel_name,
        uid,
        privileges_for_role(Role(role), privilege_expired_ts),
        created_at=created_at,
        salt=salt,
    )


@dataclass(frozen=True, slots=True)
class DecodedAccessToken:
    """Every field recovered from a token, before any verification."""

    app_id: str
    channel_name: str
    uid: int
    salt: int
    created_at: int
    privileges: dict[int, int] = field(default_factory=dict)
    signature: bytes = field(default=b"", repr=False)
    packed_message: bytes = field(default=b"", repr=False)

    def verify(self, secret: str | bytes) -> bool:
        """Recompute the signature with ``secret`` and compare in constant time."""

        return hmac.compare_digest(sign(secret, self.packed_message), self.signature)

    def expires_at(self, privilege: int = Privilege.JOIN_CHANNEL) -> int | None:
        return self.privileges.get(int(privilege))


def decode_access_token(token: str) -> DecodedAccessToken:
    """Parse a ``007`` token without checking its signature or expiry."""

    if not isinstance(token, str) or token[:VERSION_LENGTH] != VERSION:
        raise UnsupportedVersionError(f"token does not start with version {VERSION}")

    reader = ByteReader(_b64decode(token[VERSION_LENGTH:], "token payload"))
    signature = _b64decode(reader.unpack_string(), "signature")
    app_id = reader.unpack_string()
    channel_name = reader.unpack_string()
    uid_text = reader.unpack_string()
    packed_message = reader.read_rest()

    if not uid_text.isascii() or not uid_text.isdigit():
        raise MalformedInputError("uid field is not a decimal number")
    if len(uid_text) > 1 and uid_text.startswith("0"):
        raise MalformedInputError("uid field has leading zeros")
    uid = int(uid_text)
    if uid > UINT32_MAX:
        raise MalformedInputError("uid field does not fit 32 bits")

    message = Message.unpack(packed_message)
    return DecodedAccessToken(
        app_id=app_id,
        channel_name=channel_name,
        uid=uid,
        salt=message.salt,
        created_at=message.created_at,
        privileges=dict(message.privileges),
        signature=signature,
        packed_message=packed_message,
    )


def verify_access_token(token: str, secret: str | bytes, now: int | None = None) -> DecodedAccessToken:
    """Decode ``token`` and check its signature and join expiry."""

    decoded = decode_access_token(token)
    if not decoded.verify(secret):
        raise InvalidSignatureError("token signature does not match")

    expires_at = decoded.expires_at(Privilege.JOIN_CHANNEL)
    current = int(time.time()) if now is None else now
    if expires_at is not None and expires_at < current:
        raise TokenExpiredError(f"join privilege expired at {expires_at}")
    return decoded

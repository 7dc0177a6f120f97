"""Expose the access-token codec."""
from .access_token import (
    VERSION,
    DecodedAccessToken,
    Privilege,
    Role,
    build_access_token,
    build_token_with_uid,
    decode_access_token,
    privileges_for_role,
    verify_access_token,
)
from .errors import (
    AccessTokenError,
    ConfigurationError,
    InvalidSignatureError,
    MalformedInputError,
    TokenExpiredError,
    UnsupportedVersionError,
    ValueOutOfRangeError,
)

__all__ = [
    "VERSION",
    "AccessTokenError",
    "ConfigurationError",
    "DecodedAccessToken",
    "InvalidSignatureError",
    "MalformedInputError",
    "Privilege",
    "Role",
    "TokenExpiredError",
    "UnsupportedVersionError",
    "ValueOutOfRangeError",
    "build_access_token",
    "build_token_with_uid",
    "decode_access_token",
    "privileges_for_role",
    "verify_access_token",
]

"""Failure types raised while building, decoding or verifying access tokens."""
from __future__ import annotations


class AccessTokenError(Exception):
    """Base class for every access-token failure."""


class ConfigurationError(AccessTokenError):
    """Raised when the app id or signing certificate is missing."""


class ValueOutOfRangeError(AccessTokenError, ValueError):
    """Raised when a number or a length does not fit its wire width."""


class MalformedInputError(AccessTokenError, ValueError):
    """Raised when a token cannot be parsed back into its fields."""


class UnsupportedVersionError(MalformedInputError):
    """Raised when the token does not start with the expected version tag."""


class InvalidSignatureError(AccessTokenError):
    """Raised when the embedded signature does not match the certificate."""


class TokenExpiredError(AccessTokenError):
    """Raised when the join privilege has already expired."""

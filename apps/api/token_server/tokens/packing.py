"""Big-endian binary packing used by the access-token wire format.

Every value is written without padding or alignment:

* ``uint16`` / ``uint32`` as fixed-width big-endian integers
* byte strings as a ``uint16`` length prefix followed by the raw bytes
* ``uint16 -> uint32`` maps as a ``uint16`` count followed by the pairs in
  ascending key order
"""
from __future__ import annotations

import struct
from typing import Mapping

from .errors import MalformedInputError, ValueOutOfRangeError

UINT16_MAX = 0xFFFF
UINT32_MAX = 0xFFFFFFFF

_UINT16 = struct.Struct(">H")
_UINT32 = struct.Struct(">I")


def _check_range(value: int, upper: int, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueOutOfRangeError(f"{label} must be an integer, got {type(value).__name__}")
    if value < 0 or value > upper:
        raise ValueOutOfRangeError(f"{label} {value} is outside [0, {upper}]")
    return value


def pack_uint16(value: int) -> bytes:
    return _UINT16.pack(_check_range(value, UINT16_MAX, "uint16"))


def pack_uint32(value: int) -> bytes:
    return _UINT32.pack(_check_range(value, UINT32_MAX, "uint32"))


def pack_bytes(data: bytes) -> bytes:
    if len(data) > UINT16_MAX:
        raise ValueOutOfRangeError(f"byte string of length {len(data)} exceeds {UINT16_MAX}")
    return pack_uint16(len(data)) + data


def pack_string(value: str) -> bytes:
    return pack_bytes(value.encode("utf-8"))


def pack_map_uint32(values: Mapping[int, int]) -> bytes:
    """Pack a privilege-style map; keys are written in ascending order."""

    for key in values:
        _check_range(key, UINT16_MAX, "map key")
    ordered = sorted(values.items(), key=lambda item: item[0])
    parts = [pack_uint16(len(ordered))]
    for key, value in ordered:
        parts.append(pack_uint16(key))
        parts.append(pack_uint32(value))
    return b"".join(parts)


class ByteReader:
    """Sequential reader inverting the ``pack_*`` helpers."""

    def __init__(self, buffer: bytes) -> None:
        self._buffer = buffer
        self._position = 0

    @property
    def remaining(self) -> int:
        return len(self._buffer) - self._position

    def _take(self, size: int) -> bytes:
        if size > self.remaining:
            raise MalformedInputError(
                f"expected {size} bytes at offset {self._position}, only {self.remaining} left"
            )
        chunk = self._buffer[self._position : self._position + size]
        self._position += size
        return chunk

    def unpack_uint16(self) -> int:
        return _UINT16.unpack(self._take(_UINT16.size))[0]

    def unpack_uint32(self) -> int:
        return _UINT32.unpack(self._take(_UINT32.size))[0]

    def unpack_bytes(self) -> bytes:
        length = self.unpack_uint16()
        return self._take(length)

    def unpack_string(self) -> str:
        raw = self.unpack_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedInputError("string field is not valid UTF-8") from exc

    def unpack_map_uint32(self) -> dict[int, int]:
        count = self.unpack_uint16()
        values: dict[int, int] = {}
        for _ in range(count):
            key = self.unpack_uint16()
            values[key] = self.unpack_uint32()
        return values

    def read_rest(self) -> bytes:
        return self._take(self.remaining)

    def expect_end(self) -> None:
        if self.remaining:
            raise MalformedInputError(f"{self.remaining} unexpected trailing bytes")

"""Tests for the big-endian primitive encoders and the byte reader."""
from __future__ import annotations

import pytest

from token_server.tokens.errors import MalformedInputError, ValueOutOfRangeError
from token_server.tokens.packing import (
    ByteReader,
    pack_bytes,
    pack_map_uint32,
    pack_string,
    pack_uint16,
    pack_uint32,
)


def test_integers_are_big_endian():
    assert pack_uint16(0x0102) == b"\x01\x02"
    assert pack_uint32(0x01020304) == b"\x01\x02\x03\x04"
    assert pack_uint16(0) == b"\x00\x00"
    assert pack_uint32(0xFFFFFFFF) == b"\xff\xff\xff\xff"


@pytest.mark.parametrize("value", [-1, 65536])
def test_uint16_rejects_out_of_range(value):
    with pytest.raises(ValueOutOfRangeError):
        pack_uint16(value)


@pytest.mark.parametrize("value", [-1, 2**32])
def test_uint32_rejects_out_of_range(value):
    with pytest.raises(ValueOutOfRangeError):
        pack_uint32(value)


def test_uint32_rejects_non_integers():
    with pytest.raises(ValueOutOfRangeError):
        pack_uint32(1.5)  # type: ignore[arg-type]


def test_string_is_length_prefixed_utf8():
    assert pack_string("room42") == b"\x00\x06room42"
    assert pack_string("") == b"\x00\x00"
    # "é" is two bytes in UTF-8
    assert pack_string("é") == b"\x00\x02\xc3\xa9"


def test_string_length_limit():
    assert len(pack_string("a" * 65535)) == 65537
    with pytest.raises(ValueOutOfRangeError):
        pack_string("a" * 65536)
    with pytest.raises(ValueOutOfRangeError):
        pack_bytes(b"\x00" * 65536)


def test_map_is_sorted_by_key():
    packed = pack_map_uint32({3: 30, 1: 10, 2: 20})
    assert packed == (
        b"\x00\x03"
        b"\x00\x01\x00\x00\x00\x0a"
        b"\x00\x02\x00\x00\x00\x14"
        b"\x00\x03\x00\x00\x00\x1e"
    )


def test_map_rejects_wide_keys_and_values():
    with pytest.raises(ValueOutOfRangeError):
        pack_map_uint32({70000: 1})
    with pytest.raises(ValueOutOfRangeError):
        pack_map_uint32({1: 2**32})


def test_reader_consumes_exact_bytes():
    buffer = pack_uint16(7) + pack_uint32(1_700_000_000) + pack_string("chan") + pack_map_uint32({2: 5, 1: 4})
    reader = ByteReader(buffer)

    assert reader.unpack_uint16() == 7
    assert reader.unpack_uint32() == 1_700_000_000
    assert reader.unpack_string() == "chan"
    assert reader.unpack_map_uint32() == {1: 4, 2: 5}
    assert reader.remaining == 0
    reader.expect_end()


def test_reader_rejects_truncated_integer():
    with pytest.raises(MalformedInputError):
        ByteReader(b"\x00\x00\x01").unpack_uint32()


def test_reader_rejects_overrunning_length():
    reader = ByteReader(b"\x00\x05abc")
    with pytest.raises(MalformedInputError):
        reader.unpack_bytes()


def test_reader_rejects_invalid_utf8():
    with pytest.raises(MalformedInputError):
        ByteReader(b"\x00\x01\xff").unpack_string()


def test_reader_rejects_trailing_bytes():
    reader = ByteReader(b"\x00\x01\x02")
    reader.unpack_uint16()
    with pytest.raises(MalformedInputError):
        reader.expect_end()


@pytest.mark.parametrize("key", [1.9, "1", None])
def test_map_rejects_non_integer_keys(key):
    with pytest.raises(ValueOutOfRangeError):
        pack_map_uint32({key: 5})


def test_map_rejects_mixed_key_types():
    with pytest.raises(ValueOutOfRangeError):
        pack_map_uint32({"1": 5, 1: 6})

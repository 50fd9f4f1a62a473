import pytest

from riptide.checksum import (
    blake3,
    compute128,
    equal,
    from_uint64_pair,
    to_uint64_pair,
)


def test_compute128_deterministic():
    data = b"riptide"
    s1 = compute128(data)
    s2 = compute128(data)
    assert equal(s1, s2)
    assert not equal(compute128(data), compute128(b"riptide2"))


def test_uint64_pair_round_trip():
    s = compute128(b"roundtrip")
    hi, lo = to_uint64_pair(s)
    s2 = from_uint64_pair(hi, lo)
    assert equal(s, s2)
    assert s == s2


def test_blake3_empty_vector():
    assert blake3(b"").hex() == (
        "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"
    )


def test_blake3_abc_vector():
    assert blake3(b"abc").hex() == (
        "6437b3ac38465133ffb63b75273a8db548c558465d79db03fd359c6cd5bd9d85"
    )


@pytest.mark.parametrize("size", [0, 1, 63, 64, 65, 1023, 1024, 1025, 2048, 3073, 5000])
def test_blake3_extended_output_prefix(size):
    data = bytes((i * 7 + 3) % 256 for i in range(size))
    long_out = blake3(data, 131)
    assert len(long_out) == 131
    assert blake3(data, 32) == long_out[:32]
    assert blake3(data, 16) == long_out[:16]


def test_blake3_distinguishes_chunk_boundaries():
    a = bytes(1024)
    b = bytes(1025)
    assert blake3(a) != blake3(b)
    assert blake3(b"\x00" * 2048) != blake3(b"\x00" * 2047)


def test_blake3_negative_length():
    with pytest.raises(ValueError):
        blake3(b"x", -1)


def test_compute128_is_hash_prefix():
    data = b"hello world"
    assert compute128(data) == blake3(data)[:16]
    assert len(compute128(data)) == 16


def test_to_uint64_pair_big_endian():
    s = bytes(range(16))
    hi, lo = to_uint64_pair(s)
    assert hi == 0x0001020304050607
    assert lo == 0x08090A0B0C0D0E0F


def test_to_uint64_pair_rejects_bad_length():
    with pytest.raises(ValueError):
        to_uint64_pair(b"short")


def test_equal_detects_difference():
    s = compute128(b"a")
    flipped = bytes([s[0] ^ 1]) + s[1:]
    assert not equal(s, flipped)
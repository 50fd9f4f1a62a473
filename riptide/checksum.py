"""128-bit content checksums built on the BLAKE3 hash."""

from __future__ import annotations

import hmac
import struct

_MASK = 0xFFFFFFFF
_CHUNK_LEN = 1024
_CHUNK_START, _CHUNK_END, _PARENT, _ROOT = 1, 2, 4, 8
_IV = (
    0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
    0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
)
_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)
_COLUMNS_AND_DIAGONALS = (
    (0, 4, 8, 12), (1, 5, 9, 13), (2, 6, 10, 14), (3, 7, 11, 15),
    (0, 5, 10, 15), (1, 6, 11, 12), (2, 7, 8, 13), (3, 4, 9, 14),
)
_WORDS = struct.Struct("<16I")


def _rotr(value: int, bits: int) -> int:
    return ((value >> bits) | (value << (32 - bits))) & _MASK


def _g(s: list[int], a: int, b: int, c: int, d: int, x: int, y: int) -> None:
    s[a] = (s[a] + s[b] + x) & _MASK
    s[d] = _rotr(s[d] ^ s[a], 16)
    s[c] = (s[c] + s[d]) & _MASK
    s[b] = _rotr(s[b] ^ s[c], 12)
    s[a] = (s[a] + s[b] + y) & _MASK
    s[d] = _rotr(s[d] ^ s[a], 8)
    s[c] = (s[c] + s[d]) & _MASK
    s[b] = _rotr(s[b] ^ s[c], 7)


def _compress(cv, block: bytes, counter: int, block_len: int, flags: int) -> list[int]:
    m = list(_WORDS.unpack(bytes(block).ljust(64, b"\0")))
    s = [*cv, *_IV[:4], counter & _MASK, (counter >> 32) & _MASK, block_len, flags]
    for _ in range(7):
        for (a, b, c, d), x, y in zip(_COLUMNS_AND_DIAGONALS, m[0::2], m[1::2]):
            _g(s, a, b, c, d, x, y)
        m = [m[i] for i in _PERMUTATION]
    low, high = s[:8], s[8:]
    return [x ^ y for x, y in zip(low, high)] + [x ^ y for x, y in zip(high, cv)]


def _node(data: memoryview, chunk_offset: int) -> tuple:
    """Return the compression inputs of the node covering ``data``."""
    if len(data) <= _CHUNK_LEN:
        blocks = [data[i : i + 64] for i in range(0, len(data), 64)] or [b""]
        cv, flags = _IV, _CHUNK_START
        for block in blocks[:-1]:
            cv = _compress(cv, block, chunk_offset, 64, flags)[:8]
            flags = 0
        return cv, bytes(blocks[-1]), chunk_offset, len(blocks[-1]), flags | _CHUNK_END
    chunks = -(-len(data) // _CHUNK_LEN)
    left_chunks = 1 << ((chunks - 1).bit_length() - 1)
    split = left_chunks * _CHUNK_LEN
    left = _compress(*_node(data[:split], chunk_offset))[:8]
    right = _compress(*_node(data[split:], chunk_offset + left_chunks))[:8]
    return _IV, _WORDS.pack(*left, *right), 0, 64, _PARENT


def blake3(data: bytes, length: int = 32) -> bytes:
    """Return the BLAKE3 hash of ``data`` with ``length`` output bytes."""
    if length < 0:
        raise ValueError("output length must not be negative")
    cv, block, counter, block_len, flags = _node(memoryview(bytes(data)), 0)
    out = b"".join(
        _WORDS.pack(*_compress(cv, block, index, block_len, flags | _ROOT))
        for index in range(-(-length // 64))
    )
    return out[:length]


def compute128(data: bytes) -> bytes:
    """Return the 16-byte checksum of ``data`` (truncated BLAKE3)."""
    return blake3(data, 16)


def equal(a: bytes, b: bytes) -> bool:
    """Compare two checksums in constant time."""
    return hmac.compare_digest(bytes(a), bytes(b))


def to_uint64_pair(s: bytes) -> tuple[int, int]:
    """Split a 16-byte checksum into big-endian (high, low) 64-bit integers."""
    if len(s) != 16:
        raise ValueError("checksum must be 16 bytes")
    return int.from_bytes(s[:8], "big"), int.from_bytes(s[8:], "big")


def from_uint64_pair(hi: int, lo: int) -> bytes:
    """Join two 64-bit integers into a 16-byte big-endian checksum."""
    return hi.to_bytes(8, "big") + lo.to_bytes(8, "big")
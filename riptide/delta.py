"""Rolling weak checksums and block-based delta encoding."""

from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass, field

from .checksum import blake3

_MOD_ADLER = 65521
_MASK32 = 0xFFFFFFFF


def _weak_parts(data: bytes) -> tuple[int, int]:
    a = (sum(data) & _MASK32) % _MOD_ADLER
    b = (sum(itertools.accumulate(data)) & _MASK32) % _MOD_ADLER
    return a, b


def weak_checksum(data: bytes) -> int:
    """Return the 32-bit Adler-style checksum of ``data``."""
    a, b = _weak_parts(bytes(data))
    return (b << 16) | a


def strong256(data: bytes) -> bytes:
    """Return the 32-byte BLAKE3 digest of ``data``."""
    return blake3(data, 32)


class Rolling:
    """Adler-style checksum over a sliding window of fixed size."""

    def __init__(self, window: int) -> None:
        self._n = max(window, 1)
        self._window = bytearray(self._n)
        self._cursor = 0
        self._a = 0
        self._b = 0
        self._ready = False

    def init(self, data: bytes) -> None:
        """Load the first window; ``data`` must be exactly the window size."""
        if len(data) != self._n:
            raise ValueError("init size mismatch")
        self._a, self._b = _weak_parts(bytes(data))
        self._window[:] = data
        self._cursor = 0
        self._ready = True

    def roll(self, next_byte: int) -> int:
        """Slide the window by one byte and return the new checksum."""
        if not self._ready:
            raise RuntimeError("not initialized")
        old = self._window[self._cursor]
        self._window[self._cursor] = next_byte
        self._cursor = (self._cursor + 1) % self._n
        a = (self._a + next_byte + _MOD_ADLER - old) % _MOD_ADLER
        b = (self._b + a + _MOD_ADLER - ((self._n * old) & _MASK32) % _MOD_ADLER) % _MOD_ADLER
        self._a, self._b = a, b
        return self.sum()

    def sum(self) -> int:
        """Return the checksum of the current window."""
        return (self._b << 16) | self._a


@dataclass(frozen=True)
class BlockSig:
    """Signature of one basis block."""

    weak: int
    strong: bytes
    offset: int
    length: int


@dataclass
class FileSig:
    """Block signatures of a basis file, keyed by (weak, strong)."""

    block_size: int
    blocks: dict[tuple[int, bytes], BlockSig] = field(default_factory=dict)


def _blocks(data: bytes, block_size: int):
    for off in range(0, len(data), block_size):
        yield off, data[off : off + block_size]


def compute_file_sig(data: bytes, block_size: int) -> FileSig:
    """Compute block signatures of ``data``."""
    block_size = max(block_size, 1)
    sig = FileSig(block_size=block_size)
    for off, block in _blocks(bytes(data), block_size):
        weak = weak_checksum(block)
        strong = strong256(block)
        sig.blocks[(weak, strong)] = BlockSig(weak, strong, off, len(block))
    return sig


class Op(enum.IntEnum):
    COPY = 1
    LITERAL = 2


@dataclass(frozen=True)
class DeltaInstruction:
    """Copy a range of the basis or insert literal bytes."""

    op: Op
    src_off: int = 0
    length: int = 0
    data: bytes = b""


def compute_delta(sig: FileSig, new_data: bytes) -> list[DeltaInstruction]:
    """Describe ``new_data`` as copies from the signed basis and literals."""
    block_size = max(sig.block_size, 1)
    out = []
    for _, block in _blocks(bytes(new_data), block_size):
        match = sig.blocks.get((weak_checksum(block), strong256(block)))
        if match is not None:
            out.append(DeltaInstruction(Op.COPY, src_off=match.offset, length=match.length))
        else:
            out.append(DeltaInstruction(Op.LITERAL, length=len(block), data=block))
    return out


def apply_delta(basis: bytes, delta: list[DeltaInstruction]) -> bytes:
    """Rebuild data from ``basis`` and a delta; copy ranges are clamped to the basis."""
    out = bytearray()
    for ins in delta:
        if ins.op == Op.COPY:
            end = min(ins.src_off + ins.length, len(basis))
            start = min(max(ins.src_off, 0), end)
            out += basis[start:end]
        elif ins.op == Op.LITERAL:
            out += ins.data
    return bytes(out)
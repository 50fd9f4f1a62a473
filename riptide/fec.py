"""Reed-Solomon erasure coding over GF(2^8) and parity level selection."""

from __future__ import annotations

from collections.abc import Sequence
from functools import reduce
from operator import xor

_EXP = [0] * 510
_LOG = [0] * 256
_value = 1
for _power in range(255):
    _EXP[_power] = _EXP[_power + 255] = _value
    _LOG[_value] = _power
    _value <<= 1
    if _value & 0x100:
        _value ^= 0x11D
del _value, _power


def _gf_mul(a: int, b: int) -> int:
    return _EXP[_LOG[a] + _LOG[b]] if a and b else 0


def _gf_exp(a: int, n: int) -> int:
    if n == 0:
        return 1
    return _EXP[(_LOG[a] * n) % 255] if a else 0


_MUL_TABLES = [bytes(_gf_mul(c, v) for v in range(256)) for c in range(256)]


def _mat_mul(a: list[list[int]], b: list[list[int]]) -> list[list[int]]:
    columns = list(zip(*b))
    return [[reduce(xor, map(_gf_mul, row, col), 0) for col in columns] for row in a]


def _invert(matrix: list[list[int]]) -> list[list[int]]:
    n = len(matrix)
    work = [list(row) + [int(i == j) for j in range(n)] for i, row in enumerate(matrix)]
    for col in range(n):
        pivot = next((r for r in range(col, n) if work[r][col]), None)
        if pivot is None:
            raise ValueError("matrix is singular")
        work[col], work[pivot] = work[pivot], work[col]
        scale = _EXP[255 - _LOG[work[col][col]]]
        work[col] = [_gf_mul(scale, v) for v in work[col]]
        for r, row in enumerate(work):
            if r != col and row[col]:
                work[r] = [v ^ _gf_mul(row[col], p) for v, p in zip(row, work[col])]
    return [row[n:] for row in work]


def _combine(coefficients: Sequence[int], shards: Sequence[bytes], size: int) -> bytes:
    acc = 0
    for coefficient, shard in zip(coefficients, shards):
        if coefficient:
            acc ^= int.from_bytes(shard.translate(_MUL_TABLES[coefficient]), "big")
    return acc.to_bytes(size, "big")


class Codec:
    """Systematic Reed-Solomon codec with a fixed data/parity shard split."""

    def __init__(self, data_shards: int, parity_shards: int) -> None:
        if data_shards <= 0 or parity_shards <= 0:
            raise ValueError("invalid shard counts")
        if data_shards + parity_shards > 256:
            raise ValueError("at most 256 shards are supported")
        self.data_shards = data_shards
        self.parity_shards = parity_shards
        total = data_shards + parity_shards
        vandermonde = [[_gf_exp(r, c) for c in range(data_shards)] for r in range(total)]
        self._matrix = _mat_mul(vandermonde, _invert(vandermonde[:data_shards]))

    @property
    def total_shards(self) -> int:
        return self.data_shards + self.parity_shards

    def _parity(self, data: Sequence[bytes], size: int) -> list[bytes]:
        return [_combine(row, data, size) for row in self._matrix[self.data_shards :]]

    def build_shards(self, data: Sequence[bytes]) -> list[bytes]:
        """Return copies of the data shards followed by the parity shards."""
        if len(data) != self.data_shards:
            raise ValueError("wrong number of data shards")
        blocks = [bytes(d) for d in data]
        size = len(blocks[0])
        if any(len(b) != size for b in blocks):
            raise ValueError("unequal shard sizes")
        if size == 0:
            raise ValueError("shards contain no data")
        return blocks + self._parity(blocks, size)

    def reconstruct(self, shards: Sequence[bytes | None]) -> list[bytes]:
        """Return the full shard set, rebuilding missing (None or empty) shards."""
        if len(shards) != self.total_shards:
            raise ValueError("wrong total shard count")
        current = [bytes(s) if s else None for s in shards]
        present = [i for i, s in enumerate(current) if s is not None]
        if len(present) < self.data_shards:
            raise ValueError("too few shards")
        size = len(current[present[0]])
        if any(len(current[i]) != size for i in present):
            raise ValueError("shard sizes do not match")
        rows = present[: self.data_shards]
        decode = _invert([self._matrix[i] for i in rows])
        sources = [current[i] for i in rows]
        data = [
            shard if shard is not None else _combine(coefficients, sources, size)
            for coefficients, shard in zip(decode, current[: self.data_shards])
        ]
        parity = [
            shard if shard is not None else rebuilt
            for shard, rebuilt in zip(current[self.data_shards :], self._parity(data, size))
        ]
        result = data + parity
        if not self.verify(result):
            raise ValueError("verification failed")
        return result

    def verify(self, shards: Sequence[bytes]) -> bool:
        """Return whether the parity shards match the data shards."""
        if len(shards) != self.total_shards:
            raise ValueError("wrong total shard count")
        if not all(shards):
            raise ValueError("too few shards")
        size = len(shards[0])
        if any(len(s) != size for s in shards):
            raise ValueError("shard sizes do not match")
        data = [bytes(s) for s in shards[: self.data_shards]]
        parity = [bytes(s) for s in shards[self.data_shards :]]
        return self._parity(data, size) == parity


_PARITY_LEVELS = ((0.005, 1), (0.02, 2), (0.05, 3), (0.10, 4))


def select_parity(loss_rate: float, max_parity: int) -> int:
    """Choose a parity shard count for the observed loss rate, capped at ``max_parity``."""
    if max_parity <= 0:
        return 0
    for threshold, level in _PARITY_LEVELS:
        if loss_rate <= threshold:
            return min(level, max_parity)
    return max_parity
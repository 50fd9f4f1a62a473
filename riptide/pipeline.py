"""Chunk descriptors and composable per-chunk transforms."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
from typing import Optional, Protocol, TypeVar, runtime_checkable

import lz4.frame

from .checksum import compute128, equal
from .cryptoutil import AEAD
from .fec import Codec

_NONCE_LEN = 12
_ZERO_SUM = bytes(16)

T = TypeVar("T")


@dataclass(frozen=True)
class Descriptor:
    """One chunk of a transfer: where it sits, its bytes and its checksum."""

    chunk_id: int = 0
    offset: int = 0
    data: bytes = b""
    checksum: bytes = _ZERO_SUM


Transform = Callable[[Descriptor], Descriptor]


@runtime_checkable
class Queue(Protocol[T]):
    """A bounded FIFO of items."""

    def enqueue(self, value: T) -> bool: ...

    def dequeue(self) -> T: ...

    def __len__(self) -> int: ...

    @property
    def capacity(self) -> int: ...


def compose(*transforms: Optional[Transform]) -> Transform:
    """Chain transforms left to right into one transform."""

    def composed(descriptor: Descriptor) -> Descriptor:
        current = descriptor
        for transform in transforms:
            if transform is None:
                raise ValueError("nil transform")
            current = transform(current)
        return current

    return composed


def compute_checksum() -> Transform:
    """Return a transform that stores the checksum of the chunk data."""

    def transform(descriptor: Descriptor) -> Descriptor:
        return replace(descriptor, checksum=compute128(descriptor.data))

    return transform


def chunk(data: bytes, chunk_size: int) -> list[Descriptor]:
    """Split ``data`` into descriptors of at most ``chunk_size`` bytes."""
    chunk_size = max(chunk_size, 1)
    source = bytes(data)
    return [
        Descriptor(offset=off, data=source[off : off + chunk_size])
        for off in range(0, len(source), chunk_size)
    ]


def apply_transforms(
    descriptors: Iterable[Descriptor], *transforms: Transform
) -> list[Descriptor]:
    """Run every descriptor through the transforms in order."""
    pipeline = compose(*transforms)
    return [pipeline(descriptor) for descriptor in descriptors]


def compress_lz4() -> Transform:
    """Return a transform that compresses chunk data into an LZ4 frame."""

    def transform(descriptor: Descriptor) -> Descriptor:
        return replace(descriptor, data=lz4.frame.compress(descriptor.data))

    return transform


def decompress_lz4() -> Transform:
    """Return a transform that decompresses an LZ4 frame."""

    def transform(descriptor: Descriptor) -> Descriptor:
        try:
            data = lz4.frame.decompress(descriptor.data)
        except RuntimeError as exc:
            raise ValueError("invalid lz4 frame") from exc
        return replace(descriptor, data=data)

    return transform


@dataclass
class Encryptor:
    """An AEAD together with the associated data bound to each chunk."""

    aead: Optional[AEAD]
    aad: bytes = b""


def _missing_encryptor(descriptor: Descriptor) -> Descriptor:
    raise ValueError("nil encryptor")


def encrypt(encryptor: Optional[Encryptor]) -> Transform:
    """Return a transform that replaces data with nonce || ciphertext."""
    if encryptor is None or encryptor.aead is None:
        return _missing_encryptor
    aead, aad = encryptor.aead, encryptor.aad

    def transform(descriptor: Descriptor) -> Descriptor:
        ciphertext, nonce = aead.seal(descriptor.data, aad)
        return replace(descriptor, data=nonce + ciphertext)

    return transform


def decrypt(encryptor: Optional[Encryptor]) -> Transform:
    """Return a transform that opens nonce || ciphertext chunk data."""
    if encryptor is None or encryptor.aead is None:
        return _missing_encryptor
    aead, aad = encryptor.aead, encryptor.aad

    def transform(descriptor: Descriptor) -> Descriptor:
        data = descriptor.data
        if len(data) < _NONCE_LEN:
            raise ValueError("ciphertext too short")
        plaintext = aead.open(data[_NONCE_LEN:], aad, data[:_NONCE_LEN])
        return replace(descriptor, data=plaintext)

    return transform


def verify_checksum() -> Transform:
    """Return a transform that raises ValueError when the checksum does not match."""

    def transform(descriptor: Descriptor) -> Descriptor:
        if not equal(compute128(descriptor.data), descriptor.checksum):
            raise ValueError("checksum mismatch")
        return descriptor

    return transform


def fec_group_encode(
    descriptors: Sequence[Descriptor], data_shards: int, parity_shards: int
) -> list[Descriptor]:
    """Append parity descriptors for a group of ``data_shards`` descriptors.

    Shorter chunks are zero-padded to the longest one for encoding only.
    """
    if data_shards <= 0 or parity_shards <= 0:
        raise ValueError("invalid shard counts")
    if len(descriptors) != data_shards:
        raise ValueError("descriptor count must equal dataShards")
    size = max(len(d.data) for d in descriptors)
    padded = [d.data.ljust(size, b"\0") for d in descriptors]
    shards = Codec(data_shards, parity_shards).build_shards(padded)
    base_offset = descriptors[0].offset
    parity = [Descriptor(offset=base_offset, data=shard) for shard in shards[data_shards:]]
    return list(descriptors) + parity


def fec_group_reconstruct(
    shards: Sequence[Descriptor],
    data_shards: int,
    parity_shards: int,
    lost_indices: Iterable[int],
) -> list[Descriptor]:
    """Rebuild the data of the shards at ``lost_indices`` from the rest."""
    if len(shards) != data_shards + parity_shards:
        raise ValueError("wrong shard count")
    blocks: list[Optional[bytes]] = [d.data for d in shards]
    for idx in lost_indices:
        if not 0 <= idx < len(blocks):
            raise ValueError("lost index out of range")
        blocks[idx] = None
    rebuilt = Codec(data_shards, parity_shards).reconstruct(blocks)
    return [replace(d, data=data) for d, data in zip(shards, rebuilt)]
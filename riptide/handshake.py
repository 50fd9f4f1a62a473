"""Handshake messages and transcript hashing."""

from __future__ import annotations

import hashlib
import os
import struct
from dataclasses import dataclass

_HELLO = struct.Struct(">BH16s")
_U16 = struct.Struct(">H")


def _length_prefixed(data: bytes) -> bytes:
    if len(data) > 0xFFFF:
        raise ValueError("field longer than 65535 bytes")
    return _U16.pack(len(data)) + bytes(data)


@dataclass(frozen=True)
class Hello:
    """Opening message carrying version, capabilities and a random nonce."""

    version: int
    caps: int
    nonce: bytes

    @classmethod
    def new(cls, version: int, caps: int) -> Hello:
        return cls(version, caps, os.urandom(16))

    def encode(self) -> bytes:
        return _HELLO.pack(self.version, self.caps, self.nonce)

    @classmethod
    def decode(cls, data: bytes) -> Hello:
        if len(data) < _HELLO.size:
            raise ValueError("short hello")
        return cls(*_HELLO.unpack_from(data))


@dataclass(frozen=True)
class KX:
    """Key exchange message carrying a public key."""

    public: bytes

    def encode(self) -> bytes:
        return _length_prefixed(self.public)

    @classmethod
    def decode(cls, data: bytes) -> KX:
        if len(data) < 2:
            raise ValueError("short kx")
        (length,) = _U16.unpack_from(data)
        if len(data) < 2 + length:
            raise ValueError("short kx body")
        return cls(bytes(data[2 : 2 + length]))


@dataclass(frozen=True)
class Auth:
    """Authentication message with an Ed25519 public key and signature."""

    ed25519_pub: bytes
    signature: bytes

    def encode(self) -> bytes:
        return _length_prefixed(self.ed25519_pub) + _length_prefixed(self.signature)

    @classmethod
    def decode(cls, data: bytes) -> Auth:
        if len(data) < 2:
            raise ValueError("short auth")
        (lp,) = _U16.unpack_from(data)
        if len(data) < 2 + lp + 2:
            raise ValueError("short auth pub")
        off = 2 + lp
        (ls,) = _U16.unpack_from(data, off)
        if len(data) < off + 2 + ls:
            raise ValueError("short auth sig")
        return cls(bytes(data[2:off]), bytes(data[off + 2 : off + 2 + ls]))


@dataclass(frozen=True)
class Session:
    """Session parameters agreed at the end of the handshake."""

    mtu: int

    def encode(self) -> bytes:
        return _U16.pack(self.mtu)

    @classmethod
    def decode(cls, data: bytes) -> Session:
        if len(data) < 2:
            raise ValueError("short session")
        return cls(_U16.unpack_from(data)[0])


def transcript(*parts: bytes) -> bytes:
    """Return the SHA-256 digest of the concatenated handshake messages."""
    h = hashlib.sha256()
    for part in parts:
        h.update(part)
    return h.digest()
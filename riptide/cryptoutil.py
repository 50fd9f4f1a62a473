"""AEAD sealing, key agreement, session key derivation and signatures."""

from __future__ import annotations

import itertools
import os
from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature, InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

_TAG_LEN = 16


def overhead() -> int:
    """Return the authentication tag length added by sealing."""
    return _TAG_LEN


class AEAD:
    """ChaCha20-Poly1305 with nonces made of a random prefix and a counter."""

    def __init__(self, key: bytes) -> None:
        self._aead = ChaCha20Poly1305(bytes(key))
        self._prefix = os.urandom(4)
        self._counter = itertools.count(1)

    def nonce(self) -> bytes:
        """Return the next 12-byte nonce."""
        value = next(self._counter) & 0xFFFFFFFFFFFFFFFF
        return self._prefix + value.to_bytes(8, "big")

    def seal(self, plaintext: bytes, aad: bytes) -> tuple[bytes, bytes]:
        """Encrypt ``plaintext``; return the ciphertext and the nonce used."""
        nonce = self.nonce()
        return self._aead.encrypt(nonce, bytes(plaintext), bytes(aad)), nonce

    def open(self, ciphertext: bytes, aad: bytes, nonce: bytes) -> bytes:
        """Decrypt and authenticate ``ciphertext``; raise ValueError on failure."""
        if len(ciphertext) < _TAG_LEN:
            raise ValueError("ciphertext too short")
        try:
            return self._aead.decrypt(bytes(nonce), bytes(ciphertext), bytes(aad))
        except InvalidTag as exc:
            raise ValueError("message authentication failed") from exc


@dataclass(frozen=True)
class SessionKeys:
    """Directional session keys."""

    tx: bytes
    rx: bytes


def generate_ed25519():
    """Generate an Ed25519 identity key pair as (public, private)."""
    private_key = Ed25519PrivateKey.generate()
    return private_key.public_key(), private_key


def generate_x25519():
    """Generate an ephemeral X25519 key pair as (private, public)."""
    private_key = X25519PrivateKey.generate()
    return private_key, private_key.public_key()


def shared_secret(private_key, public_key) -> bytes:
    """Compute the X25519 shared secret."""
    return private_key.exchange(public_key)


def derive_session(shared: bytes, salt: bytes, initiator: bool) -> SessionKeys:
    """Derive transmit/receive keys; the two sides get mirrored pairs."""
    k1, k2 = (
        HKDF(hashes.SHA256(), 32, bytes(salt) or None, info).derive(bytes(shared))
        for info in (b"riptide/session/k1", b"riptide/session/k2")
    )
    return SessionKeys(tx=k1, rx=k2) if initiator else SessionKeys(tx=k2, rx=k1)


def sign(private_key, message: bytes) -> bytes:
    """Sign ``message`` with an Ed25519 private key."""
    return private_key.sign(bytes(message))


def verify(public_key, message: bytes, signature: bytes) -> bool:
    """Return whether ``signature`` is valid for ``message``."""
    try:
        public_key.verify(bytes(signature), bytes(message))
    except InvalidSignature:
        return False
    return True
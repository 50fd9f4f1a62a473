"""Wire packet header, payload codecs and sealed data frames."""

from __future__ import annotations

import enum
import struct
import zlib
from dataclasses import dataclass

from .cryptoutil import AEAD

VERSION = 1
HEADER_LEN = 32
NONCE_LEN = 12
_SUM_LEN = 16
_ZERO_SUM = bytes(_SUM_LEN)

_HEADER_BODY = struct.Struct(">BBHQQQ")
_CRC = struct.Struct(">I")
_ACK = struct.Struct(">Q16s")
_NAK = struct.Struct(">Q16sH")
_DATA_HEAD = struct.Struct(">QQ16s")
_SEQ = struct.Struct(">Q")
_CONTROL = struct.Struct(">IIQHH")
_PARITY_HEAD = struct.Struct(">QHH")


class PacketType(enum.IntEnum):
    HELLO = 1
    KX = 2
    AUTH = 3
    SESSION = 4
    DATA = 5
    ACK = 6
    ACK_ACK = 7
    NAK = 8
    CONTROL = 9
    FEC_PARITY = 10
    HEARTBEAT = 11
    CLOSE = 12


def _packet_type(value: int) -> PacketType | int:
    try:
        return PacketType(value)
    except ValueError:
        return value


def _check_sum(value: bytes) -> None:
    if len(value) != _SUM_LEN:
        raise ValueError("checksum must be 16 bytes")


def _require(data: bytes, size: int, what: str) -> None:
    if len(data) < size:
        raise ValueError(f"short {what}")


@dataclass
class Header:
    """Fixed 32-byte packet header protected by a CRC-32."""

    version: int = VERSION
    type: PacketType | int = PacketType.DATA
    flags: int = 0
    seq: int = 0
    total: int = 0
    timestamp: int = 0
    checksum: int = 0

    def encode(self) -> bytes:
        """Serialize the header; the computed CRC is stored in ``checksum``."""
        body = _HEADER_BODY.pack(
            self.version, int(self.type), self.flags, self.seq, self.total, self.timestamp
        )
        self.checksum = zlib.crc32(body)
        return body + _CRC.pack(self.checksum)

    @classmethod
    def decode(cls, data: bytes) -> Header:
        _require(data, HEADER_LEN, "header")
        body = bytes(data[: _HEADER_BODY.size])
        version, ptype, flags, seq, total, timestamp = _HEADER_BODY.unpack(body)
        (got,) = _CRC.unpack_from(data, _HEADER_BODY.size)
        if got != zlib.crc32(body):
            raise ValueError("bad header checksum")
        return cls(version, _packet_type(ptype), flags, seq, total, timestamp, got)


@dataclass(frozen=True)
class Ack:
    seq: int
    checksum: bytes = _ZERO_SUM

    def __post_init__(self) -> None:
        _check_sum(self.checksum)

    def encode(self) -> bytes:
        return _ACK.pack(self.seq, self.checksum)

    @classmethod
    def decode(cls, data: bytes) -> Ack:
        _require(data, _ACK.size, "ack")
        return cls(*_ACK.unpack_from(data))


@dataclass(frozen=True)
class Nak:
    seq: int
    checksum: bytes = _ZERO_SUM
    code: int = 0

    def __post_init__(self) -> None:
        _check_sum(self.checksum)

    def encode(self) -> bytes:
        return _NAK.pack(self.seq, self.checksum, self.code)

    @classmethod
    def decode(cls, data: bytes) -> Nak:
        _require(data, _NAK.size, "nak")
        return cls(*_NAK.unpack_from(data))


@dataclass(frozen=True)
class DataPayload:
    chunk_id: int
    offset: int
    checksum: bytes = _ZERO_SUM
    data: bytes = b""

    def __post_init__(self) -> None:
        _check_sum(self.checksum)

    def encode(self) -> bytes:
        return _DATA_HEAD.pack(self.chunk_id, self.offset, self.checksum) + bytes(self.data)

    @classmethod
    def decode(cls, data: bytes) -> DataPayload:
        _require(data, _DATA_HEAD.size, "data")
        chunk_id, offset, checksum = _DATA_HEAD.unpack_from(data)
        return cls(chunk_id, offset, checksum, bytes(data[_DATA_HEAD.size :]))


@dataclass(frozen=True)
class HeartbeatPayload:
    seq: int

    def encode(self) -> bytes:
        return _SEQ.pack(self.seq)

    @classmethod
    def decode(cls, data: bytes) -> HeartbeatPayload:
        _require(data, _SEQ.size, "heartbeat")
        return cls(*_SEQ.unpack_from(data))


@dataclass(frozen=True)
class AckAck:
    seq: int

    def encode(self) -> bytes:
        return _SEQ.pack(self.seq)

    @classmethod
    def decode(cls, data: bytes) -> AckAck:
        _require(data, _SEQ.size, "ack_ack")
        return cls(*_SEQ.unpack_from(data))


@dataclass(frozen=True)
class ControlPayload:
    window_size: int = 0
    pacing_rate: int = 0
    rtt: int = 0
    loss_rate: int = 0
    mtu_probe: int = 0

    def encode(self) -> bytes:
        return _CONTROL.pack(
            self.window_size, self.pacing_rate, self.rtt, self.loss_rate, self.mtu_probe
        )

    @classmethod
    def decode(cls, data: bytes) -> ControlPayload:
        _require(data, _CONTROL.size, "control")
        return cls(*_CONTROL.unpack_from(data))


@dataclass(frozen=True)
class FECParityPayload:
    block_id: int
    index: int
    total: int
    parity: bytes = b""

    def encode(self) -> bytes:
        return _PARITY_HEAD.pack(self.block_id, self.index, self.total) + bytes(self.parity)

    @classmethod
    def decode(cls, data: bytes) -> FECParityPayload:
        _require(data, _PARITY_HEAD.size, "fec_parity")
        block_id, index, total = _PARITY_HEAD.unpack_from(data)
        return cls(block_id, index, total, bytes(data[_PARITY_HEAD.size :]))


def encode_data_packet(header: Header, payload: DataPayload, aead: AEAD, aad: bytes) -> bytes:
    """Build header || nonce || sealed payload."""
    header_bytes = header.encode()
    ciphertext, nonce = aead.seal(payload.encode(), aad)
    return header_bytes + nonce + ciphertext


def decode_data_packet(data: bytes, aead: AEAD, aad: bytes) -> tuple[Header, DataPayload]:
    """Parse and open a sealed data packet; raise ValueError on any failure."""
    _require(data, HEADER_LEN + NONCE_LEN, "packet")
    header = Header.decode(data[:HEADER_LEN])
    nonce = bytes(data[HEADER_LEN : HEADER_LEN + NONCE_LEN])
    plaintext = aead.open(bytes(data[HEADER_LEN + NONCE_LEN :]), aad, nonce)
    return header, DataPayload.decode(plaintext)
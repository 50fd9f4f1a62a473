import pytest

from riptide.checksum import compute128
from riptide.cryptoutil import AEAD
from riptide.proto import (
    HEADER_LEN,
    VERSION,
    Ack,
    AckAck,
    ControlPayload,
    DataPayload,
    FECParityPayload,
    Header,
    HeartbeatPayload,
    Nak,
    PacketType,
    decode_data_packet,
    encode_data_packet,
)


def _header():
    return Header(
        version=VERSION,
        type=PacketType.DATA,
        flags=3,
        seq=123,
        total=456,
        timestamp=789,
    )


def test_header_encode_decode():
    h = _header()
    enc = h.encode()
    assert len(enc) == HEADER_LEN
    dec = Header.decode(enc)
    assert dec == h
    assert dec.checksum == int.from_bytes(enc[28:32], "big")
    assert dec.checksum != 0
    assert dec.type is PacketType.DATA


def test_header_corruption_detected():
    enc = bytearray(_header().encode())
    enc[0] ^= 0xFF
    with pytest.raises(ValueError, match="checksum"):
        Header.decode(bytes(enc))


def test_header_short():
    with pytest.raises(ValueError, match="short header"):
        Header.decode(bytes(31))


def test_header_unknown_type_kept_as_int():
    h = Header(type=200)
    assert Header.decode(h.encode()).type == 200


@pytest.mark.parametrize(
    "packet_type, wire_value",
    [(PacketType.HELLO, 1), (PacketType.DATA, 5), (PacketType.CLOSE, 12)],
)
def test_packet_type_wire_values(packet_type, wire_value):
    assert Header(type=packet_type).encode()[1] == wire_value


def test_ack_encode_decode():
    s = compute128(b"x")
    a = Ack(seq=7, checksum=s)
    enc = a.encode()
    assert len(enc) == 24
    assert Ack.decode(enc) == a


def test_nak_encode_decode():
    s = compute128(b"y")
    n = Nak(seq=9, checksum=s, code=2)
    enc = n.encode()
    assert len(enc) == 26
    out = Nak.decode(enc)
    assert out.seq == 9 and out.code == 2 and out.checksum == s


def test_data_payload_encode_decode():
    data = b"hello"
    d = DataPayload(chunk_id=11, offset=22, checksum=compute128(data), data=data)
    enc = d.encode()
    assert len(enc) == 32 + len(data)
    assert DataPayload.decode(enc) == d


def test_data_payload_empty_data():
    d = DataPayload(chunk_id=1, offset=2)
    assert DataPayload.decode(d.encode()).data == b""


def test_heartbeat_encode_decode():
    h = HeartbeatPayload(seq=99)
    assert HeartbeatPayload.decode(h.encode()).seq == 99


def test_ack_ack_encode_decode():
    a = AckAck(seq=12345)
    assert AckAck.decode(a.encode()).seq == 12345


def test_control_payload_encode_decode():
    c = ControlPayload(window_size=1024, pacing_rate=2048, rtt=333, loss_rate=7, mtu_probe=1400)
    enc = c.encode()
    assert len(enc) == 20
    assert ControlPayload.decode(enc) == c


def test_fec_parity_payload_encode_decode():
    p = FECParityPayload(block_id=55, index=2, total=8, parity=bytes([1, 2, 3, 4, 5]))
    enc = p.encode()
    assert len(enc) == 17
    assert FECParityPayload.decode(enc) == p


def test_heartbeat_layout_is_big_endian():
    assert HeartbeatPayload(seq=1).encode() == b"\x00" * 7 + b"\x01"


@pytest.mark.parametrize(
    "cls, size, message",
    [
        (Ack, 23, "short ack"),
        (Nak, 25, "short nak"),
        (DataPayload, 31, "short data"),
        (HeartbeatPayload, 7, "short heartbeat"),
        (AckAck, 7, "short ack_ack"),
        (ControlPayload, 19, "short control"),
        (FECParityPayload, 11, "short fec_parity"),
    ],
)
def test_short_payloads_rejected(cls, size, message):
    with pytest.raises(ValueError, match=message):
        cls.decode(bytes(size))


def test_checksum_length_enforced():
    with pytest.raises(ValueError):
        Ack(seq=1, checksum=b"short")


def _aead():
    return AEAD(bytes(range(1, 33)))


def test_data_packet_round_trip():
    aead = _aead()
    data = b"payload bytes"
    payload = DataPayload(chunk_id=3, offset=4096, checksum=compute128(data), data=data)
    packet = encode_data_packet(_header(), payload, aead, b"ctx")
    header, out = decode_data_packet(packet, aead, b"ctx")
    assert out == payload
    assert header.seq == 123 and header.total == 456


def test_data_packet_wrong_aad_fails():
    aead = _aead()
    packet = encode_data_packet(_header(), DataPayload(1, 2, data=b"z"), aead, b"ctx")
    with pytest.raises(ValueError):
        decode_data_packet(packet, aead, b"other")


def test_data_packet_tampered_header_fails():
    aead = _aead()
    packet = bytearray(encode_data_packet(_header(), DataPayload(1, 2, data=b"z"), aead, b"ctx"))
    packet[5] ^= 0x01
    with pytest.raises(ValueError, match="checksum"):
        decode_data_packet(bytes(packet), aead, b"ctx")


def test_data_packet_too_short():
    with pytest.raises(ValueError, match="short packet"):
        decode_data_packet(bytes(HEADER_LEN + 11), _aead(), b"")
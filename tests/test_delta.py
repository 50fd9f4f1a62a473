import pytest

from riptide.delta import (
    Op,
    Rolling,
    apply_delta,
    compute_delta,
    compute_file_sig,
    strong256,
    weak_checksum,
)


def test_rolling_init_and_roll():
    data = b"abcdefg"
    r = Rolling(3)
    r.init(data[:3])
    assert r.sum() == weak_checksum(data[:3])
    assert r.roll(data[3]) == weak_checksum(b"bcd")
    assert r.roll(data[4]) == weak_checksum(b"cde")
    with pytest.raises(RuntimeError):
        Rolling(3).roll(ord("x"))


def test_rolling_long_sequence_matches_recompute():
    data = bytes((i * 37 + 11) % 256 for i in range(200))
    r = Rolling(16)
    r.init(data[:16])
    for i in range(16, len(data)):
        assert r.roll(data[i]) == weak_checksum(data[i - 15 : i + 1])


def test_rolling_init_size_mismatch():
    with pytest.raises(ValueError):
        Rolling(3).init(b"ab")


def test_weak_checksum_empty():
    assert weak_checksum(b"") == 0


def test_strong256():
    assert strong256(b"hello world").hex() == (
        "d74981efa70a0c880b8d8c1985d075dbcbf679b99a5f9914e5aaf96b831a9e24"
    )


def test_delta_identity():
    basis = b"The quick brown fox jumps over the lazy dog."
    sig = compute_file_sig(basis, 8)
    d = compute_delta(sig, basis)
    assert apply_delta(basis, d) == basis
    assert any(ins.op == Op.COPY for ins in d)


def test_delta_modified_block():
    basis = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
    block = 10
    sig = compute_file_sig(basis, block)
    new = bytearray(basis)
    for i in range(20, 30):
        new[i] ^= 0x5A
    new = bytes(new)
    d = compute_delta(sig, new)
    assert apply_delta(basis, d) == new
    ops = {ins.op for ins in d}
    assert ops == {Op.COPY, Op.LITERAL}


def test_delta_trailing_short_block():
    basis = b"1234567890ABCDEFG"
    sig = compute_file_sig(basis, 7)
    assert apply_delta(basis, compute_delta(sig, basis)) == basis


def test_zero_block_size_treated_as_one():
    sig = compute_file_sig(b"abc", 0)
    assert sig.block_size == 1
    assert len(sig.blocks) == 3
import pytest

from riptide.fec import Codec, select_parity

DATA = [b"AAAA", b"BBBB", b"CCCC", b"DDDD"]


def test_build_shards_and_reconstruct():
    codec = Codec(4, 2)
    shards = codec.build_shards(DATA)
    assert len(shards) == codec.data_shards + codec.parity_shards
    damaged = list(shards)
    damaged[1] = None
    rebuilt = codec.reconstruct(damaged)
    assert rebuilt[:4] == DATA
    assert rebuilt == shards


def test_reconstruct_two_losses_including_parity():
    codec = Codec(4, 2)
    shards = codec.build_shards(DATA)
    damaged = list(shards)
    damaged[0] = None
    damaged[5] = b""
    assert codec.reconstruct(damaged) == shards


def test_reconstruct_too_many_losses():
    codec = Codec(4, 2)
    damaged = list(codec.build_shards(DATA))
    damaged[0] = damaged[1] = damaged[2] = None
    with pytest.raises(ValueError):
        codec.reconstruct(damaged)


def test_reconstruct_wrong_count():
    codec = Codec(4, 2)
    with pytest.raises(ValueError):
        codec.reconstruct(codec.build_shards(DATA)[:5])


def test_verify_detects_corruption():
    codec = Codec(4, 2)
    shards = codec.build_shards(DATA)
    assert codec.verify(shards) is True
    corrupted = list(shards)
    corrupted[2] = b"CCCX"
    assert codec.verify(corrupted) is False


def test_build_shards_errors():
    with pytest.raises(ValueError):
        Codec(0, 2)
    with pytest.raises(ValueError):
        Codec(200, 100)
    codec = Codec(2, 1)
    with pytest.raises(ValueError):
        codec.build_shards([b"AA"])
    with pytest.raises(ValueError):
        codec.build_shards([b"AA", b"BBB"])


@pytest.mark.parametrize(
    "loss, max_parity, expected",
    [
        (0.0, 4, 1),
        (0.01, 4, 2),
        (0.03, 4, 3),
        (0.07, 4, 4),
        (0.5, 3, 3),
        (0.0, 0, 0),
        (0.07, 2, 2),
    ],
)
def test_select_parity(loss, max_parity, expected):
    assert select_parity(loss, max_parity) == expected
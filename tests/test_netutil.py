import pytest

from riptide.netutil import (
    IPV4_UDP_OVERHEAD,
    max_data_per_packet,
    udp_payload_budget,
)


@pytest.mark.parametrize("mtu", [0, 1, IPV4_UDP_OVERHEAD])
def test_budget_zero_for_tiny_mtu(mtu):
    assert udp_payload_budget(mtu) == 0


@pytest.mark.parametrize("mtu", [IPV4_UDP_OVERHEAD + 1, 576, 1400, 9000])
def test_budget_plus_overhead_is_mtu(mtu):
    assert udp_payload_budget(mtu) + IPV4_UDP_OVERHEAD == mtu


def test_max_data_pinned():
    assert max_data_per_packet(1400, 32) == 1312


def test_max_data_shrinks_with_header():
    assert max_data_per_packet(1400, 33) == max_data_per_packet(1400, 32) - 1


def test_max_data_grows_with_mtu():
    assert max_data_per_packet(1401, 32) == max_data_per_packet(1400, 32) + 1


@pytest.mark.parametrize("mtu", [0, 28, 60, 88])
def test_max_data_zero_when_overhead_consumes_budget(mtu):
    assert max_data_per_packet(mtu, 32) == 0


def test_max_data_never_exceeds_budget():
    for mtu in (100, 576, 1400, 9000):
        assert 0 <= max_data_per_packet(mtu, 0) < udp_payload_budget(mtu)
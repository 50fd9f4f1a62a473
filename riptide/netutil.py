"""Payload size budgets for UDP datagrams."""

from __future__ import annotations

from .cryptoutil import overhead

IPV4_UDP_OVERHEAD = 20 + 8
NONCE_LEN = 12


def udp_payload_budget(mtu: int) -> int:
    """Return the UDP payload bytes available within ``mtu``."""
    if mtu <= IPV4_UDP_OVERHEAD:
        return 0
    return mtu - IPV4_UDP_OVERHEAD


def max_data_per_packet(mtu: int, header_len: int) -> int:
    """Return the data bytes left after header, nonce and AEAD tag."""
    budget = udp_payload_budget(mtu)
    per_packet = header_len + NONCE_LEN + overhead()
    if budget <= per_packet:
        return 0
    return budget - per_packet
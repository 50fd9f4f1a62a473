"""Building blocks for an encrypted, loss-tolerant UDP file transfer protocol."""

__version__ = "0.1.0"

__all__ = [
    "checksum",
    "cli",
    "congestion",
    "cryptoutil",
    "delta",
    "fec",
    "handshake",
    "netutil",
    "pipeline",
    "proto",
    "reliability",
    "ring",
]
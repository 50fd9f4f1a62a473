# riptide

Building blocks for a fast, encrypted file transfer protocol over UDP.

Each module is usable on its own:

| Module | What it gives you |
| --- | --- |
| `riptide.checksum` | A pure-Python BLAKE3 (`blake3`), 128-bit chunk checksums (`compute128`), constant-time comparison (`equal`) and conversion to and from a pair of 64-bit integers |
| `riptide.cryptoutil` | `AEAD`: ChaCha20-Poly1305 sealing with a random 4-byte prefix plus counter nonce; X25519 key exchange, HKDF-SHA256 `SessionKeys`, Ed25519 signing and verification |
| `riptide.handshake` | Wire encoding of the `Hello`, `KX`, `Auth` and `Session` handshake messages and a SHA-256 `transcript` |
| `riptide.proto` | The 32-byte CRC-32-protected `Header`, the `Ack`, `Nak`, `AckAck`, `HeartbeatPayload`, `ControlPayload`, `DataPayload` and `FECParityPayload` codecs, and sealed data packets |
| `riptide.pipeline` | Chunking of data into `Descriptor`s and composable transforms: checksum, LZ4 frames, encryption, verification, FEC groups |
| `riptide.fec` | Systematic Reed–Solomon erasure coding over GF(2^8) (`Codec`) and loss-driven parity selection |
| `riptide.delta` | A rolling weak checksum, block signatures and block-aligned delta computation and application |
| `riptide.reliability` | Retransmission and acknowledgement trackers with exponential backoff and jitter, SACK range building |
| `riptide.congestion` | A BBR-style bandwidth/RTT model (`BBRState`) and adaptive payload sizing |
| `riptide.netutil` | Payload budgets for a given MTU |
| `riptide.ring` | A bounded power-of-two FIFO `Ring` |
| `riptide.cli` | Parsing and validation of transfer options into a `Config` |

It needs Python 3.10 or later, with `cryptography` and `lz4`.

Decoding and validation failures raise `ValueError` (or a subclass of it).

## Checksums

```python
from riptide import checksum

s = checksum.compute128(b"riptide")
assert checksum.equal(s, checksum.compute128(b"riptide"))

hi, lo = checksum.to_uint64_pair(s)
assert checksum.from_uint64_pair(hi, lo) == s
```

## A sender/receiver pipeline

Split data into chunks, attach checksums, compress, encrypt; on the other side
decrypt, decompress and verify.

```python
import os

from riptide.cryptoutil import AEAD
from riptide.pipeline import (
    Encryptor, apply_transforms, chunk, compress_lz4, compute_checksum,
    decompress_lz4, decrypt, encrypt, verify_checksum,
)

enc = Encryptor(AEAD(os.urandom(32)), b"ctx")

src = bytes(range(256)) * 16
sent = apply_transforms(
    chunk(src, 300), compute_checksum(), compress_lz4(), encrypt(enc)
)
received = apply_transforms(sent, decrypt(enc), decompress_lz4(), verify_checksum())

assert b"".join(d.data for d in sorted(received, key=lambda d: d.offset)) == src
```

`Descriptor` is immutable; each transform returns a new one. A failing
transform raises, and `apply_transforms` stops at the first error. `compose`
chains transforms into one.

`fec_group_encode` appends parity descriptors to a group of chunks (shorter
chunks are zero-padded for encoding), and `fec_group_reconstruct` rebuilds the
chunks at the given lost indices.

## Packets

```python
from riptide.proto import Header, PacketType, DataPayload, encode_data_packet, decode_data_packet

header = Header(type=PacketType.DATA, seq=7, total=10)
raw = Header.decode(header.encode())   # raises ValueError on a bad CRC
```

`encode_data_packet` produces header, nonce and sealed payload;
`decode_data_packet` checks and opens it again with the same `AEAD`.

## Forward error correction

```python
from riptide.fec import Codec, select_parity

codec = Codec(4, 2)
shards = codec.build_shards([b"AAAA", b"BBBB", b"CCCC", b"DDDD"])
shards[1] = None                     # lost in transit
shards = codec.reconstruct(shards)   # returns the full shard list
assert shards[1] == b"BBBB"

select_parity(0.03, 4)               # -> 3 parity shards for 3 % loss
```

## Delta transfer

```python
from riptide.delta import apply_delta, compute_delta, compute_file_sig

basis = b"The quick brown fox jumps over the lazy dog."
sig = compute_file_sig(basis, 8)
new = basis.replace(b"lazy", b"busy")
assert apply_delta(basis, compute_delta(sig, new)) == new
```

Blocks of the new data are matched only at block-aligned offsets; `Rolling`
provides the sliding-window weak checksum separately.

## Reliability

```python
from riptide.reliability import build_sack_ranges

build_sack_ranges([1, 2, 3, 7, 8, 10, 10, 11])
# -> [Range(1, 3), Range(7, 8), Range(10, 11)]
```

`OutboundTracker` and `InboundTracker` record what is owed a retransmission or
an ACK; their `due` methods return the sequence numbers due at a given time.
`ReliabilityState` combines both and adds ACK-ACK scheduling; its `tick`
returns an `Actions` with `retx`, `ack` and `ack_ack` lists. All times here
are integer nanoseconds, such as `time.monotonic_ns()`.

`BBRState` in `riptide.congestion` takes its times in seconds.

## Options

```python
from riptide.cli import parse_args

cfg = parse_args(["-mtu=1200", "-fec=4/20", "-congestion=ledbat", "src", "dest"])
```

Defaults: MTU 1400, FEC `auto`, congestion `bbr`, cipher `chacha20poly1305`,
port 3703, parallelism 1. Invalid values raise `ConfigError`.

## What it does not do

The package opens no sockets and reads or writes no files. There is no
transfer engine tying the pieces together and no command to run: `parse_args`
only turns an argument list into a `Config`.
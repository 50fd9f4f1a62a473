"""Retransmission and acknowledgement scheduling with backoff and jitter.

All times and durations are integer nanoseconds, such as the values
returned by :func:`time.monotonic_ns`.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

_DEFAULT_INITIAL = 100_000_000  # 100 ms
_DEFAULT_MAX_BACKOFF = 30_000_000_000  # 30 s
_JITTER_FRACTION = 0.1


@dataclass
class _Pending:
    checksum: bytes
    next_at: int
    tries: int = 0


class _RetryPolicy:
    """Exponential backoff with proportional random jitter."""

    def __init__(self, initial: int, max_backoff: int, seed: int) -> None:
        self.initial = initial if initial > 0 else _DEFAULT_INITIAL
        self.max_backoff = max_backoff if max_backoff > 0 else _DEFAULT_MAX_BACKOFF
        self._rng = random.Random(seed)

    def _backoff(self, tries: int) -> int:
        return min(self.initial << max(tries - 1, 0), self.max_backoff)

    def _jitter(self, duration: int, fraction: float) -> int:
        if fraction <= 0:
            return duration
        factor = self._rng.random() * 2 - 1
        delta = int(fraction * duration)
        return duration + int(factor * delta)

    def reschedule(self, entry: _Pending, now: int) -> None:
        """Count another attempt and set the entry's next due time."""
        entry.tries += 1
        entry.next_at = now + self._jitter(self._backoff(entry.tries), _JITTER_FRACTION)


def _collect_due(
    entries: dict[int, _Pending], now: int, limit: int, policy: _RetryPolicy
) -> list[int]:
    if limit <= 0:
        limit = len(entries)
    out: list[int] = []
    for seq, entry in entries.items():
        if entry.next_at > now:
            continue
        out.append(seq)
        policy.reschedule(entry, now)
        if len(out) >= limit:
            break
    return out


class OutboundTracker:
    """Tracks sent packets awaiting acknowledgement and schedules retransmits."""

    def __init__(self, initial_rto: int, max_backoff: int, seed: int) -> None:
        self._policy = _RetryPolicy(initial_rto, max_backoff, seed)
        self._entries: dict[int, _Pending] = {}

    def on_send(self, seq: int, checksum: bytes, now: int) -> None:
        """Record a (re)send; a pending schedule is kept if not yet due."""
        entry = self._entries.get(seq)
        if entry is not None:
            entry.checksum = bytes(checksum)
            if now < entry.next_at:
                return
        self._entries[seq] = _Pending(bytes(checksum), now + self._policy.initial)

    def on_ack(self, seq: int) -> bool:
        """Forget an acknowledged packet; return whether it was tracked."""
        return self._entries.pop(seq, None) is not None

    def on_nak(self, seq: int, now: int) -> bool:
        """Make a packet due immediately; return whether it was tracked."""
        entry = self._entries.get(seq)
        if entry is None:
            return False
        entry.next_at = now
        return True

    def due(self, now: int, limit: int) -> list[int]:
        """Return up to ``limit`` sequences due for retransmission (all if ``limit`` <= 0)."""
        return _collect_due(self._entries, now, limit, self._policy)

    def get_sum(self, seq: int) -> Optional[bytes]:
        """Return the checksum recorded for ``seq``, or None if not tracked."""
        entry = self._entries.get(seq)
        return entry.checksum if entry is not None else None


class InboundTracker:
    """Tracks received packets whose acknowledgements await confirmation."""

    def __init__(self, initial_timeout: int, max_backoff: int, seed: int) -> None:
        self._policy = _RetryPolicy(initial_timeout, max_backoff, seed)
        self._pending: dict[int, _Pending] = {}

    def on_data(self, seq: int, checksum: bytes, now: int) -> bool:
        """Record received data; a repeat keeps the first record."""
        if seq not in self._pending:
            self._pending[seq] = _Pending(bytes(checksum), now + self._policy.initial)
        return True

    def on_ack_ack(self, seq: int) -> bool:
        """Stop acknowledging ``seq``; return whether it was pending."""
        return self._pending.pop(seq, None) is not None

    def due(self, now: int, limit: int) -> list[int]:
        """Return up to ``limit`` sequences whose ack is due (all if ``limit`` <= 0)."""
        return _collect_due(self._pending, now, limit, self._policy)

    def get_sum(self, seq: int) -> Optional[bytes]:
        """Return the checksum recorded for ``seq``, or None if not pending."""
        entry = self._pending.get(seq)
        return entry.checksum if entry is not None else None


@dataclass(frozen=True)
class Range:
    """Inclusive range of sequence numbers."""

    start: int
    end: int


def build_sack_ranges(seqs: Iterable[int]) -> list[Range]:
    """Collapse sequence numbers into sorted, merged inclusive ranges."""
    out: list[Range] = []
    start: Optional[int] = None
    end = 0
    for value in sorted(set(seqs)):
        if start is None:
            start = end = value
        elif value == end + 1:
            end = value
        else:
            out.append(Range(start, end))
            start = end = value
    if start is not None:
        out.append(Range(start, end))
    return out


@dataclass
class Actions:
    """What a tick asks the caller to send."""

    retx: list[int] = field(default_factory=list)
    ack: list[int] = field(default_factory=list)
    ack_ack: list[int] = field(default_factory=list)


class ReliabilityState:
    """Combined sender/receiver reliability bookkeeping."""

    def __init__(
        self,
        initial_rto: int,
        max_backoff: int,
        ack_initial_timeout: int,
        ack_max_backoff: int,
        min_ack_interval: int,
        seed: int,
    ) -> None:
        self._outbound = OutboundTracker(initial_rto, max_backoff, seed)
        self._inbound = InboundTracker(ack_initial_timeout, ack_max_backoff, seed + 1)
        self._ack_ack_pending: dict[int, _Pending] = {}
        self._min_ack_interval = min_ack_interval
        self._last_ack: dict[int, int] = {}

    def on_send(self, seq: int, checksum: bytes, now: int) -> None:
        self._outbound.on_send(seq, checksum, now)

    def on_data(self, seq: int, checksum: bytes, now: int) -> None:
        self._inbound.on_data(seq, checksum, now)

    def on_ack(self, seq: int, now: int) -> None:
        """Handle an ack: stop retransmitting and schedule an ack-ack."""
        self._outbound.on_ack(seq)
        if seq not in self._ack_ack_pending:
            self._ack_ack_pending[seq] = _Pending(b"", now)

    def on_ack_ack(self, seq: int) -> None:
        self._inbound.on_ack_ack(seq)

    def on_nak(self, seq: int, now: int) -> None:
        self._outbound.on_nak(seq, now)

    def tick(self, now: int, limit: int) -> Actions:
        """Collect retransmits, acks and ack-acks due at ``now``."""
        actions = Actions(retx=self._outbound.due(now, limit))
        for seq in self._inbound.due(now, limit):
            previous = self._last_ack.get(seq)
            if previous is not None and now - previous < self._min_ack_interval:
                continue
            actions.ack.append(seq)
            self._last_ack[seq] = now
        if limit <= 0:
            limit = len(self._ack_ack_pending)
        policy = self._inbound._policy
        for seq, entry in self._ack_ack_pending.items():
            if entry.next_at > now:
                continue
            actions.ack_ack.append(seq)
            policy.reschedule(entry, now)
            if len(actions.ack_ack) == limit:
                break
        return actions

    def get_outbound_sum(self, seq: int) -> Optional[bytes]:
        return self._outbound.get_sum(seq)

    def get_inbound_sum(self, seq: int) -> Optional[bytes]:
        return self._inbound.get_sum(seq)
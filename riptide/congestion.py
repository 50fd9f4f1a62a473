"""Bandwidth/RTT congestion estimates and adaptive payload sizing."""

from __future__ import annotations

import math

_INITIAL_MIN_RTT = 3600.0


class BBRState:
    """Tracks maximum delivery rate and minimum RTT (times in seconds)."""

    def __init__(self) -> None:
        self.min_rtt = _INITIAL_MIN_RTT
        self.max_bandwidth = 0.0
        self.last_time: float | None = None

    def update(
        self,
        delivered_bytes: int,
        interval: float,
        rtt_sample: float,
        now: float,
    ) -> None:
        """Record a delivery sample taken over ``interval`` seconds."""
        if interval > 0:
            bw = delivered_bytes / interval
            if bw > self.max_bandwidth:
                self.max_bandwidth = bw
        if 0 < rtt_sample < self.min_rtt:
            self.min_rtt = rtt_sample
        self.last_time = now

    def pacing_rate(self) -> float:
        """Return the pacing rate in bytes per second, 0 before any sample."""
        return self.max_bandwidth if self.max_bandwidth > 0 else 0.0

    def congestion_window(self, payload_bytes: int) -> int:
        """Return the window in packets covering the bandwidth-delay product."""
        if self.max_bandwidth <= 0 or self.min_rtt <= 0 or payload_bytes <= 0:
            return 1
        bdp = self.max_bandwidth * self.min_rtt
        return max(1, math.ceil(bdp / payload_bytes))


def adjust_payload(
    current: int,
    minimum: int,
    maximum: int,
    loss_rate: float,
    corruption_rate: float,
) -> int:
    """Step the payload size down on loss or corruption, up when clean."""
    current = min(max(current, minimum), maximum)
    step_down = int(max(1.0, current / 8))
    step_up = int(max(1.0, current / 16))
    if loss_rate >= 0.02 or corruption_rate > 0:
        return max(current - step_down, minimum)
    if loss_rate < 0.005 and corruption_rate == 0:
        return min(current + step_up, maximum)
    return current
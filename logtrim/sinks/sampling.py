"""
Log policies - decide whether a record is logged at all.

Trimming bounds the size of a record; these policies bound the volume
of records on hot paths (rate limiting, random sampling).
"""

import logging
import random
import time
from threading import Lock

from logtrim.shared.config import LogPolicyConfig, PolicyKind
from logtrim.shared.constants import DEFAULT_BURST, DEFAULT_RATE, DEFAULT_SAMPLE_RATIO
from logtrim.shared.interfaces import ILogPolicy

logger = logging.getLogger(__name__)


class AllowAllPolicy(ILogPolicy):
    """Log everything."""

    def allow(self) -> bool:
        return True


class RejectAllPolicy(ILogPolicy):
    """Log nothing."""

    def allow(self) -> bool:
        return False


class RateLimitPolicy(ILogPolicy):
    """
    Token bucket: `rate` records per second with bursts of up to `burst`.

    RateLimitPolicy(10, 1) allows ten records per second, one at a time.
    Non-positive arguments fall back to the defaults.
    """

    def __init__(self, rate: float = DEFAULT_RATE, burst: int = DEFAULT_BURST):
        if rate <= 0 or burst <= 0:
            logger.warning(
                f"Invalid rate limit (rate={rate}, burst={burst}), "
                f"using {DEFAULT_RATE}/s burst {DEFAULT_BURST}"
            )
            rate, burst = DEFAULT_RATE, DEFAULT_BURST
        self._rate = float(rate)
        self._burst = int(burst)
        self._tokens = float(burst)
        self._last = time.monotonic()
        self._lock = Lock()

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def burst(self) -> int:
        return self._burst

    def allow(self) -> bool:
        with self._lock:
            now = time.monotonic()
            elapsed = now - self._last
            self._last = now
            self._tokens = min(float(self._burst), self._tokens + elapsed * self._rate)
            if self._tokens >= 1.0:
                self._tokens -= 1.0
                return True
            return False


class SamplingPolicy(ILogPolicy):
    """Log a random `ratio` share of records."""

    def __init__(self, ratio: float = DEFAULT_SAMPLE_RATIO):
        if ratio <= 0:
            ratio = DEFAULT_SAMPLE_RATIO
        self._ratio = ratio

    @property
    def ratio(self) -> float:
        return self._ratio

    def allow(self) -> bool:
        return random.random() < self._ratio


def policy_from_config(config: LogPolicyConfig) -> ILogPolicy:
    """Build the policy selected by configuration."""
    if config.kind == PolicyKind.REJECT_ALL:
        return RejectAllPolicy()
    if config.kind == PolicyKind.RATE_LIMIT:
        return RateLimitPolicy(config.rate, config.burst)
    if config.kind == PolicyKind.SAMPLING:
        return SamplingPolicy(config.sample_ratio)
    return AllowAllPolicy()

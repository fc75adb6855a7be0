"""
Tests for sinks/sampling.py - log volume policies.
"""

from unittest.mock import patch

import pytest

from logtrim.shared.config import LogPolicyConfig, PolicyKind
from logtrim.sinks.sampling import (
    AllowAllPolicy,
    RateLimitPolicy,
    RejectAllPolicy,
    SamplingPolicy,
    policy_from_config,
)


class TestStaticPolicies:
    def test_allow_all(self):
        assert AllowAllPolicy().allow() is True

    def test_reject_all(self):
        assert RejectAllPolicy().allow() is False


class TestRateLimitPolicy:
    def test_burst_then_blocked(self):
        with patch("logtrim.sinks.sampling.time") as mock_time:
            mock_time.monotonic.return_value = 100.0
            policy = RateLimitPolicy(rate=2, burst=2)
            assert policy.allow() is True
            assert policy.allow() is True
            assert policy.allow() is False

    def test_refills_over_time(self):
        with patch("logtrim.sinks.sampling.time") as mock_time:
            mock_time.monotonic.return_value = 100.0
            policy = RateLimitPolicy(rate=2, burst=1)
            assert policy.allow() is True
            assert policy.allow() is False
            mock_time.monotonic.return_value = 100.5
            assert policy.allow() is True

    def test_refill_capped_at_burst(self):
        with patch("logtrim.sinks.sampling.time") as mock_time:
            mock_time.monotonic.return_value = 0.0
            policy = RateLimitPolicy(rate=10, burst=1)
            mock_time.monotonic.return_value = 60.0
            assert policy.allow() is True
            assert policy.allow() is False

    @pytest.mark.parametrize("rate,burst", [(0, 1), (5, 0), (-1, -1)])
    def test_invalid_falls_back_to_defaults(self, rate, burst):
        policy = RateLimitPolicy(rate=rate, burst=burst)
        assert policy.rate == 10.0
        assert policy.burst == 1


class TestSamplingPolicy:
    def test_allows_below_ratio(self):
        with patch("logtrim.sinks.sampling.random.random", return_value=0.05):
            assert SamplingPolicy(0.1).allow() is True

    def test_rejects_above_ratio(self):
        with patch("logtrim.sinks.sampling.random.random", return_value=0.5):
            assert SamplingPolicy(0.1).allow() is False

    def test_invalid_ratio_falls_back(self):
        assert SamplingPolicy(0).ratio == 0.1

    def test_ratio_roughly_respected(self):
        policy = SamplingPolicy(0.1)
        allowed = sum(policy.allow() for _ in range(100_000))
        assert abs(allowed / 100_000 - 0.1) < 0.01


class TestPolicyFromConfig:
    def test_allow_all(self):
        assert isinstance(policy_from_config(LogPolicyConfig()), AllowAllPolicy)

    def test_reject_all(self):
        cfg = LogPolicyConfig(kind=PolicyKind.REJECT_ALL)
        assert isinstance(policy_from_config(cfg), RejectAllPolicy)

    def test_rate_limit(self):
        cfg = LogPolicyConfig(kind=PolicyKind.RATE_LIMIT, rate=3.0, burst=2)
        policy = policy_from_config(cfg)
        assert isinstance(policy, RateLimitPolicy)
        assert policy.rate == 3.0
        assert policy.burst == 2

    def test_sampling(self):
        cfg = LogPolicyConfig(kind=PolicyKind.SAMPLING, sample_ratio=0.5)
        policy = policy_from_config(cfg)
        assert isinstance(policy, SamplingPolicy)
        assert policy.ratio == 0.5

"""
Centralized configuration management for logtrim.
Uses environment variables with safe defaults following 12-factor app principles.
"""

import os
from dataclasses import dataclass, field
from dotenv import load_dotenv
from enum import Enum
from typing import FrozenSet

from .constants import (
    DEFAULT_ARRAY_LIMIT,
    DEFAULT_BURST,
    DEFAULT_DEPTH_LIMIT,
    DEFAULT_RATE,
    DEFAULT_SAMPLE_RATIO,
    DEFAULT_STRING_LIMIT,
    DEFAULT_TRAFFIC_LOGGER_NAME,
    DEFAULT_WHOLE_LIMIT,
)
from logtrim.trimmer.policy import (
    with_array_limit,
    with_depth_limit,
    with_ignores,
    with_string_limit,
    with_whole_limit,
)


class PolicyKind(Enum):
    """Log policies selectable from the environment."""
    ALLOW_ALL = "allow_all"
    REJECT_ALL = "reject_all"
    RATE_LIMIT = "rate_limit"
    SAMPLING = "sampling"


@dataclass(frozen=True)
class TrimConfig:
    """Immutable trim limits applied when no explicit options are given."""
    array_limit: int = DEFAULT_ARRAY_LIMIT
    string_limit: int = DEFAULT_STRING_LIMIT
    depth_limit: int = DEFAULT_DEPTH_LIMIT
    whole_limit: int = DEFAULT_WHOLE_LIMIT
    ignores: FrozenSet[str] = field(default_factory=frozenset)

    def to_options(self) -> list:
        """Express this configuration as trim options, in application order."""
        return [
            with_array_limit(self.array_limit),
            with_string_limit(self.string_limit),
            with_depth_limit(self.depth_limit),
            with_whole_limit(self.whole_limit),
            with_ignores(*sorted(self.ignores)),
        ]


@dataclass(frozen=True)
class LogPolicyConfig:
    """Which records get logged at all."""
    kind: PolicyKind = PolicyKind.ALLOW_ALL
    rate: float = DEFAULT_RATE
    burst: int = DEFAULT_BURST
    sample_ratio: float = DEFAULT_SAMPLE_RATIO


@dataclass(frozen=True)
class LoggingConfig:
    """stdlib logging setup."""
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s [%(request_id)s] %(name)s:%(message)s"
    traffic_logger_name: str = DEFAULT_TRAFFIC_LOGGER_NAME


@dataclass(frozen=True)
class AppConfig:
    """Root configuration - assembled from environment."""
    trim: TrimConfig = field(default_factory=TrimConfig)
    policy: LogPolicyConfig = field(default_factory=LogPolicyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        return default  # Fail safe


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, str(default)))
    except ValueError:
        return default


def load_config() -> AppConfig:
    """
    Load configuration from environment variables.
    Safe defaults are used when env vars are not set or cannot be parsed.
    """
    load_dotenv()  # Load .env file if present

    ignores_raw = os.environ.get("TRIM_IGNORES", "")
    trim = TrimConfig(
        array_limit=_int_env("TRIM_ARRAY_LIMIT", DEFAULT_ARRAY_LIMIT),
        string_limit=_int_env("TRIM_STRING_LIMIT", DEFAULT_STRING_LIMIT),
        depth_limit=_int_env("TRIM_DEPTH_LIMIT", DEFAULT_DEPTH_LIMIT),
        whole_limit=_int_env("TRIM_WHOLE_LIMIT", DEFAULT_WHOLE_LIMIT),
        ignores=frozenset(n.strip() for n in ignores_raw.split(",") if n.strip()),
    )

    kind_str = os.environ.get("LOG_POLICY", "allow_all").lower()
    try:
        kind = PolicyKind(kind_str)
    except ValueError:
        kind = PolicyKind.ALLOW_ALL

    policy = LogPolicyConfig(
        kind=kind,
        rate=_float_env("LOG_RATE", DEFAULT_RATE),
        burst=_int_env("LOG_BURST", DEFAULT_BURST),
        sample_ratio=_float_env("LOG_SAMPLE_RATIO", DEFAULT_SAMPLE_RATIO),
    )

    logging_cfg = LoggingConfig(
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        log_format=os.environ.get("LOG_FORMAT", LoggingConfig.log_format),
        traffic_logger_name=os.environ.get(
            "TRAFFIC_LOGGER_NAME", DEFAULT_TRAFFIC_LOGGER_NAME
        ),
    )

    return AppConfig(
        trim=trim,
        policy=policy,
        logging=logging_cfg,
    )

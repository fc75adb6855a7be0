"""
Shared test fixtures for logtrim test suite.
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional

import pytest

# Ensure logtrim is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from logtrim.trimmer.policy import LimitPolicy
from logtrim.trimmer.traversal import Trimmer
from logtrim.sinks.entry import LogEntry
from logtrim.sinks.traffic import TrafficEntry


@dataclass
class Address:
    city: str
    zip_code: str = field(default="", metadata={"json": "zip,omitempty"})


@dataclass
class Order:
    order_id: int
    items: list = field(default_factory=list)
    address: Optional[Address] = None
    tags: dict = field(default_factory=dict)
    note: Optional[str] = None
    created: Optional[datetime] = None
    elapsed: Optional[timedelta] = None
    error: Optional[Exception] = None
    secret: str = field(default="", metadata={"json": "-"})
    _cache: Any = None


@pytest.fixture
def default_policy():
    return LimitPolicy()


@pytest.fixture
def trimmer(default_policy):
    return Trimmer(default_policy)


@pytest.fixture
def order():
    return Order(
        order_id=42,
        items=list(range(10)),
        address=Address(city="Berlin", zip_code="10115"),
        tags={"channel": "web"},
        created=datetime(2024, 1, 2, 3, 4, 5, 678901),
        elapsed=timedelta(seconds=1, milliseconds=500),
        secret="hunter2",
        _cache={"big": "blob"},
    )


@pytest.fixture
def entry_logger(caplog):
    caplog.set_level(logging.DEBUG, logger="logtrim.test.entry")
    return logging.getLogger("logtrim.test.entry")


@pytest.fixture
def log_entry(entry_logger):
    return LogEntry(entry_logger)


@pytest.fixture
def traffic_logger(caplog):
    caplog.set_level(logging.INFO, logger="logtrim.test.traffic")
    return logging.getLogger("logtrim.test.traffic")


@pytest.fixture
def traffic_entry(traffic_logger):
    return TrafficEntry(traffic_logger)


@pytest.fixture
def root_logger_state():
    """Restore the root logger after tests that reconfigure it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)

"""
Domain models for logtrim.
Pure data classes with no external dependencies (Clean Architecture inner layer).
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, Optional


class TrafficType(Enum):
    """Direction of a recorded exchange."""
    ACCESS = "recv_at"         # Inbound request received
    ACCESS_RESP = "resp_to"    # Response sent back to the caller
    REQUEST = "sent_to"        # Outbound request sent
    REQUEST_RESP = "resp_from" # Response received from the callee
    REQ = "req"                # Request half of a started TrafficRecord

    @property
    def is_request(self) -> bool:
        return self in (TrafficType.ACCESS, TrafficType.REQUEST)


@dataclass
class Traffic:
    """One side of an exchange, supplied by the caller when logging."""
    typ: Optional[TrafficType] = None
    cmd: str = ""  # command / route / method name
    code: int = 0  # status or error code
    msg: str = ""  # error message if any
    cost: timedelta = timedelta(0)  # elapsed processing time
    req: Any = None
    resp: Any = None


@dataclass
class TrafficRequest:
    """Arguments for TrafficEntry.start()."""
    cmd: str
    req: Any = None

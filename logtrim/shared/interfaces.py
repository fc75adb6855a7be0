"""
Abstract interfaces (Ports) for logtrim.
Following Dependency Inversion Principle - depend on abstractions, not concretions.
"""

from abc import ABC, abstractmethod
from typing import Optional

from .models import Traffic, TrafficRequest


class ILogPolicy(ABC):
    """Decides whether a record should be logged at all."""

    @abstractmethod
    def allow(self) -> bool:
        """Return True if the next record may be logged."""


class ITrafficEntry(ABC):
    """Interface for traffic (request/response exchange) logging."""

    @abstractmethod
    def data(self, traffic: Traffic) -> None:
        """Log one side of an exchange."""

    @abstractmethod
    def data_with(self, traffic: Traffic, fields: Optional[dict]) -> None:
        """Log one side of an exchange with extra fields."""

    @abstractmethod
    def start(self, request: TrafficRequest, fields: Optional[dict] = None):
        """Log the request half and return a record that logs the response half."""

    @abstractmethod
    def with_fields(self, fields: dict) -> "ITrafficEntry":
        """Return a copy with fields bound to every record."""

    @abstractmethod
    def with_tracing(self, request_id: str) -> "ITrafficEntry":
        """Return a copy tagged with a request id."""

    @abstractmethod
    def with_ignores(self, *ignores: str) -> "ITrafficEntry":
        """Return a copy that hides the given field/key names from payloads."""

    @abstractmethod
    def with_policy(self, policy: ILogPolicy) -> "ITrafficEntry":
        """Return a copy gated by the policy's decision."""

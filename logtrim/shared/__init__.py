"""Shared cross-cutting concerns: config, constants, interfaces, models."""

__all__ = [
    "config",
    "constants",
    "interfaces",
    "models",
]

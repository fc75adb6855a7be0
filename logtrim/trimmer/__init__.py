"""Structural value trimmer: policy, scalar rendering, traversal, public API."""

__all__ = [
    "api",
    "policy",
    "scalars",
    "traversal",
]

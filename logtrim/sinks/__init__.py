"""Log sinks built on the trimmer: policies, structured entries, traffic records."""

__all__ = [
    "entry",
    "sampling",
    "setup",
    "traffic",
]

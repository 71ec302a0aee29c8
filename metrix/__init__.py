"""MetriX - traffic, error and latency dashboard for an external metrics source."""

__version__ = "1.0.0"

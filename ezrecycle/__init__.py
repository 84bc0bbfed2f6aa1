"""EzRecycle: recycling guidance from structured item descriptions."""

__version__ = "1.0.0"

"""
Exception types raised by the attractor core.
"""


class AttractorError(Exception):
    """Base class for every error raised by quattractor."""


class CapacityExceeded(AttractorError):
    """A generation request asked for more points than the buffer holds."""

    def __init__(self, requested: int, capacity: int):
        self.requested = requested
        self.capacity = capacity
        super().__init__(
            f"requested {requested} points but the buffer holds {capacity}"
        )


class ConfigError(AttractorError, ValueError):
    """An attractor configuration value is malformed."""

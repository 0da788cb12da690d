"""Errors that abort a latency run before any result is produced."""


class LatencyRunError(Exception):
    """Base class for fatal run errors."""


class EmptyInputError(LatencyRunError):
    """Raised when there are no targets to measure."""


class InvalidConfigurationError(LatencyRunError):
    """Raised when concurrency, timeout or other settings are out of range."""


class TargetListError(LatencyRunError):
    """Raised when the target list cannot be read."""


class AggregationError(RuntimeError):
    """Raised when completions do not cover every input index exactly once."""

class MetricError(Exception):
    """Base class for errors raised by validation metrics."""


class InvalidArgumentError(MetricError, ValueError):
    """Raised when predictions or targets do not satisfy a metric's input contract."""


class TypeMismatchError(MetricError, TypeError):
    """Raised when two results of different kinds are combined."""


class EmptyResultError(MetricError, ZeroDivisionError):
    """Raised when a ratio is read from an accumulator that has seen no samples."""

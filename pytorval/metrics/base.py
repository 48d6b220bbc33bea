import abc
from typing import Iterable, Optional, Tuple

import torch
from loguru import logger

from pytorval.metrics.activity import Activity
from pytorval.metrics.errors import InvalidArgumentError, TypeMismatchError


class ValidationResult(abc.ABC):
    """
    Partial result of a metric over one or more batches.

    A result is produced by Metric.apply for a single batch and then folded
    into a running total with combine(). Combining is associative and
    commutative, so batches, workers and epochs can be merged in any order.
    """

    @abc.abstractmethod
    def result(self) -> Tuple[float, int]:
        """Return (score, count) without modifying the accumulator."""
        raise NotImplementedError

    @abc.abstractmethod
    def _merge(self, other: "ValidationResult"):
        """Add the state of `other` (same type) into self."""
        raise NotImplementedError

    @abc.abstractmethod
    def _state(self) -> tuple:
        raise NotImplementedError

    @abc.abstractmethod
    def copy(self) -> "ValidationResult":
        raise NotImplementedError

    def combine(self, other: "ValidationResult") -> "ValidationResult":
        """
        Merge `other` into this result in place and return self.

        `other` is read only. Raises TypeMismatchError, without touching
        either result, when the two results are of different kinds.
        """
        if type(other) is not type(self):
            raise TypeMismatchError(
                f"cannot combine {type(self).__name__} with {type(other).__name__}"
            )
        self._merge(other)
        return self

    def __iadd__(self, other: "ValidationResult") -> "ValidationResult":
        return self.combine(other)

    def __add__(self, other: "ValidationResult") -> "ValidationResult":
        return self.copy().combine(other)

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return False
        return self._state() == other._state()

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._state())

    def __repr__(self) -> str:
        return str(self)


def combine_results(results: Iterable[ValidationResult]) -> ValidationResult:
    """
    Fold results of the same kind into a new accumulator.

    None of the inputs is modified. Typically used to merge the results
    shipped back by parallel workers.
    """
    total = None
    for partial in results:
        if total is None:
            total = partial.copy()
        else:
            total.combine(partial)
    if total is None:
        raise InvalidArgumentError("cannot combine an empty sequence of results")
    return total


class Metric(abc.ABC):
    """
    Base validation method.

    A metric holds no accumulated state: apply() scores one batch and returns
    a fresh ValidationResult that the caller combines into its running total.
    Subclasses implement _score(output, target) on single tensors.
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name or self.__class__.__name__

    def apply(self, output: Activity, target: Activity) -> ValidationResult:
        """Score one batch of predictions against its targets."""
        with torch.no_grad():
            result = self._score(output, target)
        logger.debug("{}: {}", self.name, result)
        return result

    def __call__(self, output: Activity, target: Activity) -> ValidationResult:
        return self.apply(output, target)

    @abc.abstractmethod
    def _score(self, output: Activity, target: Activity) -> ValidationResult:
        raise NotImplementedError

    @abc.abstractmethod
    def clone(self) -> "Metric":
        """Return an independent copy, e.g. one per parallel worker."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

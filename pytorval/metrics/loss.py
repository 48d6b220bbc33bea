import copy
from typing import Callable, Optional, Tuple

import numpy as np
import torch

from pytorval.metrics.activity import Activity, as_single_tensor
from pytorval.metrics.base import Metric, ValidationResult
from pytorval.metrics.errors import InvalidArgumentError


class LossResult(ValidationResult):
    """
    Sum of batch losses.

    Args:
        loss: loss returned by the criterion, accumulated in float32
        count: number of criterion calls that produced `loss`
    """

    def __init__(self, loss: float, count: int = 1):
        count = int(count)
        if count < 1:
            raise InvalidArgumentError(f"loss count must be at least 1, got {count}")
        self.loss = np.float32(loss)
        self.count = count

    def result(self) -> Tuple[float, int]:
        return float(self.loss), self.count

    def average(self) -> float:
        """Mean of the accumulated batch losses."""
        return float(self.loss / np.float32(self.count))

    def _merge(self, other: "LossResult"):
        self.loss = np.float32(self.loss + other.loss)
        self.count += other.count

    def _state(self) -> tuple:
        return float(self.loss), self.count

    def copy(self) -> "LossResult":
        return LossResult(self.loss, self.count)

    def __str__(self) -> str:
        return f"(Loss: {float(self.loss)}, count: {self.count}, Average Loss: {self.average()})"


class Loss(Metric):
    """
    Loss of the output with respect to the target.

    The criterion is any callable (output, target) -> scalar; it defaults to
    torch.nn.NLLLoss, which expects log-probabilities and 0-based class
    indices. Each apply() counts as one observation, so combined results
    average batch losses, not sample losses.
    """

    def __init__(self, criterion: Optional[Callable] = None, name: Optional[str] = None):
        super().__init__(name or "Loss")
        self.criterion = criterion if criterion is not None else torch.nn.NLLLoss()

    def _score(self, output: Activity, target: Activity) -> LossResult:
        output = as_single_tensor(output, "output")
        target = as_single_tensor(target, "target")
        loss = self.criterion(output, target)
        if isinstance(loss, torch.Tensor):
            if loss.numel() != 1:
                raise InvalidArgumentError(
                    f"criterion must return a scalar, got shape {tuple(loss.shape)}"
                )
            loss = loss.item()
        return LossResult(loss, 1)

    def clone(self) -> "Loss":
        return Loss(criterion=copy.deepcopy(self.criterion), name=self.name)

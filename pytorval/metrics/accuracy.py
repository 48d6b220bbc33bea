"""
Classification accuracy metrics.

Both metrics accept predictions of shape (B, C) for a batch or (C,) for a
single sample, and class-index targets. Predicted indices follow torch's
0-based numbering; pass index_base=1 when labels are numbered from 1.
"""
from typing import Optional, Tuple

import numpy as np
import torch

from pytorval.metrics.activity import Activity, as_single_tensor
from pytorval.metrics.base import Metric, ValidationResult
from pytorval.metrics.errors import EmptyResultError, InvalidArgumentError


class AccuracyResult(ValidationResult):
    """
    Ratio of correctly classified samples.

    Args:
        correct: number of correctly classified samples
        count: total number of scored samples
    """

    def __init__(self, correct: int, count: int):
        correct, count = int(correct), int(count)
        if count < 0 or correct < 0 or correct > count:
            raise InvalidArgumentError(
                f"accuracy needs 0 <= correct <= count, got correct={correct}, count={count}"
            )
        self.correct = correct
        self.count = count

    def result(self) -> Tuple[float, int]:
        if self.count == 0:
            raise EmptyResultError("accuracy of an empty result is undefined")
        return float(np.float32(self.correct / self.count)), self.count

    def _merge(self, other: "AccuracyResult"):
        self.correct += other.correct
        self.count += other.count

    def _state(self) -> tuple:
        return self.correct, self.count

    def copy(self) -> "AccuracyResult":
        return AccuracyResult(self.correct, self.count)

    def __str__(self) -> str:
        accuracy = self.correct / self.count if self.count else float("nan")
        return f"Accuracy(correct: {self.correct}, count: {self.count}, accuracy: {accuracy})"


def _check_index_base(index_base: int) -> int:
    if index_base not in (0, 1):
        raise InvalidArgumentError(f"index_base must be 0 or 1, got {index_base}")
    return index_base


def _split_output(output: Activity) -> Tuple[torch.Tensor, int]:
    """Return the output as a (B, C) tensor and its original rank."""
    output = as_single_tensor(output, "output")
    rank = output.dim()
    if rank not in (1, 2):
        raise InvalidArgumentError(
            f"output must have 1 or 2 dimensions, got shape {tuple(output.shape)}"
        )
    if output.size(-1) == 0:
        raise InvalidArgumentError("output has an empty class dimension")
    if rank == 1:
        output = output.unsqueeze(0)
    return output, rank


def _labels(target: Activity, batch_size: int, rank: int, device) -> torch.Tensor:
    labels = as_single_tensor(target, "target").reshape(-1)
    if rank == 1 and labels.numel() != 1:
        raise InvalidArgumentError(
            f"a single-sample output needs exactly one target label, got {labels.numel()}"
        )
    if labels.numel() != batch_size:
        raise InvalidArgumentError(
            f"expected {batch_size} target labels, got {labels.numel()}"
        )
    return labels.to(device=device, dtype=torch.long)


class Top1Accuracy(Metric):
    """
    Fraction of samples whose highest scoring class equals the target.

    Ties resolve to the first maximal index, as torch.argmax does.
    """

    def __init__(self, name: Optional[str] = None, index_base: int = 0):
        super().__init__(name)
        self.index_base = _check_index_base(index_base)

    def _score(self, output: Activity, target: Activity) -> AccuracyResult:
        output, rank = _split_output(output)
        batch_size = output.size(0)
        labels = _labels(target, batch_size, rank, output.device)

        predicted = output.argmax(dim=1) + self.index_base
        correct = int((predicted == labels).sum().item())
        return AccuracyResult(correct, batch_size)

    def clone(self) -> "Top1Accuracy":
        return Top1Accuracy(name=self.name, index_base=self.index_base)


class TopKAccuracy(Metric):
    """
    Fraction of samples whose target is among the k highest scoring classes.

    Args:
        k: number of top classes to consider
        name: optional metric name
        index_base: 0 or 1, numbering of the target labels
    """

    def __init__(self, k: int = 5, name: Optional[str] = None, index_base: int = 0):
        super().__init__(name or f"Top{k}Accuracy")
        if int(k) < 1:
            raise InvalidArgumentError(f"k must be at least 1, got {k}")
        self.k = int(k)
        self.index_base = _check_index_base(index_base)

    def _score(self, output: Activity, target: Activity) -> AccuracyResult:
        output, rank = _split_output(output)
        n_classes = output.size(1)
        if n_classes < self.k:
            raise InvalidArgumentError(
                f"top-{self.k} accuracy needs at least {self.k} classes, got {n_classes}"
            )
        batch_size = output.size(0)
        labels = _labels(target, batch_size, rank, output.device)

        # order inside the top-k set does not matter, only membership
        _, indices = output.topk(self.k, dim=1, largest=True, sorted=False)
        hits = (indices + self.index_base == labels.unsqueeze(1)).any(dim=1)
        return AccuracyResult(int(hits.sum().item()), batch_size)

    def clone(self) -> "TopKAccuracy":
        return TopKAccuracy(k=self.k, name=self.name, index_base=self.index_base)


class Top5Accuracy(TopKAccuracy):
    """Top-k accuracy with k = 5."""

    def __init__(self, name: Optional[str] = None, index_base: int = 0):
        super().__init__(k=5, name=name or "Top5Accuracy", index_base=index_base)

    def clone(self) -> "Top5Accuracy":
        return Top5Accuracy(name=self.name, index_base=self.index_base)

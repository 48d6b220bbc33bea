"""
Helpers to unwrap the inputs handed to a metric.

A model output (or a target) is either a single tensor or a bundle of
tensors (tuple, list or mapping of tensors). Metrics in this package only
score single tensors, so bundles are rejected up front.
"""
from collections.abc import Mapping
from typing import Any, Dict, Sequence, Union

import numpy as np
import torch
from numpy.typing import ArrayLike

from pytorval.metrics.errors import InvalidArgumentError

TensorBundle = Union[Sequence[torch.Tensor], Dict[Any, torch.Tensor]]
Activity = Union[torch.Tensor, ArrayLike, TensorBundle]


def is_tensor_bundle(activity) -> bool:
    if isinstance(activity, Mapping):
        return True
    if isinstance(activity, (tuple, list)):
        return any(isinstance(item, (torch.Tensor, np.ndarray)) for item in activity)
    return False


def as_single_tensor(activity: Activity, what: str = "input") -> torch.Tensor:
    """Convert an activity to a torch tensor.

    Accepts torch tensors, numpy arrays, scalars and nested lists of numbers.
    Raises InvalidArgumentError for a tensor bundle.
    """
    if isinstance(activity, torch.Tensor):
        return activity.detach()
    if is_tensor_bundle(activity):
        raise InvalidArgumentError(
            f"{what} must be a single tensor, got a bundle of type {type(activity).__name__}"
        )
    return torch.as_tensor(activity)

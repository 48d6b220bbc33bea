"""Pytest configuration and shared fixtures."""

import pytest
import torch
from loguru import logger


@pytest.fixture(autouse=True)
def quiet_logger():
    """Keep loguru output out of test logs."""
    logger.disable("pytorval")
    yield
    logger.enable("pytorval")


@pytest.fixture
def logits() -> torch.Tensor:
    """Batch of 4 samples over 6 classes with distinct scores per row."""
    return torch.tensor([
        [0.9, 0.1, 0.3, 0.2, 0.0, 0.5],  # argmax 0, top-5 excludes 4
        [0.1, 0.2, 0.8, 0.7, 0.6, 0.0],  # argmax 2, top-5 excludes 5
        [0.3, 0.4, 0.1, 0.0, 0.9, 0.2],  # argmax 4, top-5 excludes 3
        [0.2, 0.1, 0.0, 0.6, 0.5, 0.4],  # argmax 3, top-5 excludes 2
    ])

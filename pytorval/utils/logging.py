import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

BATCH_LOGGER = "pytorval.metrics"

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name} | {message}"


def log_batch_results(enabled: bool = True) -> None:
    """Turn the per-batch DEBUG records emitted by Metric.apply on or off."""
    if enabled:
        logger.enable(BATCH_LOGGER)
    else:
        logger.disable(BATCH_LOGGER)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_batches: bool = False,
    rotation: str = "10 MB",
    retention: str = "1 week",
) -> None:
    """
    Configure loguru sinks for a training or validation run.

    Parameters
    ----------
    level : str
        Minimum level for every sink.
    log_file : str or Path, optional
        Run log, rotated and gzip compressed. Parent directories are created.
    log_batches : bool
        Keep the result of every scored batch. These records are DEBUG, so
        `level` must be DEBUG as well for them to reach a sink.
    rotation, retention : str
        loguru rotation and retention policies for `log_file`.
    """
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level=level,
            format=FILE_FORMAT,
            rotation=rotation,
            retention=retention,
            compression="gz",
        )
    log_batch_results(log_batches)

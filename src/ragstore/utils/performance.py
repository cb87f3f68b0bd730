"""Timing helpers for the chunk, embed and store stages."""

import time
from contextlib import contextmanager
from dataclasses import dataclass

from loguru import logger


@dataclass
class Timing:
    operation: str
    elapsed_ms: float = 0.0


@contextmanager
def timer(operation: str, log_level: str = "DEBUG", threshold_ms: float = 0):
    """Log how long the wrapped block took, even if it raised.

    Args:
        operation: Label used in the log line
        log_level: Loguru level name
        threshold_ms: Skip the log line for faster blocks

    Yields:
        A ``Timing`` whose ``elapsed_ms`` is filled in on exit

    Example:
        >>> with timer("Embedding 100 chunks") as timing:
        ...     vectors = await service.embed(texts)
        >>> timing.elapsed_ms
    """
    timing = Timing(operation)
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing.elapsed_ms = (time.perf_counter() - start) * 1000
        if timing.elapsed_ms >= threshold_ms:
            logger.log(log_level.upper(), f"{operation} took {timing.elapsed_ms:.2f}ms")

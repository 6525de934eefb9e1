"""
Shared utilities — timing decorator and performance logger.
"""

import logging
import time
from functools import wraps
from typing import Callable, Any

logger = logging.getLogger(__name__)

# Model round trips dominate; anything past these is worth a warning
SLOW_CALL_SECONDS = 30
VERY_SLOW_CALL_SECONDS = 60


def timing_decorator(func: Callable) -> Callable:
    """Decorator that logs execution time and warns on slow calls."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.time()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.time() - start
            logger.info("%s executed in %.2fs", func.__name__, elapsed)
            if elapsed > VERY_SLOW_CALL_SECONDS:
                logger.warning("%s is slow! Took %.2fs", func.__name__, elapsed)

    return wrapper


def log_performance_metrics(
    operation: str, duration: float, success: bool = True,
) -> None:
    """Log a performance measurement with severity based on duration."""
    outcome = "ok" if success else "failed"

    if duration < SLOW_CALL_SECONDS:
        logger.info("%s (%s): %.2fs", operation, outcome, duration)
    elif duration < VERY_SLOW_CALL_SECONDS:
        logger.warning("%s (%s): %.2fs (Slow)", operation, outcome, duration)
    else:
        logger.error("%s (%s): %.2fs (Very Slow)", operation, outcome, duration)

"""
Performance tracing decorator for the public resolution operations.
"""

import time
import functools
from typing import Callable, Any

from unitresolve.config import get_config
from unitresolve.logging_config import logger


def trace(func: Callable) -> Callable:
    """
    Decorator that logs function entry, exit, and execution time.

    Usage:
        @trace
        def narrowest_package_for_file(ctx, snapshot, uri):
            ...

    Logs:
        - Entry with function name
        - Exit with function name and execution duration
        - Any exceptions raised during execution (then re-raises them)

    Tracing is skipped entirely when UNITRESOLVE_TRACE is disabled.
    """
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not get_config().trace_enabled:
            return func(*args, **kwargs)

        func_name = func.__qualname__
        logger.debug(f"TRACE_ENTER: {func_name}")

        start_time = time.perf_counter()

        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.bind(
                function=func_name,
                duration_seconds=duration,
                status="error",
                exception_type=type(e).__name__,
            ).debug(
                f"TRACE_EXIT: {func_name} failed after {duration:.4f}s with {type(e).__name__}: {e}"
            )
            raise

        duration = time.perf_counter() - start_time
        logger.bind(
            function=func_name,
            duration_seconds=duration,
            status="success",
        ).debug(f"TRACE_EXIT: {func_name} completed in {duration:.4f}s")
        return result

    return wrapper

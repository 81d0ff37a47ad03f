"""Repository decorator for standardizing DB operations.

This module provides decorators for repository methods that handle common
database operations including:
- Structured logging with context and timing information
- Translation of SQLAlchemy failures into StorageError

Domain errors raised by repository methods (missing playlist, duplicate
link) pass through untouched.
"""

import asyncio
from collections.abc import Callable, Coroutine
import functools
import time
from typing import Any, ParamSpec, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from src.config import get_logger
from src.domain.errors import StorageError

# Type variables for generic function signatures
P = ParamSpec("P")
T = TypeVar("T")

# Initialize logger
logger = get_logger(__name__)


def db_operation(operation_name: str | None = None):
    """Decorate repository methods with consistent logging and error handling.

    Args:
        operation_name: Optional name for the operation (defaults to function name)

    Returns:
        A decorator function that wraps async repository methods

    Example:
        @db_operation("latest_listen")
        async def latest(self) -> Listen | None:
            ...
    """

    def decorator(
        func: Callable[P, Coroutine[Any, Any, T]],
    ) -> Callable[P, Coroutine[Any, Any, T]]:
        func_name = operation_name or func.__name__

        if not asyncio.iscoroutinefunction(func):
            raise TypeError(
                f"db_operation can only be used with async functions, but {func_name} is not async",
            )

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            start_time = time.perf_counter()
            repo_name = args[0].__class__.__name__ if args else "Repository"
            context = _build_log_context(kwargs)

            logger.trace(
                f"DB operation starting: {repo_name}.{func_name}",
                operation=func_name,
                **context,
            )

            try:
                result = await func(*args, **kwargs)
            except IntegrityError as e:
                logger.warning(
                    f"DB integrity error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=(time.perf_counter() - start_time) * 1000,
                    **context,
                )
                raise StorageError(f"Constraint violated in {func_name}: {e}") from e
            except OperationalError as e:
                logger.error(
                    f"DB operational error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=(time.perf_counter() - start_time) * 1000,
                    **context,
                )
                raise StorageError(f"Database unavailable in {func_name}: {e}") from e
            except SQLAlchemyError as e:
                logger.error(
                    f"SQLAlchemy error: {repo_name}.{func_name}",
                    operation=func_name,
                    error=str(e),
                    exec_time_ms=(time.perf_counter() - start_time) * 1000,
                    **context,
                )
                raise StorageError(f"Database error in {func_name}: {e}") from e

            logger.trace(
                f"DB operation completed: {repo_name}.{func_name}",
                operation=func_name,
                exec_time_ms=(time.perf_counter() - start_time) * 1000,
                **context,
            )
            return result

        return wrapper

    return decorator


def _build_log_context(kwargs: dict[str, Any]) -> dict[str, Any]:
    """Build a context dictionary for logging from function kwargs."""
    id_params = {
        k: v
        for k, v in kwargs.items()
        if k.endswith("_id") and isinstance(v, int | str)
    }
    simple_params = {
        k: v
        for k, v in kwargs.items()
        if (
            not k.startswith("_")
            and isinstance(v, int | str | float | bool)
            and k not in id_params
        )
    }
    return {**simple_params, **id_params}

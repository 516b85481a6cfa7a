"""Run a service operation inside one database transaction."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from preco_facil.errors import BackendUnavailableError
from preco_facil.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")


async def run_in_transaction(
    operation: Callable[..., Awaitable[T]],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run `operation(session, *args, **kwargs)` and commit, or roll back on error.

    Domain errors propagate unchanged; storage failures become
    BackendUnavailableError with the detail logged server-side only.
    """
    try:
        async with get_session() as session:
            return await operation(session, *args, **kwargs)
    except (SQLAlchemyError, OSError) as e:
        logger.exception(f"[db] {getattr(operation, '__name__', 'operation')} failed")
        raise BackendUnavailableError() from e


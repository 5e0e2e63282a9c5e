"""Database-specific exception translation for the backing store."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from shared_kernel.exceptions import BackingStoreUnavailableError


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Re-raise driver and connection failures as BackingStoreUnavailableError.

    Args:
        operation: Short name of the lookup, carried on the raised error.

    Raises:
        BackingStoreUnavailableError: If SQLAlchemy or the network layer fails.
    """
    try:
        yield
    except (SQLAlchemyError, OSError) as e:
        raise BackingStoreUnavailableError(operation, str(e)) from e

"""
Store-access boundary - runs PostgREST queries and maps their failures
"""
from typing import Any, Iterator, List, Sequence
import logging

import httpx
from postgrest.exceptions import APIError

from habitclub.core import dependencies
from habitclub.core.constants import (
    ANY_OF_BATCH_LIMIT,
    FOREIGN_KEY_VIOLATION_CODE,
    UNIQUE_VIOLATION_CODE
)
from habitclub.core.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    StoreTimeoutError
)

logger = logging.getLogger(__name__)


def table(name: str):
    """Start a query against a table using the shared client"""
    return dependencies.get_supabase_client().table(name)


def execute(query, action: str) -> List[Any]:
    """
    Execute a built query and return its rows

    Args:
        query: A PostgREST request builder, ready to execute
        action: Short description used in log lines and error messages

    Returns:
        List of row dictionaries (empty when nothing matched)

    Raises:
        StoreTimeoutError: If the call exceeded the configured timeout
        DuplicateError: If the write violated a unique constraint
        NotFoundError: If the write referenced a row that does not exist
        DatabaseError: For any other store failure
    """
    try:
        result = query.execute()
    except httpx.TimeoutException as e:
        logger.error(f"Database timeout {action}: {e}")
        raise StoreTimeoutError(f"Timed out {action}") from e
    except APIError as e:
        if e.code == UNIQUE_VIOLATION_CODE:
            logger.info(f"Unique constraint hit {action}: {e.message}")
            raise DuplicateError(f"Duplicate record {action}") from e
        if e.code == FOREIGN_KEY_VIOLATION_CODE:
            logger.info(f"Missing referenced record {action}: {e.message}")
            raise NotFoundError(f"Referenced record missing {action}") from e
        logger.error(f"Database error {action}: {e}")
        raise DatabaseError(f"Failed {action}: {e}") from e
    except Exception as e:
        logger.error(f"Database error {action}: {e}")
        raise DatabaseError(f"Failed {action}: {e}") from e

    return result.data or []


def chunked(ids: Sequence[str], size: int = ANY_OF_BATCH_LIMIT) -> Iterator[List[str]]:
    """Split ids into lists no longer than one any-of filter allows"""
    for start in range(0, len(ids), size):
        yield list(ids[start:start + size])

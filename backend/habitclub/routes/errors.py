"""
Shared HTTP error translation for store failures
"""
from fastapi import HTTPException

from habitclub.core.exceptions import StoreTimeoutError, UpstreamError


def upstream_http_error(e: UpstreamError) -> HTTPException:
    """504 for store timeouts, 502 for every other upstream failure"""
    status = 504 if isinstance(e, StoreTimeoutError) else 502
    return HTTPException(status_code=status, detail=str(e))

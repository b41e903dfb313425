"""
Dependency injection for shared clients and resources
"""
from functools import lru_cache
from typing import Optional
import logging

from fastapi import Header, HTTPException
from supabase import create_client, Client, ClientOptions

from habitclub.core.config import settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Get the shared Supabase client, created on first use"""
    options = ClientOptions(postgrest_client_timeout=settings.STORE_TIMEOUT_SECONDS)
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY, options=options)


def get_current_user_id(authorization: Optional[str] = Header(default=None)) -> str:
    """
    Resolve the acting user from the request's bearer token.

    Token validation is delegated to Supabase Auth; this only extracts the
    token and returns the authenticated user's id.

    Raises:
        HTTPException: 401 if the token is missing or rejected
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing bearer token")

    token = authorization.split(" ", 1)[1].strip()
    try:
        response = get_supabase_client().auth.get_user(token)
    except Exception as e:
        logger.warning(f"Token rejected by identity provider: {e}")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    if response is None or response.user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return response.user.id

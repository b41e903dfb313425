"""
Feed Routes - Social activity feed
"""
from typing import List

from fastapi import APIRouter, Depends

from habitclub.core.dependencies import get_current_user_id
from habitclub.core.exceptions import UpstreamError
from habitclub.models.social import FeedEntry
from habitclub.routes.errors import upstream_http_error
from habitclub.services import feed

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=List[FeedEntry])
def get_feed(user_id: str = Depends(get_current_user_id)):
    """Recent check-ins from the users the caller follows"""
    try:
        return feed.get_feed_for_user(user_id)
    except UpstreamError as e:
        raise upstream_http_error(e)

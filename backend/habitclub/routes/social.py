"""
Social Routes - User search and follow/unfollow
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from habitclub.core.dependencies import get_current_user_id
from habitclub.core.exceptions import (
    InvalidOperationError,
    NotFoundError,
    UpstreamError,
    ValidationError
)
from habitclub.models.social import FollowingResponse, UserSummary
from habitclub.routes.errors import upstream_http_error
from habitclub.services import social

router = APIRouter(prefix="/users", tags=["social"])


@router.get("/search", response_model=List[UserSummary])
def search_users(q: str = Query(..., description="Username prefix, at least 2 characters"),
                 user_id: str = Depends(get_current_user_id)):
    """Search users by username prefix, excluding the caller"""
    try:
        return social.search_users(q, exclude_user_id=user_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UpstreamError as e:
        raise upstream_http_error(e)


@router.get("/me/following", response_model=FollowingResponse)
def get_following(user_id: str = Depends(get_current_user_id)):
    """Get the IDs of everyone the caller follows"""
    try:
        following = sorted(social.get_following(user_id))
    except UpstreamError as e:
        raise upstream_http_error(e)
    return FollowingResponse(user_id=user_id, following=following, count=len(following))


@router.put("/{target_user_id}/follow", status_code=204)
def follow_user(target_user_id: str, user_id: str = Depends(get_current_user_id)):
    """Follow a user"""
    try:
        social.follow(user_id, target_user_id)
    except InvalidOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        raise upstream_http_error(e)
    return Response(status_code=204)


@router.delete("/{target_user_id}/follow", status_code=204)
def unfollow_user(target_user_id: str, user_id: str = Depends(get_current_user_id)):
    """Unfollow a user"""
    try:
        social.unfollow(user_id, target_user_id)
    except UpstreamError as e:
        raise upstream_http_error(e)
    return Response(status_code=204)

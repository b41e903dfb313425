"""
Profile Routes - Register and read the caller's profile
"""
from fastapi import APIRouter, Depends, HTTPException

from habitclub.core.dependencies import get_current_user_id
from habitclub.core.exceptions import (
    UpstreamError,
    UsernameTakenError,
    UserNotFoundError,
    ValidationError
)
from habitclub.models.social import CreateProfileRequest, Profile
from habitclub.routes.errors import upstream_http_error
from habitclub.services import social

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("", response_model=Profile, status_code=201)
def create_profile(request: CreateProfileRequest, user_id: str = Depends(get_current_user_id)):
    """Create the profile for a newly registered user"""
    try:
        return social.create_profile(user_id, request.username, request.email)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UsernameTakenError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UpstreamError as e:
        raise upstream_http_error(e)


@router.get("/me", response_model=Profile)
def get_my_profile(user_id: str = Depends(get_current_user_id)):
    """Get the caller's profile and following set"""
    try:
        return social.get_profile(user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        raise upstream_http_error(e)

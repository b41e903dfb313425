"""
Habit Routes - Endpoints for habit management and check-ins
"""
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response

from habitclub.core.constants import DEFAULT_CHECK_IN_HISTORY_LIMIT, HABIT_CATEGORIES
from habitclub.core.dependencies import get_current_user_id
from habitclub.core.exceptions import (
    DuplicateHabitError,
    HabitNotFoundError,
    InvalidHabitDataError,
    PartialCheckInError,
    StreakConflictError,
    UpstreamError,
    UserNotFoundError
)
from habitclub.models.habit import (
    CheckIn,
    CheckInResult,
    Frequency,
    Habit,
    HabitCreate,
    HabitStatus,
    HabitUpdate
)
from habitclub.routes.errors import upstream_http_error
from habitclub.services import habits

router = APIRouter(prefix="/habits", tags=["habits"])


@router.get("", response_model=List[HabitStatus])
def list_habits(user_id: str = Depends(get_current_user_id)):
    """Get the caller's habits with today's check-in status"""
    try:
        return habits.get_habits_with_status(user_id)
    except UpstreamError as e:
        raise upstream_http_error(e)


@router.get("/categories", response_model=List[str])
def list_categories():
    """Suggested categories for the habit form; any label is accepted"""
    return HABIT_CATEGORIES


@router.post("", response_model=Habit, status_code=201)
def create_habit(request: HabitCreate, user_id: str = Depends(get_current_user_id)):
    """Create a new habit"""
    try:
        return habits.create_habit(user_id, request)
    except InvalidHabitDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateHabitError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        raise upstream_http_error(e)


@router.patch("/{habit_id}", status_code=204)
def update_habit(habit_id: str, request: HabitUpdate, user_id: str = Depends(get_current_user_id)):
    """Update a habit's name, frequency or category"""
    try:
        habits.update_habit(habit_id, request, user_id=user_id)
    except InvalidHabitDataError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateHabitError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except UpstreamError as e:
        raise upstream_http_error(e)
    return Response(status_code=204)


@router.delete("/{habit_id}", status_code=204)
def delete_habit(habit_id: str, user_id: str = Depends(get_current_user_id)):
    """Delete a habit"""
    try:
        habits.delete_habit(habit_id, user_id=user_id)
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        raise upstream_http_error(e)
    return Response(status_code=204)


@router.post("/{habit_id}/check-in", response_model=CheckInResult)
def check_in(habit_id: str,
             frequency: Optional[Frequency] = Body(None, embed=True),
             user_id: str = Depends(get_current_user_id)):
    """Check in a habit for today and update its streak"""
    try:
        habits.get_habit(habit_id, user_id=user_id)
        return habits.check_in(habit_id, user_id, frequency.value if frequency else None)
    except HabitNotFoundError as e:
        # Includes the partial case where the habit vanished after the event was written
        detail = {"message": str(e)}
        if isinstance(e, PartialCheckInError) and e.check_in is not None:
            detail["check_in_id"] = e.check_in.id
        raise HTTPException(status_code=404, detail=detail)
    except StreakConflictError as e:
        raise HTTPException(status_code=409, detail={"message": str(e), "check_in_id": e.check_in.id})
    except PartialCheckInError as e:
        raise HTTPException(status_code=502, detail={"message": str(e), "check_in_id": e.check_in.id})
    except UpstreamError as e:
        raise upstream_http_error(e)


@router.get("/{habit_id}/check-ins", response_model=List[CheckIn])
def list_check_ins(habit_id: str,
                   limit: int = Query(DEFAULT_CHECK_IN_HISTORY_LIMIT, ge=1, le=200),
                   user_id: str = Depends(get_current_user_id)):
    """Get a habit's check-in history, newest first"""
    try:
        habits.get_habit(habit_id, user_id=user_id)
        return habits.get_check_ins(habit_id, limit)
    except HabitNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        raise upstream_http_error(e)

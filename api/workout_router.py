"""Workout API routes."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.deps import get_current_user, get_workouts
from schemas.workout import CreateExerciseStatsRequest, UpdateExerciseStatsRequest
from services.summary_service import get_workout_summary
from services.workout_service import (
    create_exercise_stats,
    get_session,
    list_exercises,
    update_exercise_stats,
)
from utils.exceptions import AppError, PersistenceError
from utils.helpers import format_response
from utils.logger import setup_logger

router = APIRouter(prefix="/api/v1/workouts", tags=["workouts"])

logger = setup_logger(__name__)


@router.get("")
async def get_my_session(
    user_id: str = Depends(get_current_user),
    workouts=Depends(get_workouts),
):
    """Return the caller's workout session."""
    try:
        session = await get_session(workouts, user_id)
        return format_response(session)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error fetching workout session for {user_id}: {e}", exc_info=True)
        raise PersistenceError("Failed to fetch workout session") from e


@router.get("/exercises")
async def get_my_exercises(
    user_id: str = Depends(get_current_user),
    workouts=Depends(get_workouts),
):
    """List the caller's exercises with how many days each has been logged."""
    try:
        rows = await list_exercises(workouts, user_id)
        return format_response(rows)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error listing exercises for {user_id}: {e}", exc_info=True)
        raise PersistenceError("Failed to list exercises") from e


@router.get("/summary")
async def get_summary(
    start_date: Optional[date] = Query(None, alias="startDate", description="First day, inclusive"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Last day, inclusive"),
    user_id: str = Depends(get_current_user),
    workouts=Depends(get_workouts),
):
    """
    Get workout summary grouped by date, muscle group, and exercise.
    Defaults to everything up to today.
    """
    try:
        summary = await get_workout_summary(workouts, user_id, start_date, end_date)
        return format_response(summary)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error building workout summary: {e}", exc_info=True)
        raise PersistenceError("Failed to fetch workout summary") from e


@router.post("", status_code=201)
async def add_exercise_stats(
    payload: CreateExerciseStatsRequest,
    user_id: str = Depends(get_current_user),
    workouts=Depends(get_workouts),
):
    """Add new exercise stats. Always creates a new exercise entry."""
    try:
        session = await create_exercise_stats(workouts, user_id, payload)
        return JSONResponse(
            status_code=201,
            content=format_response(session, "New exercise stats added successfully"),
        )
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error adding workout: {e}", exc_info=True)
        raise PersistenceError("Error adding workout") from e


@router.put("/{exercise_id}")
async def edit_exercise_stats(
    exercise_id: str,
    payload: UpdateExerciseStatsRequest,
    user_id: str = Depends(get_current_user),
    workouts=Depends(get_workouts),
):
    """Record today's stats for an exercise, replacing any entry already logged today."""
    try:
        session = await update_exercise_stats(workouts, user_id, exercise_id, payload)
        return format_response(session, "Exercise stats updated successfully")
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error updating exercise {exercise_id}: {e}", exc_info=True)
        raise PersistenceError("Error updating exercise stats") from e

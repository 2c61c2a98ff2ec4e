"""Meal API routes."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pymongo import ReturnDocument

from api.deps import get_current_user, get_meals
from schemas.meal import MealKey, MealUpdate
from utils.exceptions import AppError, NotFoundError, PersistenceError
from utils.helpers import calendar_day, format_response, utcnow
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/meals", tags=["meals"])

# Meal fields a PUT may change; the rest of the document is its key
MEAL_FIELDS = {"items", "calories", "protein", "notes"}


@router.get("")
async def get_meals_for_user(
    date: Optional[datetime] = Query(None, description="Only meals logged on this day"),
    user_id: str = Depends(get_current_user),
    meals=Depends(get_meals),
):
    """Get the caller's meals, newest day first."""
    try:
        query = {"userId": user_id}
        if date is not None:
            query["date"] = calendar_day(date)

        cursor = meals.find(query).sort([("date", -1), ("mealType", 1)])
        entries = await cursor.to_list(length=None)

        logger.info(f"Retrieved {len(entries)} meals for user_id: {user_id}")
        return format_response(entries)
    except Exception as e:
        logger.error(f"Error fetching meals for user_id {user_id}: {e}", exc_info=True)
        raise PersistenceError("Error fetching meals") from e


@router.put("/update")
async def upsert_meal(
    payload: MealUpdate,
    user_id: str = Depends(get_current_user),
    meals=Depends(get_meals),
):
    """
    Insert or update the meal for a day and meal type.
    There is at most one meal per (user, day, meal type). Fields left out
    of the request keep their stored values.
    """
    try:
        now = utcnow()
        day = calendar_day(payload.date)
        sent = payload.model_dump(include=MEAL_FIELDS, exclude_unset=True)
        defaults = {
            key: value
            for key, value in payload.model_dump(include=MEAL_FIELDS).items()
            if key not in sent
        }
        update_doc = {
            "$set": {**sent, "updatedAt": now},
            "$setOnInsert": {**defaults, "createdAt": now},
        }

        meal = await meals.find_one_and_update(
            {"userId": user_id, "date": day, "mealType": payload.meal_type},
            update_doc,
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return format_response(meal)
    except Exception as e:
        logger.error(f"Error updating meal: {e}", exc_info=True)
        raise PersistenceError("Error updating meal") from e


@router.delete("/delete")
async def delete_meal(
    payload: MealKey,
    user_id: str = Depends(get_current_user),
    meals=Depends(get_meals),
):
    """Delete the meal for a day and meal type."""
    try:
        meal = await meals.find_one_and_delete({
            "userId": user_id,
            "date": calendar_day(payload.date),
            "mealType": payload.meal_type,
        })
        if not meal:
            raise NotFoundError("Meal not found")
        return format_response(meal, "Meal deleted")
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error deleting meal: {e}", exc_info=True)
        raise PersistenceError("Error deleting meal") from e

"""Body measurement details routes."""

from fastapi import APIRouter, Depends
from pymongo import ReturnDocument

from api.deps import get_current_user, get_details
from schemas.details import DetailsUpdate
from utils.exceptions import AppError, NotFoundError, PersistenceError, ValidationError
from utils.helpers import format_response, utcnow
from utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(prefix="/api/v1/details", tags=["details"])


@router.get("/me")
async def get_my_details(
    user_id: str = Depends(get_current_user),
    details=Depends(get_details),
):
    """Get the caller's body measurements."""
    try:
        document = await details.find_one({"userId": user_id})
        if not document:
            raise NotFoundError("User details not found")
        return format_response(document)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Error fetching user details: {e}", exc_info=True)
        raise PersistenceError("Error fetching user details") from e


@router.put("/update")
async def update_my_details(
    payload: DetailsUpdate,
    user_id: str = Depends(get_current_user),
    details=Depends(get_details),
):
    """Create or update the caller's body measurements."""
    if payload.weight is None or payload.height is None or payload.age is None:
        raise ValidationError("Please provide all required fields")

    try:
        now = utcnow()
        # Fields left out of the request keep their stored values
        update_data = payload.model_dump(by_alias=True, exclude_none=True)
        update_data["updatedAt"] = now

        document = await details.find_one_and_update(
            {"userId": user_id},
            {"$set": update_data, "$setOnInsert": {"createdAt": now}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        logger.info(f"Updated details for user {user_id}")
        return format_response(document)
    except Exception as e:
        logger.error(f"Error updating user details: {e}", exc_info=True)
        raise PersistenceError("Error updating user details") from e

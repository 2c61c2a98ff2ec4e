"""Helper utility functions."""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching what PyMongo returns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def calendar_day(value: Any) -> datetime:
    """Truncate a date or datetime to midnight.

    Aware datetimes are converted to UTC first so that the day key is the
    same regardless of the offset the client sent.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return datetime.combine(value.date(), time.min)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    raise TypeError(f"Cannot compute calendar day for {value!r}")


def day_string(value: Any) -> str:
    """Format a date or datetime as YYYY-MM-DD."""
    return calendar_day(value).strftime("%Y-%m-%d")


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return an ObjectId for ``value`` or None if it is not a valid id."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


def serialize_document(document: Any) -> Any:
    """Make a MongoDB document JSON serializable (ObjectId -> str)."""
    if document is None:
        return None
    return jsonable_encoder(document, custom_encoder={ObjectId: str})


def format_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Wrap a payload in the success envelope."""
    body: Dict[str, Any] = {"status": "success"}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = serialize_document(data)
    return body


def format_error(message: str) -> Dict[str, Any]:
    """Build the error envelope."""
    return {"status": "error", "message": message}

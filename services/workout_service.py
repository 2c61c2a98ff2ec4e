"""Workout mutation service.

Applies create/update operations to a user's workout session. The session is
read, modified in memory and written back with a single ``replace_one``, so
one document write is the atomicity boundary. Concurrent updates to the same
exercise are last-writer-wins.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument

from schemas.enums import MuscleGroup
from schemas.workout import (
    CreateExerciseStatsRequest,
    Exercise,
    ExerciseStat,
    SetInput,
    UpdateExerciseStatsRequest,
    WorkoutSession,
    WorkoutSet,
)
from utils.exceptions import NotFoundError, ValidationError
from utils.helpers import calendar_day, parse_object_id, utcnow
from utils.logger import setup_logger

logger = setup_logger(__name__)

DEFAULT_REST_SECONDS = 60
DEFAULT_RATING = 1

# Oldest document first; cloned history can leave a user with several
SESSION_ORDER = [("createdAt", ASCENDING), ("_id", ASCENDING)]


# ---------------------------
# Builders
# ---------------------------

def normalize_muscle_group(value: str) -> str:
    """Lower-case a muscle group and check it against the enumeration."""
    normalized = (value or "").strip().lower()
    try:
        return MuscleGroup(normalized).value
    except ValueError:
        allowed = ", ".join(group.value for group in MuscleGroup)
        raise ValidationError(
            f"Invalid muscleGroup '{value}'. Expected one of: {allowed}"
        ) from None


def validate_sets(sets: List[SetInput]) -> None:
    """Check submitted sets. Messages use 1-based set positions."""
    for index, item in enumerate(sets, start=1):
        if item.reps is None:
            raise ValidationError(f"Set {index} is missing required 'reps' field")
        if item.reps <= 0:
            raise ValidationError(f"Set {index} must have a positive 'reps' value")
        if item.weight is not None and item.weight < 0:
            raise ValidationError(f"Set {index} 'weight' cannot be negative")
        if item.rest is not None and item.rest < 0:
            raise ValidationError(f"Set {index} 'rest' cannot be negative")


def build_sets(sets: List[SetInput]) -> List[WorkoutSet]:
    """Renumber sets 1..N in submission order and fill in defaults."""
    return [
        WorkoutSet(
            set_number=index,
            reps=item.reps,
            weight=item.weight if item.weight is not None else 0,
            rest=item.rest if item.rest is not None else DEFAULT_REST_SECONDS,
            completed=True if item.completed is None else item.completed,
            notes=item.notes or "",
        )
        for index, item in enumerate(sets, start=1)
    ]


def build_stats_entry(
    sets: List[SetInput],
    day: datetime,
    notes: Optional[str] = None,
    rating: Optional[int] = None,
    duration: Optional[int] = None,
) -> Dict[str, Any]:
    """Build the stats document for one exercise on one calendar day."""
    if rating is not None and not 1 <= rating <= 5:
        raise ValidationError("rating must be between 1 and 5")
    if duration is not None and duration < 0:
        raise ValidationError("duration cannot be negative")

    entry = ExerciseStat(
        date=calendar_day(day),
        sets=build_sets(sets),
        notes=notes or "",
        rating=rating if rating is not None else DEFAULT_RATING,
        duration=duration or 0,
    )
    return entry.model_dump(by_alias=True)


def build_exercise(name: str, muscle_group: str, stats: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Build an embedded exercise document with a fresh surrogate id."""
    exercise = Exercise(
        name=name.strip(),
        muscle_group=normalize_muscle_group(muscle_group),
        stats=stats,
    )
    return {"_id": ObjectId(), **exercise.model_dump(by_alias=True)}


def upsert_stats_for_day(stats: List[Dict[str, Any]], entry: Dict[str, Any]) -> bool:
    """Replace the entry logged on the same calendar day, otherwise append.

    Returns True when an existing entry was replaced.
    """
    day = calendar_day(entry["date"])
    for index, existing in enumerate(stats):
        existing_date = existing.get("date")
        if existing_date is not None and calendar_day(existing_date) == day:
            stats[index] = entry
            return True
    stats.append(entry)
    return False


def find_exercise(session: Dict[str, Any], exercise_id: ObjectId) -> Optional[Dict[str, Any]]:
    for exercise in session.get("exercises", []):
        if exercise.get("_id") == exercise_id:
            return exercise
    return None


# ---------------------------
# Persistence
# ---------------------------

def new_session_document(user_id: str, now: datetime) -> Dict[str, Any]:
    """Default fields for a freshly created session."""
    session = WorkoutSession(user_id=user_id, date=now).model_dump(by_alias=True)
    session["createdAt"] = now
    session["updatedAt"] = now
    return session


async def resolve_session(collection, user_id: str, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Return the caller's primary (oldest) session, creating it with defaults if absent."""
    now = now or utcnow()
    defaults = new_session_document(user_id, now)
    defaults.pop("userId")

    return await collection.find_one_and_update(
        {"userId": user_id},
        {"$setOnInsert": defaults},
        sort=SESSION_ORDER,
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )


async def save_session(collection, session: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Write the whole session back, scoped to its owner."""
    session["updatedAt"] = now
    result = await collection.replace_one(
        {"_id": session["_id"], "userId": session["userId"]},
        session,
    )
    if result.matched_count == 0:
        raise NotFoundError("Workout session not found")
    return session


# ---------------------------
# Operations
# ---------------------------

async def create_exercise_stats(
    collection,
    user_id: str,
    payload: CreateExerciseStatsRequest,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Append a new exercise with today's stats to the caller's session.

    This always adds a new exercise record, even when one with the same name
    already exists.
    """
    name = (payload.name or "").strip()
    if not name or not payload.muscle_group or not payload.sets:
        raise ValidationError("Missing required fields: name, muscleGroup, or sets")
    validate_sets(payload.sets)

    now = now or utcnow()
    entry = build_stats_entry(
        payload.sets,
        now,
        notes=payload.notes,
        rating=payload.rating,
        duration=payload.duration,
    )
    exercise = build_exercise(name, payload.muscle_group, [entry])
    muscle_group = exercise["muscleGroup"]

    session = await resolve_session(collection, user_id, now)
    session.setdefault("exercises", []).append(exercise)
    saved = await save_session(collection, session, now)

    logger.info(f"Added exercise '{name}' ({muscle_group}) for user {user_id}")
    return saved


async def update_exercise_stats(
    collection,
    user_id: str,
    exercise_id: str,
    payload: UpdateExerciseStatsRequest,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Record today's stats for an existing exercise.

    A stats entry already logged today is replaced in place; otherwise the
    new entry is appended.
    """
    if not payload.sets:
        raise ValidationError("Sets array is required")
    validate_sets(payload.sets)

    object_id = parse_object_id(exercise_id)
    if object_id is None:
        raise NotFoundError("Exercise not found")

    session = await collection.find_one({"userId": user_id, "exercises._id": object_id})
    exercise = find_exercise(session, object_id) if session else None
    if exercise is None:
        raise NotFoundError("Exercise not found")

    now = now or utcnow()
    entry = build_stats_entry(
        payload.sets,
        now,
        notes=payload.notes,
        rating=payload.rating,
        duration=payload.duration,
    )
    replaced = upsert_stats_for_day(exercise.setdefault("stats", []), entry)
    saved = await save_session(collection, session, now)

    logger.info(
        f"{'Replaced' if replaced else 'Appended'} stats for exercise "
        f"'{exercise.get('name')}' ({exercise_id}) for user {user_id}"
    )
    return saved


async def get_session(collection, user_id: str) -> Dict[str, Any]:
    """Return the caller's session.

    When the user owns several documents their exercises are merged into the
    oldest one, in document order.
    """
    sessions = await collection.find({"userId": user_id}).sort(SESSION_ORDER).to_list(length=None)
    if not sessions:
        raise NotFoundError("No workout session found")

    session, *others = sessions
    exercises = session.setdefault("exercises", [])
    for other in others:
        exercises.extend(other.get("exercises") or [])
    return session


async def list_exercises(collection, user_id: str) -> List[Dict[str, Any]]:
    """Flatten every exercise the caller owns into one row per exercise."""
    sessions = await collection.find({"userId": user_id}).sort(SESSION_ORDER).to_list(length=None)

    rows = []
    for session in sessions:
        for exercise in session.get("exercises", []):
            stats = exercise.get("stats") or []
            dates = [stat["date"] for stat in stats if stat.get("date") is not None]
            rows.append({
                "id": exercise.get("_id"),
                "name": exercise.get("name"),
                "muscleGroup": exercise.get("muscleGroup"),
                "statsCount": len(stats),
                "lastDate": max(dates) if dates else None,
            })
    return rows

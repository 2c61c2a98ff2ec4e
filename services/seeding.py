"""Seeding and cloning of template workout history.

Batch operations, not used on request paths. Nothing here guards against two
runs seeding the same target at once; callers serialize that themselves.
"""

import copy
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo.errors import PyMongoError

from config.settings import settings
from schemas.workout import SetInput
from services.workout_service import (
    build_exercise,
    build_stats_entry,
    resolve_session,
    save_session,
)
from utils.exceptions import PersistenceError, SeedingError, ValidationError
from utils.helpers import utcnow
from utils.logger import setup_logger

logger = setup_logger(__name__)


# Demo exercises for the template user: (name, muscle group, sets, extra stat fields)
TEMPLATE_EXERCISES = [
    ("Plank", "core", [{"reps": 1, "rest": 60, "completed": False}], {"duration": 60, "rating": 3}),
    ("Russian Twists", "core", [{"reps": 20, "weight": 5, "rest": 30, "completed": False}] * 3, {"rating": 4}),
    ("Running", "cardio", [], {"duration": 1800, "rating": 4}),
    ("Cycling", "cardio", [], {"duration": 1800, "rating": 4}),
    ("Squat", "legs", [{"reps": 10, "weight": 60}, {"reps": 8, "weight": 70}], {"rating": 3}),
    ("Bench Press", "chest", [{"reps": 10, "weight": 40}, {"reps": 8, "weight": 45}], {"rating": 3}),
]


def clone_session_document(source: Dict[str, Any], target_user_id: str, now: datetime) -> Dict[str, Any]:
    """Copy a session for a new owner.

    The store id is dropped so the insert assigns a new one, every embedded
    exercise gets a fresh id, and the timestamps are restamped.
    """
    clone = {
        key: copy.deepcopy(value)
        for key, value in source.items()
        if key not in ("_id", "userId", "createdAt", "updatedAt", "exercises")
    }
    clone["userId"] = target_user_id
    clone["exercises"] = [
        {**copy.deepcopy(exercise), "_id": ObjectId()}
        for exercise in source.get("exercises") or []
    ]
    clone["createdAt"] = now
    clone["updatedAt"] = now
    return clone


async def clone_template_user(
    collection,
    target_user_id: Any,
    template_user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> List[ObjectId]:
    """Copy every session of the template user to ``target_user_id``.

    Returns the ids of the inserted documents.

    Raises:
        ValidationError: the target id is not a non-empty string.
        SeedingError: the template user has no documents to copy.
        PersistenceError: the bulk insert failed.
    """
    if not isinstance(target_user_id, str) or not target_user_id.strip():
        raise ValidationError(f"Invalid user ID: {target_user_id!r}")

    template_user_id = template_user_id or settings.demo_user_id
    if target_user_id == template_user_id:
        raise ValidationError("Cannot clone the template user into itself")

    logger.info(f"Cloning workout history from '{template_user_id}' to '{target_user_id}'")

    sources = await collection.find({"userId": template_user_id}).to_list(length=None)
    if not sources:
        raise SeedingError(
            f"No template workouts found for '{template_user_id}'. "
            "Run the seed-template command first."
        )

    now = now or utcnow()
    clones = [clone_session_document(source, target_user_id, now) for source in sources]

    try:
        result = await collection.insert_many(clones, ordered=True)
    except PyMongoError as e:
        logger.error(f"Bulk insert failed while cloning for '{target_user_id}': {e}", exc_info=True)
        raise PersistenceError(f"Failed to clone workouts for '{target_user_id}'") from e

    logger.info(f"Cloned {len(result.inserted_ids)} session(s) for user '{target_user_id}'")
    return list(result.inserted_ids)


async def seed_template_exercises(
    collection,
    template_user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """Give the template user the demo exercises it is missing.

    Exercise names are compared case-insensitively. Returns how many
    exercises were added.
    """
    template_user_id = template_user_id or settings.demo_user_id
    now = now or utcnow()

    session = await resolve_session(collection, template_user_id, now)
    exercises = session.setdefault("exercises", [])
    existing = {(exercise.get("name") or "").lower() for exercise in exercises}

    added = 0
    for name, muscle_group, sets, extra in TEMPLATE_EXERCISES:
        if name.lower() in existing:
            continue
        entry = build_stats_entry([SetInput(**item) for item in sets], now, **extra)
        exercises.append(build_exercise(name, muscle_group, [entry]))
        added += 1
        logger.info(f"Added template exercise {name} to {muscle_group}")

    if added:
        await save_session(collection, session, now)
    return added

"""Workout summary projection.

Reshapes a user's sessions into a report keyed by calendar day, then muscle
group, then exercise::

    [
        {
            "date": "2024-05-02",
            "muscleGroups": [
                {
                    "name": "legs",
                    "exercises": [
                        {"id": ..., "name": "Squat", "totalSets": 2,
                         "totalVolume": 1880.0, "stats": [...]},
                    ],
                },
            ],
        },
    ]

Days are sorted newest first, muscle groups follow the enumeration order and
exercises keep their session order. Grouping happens in memory over the
caller's session documents.
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

from schemas.enums import MUSCLE_GROUP_ORDER, MuscleGroup
from services.workout_service import SESSION_ORDER
from utils.exceptions import ValidationError
from utils.helpers import calendar_day, day_string, utcnow
from utils.logger import setup_logger

logger = setup_logger(__name__)

EPOCH = datetime(1970, 1, 1)


def stat_volume(stat: Dict[str, Any]) -> float:
    """Sum of reps * weight over a stats entry. Missing weight counts as 0."""
    total = 0.0
    for item in stat.get("sets") or []:
        total += (item.get("reps") or 0) * (item.get("weight") or 0)
    return total


def stat_set_count(stat: Dict[str, Any]) -> int:
    return len(stat.get("sets") or [])


def resolve_window(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """Turn optional bounds into an inclusive pair of calendar days."""
    start = calendar_day(start_date) if start_date else EPOCH
    end = calendar_day(end_date) if end_date else calendar_day(now or utcnow())
    if start > end:
        raise ValidationError("startDate must not be after endDate")
    return start, end


def _muscle_group_rank(name: str) -> Tuple[int, str]:
    if name in MUSCLE_GROUP_ORDER:
        return MUSCLE_GROUP_ORDER.index(name), name
    return len(MUSCLE_GROUP_ORDER), name


def build_summary(
    sessions: Iterable[Dict[str, Any]],
    start: datetime,
    end: datetime,
) -> List[Dict[str, Any]]:
    """Group stats entries falling inside ``[start, end]`` by day and muscle group."""
    # day -> muscle group -> exercise id -> bucket; dicts keep insertion order
    days: Dict[datetime, Dict[str, Dict[Any, Dict[str, Any]]]] = {}

    for session in sessions:
        for exercise in session.get("exercises") or []:
            muscle_group = (exercise.get("muscleGroup") or MuscleGroup.OTHER.value).lower()
            exercise_key = exercise.get("_id") or exercise.get("name")

            for stat in exercise.get("stats") or []:
                if stat.get("date") is None:
                    continue
                day = calendar_day(stat["date"])
                if day < start or day > end:
                    continue

                groups = days.setdefault(day, {})
                exercises = groups.setdefault(muscle_group, {})
                bucket = exercises.get(exercise_key)
                if bucket is None:
                    bucket = {
                        "id": exercise.get("_id"),
                        "name": exercise.get("name"),
                        "totalSets": 0,
                        "totalVolume": 0.0,
                        "stats": [],
                    }
                    exercises[exercise_key] = bucket

                bucket["totalSets"] += stat_set_count(stat)
                bucket["totalVolume"] += stat_volume(stat)
                bucket["stats"].append(stat)

    summary = []
    for day in sorted(days, reverse=True):
        groups = days[day]
        summary.append({
            "date": day_string(day),
            "muscleGroups": [
                {"name": name, "exercises": list(groups[name].values())}
                for name in sorted(groups, key=_muscle_group_rank)
            ],
        })
    return summary


async def get_workout_summary(
    collection,
    user_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Build the summary report for the caller over an inclusive day window."""
    start, end = resolve_window(start_date, end_date, now)
    sessions = await collection.find({"userId": user_id}).sort(SESSION_ORDER).to_list(length=None)
    summary = build_summary(sessions, start, end)

    logger.info(
        f"Built workout summary for user {user_id}: {len(summary)} day(s) "
        f"between {day_string(start)} and {day_string(end)}"
    )
    return summary

"""
Unit tests for the workout mutation service.

Covers:
- create_exercise_stats: normalization, set renumbering, defaults, validation
- update_exercise_stats: replace-if-same-day, else append
- upsert_stats_for_day / list_exercises helpers
"""

from datetime import datetime

import pytest
from bson import ObjectId

from schemas.workout import CreateExerciseStatsRequest, UpdateExerciseStatsRequest
from services import workout_service
from services.workout_service import (
    create_exercise_stats,
    get_session,
    list_exercises,
    normalize_muscle_group,
    update_exercise_stats,
    upsert_stats_for_day,
)
from tests.conftest import OTHER_USER_ID, TEST_USER_ID
from utils.exceptions import NotFoundError, ValidationError

pytestmark = pytest.mark.unit

DAY_ONE_MORNING = datetime(2024, 5, 1, 9, 30)
DAY_ONE_EVENING = datetime(2024, 5, 1, 19, 45)
DAY_TWO = datetime(2024, 5, 2, 7, 0)
DAY_THREE = datetime(2024, 5, 3, 21, 15)


def squat_request(**overrides) -> CreateExerciseStatsRequest:
    data = {
        "name": "Squat",
        "muscleGroup": "Legs",
        "sets": [{"reps": 10, "weight": 100}, {"reps": 8, "weight": 110}],
    }
    data.update(overrides)
    return CreateExerciseStatsRequest(**data)


def update_request(sets, **extra) -> UpdateExerciseStatsRequest:
    return UpdateExerciseStatsRequest(sets=sets, **extra)


async def create_squat(workouts, now=DAY_ONE_MORNING, user_id=TEST_USER_ID):
    session = await create_exercise_stats(workouts, user_id, squat_request(), now=now)
    return session, session["exercises"][-1]


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreateExerciseStats:

    @pytest.mark.asyncio
    async def test_normalizes_and_fills_defaults(self, workouts):
        session, exercise = await create_squat(workouts)

        assert session["userId"] == TEST_USER_ID
        assert exercise["name"] == "Squat"
        assert exercise["muscleGroup"] == "legs"
        assert isinstance(exercise["_id"], ObjectId)

        [stat] = exercise["stats"]
        assert stat["date"] == datetime(2024, 5, 1)
        assert stat["rating"] == 1
        assert stat["duration"] == 0
        assert stat["notes"] == ""

        first, second = stat["sets"]
        assert (first["setNumber"], first["reps"], first["weight"]) == (1, 10, 100)
        assert (second["setNumber"], second["reps"], second["weight"]) == (2, 8, 110)
        assert first["rest"] == 60 and second["rest"] == 60
        assert first["completed"] is True and second["completed"] is True

    @pytest.mark.asyncio
    async def test_persists_the_returned_session(self, workouts):
        session, _ = await create_squat(workouts)

        [stored] = workouts.get_all()
        assert stored["_id"] == session["_id"]
        assert stored["exercises"][0]["muscleGroup"] == "legs"
        assert stored["updatedAt"] == DAY_ONE_MORNING

    @pytest.mark.asyncio
    async def test_same_name_creates_a_second_exercise(self, workouts):
        await create_squat(workouts)
        session, _ = await create_squat(workouts, now=DAY_TWO)

        assert len(workouts.get_all()) == 1
        assert [e["name"] for e in session["exercises"]] == ["Squat", "Squat"]
        ids = {e["_id"] for e in session["exercises"]}
        assert len(ids) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [1, 4, 9])
    async def test_set_numbers_are_dense_in_submission_order(self, workouts, count):
        sets = [{"reps": reps} for reps in range(count, 0, -1)]
        session = await create_exercise_stats(
            workouts, TEST_USER_ID, squat_request(sets=sets), now=DAY_ONE_MORNING
        )

        stored_sets = session["exercises"][0]["stats"][0]["sets"]
        assert [s["setNumber"] for s in stored_sets] == list(range(1, count + 1))
        assert [s["reps"] for s in stored_sets] == [s["reps"] for s in sets]

    @pytest.mark.asyncio
    async def test_keeps_explicit_set_values(self, workouts):
        request = squat_request(
            sets=[{"reps": 5, "weight": 0, "rest": 0, "completed": False, "notes": "easy"}],
            notes="felt good",
            rating=5,
            duration=900,
        )
        session = await create_exercise_stats(workouts, TEST_USER_ID, request, now=DAY_ONE_MORNING)

        stat = session["exercises"][0]["stats"][0]
        assert stat["sets"][0] == {
            "setNumber": 1,
            "reps": 5,
            "weight": 0,
            "rest": 0,
            "completed": False,
            "notes": "easy",
        }
        assert (stat["notes"], stat["rating"], stat["duration"]) == ("felt good", 5, 900)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("overrides", [
        {"name": None},
        {"name": "   "},
        {"muscleGroup": None},
        {"sets": None},
        {"sets": []},
    ])
    async def test_missing_required_fields(self, workouts, overrides):
        with pytest.raises(ValidationError) as exc_info:
            await create_exercise_stats(workouts, TEST_USER_ID, squat_request(**overrides))

        assert exc_info.value.message == "Missing required fields: name, muscleGroup, or sets"
        assert workouts.get_all() == []

    @pytest.mark.asyncio
    async def test_set_without_reps_names_its_position(self, workouts):
        request = squat_request(sets=[{"reps": 10}, {"weight": 20}])

        with pytest.raises(ValidationError) as exc_info:
            await create_exercise_stats(workouts, TEST_USER_ID, request)

        assert exc_info.value.message == "Set 2 is missing required 'reps' field"
        assert workouts.get_all() == []

    @pytest.mark.asyncio
    async def test_rejects_non_positive_reps(self, workouts):
        with pytest.raises(ValidationError, match="Set 1 must have a positive 'reps' value"):
            await create_exercise_stats(workouts, TEST_USER_ID, squat_request(sets=[{"reps": 0}]))

    @pytest.mark.asyncio
    async def test_rejects_unknown_muscle_group(self, workouts):
        with pytest.raises(ValidationError, match="Invalid muscleGroup 'Wings'"):
            await create_exercise_stats(workouts, TEST_USER_ID, squat_request(muscleGroup="Wings"))

        assert workouts.get_all() == []

    @pytest.mark.asyncio
    async def test_muscle_group_is_normalized_once(self, workouts, monkeypatch):
        calls = []

        def spy(value):
            calls.append(value)
            return normalize_muscle_group(value)

        monkeypatch.setattr(workout_service, "normalize_muscle_group", spy)

        _, exercise = await create_squat(workouts)

        assert calls == ["Legs"]
        assert exercise["muscleGroup"] == "legs"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_rejects_rating_out_of_range(self, workouts, rating):
        with pytest.raises(ValidationError, match="rating must be between 1 and 5"):
            await create_exercise_stats(workouts, TEST_USER_ID, squat_request(rating=rating))

    @pytest.mark.asyncio
    async def test_sessions_are_partitioned_by_user(self, workouts):
        await create_squat(workouts, user_id=TEST_USER_ID)
        await create_squat(workouts, user_id=OTHER_USER_ID)

        owners = sorted(doc["userId"] for doc in workouts.get_all())
        assert owners == sorted([TEST_USER_ID, OTHER_USER_ID])


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


class TestUpdateExerciseStats:

    @pytest.mark.asyncio
    async def test_same_day_updates_replace_the_entry(self, workouts):
        _, exercise = await create_squat(workouts, now=DAY_ONE_MORNING)
        exercise_id = str(exercise["_id"])

        await update_exercise_stats(
            workouts, TEST_USER_ID, exercise_id,
            update_request([{"reps": 12, "weight": 80}], notes="first"),
            now=DAY_ONE_MORNING,
        )
        session = await update_exercise_stats(
            workouts, TEST_USER_ID, exercise_id,
            update_request([{"reps": 5, "weight": 50}], notes="second", rating=4, duration=300),
            now=DAY_ONE_EVENING,
        )

        [stat] = session["exercises"][0]["stats"]
        assert stat["date"] == datetime(2024, 5, 1)
        assert [(s["setNumber"], s["reps"], s["weight"]) for s in stat["sets"]] == [(1, 5, 50)]
        assert (stat["notes"], stat["rating"], stat["duration"]) == ("second", 4, 300)

        stored = workouts.get_all()[0]["exercises"][0]["stats"]
        assert len(stored) == 1

    @pytest.mark.asyncio
    async def test_new_days_append_one_entry_each(self, workouts):
        _, exercise = await create_squat(workouts, now=DAY_ONE_MORNING)
        exercise_id = str(exercise["_id"])

        for now in (DAY_TWO, DAY_THREE, DAY_THREE):
            session = await update_exercise_stats(
                workouts, TEST_USER_ID, exercise_id,
                update_request([{"reps": 6, "weight": 120}]),
                now=now,
            )

        dates = [stat["date"] for stat in session["exercises"][0]["stats"]]
        assert dates == [datetime(2024, 5, 1), datetime(2024, 5, 2), datetime(2024, 5, 3)]

    @pytest.mark.asyncio
    async def test_updates_only_the_addressed_exercise(self, workouts):
        _, squat = await create_squat(workouts)
        bench_request = squat_request(name="Bench Press", muscleGroup="chest")
        await create_exercise_stats(workouts, TEST_USER_ID, bench_request, now=DAY_ONE_MORNING)

        session = await update_exercise_stats(
            workouts, TEST_USER_ID, str(squat["_id"]),
            update_request([{"reps": 3, "weight": 140}]),
            now=DAY_TWO,
        )

        squat_stats, bench_stats = (e["stats"] for e in session["exercises"])
        assert len(squat_stats) == 2
        assert len(bench_stats) == 1

    @pytest.mark.asyncio
    async def test_unknown_exercise_is_not_found(self, workouts):
        await create_squat(workouts)

        with pytest.raises(NotFoundError, match="Exercise not found"):
            await update_exercise_stats(
                workouts, TEST_USER_ID, str(ObjectId()), update_request([{"reps": 1}])
            )

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, workouts):
        with pytest.raises(NotFoundError):
            await update_exercise_stats(
                workouts, TEST_USER_ID, "not-an-id", update_request([{"reps": 1}])
            )

    @pytest.mark.asyncio
    async def test_cannot_update_another_users_exercise(self, workouts):
        _, exercise = await create_squat(workouts, user_id=OTHER_USER_ID)

        with pytest.raises(NotFoundError):
            await update_exercise_stats(
                workouts, TEST_USER_ID, str(exercise["_id"]), update_request([{"reps": 1}])
            )

        stored = workouts.get_all()[0]["exercises"][0]["stats"]
        assert len(stored) == 1

    @pytest.mark.asyncio
    async def test_requires_sets(self, workouts):
        _, exercise = await create_squat(workouts)

        with pytest.raises(ValidationError, match="Sets array is required"):
            await update_exercise_stats(
                workouts, TEST_USER_ID, str(exercise["_id"]), update_request([])
            )

    @pytest.mark.asyncio
    async def test_validates_sets_before_writing(self, workouts):
        _, exercise = await create_squat(workouts)

        with pytest.raises(ValidationError, match="Set 1 is missing required 'reps' field"):
            await update_exercise_stats(
                workouts, TEST_USER_ID, str(exercise["_id"]),
                update_request([{"weight": 10}]),
                now=DAY_TWO,
            )

        stored = workouts.get_all()[0]["exercises"][0]["stats"]
        assert len(stored) == 1


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:

    def test_upsert_stats_for_day_replaces_in_place(self):
        stats = [
            {"date": datetime(2024, 5, 1), "notes": "a"},
            {"date": datetime(2024, 5, 2, 18, 0), "notes": "b"},
            {"date": datetime(2024, 5, 3), "notes": "c"},
        ]

        replaced = upsert_stats_for_day(stats, {"date": datetime(2024, 5, 2), "notes": "new"})

        assert replaced is True
        assert [s["notes"] for s in stats] == ["a", "new", "c"]

    def test_upsert_stats_for_day_appends_new_day(self):
        stats = [{"date": datetime(2024, 5, 1), "notes": "a"}]

        replaced = upsert_stats_for_day(stats, {"date": datetime(2024, 5, 4), "notes": "d"})

        assert replaced is False
        assert [s["notes"] for s in stats] == ["a", "d"]

    @pytest.mark.parametrize("raw, expected", [
        ("Chest", "chest"),
        ("  BACK ", "back"),
        ("cardio", "cardio"),
    ])
    def test_normalize_muscle_group(self, raw, expected):
        assert normalize_muscle_group(raw) == expected

    @pytest.mark.asyncio
    async def test_list_exercises(self, workouts):
        _, exercise = await create_squat(workouts)
        await update_exercise_stats(
            workouts, TEST_USER_ID, str(exercise["_id"]),
            update_request([{"reps": 5}]),
            now=DAY_THREE,
        )

        [row] = await list_exercises(workouts, TEST_USER_ID)

        assert row["id"] == exercise["_id"]
        assert row["name"] == "Squat"
        assert row["muscleGroup"] == "legs"
        assert row["statsCount"] == 2
        assert row["lastDate"] == datetime(2024, 5, 3)

    @pytest.mark.asyncio
    async def test_get_session_without_data(self, workouts):
        with pytest.raises(NotFoundError):
            await get_session(workouts, TEST_USER_ID)


# ---------------------------------------------------------------------------
# Users with several session documents
# ---------------------------------------------------------------------------


def session_document(name, created_at, user_id=TEST_USER_ID):
    return {
        "userId": user_id,
        "date": created_at,
        "createdAt": created_at,
        "updatedAt": created_at,
        "exercises": [{"_id": ObjectId(), "name": name, "muscleGroup": "legs", "stats": []}],
    }


class TestMultipleSessions:

    @pytest.mark.asyncio
    async def test_get_session_merges_exercises_oldest_first(self, workouts):
        workouts.seed([
            session_document("Lunge", datetime(2024, 6, 1)),
            session_document("Deadlift", datetime(2024, 1, 1)),
            session_document("Row", datetime(2024, 3, 1), user_id=OTHER_USER_ID),
        ])

        session = await get_session(workouts, TEST_USER_ID)

        assert session["createdAt"] == datetime(2024, 1, 1)
        assert [e["name"] for e in session["exercises"]] == ["Deadlift", "Lunge"]

    @pytest.mark.asyncio
    async def test_create_appends_to_oldest_document(self, workouts):
        workouts.seed([
            session_document("Lunge", datetime(2024, 6, 1)),
            session_document("Deadlift", datetime(2024, 1, 1)),
        ])

        await create_squat(workouts, now=DAY_TWO)

        by_created = {doc["createdAt"]: doc for doc in workouts.get_all()}
        assert [e["name"] for e in by_created[datetime(2024, 1, 1)]["exercises"]] == ["Deadlift", "Squat"]
        assert [e["name"] for e in by_created[datetime(2024, 6, 1)]["exercises"]] == ["Lunge"]

    @pytest.mark.asyncio
    async def test_update_finds_exercise_in_any_document(self, workouts):
        newer = session_document("Lunge", datetime(2024, 6, 1))
        exercise_id = newer["exercises"][0]["_id"]
        workouts.seed([session_document("Deadlift", datetime(2024, 1, 1)), newer])

        await update_exercise_stats(
            workouts, TEST_USER_ID, str(exercise_id), update_request([{"reps": 12}]), now=DAY_TWO,
        )

        session = await get_session(workouts, TEST_USER_ID)
        lunge = next(e for e in session["exercises"] if e["_id"] == exercise_id)
        assert len(lunge["stats"]) == 1

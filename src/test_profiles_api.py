"""Tests for exercise profile endpoints."""

from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base
from history import resolve_previous_sets
from history_queries import get_set_history
from models import ExerciseProfileDB, SetDB, UserDB, WorkoutDB

SQUAT_ID = uuid4()


@pytest.fixture
def fk_session():
    """Session on a fresh SQLite database that enforces foreign keys."""
    engine = create_engine("sqlite://", poolclass=StaticPool)

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()

    yield session

    session.close()
    engine.dispose()


def add_profile_set(db, user, profile_id, end_time, reps):
    """Add a one-set workout ending at end_time."""
    workout = WorkoutDB(
        user_id=user.id, start_time=end_time - timedelta(hours=1), end_time=end_time
    )
    db.add(workout)
    db.flush()
    user_set = SetDB(
        user_id=user.id,
        workout_id=workout.id,
        exercise_id=SQUAT_ID,
        profile_id=profile_id,
        reps=reps,
        weight=Decimal("100"),
        weight_unit="kg",
        created_at=end_time - timedelta(minutes=30),
    )
    db.add(user_set)
    db.flush()
    return user_set


def test_create_profile(client):
    response = client.post(
        "/api/v1/profiles", json={"exercise_id": str(SQUAT_ID), "name": "Barbell"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["exercise_id"] == str(SQUAT_ID)
    assert data["name"] == "Barbell"


def test_create_duplicate_profile(client):
    body = {"exercise_id": str(SQUAT_ID), "name": "Barbell"}
    client.post("/api/v1/profiles", json=body)

    response = client.post("/api/v1/profiles", json=body)
    assert response.status_code == 409


def test_list_profiles_filtered_by_exercise(client, db_session, test_user):
    other_exercise = uuid4()
    db_session.add_all(
        [
            ExerciseProfileDB(user_id=test_user.id, exercise_id=exercise, name=name)
            for exercise, name in [
                (SQUAT_ID, "Safety"),
                (SQUAT_ID, "Belt"),
                (other_exercise, "Cable"),
            ]
        ]
    )
    db_session.commit()

    response = client.get(f"/api/v1/profiles?exercise_id={SQUAT_ID}")
    assert response.status_code == 200
    assert [p["name"] for p in response.json()] == ["Belt", "Safety"]

    response = client.get("/api/v1/profiles")
    assert len(response.json()) == 3


def test_delete_profile(client, db_session, test_user):
    profile = ExerciseProfileDB(user_id=test_user.id, exercise_id=SQUAT_ID, name="Box")
    db_session.add(profile)
    db_session.commit()

    response = client.delete(f"/api/v1/profiles/{profile.id}")
    assert response.status_code == 204
    assert client.get("/api/v1/profiles").json() == []


def test_delete_profile_not_found(client):
    response = client.delete(f"/api/v1/profiles/{uuid4()}")
    assert response.status_code == 404
    assert response.json()["detail"] == "Profile not found"


def test_delete_profile_with_recorded_sets(client, db_session, test_user):
    profile = ExerciseProfileDB(user_id=test_user.id, exercise_id=SQUAT_ID, name="Pin")
    db_session.add(profile)
    db_session.flush()
    user_set = add_profile_set(
        db_session, test_user, profile.id, datetime(2024, 1, 5, 10), reps=8
    )
    db_session.commit()

    response = client.delete(f"/api/v1/profiles/{profile.id}")
    assert response.status_code == 409

    db_session.refresh(user_set)
    assert user_set.profile_id == profile.id
    assert len(client.get("/api/v1/profiles").json()) == 1


def test_stored_sets_keep_profile_when_delete_bypasses_api(fk_session):
    """The database refuses to orphan sets, so baselines stay per profile."""
    db = fk_session
    user = UserDB(firebase_uid="fk_uid", email="fk@example.com")
    db.add(user)
    db.flush()
    profile = ExerciseProfileDB(user_id=user.id, exercise_id=SQUAT_ID, name="Pin")
    db.add(profile)
    db.flush()
    profile_id = profile.id
    add_profile_set(db, user, None, datetime(2024, 1, 1, 10), reps=5)
    add_profile_set(db, user, profile_id, datetime(2024, 1, 5, 10), reps=99)
    db.commit()

    db.delete(profile)
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    previous = resolve_previous_sets(get_set_history(db, user.id))
    assert {key: [s.reps for s in sets] for key, sets in previous.items()} == {
        f"{SQUAT_ID}_default": [5],
        f"{SQUAT_ID}_{profile_id}": [99],
    }

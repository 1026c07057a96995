#!/usr/bin/env python3
"""Script to populate the database with test gyms, profiles and workouts."""

import os
import sys
import uuid
from datetime import datetime, timedelta
from decimal import Decimal

from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

# Add src to path so we can import our modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from database import SessionLocal
from history import resolve_previous_sets
from history_queries import get_set_history
from models import (
    ExerciseProfileDB,
    GymDB,
    GymProfileMappingDB,
    SetDB,
    UserDB,
    WorkoutDB,
)

# Load environment variables
load_dotenv()

# Fixed exercise IDs so repeated runs line up with the app's exercise catalog
SQUAT_ID = uuid.UUID("5a1c7e42-0000-4000-8000-000000000001")
BENCH_ID = uuid.UUID("5a1c7e42-0000-4000-8000-000000000002")
LUNGE_ID = uuid.UUID("5a1c7e42-0000-4000-8000-000000000003")


def add_workout(db, user, start, exercises):
    """Add a workout with sets.

    exercises is a list of (exercise_id, profile, [(reps, weight, side), ...]).
    Sets are spaced three minutes apart in the order given.
    """
    workout = WorkoutDB(
        user_id=user.id,
        name=f"Workout {start:%a %d %b}",
        start_time=start,
        end_time=start + timedelta(minutes=75),
        privacy="private",
        kind="strength",
    )
    db.add(workout)
    db.flush()  # Get the workout ID

    created_at = start
    for exercise_id, profile, sets in exercises:
        for reps, weight, side in sets:
            created_at += timedelta(minutes=3)
            db.add(
                SetDB(
                    user_id=user.id,
                    workout_id=workout.id,
                    exercise_id=exercise_id,
                    profile_id=profile.id if profile else None,
                    reps=reps,
                    weight=Decimal(weight),
                    weight_unit="kg",
                    created_at=created_at,
                    side=side,
                )
            )
    return workout


def create_test_data():
    """Create gyms, profiles and a few weeks of workouts for the first user."""
    db = SessionLocal()
    try:
        test_user = db.query(UserDB).first()
        if not test_user:
            print("No users found. Please create a test user first.")
            print("Use the Firebase Auth Emulator to create: test@example.com")
            return

        # Clear existing data for this user
        for model in (SetDB, WorkoutDB, GymProfileMappingDB, GymDB, ExerciseProfileDB):
            db.query(model).filter(model.user_id == test_user.id).delete()
        db.commit()
        print(f"Cleared existing data for user {test_user.email}")

        home = GymDB(user_id=test_user.id, name="Home")
        club = GymDB(
            user_id=test_user.id, name="Club", latitude=52.52, longitude=13.405
        )
        safety_bar = ExerciseProfileDB(
            user_id=test_user.id, exercise_id=SQUAT_ID, name="Safety bar"
        )
        db.add_all([home, club, safety_bar])
        db.flush()
        db.add(
            GymProfileMappingDB(
                user_id=test_user.id,
                gym_id=club.id,
                exercise_id=SQUAT_ID,
                profile_id=safety_bar.id,
            )
        )

        today = datetime.now().replace(hour=9, minute=0, second=0, microsecond=0)
        for weeks_ago in range(3, 0, -1):
            day = today - timedelta(weeks=weeks_ago)
            load = 100 - weeks_ago * 5
            add_workout(
                db,
                test_user,
                day,
                [
                    (SQUAT_ID, None, [(5, str(load), None)] * 3),
                    (BENCH_ID, None, [(8, str(load - 30), None)] * 3),
                ],
            )
            add_workout(
                db,
                test_user,
                day + timedelta(days=3),
                [
                    (SQUAT_ID, safety_bar, [(8, str(load - 20), None)] * 3),
                    (LUNGE_ID, None, [(10, "16", "L"), (10, "16", "R")] * 2),
                ],
            )
        db.commit()

        previous_sets = resolve_previous_sets(get_set_history(db, test_user.id))
        print("\nPrevious sets now served by /api/v1/sync/bootstrap:")
        for key, sets in previous_sets.items():
            summary = ", ".join(
                f"{s.reps}x{s.weight}{s.weight_unit}{s.side or ''}" for s in sets
            )
            print(f"  - {key}: {summary}")

        print("\nDatabase populated successfully!")

    except SQLAlchemyError as e:
        print(f"Error populating database: {e}")
        db.rollback()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_test_data()

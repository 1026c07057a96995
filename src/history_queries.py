"""Database queries feeding the workout history functions in history.py."""

from typing import List
from uuid import UUID

from sqlalchemy.orm import Session

from history import SetHistoryRow
from models import SetDB, WorkoutDB
from typedefs import UserSet


def get_workout_sets(db: Session, workout_id: UUID) -> List[UserSet]:
    """All sets of a workout, oldest first."""
    rows = (
        db.query(SetDB)
        .filter(SetDB.workout_id == workout_id)
        .order_by(SetDB.created_at.asc(), SetDB.id.asc())
        .all()
    )
    return [UserSet.model_validate(row) for row in rows]


def get_set_history(db: Session, user_id: UUID) -> List[SetHistoryRow]:
    """Every set the user has recorded, paired with its workout's end_time.

    Both tables are read in a single statement so the result reflects one
    snapshot of the user's workouts.
    """
    rows = (
        db.query(SetDB, WorkoutDB.end_time)
        .join(WorkoutDB, SetDB.workout_id == WorkoutDB.id)
        .filter(SetDB.user_id == user_id)
        .order_by(SetDB.created_at.asc(), SetDB.id.asc())
        .all()
    )
    return [(UserSet.model_validate(s), end_time) for s, end_time in rows]

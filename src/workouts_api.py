"""REST API endpoints for reading and deleting workouts."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import AuthenticatedUser, get_or_create_user
from database import get_db
from history import group_sets_by_exercise
from history_queries import get_workout_sets
from models import WorkoutDB
from typedefs import Workout, WorkoutWithSets

router = APIRouter(prefix="/api/v1/workouts", tags=["workouts"])


def get_owned_workout(db: Session, workout_id: UUID, user_id: UUID) -> WorkoutDB:
    """Load a workout belonging to the user.

    Raises:
        HTTPException: 404 if the workout doesn't exist or belongs to
            someone else
    """
    workout = (
        db.query(WorkoutDB)
        .filter(WorkoutDB.id == workout_id, WorkoutDB.user_id == user_id)
        .first()
    )
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


@router.get("", response_model=List[Workout])
def list_workouts(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> List[Workout]:
    """List the authenticated user's workouts, most recently finished first.

    Args:
        skip: Number of workouts to skip (default: 0)
        limit: Maximum number of workouts to return (default: 100)
        db: Database session
        user: Authenticated user

    Returns:
        List of Workout objects without their sets
    """
    workouts = (
        db.query(WorkoutDB)
        .filter(WorkoutDB.user_id == user.user_id)
        .order_by(WorkoutDB.end_time.desc(), WorkoutDB.id.asc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return [Workout.model_validate(w) for w in workouts]


@router.get("/{workout_id}", response_model=WorkoutWithSets)
def get_workout(
    workout_id: UUID,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> WorkoutWithSets:
    """Get a workout with its sets grouped by exercise and profile.

    Groups are ordered by when each exercise was first performed in the
    workout.
    """
    workout = get_owned_workout(db, workout_id, user.user_id)
    sets = get_workout_sets(db, workout.id)

    return WorkoutWithSets(
        workout=Workout.model_validate(workout),
        exercises=group_sets_by_exercise(sets),
    )


@router.delete("/{workout_id}", status_code=204)
def delete_workout(
    workout_id: UUID,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> None:
    """Delete a workout and its sets (must belong to authenticated user)."""
    workout = get_owned_workout(db, workout_id, user.user_id)
    db.delete(workout)
    db.commit()

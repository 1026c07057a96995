"""REST API endpoints for syncing the offline app with the server."""

import datetime
import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import AuthenticatedUser, get_or_create_user
from database import get_db
from history import ExerciseGroupKey, previous_sets_for_exercises, resolve_previous_sets
from history_queries import get_set_history
from models import ExerciseProfileDB, GymDB, GymProfileMappingDB, SetDB, WorkoutDB
from typedefs import (
    BootstrapGymProfileMapping,
    BootstrapResponse,
    ExerciseProfile,
    Gym,
    SyncWorkoutRequest,
    SyncWorkoutResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sync", tags=["sync"])


def to_naive_utc(value: datetime.datetime) -> datetime.datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(datetime.UTC).replace(tzinfo=None)


def validate_sync_request(
    db: Session, request: SyncWorkoutRequest, user_id: UUID
) -> None:
    """Reject sync payloads that can't be stored as-is.

    Raises:
        HTTPException: 400 if end_time precedes start_time, or a profile
            doesn't exist, belongs to another user or another exercise
    """
    if to_naive_utc(request.end_time) < to_naive_utc(request.start_time):
        raise HTTPException(
            status_code=400, detail="Workout end_time is before start_time"
        )

    profile_ids = {ex.profile_id for ex in request.exercises if ex.profile_id}
    if not profile_ids:
        return

    profiles = (
        db.query(ExerciseProfileDB)
        .filter(
            ExerciseProfileDB.id.in_(profile_ids),
            ExerciseProfileDB.user_id == user_id,
        )
        .all()
    )
    exercise_by_profile = {p.id: p.exercise_id for p in profiles}

    for exercise in request.exercises:
        if exercise.profile_id is None:
            continue
        if exercise_by_profile.get(exercise.profile_id) != exercise.exercise_id:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"Profile {exercise.profile_id} not found for exercise "
                    f"{exercise.exercise_id}"
                ),
            )


@router.post("/workout", response_model=SyncWorkoutResponse)
def sync_workout(
    request: SyncWorkoutRequest,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> SyncWorkoutResponse:
    """Store a workout completed offline, with all of its sets.

    The workout and its sets are written in one transaction. The response
    carries the updated previous sets for every exercise + profile used in
    the workout so the app can refresh its local copy.

    Raises:
        400: Invalid times or unknown profile
    """
    validate_sync_request(db, request, user.user_id)

    workout = WorkoutDB(
        user_id=user.user_id,
        name=request.name,
        start_time=to_naive_utc(request.start_time),
        end_time=to_naive_utc(request.end_time),
        privacy=request.privacy,
        gym_location=request.gym_location,
        kind=request.kind,
    )
    db.add(workout)
    db.flush()  # Get the workout ID

    keys: List[ExerciseGroupKey] = []
    set_count = 0
    for exercise in request.exercises:
        keys.append(ExerciseGroupKey(exercise.exercise_id, exercise.profile_id))
        for s in exercise.sets:
            db.add(
                SetDB(
                    user_id=user.user_id,
                    workout_id=workout.id,
                    exercise_id=exercise.exercise_id,
                    profile_id=exercise.profile_id,
                    reps=s.reps,
                    weight=s.weight,
                    weight_unit=s.weight_unit,
                    created_at=to_naive_utc(s.created_at),
                    side=s.side,
                )
            )
            set_count += 1

    db.commit()
    db.refresh(workout)
    logger.info(
        "Synced workout %s for user %s: %d exercises, %d sets",
        workout.id,
        user.user_id,
        len(request.exercises),
        set_count,
    )

    history = get_set_history(db, user.user_id)
    return SyncWorkoutResponse(
        workout_id=workout.id,
        previous_sets=previous_sets_for_exercises(history, keys),
    )


@router.get("/bootstrap", response_model=BootstrapResponse)
def get_bootstrap(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> BootstrapResponse:
    """Get all user data needed to populate local storage on app startup.

    Returns gyms, profiles, gym profile mappings, and the previous sets for
    every exercise + profile the user has trained.
    """
    gyms = (
        db.query(GymDB)
        .filter(GymDB.user_id == user.user_id)
        .order_by(GymDB.created_at.asc())
        .all()
    )
    profiles = (
        db.query(ExerciseProfileDB)
        .filter(ExerciseProfileDB.user_id == user.user_id)
        .order_by(ExerciseProfileDB.exercise_id, ExerciseProfileDB.name.asc())
        .all()
    )
    mappings = (
        db.query(GymProfileMappingDB)
        .filter(GymProfileMappingDB.user_id == user.user_id)
        .all()
    )
    previous_sets = resolve_previous_sets(get_set_history(db, user.user_id))
    logger.debug(
        "Bootstrap for user %s: %d gyms, %d profiles, %d previous-set keys",
        user.user_id,
        len(gyms),
        len(profiles),
        len(previous_sets),
    )

    return BootstrapResponse(
        gyms=[Gym.model_validate(g) for g in gyms],
        profiles=[ExerciseProfile.model_validate(p) for p in profiles],
        gym_profile_mappings=[
            BootstrapGymProfileMapping.model_validate(m) for m in mappings
        ],
        previous_sets=previous_sets,
    )

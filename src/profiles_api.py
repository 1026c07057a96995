"""REST API endpoints for exercise profiles."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import AuthenticatedUser, get_or_create_user
from database import get_db
from models import ExerciseProfileDB, SetDB
from typedefs import CreateProfileBody, ExerciseProfile

router = APIRouter(prefix="/api/v1/profiles", tags=["profiles"])


@router.get("", response_model=List[ExerciseProfile])
def list_profiles(
    exercise_id: UUID | None = None,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> List[ExerciseProfile]:
    """List the user's exercise profiles, optionally for one exercise."""
    query = db.query(ExerciseProfileDB).filter(
        ExerciseProfileDB.user_id == user.user_id
    )
    if exercise_id is not None:
        query = query.filter(ExerciseProfileDB.exercise_id == exercise_id)

    profiles = query.order_by(
        ExerciseProfileDB.exercise_id, ExerciseProfileDB.name.asc()
    ).all()
    return [ExerciseProfile.model_validate(p) for p in profiles]


@router.post("", response_model=ExerciseProfile, status_code=201)
def create_profile(
    body: CreateProfileBody,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> ExerciseProfile:
    """Create a profile for an exercise.

    Raises:
        409: A profile with this name already exists for the exercise
    """
    existing = (
        db.query(ExerciseProfileDB)
        .filter(
            ExerciseProfileDB.user_id == user.user_id,
            ExerciseProfileDB.exercise_id == body.exercise_id,
            ExerciseProfileDB.name == body.name,
        )
        .first()
    )
    if existing:
        raise HTTPException(status_code=409, detail="Profile already exists")

    profile = ExerciseProfileDB(
        user_id=user.user_id, exercise_id=body.exercise_id, name=body.name
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return ExerciseProfile.model_validate(profile)


@router.delete("/{profile_id}", status_code=204)
def delete_profile(
    profile_id: UUID,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> None:
    """Delete a profile (must belong to authenticated user).

    Raises:
        404: Profile not found
        409: Recorded sets still reference the profile
    """
    profile = (
        db.query(ExerciseProfileDB)
        .filter(
            ExerciseProfileDB.id == profile_id,
            ExerciseProfileDB.user_id == user.user_id,
        )
        .first()
    )
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")

    # Recorded sets are history; they keep their profile for good
    in_use = db.query(SetDB.id).filter(SetDB.profile_id == profile.id).first()
    if in_use:
        raise HTTPException(
            status_code=409, detail="Profile has recorded sets and cannot be deleted"
        )

    db.delete(profile)
    db.commit()

"""REST API endpoints for gyms and their exercise profile mappings."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth import AuthenticatedUser, get_or_create_user
from database import get_db
from models import ExerciseProfileDB, GymDB, GymProfileMappingDB, utcnow
from typedefs import (
    CreateGymBody,
    Gym,
    GymProfileMappingResponse,
    SetGymProfileMappingBody,
    UpdateGymBody,
)

router = APIRouter(prefix="/api/v1/gyms", tags=["gyms"])


def get_owned_gym(db: Session, gym_id: UUID, user_id: UUID) -> GymDB:
    gym = db.query(GymDB).filter(GymDB.id == gym_id, GymDB.user_id == user_id).first()
    if not gym:
        raise HTTPException(status_code=404, detail="Gym not found")
    return gym


@router.get("", response_model=List[Gym])
def list_gyms(
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> List[Gym]:
    """List all gyms for the authenticated user, oldest first."""
    gyms = (
        db.query(GymDB)
        .filter(GymDB.user_id == user.user_id)
        .order_by(GymDB.created_at.asc())
        .all()
    )
    return [Gym.model_validate(g) for g in gyms]


@router.post("", response_model=Gym, status_code=201)
def create_gym(
    body: CreateGymBody,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> Gym:
    """Create a new gym for the authenticated user."""
    gym = GymDB(
        user_id=user.user_id,
        name=body.name,
        latitude=body.latitude,
        longitude=body.longitude,
    )
    db.add(gym)
    db.commit()
    db.refresh(gym)
    return Gym.model_validate(gym)


@router.put("/{gym_id}", response_model=Gym)
def update_gym(
    gym_id: UUID,
    body: UpdateGymBody,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> Gym:
    """Rename a gym (must belong to authenticated user)."""
    gym = get_owned_gym(db, gym_id, user.user_id)
    gym.name = body.name
    db.commit()
    db.refresh(gym)
    return Gym.model_validate(gym)


@router.delete("/{gym_id}", status_code=204)
def delete_gym(
    gym_id: UUID,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> None:
    """Delete a gym and its profile mappings."""
    gym = get_owned_gym(db, gym_id, user.user_id)
    db.delete(gym)
    db.commit()


@router.get(
    "/{gym_id}/profile-mappings", response_model=List[GymProfileMappingResponse]
)
def get_profile_mappings(
    gym_id: UUID,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> List[GymProfileMappingResponse]:
    """Get the exercise -> profile mappings for a gym."""
    get_owned_gym(db, gym_id, user.user_id)
    mappings = (
        db.query(GymProfileMappingDB)
        .filter(
            GymProfileMappingDB.user_id == user.user_id,
            GymProfileMappingDB.gym_id == gym_id,
        )
        .all()
    )
    return [GymProfileMappingResponse.model_validate(m) for m in mappings]


@router.put("/{gym_id}/profile-mappings", response_model=GymProfileMappingResponse)
def set_profile_mapping(
    gym_id: UUID,
    body: SetGymProfileMappingBody,
    db: Session = Depends(get_db),
    user: AuthenticatedUser = Depends(get_or_create_user),
) -> GymProfileMappingResponse:
    """Set which profile is used for an exercise at a gym.

    Replaces any existing mapping for the same exercise at this gym.

    Raises:
        404: Gym not found
        400: Profile doesn't exist or is for a different exercise
    """
    get_owned_gym(db, gym_id, user.user_id)

    profile = (
        db.query(ExerciseProfileDB)
        .filter(
            ExerciseProfileDB.id == body.profile_id,
            ExerciseProfileDB.user_id == user.user_id,
        )
        .first()
    )
    if not profile or profile.exercise_id != body.exercise_id:
        raise HTTPException(
            status_code=400, detail="Profile not found for this exercise"
        )

    mapping = (
        db.query(GymProfileMappingDB)
        .filter(
            GymProfileMappingDB.user_id == user.user_id,
            GymProfileMappingDB.gym_id == gym_id,
            GymProfileMappingDB.exercise_id == body.exercise_id,
        )
        .first()
    )
    if mapping:
        mapping.profile_id = body.profile_id
        mapping.updated_at = utcnow()
    else:
        mapping = GymProfileMappingDB(
            user_id=user.user_id,
            gym_id=gym_id,
            exercise_id=body.exercise_id,
            profile_id=body.profile_id,
        )
        db.add(mapping)

    db.commit()
    db.refresh(mapping)
    return GymProfileMappingResponse.model_validate(mapping)

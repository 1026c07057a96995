import datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

Side = Literal["L", "R"]


class UserSet(BaseModel):
    """A single performed set as stored for a user."""

    id: UUID
    user_id: UUID
    exercise_id: UUID
    workout_id: UUID
    profile_id: Optional[UUID] = None  # None = default variant of the exercise
    reps: int
    weight: Decimal
    weight_unit: str
    created_at: datetime.datetime
    side: Optional[Side] = None

    class Config:
        from_attributes = True
        frozen = True


class Workout(BaseModel):
    id: UUID
    user_id: UUID
    name: Optional[str] = None
    start_time: datetime.datetime
    end_time: datetime.datetime
    privacy: str
    gym_location: Optional[str] = None
    kind: str

    class Config:
        from_attributes = True


class WorkoutExerciseGroup(BaseModel):
    """The sets of one exercise + profile within a workout.

    is_unilateral is inferred: it is true when any set carries a side.
    """

    exercise_id: UUID
    profile_id: Optional[UUID] = None
    is_unilateral: bool = False
    sets: List[UserSet] = []


class WorkoutWithSets(BaseModel):
    workout: Workout
    exercises: List[WorkoutExerciseGroup]


class BootstrapPreviousSet(BaseModel):
    """Values of a previously performed set, used to pre-fill a new one."""

    reps: int
    weight: Decimal
    weight_unit: str
    side: Optional[Side] = None


class PreviousSetData(BaseModel):
    """Previous sets for one exercise + profile."""

    exercise_id: UUID
    profile_id: Optional[UUID] = None
    sets: List[BootstrapPreviousSet]


# ========== Gyms and profiles ==========


class Gym(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class CreateGymBody(BaseModel):
    name: str = Field(min_length=1)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)


class UpdateGymBody(BaseModel):
    name: str = Field(min_length=1)


class SetGymProfileMappingBody(BaseModel):
    exercise_id: UUID
    profile_id: UUID


class GymProfileMappingResponse(BaseModel):
    exercise_id: UUID
    profile_id: UUID

    class Config:
        from_attributes = True


class ExerciseProfile(BaseModel):
    id: UUID
    user_id: UUID
    exercise_id: UUID
    name: str
    created_at: datetime.datetime

    class Config:
        from_attributes = True


class CreateProfileBody(BaseModel):
    exercise_id: UUID
    name: str = Field(min_length=1)


# ========== Sync ==========


class SyncSet(BaseModel):
    reps: int = Field(ge=0)
    weight: Decimal
    weight_unit: str
    created_at: datetime.datetime
    side: Optional[Side] = None  # Side for unilateral exercises


class SyncExercise(BaseModel):
    exercise_id: UUID
    profile_id: Optional[UUID] = None
    sets: List[SyncSet]


class SyncWorkoutRequest(BaseModel):
    """Request to sync a completed workout from offline storage."""

    name: Optional[str] = None
    start_time: datetime.datetime
    end_time: datetime.datetime
    privacy: str
    gym_location: Optional[str] = None
    exercises: List[SyncExercise]
    kind: str = "strength"


class SyncWorkoutResponse(BaseModel):
    workout_id: UUID
    # Updated previous sets for the exercises used in the synced workout
    previous_sets: List[PreviousSetData]


class BootstrapGymProfileMapping(BaseModel):
    gym_id: UUID
    exercise_id: UUID
    profile_id: UUID

    class Config:
        from_attributes = True


class BootstrapResponse(BaseModel):
    """All user data needed to populate local storage on app start."""

    gyms: List[Gym]
    profiles: List[ExerciseProfile]
    gym_profile_mappings: List[BootstrapGymProfileMapping]
    # Keyed by "{exercise_id}_{profile_id}" or "{exercise_id}_default"
    previous_sets: Dict[str, List[BootstrapPreviousSet]]

"""SQLAlchemy database models."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from database import Base


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (all timestamp columns are UTC)."""
    return datetime.now(UTC).replace(tzinfo=None)


class UserDB(Base):
    """Database model for users, linked to a Firebase account."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    firebase_uid = Column(String, nullable=False, unique=True, index=True)
    email = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<UserDB(id={self.id}, email={self.email})>"


class GymDB(Base):
    """Database model for a gym the user trains at."""

    __tablename__ = "user_gyms"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    profile_mappings = relationship(
        "GymProfileMappingDB",
        back_populates="gym",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_user_gyms_user_id", "user_id"),)

    def __repr__(self):
        return f"<GymDB(id={self.id}, name={self.name})>"


class ExerciseProfileDB(Base):
    """Database model for exercise profiles.

    A profile is a user-defined variant of an exercise, e.g. "Dumbbell" or
    "Cable" for a fly. Sets without a profile belong to the exercise's
    default variant.
    """

    __tablename__ = "exercise_profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    exercise_id = Column(Uuid, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "exercise_id", "name", name="uq_profile_exercise_name"
        ),
    )

    def __repr__(self):
        return f"<ExerciseProfileDB(id={self.id}, name={self.name})>"


class GymProfileMappingDB(Base):
    """Database model for the profile a user picks for an exercise at a gym.

    At most one mapping exists per (user, gym, exercise).
    """

    __tablename__ = "user_gym_profile_mappings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    gym_id = Column(
        Uuid, ForeignKey("user_gyms.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id = Column(Uuid, nullable=False)
    profile_id = Column(
        Uuid, ForeignKey("exercise_profiles.id", ondelete="CASCADE"), nullable=False
    )
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    gym = relationship("GymDB", back_populates="profile_mappings")

    __table_args__ = (
        UniqueConstraint(
            "user_id", "gym_id", "exercise_id", name="uq_gym_profile_mapping"
        ),
    )

    def __repr__(self):
        return (
            f"<GymProfileMappingDB(gym_id={self.gym_id}, "
            f"exercise_id={self.exercise_id}, profile_id={self.profile_id})>"
        )


class WorkoutDB(Base):
    """Database model for a completed workout.

    Workouts arrive finished from the offline sync path, so end_time is
    always set.
    """

    __tablename__ = "workouts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String, nullable=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    privacy = Column(String, nullable=False, default="private")
    gym_location = Column(String, nullable=True)
    kind = Column(String, nullable=False, default="strength")

    sets = relationship(
        "SetDB",
        order_by="SetDB.created_at",
        back_populates="workout",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_workouts_user_end_time", "user_id", "end_time"),)

    def __repr__(self):
        return f"<WorkoutDB(id={self.id}, end_time={self.end_time})>"


class SetDB(Base):
    """Database model for a single performed set.

    Sets are written once by the sync path and never modified.
    """

    __tablename__ = "user_sets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    exercise_id = Column(Uuid, nullable=False)
    workout_id = Column(
        Uuid, ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False
    )
    profile_id = Column(Uuid, ForeignKey("exercise_profiles.id"), nullable=True)
    reps = Column(Integer, nullable=False)
    weight = Column(Numeric(10, 2), nullable=False)
    weight_unit = Column(String, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    side = Column(String(1), nullable=True)  # "L", "R" or NULL for bilateral

    workout = relationship("WorkoutDB", back_populates="sets")

    __table_args__ = (
        Index("ix_user_sets_workout_created", "workout_id", "created_at"),
        Index("ix_user_sets_user_exercise", "user_id", "exercise_id", "profile_id"),
        CheckConstraint("side IN ('L', 'R')", name="ck_user_sets_side"),
    )

    def __repr__(self):
        return (
            f"<SetDB(id={self.id}, exercise_id={self.exercise_id}, "
            f"reps={self.reps}, weight={self.weight})>"
        )

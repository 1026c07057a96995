"""create lift log tables

Revision ID: 4f2a9c1e7b30
Revises:
Create Date: 2026-01-12 19:04:11.318204

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f2a9c1e7b30"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("firebase_uid", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        op.f("ix_users_firebase_uid"), "users", ["firebase_uid"], unique=True
    )

    op.create_table(
        "user_gyms",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_gyms_user_id", "user_gyms", ["user_id"])

    op.create_table(
        "exercise_profiles",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("exercise_id", UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "user_id", "exercise_id", "name", name="uq_profile_exercise_name"
        ),
    )

    op.create_table(
        "user_gym_profile_mappings",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "gym_id",
            UUID(as_uuid=True),
            sa.ForeignKey("user_gyms.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("exercise_id", UUID(as_uuid=True), nullable=False),
        sa.Column(
            "profile_id",
            UUID(as_uuid=True),
            sa.ForeignKey("exercise_profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "user_id", "gym_id", "exercise_id", name="uq_gym_profile_mapping"
        ),
    )

    op.create_table(
        "workouts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("privacy", sa.String(), nullable=False),
        sa.Column("gym_location", sa.String(), nullable=True),
        sa.Column("kind", sa.String(), nullable=False),
    )
    # Previous-set lookups rank a user's workouts by end_time
    op.create_index("ix_workouts_user_end_time", "workouts", ["user_id", "end_time"])

    op.create_table(
        "user_sets",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("exercise_id", UUID(as_uuid=True), nullable=False),
        sa.Column(
            "workout_id",
            UUID(as_uuid=True),
            sa.ForeignKey("workouts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "profile_id",
            UUID(as_uuid=True),
            sa.ForeignKey("exercise_profiles.id"),
            nullable=True,
        ),
        sa.Column("reps", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Numeric(10, 2), nullable=False),
        sa.Column("weight_unit", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("side", sa.String(1), nullable=True),
        sa.CheckConstraint("side IN ('L', 'R')", name="ck_user_sets_side"),
    )
    op.create_index(
        "ix_user_sets_workout_created", "user_sets", ["workout_id", "created_at"]
    )
    op.create_index(
        "ix_user_sets_user_exercise",
        "user_sets",
        ["user_id", "exercise_id", "profile_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_user_sets_user_exercise", table_name="user_sets")
    op.drop_index("ix_user_sets_workout_created", table_name="user_sets")
    op.drop_table("user_sets")
    op.drop_index("ix_workouts_user_end_time", table_name="workouts")
    op.drop_table("workouts")
    op.drop_table("user_gym_profile_mappings")
    op.drop_table("exercise_profiles")
    op.drop_index("ix_user_gyms_user_id", table_name="user_gyms")
    op.drop_table("user_gyms")
    op.drop_index(op.f("ix_users_firebase_uid"), table_name="users")
    op.drop_table("users")

"""Workout history reconciliation.

Two pure transformations over sets already loaded from the database:

* ``group_sets_by_exercise`` turns the flat, time-ordered set list of one
  workout into per exercise + profile groups.
* ``resolve_previous_sets`` picks, for every exercise + profile a user has
  trained, the sets of the most recent workout containing it. These are the
  "previous sets" the app uses to pre-fill a new workout.

Neither function touches the database or any shared state.
"""

import datetime
from typing import (
    Dict,
    Iterable,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Tuple,
)
from uuid import UUID

from typedefs import (
    BootstrapPreviousSet,
    PreviousSetData,
    UserSet,
    WorkoutExerciseGroup,
)

# Stands in for a missing profile when partitioning; never exposed
NIL_PROFILE_ID = UUID(int=0)

DEFAULT_PROFILE_SUFFIX = "default"

# A set paired with the end_time of the workout it belongs to
SetHistoryRow = Tuple[UserSet, Optional[datetime.datetime]]


class ExerciseGroupKey(NamedTuple):
    """Identity of an exercise variant: (exercise_id, profile_id or None)."""

    exercise_id: UUID
    profile_id: Optional[UUID]

    @classmethod
    def for_set(cls, user_set: UserSet) -> "ExerciseGroupKey":
        # The NIL UUID is reserved for the default profile, so a profile_id
        # equal to it is read as no profile at all
        profile_id = user_set.profile_id
        if profile_id == NIL_PROFILE_ID:
            profile_id = None
        return cls(user_set.exercise_id, profile_id)

    def partition_id(self) -> Tuple[UUID, UUID]:
        return (self.exercise_id, self.profile_id or NIL_PROFILE_ID)

    def as_string(self) -> str:
        """Render as "{exercise_id}_{profile_id}" or "{exercise_id}_default"."""
        suffix = (
            str(self.profile_id)
            if self.profile_id is not None
            else DEFAULT_PROFILE_SUFFIX
        )
        return f"{self.exercise_id}_{suffix}"


def group_sets_by_exercise(sets: Iterable[UserSet]) -> List[WorkoutExerciseGroup]:
    """Group a workout's sets by exercise and profile.

    Groups come out in the order their key first appears in ``sets``, and
    each group keeps its sets in input order. ``sets`` must already be sorted
    by created_at ascending; it is not re-sorted or checked here, so unsorted
    input simply yields groups in whatever order the keys first show up.

    A group is unilateral if any of its sets has a side.
    """
    key_to_index: Dict[ExerciseGroupKey, int] = {}
    groups: List[WorkoutExerciseGroup] = []

    for user_set in sets:
        key = ExerciseGroupKey.for_set(user_set)
        index = key_to_index.get(key)
        if index is None:
            index = len(groups)
            key_to_index[key] = index
            groups.append(
                WorkoutExerciseGroup(
                    exercise_id=key.exercise_id,
                    profile_id=key.profile_id,
                    is_unilateral=False,
                    sets=[],
                )
            )

        group = groups[index]
        if user_set.side is not None:
            group.is_unilateral = True
        group.sets.append(user_set)

    return groups


def _recency(end_time: Optional[datetime.datetime]) -> Tuple:
    # A missing end_time sorts below every real timestamp
    return (end_time is not None, end_time)


def _dense_ranks(end_times: Iterable[Optional[datetime.datetime]]) -> Dict[Tuple, int]:
    """Map each distinct end_time to its dense rank, latest first (rank 1)."""
    distinct = sorted({_recency(t) for t in end_times}, reverse=True)
    return {recency: rank for rank, recency in enumerate(distinct, start=1)}


def to_previous_set(user_set: UserSet) -> BootstrapPreviousSet:
    return BootstrapPreviousSet(
        reps=user_set.reps,
        weight=user_set.weight,
        weight_unit=user_set.weight_unit,
        side=user_set.side,
    )


def latest_workout_sets(
    rows: Iterable[SetHistoryRow],
) -> Dict[ExerciseGroupKey, List[UserSet]]:
    """Keep only the sets of each key's most recent workout(s).

    Within each exercise + profile partition, workouts are dense-ranked by
    end_time descending and every set whose workout has rank 1 survives.
    Several workouts sharing the latest end_time all survive and their sets
    are merged. Survivors are ordered by created_at ascending, equal
    timestamps keeping their input order.
    """
    partitions: Dict[Tuple[UUID, UUID], List[SetHistoryRow]] = {}
    keys: Dict[Tuple[UUID, UUID], ExerciseGroupKey] = {}
    for user_set, end_time in rows:
        key = ExerciseGroupKey.for_set(user_set)
        partition_id = key.partition_id()
        keys.setdefault(partition_id, key)
        partitions.setdefault(partition_id, []).append((user_set, end_time))

    latest: Dict[ExerciseGroupKey, List[UserSet]] = {}
    for partition_id, partition in partitions.items():
        ranks = _dense_ranks(end_time for _, end_time in partition)
        survivors = [
            user_set
            for user_set, end_time in partition
            if ranks[_recency(end_time)] == 1
        ]
        if not survivors:
            continue
        survivors.sort(key=lambda s: s.created_at)
        latest[keys[partition_id]] = survivors

    return latest


def resolve_previous_sets(
    rows: Iterable[SetHistoryRow],
) -> Dict[str, List[BootstrapPreviousSet]]:
    """Build the previous-sets map for a user's whole set history.

    Args:
        rows: Every set the user has recorded, each paired with the end_time
            of its workout. Any order.

    Returns:
        Map from "{exercise_id}_{profile_id}" (or "{exercise_id}_default")
        to the stripped-down sets of that key's most recent workout. Keys
        without sets are absent.
    """
    return {
        key.as_string(): [to_previous_set(s) for s in sets]
        for key, sets in latest_workout_sets(rows).items()
    }


def previous_sets_for_exercises(
    rows: Iterable[SetHistoryRow],
    keys: Sequence[ExerciseGroupKey],
) -> List[PreviousSetData]:
    """Previous sets for the given keys only, in the order of ``keys``.

    Keys with no history are skipped.
    """
    latest = latest_workout_sets(rows)
    result = []
    for key in dict.fromkeys(keys):
        sets = latest.get(key)
        if sets:
            result.append(
                PreviousSetData(
                    exercise_id=key.exercise_id,
                    profile_id=key.profile_id,
                    sets=[to_previous_set(s) for s in sets],
                )
            )
    return result

"""Type definitions for PlantCare data structures.

Hybrid approach: TypedDict for structures whose keys are fixed at design time
(plants, tasks, profile, results) and plain ``dict[str, Any]`` where keys are
chosen at runtime (per-action field lookups through ``const.CARE_ACTIONS``).

This file must NOT import from coordinator.py or any manager to avoid
circular dependencies. TypedDict is static analysis only; runtime code keeps
its ``.get()`` defaults.
"""

from typing import Any, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

PlantId = str  # UUID string
TaskId = str  # UUID string
InsightId = str  # UUID string
AchievementId = str  # slug, e.g. "first-bloom"
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"


# =============================================================================
# Stored Entities
# =============================================================================


class CareEventData(TypedDict):
    """Immutable record appended to a plant's care history."""

    type: str
    date: ISODatetime
    note: NotRequired[str | None]


class PlantData(TypedDict):
    """Type definition for a plant entity."""

    id: PlantId
    nickname: str
    species: str
    scientific_name: NotRequired[str | None]
    photo: NotRequired[str | None]
    location: NotRequired[str | None]
    personality: NotRequired[str | None]
    date_added: ISODatetime

    watering_frequency_days: int
    misting_frequency_days: int
    fertilizing_frequency_days: int
    rotating_frequency_days: int

    last_watered: NotRequired[ISODatetime | None]
    last_misted: NotRequired[ISODatetime | None]
    last_fertilized: NotRequired[ISODatetime | None]
    last_rotated: NotRequired[ISODatetime | None]

    health_score: NotRequired[int]
    hydration_level: NotRequired[int]
    light_exposure: NotRequired[int]
    humidity_level: NotRequired[int]
    status: NotRequired[str]

    care_history: list[CareEventData]
    photos: list[str]
    diagnoses: list[dict[str, Any]]
    archived: NotRequired[bool]


class CareTaskData(TypedDict):
    """A single pending or completed occurrence of a care action."""

    id: TaskId
    plant_id: PlantId
    type: str
    due_date: ISODatetime
    completed: bool
    completed_date: NotRequired[ISODatetime | None]
    snoozed_until: NotRequired[ISODatetime | None]
    xp_earned: NotRequired[int | None]


class ProfileData(TypedDict):
    """The single user profile stored per config entry.

    ``xp``/``total_xp``, ``streak_days``/``current_streak`` and
    ``total_tasks_completed``/``tasks_completed`` are kept in sync.
    ``level``/``level_name`` are cached from ``xp`` on every write.
    """

    username: str
    experience_level: str
    xp: int
    total_xp: int
    level: int
    level_name: str
    streak_days: int
    current_streak: int
    longest_streak: int
    total_plants_added: int
    total_tasks_completed: int
    tasks_completed: int
    last_active_date: ISODatetime | None
    joined_date: ISODatetime


class AchievementData(TypedDict):
    """Badge definition with unlock state."""

    id: AchievementId
    name: str
    description: str
    icon: str
    criterion: str
    target: int
    progress: int
    unlocked_at: ISODatetime | None


class InsightData(TypedDict):
    """Dismissible notification record (tip, warning, milestone, memorial)."""

    id: InsightId
    plant_id: NotRequired[PlantId | None]
    type: str
    title: str
    message: str
    created_at: ISODatetime
    dismissed: bool


# =============================================================================
# Engine Results
# =============================================================================


class LevelInfo(TypedDict):
    """Result of converting cumulative XP to a level."""

    level: int
    level_name: str
    progress: float


class PlantStatusInfo(TypedDict):
    """Display status derived from health fields."""

    status: str
    message: str
    color: str


class AchievementContext(TypedDict):
    """Post-mutation snapshot handed to the achievement evaluator."""

    plant_count: int
    streak_days: int
    tasks_completed: int


class AchievementEvaluation(TypedDict):
    """Evaluation of one achievement against a context."""

    achievement_id: AchievementId
    criterion: str
    criteria_met: bool
    current_value: int
    target: int
    progress: float


class StreakUpdate(TypedDict):
    """Outcome of applying one completion to the streak counters."""

    streak_days: int
    days_since_active: int | None
    continued: bool
    reset: bool


class ScheduleSuggestion(TypedDict):
    """Recommended change to a plant's care frequency."""

    id: str
    field: str
    current: int
    suggested: int
    reason: str


class CompletionResult(TypedDict):
    """Outcome of TaskManager.complete_task."""

    success: bool
    reason: NotRequired[str]
    task_id: TaskId
    plant_id: NotRequired[PlantId | None]
    xp_earned: NotRequired[int]
    next_task_id: NotRequired[TaskId | None]
    unlocked_achievements: NotRequired[list[AchievementId]]


class SnoozeResult(TypedDict):
    """Outcome of TaskManager.snooze_task."""

    success: bool
    reason: NotRequired[str]
    task_id: TaskId
    due_date: NotRequired[ISODatetime | None]


class GamificationUpdate(TypedDict):
    """Profile changes produced by one completion."""

    old_xp: int
    new_xp: int
    old_level: int
    new_level: int
    level_name: str
    streak_days: int
    unlocked_achievements: list[AchievementId]

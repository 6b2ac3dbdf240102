"""Entity lifecycle management helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Entity field defaults
- Business logic validation (frequencies, gauges, names)
- Complete entity structure building

### Build Functions
Each stored entity type has a `build_<entity>()` function that:
- Takes user input or mapped data (DATA_* keys)
- Generates an id (UUID) for new entities
- Sets timestamps
- Applies field defaults
- Returns a complete entity dict ready for storage

### Validation
`validate_frequency()` and `build_plant()` raise EntityValidationError (or its
InvalidFrequencyError subclass) carrying the field and translation key.

Consumers:
- managers (plant/task/insight lifecycle)
- services.py (programmatic entity management)
- storage_manager.py (default document structure)
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
import uuid

from . import const
from .type_defs import (
    AchievementData,
    CareEventData,
    CareTaskData,
    InsightData,
    PlantData,
    ProfileData,
)
from .utils.dt_utils import dt_now_utc

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class EntityValidationError(Exception):
    """Validation error with field-specific information.

    Attributes:
        field: The DATA_* constant identifying the field that failed
        translation_key: The TRANS_KEY_* constant for the error message
        placeholders: Optional dict for translation string placeholders

    Example:
        raise EntityValidationError(
            field=const.DATA_PLANT_NICKNAME,
            translation_key=const.TRANS_KEY_ERROR_INVALID_VALUE,
            placeholders={"field": "nickname"},
        )
    """

    def __init__(
        self,
        field: str,
        translation_key: str,
        placeholders: dict[str, str] | None = None,
    ) -> None:
        """Initialize EntityValidationError."""
        self.field = field
        self.translation_key = translation_key
        self.placeholders = placeholders or {}
        super().__init__(translation_key)


class InvalidFrequencyError(EntityValidationError):
    """A care frequency (or snooze length) is not a positive whole number of days."""

    def __init__(self, field: str, value: Any) -> None:
        """Initialize InvalidFrequencyError."""
        super().__init__(
            field=field,
            translation_key=const.TRANS_KEY_ERROR_INVALID_FREQUENCY,
            placeholders={"field": field, "value": str(value)},
        )


# ==============================================================================
# FIELD VALIDATION
# ==============================================================================


def validate_frequency(field: str, value: Any) -> int:
    """Return ``value`` as a positive int or raise InvalidFrequencyError.

    Whole-number floats (``7.0``) are accepted; booleans, fractions, zero and
    negatives are rejected.
    """
    if isinstance(value, bool):
        raise InvalidFrequencyError(field, value)
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidFrequencyError(field, value)
        value = int(value)
    if not isinstance(value, int) or value <= 0:
        raise InvalidFrequencyError(field, value)
    return value


def _validate_gauge(field: str, value: Any) -> int:
    """Return ``value`` as an int in [0, 100] or raise EntityValidationError."""
    try:
        number = int(value)
    except (TypeError, ValueError) as err:
        raise EntityValidationError(
            field=field,
            translation_key=const.TRANS_KEY_ERROR_INVALID_VALUE,
            placeholders={"field": field, "value": str(value)},
        ) from err
    if isinstance(value, bool) or not (
        const.HEALTH_VALUE_MIN <= number <= const.HEALTH_VALUE_MAX
    ):
        raise EntityValidationError(
            field=field,
            translation_key=const.TRANS_KEY_ERROR_INVALID_VALUE,
            placeholders={"field": field, "value": str(value)},
        )
    return number


_GAUGE_FIELDS = (
    const.DATA_PLANT_HEALTH_SCORE,
    const.DATA_PLANT_HYDRATION_LEVEL,
    const.DATA_PLANT_LIGHT_EXPOSURE,
    const.DATA_PLANT_HUMIDITY_LEVEL,
)


# ==============================================================================
# PLANTS
# ==============================================================================


def build_plant(
    user_input: dict[str, Any],
    existing: PlantData | None = None,
    *,
    default_frequencies: dict[str, int] | None = None,
    now: datetime | None = None,
) -> PlantData:
    """Build plant data for create or update operations.

    One function handles both create (existing=None) and update. Frequencies
    missing on create come from ``default_frequencies`` (keyed by frequency
    field) and then from the action table.

    Raises:
        InvalidFrequencyError: If any frequency is zero, negative or fractional
        EntityValidationError: If the nickname is blank or a gauge is out of range

    Examples:
        # CREATE mode - generates UUID, stamps date_added
        plant = build_plant({DATA_PLANT_NICKNAME: "Fernando", DATA_PLANT_SPECIES: "Fern"})

        # UPDATE mode - preserves existing fields not in user_input
        plant = build_plant({DATA_PLANT_MISTING_FREQUENCY: 2}, existing=old_plant)
    """
    defaults = default_frequencies or {}

    def get_field(data_key: str, default: Any) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    raw_nickname = get_field(const.DATA_PLANT_NICKNAME, "")
    nickname = str(raw_nickname).strip() if raw_nickname else ""
    if not nickname:
        raise EntityValidationError(
            field=const.DATA_PLANT_NICKNAME,
            translation_key=const.TRANS_KEY_ERROR_INVALID_VALUE,
            placeholders={"field": const.DATA_PLANT_NICKNAME, "value": ""},
        )

    frequencies: dict[str, int] = {}
    for spec in const.CARE_ACTIONS.values():
        default = defaults.get(spec.frequency_field, spec.default_frequency_days)
        frequencies[spec.frequency_field] = validate_frequency(
            spec.frequency_field, get_field(spec.frequency_field, default)
        )

    gauges = {
        field: _validate_gauge(field, get_field(field, const.HEALTH_VALUE_DEFAULT))
        for field in _GAUGE_FIELDS
    }

    if existing is None:
        plant_id = str(uuid.uuid4())
        date_added = (now or dt_now_utc()).isoformat()
        care_history: list[CareEventData] = []
        photos: list[str] = []
        diagnoses: list[dict[str, Any]] = []
        last_performed: dict[str, str | None] = {
            spec.last_performed_field: None for spec in const.CARE_ACTIONS.values()
        }
        status = const.CARE_STATUS_THRIVING
    else:
        plant_id = existing[const.DATA_PLANT_ID]
        date_added = existing[const.DATA_PLANT_DATE_ADDED]
        care_history = list(existing.get(const.DATA_PLANT_CARE_HISTORY, []))
        photos = list(existing.get(const.DATA_PLANT_PHOTOS, []))
        diagnoses = list(existing.get(const.DATA_PLANT_DIAGNOSES, []))
        last_performed = {
            spec.last_performed_field: existing.get(spec.last_performed_field)
            for spec in const.CARE_ACTIONS.values()
        }
        status = existing.get(const.DATA_PLANT_STATUS, const.CARE_STATUS_THRIVING)

    plant: dict[str, Any] = {
        const.DATA_PLANT_ID: plant_id,
        const.DATA_PLANT_NICKNAME: nickname,
        const.DATA_PLANT_SPECIES: str(get_field(const.DATA_PLANT_SPECIES, "") or ""),
        const.DATA_PLANT_SCIENTIFIC_NAME: get_field(
            const.DATA_PLANT_SCIENTIFIC_NAME, None
        ),
        const.DATA_PLANT_PHOTO: get_field(const.DATA_PLANT_PHOTO, None),
        const.DATA_PLANT_LOCATION: get_field(const.DATA_PLANT_LOCATION, None),
        const.DATA_PLANT_PERSONALITY: get_field(const.DATA_PLANT_PERSONALITY, None),
        const.DATA_PLANT_DATE_ADDED: date_added,
        **frequencies,
        **last_performed,
        **gauges,
        const.DATA_PLANT_STATUS: status,
        const.DATA_PLANT_CARE_HISTORY: care_history,
        const.DATA_PLANT_PHOTOS: photos,
        const.DATA_PLANT_DIAGNOSES: diagnoses,
        const.DATA_PLANT_ARCHIVED: bool(get_field(const.DATA_PLANT_ARCHIVED, False)),
    }
    return plant  # type: ignore[return-value]


# ==============================================================================
# CARE TASKS & EVENTS
# ==============================================================================


def build_care_task(
    plant_id: str,
    action: str,
    due_date: datetime,
) -> CareTaskData:
    """Build a new incomplete care task."""
    return CareTaskData(
        id=str(uuid.uuid4()),
        plant_id=plant_id,
        type=str(const.CareAction(action)),
        due_date=due_date.isoformat(),
        completed=False,
        completed_date=None,
        snoozed_until=None,
        xp_earned=None,
    )


def build_care_event(
    action: str,
    performed_at: datetime,
    note: str | None = None,
) -> CareEventData:
    """Build an immutable care history record."""
    return CareEventData(
        type=str(const.CareAction(action)),
        date=performed_at.isoformat(),
        note=note.strip() if note and note.strip() else None,
    )


# ==============================================================================
# PROFILE & ACHIEVEMENTS
# ==============================================================================


def build_profile(
    username: str | None = None,
    experience_level: str | None = None,
    now: datetime | None = None,
) -> ProfileData:
    """Build a fresh profile at level 1 with no XP or streak."""
    return ProfileData(
        username=username or const.DEFAULT_USERNAME,
        experience_level=experience_level or const.EXPERIENCE_LEVEL_BEGINNER,
        xp=0,
        total_xp=0,
        level=1,
        level_name=const.LEVEL_NAMES[0],
        streak_days=0,
        current_streak=0,
        longest_streak=0,
        total_plants_added=0,
        total_tasks_completed=0,
        tasks_completed=0,
        last_active_date=None,
        joined_date=(now or dt_now_utc()).isoformat(),
    )


def build_default_achievements() -> dict[str, AchievementData]:
    """Build the locked achievement catalogue keyed by id."""
    return {
        achievement_id: AchievementData(
            id=achievement_id,
            name=name,
            description=description,
            icon=icon,
            criterion=criterion,
            target=target,
            progress=0,
            unlocked_at=None,
        )
        for achievement_id, name, description, icon, criterion, target in (
            const.DEFAULT_ACHIEVEMENTS
        )
    }


# ==============================================================================
# INSIGHTS
# ==============================================================================


def build_insight(
    insight_type: str,
    title: str,
    message: str,
    *,
    plant_id: str | None = None,
    created_at: datetime | None = None,
) -> InsightData:
    """Build a new, undismissed insight.

    Raises:
        EntityValidationError: If the type is unknown or the title is blank
    """
    if insight_type not in const.INSIGHT_TYPES:
        raise EntityValidationError(
            field=const.DATA_INSIGHT_TYPE,
            translation_key=const.TRANS_KEY_ERROR_INVALID_VALUE,
            placeholders={"field": const.DATA_INSIGHT_TYPE, "value": insight_type},
        )
    if not title or not title.strip():
        raise EntityValidationError(
            field=const.DATA_INSIGHT_TITLE,
            translation_key=const.TRANS_KEY_ERROR_INVALID_VALUE,
            placeholders={"field": const.DATA_INSIGHT_TITLE, "value": ""},
        )
    return InsightData(
        id=str(uuid.uuid4()),
        plant_id=plant_id,
        type=insight_type,
        title=title.strip(),
        message=message,
        created_at=(created_at or dt_now_utc()).isoformat(),
        dismissed=False,
    )

# File: const.py
"""Constants for the PlantCare integration.

This file centralizes configuration keys, storage keys, defaults, signal
suffixes, translation keys and platform identifiers so every layer of the
integration speaks the same vocabulary.
"""

from enum import StrEnum
import logging
from typing import NamedTuple

from homeassistant.const import Platform

# ------------------------------------------------------------------------------------------------
# General / Integration Information
# ------------------------------------------------------------------------------------------------
PLANTCARE_TITLE = "PlantCare"

# Integration Domain
DOMAIN = "plantcare"

# Logger
LOGGER = logging.getLogger(__package__)

# Supported Platforms
PLATFORMS = [
    Platform.CALENDAR,
    Platform.SENSOR,
]

# Coordinator
COORDINATOR_SUFFIX = "_coordinator"

# Storage and Versioning
STORAGE_KEY = "plantcare_data"
STORAGE_VERSION = 1
SCHEMA_VERSION_CURRENT = 1

# Update Interval (minutes)
DEFAULT_UPDATE_INTERVAL = 30

# ------------------------------------------------------------------------------------------------
# Configuration Keys
# ------------------------------------------------------------------------------------------------
CONF_USERNAME = "username"
CONF_EXPERIENCE_LEVEL = "experience_level"
CONF_UPDATE_INTERVAL = "update_interval_minutes"
CONF_DEFAULT_WATERING_FREQUENCY = "default_watering_frequency_days"
CONF_DEFAULT_MISTING_FREQUENCY = "default_misting_frequency_days"
CONF_DEFAULT_FERTILIZING_FREQUENCY = "default_fertilizing_frequency_days"
CONF_DEFAULT_ROTATING_FREQUENCY = "default_rotating_frequency_days"

EXPERIENCE_LEVEL_BEGINNER = "beginner"
EXPERIENCE_LEVEL_GROWING = "growing"
EXPERIENCE_LEVEL_EXPERT = "expert"
EXPERIENCE_LEVELS = [
    EXPERIENCE_LEVEL_BEGINNER,
    EXPERIENCE_LEVEL_GROWING,
    EXPERIENCE_LEVEL_EXPERT,
]

DEFAULT_USERNAME = "Plant Parent"

# ------------------------------------------------------------------------------------------------
# Care Actions
# ------------------------------------------------------------------------------------------------


class CareAction(StrEnum):
    """Recurring maintenance activities for a plant."""

    WATER = "water"
    MIST = "mist"
    FERTILIZE = "fertilize"
    ROTATE = "rotate"


class CareActionSpec(NamedTuple):
    """Storage fields and default interval for one care action."""

    frequency_field: str
    last_performed_field: str
    default_frequency_days: int
    conf_default_frequency: str


# Plant fields
DATA_PLANT_ID = "id"
DATA_PLANT_NICKNAME = "nickname"
DATA_PLANT_SPECIES = "species"
DATA_PLANT_SCIENTIFIC_NAME = "scientific_name"
DATA_PLANT_PHOTO = "photo"
DATA_PLANT_LOCATION = "location"
DATA_PLANT_PERSONALITY = "personality"
DATA_PLANT_DATE_ADDED = "date_added"
DATA_PLANT_WATERING_FREQUENCY = "watering_frequency_days"
DATA_PLANT_MISTING_FREQUENCY = "misting_frequency_days"
DATA_PLANT_FERTILIZING_FREQUENCY = "fertilizing_frequency_days"
DATA_PLANT_ROTATING_FREQUENCY = "rotating_frequency_days"
DATA_PLANT_LAST_WATERED = "last_watered"
DATA_PLANT_LAST_MISTED = "last_misted"
DATA_PLANT_LAST_FERTILIZED = "last_fertilized"
DATA_PLANT_LAST_ROTATED = "last_rotated"
DATA_PLANT_HEALTH_SCORE = "health_score"
DATA_PLANT_HYDRATION_LEVEL = "hydration_level"
DATA_PLANT_LIGHT_EXPOSURE = "light_exposure"
DATA_PLANT_HUMIDITY_LEVEL = "humidity_level"
DATA_PLANT_STATUS = "status"
DATA_PLANT_CARE_HISTORY = "care_history"
DATA_PLANT_PHOTOS = "photos"
DATA_PLANT_DIAGNOSES = "diagnoses"
DATA_PLANT_ARCHIVED = "archived"

# Per-action storage fields and default interval
CARE_ACTIONS: dict[CareAction, CareActionSpec] = {
    CareAction.WATER: CareActionSpec(
        DATA_PLANT_WATERING_FREQUENCY,
        DATA_PLANT_LAST_WATERED,
        7,
        CONF_DEFAULT_WATERING_FREQUENCY,
    ),
    CareAction.MIST: CareActionSpec(
        DATA_PLANT_MISTING_FREQUENCY,
        DATA_PLANT_LAST_MISTED,
        3,
        CONF_DEFAULT_MISTING_FREQUENCY,
    ),
    CareAction.FERTILIZE: CareActionSpec(
        DATA_PLANT_FERTILIZING_FREQUENCY,
        DATA_PLANT_LAST_FERTILIZED,
        30,
        CONF_DEFAULT_FERTILIZING_FREQUENCY,
    ),
    CareAction.ROTATE: CareActionSpec(
        DATA_PLANT_ROTATING_FREQUENCY,
        DATA_PLANT_LAST_ROTATED,
        14,
        CONF_DEFAULT_ROTATING_FREQUENCY,
    ),
}

# Tasks created when a plant is added
SEEDED_CARE_ACTIONS = (CareAction.WATER, CareAction.MIST)

PLANT_PERSONALITIES = [
    "drama-queen",
    "low-maintenance",
    "attention-seeker",
    "silent-treatment",
    "main-character",
    "chill-vibes",
]

# ------------------------------------------------------------------------------------------------
# Plant Health
# ------------------------------------------------------------------------------------------------
HEALTH_VALUE_DEFAULT = 100
HEALTH_VALUE_MIN = 0
HEALTH_VALUE_MAX = 100
HEALTH_BOOST_PER_CARE = 5

HEALTH_HAPPY_THRESHOLD = 80
HYDRATION_THIRSTY_THRESHOLD = 30
LIGHT_LOW_THRESHOLD = 40

# Hydration reaches zero after this many watering intervals without water
HYDRATION_DEPLETION_INTERVALS = 2

# Display status (health model)
PLANT_STATUS_HAPPY = "happy"
PLANT_STATUS_THIRSTY = "thirsty"
PLANT_STATUS_NEEDS_LIGHT = "needs-light"
PLANT_STATUS_NEEDS_ATTENTION = "needs-attention"

PLANT_STATUS_DISPLAY: dict[str, tuple[str, str]] = {
    PLANT_STATUS_HAPPY: ("I'm feeling great!", "#4CAF50"),
    PLANT_STATUS_THIRSTY: ("I could really use a drink...", "#2196F3"),
    PLANT_STATUS_NEEDS_LIGHT: ("Could I get some more sunshine?", "#FFC107"),
    PLANT_STATUS_NEEDS_ATTENTION: ("I need some extra care.", "#F44336"),
}

# Coarse care status tag
CARE_STATUS_THIRSTY = "thirsty"
CARE_STATUS_MIST = "mist"
CARE_STATUS_FERTILIZE = "fertilize"
CARE_STATUS_THRIVING = "thriving"
CARE_STATUS_GROWING = "growing"
CARE_STATUS_STRUGGLING = "struggling"
CARE_STATUS_DORMANT = "dormant"
CARE_STATUS_DEAD = "dead"

CARE_STATUS_OPTIONS = [
    CARE_STATUS_THIRSTY,
    CARE_STATUS_MIST,
    CARE_STATUS_FERTILIZE,
    CARE_STATUS_THRIVING,
    CARE_STATUS_GROWING,
    CARE_STATUS_STRUGGLING,
    CARE_STATUS_DORMANT,
    CARE_STATUS_DEAD,
]

# Overdue action -> coarse status, in priority order
CARE_STATUS_BY_OVERDUE_ACTION: tuple[tuple[CareAction, str], ...] = (
    (CareAction.WATER, CARE_STATUS_THIRSTY),
    (CareAction.MIST, CARE_STATUS_MIST),
    (CareAction.FERTILIZE, CARE_STATUS_FERTILIZE),
)

CARE_STATUS_THRIVING_THRESHOLD = 80
CARE_STATUS_GROWING_THRESHOLD = 50
DORMANT_AFTER_DAYS = 60

# ------------------------------------------------------------------------------------------------
# Care Tasks
# ------------------------------------------------------------------------------------------------
DATA_TASK_ID = "id"
DATA_TASK_PLANT_ID = "plant_id"
DATA_TASK_TYPE = "type"
DATA_TASK_DUE_DATE = "due_date"
DATA_TASK_COMPLETED = "completed"
DATA_TASK_COMPLETED_DATE = "completed_date"
DATA_TASK_SNOOZED_UNTIL = "snoozed_until"
DATA_TASK_XP_EARNED = "xp_earned"

XP_PER_TASK = 25

# Completion / snooze result reasons
RESULT_REASON_NOT_FOUND = "not_found"
RESULT_REASON_ORPHANED = "orphaned"
RESULT_REASON_ALREADY_COMPLETED = "already_completed"

# Calendar grouping buckets
TASK_GROUP_OVERDUE = "overdue"
TASK_GROUP_TODAY = "today"
TASK_GROUP_UPCOMING = "upcoming"

# ------------------------------------------------------------------------------------------------
# Care Events
# ------------------------------------------------------------------------------------------------
DATA_CARE_EVENT_TYPE = "type"
DATA_CARE_EVENT_DATE = "date"
DATA_CARE_EVENT_NOTE = "note"

# ------------------------------------------------------------------------------------------------
# Profile
# ------------------------------------------------------------------------------------------------
DATA_PROFILE_USERNAME = "username"
DATA_PROFILE_EXPERIENCE_LEVEL = "experience_level"
DATA_PROFILE_XP = "xp"
DATA_PROFILE_TOTAL_XP = "total_xp"
DATA_PROFILE_LEVEL = "level"
DATA_PROFILE_LEVEL_NAME = "level_name"
DATA_PROFILE_STREAK_DAYS = "streak_days"
DATA_PROFILE_CURRENT_STREAK = "current_streak"
DATA_PROFILE_LONGEST_STREAK = "longest_streak"
DATA_PROFILE_TOTAL_PLANTS_ADDED = "total_plants_added"
DATA_PROFILE_TOTAL_TASKS_COMPLETED = "total_tasks_completed"
DATA_PROFILE_TASKS_COMPLETED = "tasks_completed"
DATA_PROFILE_LAST_ACTIVE_DATE = "last_active_date"
DATA_PROFILE_JOINED_DATE = "joined_date"

# ------------------------------------------------------------------------------------------------
# Leveling
# ------------------------------------------------------------------------------------------------
XP_PER_LEVEL = 100

LEVEL_NAMES = [
    "Seedling",
    "Sprout",
    "Sapling",
    "Budding Botanist",
    "Leaf Lover",
    "Green Thumb",
    "Plant Whisperer",
    "Garden Guru",
    "Botanical Master",
    "Jungle Legend",
]

# ------------------------------------------------------------------------------------------------
# Achievements
# ------------------------------------------------------------------------------------------------
DATA_ACHIEVEMENT_ID = "id"
DATA_ACHIEVEMENT_NAME = "name"
DATA_ACHIEVEMENT_DESCRIPTION = "description"
DATA_ACHIEVEMENT_ICON = "icon"
DATA_ACHIEVEMENT_CRITERION = "criterion"
DATA_ACHIEVEMENT_TARGET = "target"
DATA_ACHIEVEMENT_PROGRESS = "progress"
DATA_ACHIEVEMENT_UNLOCKED_AT = "unlocked_at"

ACHIEVEMENT_CRITERION_PLANT_COUNT = "plant_count"
ACHIEVEMENT_CRITERION_STREAK_DAYS = "streak_days"
ACHIEVEMENT_CRITERION_TASKS_COMPLETED = "tasks_completed"

# Criteria re-evaluated per trigger
ACHIEVEMENT_TRIGGER_PLANT_ADDED = "plant_added"
ACHIEVEMENT_TRIGGER_TASK_COMPLETED = "task_completed"
ACHIEVEMENT_CRITERIA_BY_TRIGGER: dict[str, tuple[str, ...]] = {
    ACHIEVEMENT_TRIGGER_PLANT_ADDED: (ACHIEVEMENT_CRITERION_PLANT_COUNT,),
    ACHIEVEMENT_TRIGGER_TASK_COMPLETED: (
        ACHIEVEMENT_CRITERION_STREAK_DAYS,
        ACHIEVEMENT_CRITERION_TASKS_COMPLETED,
    ),
}

ACHIEVEMENT_FIRST_BLOOM = "first-bloom"
ACHIEVEMENT_JUNGLE_KING = "jungle-king"
ACHIEVEMENT_HYDRATION_HERO = "hydration-hero"
ACHIEVEMENT_CONSISTENCY_CHAMPION = "consistency-champion"
ACHIEVEMENT_GREEN_THUMB = "green-thumb"

# (id, name, description, icon, criterion, target)
DEFAULT_ACHIEVEMENTS: tuple[tuple[str, str, str, str, str, int], ...] = (
    (
        ACHIEVEMENT_FIRST_BLOOM,
        "First Bloom",
        "Add your first plant",
        "mdi:sprout",
        ACHIEVEMENT_CRITERION_PLANT_COUNT,
        1,
    ),
    (
        ACHIEVEMENT_JUNGLE_KING,
        "Jungle King",
        "Grow a collection of 10 plants",
        "mdi:palm-tree",
        ACHIEVEMENT_CRITERION_PLANT_COUNT,
        10,
    ),
    (
        ACHIEVEMENT_HYDRATION_HERO,
        "Hydration Hero",
        "Keep a 7 day care streak",
        "mdi:water",
        ACHIEVEMENT_CRITERION_STREAK_DAYS,
        7,
    ),
    (
        ACHIEVEMENT_CONSISTENCY_CHAMPION,
        "Consistency Champion",
        "Keep a 30 day care streak",
        "mdi:trophy",
        ACHIEVEMENT_CRITERION_STREAK_DAYS,
        30,
    ),
    (
        ACHIEVEMENT_GREEN_THUMB,
        "Green Thumb",
        "Complete 50 care tasks",
        "mdi:hand-heart",
        ACHIEVEMENT_CRITERION_TASKS_COMPLETED,
        50,
    ),
)

# ------------------------------------------------------------------------------------------------
# Insights
# ------------------------------------------------------------------------------------------------
DATA_INSIGHT_ID = "id"
DATA_INSIGHT_PLANT_ID = "plant_id"
DATA_INSIGHT_TYPE = "type"
DATA_INSIGHT_TITLE = "title"
DATA_INSIGHT_MESSAGE = "message"
DATA_INSIGHT_CREATED_AT = "created_at"
DATA_INSIGHT_DISMISSED = "dismissed"

INSIGHT_TYPE_TIP = "tip"
INSIGHT_TYPE_WARNING = "warning"
INSIGHT_TYPE_MILESTONE = "milestone"
INSIGHT_TYPE_MEMORIAL = "memorial"
INSIGHT_TYPES = [
    INSIGHT_TYPE_TIP,
    INSIGHT_TYPE_WARNING,
    INSIGHT_TYPE_MILESTONE,
    INSIGHT_TYPE_MEMORIAL,
]

MEMORIAL_TITLE_FMT = "Goodbye, {nickname}"
MEMORIAL_MESSAGE_FMT = "You kept {nickname} alive for {days} days."
MILESTONE_ACHIEVEMENT_TITLE_FMT = "Achievement unlocked: {name}"
MILESTONE_LEVEL_TITLE_FMT = "Level {level} reached"
MILESTONE_LEVEL_MESSAGE_FMT = "You are now a {level_name}. Keep it growing!"

# ------------------------------------------------------------------------------------------------
# Schedule Suggestions
# ------------------------------------------------------------------------------------------------
SUGGESTION_WINTER_DORMANCY = "winter-dormancy"
SUGGESTION_MORE_WATER = "more-water"
SUGGESTION_HISTORICAL_TUNE = "historical-tune"
SUGGESTION_PERFECT_BALANCE = "perfect-balance"

WINTER_MONTHS = (12, 1, 2)
WINTER_MIN_WATERING_DAYS = 10
THIRSTY_NOTE_KEYWORD = "thirsty"
THIRSTY_NOTE_MIN_COUNT = 2
THIRSTY_MIN_WATERING_DAYS = 3
THIRSTY_FREQUENCY_STEP = 2
HISTORY_INTERVAL_SAMPLE = 3
HISTORY_MIN_DIFFERENCE_DAYS = 2
HISTORY_MAX_AVERAGE_DAYS = 30
PERFECT_BALANCE_MIN_HEALTH = 95
PERFECT_BALANCE_MIN_HISTORY = 5

# ------------------------------------------------------------------------------------------------
# Storage Sections
# ------------------------------------------------------------------------------------------------
DATA_SCHEMA_VERSION = "schema_version"
DATA_PLANTS = "plants"
DATA_TASKS = "tasks"
DATA_PROFILE = "profile"
DATA_ACHIEVEMENTS = "achievements"
DATA_INSIGHTS = "insights"

# ------------------------------------------------------------------------------------------------
# Event Signals (manager communication)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_PLANT_ADDED = "plant_added"
SIGNAL_SUFFIX_PLANT_UPDATED = "plant_updated"
SIGNAL_SUFFIX_PLANT_REMOVED = "plant_removed"
SIGNAL_SUFFIX_PLANT_DIED = "plant_died"
SIGNAL_SUFFIX_TASK_CREATED = "task_created"
SIGNAL_SUFFIX_TASK_COMPLETED = "task_completed"
SIGNAL_SUFFIX_TASK_SNOOZED = "task_snoozed"
SIGNAL_SUFFIX_CARE_LOGGED = "care_logged"
SIGNAL_SUFFIX_XP_CHANGED = "xp_changed"
SIGNAL_SUFFIX_LEVEL_UP = "level_up"
SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED = "achievement_unlocked"
SIGNAL_SUFFIX_INSIGHT_CREATED = "insight_created"
SIGNAL_SUFFIX_INSIGHT_DISMISSED = "insight_dismissed"
SIGNAL_SUFFIX_DATA_RECONCILED = "data_reconciled"

# ------------------------------------------------------------------------------------------------
# Services
# ------------------------------------------------------------------------------------------------
SERVICE_ADD_PLANT = "add_plant"
SERVICE_UPDATE_PLANT = "update_plant"
SERVICE_REMOVE_PLANT = "remove_plant"
SERVICE_MARK_PLANT_DEAD = "mark_plant_dead"
SERVICE_COMPLETE_TASK = "complete_task"
SERVICE_SNOOZE_TASK = "snooze_task"
SERVICE_LOG_CARE_EVENT = "log_care_event"
SERVICE_DISMISS_INSIGHT = "dismiss_insight"
SERVICE_UPDATE_PROFILE = "update_profile"
SERVICE_GET_SCHEDULE_SUGGESTIONS = "get_schedule_suggestions"
SERVICE_RECONCILE_DATA = "reconcile_data"

FIELD_PLANT_ID = "plant_id"
FIELD_PLANT_NAME = "plant_name"
FIELD_TASK_ID = "task_id"
FIELD_DAYS = "days"
FIELD_ACTION = "action"
FIELD_NOTE = "note"
FIELD_INSIGHT_ID = "insight_id"
FIELD_MESSAGE = "message"
FIELD_CLOSED_TASK_IDS = "closed_task_ids"

# ------------------------------------------------------------------------------------------------
# Entities
# ------------------------------------------------------------------------------------------------
SENSOR_UID_SUFFIX_XP = "_xp"
SENSOR_UID_SUFFIX_STREAK = "_streak"
SENSOR_UID_SUFFIX_PENDING_TASKS = "_pending_tasks"
SENSOR_UID_SUFFIX_PLANT_STATUS = "_status"
CALENDAR_UID_SUFFIX = "_care_calendar"

ATTR_LEVEL = "level"
ATTR_LEVEL_NAME = "level_name"
ATTR_LEVEL_PROGRESS = "level_progress"
ATTR_TOTAL_TASKS_COMPLETED = "total_tasks_completed"
ATTR_TOTAL_PLANTS_ADDED = "total_plants_added"
ATTR_LONGEST_STREAK = "longest_streak"
ATTR_LAST_ACTIVE = "last_active"
ATTR_UNLOCKED_ACHIEVEMENTS = "unlocked_achievements"
ATTR_DISPLAY_STATUS = "display_status"
ATTR_MESSAGE = "message"
ATTR_COLOR = "color"
ATTR_HEALTH_SCORE = "health_score"
ATTR_HYDRATION_LEVEL = "hydration_level"
ATTR_LAST_CARED = "last_cared"

DEFAULT_CALENDAR_SHOW_PERIOD_DAYS = 30

# ------------------------------------------------------------------------------------------------
# Translation Keys
# ------------------------------------------------------------------------------------------------
TRANS_KEY_ERROR_NOT_FOUND = "not_found"
TRANS_KEY_ERROR_INVALID_FREQUENCY = "invalid_frequency"
TRANS_KEY_ERROR_INVALID_VALUE = "invalid_value"
TRANS_KEY_ERROR_STORE_UNAVAILABLE = "store_unavailable"
TRANS_KEY_ERROR_TASK_NOT_COMPLETED = "task_not_completed"
TRANS_KEY_ERROR_NO_ENTRY = "no_entry_loaded"
TRANS_KEY_ERROR_SINGLE_INSTANCE = "single_instance_allowed"
TRANS_KEY_ERROR_CALENDAR_READ_ONLY = "calendar_read_only"

TRANS_KEY_SENSOR_XP = "xp"
TRANS_KEY_SENSOR_STREAK = "streak"
TRANS_KEY_SENSOR_PENDING_TASKS = "pending_tasks"
TRANS_KEY_SENSOR_PLANT_STATUS = "plant_status"
TRANS_KEY_CALENDAR_NAME = "care_calendar"
TRANS_KEY_ATTR_PLANT_NAME = "plant_name"

# Entity types for translation placeholders
ENTITY_TYPE_PLANT = "plant"
ENTITY_TYPE_TASK = "task"
ENTITY_TYPE_INSIGHT = "insight"

"""Gamification Engine - Pure logic for leveling and achievement evaluation.

This engine provides stateless, pure Python functions for:
- Converting cumulative XP into level, level name and progress
- Achievement threshold checks (plant count, streak length, task count)

ARCHITECTURE: This is a pure logic engine with NO Home Assistant state.
All functions are static methods that operate on passed-in data.

PURITY REQUIREMENT: This engine receives ALL data via the context parameter.
The GamificationManager builds the post-mutation context and applies the
side effects (setting unlocked_at, persisting, emitting signals).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.math_utils import progress_fraction

if TYPE_CHECKING:
    from ..type_defs import AchievementContext, AchievementEvaluation, LevelInfo


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Handler function signature: (context) -> current value for the criterion
CriterionHandler = Callable[["AchievementContext"], int]


# =============================================================================
# GAMIFICATION ENGINE
# =============================================================================


class GamificationEngine:
    """Pure logic engine for gamification evaluation.

    All methods are static - no instance state. This enables easy unit testing
    without any Home Assistant mocking.

    Evaluation Flow:
        1. Manager applies the mutation (plant added, task completed)
        2. Manager builds an AchievementContext from the new state
        3. Engine reports which locked achievements now meet their target
        4. Manager stamps unlocked_at once and never clears it
    """

    # =========================================================================
    # CRITERION HANDLER REGISTRY
    # =========================================================================

    # Maps achievement criterion to a value extractor
    _CRITERION_HANDLERS: dict[str, CriterionHandler] = {}

    @classmethod
    def _register_handlers(cls) -> None:
        """Register all criterion handlers.

        Called lazily on first evaluation to populate _CRITERION_HANDLERS.
        """
        if cls._CRITERION_HANDLERS:
            return  # Already registered

        cls._CRITERION_HANDLERS = {
            const.ACHIEVEMENT_CRITERION_PLANT_COUNT: cls._plant_count,
            const.ACHIEVEMENT_CRITERION_STREAK_DAYS: cls._streak_days,
            const.ACHIEVEMENT_CRITERION_TASKS_COMPLETED: cls._tasks_completed,
        }

    # =========================================================================
    # LEVELING
    # =========================================================================

    @staticmethod
    def calculate_level(xp: int | float) -> LevelInfo:
        """Convert cumulative XP to level, level name and progress.

        Level is ``floor(xp / XP_PER_LEVEL) + 1``. The name saturates at the
        last entry of LEVEL_NAMES while the numeric level keeps growing.
        Progress is the fraction of the current level earned, in [0, 1).

        Negative input is treated as zero so the function is total.

        Examples:
            calculate_level(0) → {"level": 1, "level_name": "Seedling", "progress": 0.0}
            calculate_level(250) → {"level": 3, "level_name": "Sapling", "progress": 0.5}
        """
        xp_value = max(0, int(xp))
        level = xp_value // const.XP_PER_LEVEL + 1
        name_index = min(level - 1, len(const.LEVEL_NAMES) - 1)
        return {
            "level": level,
            "level_name": const.LEVEL_NAMES[name_index],
            "progress": (xp_value % const.XP_PER_LEVEL) / const.XP_PER_LEVEL,
        }

    # =========================================================================
    # ACHIEVEMENTS
    # =========================================================================

    @classmethod
    def evaluate_achievement(
        cls,
        context: AchievementContext,
        achievement_data: dict[str, Any],
    ) -> AchievementEvaluation:
        """Evaluate one achievement definition against a context.

        Unknown criteria never meet their target; they are reported with zero
        progress so a bad definition cannot unlock anything.
        """
        cls._register_handlers()

        achievement_id = achievement_data.get(const.DATA_ACHIEVEMENT_ID, "unknown")
        criterion = achievement_data.get(const.DATA_ACHIEVEMENT_CRITERION, "")
        target = int(achievement_data.get(const.DATA_ACHIEVEMENT_TARGET, 0))

        handler = cls._CRITERION_HANDLERS.get(criterion)
        current_value = handler(context) if handler else 0
        criteria_met = handler is not None and target > 0 and current_value >= target
        progress = progress_fraction(current_value, target)

        return {
            "achievement_id": achievement_id,
            "criterion": criterion,
            "criteria_met": criteria_met,
            "current_value": current_value,
            "target": target,
            "progress": progress,
        }

    @classmethod
    def evaluate_achievements(
        cls,
        context: AchievementContext,
        achievements: dict[str, dict[str, Any]],
        criteria: Iterable[str] | None = None,
    ) -> list[AchievementEvaluation]:
        """Evaluate every still-locked achievement, optionally filtered by criterion.

        Already-unlocked achievements are skipped entirely, so nothing the
        caller does with the result can re-stamp or re-lock them.
        """
        allowed = set(criteria) if criteria is not None else None
        results: list[AchievementEvaluation] = []
        for achievement in achievements.values():
            if achievement.get(const.DATA_ACHIEVEMENT_UNLOCKED_AT):
                continue
            if (
                allowed is not None
                and achievement.get(const.DATA_ACHIEVEMENT_CRITERION) not in allowed
            ):
                continue
            results.append(cls.evaluate_achievement(context, achievement))
        return results

    # =========================================================================
    # CRITERION HANDLERS
    # =========================================================================

    @staticmethod
    def _plant_count(context: AchievementContext) -> int:
        return int(context.get("plant_count", 0))

    @staticmethod
    def _streak_days(context: AchievementContext) -> int:
        return int(context.get("streak_days", 0))

    @staticmethod
    def _tasks_completed(context: AchievementContext) -> int:
        return int(context.get("tasks_completed", 0))

"""Gamification Manager - XP, level, streak and achievement bookkeeping.

This manager applies the profile side of every care operation:
- Task completion: XP award, level recompute, streak, task counters
- Plant addition: plant counter and plant-count achievements
- Achievement unlocks: stamps unlocked_at exactly once

ARCHITECTURE:
- GamificationManager = STATEFUL application of results to the profile
- GamificationEngine = Pure level and threshold logic (STATELESS)
- TaskManager / PlantManager call in here INSIDE their transaction so the
  profile change commits (or rolls back) together with the task or plant
  change, then call ``emit_update`` once the transaction has committed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..engines.gamification_engine import GamificationEngine
from ..engines.schedule_engine import ScheduleEngine
from ..utils.dt_utils import dt_now_utc
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime

    from homeassistant.core import HomeAssistant

    from ..coordinator import PlantCareDataCoordinator
    from ..type_defs import AchievementContext, GamificationUpdate, LevelInfo


class GamificationManager(BaseManager):
    """Manager for the single user profile and its achievements.

    Responsibilities:
    - Award XP and keep level/level_name a pure function of total XP
    - Advance, continue or reset the daily care streak
    - Evaluate achievements against the post-mutation snapshot
    - Emit xp_changed, level_up and achievement_unlocked events

    NOT responsible for:
    - Task or plant mutations (TaskManager / PlantManager)
    - Persistence (the caller's transaction saves)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PlantCareDataCoordinator,
    ) -> None:
        """Initialize the GamificationManager."""
        super().__init__(hass, coordinator)

    async def async_setup(self) -> None:
        """Set up the GamificationManager.

        Re-derives cached level fields from XP in case the stored document was
        edited by hand or written by an older build.
        """
        self._sync_level_fields(self.coordinator.profile_data)
        const.LOGGER.debug(
            "GamificationManager: Profile at level %s with %s XP",
            self.coordinator.profile_data.get(const.DATA_PROFILE_LEVEL),
            self.coordinator.profile_data.get(const.DATA_PROFILE_XP),
        )

    # =========================================================================
    # Read helpers
    # =========================================================================

    def get_level_info(self) -> LevelInfo:
        """Return level, name and progress for the current XP."""
        return GamificationEngine.calculate_level(
            self.coordinator.profile_data.get(const.DATA_PROFILE_XP, 0)
        )

    def get_unlocked_achievements(self) -> list[dict[str, Any]]:
        """Return unlocked achievements, oldest first."""
        unlocked = [
            achievement
            for achievement in self.coordinator.achievements_data.values()
            if achievement.get(const.DATA_ACHIEVEMENT_UNLOCKED_AT)
        ]
        return sorted(
            unlocked, key=lambda item: item[const.DATA_ACHIEVEMENT_UNLOCKED_AT]
        )

    def _build_context(self) -> AchievementContext:
        """Build the post-mutation snapshot the evaluator reads."""
        profile = self.coordinator.profile_data
        return {
            "plant_count": len(self.coordinator.plants_data),
            "streak_days": int(profile.get(const.DATA_PROFILE_STREAK_DAYS, 0)),
            "tasks_completed": int(
                profile.get(const.DATA_PROFILE_TOTAL_TASKS_COMPLETED, 0)
            ),
        }

    @staticmethod
    def _sync_level_fields(profile: dict[str, Any]) -> None:
        level_info = GamificationEngine.calculate_level(
            profile.get(const.DATA_PROFILE_XP, 0)
        )
        profile[const.DATA_PROFILE_LEVEL] = level_info["level"]
        profile[const.DATA_PROFILE_LEVEL_NAME] = level_info["level_name"]

    # =========================================================================
    # Mutations (call inside coordinator.async_transaction)
    # =========================================================================

    def unlock_achievements(self, trigger: str, now: datetime) -> list[str]:
        """Refresh progress and unlock achievements for a trigger.

        Only criteria registered for ``trigger`` are evaluated. Already
        unlocked achievements are skipped, so ``unlocked_at`` is never
        overwritten or cleared.

        Returns:
            Ids unlocked by this call.
        """
        achievements = self.coordinator.achievements_data
        newly_unlocked: list[str] = []
        for result in GamificationEngine.evaluate_achievements(
            self._build_context(),
            achievements,
            const.ACHIEVEMENT_CRITERIA_BY_TRIGGER.get(trigger, ()),
        ):
            achievement = achievements[result["achievement_id"]]
            achievement[const.DATA_ACHIEVEMENT_PROGRESS] = min(
                result["current_value"], result["target"]
            )
            if result["criteria_met"]:
                achievement[const.DATA_ACHIEVEMENT_UNLOCKED_AT] = now.isoformat()
                newly_unlocked.append(result["achievement_id"])
                const.LOGGER.debug(
                    "Achievement '%s' unlocked at %s",
                    result["achievement_id"],
                    now.isoformat(),
                )
        return newly_unlocked

    def apply_task_completion(self, xp: int, now: datetime) -> GamificationUpdate:
        """Apply one completed task to the profile.

        The streak is computed from the PREVIOUS last_active_date before it is
        advanced to ``now``.
        """
        profile = self.coordinator.profile_data
        old_xp = int(profile.get(const.DATA_PROFILE_XP, 0))
        old_level = GamificationEngine.calculate_level(old_xp)["level"]

        new_xp = old_xp + xp
        profile[const.DATA_PROFILE_XP] = new_xp
        profile[const.DATA_PROFILE_TOTAL_XP] = (
            int(profile.get(const.DATA_PROFILE_TOTAL_XP, 0)) + xp
        )
        self._sync_level_fields(profile)

        streak = ScheduleEngine.calculate_streak(
            int(profile.get(const.DATA_PROFILE_STREAK_DAYS, 0)),
            profile.get(const.DATA_PROFILE_LAST_ACTIVE_DATE),
            now,
        )
        streak_days = streak["streak_days"]
        profile[const.DATA_PROFILE_STREAK_DAYS] = streak_days
        profile[const.DATA_PROFILE_CURRENT_STREAK] = streak_days
        profile[const.DATA_PROFILE_LONGEST_STREAK] = max(
            int(profile.get(const.DATA_PROFILE_LONGEST_STREAK, 0)), streak_days
        )
        profile[const.DATA_PROFILE_LAST_ACTIVE_DATE] = now.isoformat()

        for counter in (
            const.DATA_PROFILE_TOTAL_TASKS_COMPLETED,
            const.DATA_PROFILE_TASKS_COMPLETED,
        ):
            profile[counter] = int(profile.get(counter, 0)) + 1

        if streak["reset"]:
            const.LOGGER.debug(
                "Streak reset after %s days without care",
                streak["days_since_active"],
            )

        unlocked = self.unlock_achievements(
            const.ACHIEVEMENT_TRIGGER_TASK_COMPLETED, now
        )
        return {
            "old_xp": old_xp,
            "new_xp": new_xp,
            "old_level": old_level,
            "new_level": profile[const.DATA_PROFILE_LEVEL],
            "level_name": profile[const.DATA_PROFILE_LEVEL_NAME],
            "streak_days": streak_days,
            "unlocked_achievements": unlocked,
        }

    def apply_plant_added(self, now: datetime) -> list[str]:
        """Count a new plant and evaluate plant-count achievements.

        Must run after the plant is stored so the count includes it.
        """
        profile = self.coordinator.profile_data
        profile[const.DATA_PROFILE_TOTAL_PLANTS_ADDED] = (
            int(profile.get(const.DATA_PROFILE_TOTAL_PLANTS_ADDED, 0)) + 1
        )
        return self.unlock_achievements(const.ACHIEVEMENT_TRIGGER_PLANT_ADDED, now)

    # =========================================================================
    # Events (call after the transaction commits)
    # =========================================================================

    def emit_update(self, update: GamificationUpdate) -> None:
        """Emit xp, level and achievement events for a committed update."""
        if update["new_xp"] != update["old_xp"]:
            self.emit(
                const.SIGNAL_SUFFIX_XP_CHANGED,
                old_xp=update["old_xp"],
                new_xp=update["new_xp"],
                delta=update["new_xp"] - update["old_xp"],
            )
        if update["new_level"] > update["old_level"]:
            self.emit(
                const.SIGNAL_SUFFIX_LEVEL_UP,
                old_level=update["old_level"],
                new_level=update["new_level"],
                level_name=update["level_name"],
            )
        self.emit_unlocked(update["unlocked_achievements"])

    def emit_unlocked(self, achievement_ids: list[str]) -> None:
        """Emit one achievement_unlocked event per id."""
        achievements = self.coordinator.achievements_data
        for achievement_id in achievement_ids:
            achievement = achievements.get(achievement_id, {})
            self.emit(
                const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED,
                achievement_id=achievement_id,
                name=achievement.get(const.DATA_ACHIEVEMENT_NAME, achievement_id),
                description=achievement.get(const.DATA_ACHIEVEMENT_DESCRIPTION, ""),
            )

    # =========================================================================
    # Profile edits
    # =========================================================================

    async def async_update_profile(
        self,
        username: str | None = None,
        experience_level: str | None = None,
    ) -> dict[str, Any]:
        """Edit the user-facing profile fields.

        XP, level and counters are not editable here.

        Raises:
            HomeAssistantError: If the username is blank or the experience
                level is unknown.
        """
        if username is not None and not username.strip():
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_VALUE,
                translation_placeholders={
                    "field": const.DATA_PROFILE_USERNAME,
                    "value": username,
                },
            )
        if (
            experience_level is not None
            and experience_level not in const.EXPERIENCE_LEVELS
        ):
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_VALUE,
                translation_placeholders={
                    "field": const.DATA_PROFILE_EXPERIENCE_LEVEL,
                    "value": experience_level,
                },
            )

        async with self.coordinator.async_transaction():
            profile = self.coordinator.profile_data
            if username is not None:
                profile[const.DATA_PROFILE_USERNAME] = username.strip()
            if experience_level is not None:
                profile[const.DATA_PROFILE_EXPERIENCE_LEVEL] = experience_level

        const.LOGGER.debug("Profile updated at %s", dt_now_utc().isoformat())
        return dict(self.coordinator.profile_data)

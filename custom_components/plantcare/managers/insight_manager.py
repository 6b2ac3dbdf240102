"""Insight Manager - Tips, warnings, milestones and plant memorials.

Insights are append-only records. The only mutation after creation is the
soft delete performed by ``async_dismiss_insight``.

Milestone insights are created reactively from achievement_unlocked and
level_up events, so the gamification path never depends on this manager.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError

from .. import const, data_builders as db
from ..utils.dt_utils import dt_now_utc
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import datetime

    from ..type_defs import InsightData


class InsightManager(BaseManager):
    """Create, list and dismiss insights."""

    async def async_setup(self) -> None:
        """Subscribe to gamification events that produce milestone insights."""
        self.listen(
            const.SIGNAL_SUFFIX_ACHIEVEMENT_UNLOCKED, self._on_achievement_unlocked
        )
        self.listen(const.SIGNAL_SUFFIX_LEVEL_UP, self._on_level_up)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_active_insights(self) -> list[InsightData]:
        """Return undismissed insights, newest first."""
        active = [
            insight
            for insight in self.coordinator.insights_data.values()
            if not insight.get(const.DATA_INSIGHT_DISMISSED)
        ]
        return sorted(
            active,
            key=lambda item: item.get(const.DATA_INSIGHT_CREATED_AT, ""),
            reverse=True,
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    def create_insight(
        self,
        insight_type: str,
        title: str,
        message: str,
        *,
        plant_id: str | None = None,
        now: datetime | None = None,
    ) -> InsightData:
        """Store a new insight without persisting.

        Call inside ``coordinator.async_transaction()`` and emit
        insight_created after it commits.
        """
        insight = db.build_insight(
            insight_type, title, message, plant_id=plant_id, created_at=now
        )
        self.coordinator.insights_data[insight[const.DATA_INSIGHT_ID]] = insight
        return insight

    async def async_add_insight(
        self,
        insight_type: str,
        title: str,
        message: str,
        *,
        plant_id: str | None = None,
        now: datetime | None = None,
    ) -> InsightData:
        """Create and persist an insight, then announce it."""
        async with self.coordinator.async_transaction():
            insight = self.create_insight(
                insight_type, title, message, plant_id=plant_id, now=now
            )
        self.emit_created(insight)
        return insight

    def emit_created(self, insight: InsightData) -> None:
        """Announce a committed insight."""
        self.emit(
            const.SIGNAL_SUFFIX_INSIGHT_CREATED,
            insight_id=insight[const.DATA_INSIGHT_ID],
            insight_type=insight[const.DATA_INSIGHT_TYPE],
            plant_id=insight.get(const.DATA_INSIGHT_PLANT_ID),
        )

    async def async_dismiss_insight(self, insight_id: str) -> bool:
        """Soft-delete an insight.

        Returns:
            True if the insight was dismissed by this call, False if it was
            already dismissed.

        Raises:
            HomeAssistantError: If no insight has this id.
        """
        async with self.coordinator.async_transaction():
            insight = self.coordinator.insights_data.get(insight_id)
            if insight is None:
                raise HomeAssistantError(
                    translation_domain=const.DOMAIN,
                    translation_key=const.TRANS_KEY_ERROR_NOT_FOUND,
                    translation_placeholders={
                        "entity_type": const.ENTITY_TYPE_INSIGHT,
                        "name": insight_id,
                    },
                )
            if insight.get(const.DATA_INSIGHT_DISMISSED):
                const.LOGGER.debug("Insight %s already dismissed", insight_id)
                return False
            insight[const.DATA_INSIGHT_DISMISSED] = True

        self.emit(const.SIGNAL_SUFFIX_INSIGHT_DISMISSED, insight_id=insight_id)
        return True

    # =========================================================================
    # Event handlers
    # =========================================================================

    async def _on_achievement_unlocked(self, payload: dict[str, Any]) -> None:
        name = payload.get("name") or payload.get("achievement_id", "")
        await self.async_add_insight(
            const.INSIGHT_TYPE_MILESTONE,
            const.MILESTONE_ACHIEVEMENT_TITLE_FMT.format(name=name),
            payload.get("description", ""),
            now=dt_now_utc(),
        )

    async def _on_level_up(self, payload: dict[str, Any]) -> None:
        await self.async_add_insight(
            const.INSIGHT_TYPE_MILESTONE,
            const.MILESTONE_LEVEL_TITLE_FMT.format(level=payload["new_level"]),
            const.MILESTONE_LEVEL_MESSAGE_FMT.format(
                level_name=payload.get("level_name", "")
            ),
            now=dt_now_utc(),
        )

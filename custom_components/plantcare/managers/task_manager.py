"""Task Manager - Care task store and the completion/snooze workflows.

This manager owns the care task collection:
- Queries: all tasks, per plant, due on a date, overdue, completed today
- Index: (plant_id, action) -> the single pending task id
- Completion: close the task, schedule the next one, update the plant,
  award XP and streak through the GamificationManager
- Snooze: shift the pending task's due date without completing it

Every mutation for one plant runs under that plant's lock and inside a
coordinator transaction, so a failed save leaves no partial state and two
completions on the same plant cannot interleave their read-modify-write.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from .. import const, data_builders as db
from ..engines.health_engine import HealthEngine
from ..engines.schedule_engine import ScheduleEngine
from ..utils.dt_utils import as_local, dt_now_utc, dt_to_utc
from .base_manager import BaseManager

if TYPE_CHECKING:
    from datetime import date, datetime

    from homeassistant.core import HomeAssistant

    from ..coordinator import PlantCareDataCoordinator
    from ..type_defs import CareTaskData, CompletionResult, SnoozeResult


class TaskManager(BaseManager):
    """Manager for care tasks.

    Responsibilities:
    - Enforce at most one pending task per (plant, action)
    - Complete and snooze tasks atomically
    - Seed and cascade-delete tasks for plant lifecycle operations

    NOT responsible for:
    - XP, streak and achievements (GamificationManager)
    - Plant creation and removal (PlantManager)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        coordinator: PlantCareDataCoordinator,
    ) -> None:
        """Initialize the TaskManager."""
        super().__init__(hass, coordinator)
        self._pending_index: dict[tuple[str, str], str] = {}
        self._plant_locks: dict[str, asyncio.Lock] = {}

    async def async_setup(self) -> None:
        """Build the pending-task index and close duplicates left in storage."""
        duplicates = self.rebuild_index()
        if duplicates:
            const.LOGGER.warning(
                "Found %d duplicate pending tasks at startup; closing them",
                len(duplicates),
            )
            await self.async_close_duplicates(duplicates)

    def _get_lock(self, plant_id: str) -> asyncio.Lock:
        return self._plant_locks.setdefault(plant_id, asyncio.Lock())

    # =========================================================================
    # Index
    # =========================================================================

    def rebuild_index(self) -> list[str]:
        """Rebuild the (plant_id, action) -> pending task index.

        When several pending tasks share a key, the earliest due one is
        indexed.

        Returns:
            Ids of the pending tasks that lost to an earlier-due duplicate.
        """
        index: dict[tuple[str, str], str] = {}
        duplicates: list[str] = []
        tasks = self.coordinator.tasks_data

        for task in sorted(
            (t for t in tasks.values() if not t.get(const.DATA_TASK_COMPLETED)),
            key=lambda t: (
                dt_to_utc(t.get(const.DATA_TASK_DUE_DATE)) or dt_now_utc(),
                t[const.DATA_TASK_ID],
            ),
        ):
            key = (task[const.DATA_TASK_PLANT_ID], task[const.DATA_TASK_TYPE])
            if key in index:
                duplicates.append(task[const.DATA_TASK_ID])
            else:
                index[key] = task[const.DATA_TASK_ID]

        self._pending_index = index
        return duplicates

    async def async_close_duplicates(
        self, task_ids: list[str], now: datetime | None = None
    ) -> None:
        """Mark duplicate pending tasks completed with no XP and reindex."""
        now = now or dt_now_utc()
        async with self.coordinator.async_transaction():
            for task_id in task_ids:
                task = self.coordinator.tasks_data.get(task_id)
                if task is None or task.get(const.DATA_TASK_COMPLETED):
                    continue
                task[const.DATA_TASK_COMPLETED] = True
                task[const.DATA_TASK_COMPLETED_DATE] = now.isoformat()
                task[const.DATA_TASK_XP_EARNED] = 0
                const.LOGGER.warning(
                    "Closed duplicate pending %s task %s for plant %s",
                    task[const.DATA_TASK_TYPE],
                    task_id,
                    task[const.DATA_TASK_PLANT_ID],
                )
            self.rebuild_index()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_tasks(self) -> list[CareTaskData]:
        """Return every task, pending and completed."""
        return list(self.coordinator.tasks_data.values())

    def get_task(self, task_id: str) -> CareTaskData | None:
        """Return one task by id."""
        return self.coordinator.tasks_data.get(task_id)

    def get_tasks_for_plant(self, plant_id: str) -> list[CareTaskData]:
        """Return all tasks owned by a plant."""
        return [
            task
            for task in self.coordinator.tasks_data.values()
            if task.get(const.DATA_TASK_PLANT_ID) == plant_id
        ]

    def get_pending_tasks(self) -> list[CareTaskData]:
        """Return incomplete tasks of existing plants, earliest due first."""
        plants = self.coordinator.plants_data
        pending = [
            task
            for task in self.coordinator.tasks_data.values()
            if not task.get(const.DATA_TASK_COMPLETED)
            and task.get(const.DATA_TASK_PLANT_ID) in plants
        ]
        return sorted(pending, key=lambda t: t.get(const.DATA_TASK_DUE_DATE, ""))

    def get_pending_task(self, plant_id: str, action: str) -> CareTaskData | None:
        """Return the single pending task for (plant, action), if any."""
        task_id = self._pending_index.get((plant_id, str(action)))
        if task_id is None:
            return None
        task = self.coordinator.tasks_data.get(task_id)
        if task is None or task.get(const.DATA_TASK_COMPLETED):
            return None
        return task

    def get_tasks_due_on(self, day: date) -> list[CareTaskData]:
        """Return incomplete tasks due on local date ``day``."""
        return [
            task for task in self.get_pending_tasks() if ScheduleEngine.is_due_on(task, day)
        ]

    def get_overdue_tasks(self, now: datetime | None = None) -> list[CareTaskData]:
        """Return incomplete tasks due strictly before today."""
        now = now or dt_now_utc()
        return [
            task for task in self.get_pending_tasks() if ScheduleEngine.is_overdue(task, now)
        ]

    def get_overdue_actions(self, plant_id: str, now: datetime) -> set[str]:
        """Return the actions with an overdue pending task for one plant."""
        return {
            task[const.DATA_TASK_TYPE]
            for task in self.get_tasks_for_plant(plant_id)
            if ScheduleEngine.is_overdue(task, now)
        }

    def get_completed_today(self, now: datetime | None = None) -> list[CareTaskData]:
        """Return tasks completed on today's local date."""
        today = as_local(now or dt_now_utc()).date()
        return [
            task
            for task in self.coordinator.tasks_data.values()
            if ScheduleEngine.is_completed_on(task, today)
        ]

    def group_pending_tasks(
        self, now: datetime | None = None
    ) -> dict[str, list[CareTaskData]]:
        """Split pending tasks into overdue, today and upcoming."""
        now = now or dt_now_utc()
        today = as_local(now).date()
        groups: dict[str, list[CareTaskData]] = {
            const.TASK_GROUP_OVERDUE: [],
            const.TASK_GROUP_TODAY: [],
            const.TASK_GROUP_UPCOMING: [],
        }
        for task in self.get_pending_tasks():
            if ScheduleEngine.is_overdue(task, now):
                groups[const.TASK_GROUP_OVERDUE].append(task)
            elif ScheduleEngine.is_due_on(task, today):
                groups[const.TASK_GROUP_TODAY].append(task)
            else:
                groups[const.TASK_GROUP_UPCOMING].append(task)
        return groups

    # =========================================================================
    # Creation and removal (call inside coordinator.async_transaction)
    # =========================================================================

    def create_task(
        self, plant_id: str, action: str, due_date: datetime
    ) -> CareTaskData:
        """Create the pending task for (plant, action).

        If a pending task already exists for the pair it is returned
        unchanged and nothing is created.
        """
        existing = self.get_pending_task(plant_id, action)
        if existing is not None:
            const.LOGGER.warning(
                "Plant %s already has pending %s task %s; not creating another",
                plant_id,
                action,
                existing[const.DATA_TASK_ID],
            )
            return existing

        task = db.build_care_task(plant_id, action, due_date)
        self.coordinator.tasks_data[task[const.DATA_TASK_ID]] = task
        self._pending_index[(plant_id, task[const.DATA_TASK_TYPE])] = task[
            const.DATA_TASK_ID
        ]
        const.LOGGER.debug(
            "Created %s task %s for plant %s due %s",
            action,
            task[const.DATA_TASK_ID],
            plant_id,
            task[const.DATA_TASK_DUE_DATE],
        )
        return task

    def seed_plant_tasks(
        self, plant: dict[str, Any], now: datetime
    ) -> list[CareTaskData]:
        """Create the initial water and mist tasks for a new plant."""
        plant_id = plant[const.DATA_PLANT_ID]
        return [
            self.create_task(
                plant_id,
                action,
                ScheduleEngine.next_due_date(
                    now, ScheduleEngine.get_frequency_days(plant, action)
                ),
            )
            for action in const.SEEDED_CARE_ACTIONS
        ]

    def remove_tasks_for_plant(self, plant_id: str) -> int:
        """Delete every task, pending or completed, owned by a plant."""
        tasks = self.coordinator.tasks_data
        task_ids = [
            task_id
            for task_id, task in tasks.items()
            if task.get(const.DATA_TASK_PLANT_ID) == plant_id
        ]
        for task_id in task_ids:
            del tasks[task_id]
        for key in [key for key in self._pending_index if key[0] == plant_id]:
            del self._pending_index[key]
        self._plant_locks.pop(plant_id, None)
        return len(task_ids)

    # =========================================================================
    # Completion
    # =========================================================================

    def _resolve_open_task(
        self, task_id: str, operation: str
    ) -> tuple[CareTaskData | None, dict[str, Any] | None, dict[str, Any] | None]:
        """Look up a pending task and its plant in the live document.

        Returns ``(task, plant, None)`` when the task can be acted on,
        otherwise ``(None, None, failure)`` with the failed result fields.
        """
        task = self.get_task(task_id)
        if task is None:
            const.LOGGER.info("%s: task %s not found", operation, task_id)
            return None, None, {"reason": const.RESULT_REASON_NOT_FOUND}

        if task.get(const.DATA_TASK_COMPLETED):
            const.LOGGER.info(
                "%s: task %s already completed on %s",
                operation,
                task_id,
                task.get(const.DATA_TASK_COMPLETED_DATE),
            )
            return None, None, {"reason": const.RESULT_REASON_ALREADY_COMPLETED}

        plant = self.coordinator.plants_data.get(task[const.DATA_TASK_PLANT_ID])
        if plant is None:
            const.LOGGER.info(
                "%s: plant %s for task %s no longer exists",
                operation,
                task[const.DATA_TASK_PLANT_ID],
                task_id,
            )
            return None, None, {"reason": const.RESULT_REASON_ORPHANED}

        return task, plant, None

    async def async_complete_task(
        self, task_id: str, now: datetime | None = None
    ) -> CompletionResult:
        """Complete a pending task and apply all of its side effects.

        Failed results (nothing is mutated):
        - not_found: no task has this id
        - already_completed: the task was completed earlier
        - orphaned: the owning plant no longer exists

        Raises:
            InvalidFrequencyError: If the plant's stored frequency is invalid.
            StoreUnavailableError: If the save fails; state is rolled back.
        """
        now = now or dt_now_utc()
        task = self.get_task(task_id)
        if task is None:
            const.LOGGER.info("Complete task: task %s not found", task_id)
            return {
                "success": False,
                "reason": const.RESULT_REASON_NOT_FOUND,
                "task_id": task_id,
            }

        plant_id = task[const.DATA_TASK_PLANT_ID]
        async with self._get_lock(plant_id), self.coordinator.async_transaction():
            # Resolve inside the transaction; a rollback of another
            # transaction replaces the task and plant dicts
            task, plant, failure = self._resolve_open_task(task_id, "Complete task")
            if failure is not None:
                return {
                    "success": False,
                    "reason": failure["reason"],
                    "task_id": task_id,
                    "plant_id": plant_id,
                }

            action = task[const.DATA_TASK_TYPE]
            spec = const.CARE_ACTIONS[const.CareAction(action)]
            try:
                frequency = ScheduleEngine.get_frequency_days(plant, action)
            except ValueError as err:
                raise db.InvalidFrequencyError(
                    spec.frequency_field, plant.get(spec.frequency_field)
                ) from err

            task[const.DATA_TASK_COMPLETED] = True
            task[const.DATA_TASK_COMPLETED_DATE] = now.isoformat()
            task[const.DATA_TASK_XP_EARNED] = const.XP_PER_TASK
            self._pending_index.pop((plant_id, action), None)

            next_task = self.create_task(
                plant_id, action, ScheduleEngine.next_due_date(now, frequency)
            )

            plant[spec.last_performed_field] = now.isoformat()
            plant[const.DATA_PLANT_HEALTH_SCORE] = HealthEngine.apply_care_boost(
                plant.get(const.DATA_PLANT_HEALTH_SCORE)
            )
            if action == const.CareAction.WATER:
                plant[const.DATA_PLANT_HYDRATION_LEVEL] = const.HEALTH_VALUE_MAX
            plant.setdefault(const.DATA_PLANT_CARE_HISTORY, []).append(
                db.build_care_event(action, now)
            )
            plant[const.DATA_PLANT_STATUS] = HealthEngine.derive_care_status(
                plant, self.get_overdue_actions(plant_id, now), now
            )

            update = self.coordinator.gamification_manager.apply_task_completion(
                const.XP_PER_TASK, now
            )

        const.LOGGER.debug(
            "Completed %s task %s for plant %s; next due %s",
            action,
            task_id,
            plant_id,
            next_task[const.DATA_TASK_DUE_DATE],
        )
        self.emit(
            const.SIGNAL_SUFFIX_TASK_COMPLETED,
            task_id=task_id,
            plant_id=plant_id,
            action=action,
            xp_earned=const.XP_PER_TASK,
        )
        self.emit(
            const.SIGNAL_SUFFIX_TASK_CREATED,
            task_id=next_task[const.DATA_TASK_ID],
            plant_id=plant_id,
            action=action,
        )
        self.coordinator.gamification_manager.emit_update(update)

        return {
            "success": True,
            "task_id": task_id,
            "plant_id": plant_id,
            "xp_earned": const.XP_PER_TASK,
            "next_task_id": next_task[const.DATA_TASK_ID],
            "unlocked_achievements": update["unlocked_achievements"],
        }

    # =========================================================================
    # Snooze
    # =========================================================================

    async def async_snooze_task(
        self, task_id: str, days: Any, now: datetime | None = None
    ) -> SnoozeResult:
        """Push a pending task's due date forward by ``days``.

        The task stays the single pending task for its (plant, action); no XP
        is awarded and no new task is created.

        Raises:
            InvalidFrequencyError: If ``days`` is not a positive whole number.
            StoreUnavailableError: If the save fails; state is rolled back.
        """
        days = db.validate_frequency(const.FIELD_DAYS, days)
        now = now or dt_now_utc()
        task = self.get_task(task_id)
        if task is None:
            const.LOGGER.info("Snooze task: task %s not found", task_id)
            return {
                "success": False,
                "reason": const.RESULT_REASON_NOT_FOUND,
                "task_id": task_id,
            }

        plant_id = task[const.DATA_TASK_PLANT_ID]
        async with self._get_lock(plant_id), self.coordinator.async_transaction():
            task, _plant, failure = self._resolve_open_task(task_id, "Snooze task")
            if failure is not None:
                return {
                    "success": False,
                    "reason": failure["reason"],
                    "task_id": task_id,
                }

            new_due = ScheduleEngine.snooze_due_date(
                task[const.DATA_TASK_DUE_DATE], days, now
            ).isoformat()
            task[const.DATA_TASK_DUE_DATE] = new_due
            task[const.DATA_TASK_SNOOZED_UNTIL] = new_due

        const.LOGGER.debug("Snoozed task %s by %d days to %s", task_id, days, new_due)
        self.emit(
            const.SIGNAL_SUFFIX_TASK_SNOOZED,
            task_id=task_id,
            plant_id=plant_id,
            due_date=new_due,
        )
        return {"success": True, "task_id": task_id, "due_date": new_due}

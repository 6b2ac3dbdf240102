"""Manager modules for PlantCare integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle cross-cutting concerns.
"""

from .base_manager import BaseManager
from .gamification_manager import GamificationManager
from .insight_manager import InsightManager
from .plant_manager import PlantManager
from .task_manager import TaskManager

__all__ = [
    "BaseManager",
    "GamificationManager",
    "InsightManager",
    "PlantManager",
    "TaskManager",
]

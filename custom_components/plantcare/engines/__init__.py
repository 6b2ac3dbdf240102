"""Engine modules for PlantCare integration.

Contains stateless computation engines:
- gamification_engine: Leveling and achievement threshold evaluation
- health_engine: Display status, coarse care status, hydration decay
- schedule_engine: Due dates, overdue checks, streaks, schedule suggestions
"""

# Use relative imports within package to avoid mypy module resolution issues
from .gamification_engine import GamificationEngine
from .health_engine import HealthEngine
from .schedule_engine import ScheduleEngine

__all__ = [
    "GamificationEngine",
    "HealthEngine",
    "ScheduleEngine",
]

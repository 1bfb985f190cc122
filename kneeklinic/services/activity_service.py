"""
kneeklinic/services/activity_service.py

Purpose: Exercise and diet plan tracking

- Plans per severity level
- Today's log and completion history
- Saving daily progress (completed items, water intake)
"""

from typing import Dict, List

from kneeklinic.core.errors import parse_response
from kneeklinic.core.exceptions import KneeKlinicError
from kneeklinic.core.logging import get_logger
from kneeklinic.schemas.activity import (
    ActivityHistory,
    DietLog,
    DietPlan,
    DietPlansResponse,
    DietTodayResponse,
    ExerciseLog,
    ExercisePlan,
    ExercisePlansResponse,
    ExerciseTodayResponse,
    SeverityLevel,
)
from kneeklinic.schemas.response import ApiResponse
from kneeklinic.services.api_client import ApiClient
from kneeklinic.utils.constants import (
    ACTIVITY_HISTORY_DAYS,
    PROGRESS_HISTORY_DAYS,
    WATER_INTAKE_MIN,
    WATER_INTAKE_MAX,
)

logger = get_logger(__name__)


def toggle_item(completed: List[str], item_id: str) -> List[str]:
    """
    Returns a new completed list with item_id added, or removed if present.
    """
    if item_id in completed:
        return [i for i in completed if i != item_id]
    return [*completed, item_id]


def completion_percentage(completed_count: int, total: int) -> int:
    """Whole-number completion percentage, halves rounded up; 0 for an empty plan."""
    if total <= 0:
        return 0
    return int(completed_count * 100 / total + 0.5)


def clamp_water_intake(glasses: int) -> int:
    """Keeps water intake within 0..12 glasses."""
    return max(WATER_INTAKE_MIN, min(WATER_INTAKE_MAX, glasses))


class ActivityService:
    """Service for the /activity endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    # Exercise

    async def get_exercise_plans(self) -> Dict[SeverityLevel, ExercisePlan]:
        data = await self.client.get("activity/exercise/plans")
        return parse_response(ExercisePlansResponse, data).plans

    async def get_exercise_today(self) -> ExerciseTodayResponse:
        data = await self.client.get("activity/exercise/today")
        return parse_response(ExerciseTodayResponse, data)

    async def get_exercise_history(self, days: int = ACTIVITY_HISTORY_DAYS) -> ActivityHistory:
        data = await self.client.get("activity/exercise/history", params={"days": days})
        return parse_response(ActivityHistory, data)

    async def log_exercise(self, severity_level: SeverityLevel, completed_exercises: List[str], total_exercises: int) -> ApiResponse:
        """
        Saves today's exercise progress for the selected plan.
        """
        log = ExerciseLog(
            severity_level=severity_level,
            completed_exercises=completed_exercises,
            total_exercises=total_exercises,
        )
        data = await self.client.post("activity/exercise/log", json=log.to_payload())
        logger.info(
            f"Exercise progress saved: {len(completed_exercises)}/{total_exercises} ({severity_level})"
        )
        return parse_response(ApiResponse, data)

    # Diet

    async def get_diet_plans(self) -> Dict[SeverityLevel, DietPlan]:
        data = await self.client.get("activity/diet/plans")
        return parse_response(DietPlansResponse, data).plans

    async def get_diet_today(self) -> DietTodayResponse:
        data = await self.client.get("activity/diet/today")
        return parse_response(DietTodayResponse, data)

    async def get_diet_history(self, days: int = ACTIVITY_HISTORY_DAYS) -> ActivityHistory:
        data = await self.client.get("activity/diet/history", params={"days": days})
        return parse_response(ActivityHistory, data)

    async def log_diet(
        self,
        severity_level: SeverityLevel,
        completed_meals: List[str],
        total_meals: int,
        water_intake: int = 0
    ) -> ApiResponse:
        """
        Saves today's diet progress. Water intake is clamped to 0..12 glasses.
        """
        log = DietLog(
            severity_level=severity_level,
            completed_meals=completed_meals,
            total_meals=total_meals,
            water_intake=clamp_water_intake(water_intake),
        )
        data = await self.client.post("activity/diet/log", json=log.to_payload())
        logger.info(
            f"Diet progress saved: {len(completed_meals)}/{total_meals}, water {log.water_intake}"
        )
        return parse_response(ApiResponse, data)

    # Progress screen helpers: history failures fall back to an empty history

    async def get_exercise_history_or_empty(self, days: int = PROGRESS_HISTORY_DAYS) -> ActivityHistory:
        try:
            return await self.get_exercise_history(days)
        except KneeKlinicError as e:
            logger.error(f"Error fetching exercise history: {e.message}")
            return ActivityHistory()

    async def get_diet_history_or_empty(self, days: int = PROGRESS_HISTORY_DAYS) -> ActivityHistory:
        try:
            return await self.get_diet_history(days)
        except KneeKlinicError as e:
            logger.error(f"Error fetching diet history: {e.message}")
            return ActivityHistory()

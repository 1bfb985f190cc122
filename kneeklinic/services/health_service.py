"""
kneeklinic/services/health_service.py

Purpose: Step records and dashboard

- Saves finished step sessions to the health record
- Weekly step summary for the progress charts
- Dashboard statistics and recent analyses
"""

from kneeklinic.core.errors import parse_response
from kneeklinic.core.exceptions import KneeKlinicError
from kneeklinic.core.logging import get_logger
from kneeklinic.schemas.activity import StepSession, WeeklyStepData
from kneeklinic.schemas.dashboard import DashboardData
from kneeklinic.schemas.response import ApiResponse
from kneeklinic.services.api_client import ApiClient
from kneeklinic.utils.time_utils import to_iso

logger = get_logger(__name__)


class HealthService:
    """Service for the /health and /dashboard endpoints."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def save_step_session(self, session: StepSession) -> ApiResponse:
        """
        Stores one walking session.

        Raises:
            KneeKlinicError subclass on failure; the caller keeps the session for a retry
        """
        payload = {
            "steps": session.steps,
            "distance": session.distance,
            "calories": session.calories,
            "startTime": to_iso(session.start_time),
            "endTime": to_iso(session.end_time),
            "duration": session.duration,
        }
        logger.info(
            f"Sending step data to server: {session.steps} steps, "
            f"{session.distance} km, {session.calories} kcal"
        )
        data = await self.client.post("health/steps", json=payload)
        logger.info("Step session saved")
        return parse_response(ApiResponse, data)

    async def get_weekly_steps(self) -> WeeklyStepData:
        """
        Last seven days of steps.

        Falls back to an empty Mon..Sun week when the request fails or the
        payload does not carry chart data.
        """
        try:
            data = await self.client.get("health/steps/weekly")
        except KneeKlinicError as e:
            logger.error(f"Error fetching weekly steps: {e.message}")
            return WeeklyStepData.empty_week()

        if not isinstance(data, dict) or not data.get("chartData"):
            logger.warning("Invalid weekly steps payload, using defaults")
            return WeeklyStepData.empty_week()

        try:
            weekly = parse_response(WeeklyStepData, data)
        except KneeKlinicError:
            return WeeklyStepData.empty_week()

        if len(weekly.chart_data.labels) != 7 or len(weekly.chart_data.values) != 7:
            weekly.chart_data = WeeklyStepData.empty_week().chart_data
        weekly.chart_data.values = [max(0, v or 0) for v in weekly.chart_data.values]
        logger.debug(f"Weekly steps loaded: {weekly.summary.total_steps} total")
        return weekly

    async def get_dashboard(self) -> DashboardData:
        data = await self.client.get("dashboard")
        return parse_response(DashboardData, data)

"""
kneeklinic/services/appointment_service.py

Purpose: Appointment management

- Lists appointments, split into upcoming and past
- Adds an appointment after booking on the external booking page
- Reschedules and cancels
"""

from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from kneeklinic.core.config import settings
from kneeklinic.core.errors import parse_response
from kneeklinic.core.logging import get_logger
from kneeklinic.schemas.appointments import Appointment, AppointmentsResponse, CreateAppointmentData
from kneeklinic.schemas.response import ApiResponse
from kneeklinic.services.api_client import ApiClient
from kneeklinic.utils.constants import (
    DEFAULT_DOCTOR_NAME,
    DEFAULT_SPECIALTY,
    DEFAULT_APPOINTMENT_TIME,
    DEFAULT_APPOINTMENT_TYPE,
    DEFAULT_APPOINTMENT_NOTES,
)
from kneeklinic.utils.time_utils import utcnow

logger = get_logger(__name__)


def split_appointments(appointments: List[Appointment]) -> Tuple[List[Appointment], List[Appointment]]:
    """
    Splits appointments into (upcoming, past).
    Anything not in the "upcoming" status counts as past.
    """
    upcoming = [apt for apt in appointments if apt.is_upcoming]
    past = [apt for apt in appointments if not apt.is_upcoming]
    return upcoming, past


class AppointmentService:
    """Service for the /appointments endpoints."""

    def __init__(self, client: ApiClient, booking_url: Optional[str] = None):
        self.client = client
        self.booking_url = booking_url or settings.BOOKING_URL

    async def get_appointments(self) -> List[Appointment]:
        data = await self.client.get("appointments")
        return parse_response(AppointmentsResponse, data).appointments

    async def add_appointment(
        self,
        date: Optional[datetime] = None,
        time: str = DEFAULT_APPOINTMENT_TIME,
        doctor_name: str = DEFAULT_DOCTOR_NAME,
        specialty: str = DEFAULT_SPECIALTY,
        type: str = DEFAULT_APPOINTMENT_TYPE,
        notes: Optional[str] = DEFAULT_APPOINTMENT_NOTES,
    ) -> ApiResponse:
        """
        Records an appointment booked on the external booking page.
        Defaults to tomorrow at 10:00 AM with the clinic's orthopedic specialist.
        """
        payload = CreateAppointmentData(
            doctor_name=doctor_name,
            specialty=specialty,
            date=date or (utcnow() + timedelta(days=1)),
            time=time,
            type=type,
            notes=notes,
        )
        data = await self.client.post("appointments", json=payload.to_payload())
        logger.info(f"Appointment added for {payload.date.date()} {payload.time}")
        return parse_response(ApiResponse, data)

    async def reschedule_appointment(self, appointment_id: str) -> ApiResponse:
        """
        Marks an appointment as rescheduled; the new slot is booked on the
        booking page and added with add_appointment.
        """
        data = await self.client.put(f"appointments/{appointment_id}", json={"status": "rescheduled"})
        logger.info(f"Appointment {appointment_id} marked rescheduled")
        return parse_response(ApiResponse, data)

    async def cancel_appointment(self, appointment_id: str) -> ApiResponse:
        data = await self.client.delete(f"appointments/{appointment_id}")
        logger.info(f"Appointment {appointment_id} cancelled")
        return parse_response(ApiResponse, data)

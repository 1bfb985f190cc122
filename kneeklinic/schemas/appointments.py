from datetime import datetime
from pydantic import Field
from typing import Optional, List, Literal

from kneeklinic.schemas.response import ApiModel

AppointmentStatus = Literal["upcoming", "completed", "cancelled", "rescheduled"]


class Appointment(ApiModel):
    id: str = Field(..., alias="_id")
    doctor_name: str
    specialty: str
    date: datetime
    time: str
    status: AppointmentStatus = "upcoming"
    type: str
    notes: Optional[str] = None

    @property
    def is_upcoming(self) -> bool:
        return self.status == "upcoming"


class CreateAppointmentData(ApiModel):
    doctor_name: str
    specialty: str
    date: datetime
    time: str
    type: str
    notes: Optional[str] = None


class AppointmentsResponse(ApiModel):
    appointments: List[Appointment] = []

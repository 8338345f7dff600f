from datetime import date, datetime
from typing import Optional
from pydantic import field_validator
from pmc_portal.core.security import OTP_LENGTH
from pmc_portal.models.enums import ApplicationStage, ApplicationStatus, RejectionCategory
from pmc_portal.schemas.common import CamelModel


def _clean_otp(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("OTP is required")
    if len(v) != OTP_LENGTH or not v.isdigit():
        raise ValueError(f"OTP must be {OTP_LENGTH} digits")
    return v


class GenerateOtpRequest(CamelModel):
    application_id: int
    officer_id: Optional[int] = None


class GenerateOtpResponse(CamelModel):
    success: bool = True
    message: str
    expires_at: datetime
    resend_available_at: datetime


class OfficerActionRequest(CamelModel):
    application_id: int
    otp: str
    officer_id: Optional[int] = None
    comments: Optional[str] = None

    @field_validator("otp")
    @classmethod
    def otp_format(cls, v: str) -> str:
        return _clean_otp(v)


class ScheduleAppointmentRequest(OfficerActionRequest):
    appointment_date: date
    place: Optional[str] = None

    @field_validator("appointment_date")
    @classmethod
    def working_day_in_future(cls, v: date) -> date:
        if v < date.today():
            raise ValueError("Appointment date cannot be in the past")
        if v.weekday() >= 5:
            raise ValueError("Appointments cannot be scheduled on weekends")
        return v


class RejectRequest(OfficerActionRequest):
    reason: str
    category: RejectionCategory = RejectionCategory.OTHER
    affected_fields: list[str] = []

    @field_validator("reason")
    @classmethod
    def reason_present(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("A rejection reason is required")
        return v


class ActionResponse(CamelModel):
    success: bool = True
    message: str
    application_id: int
    previous_stage: ApplicationStage
    current_stage: ApplicationStage
    status: ApplicationStatus
    certificate_number: Optional[str] = None

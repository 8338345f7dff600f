from datetime import date, datetime
from typing import Optional
from pydantic import EmailStr, Field, field_validator, model_validator
from pmc_portal.models.enums import (
    AccountRole,
    ApplicationStage,
    ApplicationStatus,
    DocumentType,
    Gender,
    PositionType,
    RejectionCategory,
    SpecializationType,
)
from pmc_portal.schemas.common import CamelModel

BLOOD_GROUPS = ("A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-")


class Address(CamelModel):
    address_line1: str
    address_line2: str = ""
    address_line3: str = ""
    city: str
    state: str
    country: str
    pin_code: str = Field(pattern=r"^\d{6}$")


class DocumentIn(CamelModel):
    document_type: DocumentType
    file_path: str
    file_name: str
    file_id: str


class DocumentRead(DocumentIn):
    document_id: int


class QualificationIn(CamelModel):
    file_id: str = ""
    institute_name: str
    university_name: str
    specialization: SpecializationType
    degree_name: str
    passing_month: int = Field(ge=1, le=12)
    year_of_passing: date


class QualificationRead(QualificationIn):
    qualification_id: int


class ExperienceIn(CamelModel):
    file_id: str = ""
    company_name: str
    position: str
    years_of_experience: float = Field(ge=0)
    from_date: date
    to_date: date

    @model_validator(mode="after")
    def dates_in_order(self):
        if self.to_date < self.from_date:
            raise ValueError("toDate must not be before fromDate")
        return self


class ExperienceRead(ExperienceIn):
    experience_id: int


class ApplicationCreate(CamelModel):
    model: Optional[str] = None
    first_name: str = Field(min_length=1)
    middle_name: str = ""
    last_name: str = Field(min_length=1)
    mother_name: str = Field(min_length=1)
    mobile_number: str = Field(pattern=r"^\d{10}$")
    email_address: EmailStr
    position_type: PositionType
    blood_group: str
    height: float = Field(gt=0)
    gender: Gender
    date_of_birth: date
    permanent_address: Address
    current_address: Address
    pan_card_number: str = Field(pattern=r"^[A-Z]{5}\d{4}[A-Z]$")
    aadhar_card_number: str = Field(pattern=r"^\d{12}$")
    coa_card_number: str = ""
    qualifications: list[QualificationIn] = []
    experiences: list[ExperienceIn] = []
    documents: list[DocumentIn] = []

    @field_validator("blood_group")
    @classmethod
    def known_blood_group(cls, v: str) -> str:
        if v not in BLOOD_GROUPS:
            raise ValueError(f"bloodGroup must be one of {', '.join(BLOOD_GROUPS)}")
        return v

    @field_validator("date_of_birth")
    @classmethod
    def born_in_past(cls, v: date) -> date:
        if v >= date.today():
            raise ValueError("dateOfBirth must be in the past")
        return v


class ApplicationSummary(CamelModel):
    application_id: int
    application_number: str
    first_name: str
    middle_name: str = ""
    last_name: str
    email_address: EmailStr
    position_type: PositionType
    current_stage: ApplicationStage
    status: ApplicationStatus
    submitted_at: datetime


class ApplicationRead(ApplicationSummary):
    applicant_id: Optional[int] = None
    previous_application_id: Optional[int] = None
    mother_name: str
    mobile_number: str
    gender: Gender
    blood_group: str
    height: float
    date_of_birth: date
    permanent_address: Address
    current_address: Address
    pan_card_number: str
    aadhar_card_number: str
    coa_card_number: str = ""
    appointment_date: Optional[date] = None
    appointment_place: Optional[str] = None
    certificate_number: Optional[str] = None
    certificate_path: Optional[str] = None
    is_certificate_generated: bool = False
    recommended_form_path: Optional[str] = None
    stage_label: str
    qualifications: list[QualificationRead] = []
    experiences: list[ExperienceRead] = []
    documents: list[DocumentRead] = []


class ApplicationListRequest(CamelModel):
    page_number: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=100)
    status: Optional[ApplicationStatus] = None
    stage: Optional[ApplicationStage] = None
    position_type: Optional[PositionType] = None


class ApplicationPage(CamelModel):
    items: list[ApplicationSummary]
    total_count: int
    page_number: int
    page_size: int


class StageTransitionRead(CamelModel):
    transition_id: int
    from_stage: ApplicationStage
    to_stage: ApplicationStage
    officer_id: Optional[int] = None
    officer_role: Optional[AccountRole] = None
    action: str
    comments: Optional[str] = None
    created_at: datetime


class RejectionRead(CamelModel):
    rejection_id: int
    officer_name: str
    officer_role: AccountRole
    stage: ApplicationStage
    category: RejectionCategory
    reason: str
    affected_fields: list[str] = []
    requires_resubmission: bool = True
    rejected_at: datetime

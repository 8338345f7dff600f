from sqlalchemy import Column, Text, Float, Date, Boolean, TIMESTAMP, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from pmc_portal.core import workflow
from pmc_portal.models.base import Base, IdType
from pmc_portal.models.enums import ApplicationStage, Gender, PositionType


class Application(Base):
    __tablename__ = "application_tbl"

    application_id = Column(IdType, primary_key=True, index=True)
    application_number = Column(Text, unique=True, index=True)
    applicant_id = Column(IdType, ForeignKey("account_tbl.account_id", ondelete="SET NULL"), index=True)
    previous_application_id = Column(IdType, ForeignKey("application_tbl.application_id", ondelete="SET NULL"))

    first_name = Column(Text, nullable=False)
    middle_name = Column(Text, nullable=False, default="")
    last_name = Column(Text, nullable=False)
    mother_name = Column(Text, nullable=False)
    mobile_number = Column(Text, nullable=False)
    email_address = Column(Text, nullable=False)
    position_type = Column(SAEnum(PositionType, name="position_type_enum"), nullable=False, index=True)
    gender = Column(SAEnum(Gender, name="gender_enum"), nullable=False)
    blood_group = Column(Text, nullable=False)
    height = Column(Float, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    permanent_address = Column(JSON, nullable=False)
    current_address = Column(JSON, nullable=False)
    pan_card_number = Column(Text, nullable=False)
    aadhar_card_number = Column(Text, nullable=False)
    coa_card_number = Column(Text, nullable=False, default="")

    current_stage = Column(
        SAEnum(ApplicationStage, name="application_stage_enum"),
        nullable=False,
        default=ApplicationStage.JUNIOR_ENGINEER_PENDING,
        index=True,
    )
    appointment_date = Column(Date)
    appointment_place = Column(Text)

    certificate_number = Column(Text, unique=True)
    certificate_path = Column(Text)
    is_certificate_generated = Column(Boolean, nullable=False, default=False)
    recommended_form_path = Column(Text)

    submitted_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    documents = relationship(
        "ApplicationDocument",
        order_by="ApplicationDocument.sort_order",
        cascade="all, delete-orphan",
    )
    qualifications = relationship(
        "Qualification",
        order_by="Qualification.qualification_id",
        cascade="all, delete-orphan",
    )
    experiences = relationship(
        "Experience",
        order_by="Experience.experience_id",
        cascade="all, delete-orphan",
    )

    @property
    def status(self):
        return workflow.status_for_stage(self.current_stage)

    @property
    def stage_label(self) -> str:
        return workflow.stage_label(self.current_stage)

from sqlalchemy import Column, Text, Boolean, TIMESTAMP, JSON, ForeignKey, Enum as SAEnum
from pmc_portal.core.clock import utcnow
from pmc_portal.models.base import Base, IdType
from pmc_portal.models.enums import AccountRole, ApplicationStage, RejectionCategory


class ApplicationRejection(Base):
    __tablename__ = "application_rejection_tbl"

    rejection_id = Column(IdType, primary_key=True, index=True)
    application_id = Column(IdType, ForeignKey("application_tbl.application_id", ondelete="CASCADE"), nullable=False, index=True)
    officer_id = Column(IdType, ForeignKey("account_tbl.account_id", ondelete="SET NULL"))
    officer_name = Column(Text, nullable=False)
    officer_role = Column(SAEnum(AccountRole, name="account_role_enum"), nullable=False)
    stage = Column(SAEnum(ApplicationStage, name="application_stage_enum"), nullable=False)
    category = Column(SAEnum(RejectionCategory, name="rejection_category_enum"), nullable=False)
    reason = Column(Text, nullable=False)
    affected_fields = Column(JSON, nullable=False, default=list)
    requires_resubmission = Column(Boolean, nullable=False, default=True)
    rejected_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

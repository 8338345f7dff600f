from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey, Enum as SAEnum
from pmc_portal.core.clock import utcnow
from pmc_portal.models.base import Base, IdType
from pmc_portal.models.enums import AccountRole, ApplicationStage


class StageTransition(Base):
    __tablename__ = "stage_transition_tbl"

    transition_id = Column(IdType, primary_key=True, index=True)
    application_id = Column(IdType, ForeignKey("application_tbl.application_id", ondelete="CASCADE"), nullable=False, index=True)
    from_stage = Column(SAEnum(ApplicationStage, name="application_stage_enum"), nullable=False)
    to_stage = Column(SAEnum(ApplicationStage, name="application_stage_enum"), nullable=False)
    officer_id = Column(IdType, ForeignKey("account_tbl.account_id", ondelete="SET NULL"))
    officer_role = Column(SAEnum(AccountRole, name="account_role_enum"))
    action = Column(Text, nullable=False)
    comments = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)

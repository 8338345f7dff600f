from sqlalchemy import Column, Text, Integer, TIMESTAMP, ForeignKey, Enum as SAEnum
from pmc_portal.core.clock import utcnow
from pmc_portal.models.base import Base, IdType
from pmc_portal.models.enums import OtpPurpose


class OtpChallenge(Base):
    __tablename__ = "otp_challenge_tbl"

    challenge_id = Column(IdType, primary_key=True, index=True)
    purpose = Column(SAEnum(OtpPurpose, name="otp_purpose_enum"), nullable=False)
    email = Column(Text, nullable=False, index=True)
    application_id = Column(IdType, ForeignKey("application_tbl.application_id", ondelete="CASCADE"))
    officer_id = Column(IdType, ForeignKey("account_tbl.account_id", ondelete="CASCADE"))
    code_hash = Column(Text, nullable=False)
    failed_attempts = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    consumed_at = Column(TIMESTAMP(timezone=True))
    superseded_at = Column(TIMESTAMP(timezone=True))

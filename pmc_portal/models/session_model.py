from sqlalchemy import Column, Text, TIMESTAMP, ForeignKey
from pmc_portal.core.clock import utcnow
from pmc_portal.models.base import Base, IdType


class UserSession(Base):
    __tablename__ = "user_session_tbl"

    session_id = Column(IdType, primary_key=True, index=True)
    account_id = Column(IdType, ForeignKey("account_tbl.account_id", ondelete="CASCADE"), nullable=False)
    jti = Column(Text, nullable=False, unique=True, index=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    last_activity_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    revoked_at = Column(TIMESTAMP(timezone=True))

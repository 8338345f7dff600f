from sqlalchemy import Column, Text, TIMESTAMP, Boolean, Enum as SAEnum
from sqlalchemy.sql import func, true
from pmc_portal.models.base import Base, IdType
from pmc_portal.models.enums import AccountRole


class Account(Base):
    __tablename__ = "account_tbl"

    account_id = Column(IdType, primary_key=True, index=True)
    email = Column(Text, nullable=False, unique=True, index=True)
    name = Column(Text)
    # Citizens sign in with an emailed OTP and have no password.
    password_hash = Column(Text)
    role = Column(SAEnum(AccountRole, name="account_role_enum"), nullable=False)
    is_active = Column(Boolean, nullable=False, server_default=true())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

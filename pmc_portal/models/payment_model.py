from sqlalchemy import Column, Text, Numeric, TIMESTAMP, ForeignKey, Enum as SAEnum
from pmc_portal.core.clock import utcnow
from pmc_portal.models.base import Base, IdType
from pmc_portal.models.enums import PaymentStatus


class Payment(Base):
    __tablename__ = "payment_tbl"

    payment_id = Column(IdType, primary_key=True, index=True)
    application_id = Column(IdType, ForeignKey("application_tbl.application_id", ondelete="CASCADE"), nullable=False, index=True)
    challan_number = Column(Text, unique=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(SAEnum(PaymentStatus, name="payment_status_enum"), nullable=False, default=PaymentStatus.PENDING)
    transaction_id = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utcnow)
    completed_at = Column(TIMESTAMP(timezone=True))

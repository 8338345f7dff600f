from datetime import datetime
from decimal import Decimal
from typing import Optional
from pmc_portal.models.enums import PaymentStatus
from pmc_portal.schemas.common import CamelModel


class PaymentInitiateRequest(CamelModel):
    application_id: int


class PaymentCallback(CamelModel):
    payment_id: int
    transaction_id: str
    status: PaymentStatus


class PaymentRead(CamelModel):
    payment_id: int
    application_id: int
    challan_number: Optional[str] = None
    amount: Decimal
    status: PaymentStatus
    transaction_id: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

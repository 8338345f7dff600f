from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import select
from pmc_portal.core.clock import utcnow
from pmc_portal.models.enums import PaymentStatus
from pmc_portal.models.payment_model import Payment


def create_payment(db: Session, application_id: int, amount: Decimal) -> Payment:
    payment = Payment(application_id=application_id, amount=amount, status=PaymentStatus.PENDING)
    db.add(payment)
    db.flush()
    payment.challan_number = f"PMC_CHALLAN_{utcnow():%Y%m%d}_{payment.payment_id}"
    db.flush()
    return payment


def get_payment_by_id(db: Session, payment_id: int) -> Payment | None:
    stmt = select(Payment).where(Payment.payment_id == payment_id)
    return db.execute(stmt).scalars().first()


def get_latest_payment(db: Session, application_id: int) -> Payment | None:
    stmt = (
        select(Payment)
        .where(Payment.application_id == application_id)
        .order_by(Payment.payment_id.desc())
    )
    return db.execute(stmt).scalars().first()


def mark_payment(db: Session, payment: Payment, status: PaymentStatus, transaction_id: str | None = None) -> Payment:
    """Flushes only; completing a payment commits together with the stage change."""
    payment.status = status
    if transaction_id:
        payment.transaction_id = transaction_id
    if status == PaymentStatus.COMPLETED:
        payment.completed_at = utcnow()
    db.flush()
    return payment

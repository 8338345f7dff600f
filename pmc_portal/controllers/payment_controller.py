import hmac
import logging
from decimal import Decimal
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from pmc_portal.core.config import get_settings
from pmc_portal.core.email import render_email, send_email
from pmc_portal.core.security import sign_payment_callback
from pmc_portal.controllers.application_controller import get_visible_application
from pmc_portal.models.account_model import Account
from pmc_portal.models.application_model import Application
from pmc_portal.models.enums import ApplicationStage, PaymentStatus, PositionType
from pmc_portal.models.payment_model import Payment
from pmc_portal.repositories.application_repo import advance_stage, get_application_by_id
from pmc_portal.repositories.payment_repo import create_payment, get_latest_payment, get_payment_by_id, mark_payment
from pmc_portal.repositories.stage_transition_repo import add_transition
from pmc_portal.schemas.payment_schema import PaymentCallback, PaymentInitiateRequest

logger = logging.getLogger(__name__)

# Registration fee in rupees, valid for three years.
REGISTRATION_FEES: dict[PositionType, Decimal] = {
    PositionType.ARCHITECT: Decimal("0"),
    PositionType.STRUCTURAL_ENGINEER: Decimal("1500"),
    PositionType.LICENCE_ENGINEER: Decimal("3000"),
    PositionType.SUPERVISOR1: Decimal("900"),
    PositionType.SUPERVISOR2: Decimal("900"),
}

OPEN_PAYMENT_STATUSES = (PaymentStatus.PENDING, PaymentStatus.IN_PROGRESS)


def fee_for(position_type: PositionType) -> Decimal:
    return REGISTRATION_FEES[position_type]


def _send_payment_email(app: Application, payment: Payment):
    html = render_email(
        "Payment received",
        f"Dear {app.first_name} {app.last_name},",
        f"We have received the registration fee of Rs. {payment.amount} for application "
        f"<strong>{app.application_number}</strong> (challan {payment.challan_number}).",
        "Your certificate will now be prepared by the clerk.",
    )
    try:
        send_email(app.email_address, "Payment received", html)
    except Exception:
        logger.warning("Payment email for application %s could not be sent", app.application_id, exc_info=True)


def _complete(db: Session, app: Application, payment: Payment, transaction_id: str | None) -> None:
    """Mark ``payment`` completed and move the application on to the clerk. Flushes only."""
    mark_payment(db, payment, PaymentStatus.COMPLETED, transaction_id=transaction_id)
    if not advance_stage(db, app, ApplicationStage.PAYMENT_PENDING, ApplicationStage.CLERK_PENDING):
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Application is not awaiting payment")
    add_transition(
        db,
        app.application_id,
        ApplicationStage.PAYMENT_PENDING,
        ApplicationStage.CLERK_PENDING,
        action="payment",
        comments=f"Challan {payment.challan_number}",
    )


def cancel_open_payment(db: Session, app: Application) -> Payment | None:
    latest = get_latest_payment(db, app.application_id)
    if latest is None or latest.status not in OPEN_PAYMENT_STATUSES:
        return None
    logger.info("Cancelling payment %s of application %s", latest.payment_id, app.application_id)
    return mark_payment(db, latest, PaymentStatus.CANCELLED)


def settle_without_charge(db: Session, app: Application) -> Payment:
    """Record a zero-amount payment for positions that carry no fee. The caller commits."""
    payment = create_payment(db, app.application_id, Decimal("0"))
    _complete(db, app, payment, transaction_id=None)
    logger.info("Application %s has no registration fee; payment settled", app.application_id)
    return payment


def initiate_payment(db: Session, account: Account, data: PaymentInitiateRequest) -> Payment:
    app = get_visible_application(db, account, data.application_id)
    if app.current_stage != ApplicationStage.PAYMENT_PENDING:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Application is not awaiting payment")

    latest = get_latest_payment(db, app.application_id)
    if latest and latest.status in OPEN_PAYMENT_STATUSES:
        return latest

    payment = create_payment(db, app.application_id, fee_for(app.position_type))
    db.commit()
    db.refresh(payment)
    logger.info("Payment %s initiated for application %s", payment.payment_id, app.application_id)
    return payment


def handle_callback(db: Session, data: PaymentCallback, signature: str | None) -> Payment:
    if not get_settings().payment_callback_secret:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Payment callbacks are not configured")
    expected = sign_payment_callback(data.payment_id, data.transaction_id, data.status.value)
    if not signature or not hmac.compare_digest(expected, signature):
        logger.warning("Rejected payment callback for payment %s: bad signature", data.payment_id)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")

    payment = get_payment_by_id(db, data.payment_id)
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    if payment.status == PaymentStatus.COMPLETED:
        return payment
    if payment.status not in OPEN_PAYMENT_STATUSES:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Payment is already closed")

    if data.status != PaymentStatus.COMPLETED:
        mark_payment(db, payment, data.status, transaction_id=data.transaction_id)
        db.commit()
        db.refresh(payment)
        logger.info("Payment %s updated to %s", payment.payment_id, data.status.value)
        return payment

    app = get_application_by_id(db, payment.application_id)
    _complete(db, app, payment, transaction_id=data.transaction_id)
    db.commit()
    db.refresh(payment)
    db.refresh(app)
    logger.info("Payment %s completed for application %s", payment.payment_id, app.application_id)
    _send_payment_email(app, payment)
    return payment


def get_challan(db: Session, account: Account, application_id: int) -> Payment:
    app = get_visible_application(db, account, application_id)
    payment = get_latest_payment(db, app.application_id)
    if not payment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No payment found for this application")
    return payment

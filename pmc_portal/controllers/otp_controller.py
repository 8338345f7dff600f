import logging
from datetime import timedelta
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from pmc_portal.core.clock import as_utc, utcnow
from pmc_portal.core.config import get_settings
from pmc_portal.core.email import render_email, send_email
from pmc_portal.core.security import generate_otp_code, hash_otp, otp_matches
from pmc_portal.models.enums import OtpPurpose
from pmc_portal.models.otp_challenge_model import OtpChallenge
from pmc_portal.repositories.otp_repo import (
    consume_challenge,
    create_challenge,
    get_latest_challenge,
    record_failed_attempt,
)

logger = logging.getLogger(__name__)


def issue_challenge(
    db: Session,
    purpose: OtpPurpose,
    email: str,
    application_id: int | None = None,
    officer_id: int | None = None,
) -> tuple[OtpChallenge, str]:
    settings = get_settings()
    now = utcnow()
    latest = get_latest_challenge(db, purpose, email, application_id, officer_id)
    # A used code does not hold back the next one.
    if latest is not None and latest.consumed_at is None:
        ready_at = as_utc(latest.created_at) + timedelta(seconds=settings.otp_resend_cooldown_seconds)
        if now < ready_at:
            wait = int((ready_at - now).total_seconds()) + 1
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=f"Please wait {wait} seconds before requesting a new OTP",
            )

    code = generate_otp_code()
    challenge = create_challenge(
        db,
        purpose=purpose,
        email=email,
        code_hash=hash_otp(code),
        expires_at=now + timedelta(seconds=settings.otp_ttl_seconds),
        application_id=application_id,
        officer_id=officer_id,
    )
    logger.info("Issued %s OTP challenge %s", purpose.value, challenge.challenge_id)
    return challenge, code


def deliver_code(to_email: str, code: str, context: str):
    minutes = get_settings().otp_ttl_seconds // 60
    html = render_email(
        "Your one-time password",
        f"Use the code below to {context}.",
        f"<strong style=\"font-size: 20px; letter-spacing: 4px;\">{code}</strong>",
        f"The code is valid for {minutes} minutes. Do not share it with anyone.",
    )
    try:
        send_email(to_email, "One-time password", html, text_body=f"Your OTP is {code}")
    except Exception:
        logger.exception("OTP delivery to %s failed", to_email)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Unable to deliver OTP")


def verify_challenge(
    db: Session,
    purpose: OtpPurpose,
    email: str,
    code: str,
    application_id: int | None = None,
    officer_id: int | None = None,
) -> OtpChallenge:
    """Check ``code`` against the latest challenge of the scope and consume it.

    The consumption is flushed, not committed, so it lands in the same commit as
    the action it authorizes.
    """
    challenge = get_latest_challenge(db, purpose, email, application_id, officer_id)
    if challenge is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No OTP has been requested")
    if challenge.consumed_at is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="OTP has already been used; request a new OTP")
    if challenge.superseded_at is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="OTP is no longer valid; request a new OTP")
    if utcnow() >= as_utc(challenge.expires_at):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="OTP has expired; request a new OTP")

    if not otp_matches(code, challenge.code_hash):
        record_failed_attempt(db, challenge, get_settings().otp_max_attempts)
        db.commit()
        logger.info("Wrong code for OTP challenge %s", challenge.challenge_id)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid OTP")

    if not consume_challenge(db, challenge):
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="OTP has already been used; request a new OTP")
    return challenge

"""OTP challenge persistence.

``consume_challenge`` and ``record_failed_attempt`` only flush: the caller
commits them together with the action the code authorizes.
"""
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import select, update
from pmc_portal.core.clock import utcnow
from pmc_portal.models.enums import OtpPurpose
from pmc_portal.models.otp_challenge_model import OtpChallenge


def _scope(stmt, purpose: OtpPurpose, email: str, application_id: int | None, officer_id: int | None):
    stmt = stmt.where(OtpChallenge.purpose == purpose).where(OtpChallenge.email == email.lower())
    if application_id is None:
        stmt = stmt.where(OtpChallenge.application_id.is_(None))
    else:
        stmt = stmt.where(OtpChallenge.application_id == application_id)
    if officer_id is None:
        stmt = stmt.where(OtpChallenge.officer_id.is_(None))
    else:
        stmt = stmt.where(OtpChallenge.officer_id == officer_id)
    return stmt


def get_latest_challenge(
    db: Session,
    purpose: OtpPurpose,
    email: str,
    application_id: int | None = None,
    officer_id: int | None = None,
) -> OtpChallenge | None:
    stmt = _scope(select(OtpChallenge), purpose, email, application_id, officer_id)
    stmt = stmt.order_by(OtpChallenge.challenge_id.desc())
    return db.execute(stmt).scalars().first()


def create_challenge(
    db: Session,
    purpose: OtpPurpose,
    email: str,
    code_hash: str,
    expires_at: datetime,
    application_id: int | None = None,
    officer_id: int | None = None,
) -> OtpChallenge:
    """Store a new challenge; every still-open challenge of the same scope is superseded."""
    now = utcnow()
    supersede = _scope(update(OtpChallenge), purpose, email, application_id, officer_id)
    supersede = (
        supersede.where(OtpChallenge.consumed_at.is_(None))
        .where(OtpChallenge.superseded_at.is_(None))
        .values(superseded_at=now)
        .execution_options(synchronize_session=False)
    )
    db.execute(supersede)

    challenge = OtpChallenge(
        purpose=purpose,
        email=email.lower(),
        application_id=application_id,
        officer_id=officer_id,
        code_hash=code_hash,
        failed_attempts=0,
        created_at=now,
        expires_at=expires_at,
    )
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    return challenge


def record_failed_attempt(db: Session, challenge: OtpChallenge, max_attempts: int) -> OtpChallenge:
    challenge.failed_attempts = (challenge.failed_attempts or 0) + 1
    if challenge.failed_attempts >= max_attempts:
        challenge.superseded_at = utcnow()
    db.flush()
    return challenge


def consume_challenge(db: Session, challenge: OtpChallenge) -> bool:
    """Mark the challenge used. False when another request already consumed it."""
    stmt = (
        update(OtpChallenge)
        .where(OtpChallenge.challenge_id == challenge.challenge_id)
        .where(OtpChallenge.consumed_at.is_(None))
        .where(OtpChallenge.superseded_at.is_(None))
        .values(consumed_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    return result.rowcount == 1

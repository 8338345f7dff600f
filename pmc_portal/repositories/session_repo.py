from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import select
from pmc_portal.core.clock import utcnow
from pmc_portal.models.session_model import UserSession


def create_session(db: Session, account_id: int, jti: str, expires_at: datetime) -> UserSession:
    now = utcnow()
    session = UserSession(
        account_id=account_id,
        jti=jti,
        created_at=now,
        last_activity_at=now,
        expires_at=expires_at,
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    return session


def get_session_by_jti(db: Session, jti: str) -> UserSession | None:
    stmt = select(UserSession).where(UserSession.jti == jti)
    return db.execute(stmt).scalars().first()


def touch_session(db: Session, session: UserSession) -> UserSession:
    session.last_activity_at = utcnow()
    db.commit()
    return session


def revoke_session(db: Session, session: UserSession) -> UserSession:
    session.revoked_at = utcnow()
    db.commit()
    db.refresh(session)
    return session

import logging
from datetime import timedelta
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from jose import JWTError
from pmc_portal.core.clock import as_utc, utcnow
from pmc_portal.core.config import get_settings
from pmc_portal.core.db import get_db
from pmc_portal.core.roles import OFFICER_ROLES, PortalRole, map_role
from pmc_portal.core.security import decode_access_token
from pmc_portal.models.session_model import UserSession
from pmc_portal.repositories.account_repo import get_account_by_id
from pmc_portal.repositories.session_repo import get_session_by_jti, revoke_session, touch_session

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> UserSession:
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
        jti = payload.get("jti")
        if payload.get("sub") is None or jti is None:
            raise _unauthorized("Invalid token")
        int(payload["sub"])
    except (JWTError, ValueError):
        raise _unauthorized("Invalid token")

    session = get_session_by_jti(db, jti)
    if session is None or session.revoked_at is not None:
        raise _unauthorized("Session expired")

    idle_limit = timedelta(minutes=get_settings().session_idle_minutes)
    if utcnow() - as_utc(session.last_activity_at) > idle_limit:
        logger.info("Session %s of account %s expired after inactivity", session.session_id, session.account_id)
        revoke_session(db, session)
        raise _unauthorized("Session expired")

    touch_session(db, session)
    return session


def get_current_account(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    account = get_account_by_id(db, session.account_id)
    if not account or not account.is_active:
        raise _unauthorized("Inactive account")
    return account


def require_roles(*roles: PortalRole):
    allowed = frozenset(roles)

    def dependency(account=Depends(get_current_account)):
        if map_role(account.role.value) not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not permitted for this role")
        return account

    return dependency


require_admin = require_roles(PortalRole.ADMIN)
require_citizen = require_roles(PortalRole.USER)
require_officer = require_roles(*OFFICER_ROLES)
require_staff = require_roles(PortalRole.ADMIN, *OFFICER_ROLES)

import logging
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from pmc_portal.core.auth import get_current_session
from pmc_portal.core.roles import landing_route_for, map_role
from pmc_portal.core.security import create_access_token, verify_password
from pmc_portal.controllers.otp_controller import deliver_code, issue_challenge, verify_challenge
from pmc_portal.models.account_model import Account
from pmc_portal.models.enums import AccountRole, OtpPurpose
from pmc_portal.models.session_model import UserSession
from pmc_portal.repositories.account_repo import create_account, get_account_by_email
from pmc_portal.repositories.session_repo import create_session, revoke_session
from pmc_portal.schemas.account_schema import AuthResponse, OfficerLogin, SessionRead, SessionValidity, VerifyOtpRequest
from pmc_portal.schemas.common import MessageResponse

logger = logging.getLogger(__name__)


def _start_session(db: Session, account: Account, message: str) -> AuthResponse:
    token, jti, expires_at = create_access_token(
        subject=str(account.account_id),
        email=account.email,
        role=account.role.value,
    )
    create_session(db, account.account_id, jti, expires_at)
    logger.info("Account %s signed in as %s", account.account_id, account.role.value)
    return AuthResponse(
        success=True,
        message=message,
        token=token,
        refresh_token=None,
        email=account.email,
        role=account.role,
    )


def request_login_otp(db: Session, email: str) -> MessageResponse:
    _challenge, code = issue_challenge(db, OtpPurpose.LOGIN, email)
    deliver_code(email, code, "sign in to the PMC registration portal")
    return MessageResponse(message="OTP sent to your email address")


def verify_login_otp(db: Session, data: VerifyOtpRequest) -> AuthResponse:
    verify_challenge(db, OtpPurpose.LOGIN, data.email, data.otp)
    db.commit()

    account = get_account_by_email(db, data.email)
    if account is None:
        account = create_account(db, email=data.email, role=AccountRole.USER)
    elif not account.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _start_session(db, account, "OTP verified successfully")


def officer_login(db: Session, data: OfficerLogin) -> AuthResponse:
    account = get_account_by_email(db, data.email)
    if (
        not account
        or not account.is_active
        or not verify_password(data.password, account.password_hash)
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return _start_session(db, account, "Login successful")


def logout(db: Session, session: UserSession) -> MessageResponse:
    revoke_session(db, session)
    return MessageResponse(message="Logged out")


def describe_session(account: Account) -> SessionRead:
    internal = map_role(account.role.value)
    return SessionRead(
        id=account.account_id,
        email=account.email,
        name=account.name,
        role=account.role,
        internal_role=internal.value,
        landing_route=landing_route_for(internal),
    )


def validate_session(db: Session, credentials) -> SessionValidity:
    try:
        get_current_session(credentials, db)
    except HTTPException:
        return SessionValidity(valid=False)
    return SessionValidity(valid=True)

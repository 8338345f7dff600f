from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from pmc_portal.core.db import get_db
from pmc_portal.core.auth import get_current_account, get_current_session, security
from pmc_portal.controllers.auth_controller import (
    describe_session,
    logout,
    officer_login,
    validate_session,
    verify_login_otp,
)
from pmc_portal.schemas.account_schema import (
    AuthResponse,
    OfficerLogin,
    SessionRead,
    SessionValidity,
    VerifyOtpRequest,
)
from pmc_portal.schemas.common import MessageResponse

router = APIRouter(prefix="/Auth", tags=["auth"])


@router.post("/verify-otp", response_model=AuthResponse)
def verify_otp_route(payload: VerifyOtpRequest, db: Session = Depends(get_db)):
    return verify_login_otp(db, payload)


@router.post("/token", response_model=AuthResponse)
def officer_login_route(payload: OfficerLogin, db: Session = Depends(get_db)):
    return officer_login(db, payload)


@router.post("/logout", response_model=MessageResponse)
def logout_route(db: Session = Depends(get_db), session=Depends(get_current_session)):
    return logout(db, session)


@router.get("/session", response_model=SessionRead)
def session_route(account=Depends(get_current_account)):
    return describe_session(account)


@router.get("/validate-session", response_model=SessionValidity)
def validate_session_route(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
):
    return validate_session(db, credentials)

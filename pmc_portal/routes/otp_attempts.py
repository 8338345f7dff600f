from fastapi import APIRouter, Depends, Query
from pydantic import EmailStr
from sqlalchemy.orm import Session
from pmc_portal.core.db import get_db
from pmc_portal.controllers.auth_controller import request_login_otp
from pmc_portal.schemas.common import MessageResponse

router = APIRouter(prefix="/OtpAttempt", tags=["auth"])


@router.get("/generate", response_model=MessageResponse)
def generate_login_otp_route(
    email_address: EmailStr = Query(alias="emailAddress"),
    db: Session = Depends(get_db),
):
    return request_login_otp(db, email_address)

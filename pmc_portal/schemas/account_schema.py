from pydantic import EmailStr, field_validator
from typing import Optional
from pmc_portal.models.enums import AccountRole
from pmc_portal.schemas.common import CamelModel


class AccountRead(CamelModel):
    account_id: int
    email: EmailStr
    name: Optional[str] = None
    role: AccountRole
    is_active: bool = True


class OfficerLogin(CamelModel):
    email: EmailStr
    password: str


class VerifyOtpRequest(CamelModel):
    email: EmailStr
    otp: str

    @field_validator("otp")
    @classmethod
    def otp_present(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("OTP is required")
        return v


class AuthResponse(CamelModel):
    success: bool = True
    message: str
    token: str
    refresh_token: Optional[str] = None
    email: EmailStr
    role: AccountRole


class SessionRead(CamelModel):
    id: int
    email: EmailStr
    name: Optional[str] = None
    role: AccountRole
    internal_role: str
    landing_route: str


class SessionValidity(CamelModel):
    valid: bool


class OfficerCreate(CamelModel):
    email: EmailStr
    name: str
    role: AccountRole

    @field_validator("role")
    @classmethod
    def officer_role_only(cls, v: AccountRole) -> AccountRole:
        if v == AccountRole.USER:
            raise ValueError("Citizens register through OTP login, not invitation")
        return v

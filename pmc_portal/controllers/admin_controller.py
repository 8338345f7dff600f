import logging
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from pmc_portal.core.config import get_settings
from pmc_portal.core.email import render_email, send_email
from pmc_portal.core.security import generate_temp_password, hash_password
from pmc_portal.models.account_model import Account
from pmc_portal.models.enums import AccountRole
from pmc_portal.repositories.account_repo import get_account_by_email, list_accounts_by_roles
from pmc_portal.schemas.account_schema import OfficerCreate
from pmc_portal.schemas.common import MessageResponse

logger = logging.getLogger(__name__)


def _send_invitation_email(to_email: str, name: str, role: AccountRole, password: str):
    login_url = f"{get_settings().frontend_base_url}/auth/officer-login"
    html = render_email(
        "Officer account created",
        f"Hello {name},",
        f"An officer account with the role <strong>{role.value}</strong> has been created for you.",
        f"<strong>Login email:</strong> {to_email}<br/><strong>Temporary password:</strong> {password}",
        f"Sign in at <a href=\"{login_url}\">{login_url}</a> and change your password as soon as possible.",
    )
    send_email(to_email, "Officer account created", html)


def invite_officer(db: Session, data: OfficerCreate) -> MessageResponse:
    if get_account_by_email(db, data.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Account already exists for this email")

    temp_password = generate_temp_password()
    account = Account(
        email=data.email.lower(),
        name=data.name,
        role=data.role,
        password_hash=hash_password(temp_password),
        is_active=True,
    )
    db.add(account)
    db.flush()
    # The temporary password only ever travels by email, so no email means no account.
    try:
        _send_invitation_email(account.email, data.name, data.role, temp_password)
    except Exception:
        db.rollback()
        logger.exception("Invitation email to %s failed", data.email)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Unable to send invitation email")
    db.commit()
    logger.info("Invited officer %s as %s", account.account_id, data.role.value)
    return MessageResponse(message=f"Invitation sent to {account.email}")


def list_officers(db: Session) -> list[Account]:
    roles = [r for r in AccountRole if r != AccountRole.USER]
    return list_accounts_by_roles(db, roles)

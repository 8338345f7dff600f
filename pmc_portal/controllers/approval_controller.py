"""OTP-gated officer actions.

Every officer action follows one protocol: the officer requests a code scoped to
the application and to themselves, then submits the code together with the
action. The code is consumed, the stage advanced and the history written in a
single commit, so a failed verification leaves the application untouched.
"""
import logging
from datetime import timedelta
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from pmc_portal.core import workflow
from pmc_portal.core.clock import as_utc, utcnow
from pmc_portal.core.config import get_settings
from pmc_portal.core.email import render_email, send_email
from pmc_portal.core.roles import map_role
from pmc_portal.core.workflow import ActionKind, Transition
from pmc_portal.controllers.otp_controller import deliver_code, issue_challenge, verify_challenge
from pmc_portal.controllers.payment_controller import cancel_open_payment, fee_for, settle_without_charge
from pmc_portal.models.account_model import Account
from pmc_portal.models.application_model import Application
from pmc_portal.models.enums import ApplicationStage, OtpPurpose
from pmc_portal.repositories.application_repo import advance_stage, get_application_by_id
from pmc_portal.repositories.rejection_repo import add_rejection
from pmc_portal.repositories.stage_transition_repo import add_transition
from pmc_portal.schemas.approval_schema import (
    ActionResponse,
    GenerateOtpRequest,
    GenerateOtpResponse,
    OfficerActionRequest,
    RejectRequest,
)

logger = logging.getLogger(__name__)

ACTION_MESSAGES = {
    ActionKind.SCHEDULE: "Appointment scheduled successfully",
    ActionKind.APPROVE: "Application approved successfully",
    ActionKind.SIGN: "Digital signature applied successfully",
    ActionKind.CERTIFICATE: "Certificate generated successfully",
}


def certificate_number_for(app: Application) -> str:
    return f"PMC-CERT-{utcnow().year}-{app.application_id:06d}"


def _check_officer(account: Account, officer_id: int | None, required: bool = True) -> int:
    if officer_id is None:
        if required:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Officer identity is required")
        return account.account_id
    if officer_id != account.account_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Officer does not match the signed-in account")
    return officer_id


def _load(db: Session, application_id: int) -> Application:
    app = get_application_by_id(db, application_id)
    if not app:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    return app


def _pending_transition(account: Account, app: Application, allowed: frozenset[ActionKind]) -> Transition:
    if workflow.is_terminal(app.current_stage):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Application is already closed")
    transition = workflow.find_transition(map_role(account.role.value), app.position_type, app.current_stage)
    if transition is None or transition.action not in allowed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Application is at stage '{app.stage_label}' and is not awaiting this action from you",
        )
    return transition


def _check_actionable(account: Account, app: Application) -> None:
    """Anyone who may reject the application at its stage may also request a code for it."""
    if workflow.is_terminal(app.current_stage):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Application is already closed")
    if not workflow.can_reject(map_role(account.role.value), app.position_type, app.current_stage):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Application is at stage '{app.stage_label}' and is not awaiting action from you",
        )


def _notify_applicant(app: Application, heading: str, *paragraphs: str):
    html = render_email(
        heading,
        f"Dear {app.first_name} {app.last_name},",
        *paragraphs,
    )
    try:
        send_email(app.email_address, f"Application {app.application_number}", html)
    except Exception:
        logger.warning("Notification for application %s could not be sent", app.application_id, exc_info=True)


def generate_action_otp(db: Session, account: Account, data: GenerateOtpRequest) -> GenerateOtpResponse:
    officer_id = _check_officer(account, data.officer_id)
    app = _load(db, data.application_id)
    _check_actionable(account, app)

    challenge, code = issue_challenge(
        db,
        OtpPurpose.APPROVAL,
        account.email,
        application_id=app.application_id,
        officer_id=officer_id,
    )
    deliver_code(account.email, code, f"authorize your action on application {app.application_number}")
    cooldown = timedelta(seconds=get_settings().otp_resend_cooldown_seconds)
    return GenerateOtpResponse(
        message="OTP sent to your registered email address",
        expires_at=as_utc(challenge.expires_at),
        resend_available_at=as_utc(challenge.created_at) + cooldown,
    )


def _advance(
    db: Session,
    account: Account,
    app: Application,
    transition: Transition,
    comments: str | None = None,
    **fields,
):
    if not advance_stage(db, app, transition.from_stage, transition.to_stage, **fields):
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Application was updated by another officer")
    add_transition(
        db,
        app.application_id,
        transition.from_stage,
        transition.to_stage,
        action=transition.action.value,
        officer_id=account.account_id,
        officer_role=account.role,
        comments=comments,
    )
    if transition.to_stage == ApplicationStage.PAYMENT_PENDING and fee_for(app.position_type) == 0:
        settle_without_charge(db, app)


def perform_officer_action(
    db: Session,
    account: Account,
    data: OfficerActionRequest,
    allowed: frozenset[ActionKind],
    officer_required: bool = True,
) -> ActionResponse:
    """Verify the officer's OTP and apply the transition that the application's stage calls for."""
    officer_id = _check_officer(account, data.officer_id, required=officer_required)
    app = _load(db, data.application_id)
    transition = _pending_transition(account, app, allowed)

    verify_challenge(
        db,
        OtpPurpose.APPROVAL,
        account.email,
        data.otp,
        application_id=app.application_id,
        officer_id=officer_id,
    )

    fields = {}
    if transition.action == ActionKind.SCHEDULE:
        fields["appointment_date"] = data.appointment_date
        fields["appointment_place"] = data.place
    elif transition.action == ActionKind.CERTIFICATE:
        fields["certificate_number"] = certificate_number_for(app)
    elif transition.to_stage == ApplicationStage.APPROVED:
        fields["is_certificate_generated"] = True

    previous_stage = app.current_stage
    _advance(db, account, app, transition, comments=data.comments, **fields)
    db.commit()
    db.refresh(app)
    logger.info(
        "Officer %s (%s) moved application %s from %s to %s",
        account.account_id,
        account.role.value,
        app.application_id,
        previous_stage.name,
        app.current_stage.name,
    )

    if transition.action == ActionKind.SCHEDULE:
        _notify_applicant(
            app,
            "Document verification appointment",
            f"Your document verification appointment for application <strong>{app.application_number}</strong> "
            f"is scheduled on {app.appointment_date:%d %B %Y}" + (f" at {app.appointment_place}." if app.appointment_place else "."),
            "Please bring the originals of all uploaded documents.",
        )
    else:
        _notify_applicant(
            app,
            "Application update",
            f"Your application <strong>{app.application_number}</strong> is now at: {app.stage_label}.",
        )

    return ActionResponse(
        message=ACTION_MESSAGES[transition.action],
        application_id=app.application_id,
        previous_stage=previous_stage,
        current_stage=app.current_stage,
        status=app.status,
        certificate_number=app.certificate_number,
    )


def reject_application(db: Session, account: Account, data: RejectRequest) -> ActionResponse:
    officer_id = _check_officer(account, data.officer_id)
    app = _load(db, data.application_id)
    _check_actionable(account, app)

    verify_challenge(
        db,
        OtpPurpose.APPROVAL,
        account.email,
        data.otp,
        application_id=app.application_id,
        officer_id=officer_id,
    )

    previous_stage = app.current_stage
    if not advance_stage(db, app, previous_stage, ApplicationStage.REJECTED):
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Application was updated by another officer")
    if previous_stage == ApplicationStage.PAYMENT_PENDING:
        cancel_open_payment(db, app)
    add_rejection(
        db,
        application_id=app.application_id,
        officer_id=account.account_id,
        officer_name=account.name or account.email,
        officer_role=account.role,
        stage=previous_stage,
        category=data.category,
        reason=data.reason,
        affected_fields=data.affected_fields,
    )
    add_transition(
        db,
        app.application_id,
        previous_stage,
        ApplicationStage.REJECTED,
        action="reject",
        officer_id=account.account_id,
        officer_role=account.role,
        comments=data.reason,
    )
    db.commit()
    db.refresh(app)
    logger.info("Officer %s rejected application %s at %s", account.account_id, app.application_id, previous_stage.name)

    _notify_applicant(
        app,
        "Application rejected",
        f"Your application <strong>{app.application_number}</strong> has been rejected.",
        f"<strong>Reason:</strong> {data.reason}",
        "You may correct the highlighted details and resubmit the application from your dashboard.",
    )
    return ActionResponse(
        message="Application rejected",
        application_id=app.application_id,
        previous_stage=previous_stage,
        current_stage=app.current_stage,
        status=app.status,
    )

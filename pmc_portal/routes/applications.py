from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from pmc_portal.core.db import get_db
from pmc_portal.core.auth import get_current_account, require_citizen, require_officer, require_roles, require_staff
from pmc_portal.core.roles import ASSISTANT_ROLES, JUNIOR_ROLES, OFFICER_ROLES, SIGNING_ROLES, PortalRole
from pmc_portal.core.workflow import ActionKind
from pmc_portal.controllers.application_controller import (
    download_certificate,
    download_recommended_form,
    get_history,
    get_rejections,
    get_visible_application,
    list_pending_applications,
    list_visible_applications,
    resubmit_application,
    submit_application,
)
from pmc_portal.controllers.approval_controller import (
    generate_action_otp,
    perform_officer_action,
    reject_application,
)
from pmc_portal.schemas.application_schema import (
    ApplicationCreate,
    ApplicationListRequest,
    ApplicationPage,
    ApplicationRead,
    RejectionRead,
    StageTransitionRead,
)
from pmc_portal.schemas.approval_schema import (
    ActionResponse,
    GenerateOtpRequest,
    GenerateOtpResponse,
    OfficerActionRequest,
    RejectRequest,
    ScheduleAppointmentRequest,
)

router = APIRouter(prefix="/Application", tags=["applications"])

require_junior = require_roles(*JUNIOR_ROLES)
require_assistant = require_roles(*ASSISTANT_ROLES)
require_signer = require_roles(*SIGNING_ROLES)
require_clerk = require_roles(PortalRole.CLERK)
require_approver = require_roles(*(OFFICER_ROLES - {PortalRole.CLERK}))


@router.post("/create", response_model=ApplicationRead)
def create_application_route(
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    account=Depends(require_citizen),
):
    return submit_application(db, account, payload)


@router.post("/list", response_model=ApplicationPage)
def list_applications_route(
    payload: ApplicationListRequest,
    db: Session = Depends(get_db),
    account=Depends(get_current_account),
):
    return list_visible_applications(db, account, payload)


@router.get("/pending", response_model=ApplicationPage)
def pending_applications_route(
    page_number: int = Query(default=1, ge=1, alias="pageNumber"),
    page_size: int = Query(default=10, ge=1, le=100, alias="pageSize"),
    db: Session = Depends(get_db),
    account=Depends(require_officer),
):
    return list_pending_applications(db, account, page_number, page_size)


@router.post("/generate-otp", response_model=GenerateOtpResponse)
def generate_otp_route(
    payload: GenerateOtpRequest,
    db: Session = Depends(get_db),
    account=Depends(require_staff),
):
    return generate_action_otp(db, account, payload)


@router.post("/schedule-appointment", response_model=ActionResponse)
def schedule_appointment_route(
    payload: ScheduleAppointmentRequest,
    db: Session = Depends(get_db),
    account=Depends(require_junior),
):
    return perform_officer_action(db, account, payload, frozenset({ActionKind.SCHEDULE}))


@router.post("/approve-junior-engineer", response_model=ActionResponse)
def approve_junior_route(
    payload: OfficerActionRequest,
    db: Session = Depends(get_db),
    account=Depends(require_junior),
):
    return perform_officer_action(db, account, payload, frozenset({ActionKind.APPROVE}))


@router.post("/approve-assistant-engineer", response_model=ActionResponse)
def approve_assistant_route(
    payload: OfficerActionRequest,
    db: Session = Depends(get_db),
    account=Depends(require_assistant),
):
    return perform_officer_action(db, account, payload, frozenset({ActionKind.APPROVE}))


@router.post("/approve", response_model=ActionResponse)
def approve_route(
    payload: OfficerActionRequest,
    db: Session = Depends(get_db),
    account=Depends(require_approver),
):
    return perform_officer_action(db, account, payload, frozenset({ActionKind.APPROVE}))


@router.post("/apply-digital-signature", response_model=ActionResponse)
def apply_signature_route(
    payload: OfficerActionRequest,
    db: Session = Depends(get_db),
    account=Depends(require_signer),
):
    return perform_officer_action(db, account, payload, frozenset({ActionKind.SIGN}), officer_required=False)


@router.post("/generate-certificate", response_model=ActionResponse)
def generate_certificate_route(
    payload: OfficerActionRequest,
    db: Session = Depends(get_db),
    account=Depends(require_clerk),
):
    return perform_officer_action(db, account, payload, frozenset({ActionKind.CERTIFICATE}))


@router.post("/reject-by-officer", response_model=ActionResponse)
def reject_route(
    payload: RejectRequest,
    db: Session = Depends(get_db),
    account=Depends(require_staff),
):
    return reject_application(db, account, payload)


@router.get("/{application_id}", response_model=ApplicationRead)
def get_application_route(
    application_id: int,
    db: Session = Depends(get_db),
    account=Depends(get_current_account),
):
    return get_visible_application(db, account, application_id)


@router.post("/{application_id}/resubmit", response_model=ApplicationRead)
def resubmit_application_route(
    application_id: int,
    payload: ApplicationCreate,
    db: Session = Depends(get_db),
    account=Depends(require_citizen),
):
    return resubmit_application(db, account, application_id, payload)


@router.get("/{application_id}/history", response_model=list[StageTransitionRead])
def history_route(
    application_id: int,
    db: Session = Depends(get_db),
    account=Depends(get_current_account),
):
    return get_history(db, account, application_id)


@router.get("/{application_id}/rejections", response_model=list[RejectionRead])
def rejections_route(
    application_id: int,
    db: Session = Depends(get_db),
    account=Depends(get_current_account),
):
    return get_rejections(db, account, application_id)


@router.get("/{application_id}/certificate")
def certificate_route(
    application_id: int,
    db: Session = Depends(get_db),
    account=Depends(get_current_account),
):
    return download_certificate(db, account, application_id)


@router.get("/{application_id}/recommended-form")
def recommended_form_route(
    application_id: int,
    db: Session = Depends(get_db),
    account=Depends(get_current_account),
):
    return download_recommended_form(db, account, application_id)

import logging
from pathlib import Path
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from fastapi.responses import FileResponse
from pmc_portal.core import workflow
from pmc_portal.core.config import get_settings
from pmc_portal.core.email import render_email, send_email
from pmc_portal.core.roles import OFFICER_ROLES, PortalRole, map_role
from pmc_portal.models.account_model import Account
from pmc_portal.models.application_model import Application
from pmc_portal.models.enums import ApplicationStage
from pmc_portal.repositories.application_repo import (
    create_application,
    get_application_by_id,
    get_resubmission,
    list_applications,
)
from pmc_portal.repositories.rejection_repo import list_rejections
from pmc_portal.repositories.stage_transition_repo import add_transition, list_transitions
from pmc_portal.schemas.application_schema import ApplicationCreate, ApplicationListRequest, ApplicationPage

logger = logging.getLogger(__name__)


def _send_submission_email(app: Application):
    html = render_email(
        "Application received",
        f"Dear {app.first_name} {app.last_name},",
        f"Your application <strong>{app.application_number}</strong> for registration as "
        f"{app.position_type.name.replace('_', ' ').title()} has been submitted.",
        "You will be informed by email when the document verification appointment is scheduled.",
    )
    try:
        send_email(app.email_address, "Application received", html)
    except Exception:
        logger.warning("Submission email for application %s could not be sent", app.application_id, exc_info=True)


def _page(items: list[Application], total: int, page_number: int, page_size: int) -> ApplicationPage:
    return ApplicationPage.model_validate(
        {"items": items, "total_count": total, "page_number": page_number, "page_size": page_size}
    )


def submit_application(db: Session, account: Account, data: ApplicationCreate) -> Application:
    app = create_application(db, applicant_id=account.account_id, data=data)
    add_transition(
        db,
        app.application_id,
        ApplicationStage.JUNIOR_ENGINEER_PENDING,
        ApplicationStage.JUNIOR_ENGINEER_PENDING,
        action="submit",
    )
    db.commit()
    db.refresh(app)
    logger.info("Application %s submitted by account %s", app.application_number, account.account_id)
    _send_submission_email(app)
    return app


def resubmit_application(db: Session, account: Account, application_id: int, data: ApplicationCreate) -> Application:
    previous = get_application_by_id(db, application_id)
    if not previous or previous.applicant_id != account.account_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    if previous.current_stage != ApplicationStage.REJECTED:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Only rejected applications can be resubmitted")
    if get_resubmission(db, application_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Application has already been resubmitted")

    app = create_application(db, applicant_id=account.account_id, data=data, previous_application_id=application_id)
    add_transition(
        db,
        app.application_id,
        ApplicationStage.JUNIOR_ENGINEER_PENDING,
        ApplicationStage.JUNIOR_ENGINEER_PENDING,
        action="resubmit",
        comments=f"Resubmission of {previous.application_number}",
    )
    db.commit()
    db.refresh(app)
    logger.info("Application %s resubmitted as %s", previous.application_number, app.application_number)
    _send_submission_email(app)
    return app


def _stage_filter(request: ApplicationListRequest) -> frozenset[ApplicationStage] | None:
    stages = None
    if request.status is not None:
        stages = workflow.stages_for_status(request.status)
    if request.stage is not None:
        only = frozenset({request.stage})
        stages = only if stages is None else stages & only
    return stages


def list_visible_applications(db: Session, account: Account, request: ApplicationListRequest) -> ApplicationPage:
    """Citizens see their own applications, officers the position types they handle, admins everything."""
    role = map_role(account.role.value)
    applicant_id = account.account_id if role == PortalRole.USER else None
    positions = workflow.positions_for(role) if role in OFFICER_ROLES else None
    items, total = list_applications(
        db,
        page_number=request.page_number,
        page_size=request.page_size,
        applicant_id=applicant_id,
        stages=_stage_filter(request),
        position_type=request.position_type,
        positions=positions,
    )
    return _page(items, total, request.page_number, request.page_size)


def list_pending_applications(db: Session, account: Account, page_number: int, page_size: int) -> ApplicationPage:
    role = map_role(account.role.value)
    items, total = list_applications(
        db,
        page_number=page_number,
        page_size=page_size,
        queue=workflow.queue_filter_for(role),
    )
    return _page(items, total, page_number, page_size)


def get_visible_application(db: Session, account: Account, application_id: int) -> Application:
    app = get_application_by_id(db, application_id)
    if not app:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    role = map_role(account.role.value)
    if role == PortalRole.ADMIN:
        return app
    if role == PortalRole.USER:
        allowed = app.applicant_id == account.account_id
    else:
        allowed = app.position_type in workflow.positions_for(role)
    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not permitted to view this application")
    return app


def get_history(db: Session, account: Account, application_id: int):
    app = get_visible_application(db, account, application_id)
    return list_transitions(db, app.application_id)


def get_rejections(db: Session, account: Account, application_id: int):
    app = get_visible_application(db, account, application_id)
    return list_rejections(db, app.application_id)


def _stored_file(relative_path: str | None, missing: str) -> FileResponse:
    if not relative_path:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=missing)
    root = Path(get_settings().storage_dir).resolve()
    path = (root / relative_path).resolve()
    if root not in path.parents or not path.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=missing)
    return FileResponse(path, filename=path.name)


def download_certificate(db: Session, account: Account, application_id: int) -> FileResponse:
    app = get_visible_application(db, account, application_id)
    if not app.is_certificate_generated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Certificate has not been issued")
    return _stored_file(app.certificate_path, "Certificate file not found")


def download_recommended_form(db: Session, account: Account, application_id: int) -> FileResponse:
    app = get_visible_application(db, account, application_id)
    return _stored_file(app.recommended_form_path, "Recommended form not found")

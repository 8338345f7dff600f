from sqlalchemy.orm import Session
from sqlalchemy import select
from pmc_portal.models.enums import AccountRole, ApplicationStage, RejectionCategory
from pmc_portal.models.rejection_model import ApplicationRejection


def add_rejection(
    db: Session,
    application_id: int,
    officer_id: int,
    officer_name: str,
    officer_role: AccountRole,
    stage: ApplicationStage,
    category: RejectionCategory,
    reason: str,
    affected_fields: list[str],
) -> ApplicationRejection:
    rejection = ApplicationRejection(
        application_id=application_id,
        officer_id=officer_id,
        officer_name=officer_name,
        officer_role=officer_role,
        stage=stage,
        category=category,
        reason=reason,
        affected_fields=list(affected_fields),
        requires_resubmission=True,
    )
    db.add(rejection)
    db.flush()
    return rejection


def list_rejections(db: Session, application_id: int) -> list[ApplicationRejection]:
    stmt = (
        select(ApplicationRejection)
        .where(ApplicationRejection.application_id == application_id)
        .order_by(ApplicationRejection.rejection_id)
    )
    return list(db.execute(stmt).scalars().all())

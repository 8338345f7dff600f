from sqlalchemy.orm import Session
from sqlalchemy import select
from pmc_portal.models.enums import AccountRole, ApplicationStage
from pmc_portal.models.stage_transition_model import StageTransition


def add_transition(
    db: Session,
    application_id: int,
    from_stage: ApplicationStage,
    to_stage: ApplicationStage,
    action: str,
    officer_id: int | None = None,
    officer_role: AccountRole | None = None,
    comments: str | None = None,
) -> StageTransition:
    entry = StageTransition(
        application_id=application_id,
        from_stage=from_stage,
        to_stage=to_stage,
        action=action,
        officer_id=officer_id,
        officer_role=officer_role,
        comments=comments,
    )
    db.add(entry)
    db.flush()
    return entry


def list_transitions(db: Session, application_id: int) -> list[StageTransition]:
    stmt = (
        select(StageTransition)
        .where(StageTransition.application_id == application_id)
        .order_by(StageTransition.transition_id)
    )
    return list(db.execute(stmt).scalars().all())

from sqlalchemy.orm import Session
from sqlalchemy import and_, func, or_, select, update
from pmc_portal.core.clock import utcnow
from pmc_portal.models.application_model import Application
from pmc_portal.models.application_document_model import ApplicationDocument, Experience, Qualification
from pmc_portal.models.enums import ApplicationStage, PositionType
from pmc_portal.schemas.application_schema import ApplicationCreate


def create_application(
    db: Session,
    applicant_id: int,
    data: ApplicationCreate,
    previous_application_id: int | None = None,
) -> Application:
    app = Application(
        applicant_id=applicant_id,
        previous_application_id=previous_application_id,
        first_name=data.first_name,
        middle_name=data.middle_name,
        last_name=data.last_name,
        mother_name=data.mother_name,
        mobile_number=data.mobile_number,
        email_address=data.email_address.lower(),
        position_type=data.position_type,
        gender=data.gender,
        blood_group=data.blood_group,
        height=data.height,
        date_of_birth=data.date_of_birth,
        permanent_address=data.permanent_address.model_dump(),
        current_address=data.current_address.model_dump(),
        pan_card_number=data.pan_card_number,
        aadhar_card_number=data.aadhar_card_number,
        coa_card_number=data.coa_card_number,
        current_stage=ApplicationStage.JUNIOR_ENGINEER_PENDING,
    )
    app.documents = [
        ApplicationDocument(sort_order=i, **doc.model_dump()) for i, doc in enumerate(data.documents)
    ]
    app.qualifications = [Qualification(**q.model_dump()) for q in data.qualifications]
    app.experiences = [Experience(**e.model_dump()) for e in data.experiences]
    db.add(app)
    db.flush()
    app.application_number = f"PMC_APPLICATION_{utcnow().year}_{app.application_id}"
    db.commit()
    db.refresh(app)
    return app


def get_application_by_id(db: Session, application_id: int) -> Application | None:
    stmt = select(Application).where(Application.application_id == application_id)
    return db.execute(stmt).scalars().first()


def list_applications(
    db: Session,
    page_number: int,
    page_size: int,
    applicant_id: int | None = None,
    stages: frozenset[ApplicationStage] | None = None,
    position_type: PositionType | None = None,
    positions: frozenset[PositionType] | None = None,
    queue: tuple[tuple[ApplicationStage, frozenset[PositionType]], ...] | None = None,
) -> tuple[list[Application], int]:
    """One page of applications plus the total match count.

    ``queue`` restricts the result to (stage, positions) pairs, as an officer's
    pending list; an empty queue matches nothing.
    """
    conditions = []
    if applicant_id is not None:
        conditions.append(Application.applicant_id == applicant_id)
    if stages is not None:
        conditions.append(Application.current_stage.in_(list(stages)))
    if position_type is not None:
        conditions.append(Application.position_type == position_type)
    if positions is not None:
        conditions.append(Application.position_type.in_(list(positions)))
    if queue is not None:
        if not queue:
            return [], 0
        conditions.append(
            or_(*[
                and_(Application.current_stage == stage, Application.position_type.in_(list(stage_positions)))
                for stage, stage_positions in queue
            ])
        )

    count_stmt = select(func.count()).select_from(Application).where(*conditions)
    total = db.execute(count_stmt).scalar_one()

    stmt = (
        select(Application)
        .where(*conditions)
        .order_by(Application.application_id.desc())
        .offset((page_number - 1) * page_size)
        .limit(page_size)
    )
    return list(db.execute(stmt).scalars().all()), total


def get_resubmission(db: Session, previous_application_id: int) -> Application | None:
    stmt = select(Application).where(Application.previous_application_id == previous_application_id)
    return db.execute(stmt).scalars().first()


def advance_stage(db: Session, app: Application, from_stage: ApplicationStage, to_stage: ApplicationStage, **fields) -> bool:
    """Move ``app`` from ``from_stage`` to ``to_stage`` unless someone else moved it first.

    Flushes only; the caller commits.
    """
    stmt = (
        update(Application)
        .where(Application.application_id == app.application_id)
        .where(Application.current_stage == from_stage)
        .values(current_stage=to_stage, **fields)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(stmt)
    return result.rowcount == 1

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from pmc_portal.core.config import get_settings

settings = get_settings()

if not settings.database_url:
    # The app can still start, but any DB access will fail until DATABASE_URL is set.
    engine = None
    SessionLocal = None
else:
    engine = create_engine(settings.database_url, pool_pre_ping=True)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_schema(bind) -> None:
    """Create every portal table that does not exist yet."""
    from pmc_portal.models import (  # noqa: F401
        account_model,
        application_document_model,
        application_model,
        otp_challenge_model,
        payment_model,
        rejection_model,
        session_model,
        stage_transition_model,
    )
    from pmc_portal.models.base import Base

    Base.metadata.create_all(bind=bind)


def get_db():
    if SessionLocal is None:
        raise RuntimeError("DATABASE_URL is not set")
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

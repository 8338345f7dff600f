import logging
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from pmc_portal.schemas.common import HealthStatus

logger = logging.getLogger(__name__)


def read_health(db: Session) -> HealthStatus:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return HealthStatus(status="degraded", database="unavailable")
    return HealthStatus(status="ok", database="ok")

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pmc_portal.core.db import get_db
from pmc_portal.controllers.health_controller import read_health
from pmc_portal.schemas.common import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
def health(db: Session = Depends(get_db)):
    return read_health(db)

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from pmc_portal.core.db import get_db
from pmc_portal.core.auth import require_admin
from pmc_portal.controllers.admin_controller import invite_officer, list_officers
from pmc_portal.schemas.account_schema import AccountRead, OfficerCreate
from pmc_portal.schemas.common import MessageResponse

router = APIRouter(prefix="/Admin", tags=["admin"])


@router.post("/officers", response_model=MessageResponse)
def invite_officer_route(
    payload: OfficerCreate,
    db: Session = Depends(get_db),
    _account=Depends(require_admin),
):
    return invite_officer(db, payload)


@router.get("/officers", response_model=list[AccountRead])
def list_officers_route(
    db: Session = Depends(get_db),
    _account=Depends(require_admin),
):
    return list_officers(db)

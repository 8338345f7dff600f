from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session
from pmc_portal.core.db import get_db
from pmc_portal.core.auth import get_current_account, require_citizen
from pmc_portal.controllers.payment_controller import get_challan, handle_callback, initiate_payment
from pmc_portal.schemas.payment_schema import PaymentCallback, PaymentInitiateRequest, PaymentRead

router = APIRouter(prefix="/Payment", tags=["payments"])


@router.post("/initiate", response_model=PaymentRead)
def initiate_payment_route(
    payload: PaymentInitiateRequest,
    db: Session = Depends(get_db),
    account=Depends(require_citizen),
):
    return initiate_payment(db, account, payload)


@router.post("/callback", response_model=PaymentRead)
def payment_callback_route(
    payload: PaymentCallback,
    db: Session = Depends(get_db),
    signature: str | None = Header(default=None, alias="X-Payment-Signature"),
):
    return handle_callback(db, payload, signature)


@router.get("/challan/{application_id}", response_model=PaymentRead)
def challan_route(
    application_id: int,
    db: Session = Depends(get_db),
    account=Depends(get_current_account),
):
    return get_challan(db, account, application_id)

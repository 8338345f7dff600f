import os
import re

os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("JWT_EXPIRES_MINUTES", "60")
os.environ.setdefault("OTP_RESEND_COOLDOWN_SECONDS", "0")
os.environ.setdefault("PAYMENT_CALLBACK_SECRET", "gateway-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pmc_portal.core.db import create_schema, get_db
from pmc_portal.core.security import create_access_token, hash_password
from pmc_portal.main import app
from pmc_portal.models.account_model import Account
from pmc_portal.models.enums import AccountRole, ApplicationStage, PositionType
from pmc_portal.repositories.application_repo import advance_stage, create_application
from pmc_portal.repositories.session_repo import create_session
from pmc_portal.schemas.application_schema import ApplicationCreate
from pmc_portal.controllers import (
    admin_controller,
    application_controller,
    approval_controller,
    otp_controller,
    payment_controller,
)

OFFICER_PASSWORD = "correct-password"


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    create_schema(engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class Outbox(list):
    def to(self, email: str) -> list[dict]:
        return [m for m in self if m["to"] == email.lower()]

    def last_code(self, email: str) -> str:
        for message in reversed(self.to(email)):
            match = re.search(r"Your OTP is (\d{6})", message["text"] or "")
            if match:
                return match.group(1)
        raise AssertionError(f"No OTP was sent to {email}")


@pytest.fixture()
def outbox(monkeypatch):
    sent = Outbox()

    def fake_send_email(to_email, subject, html_body, text_body=None):
        sent.append({"to": to_email.lower(), "subject": subject, "html": html_body, "text": text_body})

    for module in (otp_controller, admin_controller, application_controller, approval_controller, payment_controller):
        monkeypatch.setattr(module, "send_email", fake_send_email)
    return sent


def make_account(db, role: AccountRole, email: str | None = None, name: str | None = None, password: str | None = OFFICER_PASSWORD):
    account = Account(
        email=email or f"{role.value.lower()}@pmc.example.com",
        name=name or role.value,
        role=role,
        password_hash=hash_password(password) if password and role != AccountRole.USER else None,
        is_active=True,
    )
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def auth_headers(db, account) -> dict:
    token, jti, expires_at = create_access_token(str(account.account_id), account.email, account.role.value)
    create_session(db, account.account_id, jti, expires_at)
    return {"Authorization": f"Bearer {token}"}


def application_payload(position_type: PositionType = PositionType.ARCHITECT, email: str = "citizen@example.com") -> dict:
    address = {
        "addressLine1": "12 Shivaji Nagar",
        "addressLine2": "Near FC Road",
        "addressLine3": "",
        "city": "Pune",
        "state": "Maharashtra",
        "country": "India",
        "pinCode": "411005",
    }
    return {
        "firstName": "Asha",
        "middleName": "R",
        "lastName": "Kulkarni",
        "motherName": "Sunita",
        "mobileNumber": "9876543210",
        "emailAddress": email,
        "positionType": int(position_type),
        "bloodGroup": "B+",
        "height": 162.5,
        "gender": 1,
        "dateOfBirth": "1990-04-12",
        "permanentAddress": address,
        "currentAddress": address,
        "panCardNumber": "ABCDE1234F",
        "aadharCardNumber": "123412341234",
        "coaCardNumber": "CA/2015/12345",
        "qualifications": [
            {
                "instituteName": "College of Engineering Pune",
                "universityName": "Savitribai Phule Pune University",
                "specialization": 0,
                "degreeName": "B.Arch",
                "passingMonth": 6,
                "yearOfPassing": "2012-06-01",
            }
        ],
        "experiences": [
            {
                "companyName": "Deccan Designs",
                "position": "Architect",
                "yearsOfExperience": 5,
                "fromDate": "2013-01-01",
                "toDate": "2018-01-01",
            }
        ],
        "documents": [
            {"documentType": 1, "filePath": "uploads/pan.pdf", "fileName": "pan.pdf", "fileId": "f-1"},
            {"documentType": 2, "filePath": "uploads/aadhar.pdf", "fileName": "aadhar.pdf", "fileId": "f-2"},
        ],
    }


def seed_application(
    db,
    applicant,
    position_type: PositionType = PositionType.ARCHITECT,
    stage: ApplicationStage = ApplicationStage.JUNIOR_ENGINEER_PENDING,
):
    data = ApplicationCreate.model_validate(application_payload(position_type, applicant.email))
    application = create_application(db, applicant.account_id, data)
    if stage != ApplicationStage.JUNIOR_ENGINEER_PENDING:
        advance_stage(db, application, ApplicationStage.JUNIOR_ENGINEER_PENDING, stage)
        db.commit()
        db.refresh(application)
    return application


def next_working_day() -> date:
    day = date.today() + timedelta(days=1)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def request_action_code(client, outbox, officer, headers, application_id) -> str:
    resp = client.post(
        "/Application/generate-otp",
        json={"applicationId": application_id, "officerId": officer.account_id},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return outbox.last_code(officer.email)


@pytest.fixture()
def citizen(db_session):
    return make_account(db_session, AccountRole.USER, email="citizen@example.com", name="Asha Kulkarni")

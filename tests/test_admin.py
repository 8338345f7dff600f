from pmc_portal.controllers import admin_controller
from pmc_portal.models.enums import AccountRole
from pmc_portal.repositories.account_repo import get_account_by_email

from conftest import auth_headers, make_account


def test_admin_invites_officer(client, db_session, outbox):
    admin = make_account(db_session, AccountRole.ADMIN, password=None)
    headers = auth_headers(db_session, admin)
    resp = client.post(
        "/Admin/officers",
        json={"email": "je.licence@pmc.example.com", "name": "R. Patil", "role": "JuniorLicenceEngineer"},
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["success"] is True

    message = outbox.to("je.licence@pmc.example.com")[0]
    password = message["html"].split("Temporary password:</strong> ")[1].split("</p>")[0]
    resp = client.post("/Auth/token", json={"email": "je.licence@pmc.example.com", "password": password})
    assert resp.status_code == 200
    assert resp.json()["role"] == "JuniorLicenceEngineer"

    officers = client.get("/Admin/officers", headers=headers).json()
    assert {o["email"] for o in officers} >= {"je.licence@pmc.example.com"}
    assert all(o["role"] != "User" for o in officers)


def test_duplicate_invitation(client, db_session, outbox):
    admin = make_account(db_session, AccountRole.ADMIN, password=None)
    make_account(db_session, AccountRole.CLERK, email="clerk@pmc.example.com", password=None)
    resp = client.post(
        "/Admin/officers",
        json={"email": "clerk@pmc.example.com", "name": "Clerk", "role": "Clerk"},
        headers=auth_headers(db_session, admin),
    )
    assert resp.status_code == 409


def test_citizen_role_cannot_be_invited(client, db_session):
    admin = make_account(db_session, AccountRole.ADMIN, password=None)
    resp = client.post(
        "/Admin/officers",
        json={"email": "x@example.com", "name": "X", "role": "User"},
        headers=auth_headers(db_session, admin),
    )
    assert resp.status_code == 422


def test_invitation_rolled_back_when_email_fails(client, db_session, monkeypatch):
    def broken_send(*args, **kwargs):
        raise RuntimeError("SMTP settings are not configured")

    monkeypatch.setattr(admin_controller, "send_email", broken_send)
    admin = make_account(db_session, AccountRole.ADMIN, password=None)
    resp = client.post(
        "/Admin/officers",
        json={"email": "ee@pmc.example.com", "name": "EE", "role": "ExecutiveEngineer"},
        headers=auth_headers(db_session, admin),
    )
    assert resp.status_code == 503
    assert get_account_by_email(db_session, "ee@pmc.example.com") is None


def test_only_admin_manages_officers(client, db_session):
    clerk = make_account(db_session, AccountRole.CLERK, password=None)
    resp = client.get("/Admin/officers", headers=auth_headers(db_session, clerk))
    assert resp.status_code == 403

from pmc_portal.core.config import get_settings
from pmc_portal.models.enums import AccountRole, ApplicationStage, PositionType

from conftest import application_payload, auth_headers, make_account, seed_application

S = ApplicationStage


def test_citizen_submits_application(client, db_session, outbox, citizen):
    headers = auth_headers(db_session, citizen)
    resp = client.post("/Application/create", json=application_payload(), headers=headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["applicationNumber"].startswith("PMC_APPLICATION_")
    assert body["applicationNumber"].endswith(f"_{body['applicationId']}")
    assert body["currentStage"] == S.JUNIOR_ENGINEER_PENDING
    assert body["status"] == 1
    assert body["stageLabel"] == "Junior Engineer Pending"
    assert [d["fileName"] for d in body["documents"]] == ["pan.pdf", "aadhar.pdf"]
    assert body["permanentAddress"]["pinCode"] == "411005"
    assert len(outbox.to("citizen@example.com")) == 1

    history = client.get(f"/Application/{body['applicationId']}/history", headers=headers).json()
    assert [h["action"] for h in history] == ["submit"]


def test_submission_survives_email_failure(client, db_session, citizen):
    headers = auth_headers(db_session, citizen)
    resp = client.post("/Application/create", json=application_payload(), headers=headers)
    assert resp.status_code == 200


def test_submission_validation(client, db_session, citizen):
    headers = auth_headers(db_session, citizen)
    for field, value in (
        ("panCardNumber", "abcde1234f"),
        ("aadharCardNumber", "1234"),
        ("bloodGroup", "C+"),
        ("mobileNumber", "98765"),
        ("dateOfBirth", "2999-01-01"),
    ):
        payload = application_payload()
        payload[field] = value
        resp = client.post("/Application/create", json=payload, headers=headers)
        assert resp.status_code == 422, field


def test_officers_cannot_submit(client, db_session):
    clerk = make_account(db_session, AccountRole.CLERK, password=None)
    resp = client.post("/Application/create", json=application_payload(), headers=auth_headers(db_session, clerk))
    assert resp.status_code == 403


def test_list_is_scoped_by_role(client, db_session, citizen):
    other = make_account(db_session, AccountRole.USER, email="other@example.com")
    mine = seed_application(db_session, citizen)
    seed_application(db_session, other, PositionType.LICENCE_ENGINEER)
    seed_application(db_session, other, PositionType.ARCHITECT, stage=S.PAYMENT_PENDING)

    def listed(account, **body):
        resp = client.post("/Application/list", json=body, headers=auth_headers(db_session, account))
        assert resp.status_code == 200, resp.text
        return resp.json()

    page = listed(citizen)
    assert [i["applicationId"] for i in page["items"]] == [mine.application_id]
    assert page["totalCount"] == 1

    junior = make_account(db_session, AccountRole.JUNIOR_ARCHITECT, password=None)
    assert listed(junior)["totalCount"] == 2
    admin = make_account(db_session, AccountRole.ADMIN, password=None)
    assert listed(admin)["totalCount"] == 3
    assert listed(admin, status=11)["totalCount"] == 1
    assert listed(admin, stage=0)["totalCount"] == 2
    assert listed(admin, stage=0, status=11)["totalCount"] == 0
    assert listed(admin, positionType=2)["totalCount"] == 1

    paged = listed(admin, pageNumber=2, pageSize=2)
    assert paged["totalCount"] == 3
    assert len(paged["items"]) == 1


def test_detail_access(client, db_session, citizen):
    app = seed_application(db_session, citizen, PositionType.SUPERVISOR1)
    other = make_account(db_session, AccountRole.USER, email="other@example.com")
    licence = make_account(db_session, AccountRole.JUNIOR_LICENCE_ENGINEER, password=None)
    supervisor = make_account(db_session, AccountRole.JUNIOR_SUPERVISOR1, password=None)
    url = f"/Application/{app.application_id}"

    assert client.get(url, headers=auth_headers(db_session, citizen)).status_code == 200
    assert client.get(url, headers=auth_headers(db_session, supervisor)).status_code == 200
    assert client.get(url, headers=auth_headers(db_session, other)).status_code == 403
    assert client.get(url, headers=auth_headers(db_session, licence)).status_code == 403
    assert client.get("/Application/4242", headers=auth_headers(db_session, citizen)).status_code == 404
    assert client.get(url).status_code == 401


def test_resubmission_links_to_rejected_application(client, db_session, outbox, citizen):
    headers = auth_headers(db_session, citizen)
    pending = seed_application(db_session, citizen)
    rejected = seed_application(db_session, citizen, stage=S.REJECTED)

    resp = client.post(f"/Application/{pending.application_id}/resubmit", json=application_payload(), headers=headers)
    assert resp.status_code == 409

    resp = client.post(f"/Application/{rejected.application_id}/resubmit", json=application_payload(), headers=headers)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["previousApplicationId"] == rejected.application_id
    assert body["currentStage"] == S.JUNIOR_ENGINEER_PENDING
    assert body["applicationId"] != rejected.application_id

    original = client.get(f"/Application/{rejected.application_id}", headers=headers).json()
    assert original["currentStage"] == S.REJECTED

    resp = client.post(f"/Application/{rejected.application_id}/resubmit", json=application_payload(), headers=headers)
    assert resp.status_code == 409


def test_only_owner_can_resubmit(client, db_session, citizen):
    rejected = seed_application(db_session, citizen, stage=S.REJECTED)
    other = make_account(db_session, AccountRole.USER, email="other@example.com")
    resp = client.post(
        f"/Application/{rejected.application_id}/resubmit",
        json=application_payload(),
        headers=auth_headers(db_session, other),
    )
    assert resp.status_code == 404


def test_certificate_download(client, db_session, citizen, tmp_path, monkeypatch):
    monkeypatch.setattr(get_settings(), "storage_dir", str(tmp_path))
    headers = auth_headers(db_session, citizen)
    app = seed_application(db_session, citizen, stage=S.APPROVED)
    url = f"/Application/{app.application_id}/certificate"

    assert client.get(url, headers=headers).status_code == 404

    (tmp_path / "certificates").mkdir()
    (tmp_path / "certificates" / "cert.pdf").write_bytes(b"%PDF-1.4 certificate")
    app.is_certificate_generated = True
    app.certificate_path = "certificates/cert.pdf"
    db_session.commit()

    resp = client.get(url, headers=headers)
    assert resp.status_code == 200
    assert resp.content == b"%PDF-1.4 certificate"


def test_stored_files_stay_inside_storage(client, db_session, citizen, tmp_path, monkeypatch):
    storage = tmp_path / "storage"
    storage.mkdir()
    (tmp_path / "secret.txt").write_text("nope")
    monkeypatch.setattr(get_settings(), "storage_dir", str(storage))
    app = seed_application(db_session, citizen)
    app.recommended_form_path = "../secret.txt"
    db_session.commit()

    resp = client.get(
        f"/Application/{app.application_id}/recommended-form", headers=auth_headers(db_session, citizen)
    )
    assert resp.status_code == 404


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "ok"}

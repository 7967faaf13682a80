import pytest
from fastapi.testclient import TestClient
from loguru import logger

from sos_dispatch.system import DispatchSystem
from sos_dispatch.web_app import app as default_app
from sos_dispatch.web_app import create_app


@pytest.fixture
def client(system: DispatchSystem) -> TestClient:
    return TestClient(create_app(system))


def _submit(client: TestClient, message: str, severity: int = 3, **extra) -> dict:
    data = {"message": message, "severity": str(severity), "latitude": "19.070", "longitude": "72.883"}
    data.update(extra)
    resp = client.post("/reports", data=data)
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_health_and_default_fleet() -> None:
    with TestClient(default_app) as client:
        assert client.get("/health").json() == {"status": "ok"}
        assert len(client.get("/responders").json()) > 0


def test_building_the_app_keeps_host_logging_and_defers_the_fleet() -> None:
    messages = []
    sink_id = logger.add(messages.append, level="INFO", format="{message}")
    try:
        fresh = create_app()
        assert not hasattr(fresh.state, "system")
        logger.info("host sink still attached")
    finally:
        logger.remove(sink_id)

    assert any("host sink still attached" in message for message in messages)


def test_submit_report_triages(client: TestClient) -> None:
    incident = _submit(client, "Smoke and fire on 3rd floor", severity=2, citizen_name="Robert Miller")

    assert incident["category"] == "Fire"
    assert incident["severity"] == 3
    assert incident["declared_severity"] == 2
    assert incident["status"] == "pending"
    assert incident["citizen_name"] == "Robert Miller"
    assert client.get(f"/incidents/{incident['id']}").json() == incident


def test_report_defaults(client: TestClient) -> None:
    resp = client.post("/reports", data={"message": "help", "latitude": "19.0", "longitude": "72.0"})

    assert resp.status_code == 200
    assert resp.json()["declared_severity"] == 3
    assert resp.json()["citizen_name"] == "Anonymous"


@pytest.mark.parametrize(
    ("data", "error"),
    [
        ({"message": "help", "severity": "7", "latitude": "19.0", "longitude": "72.0"}, "InvalidSeverity"),
        ({"message": "help", "severity": "3", "latitude": "91.0", "longitude": "72.0"}, "InvalidLocation"),
    ],
)
def test_invalid_reports_are_rejected(client: TestClient, data: dict, error: str) -> None:
    resp = client.post("/reports", data=data)

    assert resp.status_code == 422
    assert resp.json()["error"] == error
    assert client.get("/incidents").json() == []


def test_triage_queue_order(client: TestClient) -> None:
    low = _submit(client, "quiet report", severity=3)
    high = _submit(client, "quiet report", severity=5)

    queue = client.get("/incidents").json()
    assert [item["id"] for item in queue] == [high["id"], low["id"]]


def test_dispatch_flow_over_http(client: TestClient) -> None:
    incident = _submit(client, "Trapped on roof with two children.")

    resp = client.post(f"/incidents/{incident['id']}/dispatch")
    assert resp.status_code == 200
    body = resp.json()
    assert body["assignment"]["responder_id"] == "SAR-3"
    assert body["incident"]["status"] == "dispatched"
    assert body["responder"]["status"] == "en-route"
    assert body["responder"]["current_task_id"] == incident["id"]

    again = client.post(f"/incidents/{incident['id']}/dispatch")
    assert again.status_code == 409
    assert again.json()["error"] == "InvalidState"

    tasks = client.get("/responders/SAR-3/tasks").json()
    assert [task["id"] for task in tasks] == [incident["id"]]
    assert [unit["id"] for unit in client.get("/responders/available").json()] == ["MED-12"]

    assert client.post("/responders/SAR-3/arrive").json()["status"] == "on-site"
    assert client.post(f"/incidents/{incident['id']}/resolve").json()["status"] == "resolved"
    completed = client.post("/responders/SAR-3/complete").json()
    assert completed["status"] == "idle"
    assert completed["current_task_id"] is None

    resolved_again = client.post(f"/incidents/{incident['id']}/resolve")
    assert resolved_again.status_code == 409


def test_no_available_responders_is_a_conflict() -> None:
    client = TestClient(create_app(DispatchSystem()))
    incident = _submit(client, "help")

    resp = client.post(f"/incidents/{incident['id']}/dispatch")

    assert resp.status_code == 409
    assert resp.json() == {"detail": "No available responders currently.", "error": "NoAvailableResponders"}
    assert client.get(f"/incidents/{incident['id']}").json()["status"] == "pending"


def test_unknown_ids_return_404(client: TestClient) -> None:
    assert client.get("/incidents/alert-missing").status_code == 404
    assert client.post("/incidents/alert-missing/dispatch").status_code == 404
    assert client.get("/responders/nobody").status_code == 404
    assert client.post("/responders/nobody/complete").status_code == 404


def test_summary_endpoints(client: TestClient) -> None:
    incident = _submit(client, "Flooding in basement, rising fast.")
    client.post(f"/incidents/{incident['id']}/dispatch")

    summary = client.get("/summary").json()
    assert summary["dispatched"] == 1
    assert summary["responders_available"] == 1

    pdf = client.get("/summary/pdf")
    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert pdf.content.startswith(b"%PDF")

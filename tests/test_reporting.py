from sos_dispatch.models import Coordinates
from sos_dispatch.reporting import build_pdf_summary, situation_summary
from sos_dispatch.system import DispatchSystem


def _as_dict(rows: list[dict]) -> dict:
    return {row["name"]: row["value"] for row in rows}


def test_summary_of_empty_system() -> None:
    summary = situation_summary([], [])

    assert summary["incidents_total"] == 0
    assert summary["pending"] == 0
    assert summary["mean_pending_severity"] is None
    assert summary["responders_available"] == 0
    assert _as_dict(summary["incidents_per_category"])["Flood"] == 0


def test_summary_counts_statuses_and_categories(system: DispatchSystem) -> None:
    site = Coordinates(19.07, 72.88)
    flood = system.submit_report("Flooding in basement, rising fast.", 2, site)
    system.submit_report("Trapped on roof with two children.", 3, site)
    closed = system.submit_report("need supplies", 1, site)
    system.request_dispatch(flood)
    system.resolve_incident(closed)

    summary = system.situation_summary()

    assert summary["incidents_total"] == 3
    assert (summary["pending"], summary["dispatched"], summary["resolved"]) == (1, 1, 1)
    assert summary["mean_pending_severity"] == 5.0
    categories = _as_dict(summary["incidents_per_category"])
    assert categories == {"Flood": 1, "Fire": 0, "Structural": 1, "Medical": 0, "General": 1}
    assert _as_dict(summary["severity_distribution"]) == {"5": 1, "4": 1, "3": 0, "2": 0, "1": 1}
    assert summary["responders_total"] == 2
    assert summary["responders_available"] == 1
    assert _as_dict(summary["responder_status"]) == {"idle": 1, "en-route": 1, "on-site": 0}


def test_pdf_summary_renders(system: DispatchSystem) -> None:
    for i in range(15):
        system.submit_report(f"Water rising on street {i}", 3, Coordinates(19.07, 72.88))
    system.request_dispatch(system.list_sorted_for_triage()[0].incident_id)

    content = build_pdf_summary(system.list_sorted_for_triage(), system.responders.all())

    assert content.startswith(b"%PDF")
    assert len(content) > 1000


def test_pdf_summary_of_empty_system() -> None:
    assert build_pdf_summary([], []).startswith(b"%PDF")

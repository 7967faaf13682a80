"""Operator-facing situation analytics and the printable PDF summary."""
from __future__ import annotations

import io
from typing import Iterable, List, Sequence

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from sos_dispatch.models import (
    Category,
    Incident,
    IncidentStatus,
    Responder,
    ResponderStatus,
    utc_now,
)

INCIDENT_COLUMNS = ["incident_id", "category", "severity", "status"]
RESPONDER_COLUMNS = ["responder_id", "responder_type", "status"]


def _incident_frame(incidents: Iterable[Incident]) -> pd.DataFrame:
    rows = [
        {
            "incident_id": incident.incident_id,
            "category": incident.category.value,
            "severity": incident.severity,
            "status": incident.status.value,
        }
        for incident in incidents
    ]
    return pd.DataFrame(rows, columns=INCIDENT_COLUMNS)


def _responder_frame(responders: Iterable[Responder]) -> pd.DataFrame:
    rows = [
        {
            "responder_id": responder.responder_id,
            "responder_type": responder.responder_type.value,
            "status": responder.status.value,
        }
        for responder in responders
    ]
    return pd.DataFrame(rows, columns=RESPONDER_COLUMNS)


def _counts(frame: pd.DataFrame, column: str, labels: Sequence) -> List[dict]:
    counts = frame[column].value_counts().reindex(labels, fill_value=0)
    return [{"name": str(name), "value": int(value)} for name, value in counts.items()]


def situation_summary(incidents: Sequence[Incident], responders: Sequence[Responder]) -> dict:
    """Counts behind the dashboard header and analytics panels."""

    incident_df = _incident_frame(incidents)
    responder_df = _responder_frame(responders)

    pending = incident_df[incident_df["status"] == IncidentStatus.PENDING.value]
    mean_pending = round(float(pending["severity"].mean()), 2) if not pending.empty else None

    status_counts = incident_df["status"].value_counts()
    return {
        "incidents_total": int(len(incident_df)),
        "pending": int(status_counts.get(IncidentStatus.PENDING.value, 0)),
        "dispatched": int(status_counts.get(IncidentStatus.DISPATCHED.value, 0)),
        "resolved": int(status_counts.get(IncidentStatus.RESOLVED.value, 0)),
        "mean_pending_severity": mean_pending,
        "incidents_per_category": _counts(incident_df, "category", [c.value for c in Category]),
        "severity_distribution": _counts(incident_df, "severity", [5, 4, 3, 2, 1]),
        "responders_total": int(len(responder_df)),
        "responders_available": int((responder_df["status"] == ResponderStatus.IDLE.value).sum()),
        "responder_status": _counts(responder_df, "status", [s.value for s in ResponderStatus]),
    }


def build_pdf_summary(
    incidents: Sequence[Incident],
    responders: Sequence[Responder],
    limit: int = 100,
) -> bytes:
    """Render the triage queue and fleet status as a one-or-more page PDF."""

    summary = situation_summary(incidents, responders)
    buff = io.BytesIO()
    pdf = canvas.Canvas(buff, pagesize=letter)
    width, height = letter

    y = height - 40
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawString(40, y, "SOS Dispatch Situation Summary")
    y -= 18
    pdf.setFont("Helvetica", 10)
    pdf.drawString(40, y, f"Generated: {utc_now().isoformat()}")
    y -= 14
    pdf.drawString(
        40,
        y,
        f"Incidents: {summary['incidents_total']}  |  Pending: {summary['pending']}  |  "
        f"Dispatched: {summary['dispatched']}  |  Resolved: {summary['resolved']}",
    )
    y -= 14
    pdf.drawString(
        40,
        y,
        f"Units: {summary['responders_total']}  |  Available: {summary['responders_available']}",
    )
    y -= 24

    for incident in list(incidents)[:limit]:
        if y < 100:
            pdf.showPage()
            y = height - 40

        pdf.setStrokeColor(colors.red if incident.status == IncidentStatus.PENDING else colors.darkblue)
        pdf.rect(35, y - 50, width - 70, 45, stroke=1, fill=0)
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(
            45,
            y - 18,
            f"P{incident.severity} | {incident.category.value} | {incident.status.value} | {incident.citizen_name}",
        )
        pdf.setFont("Helvetica", 9)
        pdf.drawString(45, y - 31, incident.message[:110])
        assigned = incident.assigned_responder_id or "unassigned"
        pdf.drawString(
            45,
            y - 44,
            f"Location: {incident.location.latitude:.4f}, {incident.location.longitude:.4f}  |  "
            f"Unit: {assigned}  |  Time: {incident.created_at.isoformat(timespec='seconds')}",
        )
        y -= 58

    if y < 120:
        pdf.showPage()
        y = height - 40
    pdf.setFont("Helvetica-Bold", 12)
    pdf.drawString(40, y - 10, "Fleet")
    y -= 28
    pdf.setFont("Helvetica", 9)
    for responder in responders:
        if y < 40:
            pdf.showPage()
            pdf.setFont("Helvetica", 9)
            y = height - 40
        task = responder.current_task_id or "-"
        pdf.drawString(
            45,
            y,
            f"{responder.name} ({responder.responder_type.value}) | {responder.status.value} | task: {task}",
        )
        y -= 14

    pdf.save()
    buff.seek(0)
    return buff.read()

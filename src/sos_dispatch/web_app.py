from __future__ import annotations

import io
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from loguru import logger

from sos_dispatch.config import CORS_ORIGINS, DEFAULT_DECLARED_SEVERITY, SUMMARY_LIMIT
from sos_dispatch.errors import (
    InvalidCoordinate,
    InvalidSeverity,
    InvalidTransition,
    NoAvailableResponders,
    NotFound,
    SOSDispatchError,
)
from sos_dispatch.logging_setup import configure_logging
from sos_dispatch.models import Assignment, Coordinates, Incident, Responder
from sos_dispatch.reporting import build_pdf_summary
from sos_dispatch.roster import default_fleet
from sos_dispatch.system import DispatchSystem

ERROR_STATUS = (
    (NotFound, 404),
    (InvalidCoordinate, 422),
    (InvalidSeverity, 422),
    (InvalidTransition, 409),
    (NoAvailableResponders, 409),
)


def build_default_system() -> DispatchSystem:
    return DispatchSystem.with_fleet(default_fleet())


def incident_payload(incident: Incident) -> dict:
    return {
        "id": incident.incident_id,
        "citizen_name": incident.citizen_name,
        "message": incident.message,
        "declared_severity": incident.declared_severity,
        "severity": incident.severity,
        "category": incident.category.value,
        "status": incident.status.value,
        "latitude": incident.location.latitude,
        "longitude": incident.location.longitude,
        "assigned_responder_id": incident.assigned_responder_id,
        "created_at": incident.created_at.isoformat(),
    }


def responder_payload(responder: Responder) -> dict:
    return {
        "id": responder.responder_id,
        "name": responder.name,
        "type": responder.responder_type.value,
        "status": responder.status.value,
        "latitude": responder.location.latitude,
        "longitude": responder.location.longitude,
        "current_task_id": responder.current_task_id,
    }


def assignment_payload(assignment: Assignment) -> dict:
    return {
        "incident_id": assignment.incident_id,
        "responder_id": assignment.responder_id,
        "distance_km": round(assignment.distance_km, 3),
    }


def status_for(exc: SOSDispatchError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 400


def get_system(request: Request) -> DispatchSystem:
    return request.app.state.system


def create_app(system: Optional[DispatchSystem] = None) -> FastAPI:
    """Build the HTTP adapter around ``system``.

    Without an injected system the app seeds the configured fleet and sets up
    logging on startup, so importing this module has no side effects.
    """

    app = FastAPI(title="SOS Dispatch")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if system is not None:
        app.state.system = system

    @app.on_event("startup")
    def startup() -> None:
        if system is None:
            configure_logging()
            app.state.system = build_default_system()

    @app.exception_handler(SOSDispatchError)
    async def handle_core_error(request: Request, exc: SOSDispatchError) -> JSONResponse:
        status_code = status_for(exc)
        logger.warning("{} {} -> {} {}", request.method, request.url.path, status_code, exc)
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "error": type(exc).__name__},
        )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/reports")
    def submit_report(
        message: str = Form(...),
        latitude: float = Form(...),
        longitude: float = Form(...),
        severity: int = Form(DEFAULT_DECLARED_SEVERITY),
        citizen_name: str = Form(""),
        system: DispatchSystem = Depends(get_system),
    ):
        incident_id = system.submit_report(
            message=message,
            declared_severity=severity,
            location=Coordinates(latitude=latitude, longitude=longitude),
            citizen_name=citizen_name,
        )
        return incident_payload(system.get_incident(incident_id))

    @app.get("/incidents")
    def triage_queue(system: DispatchSystem = Depends(get_system)):
        return [incident_payload(incident) for incident in system.list_sorted_for_triage()]

    @app.get("/incidents/{incident_id}")
    def get_incident(incident_id: str, system: DispatchSystem = Depends(get_system)):
        return incident_payload(system.get_incident(incident_id))

    @app.post("/incidents/{incident_id}/dispatch")
    def dispatch_incident(incident_id: str, system: DispatchSystem = Depends(get_system)):
        assignment = system.request_dispatch(incident_id)
        return {
            "assignment": assignment_payload(assignment),
            "incident": incident_payload(system.get_incident(incident_id)),
            "responder": responder_payload(system.get_responder(assignment.responder_id)),
        }

    @app.post("/incidents/{incident_id}/resolve")
    def resolve_incident(incident_id: str, system: DispatchSystem = Depends(get_system)):
        return incident_payload(system.resolve_incident(incident_id))

    @app.get("/responders")
    def all_responders(system: DispatchSystem = Depends(get_system)):
        return [responder_payload(responder) for responder in system.responders.all()]

    @app.get("/responders/available")
    def available_responders(system: DispatchSystem = Depends(get_system)):
        return [responder_payload(responder) for responder in system.list_available()]

    @app.get("/responders/{responder_id}")
    def get_responder(responder_id: str, system: DispatchSystem = Depends(get_system)):
        return responder_payload(system.get_responder(responder_id))

    @app.get("/responders/{responder_id}/tasks")
    def responder_tasks(responder_id: str, system: DispatchSystem = Depends(get_system)):
        return [incident_payload(incident) for incident in system.tasks_for(responder_id)]

    @app.post("/responders/{responder_id}/arrive")
    def responder_arrived(responder_id: str, system: DispatchSystem = Depends(get_system)):
        return responder_payload(system.responder_arrived(responder_id))

    @app.post("/responders/{responder_id}/complete")
    def complete_task(responder_id: str, system: DispatchSystem = Depends(get_system)):
        return responder_payload(system.complete_responder_task(responder_id))

    @app.get("/summary")
    def summary(system: DispatchSystem = Depends(get_system)):
        return system.situation_summary()

    @app.get("/summary/pdf")
    def summary_pdf(system: DispatchSystem = Depends(get_system)):
        content = build_pdf_summary(
            system.list_sorted_for_triage(),
            system.responders.all(),
            limit=SUMMARY_LIMIT,
        )
        return StreamingResponse(
            io.BytesIO(content),
            media_type="application/pdf",
            headers={"Content-Disposition": "attachment; filename=sos_situation_summary.pdf"},
        )

    return app


app = create_app()

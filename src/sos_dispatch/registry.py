"""In-memory owners of incident and responder records.

Records are frozen dataclasses. Every transition swaps in a new record under
the registry lock, so readers only ever see whole records.
"""
from __future__ import annotations

import threading
from dataclasses import replace
from typing import Dict, List, Optional
from uuid import uuid4

from loguru import logger

from sos_dispatch.config import DEFAULT_CITIZEN_NAME
from sos_dispatch.errors import (
    DuplicateResponder,
    InvalidCoordinate,
    InvalidLocation,
    InvalidTransition,
    NotFound,
)
from sos_dispatch.geo import validate_coordinates
from sos_dispatch.models import (
    Coordinates,
    Incident,
    IncidentStatus,
    Responder,
    ResponderStatus,
)
from sos_dispatch.triage import triage, validate_severity


def new_incident_id() -> str:
    return f"alert-{uuid4().hex}"


class IncidentRegistry:
    def __init__(self) -> None:
        self._incidents: Dict[str, Incident] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._incidents)

    def __contains__(self, incident_id: object) -> bool:
        with self._lock:
            return incident_id in self._incidents

    def insert(
        self,
        message: str,
        declared_severity: int,
        location: Coordinates,
        citizen_name: Optional[str] = None,
    ) -> str:
        """Triage a new report and store it as pending. Returns the incident id."""

        validate_severity(declared_severity)
        try:
            validate_coordinates(location)
        except InvalidCoordinate as exc:
            logger.warning("Rejected report with invalid location: {}", exc)
            raise InvalidLocation(str(exc)) from exc

        result = triage(message, declared_severity)
        incident = Incident(
            incident_id=new_incident_id(),
            message=message,
            declared_severity=declared_severity,
            category=result.category,
            severity=result.severity,
            location=location,
            citizen_name=(citizen_name or "").strip() or DEFAULT_CITIZEN_NAME,
        )
        with self._lock:
            self._incidents[incident.incident_id] = incident

        logger.info(
            "Incident {} registered: {} P{} at ({}, {})",
            incident.incident_id,
            incident.category.value,
            incident.severity,
            location.latitude,
            location.longitude,
        )
        return incident.incident_id

    def get(self, incident_id: str) -> Incident:
        with self._lock:
            try:
                return self._incidents[incident_id]
            except KeyError:
                raise NotFound("Incident", incident_id) from None

    def all(self) -> List[Incident]:
        with self._lock:
            return list(self._incidents.values())

    def list_sorted_for_triage(self) -> List[Incident]:
        """Pending first, then final severity descending; ties keep insertion order."""

        return sorted(
            self.all(),
            key=lambda incident: (incident.status != IncidentStatus.PENDING, -incident.severity),
        )

    def tasks_for(self, responder_id: str) -> List[Incident]:
        return [
            incident
            for incident in self.all()
            if incident.assigned_responder_id == responder_id
            and incident.status != IncidentStatus.RESOLVED
        ]

    def mark_dispatched(self, incident_id: str, responder_id: str) -> Incident:
        with self._lock:
            incident = self.get(incident_id)
            if incident.status != IncidentStatus.PENDING:
                raise InvalidTransition(
                    f"Incident {incident_id} is {incident.status.value}; only pending incidents can be dispatched"
                )
            updated = replace(
                incident,
                status=IncidentStatus.DISPATCHED,
                assigned_responder_id=responder_id,
            )
            self._incidents[incident_id] = updated
        logger.info("Incident {} dispatched to {}", incident_id, responder_id)
        return updated

    def mark_resolved(self, incident_id: str) -> Incident:
        with self._lock:
            incident = self.get(incident_id)
            if incident.status == IncidentStatus.RESOLVED:
                raise InvalidTransition(f"Incident {incident_id} is already resolved")
            updated = replace(incident, status=IncidentStatus.RESOLVED)
            self._incidents[incident_id] = updated
        logger.info("Incident {} resolved (was {})", incident_id, incident.status.value)
        return updated

    def restore(self, incident: Incident) -> None:
        """Put back a previously read record. Only used to undo a failed commit."""

        with self._lock:
            if incident.incident_id not in self._incidents:
                raise NotFound("Incident", incident.incident_id)
            self._incidents[incident.incident_id] = incident


class ResponderRegistry:
    def __init__(self) -> None:
        self._responders: Dict[str, Responder] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._responders)

    def __contains__(self, responder_id: object) -> bool:
        with self._lock:
            return responder_id in self._responders

    def add(self, responder: Responder) -> Responder:
        """Register a roster entry. New units always start idle with no task."""

        validate_coordinates(responder.location)
        fresh = replace(responder, status=ResponderStatus.IDLE, current_task_id=None)
        with self._lock:
            if responder.responder_id in self._responders:
                raise DuplicateResponder(f"Responder {responder.responder_id} is already registered")
            self._responders[responder.responder_id] = fresh
        logger.info("Responder {} ({}) joined the fleet", fresh.responder_id, fresh.responder_type.value)
        return fresh

    def get(self, responder_id: str) -> Responder:
        with self._lock:
            try:
                return self._responders[responder_id]
            except KeyError:
                raise NotFound("Responder", responder_id) from None

    def all(self) -> List[Responder]:
        with self._lock:
            return list(self._responders.values())

    def list_available(self) -> List[Responder]:
        return [responder for responder in self.all() if responder.status == ResponderStatus.IDLE]

    def assign(self, responder_id: str, task_id: str) -> Responder:
        with self._lock:
            responder = self.get(responder_id)
            if responder.status != ResponderStatus.IDLE:
                raise InvalidTransition(
                    f"Responder {responder_id} is {responder.status.value}; only idle units can be assigned"
                )
            updated = replace(responder, status=ResponderStatus.EN_ROUTE, current_task_id=task_id)
            self._responders[responder_id] = updated
        logger.info("Responder {} en route to {}", responder_id, task_id)
        return updated

    def mark_on_site(self, responder_id: str) -> Responder:
        with self._lock:
            responder = self.get(responder_id)
            if responder.status != ResponderStatus.EN_ROUTE:
                raise InvalidTransition(
                    f"Responder {responder_id} is {responder.status.value}; only en-route units can arrive"
                )
            updated = replace(responder, status=ResponderStatus.ON_SITE)
            self._responders[responder_id] = updated
        logger.info("Responder {} on site at {}", responder_id, updated.current_task_id)
        return updated

    def complete(self, responder_id: str) -> Responder:
        with self._lock:
            responder = self.get(responder_id)
            if responder.status == ResponderStatus.IDLE:
                raise InvalidTransition(f"Responder {responder_id} has no task to complete")
            updated = replace(responder, status=ResponderStatus.IDLE, current_task_id=None)
            self._responders[responder_id] = updated
        logger.info("Responder {} completed {} and is idle", responder_id, responder.current_task_id)
        return updated

    def relocate(self, responder_id: str, location: Coordinates) -> Responder:
        validate_coordinates(location)
        with self._lock:
            responder = self.get(responder_id)
            updated = replace(responder, location=location)
            self._responders[responder_id] = updated
        logger.debug("Responder {} moved to ({}, {})", responder_id, location.latitude, location.longitude)
        return updated

    def restore(self, responder: Responder) -> None:
        """Put back a previously read record. Only used to undo a failed commit."""

        with self._lock:
            if responder.responder_id not in self._responders:
                raise NotFound("Responder", responder.responder_id)
            self._responders[responder.responder_id] = responder

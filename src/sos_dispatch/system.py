from __future__ import annotations

import threading
from typing import Iterable, List, Optional

from loguru import logger

from sos_dispatch.dispatch import DispatchEngine
from sos_dispatch.models import Assignment, Coordinates, Incident, Responder
from sos_dispatch.registry import IncidentRegistry, ResponderRegistry
from sos_dispatch.reporting import situation_summary


class DispatchSystem:
    """Boundary the presentation layer talks to.

    Owns nothing itself: both registries are injected. Every operation that
    touches both registries runs under one lock so a responder can never be
    booked for two incidents at once.
    """

    def __init__(
        self,
        incidents: Optional[IncidentRegistry] = None,
        responders: Optional[ResponderRegistry] = None,
        engine: Optional[DispatchEngine] = None,
    ) -> None:
        self.incidents = incidents if incidents is not None else IncidentRegistry()
        self.responders = responders if responders is not None else ResponderRegistry()
        self.engine = engine or DispatchEngine()
        self._dispatch_lock = threading.RLock()

    @classmethod
    def with_fleet(cls, responders: Iterable[Responder]) -> "DispatchSystem":
        system = cls()
        for responder in responders:
            system.responders.add(responder)
        return system

    def submit_report(
        self,
        message: str,
        declared_severity: int,
        location: Coordinates,
        citizen_name: Optional[str] = None,
    ) -> str:
        return self.incidents.insert(message, declared_severity, location, citizen_name)

    def request_dispatch(self, incident_id: str) -> Assignment:
        with self._dispatch_lock:
            assignment = self.engine.plan(incident_id, self.incidents, self.responders)
            self._commit(assignment)
        logger.info(
            "Dispatched {} to {} ({:.2f} km)",
            assignment.responder_id,
            assignment.incident_id,
            assignment.distance_km,
        )
        return assignment

    def _commit(self, assignment: Assignment) -> None:
        incident_before = self.incidents.get(assignment.incident_id)
        responder_before = self.responders.get(assignment.responder_id)
        try:
            self.responders.assign(assignment.responder_id, assignment.incident_id)
            self.incidents.mark_dispatched(assignment.incident_id, assignment.responder_id)
        except Exception:
            logger.exception("Dispatch commit for {} failed; rolling back", assignment.incident_id)
            self.responders.restore(responder_before)
            self.incidents.restore(incident_before)
            raise

    def resolve_incident(self, incident_id: str) -> Incident:
        with self._dispatch_lock:
            return self.incidents.mark_resolved(incident_id)

    def responder_arrived(self, responder_id: str) -> Responder:
        with self._dispatch_lock:
            return self.responders.mark_on_site(responder_id)

    def complete_responder_task(self, responder_id: str) -> Responder:
        with self._dispatch_lock:
            return self.responders.complete(responder_id)

    def get_incident(self, incident_id: str) -> Incident:
        return self.incidents.get(incident_id)

    def get_responder(self, responder_id: str) -> Responder:
        return self.responders.get(responder_id)

    def list_sorted_for_triage(self) -> List[Incident]:
        return self.incidents.list_sorted_for_triage()

    def list_available(self) -> List[Responder]:
        return self.responders.list_available()

    def tasks_for(self, responder_id: str) -> List[Incident]:
        self.responders.get(responder_id)
        return self.incidents.tasks_for(responder_id)

    def situation_summary(self) -> dict:
        with self._dispatch_lock:
            incidents = self.incidents.all()
            responders = self.responders.all()
        return situation_summary(incidents, responders)

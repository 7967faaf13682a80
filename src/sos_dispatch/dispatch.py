from __future__ import annotations

from loguru import logger

from sos_dispatch.errors import InvalidState, NoAvailableResponders
from sos_dispatch.geo import distance_km
from sos_dispatch.models import Assignment, IncidentStatus
from sos_dispatch.registry import IncidentRegistry, ResponderRegistry


class DispatchEngine:
    """Chooses the nearest idle responder for a pending incident.

    The engine is stateless and never mutates the registries it reads; the
    caller commits the returned ``Assignment``.
    """

    def plan(
        self,
        incident_id: str,
        incidents: IncidentRegistry,
        responders: ResponderRegistry,
    ) -> Assignment:
        incident = incidents.get(incident_id)
        if incident.status != IncidentStatus.PENDING:
            raise InvalidState(
                f"Incident {incident_id} is {incident.status.value}; only pending incidents can be dispatched"
            )

        available = responders.list_available()
        if not available:
            logger.warning("Dispatch for {} requested but no responders are idle", incident_id)
            raise NoAvailableResponders()

        nearest = available[0]
        min_distance = distance_km(incident.location, nearest.location)
        for responder in available[1:]:
            distance = distance_km(incident.location, responder.location)
            # Strict comparison keeps the first responder on ties.
            if distance < min_distance:
                nearest = responder
                min_distance = distance

        logger.debug(
            "Nearest idle responder for {} is {} at {:.3f} km ({} candidates)",
            incident_id,
            nearest.responder_id,
            min_distance,
            len(available),
        )
        return Assignment(
            incident_id=incident_id,
            responder_id=nearest.responder_id,
            distance_km=min_distance,
        )

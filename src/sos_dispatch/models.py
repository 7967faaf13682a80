from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from sos_dispatch.config import DEFAULT_CITIZEN_NAME


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Category(str, Enum):
    FLOOD = "Flood"
    FIRE = "Fire"
    STRUCTURAL = "Structural"
    MEDICAL = "Medical"
    GENERAL = "General"


class IncidentStatus(str, Enum):
    PENDING = "pending"
    DISPATCHED = "dispatched"
    RESOLVED = "resolved"


class ResponderStatus(str, Enum):
    IDLE = "idle"
    EN_ROUTE = "en-route"
    ON_SITE = "on-site"


class ResponderType(str, Enum):
    RESCUE = "rescue"
    MEDICAL = "medical"
    SUPPLY = "supply"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class TriageResult:
    category: Category
    severity: int
    signals: List[str]


@dataclass(frozen=True)
class Incident:
    incident_id: str
    message: str
    declared_severity: int
    category: Category
    severity: int
    location: Coordinates
    citizen_name: str = DEFAULT_CITIZEN_NAME
    created_at: datetime = field(default_factory=utc_now)
    status: IncidentStatus = IncidentStatus.PENDING
    assigned_responder_id: Optional[str] = None


@dataclass(frozen=True)
class Responder:
    responder_id: str
    name: str
    location: Coordinates
    responder_type: ResponderType = ResponderType.RESCUE
    status: ResponderStatus = ResponderStatus.IDLE
    current_task_id: Optional[str] = None


@dataclass(frozen=True)
class Assignment:
    incident_id: str
    responder_id: str
    distance_km: float

from __future__ import annotations

import pytest

from sos_dispatch.models import Coordinates, Responder, ResponderType
from sos_dispatch.system import DispatchSystem


@pytest.fixture
def fleet() -> list[Responder]:
    return [
        Responder(
            responder_id="MED-12",
            name="UNIT-A-10",
            location=Coordinates(19.081, 72.871),
            responder_type=ResponderType.MEDICAL,
        ),
        Responder(
            responder_id="SAR-3",
            name="UNIT-B-11",
            location=Coordinates(19.069, 72.884),
            responder_type=ResponderType.RESCUE,
        ),
    ]


@pytest.fixture
def system(fleet) -> DispatchSystem:
    return DispatchSystem.with_fleet(fleet)

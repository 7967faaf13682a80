from pathlib import Path

import pytest

from sos_dispatch.errors import InvalidCoordinate, RosterError
from sos_dispatch.models import Coordinates, ResponderType
from sos_dispatch.registry import ResponderRegistry
from sos_dispatch.roster import generate_fleet, load_roster


def test_load_roster_reads_units(tmp_path: Path) -> None:
    roster = tmp_path / "roster.csv"
    roster.write_text(
        "responder_id,name,latitude,longitude,responder_type\n"
        "007,Boat Team,19.05,72.83,Rescue\n"
        "med-1,Ambulance 1,19.10,72.90,medical\n"
    )

    units = load_roster(roster)

    assert [unit.responder_id for unit in units] == ["007", "med-1"]
    assert units[0].responder_type == ResponderType.RESCUE
    assert units[1].responder_type == ResponderType.MEDICAL
    assert units[1].location == Coordinates(19.10, 72.90)


def test_responder_type_column_is_optional(tmp_path: Path) -> None:
    roster = tmp_path / "roster.csv"
    roster.write_text("responder_id,name,latitude,longitude\nr1,Unit 1,19.0,72.0\n")

    assert load_roster(roster)[0].responder_type == ResponderType.RESCUE


def test_roster_errors(tmp_path: Path) -> None:
    missing_columns = tmp_path / "short.csv"
    missing_columns.write_text("responder_id,name\nr1,Unit 1\n")
    bad_type = tmp_path / "bad_type.csv"
    bad_type.write_text("responder_id,name,latitude,longitude,responder_type\nr1,Unit 1,19.0,72.0,tank\n")

    with pytest.raises(RosterError, match="latitude, longitude"):
        load_roster(missing_columns)
    with pytest.raises(RosterError):
        load_roster(bad_type)
    with pytest.raises(RosterError):
        load_roster(tmp_path / "absent.csv")


def test_out_of_range_roster_location_is_rejected_on_registration(tmp_path: Path) -> None:
    roster = tmp_path / "roster.csv"
    roster.write_text("responder_id,name,latitude,longitude\nr1,Unit 1,120.0,72.0\n")
    registry = ResponderRegistry()

    with pytest.raises(InvalidCoordinate):
        for unit in load_roster(roster):
            registry.add(unit)


def test_generated_fleet_is_deterministic_and_cycles_types() -> None:
    center = Coordinates(19.0760, 72.8777)
    fleet = generate_fleet(4, center=center, seed=3)

    assert fleet == generate_fleet(4, center=center, seed=3)
    assert [unit.responder_id for unit in fleet] == ["resp-0", "resp-1", "resp-2", "resp-3"]
    assert [unit.name for unit in fleet] == ["UNIT-A-10", "UNIT-B-11", "UNIT-C-12", "UNIT-D-13"]
    assert [unit.responder_type for unit in fleet] == [
        ResponderType.RESCUE,
        ResponderType.MEDICAL,
        ResponderType.SUPPLY,
        ResponderType.RESCUE,
    ]
    for unit in fleet:
        assert abs(unit.location.latitude - center.latitude) <= 0.04
        assert abs(unit.location.longitude - center.longitude) <= 0.04

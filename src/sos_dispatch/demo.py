from __future__ import annotations

from sos_dispatch.errors import NoAvailableResponders
from sos_dispatch.logging_setup import configure_logging
from sos_dispatch.models import Coordinates, Responder, ResponderType
from sos_dispatch.system import DispatchSystem


def main() -> None:
    configure_logging("WARNING")

    system = DispatchSystem.with_fleet(
        [
            Responder(
                responder_id="resp-0",
                name="UNIT-A-10",
                location=Coordinates(19.081, 72.871),
                responder_type=ResponderType.RESCUE,
            ),
            Responder(
                responder_id="resp-1",
                name="UNIT-B-11",
                location=Coordinates(19.069, 72.884),
                responder_type=ResponderType.MEDICAL,
            ),
        ]
    )

    reports = [
        ("Flooding in basement, rising fast.", 2, Coordinates(19.072, 72.880), "Sarah Jenkins"),
        ("Trapped on roof with two children.", 4, Coordinates(19.080, 72.872), "Marcus Chen"),
        ("Medical emergency, insulin required.", 3, Coordinates(19.066, 72.886), None),
    ]
    for message, severity, location, name in reports:
        system.submit_report(message, severity, location, citizen_name=name)

    print("=== SOS Triage Queue ===")
    for incident in system.list_sorted_for_triage():
        print(f" - P{incident.severity} {incident.category.value:<10} {incident.citizen_name}: {incident.message}")

    print("\nDispatching in triage order:")
    for incident in system.list_sorted_for_triage():
        try:
            assignment = system.request_dispatch(incident.incident_id)
        except NoAvailableResponders as exc:
            print(f" - {incident.citizen_name}: {exc}")
            continue
        unit = system.get_responder(assignment.responder_id)
        print(f" - {incident.citizen_name}: {unit.name} en route ({assignment.distance_km:.2f} km)")

    summary = system.situation_summary()
    print(
        f"\nPending: {summary['pending']}  Dispatched: {summary['dispatched']}  "
        f"Units available: {summary['responders_available']}/{summary['responders_total']}"
    )


if __name__ == "__main__":
    main()

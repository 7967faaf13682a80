"""Sources for the initial responder fleet."""
from __future__ import annotations

import random
from pathlib import Path
from typing import List, Optional

import pandas as pd
from loguru import logger

from sos_dispatch.config import CENTER_LAT, CENTER_LNG, ROSTER_PATH, SEED, SEED_RESPONDERS
from sos_dispatch.errors import RosterError
from sos_dispatch.models import Coordinates, Responder, ResponderType

REQUIRED_COLUMNS = ("responder_id", "name", "latitude", "longitude")
UNIT_TYPES = (ResponderType.RESCUE, ResponderType.MEDICAL, ResponderType.SUPPLY)


def load_roster(path: Path) -> List[Responder]:
    """Read responders from a CSV roster.

    ``responder_type`` is optional and defaults to rescue. Location validity is
    checked later, when the responders are registered.
    """

    try:
        df = pd.read_csv(path, dtype={"responder_id": str, "name": str})
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise RosterError(f"Could not read roster {path}: {exc}") from exc

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    if missing:
        raise RosterError(f"Roster {path} is missing columns: {', '.join(missing)}")
    if "responder_type" not in df.columns:
        df["responder_type"] = ResponderType.RESCUE.value

    responders = []
    for row in df.itertuples(index=False):
        try:
            unit_type = ResponderType(str(row.responder_type).strip().lower())
            location = Coordinates(latitude=float(row.latitude), longitude=float(row.longitude))
        except ValueError as exc:
            raise RosterError(f"Bad roster row for {row.responder_id}: {exc}") from exc
        responders.append(
            Responder(
                responder_id=str(row.responder_id).strip(),
                name=str(row.name).strip(),
                location=location,
                responder_type=unit_type,
            )
        )

    logger.info("Loaded {} responders from {}", len(responders), path)
    return responders


def generate_fleet(
    count: int,
    center: Optional[Coordinates] = None,
    seed: Optional[int] = None,
    spread: float = 0.08,
) -> List[Responder]:
    """Scatter ``count`` idle units around ``center``, cycling through unit types."""

    center = center or Coordinates(CENTER_LAT, CENTER_LNG)
    rng = random.Random(seed)
    fleet = []
    for i in range(count):
        fleet.append(
            Responder(
                responder_id=f"resp-{i}",
                name=f"UNIT-{chr(65 + i % 26)}-{10 + i}",
                location=Coordinates(
                    latitude=center.latitude + (rng.random() - 0.5) * spread,
                    longitude=center.longitude + (rng.random() - 0.5) * spread,
                ),
                responder_type=UNIT_TYPES[i % len(UNIT_TYPES)],
            )
        )
    return fleet


def default_fleet() -> List[Responder]:
    if ROSTER_PATH is not None:
        return load_roster(ROSTER_PATH)
    logger.info("No roster configured; generating {} units around ({}, {})", SEED_RESPONDERS, CENTER_LAT, CENTER_LNG)
    return generate_fleet(SEED_RESPONDERS, seed=SEED)

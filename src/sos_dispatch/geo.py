from __future__ import annotations

import math

from sos_dispatch.config import EARTH_RADIUS_KM
from sos_dispatch.errors import InvalidCoordinate
from sos_dispatch.models import Coordinates


def validate_coordinates(location: Coordinates) -> Coordinates:
    """Return ``location`` unchanged, or raise ``InvalidCoordinate``.

    Both components must be finite real numbers, latitude in [-90, 90] and
    longitude in [-180, 180].
    """

    try:
        lat = location.latitude
        lng = location.longitude
    except AttributeError as exc:
        raise InvalidCoordinate(f"Not a coordinate pair: {location!r}") from exc

    for value in (lat, lng):
        # bool is an int subclass; numeric strings are not coordinates either.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InvalidCoordinate(f"Coordinates must be real numbers, got {value!r}")

    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinate(f"Coordinates must be finite, got ({lat}, {lng})")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"Latitude {lat} outside [-90, 90]")
    if not -180.0 <= lng <= 180.0:
        raise InvalidCoordinate(f"Longitude {lng} outside [-180, 180]")
    return location


def distance_km(origin: Coordinates, target: Coordinates) -> float:
    """Great-circle distance between two points using the Haversine formula."""

    validate_coordinates(origin)
    validate_coordinates(target)

    lat1, lon1 = math.radians(origin.latitude), math.radians(origin.longitude)
    lat2, lon2 = math.radians(target.latitude), math.radians(target.longitude)
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push ``a`` a hair past 1 for antipodal points.
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c

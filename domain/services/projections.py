from __future__ import annotations

import math

from domain.models import Coordinate, Projection

MERCATOR_MAP_WIDTH = 100.0
MERCATOR_MAP_HEIGHT = 100.0


def identity_projection(x: float, y: float) -> Coordinate:
    return x, y


def mercator_projection(longitude: float, latitude: float) -> Coordinate:
    x = (longitude + 180) * (MERCATOR_MAP_WIDTH / 360)
    lat_rad = latitude * math.pi / 180
    tangent = math.tan((math.pi / 4) + (lat_rad / 2))
    # The south pole projects to negative infinity.
    merc_n = math.log(tangent) if tangent > 0 else -math.inf
    y = (MERCATOR_MAP_HEIGHT / 2) - (MERCATOR_MAP_HEIGHT * merc_n / (2 * math.pi))
    # Flip so north stays up once the scale engine inverts y again.
    return x, MERCATOR_MAP_HEIGHT - y


PROJECTIONS: dict[str, Projection] = {
    "identity": identity_projection,
    "mercator": mercator_projection,
}


def resolve_projection(name: str | None) -> Projection:
    key = (name or "identity").strip().lower()
    projection = PROJECTIONS.get(key)
    if projection is None:
        known = ", ".join(sorted(PROJECTIONS))
        msg = f"Unknown projection {name!r}; expected one of: {known}"
        raise ValueError(msg)
    return projection

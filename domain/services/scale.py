from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from domain.models import BoundingRectangle, Coordinate, Padding, Projection, ScaleFunc
from domain.services.projections import identity_projection

logger = logging.getLogger(__name__)


def _ieee_divide(numerator: float, denominator: float) -> float:
    # Float division by zero yields inf/nan instead of raising.
    if denominator != 0:
        return numerator / denominator
    if numerator == 0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def bounding_rectangle(
    projection: Projection | None,
    coordinates: Sequence[Coordinate],
) -> BoundingRectangle:
    if not coordinates:
        msg = "Cannot compute a bounding rectangle without coordinates"
        raise ValueError(msg)
    project = projection or identity_projection
    first_x, first_y = coordinates[0]
    min_x, min_y = project(first_x, first_y)
    max_x, max_y = min_x, min_y
    for raw_x, raw_y in coordinates[1:]:
        x, y = project(raw_x, raw_y)
        min_x = min(min_x, x)
        max_x = max(max_x, x)
        min_y = min(min_y, y)
        max_y = max(max_y, y)
    return BoundingRectangle(min_x, min_y, max_x, max_y)


def compute_transform(
    width: float,
    height: float,
    padding: Padding,
    coordinates: Sequence[Coordinate],
    projection: Projection | None = None,
) -> ScaleFunc:
    project = projection or identity_projection
    w = width - padding.left - padding.right
    h = height - padding.top - padding.bottom

    if not coordinates:
        logger.debug("No coordinates to scale; using projection only")

        def _project_only(x: float, y: float) -> Coordinate:
            return project(x, y)

        return _project_only

    if len(coordinates) == 1:
        center = (w / 2, h / 2)
        logger.debug("Single coordinate; centering at %s", center)

        def _center(x: float, y: float) -> Coordinate:
            return center

        return _center

    bounds = bounding_rectangle(project, coordinates)
    x_res = _ieee_divide(bounds.width, w)
    y_res = _ieee_divide(bounds.height, h)
    res = max(x_res, y_res)
    if res == 0:
        logger.warning(
            "Degenerate bounding rectangle for %d coordinates at (%f, %f)",
            len(coordinates),
            bounds.min_x,
            bounds.min_y,
        )
    logger.debug(
        "Scaling %d coordinates from %s with resolution %f",
        len(coordinates),
        bounds,
        res,
    )

    min_x, max_y = bounds.min_x, bounds.max_y
    left, top = padding.left, padding.top

    def _scale(x: float, y: float) -> Coordinate:
        px, py = project(x, y)
        return _ieee_divide(px - min_x, res) + left, _ieee_divide(max_y - py, res) + top

    return _scale

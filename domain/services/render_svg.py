from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import orjson

from domain.models import (
    DEFAULT_USED_PROPERTIES,
    Coordinate,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    PropertyFilter,
    ScaleFunc,
)

POINT_RADIUS = 1


def format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


def format_attributes(attributes: Mapping[str, str]) -> str:
    return "".join(f' {key}="{attributes[key]}"' for key in sorted(attributes))


def format_property_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return orjson.dumps(value).decode("utf-8")


def default_property_filter(key: str) -> bool:
    return key in DEFAULT_USED_PROPERTIES


def attributes_from_properties(
    use_property: PropertyFilter,
    properties: Mapping[str, Any] | None,
) -> str:
    attributes = {
        key: format_property_value(value)
        for key, value in (properties or {}).items()
        if use_property(key)
    }
    return format_attributes(attributes)


def collect_coordinates(geometry: Geometry | None) -> list[Coordinate]:
    return list(iter_coordinates(geometry))


def iter_coordinates(geometry: Geometry | None) -> Iterator[Coordinate]:
    if isinstance(geometry, Point):
        yield geometry.coordinates
    elif isinstance(geometry, (MultiPoint, LineString)):
        yield from geometry.coordinates
    elif isinstance(geometry, (MultiLineString, Polygon)):
        for line in geometry.coordinates:
            yield from line
    elif isinstance(geometry, MultiPolygon):
        for polygon in geometry.coordinates:
            for ring in polygon:
                yield from ring
    elif isinstance(geometry, GeometryCollection):
        for child in geometry.geometries:
            yield from iter_coordinates(child)


def render_geometry(scale: ScaleFunc, geometry: Geometry | None, attributes: str = "") -> str:
    return "".join(iter_geometry_markup(scale, geometry, attributes))


def iter_geometry_markup(
    scale: ScaleFunc,
    geometry: Geometry | None,
    attributes: str = "",
) -> Iterator[str]:
    if isinstance(geometry, Point):
        yield _circle(scale, geometry.coordinates, attributes)
    elif isinstance(geometry, MultiPoint):
        for coordinate in geometry.coordinates:
            yield _circle(scale, coordinate, attributes)
    elif isinstance(geometry, LineString):
        yield _line_path(scale, geometry.coordinates, attributes)
    elif isinstance(geometry, MultiLineString):
        for line in geometry.coordinates:
            yield _line_path(scale, line, attributes)
    elif isinstance(geometry, Polygon):
        yield _polygon_path(scale, geometry.coordinates, attributes)
    elif isinstance(geometry, MultiPolygon):
        for polygon in geometry.coordinates:
            yield _polygon_path(scale, polygon, attributes)
    elif isinstance(geometry, GeometryCollection):
        for child in geometry.geometries:
            yield from iter_geometry_markup(scale, child, attributes)


def _circle(scale: ScaleFunc, coordinate: Coordinate, attributes: str) -> str:
    x, y = scale(*coordinate)
    return (
        f'<circle cx="{format_number(x)}" cy="{format_number(y)}" '
        f'r="{POINT_RADIUS}"{attributes}/>'
    )


def _sub_path(scale: ScaleFunc, coordinates: Iterable[Coordinate]) -> str:
    pairs = []
    for coordinate in coordinates:
        x, y = scale(*coordinate)
        pairs.append(f"{format_number(x)} {format_number(y)}")
    return "M" + ",".join(pairs)


def _line_path(scale: ScaleFunc, coordinates: Iterable[Coordinate], attributes: str) -> str:
    return f'<path d="{_sub_path(scale, coordinates)}"{attributes}/>'


def _polygon_path(
    scale: ScaleFunc,
    rings: Iterable[Iterable[Coordinate]],
    attributes: str,
) -> str:
    # Holes share the outer ring's element so the fill rule can cut them out.
    path = " ".join(_sub_path(scale, ring) for ring in rings)
    return f'<path d="{path} Z"{attributes}/>'

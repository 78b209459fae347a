from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import orjson
from pydantic import TypeAdapter, ValidationError

from domain.errors import InvalidGeoJsonError
from domain.models import (
    GEOMETRY_TYPES,
    Feature,
    FeatureCollection,
    GeoJsonObject,
    Geometry,
)

_GEOMETRY_ADAPTER: TypeAdapter[Geometry] = TypeAdapter(Geometry)


def parse_geometry(text: str | bytes) -> Geometry:
    try:
        return _GEOMETRY_ADAPTER.validate_python(orjson.loads(text))
    except (orjson.JSONDecodeError, ValidationError) as exc:
        raise InvalidGeoJsonError("geometry", _as_text(text)) from exc


def parse_feature(text: str | bytes) -> Feature:
    try:
        return Feature.model_validate(orjson.loads(text))
    except (orjson.JSONDecodeError, ValidationError) as exc:
        raise InvalidGeoJsonError("feature", _as_text(text)) from exc


def parse_feature_collection(text: str | bytes) -> FeatureCollection:
    try:
        return FeatureCollection.model_validate(orjson.loads(text))
    except (orjson.JSONDecodeError, ValidationError) as exc:
        raise InvalidGeoJsonError("feature collection", _as_text(text)) from exc


def parse_geojson_object(payload: Mapping[str, Any]) -> GeoJsonObject:
    kind = payload.get("type")
    try:
        if kind == "FeatureCollection":
            return FeatureCollection.model_validate(payload)
        if kind == "Feature":
            return Feature.model_validate(payload)
        if kind in GEOMETRY_TYPES:
            return _GEOMETRY_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise InvalidGeoJsonError(_kind_label(kind), _dump(payload)) from exc
    raise InvalidGeoJsonError("geojson object", _dump(payload))


def _kind_label(kind: object) -> str:
    if kind == "FeatureCollection":
        return "feature collection"
    if kind == "Feature":
        return "feature"
    return "geometry"


def _as_text(text: str | bytes) -> str:
    return text.decode("utf-8", errors="replace") if isinstance(text, bytes) else text


def _dump(payload: Mapping[str, Any]) -> str:
    try:
        return orjson.dumps(payload).decode("utf-8")
    except TypeError:
        return repr(payload)

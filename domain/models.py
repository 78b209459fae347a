from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Literal, NamedTuple, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

Coordinate = tuple[float, float]
Projection = Callable[[float, float], Coordinate]
ScaleFunc = Callable[[float, float], Coordinate]
PropertyFilter = Callable[[str], bool]

DEFAULT_USED_PROPERTIES: frozenset[str] = frozenset({"class"})


def _to_coordinate(value: Any) -> Any:
    # GeoJSON positions may carry altitude; only x and y are drawn.
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if len(value) < 2:
            msg = f"Position needs at least two values, got {len(value)}"
            raise ValueError(msg)
        return (value[0], value[1])
    return value


Position = Annotated[tuple[float, float], BeforeValidator(_to_coordinate)]
Ring = list[Position]


class _GeometryBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class Point(_GeometryBase):
    type: Literal["Point"] = "Point"
    coordinates: Position


class MultiPoint(_GeometryBase):
    type: Literal["MultiPoint"] = "MultiPoint"
    coordinates: list[Position] = Field(default_factory=list)


class LineString(_GeometryBase):
    type: Literal["LineString"] = "LineString"
    coordinates: list[Position] = Field(default_factory=list)


class MultiLineString(_GeometryBase):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: list[list[Position]] = Field(default_factory=list)


class Polygon(_GeometryBase):
    type: Literal["Polygon"] = "Polygon"
    coordinates: list[Ring] = Field(default_factory=list)


class MultiPolygon(_GeometryBase):
    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: list[list[Ring]] = Field(default_factory=list)


class GeometryCollection(_GeometryBase):
    type: Literal["GeometryCollection"] = "GeometryCollection"
    geometries: list[Geometry] = Field(default_factory=list)


Geometry = Annotated[
    Union[
        Point,
        MultiPoint,
        LineString,
        MultiLineString,
        Polygon,
        MultiPolygon,
        GeometryCollection,
    ],
    Field(discriminator="type"),
]

GeometryCollection.model_rebuild()

GEOMETRY_TYPES: frozenset[str] = frozenset(
    {
        "Point",
        "MultiPoint",
        "LineString",
        "MultiLineString",
        "Polygon",
        "MultiPolygon",
        "GeometryCollection",
    }
)


class Feature(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["Feature"] = "Feature"
    geometry: Geometry | None = None
    properties: dict[str, Any] | None = None


class FeatureCollection(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["FeatureCollection"] = "FeatureCollection"
    features: list[Feature] = Field(default_factory=list)


GeoJsonObject = Union[
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
    Feature,
    FeatureCollection,
]


@dataclass(frozen=True)
class Padding:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


class BoundingRectangle(NamedTuple):
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

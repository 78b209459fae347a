from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from domain.models import (
    Coordinate,
    Feature,
    FeatureCollection,
    GeoJsonObject,
    Geometry,
    Padding,
    Projection,
    PropertyFilter,
)
from domain.services.parse_geojson import (
    parse_feature,
    parse_feature_collection,
    parse_geometry,
)
from domain.services.projections import identity_projection
from domain.services.render_svg import (
    attributes_from_properties,
    default_property_filter,
    format_attributes,
    format_number,
    iter_coordinates,
    iter_geometry_markup,
)
from domain.services.scale import bounding_rectangle, compute_transform

logger = logging.getLogger(__name__)


def _whitelist(names: Iterable[str]) -> PropertyFilter:
    allowed = frozenset(names)

    def _use(key: str) -> bool:
        return key in allowed

    return _use


@dataclass(frozen=True)
class DrawOptions:
    padding: Padding = Padding()
    attributes: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    use_property: PropertyFilter = default_property_filter

    def with_attribute(self, key: str, value: str) -> DrawOptions:
        return self.with_attributes({key: value})

    def with_attributes(self, attributes: Mapping[str, str]) -> DrawOptions:
        merged = dict(self.attributes)
        merged.update(attributes)
        return replace(self, attributes=MappingProxyType(merged))

    def with_padding(self, padding: Padding) -> DrawOptions:
        return replace(self, padding=padding)

    def use_properties(self, names: Iterable[str]) -> DrawOptions:
        return replace(self, use_property=_whitelist(names))


class GeoJsonDrawing:
    def __init__(self) -> None:
        self.geometries: list[Geometry] = []
        self.features: list[Feature] = []
        self.feature_collections: list[FeatureCollection] = []

    def add_geometry(self, text: str | bytes) -> None:
        self.append_geometry(parse_geometry(text))

    def append_geometry(self, geometry: Geometry) -> None:
        self.geometries.append(geometry)

    def add_feature(self, text: str | bytes) -> None:
        self.append_feature(parse_feature(text))

    def append_feature(self, feature: Feature) -> None:
        self.features.append(feature)

    def add_feature_collection(self, text: str | bytes) -> None:
        self.append_feature_collection(parse_feature_collection(text))

    def append_feature_collection(self, collection: FeatureCollection) -> None:
        self.feature_collections.append(collection)

    def append(self, item: GeoJsonObject) -> None:
        if isinstance(item, FeatureCollection):
            self.append_feature_collection(item)
        elif isinstance(item, Feature):
            self.append_feature(item)
        else:
            self.append_geometry(item)

    def is_empty(self) -> bool:
        return not (self.geometries or self.features or self.feature_collections)

    def points(self) -> list[Coordinate]:
        points: list[Coordinate] = []
        for geometry, _properties in self._iter_drawables():
            points.extend(iter_coordinates(geometry))
        return points

    def draw(self, width: float, height: float, options: DrawOptions | None = None) -> str:
        return self.draw_with_projection(width, height, identity_projection, options)

    def draw_with_projection(
        self,
        width: float,
        height: float,
        projection: Projection,
        options: DrawOptions | None = None,
    ) -> str:
        opts = options or DrawOptions()
        points = self.points()
        scale = compute_transform(width, height, opts.padding, points, projection)

        content: list[str] = []
        for geometry, properties in self._iter_drawables():
            attributes = ""
            if properties is not None:
                attributes = attributes_from_properties(opts.use_property, properties)
            content.extend(iter_geometry_markup(scale, geometry, attributes))

        logger.debug(
            "Drew %d elements from %d coordinates on %sx%s canvas",
            len(content),
            len(points),
            width,
            height,
        )
        root_attributes = format_attributes(opts.attributes)
        return (
            f'<svg width="{format_number(width)}" height="{format_number(height)}"'
            f'{root_attributes}>{"".join(content)}</svg>'
        )

    def height_for_width(self, width: float, projection: Projection | None = None) -> float:
        bounds = bounding_rectangle(projection, self.points())
        if bounds.width == 0:
            msg = "Cannot derive a height from a bounding rectangle with zero width"
            raise ValueError(msg)
        ratio = bounds.height / bounds.width
        if not math.isfinite(ratio):
            msg = f"Cannot derive a finite height from bounding rectangle {bounds}"
            raise ValueError(msg)
        return float(math.floor((width * ratio) + 0.5))

    def _iter_drawables(self) -> Iterator[tuple[Geometry | None, Mapping[str, object] | None]]:
        # Plain geometries first, then features, then collection members.
        for geometry in self.geometries:
            yield geometry, None
        for feature in self.features:
            yield feature.geometry, feature.properties or {}
        for collection in self.feature_collections:
            for feature in collection.features:
                yield feature.geometry, feature.properties or {}


def draw_geojson(
    items: Iterable[GeoJsonObject],
    width: float,
    height: float,
    options: DrawOptions | None = None,
    projection: Projection | None = None,
) -> str:
    drawing = GeoJsonDrawing()
    for item in items:
        drawing.append(item)
    return drawing.draw_with_projection(width, height, projection or identity_projection, options)

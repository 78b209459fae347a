from __future__ import annotations

import math

import pytest

from domain.models import (
    Coordinate,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Padding,
    Point,
    Polygon,
)
from domain.services.render_svg import (
    attributes_from_properties,
    collect_coordinates,
    default_property_filter,
    format_attributes,
    format_number,
    format_property_value,
    render_geometry,
)
from domain.services.scale import compute_transform


def _identity(x: float, y: float) -> Coordinate:
    return x, y


def _fitted(geometry: object, width: float = 400, height: float = 400) -> str:
    scale = compute_transform(width, height, Padding(), collect_coordinates(geometry))
    return render_geometry(scale, geometry)


def test_format_number_uses_six_fixed_decimals() -> None:
    assert format_number(0) == "0.000000"
    assert format_number(291.63879598662206) == "291.638796"
    assert format_number(1e21) == "1000000000000000000000.000000"
    assert format_number(-0.5) == "-0.500000"


def test_format_number_spells_non_finite_values() -> None:
    assert format_number(math.nan) == "NaN"
    assert format_number(math.inf) == "+Inf"
    assert format_number(-math.inf) == "-Inf"


def test_point_renders_circle_with_attributes() -> None:
    markup = render_geometry(_identity, Point(coordinates=(1.5, 2)), ' class="a"')

    assert markup == '<circle cx="1.500000" cy="2.000000" r="1" class="a"/>'


def test_single_point_is_centered() -> None:
    assert _fitted(Point(coordinates=(10.5, 20))) == (
        '<circle cx="200.000000" cy="200.000000" r="1"/>'
    )


def test_multipoint_repeats_attributes_for_each_circle() -> None:
    geometry = MultiPoint(coordinates=[(10.5, 20), (20.5, 62)])
    scale = compute_transform(400, 400, Padding(), collect_coordinates(geometry))

    assert render_geometry(scale, geometry, ' id="x"') == (
        '<circle cx="0.000000" cy="400.000000" r="1" id="x"/>'
        '<circle cx="95.238095" cy="0.000000" r="1" id="x"/>'
    )


def test_linestring_path() -> None:
    geometry = LineString(coordinates=[(10.4, 20.5), (40.3, 42.3)])

    assert _fitted(geometry) == '<path d="M0.000000 291.638796,400.000000 0.000000"/>'


def test_empty_linestring_renders_bare_move() -> None:
    assert render_geometry(_identity, LineString(coordinates=[])) == '<path d="M"/>'


def test_multilinestring_renders_one_path_per_line() -> None:
    geometry = MultiLineString(
        coordinates=[[(10.4, 20.5), (40.3, 42.3)], [(11.4, 21.5), (41.3, 41.3)]]
    )

    assert _fitted(geometry) == (
        '<path d="M0.000000 282.200647,387.055016 0.000000"/>'
        '<path d="M12.944984 269.255663,400.000000 12.944984"/>'
    )


def test_polygon_without_holes() -> None:
    geometry = Polygon(coordinates=[[(10.4, 20.5), (40.3, 42.3), (20.2, 10.2), (10.4, 20.5)]])

    assert _fitted(geometry) == (
        '<path d="M0.000000 271.651090,372.585670 0.000000,'
        '122.118380 400.000000,0.000000 271.651090 Z"/>'
    )


def test_polygon_with_hole_is_one_compound_path() -> None:
    geometry = Polygon(
        coordinates=[
            [(100.0, 0.0), (101.0, 0.0), (101.0, 1.0), (100.0, 1.0), (100.0, 0.0)],
            [(100.2, 0.2), (100.8, 0.2), (100.8, 0.8), (100.2, 0.8), (100.2, 0.2)],
        ]
    )
    markup = _fitted(geometry)

    assert markup == (
        '<path d="M0.000000 400.000000,400.000000 400.000000,400.000000 0.000000,'
        "0.000000 0.000000,0.000000 400.000000 "
        "M80.000000 320.000000,320.000000 320.000000,320.000000 80.000000,"
        '80.000000 80.000000,80.000000 320.000000 Z"/>'
    )
    assert markup.count("M") == 2
    assert markup.count(" Z") == 1


def test_polygon_ring_has_one_pair_per_point_and_no_trailing_comma() -> None:
    ring = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)]
    markup = render_geometry(_identity, Polygon(coordinates=[ring]))
    path = markup.split('d="', 1)[1].split('"', 1)[0]

    assert path.startswith("M")
    assert path.endswith(" Z")
    assert len(path[1:-2].split(",")) == len(ring)
    assert ", Z" not in path


def test_multipolygon_renders_one_closed_path_per_polygon() -> None:
    geometry = MultiPolygon(
        coordinates=[
            [[(10.4, 20.5), (40.3, 42.3), (20.2, 10.2), (10.4, 20.5)]],
            [
                [(100.0, 0.0), (101.0, 0.0), (101.0, 1.0), (100.0, 1.0), (100.0, 0.0)],
                [(100.2, 0.2), (100.8, 0.2), (100.8, 0.8), (100.2, 0.8), (100.2, 0.2)],
            ],
        ]
    )

    assert _fitted(geometry) == (
        '<path d="M0.000000 96.247241,132.008830 0.000000,'
        '43.267108 141.721854,0.000000 96.247241 Z"/>'
        '<path d="M395.584989 186.754967,400.000000 186.754967,400.000000 182.339956,'
        "395.584989 182.339956,395.584989 186.754967 "
        "M396.467991 185.871965,399.116998 185.871965,399.116998 183.222958,"
        '396.467991 183.222958,396.467991 185.871965 Z"/>'
    )


def test_geometry_collection_recurses_with_shared_attributes() -> None:
    geometry = GeometryCollection(
        geometries=[
            LineString(coordinates=[(10.4, 20.5), (40.3, 42.3)]),
            GeometryCollection(geometries=[Point(coordinates=(10.5, 20))]),
        ]
    )
    scale = compute_transform(400, 400, Padding(), collect_coordinates(geometry))

    assert render_geometry(scale, geometry, ' class="c"') == (
        '<path d="M0.000000 291.638796,400.000000 0.000000" class="c"/>'
        '<circle cx="1.337793" cy="298.327759" r="1" class="c"/>'
    )


def test_missing_geometry_renders_nothing() -> None:
    assert render_geometry(_identity, None) == ""
    assert collect_coordinates(None) == []


def test_collect_coordinates_follows_structure_order() -> None:
    geometry = GeometryCollection(
        geometries=[
            Point(coordinates=(1, 1)),
            MultiPolygon(coordinates=[[[(2, 2), (3, 3)], [(4, 4)]], [[(5, 5)]]]),
            MultiLineString(coordinates=[[(6, 6)], [(7, 7), (8, 8)]]),
        ]
    )

    assert collect_coordinates(geometry) == [
        (1.0, 1.0),
        (2.0, 2.0),
        (3.0, 3.0),
        (4.0, 4.0),
        (5.0, 5.0),
        (6.0, 6.0),
        (7.0, 7.0),
        (8.0, 8.0),
    ]


def test_format_attributes_is_sorted_regardless_of_insertion_order() -> None:
    assert format_attributes({"id": "the_id", "class": "a_class"}) == (
        ' class="a_class" id="the_id"'
    )
    assert format_attributes({"class": "a_class", "id": "the_id"}) == (
        ' class="a_class" id="the_id"'
    )
    assert format_attributes({}) == ""


def test_attribute_values_are_not_escaped() -> None:
    assert format_attributes({"title": 'a"b<c'}) == ' title="a"b<c"'


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("stroke:1", "stroke:1"),
        (True, "true"),
        (False, "false"),
        (3, "3"),
        (2.0, "2"),
        (1e6, "1000000"),
        (1.5, "1.5"),
        (None, ""),
        ([1, "a"], '[1,"a"]'),
        ({"k": 1}, '{"k":1}'),
    ],
)
def test_format_property_value(value: object, expected: str) -> None:
    assert format_property_value(value) == expected


def test_attributes_from_properties_applies_filter() -> None:
    properties = {"class": "road", "style": "stroke:1", "name": "A1"}

    assert attributes_from_properties(default_property_filter, properties) == ' class="road"'
    assert attributes_from_properties(lambda key: key != "class", properties) == (
        ' name="A1" style="stroke:1"'
    )
    assert attributes_from_properties(default_property_filter, None) == ""

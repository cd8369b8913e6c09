import pytest
import shapely
from shapely import wkt
from shapely.geometry import LinearRing, LineString, MultiPolygon, Polygon, box

from pcbmill.geometry_convert import from_geos, multi_polygon_from_geos, to_geos


def test_polygon_with_holes_direction_after_difference():
    shape = MultiPolygon([box(0, 0, 10, 10)]).difference(box(3, 3, 7, 7))
    coords = multi_polygon_from_geos(shapely.normalize(shape))
    outer, inners = coords[0]
    assert outer[1] == (0, 10)
    assert inners[0][1] == (7, 3)


def test_geos_polygon_with_holes_direction():
    geo = wkt.loads("MULTIPOLYGON(((0 0,0 10,10 10,10 0,0 0),(3 3,7 3,7 7,3 7,3 3)))")
    outer, inners = from_geos(shapely.normalize(geo))[0]
    assert outer[1] == (0, 10)
    assert inners[0][1] == (7, 3)

    geo = wkt.loads("MULTIPOLYGON(((0 0,10 0,10 10,0 10,0 0),(3 3,3 7,7 7,7 3,3 3)))")
    outer, inners = from_geos(shapely.normalize(geo))[0]
    assert outer[1] == (0, 10)
    assert inners[0][1] == (7, 3)


def test_roundtrip_multi_linestring():
    mls = [[(0, 0), (1, 1)], [(2, 2), (3, 3)]]
    assert from_geos(to_geos(mls)) == mls


def test_roundtrip_linestring():
    ls = [(0, 0), (1, 1)]
    assert from_geos(to_geos(ls)) == ls


def test_roundtrip_polygon():
    poly = ([(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)], [])
    back = to_geos(from_geos(to_geos(poly)))
    assert back.equals(Polygon(poly[0]))
    assert from_geos(to_geos(poly)) == poly


def test_roundtrip_ring():
    ring = [(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)]
    geo = to_geos(ring)
    assert isinstance(geo, LinearRing)
    assert from_geos(geo) == ring


def test_open_linestring_is_not_ring():
    points = [(0, 0), (1, 0), (1, 1)]
    geo = to_geos(points)
    assert isinstance(geo, LineString)
    assert not isinstance(geo, LinearRing)
    assert list(geo.coords) == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
    assert geo.is_closed is False
    assert geo.length == pytest.approx(2.0)


def test_roundtrip_multipolygon_with_hole():
    mpoly = [
        (
            [(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)],
            [[(3, 3), (7, 3), (7, 7), (3, 7), (3, 3)]],
        )
    ]
    assert from_geos(to_geos(mpoly)) == mpoly


def test_convert_multi_polygon_exception():
    ls = [(0, 0), (1, 1)]
    with pytest.raises(ValueError):
        multi_polygon_from_geos(to_geos(ls))


def test_single_polygon_becomes_multi():
    result = multi_polygon_from_geos(box(0, 0, 1, 1))
    assert len(result) == 1
    assert Polygon(result[0][0]).area == pytest.approx(1.0)


def test_empty_list_is_empty_multipolygon():
    geo = to_geos([])
    assert isinstance(geo, MultiPolygon)
    assert geo.is_empty


def test_unsupported_input_raises():
    with pytest.raises(TypeError):
        to_geos(42)
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import GeometryCollection, LineString, Point, Polygon

from geolens import Feature, MalformedGeometryError
from geolens.models.feature import to_scalar, validate_geometry


def test_valid_geometries_pass():
    validate_geometry({"type": "Point", "coordinates": [1, 2]})
    validate_geometry({"type": "LineString", "coordinates": [[0, 0], [1, 1]]})
    validate_geometry({"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]})
    validate_geometry({"type": "MultiPolygon", "coordinates": [[[[0, 0, 5], [1, 0, 5], [1, 1, 5], [0, 0, 5]]]]})


def test_unclosed_ring_is_rejected():
    geom = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1]]]}
    with pytest.raises(MalformedGeometryError, match="não fechado"):
        validate_geometry(geom, index=4)


def test_short_ring_is_rejected():
    with pytest.raises(MalformedGeometryError, match="4 posições"):
        validate_geometry({"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [0, 0]]]})


def test_inconsistent_arity_is_rejected():
    geom = {"type": "MultiPolygon", "coordinates": [
        [[[0, 0], [1, 0], [1, 1], [0, 0]]],
        [[[5, 5, 1], [6, 5, 1], [6, 6, 1], [5, 5, 1]]],
    ]}
    with pytest.raises(MalformedGeometryError, match="inconsistente"):
        validate_geometry(geom)


@pytest.mark.parametrize("geom", [
    {"type": "GeometryCollection", "geometries": []},
    {"type": "Circle", "coordinates": [0, 0]},
    {"type": "Point"},
    {"type": "Point", "coordinates": [1]},
    {"type": "Point", "coordinates": [1, "2"]},
    {"type": "Point", "coordinates": [float("nan"), 1]},
    {"type": "LineString", "coordinates": [[0, 0], [float("inf"), 5]]},
    {"type": "LineString", "coordinates": [[0, 0]]},
    {"type": "Polygon", "coordinates": []},
    None,
])
def test_invalid_geometries(geom):
    with pytest.raises(MalformedGeometryError):
        validate_geometry(geom)


def test_error_carries_record_index():
    with pytest.raises(MalformedGeometryError) as info:
        validate_geometry({"type": "Point", "coordinates": [True, 1]}, index=7)
    assert info.value.index == 7
    assert "registro 7" in str(info.value)


def test_from_geojson_builds_shapely_geometry():
    f = Feature.from_geojson({
        "type": "Feature",
        "id": 12,
        "properties": {"name": "x"},
        "geometry": {"type": "LineString", "coordinates": [[0, 0], [2, 1]]},
    })
    assert isinstance(f.geometry, LineString)
    assert f.id == 12
    assert f.bounds.as_tuple() == (0.0, 0.0, 2.0, 1.0)


def test_from_geojson_requires_feature_type():
    with pytest.raises(MalformedGeometryError):
        Feature.from_geojson({"type": "Point", "coordinates": [0, 0]}, index=0)


def test_from_geojson_null_properties_become_empty():
    f = Feature.from_geojson({
        "type": "Feature",
        "properties": None,
        "geometry": {"type": "Point", "coordinates": [0, 0]},
    })
    assert dict(f.properties) == {}
    assert f.id is None


def test_properties_are_read_only():
    f = Feature(Point(0, 0), {"a": 1})
    with pytest.raises(TypeError):
        f.properties["a"] = 2


def test_feature_is_frozen():
    f = Feature(Point(0, 0))
    with pytest.raises(AttributeError):
        f.id = "novo"


def test_feature_rejects_empty_and_unsupported_geometry():
    with pytest.raises(MalformedGeometryError):
        Feature(Polygon())
    with pytest.raises(MalformedGeometryError):
        Feature(GeometryCollection([Point(0, 0)]))


def test_from_record_requires_geometry():
    with pytest.raises(MalformedGeometryError, match="sem geometria"):
        Feature.from_record(None, {"a": 1}, id=3, index=3)


def test_from_record_converts_scalars():
    f = Feature.from_record(Point(1, 1), {"n": np.int32(5), "x": np.nan, "d": pd.Timestamp("2019-01-01")})
    assert f.properties == {"n": 5, "x": None, "d": "2019-01-01T00:00:00"}
    assert type(f.properties["n"]) is int


def test_to_scalar_handles_nat_and_plain_values():
    assert to_scalar(pd.NaT) is None
    assert to_scalar("texto") == "texto"
    assert to_scalar(np.bool_(True)) is True
    assert to_scalar(2.5) == 2.5


def test_to_geojson_omits_missing_id():
    f = Feature(Point(1, 2), {"a": 1})
    out = f.to_geojson()
    assert "id" not in out
    assert out["geometry"]["type"] == "Point"
    assert out["properties"] == {"a": 1}


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_coordinates_are_rejected(value):
    geom = {"type": "LineString", "coordinates": [[0, 0], [value, 5]]}
    with pytest.raises(MalformedGeometryError, match="2 ou 3 números"):
        validate_geometry(geom, index=2)


def test_large_integer_coordinates_are_accepted():
    validate_geometry({"type": "Point", "coordinates": [10**20, 1]})


@pytest.mark.parametrize("feature_id", [{"a": 1}, [1, 2], True])
def test_from_geojson_rejects_non_scalar_id(feature_id):
    with pytest.raises(MalformedGeometryError, match="'id'") as info:
        Feature.from_geojson({
            "type": "Feature",
            "id": feature_id,
            "properties": {},
            "geometry": {"type": "Point", "coordinates": [0, 0]},
        }, index=5)
    assert info.value.index == 5

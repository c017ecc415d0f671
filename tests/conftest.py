import json
import uuid

import fsspec
import geopandas as gpd
import pytest
from shapely.geometry import Point, Polygon

from geolens import Feature, FeatureCollection

TRACT_BASE = "tl_2019_36_tract"

ISO_XML = """<?xml version="1.0" encoding="UTF-8"?>
<gmi:MI_Metadata xmlns:gmi="http://www.isotc211.org/2005/gmi">
  <title>2019 TIGER/Line Shapefile, Census Tracts</title>
</gmi:MI_Metadata>
"""


def square(x0, y0, size=0.5):
    return Polygon([
        (x0, y0),
        (x0 + size, y0),
        (x0 + size, y0 + size),
        (x0, y0 + size),
        (x0, y0),
    ])


@pytest.fixture
def tract_gdf():
    return gpd.GeoDataFrame(
        {
            "NAMELSAD": ["Census Tract 1", "Census Tract 2", "Census Tract 3"],
            "GEOID": ["36061000100", "36061000200", "36061000300"],
            "ALAND": [1000, 2500, 4000],
        },
        geometry=[
            square(-74.0, 40.5),
            square(-73.5, 40.5),
            square(-74.0, 41.0),
        ],
        crs="EPSG:4269",
    )


@pytest.fixture
def tract_dir(tmp_path, tract_gdf):
    """Shapefile com 3 polígonos (.shp, .shx, .dbf, .prj, .cpg) e um XML ISO."""
    d = tmp_path / "tracts"
    d.mkdir()
    tract_gdf.to_file(d / f"{TRACT_BASE}.shp")
    (d / f"{TRACT_BASE}.cpg").write_text("UTF-8", encoding="ascii")
    (d / f"{TRACT_BASE}.shp.ea.iso.xml").write_text(ISO_XML, encoding="utf-8")
    return d


@pytest.fixture
def geojson_doc():
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": "bk",
                "properties": {"BoroName": "Brooklyn", "BoroCode": 3, "Shape_Area": 1.9e9, "note": None},
                "geometry": {
                    "type": "Polygon",
                    "coordinates": [[[-74.0, 40.5], [-73.5, 40.5], [-73.5, 41.0], [-74.0, 40.5]]],
                },
            },
            {
                "type": "Feature",
                "id": "qn",
                "properties": {"BoroName": "Queens", "BoroCode": 4},
                "geometry": {
                    "type": "MultiPolygon",
                    "coordinates": [
                        [[[-73.5, 40.5], [-73.0, 40.5], [-73.0, 41.0], [-73.5, 40.5]]],
                        [[[-72.5, 41.0], [-72.0, 41.0], [-72.0, 41.5], [-72.5, 41.0]]],
                    ],
                },
            },
            {
                "type": "Feature",
                "properties": {"BoroName": "Liberty Island"},
                "geometry": {"type": "Point", "coordinates": [-74.04, 40.69]},
            },
        ],
    }


@pytest.fixture
def geojson_path(tmp_path, geojson_doc):
    path = tmp_path / "boroughs.geojson"
    path.write_text(json.dumps(geojson_doc), encoding="utf-8")
    return path


@pytest.fixture
def memory_uri():
    """Publica bytes num sistema de arquivos fsspec em memória e devolve o URI."""
    fs = fsspec.filesystem("memory")
    written = []

    def publish(data, name="doc.geojson"):
        path = f"/geolens-tests/{uuid.uuid4().hex}/{name}"
        fs.pipe(path, data if isinstance(data, bytes) else data.encode("utf-8"))
        written.append(path)
        return f"memory://{path.lstrip('/')}"

    yield publish

    for path in written:
        fs.rm(path)


@pytest.fixture
def point_collection():
    return FeatureCollection([Feature(Point(-73.25, 40.75), {"name": "only"}, id=1)])


@pytest.fixture
def polygon_collection():
    return FeatureCollection(
        [
            Feature(square(-74.0, 40.5), {"NAMELSAD": "Census Tract 1", "GEOID": "1"}, id=0),
            Feature(square(-73.5, 40.5), {"NAMELSAD": "Census Tract 2"}, id=1),
            Feature(square(-74.0, 41.0), {"GEOID": "3"}, id=2),
        ],
        crs="EPSG:4269",
        source_format="shapefile",
    )

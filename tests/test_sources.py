import json

import geopandas as gpd
import pytest

from geolens import (
    CachingReader,
    GeoJSONSource,
    ShapefileSource,
    SourceUnavailableError,
    open_source,
    read,
)
from geolens.io import DatasetSource

from conftest import TRACT_BASE, square


def test_directory_is_shapefile(tract_dir):
    source = open_source(tract_dir)
    assert isinstance(source, ShapefileSource)
    assert isinstance(source, DatasetSource)
    assert source.read().source_format == "shapefile"


def test_shp_file_is_shapefile(tract_dir):
    assert isinstance(open_source(tract_dir / f"{TRACT_BASE}.shp"), ShapefileSource)


def test_geojson_file_and_urls_are_geojson(geojson_path):
    assert isinstance(open_source(geojson_path), GeoJSONSource)
    assert isinstance(open_source("https://exemplo.org/x.json"), GeoJSONSource)
    assert isinstance(open_source("s3://bucket/x.shp"), GeoJSONSource)


def test_read_dispatches(tract_dir, geojson_path):
    assert len(read(tract_dir)) == 3
    assert len(read(geojson_path)) == 3


def test_shapefile_source_exposes_ancillary(tract_dir):
    meta = ShapefileSource(tract_dir).ancillary()
    assert f"{TRACT_BASE}.prj" in meta


def test_location_is_absolute(tract_dir):
    assert ShapefileSource(tract_dir).location == tract_dir.resolve().as_posix()
    assert GeoJSONSource("https://exemplo.org/x.json").location == "https://exemplo.org/x.json"


def test_caching_reader_reads_once(geojson_path):
    calls = []

    def counting_reader(location, **kwargs):
        calls.append(location)
        return read(location, **kwargs)

    cache = CachingReader(counting_reader)
    first = cache.read(geojson_path)
    second = cache(str(geojson_path))

    assert first is second
    assert len(calls) == 1
    assert geojson_path in cache
    assert len(cache) == 1


def test_caching_reader_invalidate(geojson_path, tract_dir):
    cache = CachingReader()
    cache.read(geojson_path)
    cache.read(tract_dir)

    cache.invalidate(geojson_path)
    assert geojson_path not in cache
    assert tract_dir in cache

    cache.invalidate()
    assert len(cache) == 0


def test_caching_reader_does_not_cache_errors(tmp_path, geojson_doc):
    path = tmp_path / "later.geojson"
    cache = CachingReader()

    with pytest.raises(SourceUnavailableError):
        cache.read(path)
    assert path not in cache

    path.write_text(json.dumps(geojson_doc), encoding="utf-8")
    assert len(cache.read(path)) == 3


def test_caching_reader_keys_on_read_options(tract_dir):
    gpd.GeoDataFrame(
        {"NAMELSAD": ["Census Tract 9"]},
        geometry=[square(-72.0, 40.0)],
        crs="EPSG:4269",
    ).to_file(tract_dir / "aaa_one.shp")

    cache = CachingReader()
    one = cache.read(tract_dir, base="aaa_one")
    tracts = cache.read(tract_dir, base=TRACT_BASE)

    assert len(one) == 1
    assert len(tracts) == 3
    assert cache.read(tract_dir, base="aaa_one") is one
    assert len(cache) == 2

    cache.invalidate(tract_dir)
    assert tract_dir not in cache
    assert len(cache) == 0


def test_network_options_are_ignored_for_shapefiles(tract_dir):
    source = open_source(tract_dir, timeout=5)
    assert isinstance(source, ShapefileSource)
    assert len(source.read()) == 3

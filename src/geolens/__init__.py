# geolens/__init__.py
from .errors import (
    DuplicateFeatureIdError,
    EmptyCollectionError,
    GeolensError,
    IncompleteDatasetError,
    InvalidStyleError,
    MalformedGeometryError,
    SourceUnavailableError,
    UnsupportedGeoJSONTypeError,
)
from .models import BoundingBox, Feature, FeatureCollection
from .io import (
    CachingReader,
    GeoJSONSource,
    ShapefileSource,
    SourceIO,
    ancillary_metadata,
    open_source,
    read,
    read_geojson,
    read_shapefile_bundle,
)
from .render import MapRenderer, RenderedView, StyleSpec, Viewport, render_svg

__all__ = [
    "BoundingBox",
    "CachingReader",
    "DuplicateFeatureIdError",
    "EmptyCollectionError",
    "Feature",
    "FeatureCollection",
    "GeoJSONSource",
    "GeolensError",
    "IncompleteDatasetError",
    "InvalidStyleError",
    "MalformedGeometryError",
    "MapRenderer",
    "RenderedView",
    "ShapefileSource",
    "SourceIO",
    "SourceUnavailableError",
    "StyleSpec",
    "UnsupportedGeoJSONTypeError",
    "Viewport",
    "ancillary_metadata",
    "open_source",
    "read",
    "read_geojson",
    "read_shapefile_bundle",
    "render_svg",
]

__version__ = "0.1.0"

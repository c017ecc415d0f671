"""
Camada de I/O do geolens.

Este pacote centraliza:
- acesso a origens locais e remotas (SourceIO)
- leitura de shapefiles e de documentos GeoJSON
- as variantes de origem e o cache opcional de leituras

Ele **não** contém lógica de renderização.
Apenas transforma **onde estão os dados** em uma FeatureCollection.
"""

from .source_io import SourceIO
from .shapefile import ancillary_metadata, find_bundle, read_shapefile_bundle
from .geojson import parse_geojson, read_geojson
from .sources import DatasetSource, GeoJSONSource, ShapefileSource, open_source, read
from .cache import CachingReader

__all__ = [
    "CachingReader",
    "DatasetSource",
    "GeoJSONSource",
    "ShapefileSource",
    "SourceIO",
    "ancillary_metadata",
    "find_bundle",
    "open_source",
    "parse_geojson",
    "read",
    "read_geojson",
    "read_shapefile_bundle",
]

"""
Origens de dataset.

Os dois caminhos de leitura (shapefile e GeoJSON) são variantes de um mesmo
protocolo, :class:`DatasetSource`: ambas sabem produzir uma
:class:`FeatureCollection`. Quem renderiza não precisa saber qual delas
gerou a coleção.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from geolens.io.geojson import read_geojson
from geolens.io.shapefile import ancillary_metadata, read_shapefile_bundle
from geolens.io.source_io import SourceIO, is_remote
from geolens.models import FeatureCollection


@runtime_checkable
class DatasetSource(Protocol):
    """Qualquer origem capaz de produzir uma FeatureCollection."""

    @property
    def location(self) -> str:
        ...

    def read(self) -> FeatureCollection:
        ...


@dataclass(frozen=True)
class ShapefileSource:
    """Shapefile em um diretório (ou apontado pelo seu ``.shp``)."""

    path: Path
    base: Optional[str] = None
    encoding: Optional[str] = None

    @property
    def location(self) -> str:
        return Path(self.path).expanduser().resolve().as_posix()

    def read(self) -> FeatureCollection:
        return read_shapefile_bundle(self.path, base=self.base, encoding=self.encoding)

    def ancillary(self) -> dict:
        return ancillary_metadata(self.path)


@dataclass(frozen=True)
class GeoJSONSource:
    """Documento GeoJSON local ou remoto."""

    source: str
    timeout: Optional[float] = None
    source_io: Optional[SourceIO] = None

    @property
    def location(self) -> str:
        if is_remote(self.source):
            return self.source
        return Path(self.source).expanduser().resolve().as_posix()

    def read(self) -> FeatureCollection:
        return read_geojson(self.source, timeout=self.timeout, source_io=self.source_io)


def open_source(location, **kwargs) -> DatasetSource:
    """
    Escolhe a variante de origem a partir da localização.

    Diretórios e arquivos ``.shp`` locais são shapefiles; todo o resto
    (arquivos ``.geojson``/``.json`` e URIs remotos) é GeoJSON.

    >>> open_source("https://exemplo.org/a.geojson")
    GeoJSONSource(source='https://exemplo.org/a.geojson', timeout=None, source_io=None)
    """
    location = os.fspath(location)

    if not is_remote(location):
        path = Path(location).expanduser()
        if path.is_dir() or path.suffix.lower() == ".shp":
            # shapefiles são lidos só do disco local: opções de rede não se aplicam
            kwargs.pop("timeout", None)
            kwargs.pop("source_io", None)
            return ShapefileSource(path, **kwargs)

    return GeoJSONSource(location, **kwargs)


def read(location, **kwargs) -> FeatureCollection:
    """Lê ``location`` com a variante de origem adequada."""
    return open_source(location, **kwargs).read()

"""
Leitura de documentos GeoJSON.

Apenas ``FeatureCollection`` é aceita no nível superior: a renderização
opera sempre sobre várias features, então uma geometria ou uma ``Feature``
isolada é rejeitada com :class:`UnsupportedGeoJSONTypeError`.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping, Optional

from geolens.config import DEFAULT_CRS, GEOJSON
from geolens.errors import SourceUnavailableError, UnsupportedGeoJSONTypeError
from geolens.io.source_io import SourceIO
from geolens.models import Feature, FeatureCollection

logger = logging.getLogger(__name__)


def read_geojson(
    source,
    *,
    timeout: Optional[float] = None,
    source_io: Optional[SourceIO] = None,
) -> FeatureCollection:
    """
    Lê uma FeatureCollection GeoJSON.

    Parameters
    ----------
    source : str | Path | Mapping
        Caminho local, URL (``http(s)://``, ``s3://``, qualquer URI fsspec)
        ou o documento já decodificado.
    timeout : float, optional
        Timeout das leituras HTTP (ignorado se ``source_io`` for informado).
    source_io : SourceIO, optional
        Leitor de origem já configurado (credenciais S3, timeout).

    Raises
    ------
    SourceUnavailableError
        Falha de leitura/rede ou conteúdo que não é JSON.
    UnsupportedGeoJSONTypeError
        O nível superior não é uma ``FeatureCollection``.
    MalformedGeometryError
        Alguma feature tem geometria inválida.
    """
    if isinstance(source, Mapping):
        return parse_geojson(source)

    label = os.fspath(source)
    sio = source_io or SourceIO(timeout=timeout)

    # utf-8-sig tolera o BOM que alguns exportadores escrevem
    text = sio.read_text(label, encoding="utf-8-sig")

    try:
        document = json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise SourceUnavailableError(f"'{label}' não é um JSON válido: {exc}") from exc

    collection = parse_geojson(document, label=label)
    logger.info("geojson %s: %d features", label, len(collection))
    return collection


def parse_geojson(document: Any, label: str = "documento") -> FeatureCollection:
    """
    Normaliza um documento GeoJSON já decodificado.

    >>> fc = parse_geojson({
    ...     "type": "FeatureCollection",
    ...     "features": [{
    ...         "type": "Feature",
    ...         "id": "a",
    ...         "properties": {"GEOID": "36061"},
    ...         "geometry": {"type": "Point", "coordinates": [-73.97, 40.78]},
    ...     }],
    ... })
    >>> fc[0].id, fc[0].properties["GEOID"]
    ('a', '36061')
    """
    if not isinstance(document, Mapping):
        raise UnsupportedGeoJSONTypeError(
            f"{label}: o nível superior deve ser um objeto JSON, "
            f"recebido {type(document).__name__}."
        )

    doc_type = document.get("type")
    if doc_type != "FeatureCollection":
        raise UnsupportedGeoJSONTypeError(
            f"{label}: esperado 'FeatureCollection' no nível superior, "
            f"recebido {doc_type!r}."
        )

    raw_features = document.get("features")
    if not isinstance(raw_features, list):
        raise UnsupportedGeoJSONTypeError(
            f"{label}: FeatureCollection sem lista 'features'."
        )

    features = [Feature.from_geojson(obj, index=i) for i, obj in enumerate(raw_features)]

    return FeatureCollection(features, crs=_crs_of(document), source_format=GEOJSON)


def _crs_of(document: Mapping) -> str:
    """
    CRS declarado pelo membro ``crs`` (GeoJSON 2008). Sem ele, vale o
    CRS geográfico padrão.

    >>> _crs_of({"crs": {"type": "name", "properties": {"name": "EPSG:3857"}}})
    'EPSG:3857'
    >>> _crs_of({})
    'EPSG:4326'
    """
    crs = document.get("crs")
    if isinstance(crs, Mapping):
        name = (crs.get("properties") or {}).get("name")
        if name:
            return str(name)
    return DEFAULT_CRS


def _reject_constant(name: str):
    # NaN, Infinity e -Infinity não fazem parte do JSON (RFC 8259)
    raise ValueError(f"constante não permitida em JSON: {name}")

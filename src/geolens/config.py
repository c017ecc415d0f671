"""
Constantes e configuração do geolens.

Os valores padrão de estilo dependem do formato de origem: shapefiles
costumam trazer malhas administrativas densas (contornos finos), enquanto
documentos GeoJSON costumam trazer poucas feições destacadas.
"""

from __future__ import annotations

import os

# CRS assumido quando a origem não declara nenhum (convenção GeoJSON: lon/lat)
DEFAULT_CRS = "EPSG:4326"

SHAPEFILE = "shapefile"
GEOJSON = "geojson"

FORMAT_DEFAULTS = {
    SHAPEFILE: {
        "stroke_weight": 1.0,
        "stroke_opacity": 1.0,
        "stroke_color": "#000000",
        "fill_color": "#3366cc",
        "fill_opacity": 0.4,
        "initial_zoom": 10,
    },
    GEOJSON: {
        "stroke_weight": 2.0,
        "stroke_opacity": 1.0,
        "stroke_color": "#3388ff",
        "fill_color": "#3388ff",
        "fill_opacity": 0.2,
        "initial_zoom": 9,
    },
}

# arquivos obrigatórios de um shapefile (geometria, índice, atributos)
SHAPEFILE_MANDATORY = (".shp", ".shx", ".dbf")
SHAPEFILE_ANCILLARY_TEXT = (".prj", ".cpg")

DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_S3_ENDPOINT = "https://s3.amazonaws.com"


def format_defaults(source_format: str) -> dict:
    """
    Retorna os valores padrão de estilo do formato.

    >>> format_defaults("geojson")["initial_zoom"]
    9
    """
    try:
        return dict(FORMAT_DEFAULTS[source_format])
    except KeyError:
        raise KeyError(f"Formato de origem desconhecido: {source_format!r}")


def http_timeout() -> float:
    """
    Timeout (segundos) das leituras remotas.

    Configurável via variável de ambiente ``GEOLENS_HTTP_TIMEOUT``.
    """
    env = os.getenv("GEOLENS_HTTP_TIMEOUT")
    if not env:
        return DEFAULT_HTTP_TIMEOUT

    try:
        value = float(env)
    except ValueError:
        raise ValueError(
            f"GEOLENS_HTTP_TIMEOUT deve ser numérico, recebido {env!r}"
        )

    if value <= 0:
        raise ValueError("GEOLENS_HTTP_TIMEOUT deve ser positivo.")

    return value


def s3_credentials() -> tuple[str | None, str | None, str]:
    """
    Credenciais S3 (chave, segredo, endpoint) lidas do ambiente:
    ``GEOLENS_S3_KEY_ID``, ``GEOLENS_S3_SECRET`` e ``GEOLENS_S3_ENDPOINT``.
    """
    return (
        os.getenv("GEOLENS_S3_KEY_ID"),
        os.getenv("GEOLENS_S3_SECRET"),
        os.getenv("GEOLENS_S3_ENDPOINT", DEFAULT_S3_ENDPOINT),
    )

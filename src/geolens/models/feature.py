"""
Feature: a menor unidade do modelo normalizado.

Uma feature combina uma geometria shapely, um mapeamento somente-leitura de
atributos e um identificador opcional. Ela não conhece o formato de origem.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Mapping

import numpy as np
import pandas as pd
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry

from geolens.errors import MalformedGeometryError

# profundidade de aninhamento das posições para cada tipo suportado
GEOMETRY_DEPTH = {
    "Point": 0,
    "MultiPoint": 1,
    "LineString": 1,
    "MultiLineString": 2,
    "Polygon": 2,
    "MultiPolygon": 3,
}


@dataclass(frozen=True)
class Feature:
    """
    Feature normalizada.

    >>> from shapely.geometry import Point
    >>> f = Feature(Point(-46.63, -23.55), {"nome": "Sé"}, id="se")
    >>> f.properties["nome"]
    'Sé'
    >>> f.bounds.center
    (-46.63, -23.55)
    """

    geometry: BaseGeometry
    properties: Mapping[str, Any] = field(default_factory=dict)
    id: str | int | None = None

    def __post_init__(self):
        if not isinstance(self.geometry, BaseGeometry):
            raise MalformedGeometryError(
                f"Geometria deve ser shapely, recebido {type(self.geometry).__name__}."
            )
        if self.geometry.geom_type not in GEOMETRY_DEPTH:
            raise MalformedGeometryError(
                f"Tipo de geometria não suportado: {self.geometry.geom_type}."
            )
        if self.geometry.is_empty:
            raise MalformedGeometryError("Geometria vazia.")

        # congela os atributos (a coleção é somente-leitura)
        object.__setattr__(
            self, "properties", MappingProxyType(dict(self.properties or {}))
        )

    @property
    def geom_type(self) -> str:
        return self.geometry.geom_type

    @property
    def bounds(self):
        from geolens.models.collection import BoundingBox

        return BoundingBox(*self.geometry.bounds)

    @classmethod
    def from_geojson(cls, obj: Mapping, index: int | None = None) -> "Feature":
        """
        Constrói uma feature a partir de um objeto GeoJSON ``Feature``.

        As coordenadas são validadas no JSON bruto, antes de o shapely
        construir a geometria (o shapely fecha anéis silenciosamente).
        """
        where = _where(index)

        if not isinstance(obj, Mapping) or obj.get("type") != "Feature":
            raise MalformedGeometryError(
                f"Elemento{where} não é um objeto GeoJSON do tipo 'Feature'.",
                index=index,
            )

        feature_id = obj.get("id")
        if feature_id is not None and not (
            isinstance(feature_id, str) or _is_number(feature_id)
        ):
            raise MalformedGeometryError(
                f"'id'{where} deve ser texto ou número, "
                f"recebido {type(feature_id).__name__}.",
                index=index,
            )

        geometry = obj.get("geometry")
        validate_geometry(geometry, index=index)

        properties = obj.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise MalformedGeometryError(
                f"'properties'{where} deve ser um objeto JSON.", index=index
            )

        return cls(
            geometry=shape(geometry),
            properties=properties,
            id=feature_id,
        )

    @classmethod
    def from_record(
        cls,
        geometry: BaseGeometry | None,
        properties: Mapping[str, Any],
        id: str | int | None = None,
        index: int | None = None,
    ) -> "Feature":
        """
        Constrói uma feature a partir de uma linha de tabela (shapefile).

        Os valores de atributos são convertidos para escalares Python.
        """
        if geometry is None:
            raise MalformedGeometryError(
                f"Registro{_where(index)} sem geometria.", index=index
            )

        validate_geometry(mapping(geometry), index=index)

        return cls(
            geometry=geometry,
            properties={str(k): to_scalar(v) for k, v in properties.items()},
            id=id,
        )

    def to_geojson(self) -> dict:
        out = {
            "type": "Feature",
            "properties": dict(self.properties),
            "geometry": mapping(self.geometry),
        }
        if self.id is not None:
            out["id"] = self.id
        return out


def validate_geometry(geometry: Any, index: int | None = None) -> None:
    """
    Valida uma geometria no formato GeoJSON (mapeamento com ``type`` e
    ``coordinates``).

    Regras:

    - o tipo precisa ser Point, MultiPoint, LineString, MultiLineString,
      Polygon ou MultiPolygon;
    - toda posição tem 2 ou 3 números, e a aridade é a mesma em toda a
      geometria;
    - toda coordenada é finita (sem NaN ou infinito);
    - todo anel de polígono tem ao menos 4 posições e é fechado;
    - toda linha tem ao menos 2 posições.

    >>> validate_geometry({"type": "Point", "coordinates": [1.0, 2.0]})
    >>> validate_geometry({"type": "LineString", "coordinates": [[0, 0], [1, 1, 1]]})
    Traceback (most recent call last):
    ...
    geolens.errors.MalformedGeometryError: Aridade de coordenadas inconsistente: 2 e 3.
    """
    where = _where(index)

    if not isinstance(geometry, Mapping):
        raise MalformedGeometryError(
            f"Feature{where} sem geometria (esperado objeto com 'type' e 'coordinates').",
            index=index,
        )

    geom_type = geometry.get("type")
    if geom_type not in GEOMETRY_DEPTH:
        raise MalformedGeometryError(
            f"Tipo de geometria não suportado{where}: {geom_type!r}.", index=index
        )

    coords = geometry.get("coordinates")
    if coords is None:
        raise MalformedGeometryError(
            f"Geometria {geom_type}{where} sem 'coordinates'.", index=index
        )

    arity: set[int] = set()

    def position(pos):
        if not isinstance(pos, (list, tuple)) or not pos:
            raise MalformedGeometryError(
                f"Posição inválida{where}: {pos!r}.", index=index
            )
        if len(pos) not in (2, 3) or not all(_is_number(v) for v in pos):
            raise MalformedGeometryError(
                f"Posição deve ter 2 ou 3 números{where}: {pos!r}.", index=index
            )
        arity.add(len(pos))
        if len(arity) > 1:
            a, b = sorted(arity)
            raise MalformedGeometryError(
                f"Aridade de coordenadas inconsistente{where}: {a} e {b}.",
                index=index,
            )

    def sequence(seq, what):
        if not isinstance(seq, (list, tuple)) or not seq:
            raise MalformedGeometryError(
                f"{what}{where} sem posições.", index=index
            )
        return seq

    def line(seq):
        sequence(seq, "Linha")
        if len(seq) < 2:
            raise MalformedGeometryError(
                f"Linha{where} precisa de ao menos 2 posições.", index=index
            )
        for pos in seq:
            position(pos)

    def ring(seq):
        sequence(seq, "Anel")
        for pos in seq:
            position(pos)
        if len(seq) < 4:
            raise MalformedGeometryError(
                f"Anel{where} precisa de ao menos 4 posições.", index=index
            )
        if list(seq[0]) != list(seq[-1]):
            raise MalformedGeometryError(
                f"Anel{where} não fechado: {list(seq[0])} != {list(seq[-1])}.",
                index=index,
            )

    def polygon(seq):
        for r in sequence(seq, "Polígono"):
            ring(r)

    if geom_type == "Point":
        position(coords)
    elif geom_type == "MultiPoint":
        for pos in sequence(coords, "MultiPoint"):
            position(pos)
    elif geom_type == "LineString":
        line(coords)
    elif geom_type == "MultiLineString":
        for seq in sequence(coords, "MultiLineString"):
            line(seq)
    elif geom_type == "Polygon":
        polygon(coords)
    else:
        for poly in sequence(coords, "MultiPolygon"):
            polygon(poly)


def to_scalar(value: Any) -> Any:
    """
    Converte valores vindos de pandas/numpy para escalares Python.

    >>> to_scalar(np.int64(3))
    3
    >>> to_scalar(float("nan")) is None
    True
    >>> to_scalar(pd.Timestamp("2020-01-02"))
    '2020-01-02T00:00:00'
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, np.generic):
        value = value.item()
        if isinstance(value, (datetime, date)):
            return value.isoformat()
    if isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if pd.isna(value):
        return None
    return str(value)


def _is_number(value) -> bool:
    # NaN e infinito ficariam fora de qualquer bounding box
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and (isinstance(value, int) or math.isfinite(value))
    )


def _where(index: int | None) -> str:
    return "" if index is None else f" (registro {index})"

"""
FeatureCollection: representação normalizada compartilhada pelos formatos.

A coleção é construída uma vez por leitura e não é alterada depois. O
bounding box é derivado das geometrias e não pode ser informado
diretamente.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Iterable, Iterator

import geopandas as gpd

from geolens.config import DEFAULT_CRS, GEOJSON, FORMAT_DEFAULTS
from geolens.errors import DuplicateFeatureIdError
from geolens.models.feature import Feature


@dataclass(frozen=True)
class BoundingBox:
    """
    Retângulo alinhado aos eixos, no CRS nativo do dataset.

    >>> bb = BoundingBox(0, 0, 10, 4)
    >>> bb.center
    (5.0, 2.0)
    >>> bb.contains(10, 4)
    True
    >>> bb.union(BoundingBox(-2, 1, 3, 8)).as_tuple()
    (-2, 0, 10, 8)
    """

    minx: float
    miny: float
    maxx: float
    maxy: float

    def __post_init__(self):
        if self.minx > self.maxx or self.miny > self.maxy:
            raise ValueError(
                f"Bounding box inválido: {self.as_tuple()} (mínimo maior que máximo)."
            )

    @property
    def center(self) -> tuple[float, float]:
        # média simples de mínimo e máximo em cada eixo (não é centróide)
        return (
            (self.minx + self.maxx) / 2,
            (self.miny + self.maxy) / 2,
        )

    @property
    def width(self) -> float:
        return self.maxx - self.minx

    @property
    def height(self) -> float:
        return self.maxy - self.miny

    def contains(self, x: float, y: float) -> bool:
        return self.minx <= x <= self.maxx and self.miny <= y <= self.maxy

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.minx, other.minx),
            min(self.miny, other.miny),
            max(self.maxx, other.maxx),
            max(self.maxy, other.maxy),
        )

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.minx, self.miny, self.maxx, self.maxy)

    @classmethod
    def of(cls, features: Iterable[Feature]) -> "BoundingBox | None":
        """União das extensões das features; ``None`` se não houver nenhuma."""
        box = None
        for feature in features:
            fb = feature.bounds
            box = fb if box is None else box.union(fb)
        return box


@dataclass(frozen=True)
class FeatureCollection:
    """
    Conjunto ordenado de :class:`Feature`, independente do formato de origem.

    Permite iteração, ``len`` e acesso por índice, como uma sequência
    somente-leitura.

    >>> from shapely.geometry import Point
    >>> fc = FeatureCollection([Feature(Point(1, 2)), Feature(Point(3, 6))])
    >>> len(fc)
    2
    >>> fc.bounding_box.as_tuple()
    (1.0, 2.0, 3.0, 6.0)
    >>> fc.crs
    'EPSG:4326'
    """

    features: tuple[Feature, ...] = ()
    crs: str = DEFAULT_CRS
    source_format: str = GEOJSON
    bounding_box: BoundingBox | None = field(init=False, default=None)

    def __post_init__(self):
        features = tuple(self.features)
        seen = set()
        for i, feature in enumerate(features):
            if not isinstance(feature, Feature):
                raise TypeError(
                    f"Elemento {i} não é Feature: {type(feature).__name__}."
                )
            # ids ausentes são válidos; os presentes precisam ser únicos
            if feature.id is not None:
                if feature.id in seen:
                    raise DuplicateFeatureIdError(
                        f"Id de feature repetido: {feature.id!r} (elemento {i})."
                    )
                seen.add(feature.id)

        if self.source_format not in FORMAT_DEFAULTS:
            raise ValueError(f"Formato de origem desconhecido: {self.source_format!r}")

        object.__setattr__(self, "features", features)
        object.__setattr__(self, "crs", self.crs or DEFAULT_CRS)
        object.__setattr__(self, "bounding_box", BoundingBox.of(features))

    def __len__(self) -> int:
        return len(self.features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __getitem__(self, index):
        return self.features[index]

    @property
    def is_empty(self) -> bool:
        return not self.features

    def property_keys(self) -> list[str]:
        """Chaves de atributos presentes, na ordem em que aparecem."""
        keys: dict[str, None] = {}
        for feature in self.features:
            for key in feature.properties:
                keys.setdefault(key, None)
        return list(keys)

    def to_geojson(self) -> dict:
        out = {
            "type": "FeatureCollection",
            "features": [f.to_geojson() for f in self.features],
        }
        if self.bounding_box is not None:
            out["bbox"] = list(self.bounding_box.as_tuple())
        return out

    def to_json(self, **kwargs) -> str:
        """Retorna a representação GeoJSON da coleção como texto."""
        kwargs.setdefault("ensure_ascii", False)
        return json.dumps(self.to_geojson(), **kwargs)

    def to_geodataframe(self) -> gpd.GeoDataFrame:
        """
        Converte a coleção em :class:`geopandas.GeoDataFrame`, preservando
        a ordem e o CRS. O índice do GeoDataFrame recebe os ids das features.
        """
        rows = [dict(f.properties) for f in self.features]
        geoms = [f.geometry for f in self.features]
        ids = [f.id for f in self.features]
        return gpd.GeoDataFrame(rows, geometry=geoms, index=ids, crs=self.crs)

"""
Renderização de uma FeatureCollection em uma descrição de mapa.

O resultado, :class:`RenderedView`, é um valor: viewport inicial, lista de
features com estilo e rótulo, e as flags de interação da superfície de
exibição. Nenhum widget é criado aqui; quem exibe o mapa é um colaborador
externo.

>>> from shapely.geometry import Point
>>> from geolens.models import Feature, FeatureCollection
>>> fc = FeatureCollection([Feature(Point(-73.5, 40.5), {"nome": "A"}, id=1)])
>>> view = MapRenderer().render(fc, StyleSpec(label_template="{nome}", scroll_locked=True))
>>> view.viewport.center
(-73.5, 40.5)
>>> view.features[0].label
'A'
>>> view.scroll_wheel_zoom, view.dragging
(False, True)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional

from shapely.geometry import mapping

from geolens.errors import EmptyCollectionError
from geolens.models import FeatureCollection
from geolens.render.style import StyleSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewport:
    center: tuple[float, float]  # (x, y) = (lon, lat) ou (leste, norte)
    zoom: float


@dataclass(frozen=True)
class StyledFeature:
    """Uma feature pronta para desenho: geometria GeoJSON, estilo e rótulo."""

    id: Any
    geometry: Mapping[str, Any]
    style: Mapping[str, Any]
    label: str


@dataclass(frozen=True)
class RenderedView:
    """
    Descrição determinística de um mapa.

    ``scroll_wheel_zoom`` falso instrui a superfície de exibição a ignorar
    zoom/pan pela roda do mouse; arrastar e os controles de zoom continuam
    habilitados.
    """

    viewport: Viewport
    features: tuple[StyledFeature, ...]
    crs: str
    scroll_wheel_zoom: bool = True
    dragging: bool = True
    zoom_control: bool = True

    @property
    def scroll_locked(self) -> bool:
        return not self.scroll_wheel_zoom

    def to_dict(self) -> dict:
        return {
            "viewport": {
                "center": list(self.viewport.center),
                "zoom": self.viewport.zoom,
            },
            "crs": self.crs,
            "interaction": {
                "scroll_wheel_zoom": self.scroll_wheel_zoom,
                "dragging": self.dragging,
                "zoom_control": self.zoom_control,
            },
            "features": [
                {
                    "id": f.id,
                    "geometry": f.geometry,
                    "style": dict(f.style),
                    "label": f.label,
                }
                for f in self.features
            ],
        }

    def to_json(self, **kwargs) -> str:
        kwargs.setdefault("ensure_ascii", False)
        return json.dumps(self.to_dict(), **kwargs)


class MapRenderer:
    """
    Transforma uma :class:`FeatureCollection` em :class:`RenderedView`.

    O renderizador não guarda estado entre chamadas; ``style`` é apenas o
    estilo usado quando :meth:`render` não recebe outro.
    """

    def __init__(self, style: Optional[StyleSpec] = None):
        self.style = style or StyleSpec()

    def compute_initial_viewport(
        self,
        collection: FeatureCollection,
        style: Optional[StyleSpec] = None,
    ) -> Viewport:
        """
        Centro = média de mínimo e máximo do bounding box em cada eixo (não
        é um centróide ponderado). Zoom = ``style.initial_zoom`` ou o
        padrão do formato.
        """
        if collection.is_empty:
            raise EmptyCollectionError(
                "Não há viewport para uma coleção sem features."
            )

        style = (style or self.style).resolved(collection.source_format)
        return Viewport(center=collection.bounding_box.center, zoom=style.initial_zoom)

    def render(
        self,
        collection: FeatureCollection,
        style: Optional[StyleSpec] = None,
    ) -> RenderedView:
        """
        Aplica o estilo a todas as features e calcula os rótulos.

        Função pura: as mesmas entradas produzem visões iguais.
        """
        style = (style or self.style).resolved(collection.source_format)
        viewport = self.compute_initial_viewport(collection, style)

        drawing = MappingProxyType(style.drawing_options())

        features = tuple(
            StyledFeature(
                id=feature.id,
                geometry=mapping(feature.geometry),
                style=drawing,
                label=style.label(feature.properties),
            )
            for feature in collection
        )

        logger.debug(
            "render: %d features, centro %s, zoom %s",
            len(features), viewport.center, viewport.zoom,
        )

        return RenderedView(
            viewport=viewport,
            features=features,
            crs=collection.crs,
            scroll_wheel_zoom=not style.scroll_locked,
        )


def compute_initial_viewport(
    collection: FeatureCollection, style: Optional[StyleSpec] = None
) -> Viewport:
    return MapRenderer().compute_initial_viewport(collection, style)


def render(collection: FeatureCollection, style: Optional[StyleSpec] = None) -> RenderedView:
    return MapRenderer().render(collection, style)

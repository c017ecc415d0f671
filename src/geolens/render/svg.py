"""
Pré-visualização estática de uma RenderedView em SVG.

Útil para conferir um dataset sem uma superfície de mapa interativa:
as geometrias são normalizadas em size×size, mantendo proporção e
centralizadas, com o eixo Y invertido (GIS → SVG).
"""

from __future__ import annotations

from html import escape

from shapely.affinity import scale as scale_geom, translate
from shapely.geometry import (
    LineString,
    MultiLineString,
    MultiPolygon,
    Point,
    Polygon,
    shape,
)

from geolens.errors import EmptyCollectionError
from geolens.render.renderer import RenderedView


def render_svg(view: RenderedView, size: int = 400, labels: bool = True) -> str:
    """
    Retorna um SVG (texto) com as features estilizadas da visão.
    """
    if not view.features:
        raise EmptyCollectionError("Não há o que desenhar em uma visão sem features.")

    geoms = [shape(f.geometry) for f in view.features]

    # --- bounds do conjunto ---
    minx = min(g.bounds[0] for g in geoms)
    miny = min(g.bounds[1] for g in geoms)
    maxx = max(g.bounds[2] for g in geoms)
    maxy = max(g.bounds[3] for g in geoms)
    w = maxx - minx
    h = maxy - miny

    # --- escala proporcional (um único ponto não tem extensão) ---
    s = size / max(w, h) if max(w, h) > 0 else 1.0
    dx = (size - w * s) / 2
    dy = (size - h * s) / 2

    def to_canvas(g):
        g = translate(g, xoff=-minx, yoff=-miny)
        g = scale_geom(g, xfact=s, yfact=s, origin=(0, 0))
        g = translate(g, xoff=dx, yoff=dy)
        # inverte o eixo Y e traz a geometria de volta para a área visível
        g = scale_geom(g, xfact=1, yfact=-1, origin=(0, 0))
        return translate(g, yoff=size)

    body = []
    for feature, geom in zip(view.features, geoms):
        g = to_canvas(geom)
        body.append(_element(g, feature.style))

        if labels and feature.label:
            p = g.representative_point()
            body.append(
                f'<text x="{p.x:.2f}" y="{p.y:.2f}" font-size="10" '
                f'text-anchor="middle">{escape(feature.label)}</text>'
            )

    return (
        '<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{size}" height="{size}" viewBox="0 0 {size} {size}">\n'
        + "\n".join(body)
        + "\n</svg>\n"
    )


def _path(coords, close: bool) -> str:
    pts = [c[:2] for c in coords]
    d = [f"M {pts[0][0]:.2f} {pts[0][1]:.2f}"]
    d += [f"L {x:.2f} {y:.2f}" for x, y in pts[1:]]
    if close:
        d.append("Z")
    return " ".join(d)


def _poly(p: Polygon) -> str:
    d = _path(p.exterior.coords, close=True)
    for hole in p.interiors:
        d += " " + _path(hole.coords, close=True)
    return d


def _element(g, style) -> str:
    style = {k: escape(str(v), quote=True) for k, v in style.items()}
    stroke = (
        f'stroke="{style["stroke_color"]}" '
        f'stroke-width="{style["stroke_weight"]}" '
        f'stroke-opacity="{style["stroke_opacity"]}"'
    )

    if isinstance(g, (Polygon, MultiPolygon)):
        polys = [g] if isinstance(g, Polygon) else list(g.geoms)
        d = " ".join(_poly(p) for p in polys)
        return (
            f'<path d="{d}" fill="{style["fill_color"]}" '
            f'fill-opacity="{style["fill_opacity"]}" fill-rule="evenodd" {stroke}/>'
        )

    if isinstance(g, (LineString, MultiLineString)):
        lines = [g] if isinstance(g, LineString) else list(g.geoms)
        d = " ".join(_path(line.coords, close=False) for line in lines)
        return f'<path d="{d}" fill="none" {stroke}/>'

    points = [g] if isinstance(g, Point) else list(g.geoms)
    return "\n".join(
        f'<circle cx="{p.x:.2f}" cy="{p.y:.2f}" r="3" '
        f'fill="{style["fill_color"]}" fill-opacity="{style["fill_opacity"]}" {stroke}/>'
        for p in points
    )

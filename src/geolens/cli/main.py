import json
import warnings
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

import typer

from geolens import GeolensError, MapRenderer, StyleSpec, ancillary_metadata, open_source, render_svg

warnings.filterwarnings(
    "ignore",
    message="Measured \\(M\\) geometry types are not supported.*",
    category=UserWarning,
    module="pyogrio"
)


app = typer.Typer(pretty_exceptions_enable=False)


def resolve_out_path(out: str) -> Path:
    """
    Resolve o caminho de saída como Path gravável, criando o diretório pai.
    Aceita caminho relativo ou absoluto.
    """
    path = Path(out).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _fail(exc: Exception):
    typer.echo(f"✘ {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def inspect(
    location: str = typer.Argument(..., help="Diretório do shapefile, arquivo GeoJSON ou URL."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Timeout HTTP (s)."),
):
    """
    Mostra formato, CRS, número de features, bounding box e atributos.
    """
    kwargs = {"timeout": timeout} if timeout is not None else {}

    try:
        collection = open_source(location, **kwargs).read()
    except GeolensError as exc:
        _fail(exc)

    typer.echo(f"→ Origem: {location}")
    typer.echo(f"  formato:  {collection.source_format}")
    typer.echo(f"  crs:      {collection.crs}")
    typer.echo(f"  features: {len(collection)}")

    if collection.bounding_box is not None:
        bb = collection.bounding_box
        typer.echo(f"  bbox:     {bb.minx}, {bb.miny}, {bb.maxx}, {bb.maxy}")

    typer.echo(f"  atributos: {', '.join(collection.property_keys()) or '-'}")


@app.command()
def metadata(
    directory: str = typer.Argument(..., help="Diretório do shapefile."),
):
    """
    Lista os arquivos auxiliares (.prj, .cpg, .xml) de um shapefile.
    """
    try:
        files = ancillary_metadata(directory)
    except GeolensError as exc:
        _fail(exc)

    if not files:
        typer.echo("Nenhum arquivo auxiliar encontrado.")
        return

    for name, content in files.items():
        if isinstance(content, ET.Element):
            typer.echo(f"- {name}: XML <{content.tag}>")
        else:
            first = content.splitlines()[0] if content else ""
            typer.echo(f"- {name}: {first[:72]}")


@app.command()
def render(
    location: str = typer.Argument(..., help="Diretório do shapefile, arquivo GeoJSON ou URL."),
    out: str = typer.Option(..., "--out", "-o", help="Arquivo JSON da visão renderizada."),
    svg: Optional[str] = typer.Option(None, "--svg", help="Grava também uma pré-visualização SVG."),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Template de rótulo, ex.: '{NAMELSAD}'."),
    zoom: Optional[float] = typer.Option(None, "--zoom", "-z", help="Zoom inicial."),
    fill_color: Optional[str] = typer.Option(None, "--fill-color", help="Cor de preenchimento."),
    fill_opacity: Optional[float] = typer.Option(None, "--fill-opacity", help="Opacidade do preenchimento [0, 1]."),
    stroke_color: Optional[str] = typer.Option(None, "--stroke-color", help="Cor do contorno."),
    stroke_weight: Optional[float] = typer.Option(None, "--stroke-weight", help="Espessura do contorno."),
    scroll_locked: bool = typer.Option(False, "--scroll-locked", help="Desativa zoom pela roda do mouse."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Timeout HTTP (s)."),
):
    """
    Renderiza um dataset e grava a visão (JSON) e, opcionalmente, um SVG.
    """
    kwargs = {"timeout": timeout} if timeout is not None else {}

    try:
        style = StyleSpec(
            fill_color=fill_color,
            fill_opacity=fill_opacity,
            stroke_color=stroke_color,
            stroke_weight=stroke_weight,
            label_template=label,
            initial_zoom=zoom,
            scroll_locked=scroll_locked,
        )
        collection = open_source(location, **kwargs).read()
        view = MapRenderer().render(collection, style)
    except GeolensError as exc:
        _fail(exc)

    out_path = resolve_out_path(out)
    out_path.write_text(
        json.dumps(view.to_dict(), ensure_ascii=False, indent=2),
        encoding="utf-8"
    )
    typer.echo(f"→ Visão: {out_path}")

    if svg:
        svg_path = resolve_out_path(svg)
        svg_path.write_text(render_svg(view), encoding="utf-8")
        typer.echo(f"→ SVG: {svg_path}")

    typer.echo(f"✔ {len(view.features)} features renderizadas.")


if __name__ == "__main__":
    app()

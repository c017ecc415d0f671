"""
Leitura de shapefiles.

Um shapefile é um conjunto de arquivos com o mesmo nome base:

- ``{base}.shp`` (geometria), ``{base}.shx`` (índice) e ``{base}.dbf``
  (atributos) são obrigatórios;
- ``{base}.prj`` (projeção), ``{base}.cpg`` (codificação) e documentos
  ``.xml`` de metadados são opcionais e ficam disponíveis via
  :func:`ancillary_metadata`, sem participar da leitura principal.

A decodificação do formato binário é delegada ao geopandas (pyogrio).
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import geopandas as gpd

from geolens.config import DEFAULT_CRS, SHAPEFILE, SHAPEFILE_ANCILLARY_TEXT, SHAPEFILE_MANDATORY
from geolens.errors import IncompleteDatasetError, SourceUnavailableError
from geolens.models import Feature, FeatureCollection

logger = logging.getLogger(__name__)


def find_bundle(directory_path, base: str | None = None) -> dict[str, Path]:
    """
    Localiza os arquivos obrigatórios de um shapefile.

    Parameters
    ----------
    directory_path : str | Path
        Diretório do shapefile, ou o caminho do próprio ``.shp``.
    base : str, optional
        Nome base a usar quando o diretório contém mais de um shapefile.
        Sem ``base``, o primeiro conjunto completo (ordem alfabética) é usado.

    Returns
    -------
    dict[str, Path]
        Mapeamento ``{".shp": ..., ".shx": ..., ".dbf": ...}``.
    """
    path = Path(directory_path).expanduser()

    if path.is_file():
        base = base or path.stem
        path = path.parent

    if not path.is_dir():
        raise IncompleteDatasetError(
            f"Diretório do shapefile não encontrado: {path}",
            missing=tuple(f"*{ext}" for ext in SHAPEFILE_MANDATORY),
        )

    bundles: dict[str, dict[str, Path]] = {}
    for p in sorted(path.iterdir()):
        ext = p.suffix.lower()
        if p.is_file() and ext in SHAPEFILE_MANDATORY:
            bundles.setdefault(p.stem, {})[ext] = p

    if base is None:
        complete = [b for b, files in bundles.items() if len(files) == len(SHAPEFILE_MANDATORY)]
        if complete:
            base = complete[0]
        elif bundles:
            base = next(iter(bundles))
        else:
            raise IncompleteDatasetError(
                f"Nenhum shapefile encontrado em {path} "
                f"(esperados {', '.join(SHAPEFILE_MANDATORY)}).",
                missing=tuple(f"*{ext}" for ext in SHAPEFILE_MANDATORY),
            )

    files = bundles.get(base, {})
    missing = tuple(f"{base}{ext}" for ext in SHAPEFILE_MANDATORY if ext not in files)
    if missing:
        raise IncompleteDatasetError(
            f"Shapefile '{base}' incompleto em {path}: faltam {', '.join(missing)}.",
            missing=missing,
        )

    return files


def read_shapefile_bundle(
    directory_path,
    base: str | None = None,
    encoding: str | None = None,
) -> FeatureCollection:
    """
    Lê um shapefile e devolve uma :class:`FeatureCollection`.

    O número de features é igual ao número de linhas da tabela de atributos;
    o id de cada feature é o número do registro (a partir de zero).

    Parameters
    ----------
    directory_path : str | Path
        Diretório do shapefile ou caminho do ``.shp``.
    base : str, optional
        Nome base do shapefile dentro do diretório.
    encoding : str, optional
        Codificação do ``.dbf``. Sem ela, vale o ``.cpg`` (se existir).

    Raises
    ------
    IncompleteDatasetError
        Falta ``.shp``, ``.shx`` ou ``.dbf``.
    MalformedGeometryError
        Algum registro tem geometria inválida ou ausente.
    SourceUnavailableError
        O GDAL não conseguiu ler os arquivos.
    """
    files = find_bundle(directory_path, base=base)
    shp = files[".shp"]

    kwargs = {}
    if encoding:
        kwargs["encoding"] = encoding

    try:
        gdf = gpd.read_file(shp, **kwargs)
    except (OSError, RuntimeError, ValueError) as exc:
        raise SourceUnavailableError(f"Falha ao ler o shapefile {shp}: {exc}") from exc

    crs = gdf.crs.to_string() if gdf.crs is not None else DEFAULT_CRS

    attrs = gdf.drop(columns=gdf.geometry.name)
    if len(attrs.columns):
        records = attrs.to_dict("records")
    else:
        # sem colunas, to_dict("records") devolve lista vazia
        records = [{} for _ in range(len(attrs))]

    features = [
        Feature.from_record(geom, props, id=i, index=i)
        for i, (geom, props) in enumerate(zip(gdf.geometry, records))
    ]

    logger.info("shapefile %s: %d registros (%s)", shp.name, len(features), crs)

    return FeatureCollection(features, crs=crs, source_format=SHAPEFILE)


def ancillary_metadata(directory_path) -> dict:
    """
    Arquivos auxiliares do shapefile, por nome de arquivo.

    ``.prj`` e ``.cpg`` são devolvidos como texto; documentos ``.xml`` como
    :class:`xml.etree.ElementTree.Element` (ou texto, se o XML não for
    válido). Nada aqui é validado contra a geometria.
    """
    path = Path(directory_path).expanduser()
    if path.is_file():
        path = path.parent

    if not path.is_dir():
        raise IncompleteDatasetError(f"Diretório do shapefile não encontrado: {path}")

    out = {}
    for p in sorted(path.iterdir()):
        if not p.is_file():
            continue

        ext = p.suffix.lower()
        if ext in SHAPEFILE_ANCILLARY_TEXT:
            out[p.name] = p.read_text(encoding="utf-8", errors="replace").strip()
        elif ext == ".xml":
            try:
                out[p.name] = ET.parse(p).getroot()
            except ET.ParseError:
                logger.warning("XML inválido em %s; devolvendo texto bruto", p.name)
                out[p.name] = p.read_text(encoding="utf-8", errors="replace")

    return out

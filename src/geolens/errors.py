"""
Hierarquia de erros do geolens.

Todos os erros herdam de :class:`GeolensError`, para que o consumidor possa
capturar qualquer falha do pipeline com um único ``except``. Nenhum erro é
convertido em valor padrão: leituras incompletas ou inválidas abortam a
chamada e nunca devolvem coleções parciais.
"""


class GeolensError(Exception):
    """Erro base do pacote."""


class IncompleteDatasetError(GeolensError):
    """Falta um dos arquivos obrigatórios do shapefile (.shp, .shx, .dbf)."""

    def __init__(self, message: str, missing: tuple[str, ...] = ()):
        super().__init__(message)
        self.missing = missing


class MalformedGeometryError(GeolensError):
    """
    Geometria inválida: anel não fechado, aridade de coordenadas
    inconsistente ou tipo de geometria não suportado.
    """

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


class UnsupportedGeoJSONTypeError(GeolensError):
    """O documento GeoJSON não é uma FeatureCollection."""


class SourceUnavailableError(GeolensError):
    """Falha de I/O ou de rede ao ler a origem do dataset."""


class EmptyCollectionError(GeolensError):
    """Operação que exige ao menos uma feature recebeu uma coleção vazia."""


class InvalidStyleError(GeolensError, ValueError):
    """Opção de estilo fora do intervalo aceito."""


class DuplicateFeatureIdError(GeolensError, ValueError):
    """Duas features da mesma coleção compartilham o mesmo id."""

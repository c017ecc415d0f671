"""
source_io – acesso a bytes/texto de uma origem de dados.

Este módulo define a classe SourceIO, responsável por ler o conteúdo bruto
de um dataset a partir de um caminho local, de uma URL ``http(s)://``, de um
bucket compatível com S3 (``s3://``) ou de qualquer URI suportado pelo
fsspec (por exemplo ``memory://``).

Ele não interpreta o conteúdo: apenas resolve **onde estão os dados** e
converte falhas de I/O e de rede em :class:`SourceUnavailableError`.

Exemplo de uso:

    from geolens.io import SourceIO

    sio = SourceIO(timeout=10)
    text = sio.read_text("https://exemplo.org/tracts.geojson")
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional, Tuple
from urllib.parse import urlparse

import aiohttp
import fsspec
import s3fs
from fsspec.spec import AbstractFileSystem

from geolens.config import http_timeout, s3_credentials
from geolens.errors import SourceUnavailableError

logger = logging.getLogger(__name__)

_HTTP_PROTOCOLS = ("http", "https")


class SourceIO:
    """
    Leitura de origens locais ou remotas.

    Parâmetros
    ----------
    key_id : Optional[str]
        ID da chave S3 (se não especificado, é lido de ``GEOLENS_S3_KEY_ID``).
    secret : Optional[str]
        Segredo S3 (se não especificado, é lido de ``GEOLENS_S3_SECRET``).
    endpoint_url : Optional[str]
        Endpoint S3-compatível (``GEOLENS_S3_ENDPOINT`` ou o padrão da AWS).
    timeout : Optional[float]
        Timeout total, em segundos, das leituras HTTP. O padrão vem de
        ``GEOLENS_HTTP_TIMEOUT``.

    Atributos
    ---------
    fs : Optional[s3fs.S3FileSystem]
        Sistema de arquivos S3 configurado com as credenciais, se houver.
    """

    def __init__(
        self,
        key_id: Optional[str] = None,
        secret: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        env_key, env_secret, env_endpoint = s3_credentials()
        self.key_id = key_id or env_key
        self.secret = secret or env_secret
        self.endpoint_url = endpoint_url or env_endpoint
        self.timeout = timeout if timeout is not None else http_timeout()
        self.fs: Optional[s3fs.S3FileSystem] = None

        if self.key_id and self.secret:
            self.fs = s3fs.S3FileSystem(
                key=self.key_id,
                secret=self.secret,
                client_kwargs={"endpoint_url": self.endpoint_url},
            )

    def _get_fs_and_path(self, uri: str) -> Tuple[AbstractFileSystem, str]:
        """
        Determina o sistema de arquivos apropriado e o caminho interno a
        partir de um URI. Caminhos sem esquema são tratados como locais.
        """
        if uri.startswith("s3://"):
            if self.fs is None:
                # bucket público: acesso anônimo
                return s3fs.S3FileSystem(anon=True), uri[5:]
            return self.fs, uri[5:]

        scheme = urlparse(uri).scheme
        if scheme in _HTTP_PROTOCOLS:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            return fsspec.core.url_to_fs(uri, client_kwargs={"timeout": timeout})

        return fsspec.core.url_to_fs(uri)

    def read_bytes(self, uri) -> bytes:
        """
        Lê todo o conteúdo de ``uri``.

        Levanta :class:`SourceUnavailableError` em arquivo inexistente,
        falha de DNS, timeout ou resposta HTTP 4xx/5xx. Não há novas
        tentativas automáticas.
        """
        uri = os.fspath(uri)
        logger.debug("lendo %s", uri)

        try:
            fs, path = self._get_fs_and_path(uri)
            with fs.open(path, "rb") as f:
                data = f.read()
        except (OSError, ValueError, aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise SourceUnavailableError(
                f"Não foi possível ler '{uri}': {exc}"
            ) from exc

        logger.debug("%d bytes lidos de %s", len(data), uri)
        return data

    def read_text(self, uri, encoding: str = "utf-8") -> str:
        data = self.read_bytes(uri)
        try:
            return data.decode(encoding)
        except UnicodeDecodeError as exc:
            raise SourceUnavailableError(
                f"Conteúdo de '{os.fspath(uri)}' não é texto {encoding}: {exc}"
            ) from exc


def is_remote(uri) -> bool:
    """
    Indica se ``uri`` aponta para fora do sistema de arquivos local.

    >>> is_remote("https://exemplo.org/a.geojson")
    True
    >>> is_remote("dados/a.geojson")
    False
    """
    scheme = urlparse(os.fspath(uri)).scheme
    # letras de unidade do Windows ("C:") não são esquemas
    return len(scheme) > 1 and scheme != "file"

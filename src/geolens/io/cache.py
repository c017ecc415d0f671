"""
Cache de leituras.

Leituras remotas são caras para quem serve os dados. :class:`CachingReader`
envolve qualquer função de leitura e guarda a coleção produzida por
localização, para que a mesma URL não seja baixada duas vezes na mesma
sessão. O núcleo de leitura não faz cache por conta própria.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Optional

from geolens.io.sources import read
from geolens.io.source_io import is_remote
from geolens.models import FeatureCollection

logger = logging.getLogger(__name__)


class CachingReader:
    """
    Decorador de leitura com cache em memória, por localização e opções
    de leitura (``base``, ``encoding``, ``timeout``...).

    Erros nunca são guardados: uma leitura que falhou será tentada de novo
    na próxima chamada.

    Parameters
    ----------
    reader : Callable
        Função ``reader(location, **kwargs) -> FeatureCollection``. O padrão
        é :func:`geolens.io.read`.
    """

    def __init__(self, reader: Optional[Callable[..., FeatureCollection]] = None):
        self.reader = reader or read
        self._cache: dict[tuple, FeatureCollection] = {}

    @staticmethod
    def key(location) -> str:
        location = os.fspath(location)
        if is_remote(location):
            return location
        return Path(location).expanduser().resolve().as_posix()

    def read(self, location, **kwargs) -> FeatureCollection:
        # opções diferentes podem ler datasets diferentes no mesmo local
        key = (self.key(location), tuple(sorted(kwargs.items())))

        if key in self._cache:
            logger.debug("cache: %s", key[0])
            return self._cache[key]

        collection = self.reader(location, **kwargs)
        self._cache[key] = collection
        return collection

    __call__ = read

    def invalidate(self, location=None) -> None:
        """Remove uma localização do cache (ou todas, sem argumento)."""
        if location is None:
            self._cache.clear()
        else:
            loc = self.key(location)
            for key in [k for k in self._cache if k[0] == loc]:
                del self._cache[key]

    def __contains__(self, location) -> bool:
        loc = self.key(location)
        return any(k[0] == loc for k in self._cache)

    def __len__(self) -> int:
        return len(self._cache)

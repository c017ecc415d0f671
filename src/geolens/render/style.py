"""
Configuração de estilo do mapa.

:class:`StyleSpec` não é persistida: é montada pelo chamador e aplicada de
forma uniforme a todas as features. Opções não informadas (``None``) são
resolvidas pelos padrões do formato de origem no momento da renderização.
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Mapping, Optional, Union

from geolens.config import format_defaults
from geolens.errors import InvalidStyleError

logger = logging.getLogger(__name__)

LabelTemplate = Union[str, Callable[[Mapping[str, Any]], Any]]

# opções de desenho repassadas a cada feature
DRAWING_OPTIONS = (
    "stroke_weight",
    "stroke_opacity",
    "stroke_color",
    "fill_color",
    "fill_opacity",
)

# nomes camelCase aceitos por StyleSpec.from_mapping
_ALIASES = {
    "strokeWeight": "stroke_weight",
    "strokeOpacity": "stroke_opacity",
    "strokeColor": "stroke_color",
    "fillColor": "fill_color",
    "fillOpacity": "fill_opacity",
    "labelTemplate": "label_template",
    "initialZoom": "initial_zoom",
    "scrollLocked": "scroll_locked",
}


@dataclass(frozen=True)
class StyleSpec:
    """
    Estilo do mapa.

    >>> s = StyleSpec(fill_color="#ff0000", label_template="{NAMELSAD}")
    >>> s.resolved("shapefile").fill_opacity
    0.4
    >>> s.label({"NAMELSAD": "Census Tract 1"})
    'Census Tract 1'
    >>> s.label({})
    ''
    """

    stroke_weight: Optional[float] = None
    stroke_opacity: Optional[float] = None
    stroke_color: Optional[str] = None
    fill_color: Optional[str] = None
    fill_opacity: Optional[float] = None
    label_template: Optional[LabelTemplate] = None
    initial_zoom: Optional[float] = None
    scroll_locked: bool = False

    def __post_init__(self):
        for name in ("stroke_opacity", "fill_opacity"):
            value = getattr(self, name)
            if value is not None and not 0 <= value <= 1:
                raise InvalidStyleError(f"{name} deve estar em [0, 1], recebido {value}.")

        if self.stroke_weight is not None and self.stroke_weight < 0:
            raise InvalidStyleError(
                f"stroke_weight não pode ser negativo, recebido {self.stroke_weight}."
            )

        if self.initial_zoom is not None and self.initial_zoom < 0:
            raise InvalidStyleError(
                f"initial_zoom não pode ser negativo, recebido {self.initial_zoom}."
            )

        template = self.label_template
        if isinstance(template, str):
            try:
                list(string.Formatter().parse(template))
            except ValueError as exc:
                raise InvalidStyleError(f"label_template inválido {template!r}: {exc}") from exc
        elif template is not None and not callable(template):
            raise InvalidStyleError(
                "label_template deve ser texto de formatação ou função, "
                f"recebido {type(template).__name__}."
            )

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "StyleSpec":
        """
        Constrói a partir de um dicionário, aceitando nomes camelCase.

        >>> StyleSpec.from_mapping({"fillOpacity": 0.6, "scrollLocked": True}).scroll_locked
        True
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in options.items():
            name = _ALIASES.get(key, key)
            if name not in known:
                raise InvalidStyleError(f"Opção de estilo desconhecida: {key!r}.")
            kwargs[name] = value
        return cls(**kwargs)

    def resolved(self, source_format: str) -> "StyleSpec":
        """Preenche as opções ausentes com os padrões do formato."""
        defaults = format_defaults(source_format)
        missing = {
            name: value
            for name, value in defaults.items()
            if getattr(self, name) is None
        }
        return replace(self, **missing)

    def drawing_options(self) -> dict:
        return {name: getattr(self, name) for name in DRAWING_OPTIONS}

    def label(self, properties: Mapping[str, Any]) -> str:
        return render_label(self.label_template, properties)


class _LenientFormatter(string.Formatter):
    """``str.format`` que troca chaves ausentes (e valores nulos) por ``""``."""

    def get_value(self, key, args, kwargs):
        if isinstance(key, int):
            return ""
        value = kwargs.get(key)
        return "" if value is None else value

    def format_field(self, value, format_spec):
        if value == "":
            return ""
        return super().format_field(value, format_spec)


class _MissingAsEmpty(dict):
    def __missing__(self, key):
        return ""


_FORMATTER = _LenientFormatter()


def render_label(template: Optional[LabelTemplate], properties: Mapping[str, Any]) -> str:
    """
    Aplica o template de rótulo aos atributos de uma feature.

    Chaves ausentes viram texto vazio; um rótulo nunca interrompe a
    renderização.

    >>> render_label("{NAMELSAD} ({GEOID})", {"NAMELSAD": "Tract 12"})
    'Tract 12 ()'
    >>> render_label(lambda p: p["nome"].upper(), {})
    ''
    >>> render_label(None, {"a": 1})
    ''
    """
    if template is None:
        return ""

    try:
        if isinstance(template, str):
            return _FORMATTER.vformat(template, (), properties)
        result = template(_MissingAsEmpty(properties))
    except (KeyError, IndexError, AttributeError, TypeError, ValueError, ArithmeticError) as exc:
        logger.warning("rótulo não pôde ser gerado (%s); usando texto vazio", exc)
        return ""

    return "" if result is None else str(result)

from .style import StyleSpec, render_label
from .renderer import (
    MapRenderer,
    RenderedView,
    StyledFeature,
    Viewport,
    compute_initial_viewport,
    render,
)
from .svg import render_svg

__all__ = [
    "MapRenderer",
    "RenderedView",
    "StyleSpec",
    "StyledFeature",
    "Viewport",
    "compute_initial_viewport",
    "render",
    "render_label",
    "render_svg",
]

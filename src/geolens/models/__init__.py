from .feature import Feature, validate_geometry
from .collection import BoundingBox, FeatureCollection

__all__ = [
    "BoundingBox",
    "Feature",
    "FeatureCollection",
    "validate_geometry",
]

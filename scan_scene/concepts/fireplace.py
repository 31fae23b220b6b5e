"""Fireplace: a shallow hearth block against the wall."""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, rounded_prism

CATEGORY = Category.FIREPLACE
TYPICAL = Dimensions(1.2, 1.1, 0.5)


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    return Shape((rounded_prism(width, height, depth * 0.3, 0.02),))

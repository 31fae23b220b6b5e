"""Bathtub: a single low, well-rounded tub block."""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, rounded_prism

CATEGORY = Category.BATHTUB
TYPICAL = Dimensions(0.8, 0.6, 1.7)


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    return Shape((rounded_prism(width, height * 0.4, depth, 0.1),))

"""Dishwasher: a full-size appliance block."""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, rounded_prism

CATEGORY = Category.DISHWASHER
TYPICAL = Dimensions(0.6, 0.85, 0.6)


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    return Shape((rounded_prism(width, height, depth, 0.02),))

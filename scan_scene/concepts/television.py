"""Television: thin screen centered on the origin over a low stand.

Parts:
    screen: W x 0.9H x 0.1D, centered  (primary)
    stand:  0.3W x 0.2H x 0.8D at y=-0.35H
"""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, rounded_prism

CATEGORY = Category.TELEVISION
TYPICAL = Dimensions(1.2, 0.75, 0.25)


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    screen = rounded_prism(width, height * 0.9, depth * 0.1, 0.01)
    stand = rounded_prism(width * 0.3, height * 0.2, depth * 0.8, 0.02, (0, -height * 0.35, 0))
    return Shape((screen, stand))

"""Bed: mattress on a frame, headboard at the back.

Parts:
    mattress:  0.95W x 0.3H x 0.95D at y=0.6H  (primary)
    frame:     W x 0.4H x D at y=0.3H
    headboard: W x 0.6H x 0.1D at y=0.7H, z=-0.45D
"""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, rounded_prism

CATEGORY = Category.BED
TYPICAL = Dimensions(1.6, 1.0, 2.1)


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    mattress = rounded_prism(
        width * 0.95, height * 0.3, depth * 0.95, 0.05, (0, height * 0.6, 0)
    )
    frame = rounded_prism(width, height * 0.4, depth, 0.02, (0, height * 0.3, 0))
    headboard = rounded_prism(
        width, height * 0.6, depth * 0.1, 0.02, (0, height * 0.7, -depth * 0.45)
    )
    return Shape((mattress, frame, headboard))

"""Refrigerator: tall body with a vertical door handle on the front.

Parts:
    body:   W x 0.9H x D at y=0.45H  (primary)
    handle: cylinder r=0.01, h=0.2H at (0.4W, 0.5H, 0.51D), tipped 90 degrees
            about the width axis so it sits proud of the front face
"""

import math
from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, cylinder, rounded_prism

CATEGORY = Category.REFRIGERATOR
TYPICAL = Dimensions(0.7, 1.8, 0.7)

HANDLE_RADIUS = 0.01


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    body = rounded_prism(width, height * 0.9, depth, 0.02, (0, height * 0.45, 0))
    handle = cylinder(
        HANDLE_RADIUS,
        height * 0.2,
        (width * 0.4, height * 0.5, depth * 0.51),
        euler=(math.pi / 2, 0.0, 0.0),
    )
    return Shape((body, handle))

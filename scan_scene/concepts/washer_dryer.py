"""Washer/dryer: appliance body with a round porthole door.

Parts:
    body: W x 0.9H x D at y=0.45H  (primary)
    door: cylinder r=0.3*min(W, H), h=0.05 at (0, 0.5H, 0.51D), tipped 90
          degrees about the width axis to face forward
"""

import math
from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, cylinder, rounded_prism

CATEGORY = Category.WASHER_DRYER
TYPICAL = Dimensions(0.6, 0.85, 0.6)

DOOR_THICKNESS = 0.05


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    body = rounded_prism(width, height * 0.9, depth, 0.02, (0, height * 0.45, 0))
    door = cylinder(
        min(width, height) * 0.3,
        DOOR_THICKNESS,
        (0, height * 0.5, depth * 0.51),
        euler=(math.pi / 2, 0.0, 0.0),
    )
    return Shape((body, door))

"""Toilet: cylindrical bowl and seat ring with a tank behind.

Bowl and seat radii follow the smaller horizontal extent so the round
parts stay inside the footprint.

Parts:
    bowl: cylinder r=0.4*min(W, D), h=0.6H at y=0.3H  (primary)
    tank: 0.6W x 0.4H x 0.3D at y=0.7H, z=-0.25D
    seat: cylinder r=0.45*min(W, D), h=0.05H at y=0.65H
"""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, cylinder, rounded_prism

CATEGORY = Category.TOILET
TYPICAL = Dimensions(0.4, 0.8, 0.7)


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    footprint = min(width, depth)
    bowl = cylinder(footprint * 0.4, height * 0.6, (0, height * 0.3, 0))
    tank = rounded_prism(
        width * 0.6, height * 0.4, depth * 0.3, 0.02, (0, height * 0.7, -depth * 0.25)
    )
    seat = cylinder(footprint * 0.45, height * 0.05, (0, height * 0.65, 0))
    return Shape((bowl, tank, seat))

"""Table: a slab top on four cylindrical legs.

Parts:
    top:  W x 0.1H x D at y=0.9H  (primary)
    legs: 4 cylinders r=0.03, h=0.85H at (+-0.45W, +-0.45D)
"""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, cylinder, rounded_prism

CATEGORY = Category.TABLE
TYPICAL = Dimensions(1.2, 0.75, 0.8)

LEG_RADIUS = 0.03


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    """Generate a table (5 parts: top + 4 legs)."""
    top = rounded_prism(width, height * 0.1, depth, 0.02, (0, height * 0.9, 0))

    leg_h = height * 0.85
    legs = []
    for i in range(4):
        x = -width * 0.45 if i % 2 == 0 else width * 0.45
        z = -depth * 0.45 if i < 2 else depth * 0.45
        legs.append(cylinder(LEG_RADIUS, leg_h, (x, leg_h / 2, z)))

    return Shape((top, *legs))

"""Chair: a seat slab on four legs with a backrest.

Parts (fractions of the scanned width W, height H, depth D):
    seat:     0.9W x 0.05H x 0.9D at y=0.4H       (primary)
    backrest: 0.9W x 0.5H x 0.1D at y=0.65H, z=-0.4D
    legs:     4 cylinders r=0.02, h=0.4H standing on y=0 at (+-0.4W, +-0.4D)
"""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, cylinder, rounded_prism

CATEGORY = Category.CHAIR
TYPICAL = Dimensions(0.5, 0.9, 0.5)

LEG_RADIUS = 0.02


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    """Generate a chair (6 parts: seat + backrest + 4 legs)."""
    seat = rounded_prism(width * 0.9, height * 0.05, depth * 0.9, 0.01, (0, height * 0.4, 0))
    backrest = rounded_prism(
        width * 0.9, height * 0.5, depth * 0.1, 0.01, (0, height * 0.65, -depth * 0.4)
    )

    leg_h = height * 0.4
    legs = []
    for i in range(4):
        x = -width * 0.4 if i % 2 == 0 else width * 0.4
        z = -depth * 0.4 if i < 2 else depth * 0.4
        legs.append(cylinder(LEG_RADIUS, leg_h, (x, leg_h / 2, z)))

    return Shape((seat, backrest, *legs))

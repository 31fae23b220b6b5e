"""Sofa: seat, tall backrest and two armrests.

Parts:
    seat:     W x 0.3H x 0.8D at y=0.4H  (primary)
    backrest: W x 0.6H x 0.2D at y=0.65H, z=-0.3D
    armrests: 0.15W x 0.4H x 0.8D at y=0.55H, x=+-0.425W
"""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, rounded_prism

CATEGORY = Category.SOFA
TYPICAL = Dimensions(2.0, 0.85, 0.9)


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    """Generate a sofa (4 parts: seat + backrest + 2 armrests)."""
    seat = rounded_prism(width, height * 0.3, depth * 0.8, 0.05, (0, height * 0.4, 0))
    backrest = rounded_prism(
        width, height * 0.6, depth * 0.2, 0.05, (0, height * 0.65, -depth * 0.3)
    )
    arm_y = height * 0.55
    arm_x = width * 0.425
    left = rounded_prism(width * 0.15, height * 0.4, depth * 0.8, 0.03, (-arm_x, arm_y, 0))
    right = rounded_prism(width * 0.15, height * 0.4, depth * 0.8, 0.03, (arm_x, arm_y, 0))
    return Shape((seat, backrest, left, right))

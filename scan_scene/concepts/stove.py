"""Stove: cabinet base, cooktop slab and four burners.

The cooktop is the representative part, so it is marked primary even
though the base comes first.

Parts:
    base:    W x 0.8H x D at y=0.4H
    cooktop: 0.95W x 0.05H x 0.95D at y=0.825H  (primary)
    burners: 4 cylinders r=0.08, h=0.02 at (+-0.25W, 0.85H, +-0.25D)
"""

from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, cylinder, rounded_prism

CATEGORY = Category.STOVE
TYPICAL = Dimensions(0.76, 0.9, 0.65)

BURNER_RADIUS = 0.08
BURNER_HEIGHT = 0.02


@lru_cache(maxsize=128)
def generate(width: float, height: float, depth: float) -> Shape:
    """Generate a stove (6 parts: base + cooktop + 4 burners)."""
    base = rounded_prism(width, height * 0.8, depth, 0.02, (0, height * 0.4, 0))
    cooktop = rounded_prism(
        width * 0.95, height * 0.05, depth * 0.95, 0.01, (0, height * 0.825, 0)
    )

    burners = []
    for i in range(4):
        x = -width * 0.25 if i % 2 == 0 else width * 0.25
        z = -depth * 0.25 if i < 2 else depth * 0.25
        burners.append(cylinder(BURNER_RADIUS, BURNER_HEIGHT, (x, height * 0.85, z)))

    return Shape((base, cooktop, *burners), primary=1)

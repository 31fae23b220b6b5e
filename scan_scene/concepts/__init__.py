"""Shape builder registry: auto-discovers category modules in this package.

=== HOW TO ADD A NEW CATEGORY BUILDER ===

Each builder is a single Python file in this directory. It must define:

1. CATEGORY: the capture Category it shapes
2. TYPICAL: a Dimensions with a sensible real-world size (for the catalog)
3. A function `generate(width, height, depth) -> Shape`
   decorated with @lru_cache

That's it. Drop the file here and it's auto-discovered.

Example (scan_scene/concepts/fireplace.py):

    from functools import lru_cache

    from scan_scene.capture import Category, Dimensions
    from scan_scene.primitives import Shape, rounded_prism

    CATEGORY = Category.FIREPLACE
    TYPICAL = Dimensions(1.2, 1.1, 0.5)

    @lru_cache(maxsize=128)
    def generate(width: float, height: float, depth: float) -> Shape:
        return Shape((rounded_prism(width, height, depth * 0.3, 0.02),))

=== CONVENTIONS ===

Coordinate system:
    - Y-up, origin of the scanned object's bounding box
    - Offsets are fractions of (width, height, depth), so parts scale with
      the object

Sizes:
    - Full extents (see scan_scene.primitives)
    - Use rounded_prism() and cylinder(); they clamp degenerate input

Keep it simple:
    - Put the representative part first, or set Shape.primary
    - No colors here; appearance belongs to scan_scene.materials
"""

from __future__ import annotations

import importlib
import pkgutil
from functools import lru_cache

from scan_scene.capture import Category, Dimensions
from scan_scene.primitives import Shape, rounded_prism

DEFAULT_CORNER_RADIUS = 0.02

_registry: dict[Category, object] = {}


def _discover():
    """Auto-discover builder modules that define CATEGORY + generate."""
    for info in pkgutil.iter_modules(__path__):
        mod = importlib.import_module(f".{info.name}", __package__)
        if hasattr(mod, "generate") and hasattr(mod, "CATEGORY"):
            _registry[mod.CATEGORY] = mod


_discover()


@lru_cache(maxsize=128)
def default_shape(width: float, height: float, depth: float) -> Shape:
    """Fallback for unmapped categories: one rounded prism spanning the object."""
    return Shape((rounded_prism(width, height, depth, DEFAULT_CORNER_RADIUS),))


def get(category: Category):
    """Get a builder module by category. Raises KeyError if not found."""
    return _registry[category]


def list_categories() -> list[Category]:
    """List all categories with a dedicated builder."""
    return sorted(_registry.keys(), key=lambda c: c.value)


def all_builders() -> dict[Category, object]:
    """Return the full registry {category: module}."""
    return dict(_registry)


def build(category: Category | str | None, dimensions: Dimensions) -> Shape:
    """Shape for an object of the given category and size.

    Unknown, unset and unmapped categories get default_shape().
    """
    w, h, d = (float(v) for v in dimensions.as_tuple())
    mod = _registry.get(Category.parse(category))
    if mod is None:
        return default_shape(w, h, d)
    return mod.generate(w, h, d)

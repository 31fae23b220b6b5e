"""Material policy: the single table mapping entity types to appearance.

Builders never pick colors; the assembler asks the policy for every node.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from scan_scene.capture import Category, SurfaceKind


@dataclass(frozen=True)
class Material:
    """Visual appearance of a node.

    Attributes:
        name: Identifier used for the exported material asset
        rgba: Color and opacity (r, g, b, a), values in [0, 1]
    """

    name: str
    rgba: tuple[float, float, float, float]

    @property
    def opacity(self) -> float:
        return self.rgba[3]

    @property
    def is_translucent(self) -> bool:
        return self.rgba[3] < 1.0


# ---------------------------------------------------------------------------
# Appearance table
# ---------------------------------------------------------------------------

WALL = Material("wall", (0.67, 0.67, 0.67, 1.0))  # neutral light gray
DOOR = Material("door", (0.60, 0.40, 0.20, 1.0))  # warm brown
WINDOW = Material("window", (0.0, 1.0, 1.0, 0.7))  # translucent cyan
OPENING = Material("opening", (0.0, 0.0, 1.0, 0.5))  # translucent blue

FURNITURE = Material("furniture", (0.60, 0.40, 0.20, 1.0))
SANITARY = Material("sanitary", (1.0, 1.0, 1.0, 1.0))
APPLIANCE = Material("appliance", (0.67, 0.67, 0.67, 1.0))
SCREEN = Material("screen", (0.05, 0.05, 0.05, 1.0))
HEARTH = Material("hearth", (0.33, 0.33, 0.33, 1.0))
GENERIC = Material("other", (0.50, 0.50, 0.50, 1.0))

_SURFACES = {
    SurfaceKind.WALL: WALL,
    SurfaceKind.DOOR: DOOR,
    SurfaceKind.WINDOW: WINDOW,
    SurfaceKind.OPENING: OPENING,
}

_OBJECT_GROUPS = {
    FURNITURE: (Category.CHAIR, Category.TABLE, Category.BED, Category.SOFA),
    SANITARY: (Category.TOILET, Category.BATHTUB),
    APPLIANCE: (
        Category.OVEN,
        Category.DISHWASHER,
        Category.WASHER_DRYER,
        Category.REFRIGERATOR,
        Category.STOVE,
    ),
    SCREEN: (Category.TELEVISION,),
    HEARTH: (Category.FIREPLACE,),
}


@dataclass(frozen=True)
class MaterialPolicy:
    """Read-only lookup from surface kind / object category to Material.

    The tables are copied into read-only mappings on construction.
    """

    surfaces: Mapping[SurfaceKind, Material] = field(default_factory=dict)
    objects: Mapping[Category, Material] = field(default_factory=dict)
    fallback: Material = GENERIC

    def __post_init__(self):
        object.__setattr__(self, "surfaces", MappingProxyType(dict(self.surfaces)))
        object.__setattr__(self, "objects", MappingProxyType(dict(self.objects)))

    def material_for(self, kind: SurfaceKind | Category | str | None) -> Material:
        """Appearance for an entity type; unknown object types get the fallback."""
        if isinstance(kind, SurfaceKind):
            return self.surfaces.get(kind, self.fallback)
        if isinstance(kind, str):
            for surface_kind in SurfaceKind:
                if surface_kind.value == kind:
                    return self.surfaces.get(surface_kind, self.fallback)
        return self.objects.get(Category.parse(kind), self.fallback)

    def materials(self) -> list[Material]:
        """Every distinct material in the table, fallback included."""
        seen: dict[str, Material] = {}
        for m in (*self.surfaces.values(), *self.objects.values(), self.fallback):
            seen.setdefault(m.name, m)
        return list(seen.values())


DEFAULT_POLICY = MaterialPolicy(
    surfaces=dict(_SURFACES),
    objects={cat: mat for mat, cats in _OBJECT_GROUPS.items() for cat in cats},
)

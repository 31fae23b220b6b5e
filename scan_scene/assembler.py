"""Scene assembler: turns a CapturedRoom into a placed, materialized scene graph.

Every surface becomes a thin prism; every scanned object becomes one
composite node built by the shape registry. Nodes are placed by the
entity's own capture transform, so builder parts keep their local offsets.

Usage:
    room = CapturedRoom.load("Room.json")
    graph = assemble(room)
    for err in graph.errors:       # malformed entities that were skipped
        print(err)
    print(describe_scene(graph))
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field

import numpy as np

from scan_scene import concepts
from scan_scene.capture import (
    CapturedRoom,
    Category,
    Dimensions,
    ScannedObject,
    Surface,
    SurfaceKind,
    Transform,
)
from scan_scene.materials import DEFAULT_POLICY, Material, MaterialPolicy
from scan_scene.primitives import Prim, Shape, local_matrix, rounded_prism

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Surface geometry constants
# ---------------------------------------------------------------------------

WALL_THICKNESS = 0.1  # meters
OPENING_THICKNESS = 0.11  # doors, windows and openings sit proud of the wall

SURFACE_THICKNESS = {
    SurfaceKind.WALL: WALL_THICKNESS,
    SurfaceKind.DOOR: OPENING_THICKNESS,
    SurfaceKind.WINDOW: OPENING_THICKNESS,
    SurfaceKind.OPENING: OPENING_THICKNESS,
}

ShapeBuilder = Callable[[Category, Dimensions], Shape]

# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


class MalformedEntityError(ValueError):
    """A capture entity that cannot be turned into geometry.

    Collected on the SceneGraph rather than raised, so one bad entity
    never aborts the rest of the assembly.
    """

    def __init__(self, source: str, index: int, reason: str):
        self.source = source
        self.index = index
        self.reason = reason
        super().__init__(f"{source}[{index}]: {reason}")


@dataclass(frozen=True)
class SceneNode:
    """One top-level scene node: a composite shape placed in the world.

    Attributes:
        name: Unique node name, e.g. "wall_0" or "chair_2"
        source: Surface kind or object category the node was built from
        shape: Parts in the node's local frame, with the primary marked
        material: Appearance shared by every part
        placement: Local-to-world transform from the capture
    """

    name: str
    source: SurfaceKind | Category
    shape: Shape
    material: Material
    placement: Transform

    @property
    def primary(self) -> Prim:
        return self.shape.primary_part

    def part_matrices(self) -> list[np.ndarray]:
        """World 4x4 transform of every part, in part order."""
        world = self.placement.matrix
        return [world @ local_matrix(p) for p in self.shape.parts]


@dataclass
class SceneGraph:
    """Top-level nodes in traversal order, plus entities that were skipped."""

    nodes: list[SceneNode] = field(default_factory=list)
    errors: list[MalformedEntityError] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self):
        return iter(self.nodes)

    @property
    def ok(self) -> bool:
        return not self.errors

    def materials(self) -> list[Material]:
        """Distinct materials used by the nodes, in first-use order."""
        seen: dict[str, Material] = {}
        for node in self.nodes:
            seen.setdefault(node.material.name, node.material)
        return list(seen.values())


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _malformed_reason(entity: Surface | ScannedObject) -> str | None:
    """Why an entity can't be built, or None when it is well formed."""
    if entity.problem:
        return entity.problem
    dims = entity.dimensions
    if dims is None:
        return "missing dimensions"
    if not dims.is_finite:
        return f"non-finite dimensions {dims.as_tuple()}"
    if not dims.is_non_negative:
        return f"negative dimensions {dims.as_tuple()}"
    if entity.placement is None:
        return "missing placement"
    if not entity.placement.is_finite:
        return "non-finite placement"
    return None


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def surface_shape(kind: SurfaceKind, dimensions: Dimensions) -> Shape:
    """A surface is a single flat prism: scanned width x height, fixed thickness."""
    return Shape(
        (rounded_prism(dimensions.width, dimensions.height, SURFACE_THICKNESS[kind]),)
    )


def assemble(
    room: CapturedRoom,
    builder: ShapeBuilder = concepts.build,
    policy: MaterialPolicy = DEFAULT_POLICY,
) -> SceneGraph:
    """Build the scene graph for a captured room.

    Surfaces come first (wall, door, window, opening), then objects in
    capture order. Malformed entities are skipped and listed in
    SceneGraph.errors; everything else yields exactly one node.
    """
    graph = SceneGraph()
    counts: Counter[str] = Counter()

    def _name(label: str) -> str:
        name = f"{label}_{counts[label]}"
        counts[label] += 1
        return name

    for kind in SurfaceKind:
        material = policy.material_for(kind)
        for i, surface in enumerate(room.surfaces(kind)):
            reason = _malformed_reason(surface)
            if reason is not None:
                _skip(graph, kind.collection, i, reason)
                continue
            graph.nodes.append(
                SceneNode(
                    name=_name(kind.value),
                    source=kind,
                    shape=surface_shape(kind, surface.dimensions),
                    material=material,
                    placement=surface.placement,
                )
            )

    for i, obj in enumerate(room.objects):
        reason = _malformed_reason(obj)
        if reason is not None:
            _skip(graph, "objects", i, reason)
            continue
        graph.nodes.append(
            SceneNode(
                name=_name(obj.category.value),
                source=obj.category,
                shape=builder(obj.category, obj.dimensions),
                material=policy.material_for(obj.category),
                placement=obj.placement,
            )
        )

    log.debug(
        "Assembled %d nodes from %d entities (%d skipped)",
        len(graph.nodes),
        len(room),
        len(graph.errors),
    )
    return graph


def _skip(graph: SceneGraph, source: str, index: int, reason: str):
    err = MalformedEntityError(source, index, reason)
    log.warning("Skipping malformed entity %s", err)
    graph.errors.append(err)


# ---------------------------------------------------------------------------
# Scene description
# ---------------------------------------------------------------------------


def describe_node(node: SceneNode) -> str:
    """One-line description of a scene node."""
    x, y, z = node.placement.translation
    w, h, d = node.primary.size
    parts = len(node.shape)
    part_str = f", {parts} parts" if parts > 1 else ""
    return (
        f"{node.name} at ({x:+.2f}, {y:+.2f}, {z:+.2f})  "
        f"primary {w:.2f}x{h:.2f}x{d:.2f}{part_str}  [{node.material.name}]"
    )


def describe_scene(graph: SceneGraph) -> str:
    """Multi-line textual description of a scene graph.

    Example output:
        Scene  3 nodes
          [0] wall_0 at (+0.00, +1.20, -2.00)  primary 4.00x2.40x0.10  [wall]
          [1] chair_0 at (+0.50, +0.45, +0.30)  primary 0.45x0.04x0.45, 6 parts  [furniture]
          [2] other_0 at (-1.00, +1.00, +0.00)  primary 0.50x2.00x0.30  [other]
        Skipped 1 malformed entity
          objects[3]: negative dimensions (1.0, -0.5, 1.0)
    """
    lines = [f"Scene  {len(graph.nodes)} nodes"]
    for i, node in enumerate(graph.nodes):
        lines.append(f"  [{i}] {describe_node(node)}")
    if graph.errors:
        noun = "entity" if len(graph.errors) == 1 else "entities"
        lines.append(f"Skipped {len(graph.errors)} malformed {noun}")
        for err in graph.errors:
            lines.append(f"  {err}")
    return "\n".join(lines)

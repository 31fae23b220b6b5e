"""3D scene synthesis from room capture results.

Turns a scanned room (walls, doors, windows, openings and categorized
objects) into a scene graph of primitive solids. Each object category has
a parametric builder (chair, table, ...) that is a pure function:
dimensions -> composite Shape. Results are cached via @lru_cache.

Usage:
    from scan_scene import CapturedRoom, assemble, export_room

    room = CapturedRoom.load("Room.json")
    graph = assemble(room)          # SceneGraph, errors collected not raised
    export_room(room, graph=graph)  # Export/Room.json + Export/Room.xml
"""

from scan_scene.assembler import (
    MalformedEntityError,
    SceneGraph,
    SceneNode,
    assemble,
    describe_scene,
)
from scan_scene.capture import (
    CapturedRoom,
    Category,
    Dimensions,
    ScannedObject,
    Surface,
    SurfaceKind,
    Transform,
)
from scan_scene.export import ExportBundle, ExportError, export_room
from scan_scene.materials import DEFAULT_POLICY, Material, MaterialPolicy
from scan_scene.primitives import GeomType, Prim, Shape

__all__ = [
    "CapturedRoom",
    "Category",
    "Dimensions",
    "ScannedObject",
    "Surface",
    "SurfaceKind",
    "Transform",
    "SceneGraph",
    "SceneNode",
    "MalformedEntityError",
    "assemble",
    "describe_scene",
    "ExportBundle",
    "ExportError",
    "export_room",
    "Material",
    "MaterialPolicy",
    "DEFAULT_POLICY",
    "GeomType",
    "Prim",
    "Shape",
]

"""Primitive solids for scan scene synthesis.

Builders compose these to approximate scanned furniture. Every part is a
box (optionally with rounded vertical edges) or a cylinder.

Coordinate convention:
    - Y-up, matching the capture service's frame
    - Part positions are part centers in the owning object's local frame
    - A table top at 0.9m has pos=(0, 0.9, 0)

Size convention (full extents, not MuJoCo half-sizes):
    - BOX: (width, height, depth) along local (x, y, z)
    - CYLINDER: (radius, height, 0)  -- aligned along local Y
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

import mujoco
import numpy as np

ORIGIN = (0.0, 0.0, 0.0)


class GeomType(IntEnum):
    """Primitive kinds, valued as their MuJoCo geom types for export."""

    BOX = mujoco.mjtGeom.mjGEOM_BOX
    CYLINDER = mujoco.mjtGeom.mjGEOM_CYLINDER


@dataclass(frozen=True)
class Prim:
    """A single primitive positioned relative to an object's origin.

    Attributes:
        geom_type: Shape type (box or cylinder)
        size: Full extents, meaning depends on geom_type (see module doc)
        pos: Center position relative to object origin (x, y, z)
        euler: Rotation in radians (roll, pitch, yaw), default (0, 0, 0)
        corner_radius: Rounding of the vertical edges (BOX only)
    """

    geom_type: GeomType
    size: tuple[float, float, float]
    pos: tuple[float, float, float] = ORIGIN
    euler: tuple[float, float, float] = (0.0, 0.0, 0.0)
    corner_radius: float = 0.0


@dataclass(frozen=True)
class Shape:
    """A composite shape: ordered parts plus the index of the primary part.

    The primary part is the representative geometry of the object; the
    other parts are attached alongside it.
    """

    parts: tuple[Prim, ...]
    primary: int = 0

    def __post_init__(self):
        if not 0 <= self.primary < len(self.parts):
            raise ValueError(
                f"primary index {self.primary} out of range for {len(self.parts)} parts"
            )

    @property
    def primary_part(self) -> Prim:
        return self.parts[self.primary]

    @property
    def secondary_parts(self) -> tuple[Prim, ...]:
        return self.parts[: self.primary] + self.parts[self.primary + 1 :]

    def __len__(self) -> int:
        return len(self.parts)


def _length(value: float) -> float:
    """Clamp a length to a finite non-negative float."""
    value = float(value)
    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


# ---------------------------------------------------------------------------
# Primitive builders
# ---------------------------------------------------------------------------


def rounded_prism(
    width: float,
    height: float,
    depth: float,
    corner_radius: float = 0.0,
    pos: tuple[float, float, float] = ORIGIN,
    euler: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> Prim:
    """Axis-aligned box, vertical edges rounded by corner_radius.

    The radius is clamped to half the smaller horizontal extent.
    """
    w, h, d = _length(width), _length(height), _length(depth)
    radius = min(_length(corner_radius), min(w, d) / 2)
    return Prim(GeomType.BOX, (w, h, d), _vec(pos), _vec(euler), radius)


def cylinder(
    radius: float,
    height: float,
    pos: tuple[float, float, float] = ORIGIN,
    euler: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> Prim:
    """Cylinder along the local vertical (Y) axis."""
    return Prim(
        GeomType.CYLINDER, (_length(radius), _length(height), 0.0), _vec(pos), _vec(euler)
    )


def _vec(v) -> tuple[float, float, float]:
    x, y, z = v
    return (float(x), float(y), float(z))


# ---------------------------------------------------------------------------
# Rotation utilities
# ---------------------------------------------------------------------------


def euler_to_quat(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """Euler angles (XYZ extrinsic) to quaternion (w, x, y, z)."""
    cr, sr = np.cos(roll / 2), np.sin(roll / 2)
    cp, sp = np.cos(pitch / 2), np.sin(pitch / 2)
    cy, sy = np.cos(yaw / 2), np.sin(yaw / 2)
    return np.array(
        [
            cr * cp * cy + sr * sp * sy,
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
        ]
    )


def euler_to_matrix(euler: tuple[float, float, float]) -> np.ndarray:
    """3x3 rotation matrix for XYZ extrinsic Euler angles."""
    mat = np.zeros(9)
    mujoco.mju_quat2Mat(mat, euler_to_quat(*euler))
    return mat.reshape(3, 3)


def local_matrix(prim: Prim) -> np.ndarray:
    """4x4 transform from a part's own frame to its object's frame."""
    m = np.eye(4)
    if prim.euler != (0.0, 0.0, 0.0):
        m[:3, :3] = euler_to_matrix(prim.euler)
    m[:3, 3] = prim.pos
    return m


# ---------------------------------------------------------------------------
# Bounding box utilities
# ---------------------------------------------------------------------------


def half_extents(prim: Prim) -> np.ndarray:
    """Half-extents of a prim's axis-aligned box in its own frame."""
    if prim.geom_type == GeomType.CYLINDER:
        r, h, _ = prim.size
        return np.array([r, h / 2, r])
    return np.asarray(prim.size, dtype=float) / 2


def extent(prim: Prim) -> np.ndarray:
    """Full (x, y, z) extents of a prim in its object's frame, after rotation."""
    rot = np.abs(euler_to_matrix(prim.euler))
    return 2 * rot @ half_extents(prim)


def bounds(prims: tuple[Prim, ...]) -> tuple[np.ndarray, np.ndarray]:
    """Axis-aligned (min, max) corners around a set of prims.

    Returns two zero vectors for an empty set.
    """
    if not prims:
        return np.zeros(3), np.zeros(3)

    lo = np.full(3, np.inf)
    hi = np.full(3, -np.inf)
    for p in prims:
        half = extent(p) / 2
        center = np.asarray(p.pos)
        lo = np.minimum(lo, center - half)
        hi = np.maximum(hi, center + half)
    return lo, hi

"""Captured room data model: the scan result the scene is built from.

A CapturedRoom holds surfaces (walls, doors, windows, openings) and
scanned objects. It is read-only input: loaders build it once and nothing
downstream mutates it.

Record format (one JSON file per capture):

    {
      "walls":    [{"identifier": "...", "kind": "wall",
                    "dimensions": [w, h, d], "placement": [16 floats],
                    "confidence": "high"}, ...],
      "doors":    [...],
      "windows":  [...],
      "openings": [...],
      "objects":  [{"identifier": "...", "category": "chair",
                    "dimensions": [w, h, d], "placement": [16 floats],
                    "confidence": "medium"}, ...]
    }

Placements are 4x4 matrices flattened column-major (the capture service's
layout). "transform" is accepted as an alias of "placement", and categories
may also be written in the single-key form {"chair": {}}.

CaptureFormatError is for file-level damage only. An unusable dimensions
or placement value drops that field and sets the entity's problem, so the
rest of the room still loads.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import numpy as np


class CaptureFormatError(ValueError):
    """A capture record file could not be read as a CapturedRoom."""


class SurfaceKind(Enum):
    """Planar surface kinds, in scene traversal order."""

    WALL = "wall"
    DOOR = "door"
    WINDOW = "window"
    OPENING = "opening"

    @property
    def collection(self) -> str:
        """Name of the CapturedRoom field holding this kind."""
        return self.value + "s"


class Category(Enum):
    """Semantic object categories reported by the capture service."""

    CHAIR = "chair"
    TABLE = "table"
    BED = "bed"
    SOFA = "sofa"
    TOILET = "toilet"
    BATHTUB = "bathtub"
    OVEN = "oven"
    DISHWASHER = "dishwasher"
    REFRIGERATOR = "refrigerator"
    STOVE = "stove"
    TELEVISION = "television"
    FIREPLACE = "fireplace"
    WASHER_DRYER = "washerDryer"
    OTHER = "other"

    @classmethod
    def parse(cls, value) -> Category:
        """Coerce a raw category value; anything unrecognized is OTHER."""
        if isinstance(value, cls):
            return value
        if isinstance(value, dict) and len(value) == 1:
            value = next(iter(value))
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        return cls.OTHER


@dataclass(frozen=True)
class Dimensions:
    """Physical size in meters: width (x), height (y), depth (z)."""

    width: float
    height: float
    depth: float = 0.0

    @classmethod
    def from_sequence(cls, values) -> Dimensions:
        values = [float(v) for v in values]
        if len(values) not in (2, 3):
            raise ValueError(f"expected 2 or 3 dimension values, got {len(values)}")
        return cls(*values)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.width, self.height, self.depth)

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.as_tuple())

    @property
    def is_non_negative(self) -> bool:
        return all(v >= 0 for v in self.as_tuple())


@dataclass(frozen=True)
class Transform:
    """A 4x4 placement matrix, stored column-major as 16 floats."""

    values: tuple[float, ...]

    def __post_init__(self):
        if len(self.values) != 16:
            raise ValueError(f"transform needs 16 values, got {len(self.values)}")

    @classmethod
    def identity(cls) -> Transform:
        return cls.from_matrix(np.eye(4))

    @classmethod
    def from_matrix(cls, matrix) -> Transform:
        m = np.asarray(matrix, dtype=float).reshape(4, 4)
        return cls(tuple(float(v) for v in m.T.flatten()))

    @classmethod
    def from_translation(cls, x: float, y: float, z: float) -> Transform:
        m = np.eye(4)
        m[:3, 3] = (x, y, z)
        return cls.from_matrix(m)

    @property
    def matrix(self) -> np.ndarray:
        """Row-major 4x4 numpy matrix (translation in the last column)."""
        return np.array(self.values, dtype=float).reshape(4, 4).T

    @property
    def translation(self) -> tuple[float, float, float]:
        x, y, z = self.values[12:15]
        return (x, y, z)

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.values)

    def to_list(self) -> list[float]:
        return list(self.values)


@dataclass(frozen=True)
class Surface:
    """A wall, door, window or opening.

    dimensions and placement are None when the capture record omitted them
    or held an unusable value; problem then says what was wrong. The
    assembler reports such entities instead of guessing geometry.
    """

    kind: SurfaceKind
    dimensions: Dimensions | None
    placement: Transform | None
    identifier: str | None = None
    confidence: str | None = None
    problem: str | None = None

    def to_record(self) -> dict:
        return {
            "identifier": self.identifier,
            "kind": self.kind.value,
            "dimensions": _dims_record(self.dimensions),
            "placement": _placement_record(self.placement),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class ScannedObject:
    """A furniture-like object.

    label keeps the raw category string when it fell back to OTHER, so the
    record round-trips unchanged. dimensions, placement and problem follow
    the same rules as on Surface.
    """

    category: Category
    dimensions: Dimensions | None
    placement: Transform | None
    identifier: str | None = None
    confidence: str | None = None
    label: str | None = None
    problem: str | None = None

    def to_record(self) -> dict:
        return {
            "identifier": self.identifier,
            "category": self.label or self.category.value,
            "dimensions": _dims_record(self.dimensions),
            "placement": _placement_record(self.placement),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class CapturedRoom:
    """The full scan output: surfaces partitioned by kind, plus objects."""

    walls: tuple[Surface, ...] = ()
    doors: tuple[Surface, ...] = ()
    windows: tuple[Surface, ...] = ()
    openings: tuple[Surface, ...] = ()
    objects: tuple[ScannedObject, ...] = ()

    def surfaces(self, kind: SurfaceKind) -> tuple[Surface, ...]:
        return getattr(self, kind.collection)

    def all_surfaces(self) -> list[Surface]:
        """Every surface in traversal order (wall, door, window, opening)."""
        out: list[Surface] = []
        for kind in SurfaceKind:
            out.extend(self.surfaces(kind))
        return out

    def __len__(self) -> int:
        return len(self.all_surfaces()) + len(self.objects)

    # -------------------------------------------------------------------
    # Record (de)serialization
    # -------------------------------------------------------------------

    def to_dict(self) -> dict:
        out: dict[str, list[dict]] = {}
        for kind in SurfaceKind:
            out[kind.collection] = [s.to_record() for s in self.surfaces(kind)]
        out["objects"] = [o.to_record() for o in self.objects]
        return out

    @classmethod
    def from_dict(cls, data: dict) -> CapturedRoom:
        if not isinstance(data, dict):
            raise CaptureFormatError(
                f"capture record must be a JSON object, got {type(data).__name__}"
            )
        kwargs = {}
        for kind in SurfaceKind:
            records = _record_list(data, kind.collection)
            kwargs[kind.collection] = tuple(_surface_from(kind, r) for r in records)
        kwargs["objects"] = tuple(
            _object_from(r) for r in _record_list(data, "objects")
        )
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str | Path) -> CapturedRoom:
        """Read a capture record file."""
        try:
            data = json.loads(Path(path).read_text())
        except json.JSONDecodeError as e:
            raise CaptureFormatError(f"{path}: invalid JSON ({e})") from e
        return cls.from_dict(data)


# ---------------------------------------------------------------------------
# Record helpers
# ---------------------------------------------------------------------------


def _dims_record(dims: Dimensions | None) -> list[float] | None:
    return list(dims.as_tuple()) if dims is not None else None


def _placement_record(placement: Transform | None) -> list[float] | None:
    return placement.to_list() if placement is not None else None


def _record_list(data: dict, key: str) -> list[dict]:
    records = data.get(key) or []
    if not isinstance(records, list):
        raise CaptureFormatError(f"'{key}' must be a list of records")
    for r in records:
        if not isinstance(r, dict):
            raise CaptureFormatError(f"'{key}' entries must be objects")
    return records


def _parse_dimensions(record: dict) -> tuple[Dimensions | None, str | None]:
    """(dimensions, problem); a bad value is dropped and described instead."""
    raw = record.get("dimensions")
    if raw is None:
        return None, None
    try:
        return Dimensions.from_sequence(raw), None
    except (TypeError, ValueError) as e:
        return None, f"bad dimensions {raw!r} ({e})"


def _parse_placement(record: dict) -> tuple[Transform | None, str | None]:
    raw = record.get("placement", record.get("transform"))
    if raw is None:
        return None, None
    try:
        return Transform(tuple(float(v) for v in raw)), None
    except (TypeError, ValueError) as e:
        return None, f"bad placement {raw!r} ({e})"


def _parse_geometry(record: dict) -> dict:
    dimensions, dims_problem = _parse_dimensions(record)
    placement, placement_problem = _parse_placement(record)
    problems = [p for p in (dims_problem, placement_problem) if p]
    return {
        "dimensions": dimensions,
        "placement": placement,
        "problem": "; ".join(problems) or None,
    }


def _surface_from(kind: SurfaceKind, record: dict) -> Surface:
    return Surface(
        kind=kind,
        identifier=record.get("identifier"),
        confidence=record.get("confidence"),
        **_parse_geometry(record),
    )


def _object_from(record: dict) -> ScannedObject:
    raw = record.get("category")
    category = Category.parse(raw)
    if isinstance(raw, dict) and len(raw) == 1:
        raw = next(iter(raw))
    label = None
    if category == Category.OTHER and isinstance(raw, str):
        label = raw
    return ScannedObject(
        category=category,
        identifier=record.get("identifier"),
        confidence=record.get("confidence"),
        label=label,
        **_parse_geometry(record),
    )

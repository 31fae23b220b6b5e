"""Export pipeline: writes the raw capture and the assembled scene side by side.

Two artifacts per export, in one destination folder:
    Room.json  raw capture records (see scan_scene.capture for the format)
    Room.xml   the scene graph as MuJoCo MJCF, built through MjSpec

The MJCF layout mirrors the scene graph:
    worldbody
      room                 (rotates the capture's Y-up frame to MuJoCo Z-up)
        wall_0             (one body per scene node, placed by its transform)
          wall_0_g0        (one visual-only geom per part)
        chair_0
          chair_0_g0 ... chair_0_g5

Usage:
    bundle = export_room(room, ExportConfig(output_dir="Export"))
    bundle.files  # [Export/Room.json, Export/Room.xml]
"""

from __future__ import annotations

import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

import mujoco
import numpy as np

from scan_scene.assembler import SceneGraph, SceneNode, assemble
from scan_scene.capture import CapturedRoom
from scan_scene.config import ExportConfig
from scan_scene.primitives import GeomType, Prim, euler_to_matrix, euler_to_quat

log = logging.getLogger(__name__)

# Capture frame is Y-up; MuJoCo is Z-up
Y_UP_TO_Z_UP = euler_to_quat(np.pi / 2, 0.0, 0.0)
# MuJoCo cylinders run along their local Z; scene cylinders run along Y
_CYLINDER_AXIS = euler_to_quat(-np.pi / 2, 0.0, 0.0)
# MuJoCo rejects zero-size geoms; degenerate parts export this small instead
_MIN_HALF_SIZE = 0.0005


class ExportError(RuntimeError):
    """Writing an export bundle failed. The scene graph itself is unaffected."""


@dataclass
class ExportBundle:
    """Paths written by one export, ready to hand to a sharing step."""

    directory: Path
    room_path: Path
    scene_path: Path
    graph: SceneGraph
    archive_path: Path | None = None

    @property
    def files(self) -> list[Path]:
        return [self.room_path, self.scene_path]


# ---------------------------------------------------------------------------
# Transform helpers
# ---------------------------------------------------------------------------


def _decompose(matrix: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Split a 4x4 transform into (position, quat, per-axis scale).

    Assumes no shear. A collapsed axis (zero scale) falls back to an
    identity rotation.
    """
    linear = matrix[:3, :3]
    scale = np.linalg.norm(linear, axis=0)
    quat = np.array([1.0, 0.0, 0.0, 0.0])
    if np.all(scale > 1e-12):
        rot = linear / scale
        mujoco.mju_mat2Quat(quat, rot.flatten())
    return matrix[:3, 3].copy(), quat, scale


def _geom_size_and_quat(
    prim: Prim, scale: np.ndarray
) -> tuple[list[float], np.ndarray]:
    """MuJoCo geom size (half-extents) and local quat for a scaled part."""
    axis_scale = np.linalg.norm(np.diag(scale) @ euler_to_matrix(prim.euler), axis=0)
    quat = euler_to_quat(*prim.euler)

    if prim.geom_type == GeomType.CYLINDER:
        radius, height, _ = prim.size
        size = [
            radius * max(axis_scale[0], axis_scale[2]),
            height * axis_scale[1] / 2,
            0.0,
        ]
        combined = np.zeros(4)
        mujoco.mju_mulQuat(combined, quat, _CYLINDER_AXIS)
        quat = combined
        size = [max(size[0], _MIN_HALF_SIZE), max(size[1], _MIN_HALF_SIZE), 0.0]
    else:
        size = [max(float(v), _MIN_HALF_SIZE) for v in axis_scale * prim.size / 2]

    return size, quat


# ---------------------------------------------------------------------------
# MJCF
# ---------------------------------------------------------------------------


def _add_node(parent, node: SceneNode):
    """Add one scene node as a body with a geom per part."""
    pos, quat, scale = _decompose(node.placement.matrix)
    body = parent.add_body()
    body.name = node.name
    body.pos = pos
    body.quat = quat

    for j, prim in enumerate(node.shape.parts):
        size, geom_quat = _geom_size_and_quat(prim, scale)
        geom = body.add_geom()
        geom.name = f"{node.name}_g{j}"
        geom.type = mujoco.mjtGeom(int(prim.geom_type))
        geom.size = size
        geom.pos = scale * np.asarray(prim.pos)
        geom.quat = geom_quat
        geom.rgba = node.material.rgba
        geom.material = node.material.name
        geom.contype = 0
        geom.conaffinity = 0


def build_spec(graph: SceneGraph, model_name: str = "room") -> mujoco.MjSpec:
    """Build an uncompiled MjSpec holding every node of the scene graph."""
    spec = mujoco.MjSpec()
    spec.modelname = model_name

    for material in graph.materials():
        mat = spec.add_material()
        mat.name = material.name
        mat.rgba = material.rgba

    root = spec.worldbody.add_body()
    root.name = "room"
    root.quat = Y_UP_TO_Z_UP

    for node in graph.nodes:
        _add_node(root, node)
    return spec


def write_scene(graph: SceneGraph, path: str | Path, model_name: str = "room") -> Path:
    """Compile the scene graph and write it as MJCF XML."""
    path = Path(path)
    spec = build_spec(graph, model_name)
    spec.compile()
    path.write_text(spec.to_xml())
    return path


def write_captured_room(room: CapturedRoom, path: str | Path, indent: int = 2) -> Path:
    """Re-serialize the raw capture as structured records."""
    path = Path(path)
    path.write_text(json.dumps(room.to_dict(), indent=indent))
    return path


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


def export_room(
    room: CapturedRoom,
    config: ExportConfig | None = None,
    graph: SceneGraph | None = None,
) -> ExportBundle:
    """Write the capture records and the scene asset into one folder.

    The scene graph is assembled from the room unless one is passed in.
    Any I/O or asset compile failure raises ExportError.
    """
    config = config or ExportConfig()
    if graph is None:
        graph = assemble(room)

    out_dir = Path(config.output_dir)
    room_path = out_dir / config.room_filename
    scene_path = out_dir / config.scene_filename
    written: list[Path] = []
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        # Scene first: a compile failure leaves nothing behind
        written.append(write_scene(graph, scene_path, config.model_name))
        written.append(write_captured_room(room, room_path, config.json_indent))
    except (OSError, ValueError) as e:
        for path in written:
            path.unlink(missing_ok=True)
        if isinstance(e, OSError):
            raise ExportError(f"could not write export to {out_dir}: {e}") from e
        # MjSpec.compile reports invalid models as ValueError
        raise ExportError(f"could not compile scene asset: {e}") from e

    bundle = ExportBundle(
        directory=out_dir, room_path=room_path, scene_path=scene_path, graph=graph
    )
    log.info("Exported %d nodes to %s", len(graph), out_dir)

    if config.archive:
        # Resolved so "." zips as <parent>/<name>.zip, outside the folder
        target = out_dir.resolve()
        try:
            archive = shutil.make_archive(
                str(target), "zip", root_dir=target.parent, base_dir=target.name
            )
        except OSError as e:
            raise ExportError(f"could not archive {out_dir}: {e}") from e
        bundle.archive_path = Path(archive)
        log.info("Archived export to %s", archive)

    return bundle

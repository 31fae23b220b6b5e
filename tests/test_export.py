"""Export pipeline tests.

Validates that:
- Capture records and the MJCF scene are written side by side
- The written MJCF compiles and mirrors the scene graph (bodies, geoms, sizes)
- Placements survive the Y-up -> Z-up conversion
- Sink failures surface as ExportError
- The CLI wires load -> assemble -> export together
"""

import json
import zipfile
from pathlib import Path

import mujoco
import numpy as np
import pytest

from scan_scene.assembler import assemble
from scan_scene.capture import (
    CapturedRoom,
    Category,
    Dimensions,
    ScannedObject,
    Surface,
    SurfaceKind,
    Transform,
)
from scan_scene.cli import main
from scan_scene.config import ExportConfig
from scan_scene.export import ExportError, build_spec, export_room, write_scene
from scan_scene.primitives import GeomType

SAMPLE_ROOM = Path(__file__).resolve().parent / "data" / "room.json"


def _compiled(path: Path) -> tuple[mujoco.MjModel, mujoco.MjData]:
    model = mujoco.MjModel.from_xml_path(str(path))
    data = mujoco.MjData(model)
    mujoco.mj_forward(model, data)
    return model, data


def _geom(model: mujoco.MjModel, name: str) -> int:
    gid = mujoco.mj_name2id(model, mujoco.mjtObj.mjOBJ_GEOM, name)
    assert gid >= 0, f"geom {name} missing"
    return gid


# ---------------------------------------------------------------------------
# Bundle
# ---------------------------------------------------------------------------


class TestExportBundle:
    @pytest.fixture
    def room(self):
        return CapturedRoom.load(SAMPLE_ROOM)

    def test_writes_both_artifacts(self, room, tmp_path):
        out = tmp_path / "Export"
        bundle = export_room(room, ExportConfig(output_dir=str(out)))
        assert bundle.directory == out
        assert bundle.room_path == out / "Room.json"
        assert bundle.scene_path == out / "Room.xml"
        assert all(p.exists() for p in bundle.files)
        assert bundle.archive_path is None

    def test_records_match_capture(self, room, tmp_path):
        bundle = export_room(room, ExportConfig(output_dir=str(tmp_path)))
        records = json.loads(bundle.room_path.read_text())
        assert records == room.to_dict()
        assert len(records["walls"]) == 2
        assert records["objects"][1]["category"] == "chair"

    def test_scene_mirrors_graph(self, room, tmp_path):
        bundle = export_room(room, ExportConfig(output_dir=str(tmp_path)))
        model, _ = _compiled(bundle.scene_path)
        graph = bundle.graph
        # world + room root + one body per node
        assert model.nbody == len(graph) + 2
        assert model.ngeom == sum(len(n.shape) for n in graph)
        for node in graph:
            bid = mujoco.mj_name2id(model, mujoco.mjtObj.mjOBJ_BODY, node.name)
            assert bid >= 0, f"body {node.name} missing"

    def test_archive(self, room, tmp_path):
        out = tmp_path / "Export"
        bundle = export_room(room, ExportConfig(output_dir=str(out), archive=True))
        assert bundle.archive_path == (tmp_path / "Export.zip").resolve()
        with zipfile.ZipFile(bundle.archive_path) as zf:
            names = set(zf.namelist())
        assert "Export/Room.json" in names
        assert "Export/Room.xml" in names

    def test_archive_of_current_directory(self, room, tmp_path, monkeypatch):
        out = tmp_path / "Export"
        out.mkdir()
        monkeypatch.chdir(out)
        bundle = export_room(room, ExportConfig(output_dir=".", archive=True))
        assert bundle.archive_path == (tmp_path / "Export.zip").resolve()
        assert not list(out.glob("*.zip"))
        with zipfile.ZipFile(bundle.archive_path) as zf:
            assert "Export/Room.xml" in zf.namelist()

    def test_compile_failure_leaves_no_files(self, room, tmp_path, monkeypatch):
        def broken_scene(*args, **kwargs):
            raise ValueError("bad model")

        monkeypatch.setattr("scan_scene.export.write_scene", broken_scene)
        with pytest.raises(ExportError, match="compile"):
            export_room(room, ExportConfig(output_dir=str(tmp_path)))
        assert not (tmp_path / "Room.json").exists()
        assert not (tmp_path / "Room.xml").exists()

    def test_record_write_failure_removes_scene(self, room, tmp_path, monkeypatch):
        def broken_records(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr("scan_scene.export.write_captured_room", broken_records)
        with pytest.raises(ExportError, match="could not write"):
            export_room(room, ExportConfig(output_dir=str(tmp_path)))
        assert not (tmp_path / "Room.xml").exists()

    def test_uses_given_graph(self, room, tmp_path):
        graph = assemble(room)
        bundle = export_room(room, ExportConfig(output_dir=str(tmp_path)), graph=graph)
        assert bundle.graph is graph

    def test_destination_is_a_file(self, room, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("")
        with pytest.raises(ExportError):
            export_room(room, ExportConfig(output_dir=str(blocker)))


# ---------------------------------------------------------------------------
# MJCF geometry
# ---------------------------------------------------------------------------


class TestSceneAsset:
    def test_wall_half_sizes(self, tmp_path):
        room = CapturedRoom(
            walls=(Surface(SurfaceKind.WALL, Dimensions(3.0, 2.4), Transform.identity()),)
        )
        model, _ = _compiled(write_scene(assemble(room), tmp_path / "wall.xml"))
        gid = _geom(model, "wall_0_g0")
        assert model.geom_type[gid] == GeomType.BOX
        assert model.geom_size[gid] == pytest.approx([1.5, 1.2, 0.05])

    def test_chair_parts(self, tmp_path):
        room = CapturedRoom(
            objects=(
                ScannedObject(
                    Category.CHAIR, Dimensions(1.0, 1.0, 1.0), Transform.identity()
                ),
            )
        )
        model, data = _compiled(write_scene(assemble(room), tmp_path / "chair.xml"))
        seat = _geom(model, "chair_0_g0")
        leg = _geom(model, "chair_0_g2")
        assert model.geom_size[seat] == pytest.approx([0.45, 0.025, 0.45])
        assert model.geom_type[leg] == GeomType.CYLINDER
        assert model.geom_size[leg][:2] == pytest.approx([0.02, 0.2])
        # Seat 0.4 up in the capture's Y-up frame is 0.4 up in Z-up
        assert data.geom_xpos[seat] == pytest.approx([0.0, 0.0, 0.4], abs=1e-6)

    def test_placement_converted_to_z_up(self, tmp_path):
        placement = Transform.from_translation(1.0, 0.0, 2.0)
        room = CapturedRoom(
            objects=(ScannedObject(Category.CHAIR, Dimensions(1.0, 1.0, 1.0), placement),)
        )
        model, data = _compiled(write_scene(assemble(room), tmp_path / "moved.xml"))
        seat = _geom(model, "chair_0_g0")
        assert data.geom_xpos[seat] == pytest.approx([1.0, -2.0, 0.4], abs=1e-6)

    def test_legs_stand_upright(self, tmp_path):
        """Scene cylinders run along Y; exported ones must end up vertical."""
        room = CapturedRoom(
            objects=(
                ScannedObject(Category.TABLE, Dimensions(1.0, 1.0, 1.0), Transform.identity()),
            )
        )
        model, data = _compiled(write_scene(assemble(room), tmp_path / "table.xml"))
        leg = _geom(model, "table_0_g1")
        axis = data.geom_xmat[leg].reshape(3, 3)[:, 2]
        assert np.abs(axis) == pytest.approx([0.0, 0.0, 1.0], abs=1e-6)

    def test_rotated_wall(self, tmp_path):
        rot_y = np.eye(4)
        rot_y[:3, :3] = [[0, 0, 1], [0, 1, 0], [-1, 0, 0]]
        room = CapturedRoom(
            walls=(
                Surface(SurfaceKind.WALL, Dimensions(4.0, 2.0), Transform.from_matrix(rot_y)),
            )
        )
        model, data = _compiled(write_scene(assemble(room), tmp_path / "rot.xml"))
        gid = _geom(model, "wall_0_g0")
        # The wall's width now runs along the capture's -Z, i.e. world Y
        width_axis = data.geom_xmat[gid].reshape(3, 3)[:, 0]
        assert np.abs(width_axis) == pytest.approx([0.0, 1.0, 0.0], abs=1e-6)

    def test_scaled_placement(self, tmp_path):
        scaled = np.diag([2.0, 1.0, 1.0, 1.0])
        room = CapturedRoom(
            walls=(
                Surface(SurfaceKind.WALL, Dimensions(1.0, 1.0), Transform.from_matrix(scaled)),
            )
        )
        model, _ = _compiled(write_scene(assemble(room), tmp_path / "scaled.xml"))
        assert model.geom_size[_geom(model, "wall_0_g0")] == pytest.approx([1.0, 0.5, 0.05])

    def test_degenerate_object_still_compiles(self, tmp_path):
        room = CapturedRoom(
            objects=(ScannedObject(Category.STOVE, Dimensions(0, 0, 0), Transform.identity()),)
        )
        model, _ = _compiled(write_scene(assemble(room), tmp_path / "zero.xml"))
        assert model.ngeom == 6
        assert np.all(model.geom_size[:, 0] > 0)

    def test_materials_exported(self):
        graph = assemble(CapturedRoom.load(SAMPLE_ROOM))
        model = build_spec(graph).compile()
        assert model.nmat == len(graph.materials())
        window = mujoco.mj_name2id(model, mujoco.mjtObj.mjOBJ_MATERIAL, "window")
        assert model.mat_rgba[window][3] == pytest.approx(0.7)

    def test_geoms_are_visual_only(self):
        graph = assemble(CapturedRoom.load(SAMPLE_ROOM))
        model = build_spec(graph).compile()
        assert np.all(model.geom_contype == 0)
        assert np.all(model.geom_conaffinity == 0)

    def test_empty_room(self, tmp_path):
        model, _ = _compiled(write_scene(assemble(CapturedRoom()), tmp_path / "empty.xml"))
        assert model.ngeom == 0


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


class TestCli:
    def test_describe(self, capsys):
        assert main(["describe", str(SAMPLE_ROOM)]) == 0
        out = capsys.readouterr().out
        assert "Scene  8 nodes" in out
        assert "other_0" in out

    def test_export(self, tmp_path, capsys):
        out = tmp_path / "Export"
        assert main(["export", str(SAMPLE_ROOM), "--out", str(out)]) == 0
        assert (out / "Room.json").exists()
        assert (out / "Room.xml").exists()

    def test_missing_capture(self, tmp_path):
        assert main(["describe", str(tmp_path / "nope.json")]) == 1

    def test_malformed_entities_exit_code(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps(
                {"objects": [{"category": "bed", "dimensions": [1, -1, 2], "placement": None}]}
            )
        )
        assert main(["describe", str(path)]) == 2
        assert "Skipped 1 malformed entity" in capsys.readouterr().out

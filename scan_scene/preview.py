"""Offscreen previews: render a scene graph, or the builder catalog, to PNG.

Usage:
    render_scene(graph, "room.png")             # one framed render
    render_catalog(Path("docs/categories"))     # labeled grid of every builder
"""

from __future__ import annotations

import math
from pathlib import Path

import mujoco
import numpy as np
from PIL import Image, ImageDraw, ImageFont

from scan_scene import concepts
from scan_scene.assembler import SceneGraph, SceneNode
from scan_scene.capture import Transform
from scan_scene.config import PreviewConfig
from scan_scene.export import build_spec
from scan_scene.materials import DEFAULT_POLICY
from scan_scene.primitives import half_extents

# Catalog grid settings
CELL_W = 320
CELL_H = 320
LABEL_H = 32
LABEL_BG = (30, 32, 36)
LABEL_FG = (220, 220, 220)


def _world_bounds(graph: SceneGraph) -> tuple[np.ndarray, np.ndarray]:
    """Axis-aligned world bounds (Y-up) of every part in the graph."""
    lo = np.full(3, np.inf)
    hi = np.full(3, -np.inf)
    for node in graph.nodes:
        for prim, m in zip(node.shape.parts, node.part_matrices()):
            half = np.abs(m[:3, :3]) @ half_extents(prim)
            lo = np.minimum(lo, m[:3, 3] - half)
            hi = np.maximum(hi, m[:3, 3] + half)
    if not np.all(np.isfinite(lo)):
        return np.zeros(3), np.zeros(3)
    return lo, hi


def _camera_for(graph: SceneGraph, config: PreviewConfig) -> mujoco.MjvCamera:
    """A 3/4 overhead camera framing the whole graph.

    Bounds are Y-up; the MuJoCo camera works in the exported Z-up frame.
    """
    lo, hi = _world_bounds(graph)
    center = (lo + hi) / 2
    extent = max(float(np.max(hi - lo)), 0.3)

    cam = mujoco.MjvCamera()
    cam.lookat[:] = [center[0], -center[2], center[1]]
    cam.azimuth = config.azimuth
    cam.elevation = config.elevation
    cam.distance = extent * config.distance_scale
    return cam


def render_pixels(graph: SceneGraph, config: PreviewConfig | None = None) -> np.ndarray:
    """Render a scene graph, return an RGB array (height, width, 3)."""
    config = config or PreviewConfig()
    spec = build_spec(graph)
    spec.visual.global_.offwidth = max(config.width, 640)
    spec.visual.global_.offheight = max(config.height, 480)
    model = spec.compile()
    data = mujoco.MjData(model)
    mujoco.mj_forward(model, data)

    renderer = mujoco.Renderer(model, height=config.height, width=config.width)
    try:
        renderer.update_scene(data, _camera_for(graph, config))
        return renderer.render().copy()
    finally:
        renderer.close()


def render_scene(
    graph: SceneGraph, path: str | Path, config: PreviewConfig | None = None
) -> Path:
    """Render a scene graph to a PNG file."""
    path = Path(path)
    Image.fromarray(render_pixels(graph, config)).save(path)
    return path


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def _try_load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Try to load a nice font, fall back to default."""
    candidates = [
        "/System/Library/Fonts/SFNSMono.ttf",
        "/System/Library/Fonts/Menlo.ttc",
        "/System/Library/Fonts/Helvetica.ttc",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    ]
    for path in candidates:
        if Path(path).exists():
            try:
                return ImageFont.truetype(path, size)
            except OSError:
                continue
    return ImageFont.load_default()


def _single_node_graph(category) -> SceneGraph:
    mod = concepts.get(category)
    shape = mod.generate(*mod.TYPICAL.as_tuple())
    node = SceneNode(
        name=f"{category.value}_0",
        source=category,
        shape=shape,
        material=DEFAULT_POLICY.material_for(category),
        placement=Transform.identity(),
    )
    return SceneGraph(nodes=[node])


def render_catalog(out_dir: Path, config: PreviewConfig | None = None) -> Path:
    """Render every registered builder at its typical size into one labeled grid."""
    config = config or PreviewConfig()
    cell = PreviewConfig(
        width=CELL_W,
        height=CELL_H,
        azimuth=config.azimuth,
        elevation=config.elevation,
        distance_scale=config.distance_scale * 1.25,
    )

    categories = concepts.list_categories()
    n = len(categories)
    cols = min(4, n)
    rows = math.ceil(n / cols)
    cell_total_h = CELL_H + LABEL_H

    grid = Image.new("RGB", (cols * CELL_W, rows * cell_total_h), config.background)
    draw = ImageDraw.Draw(grid)
    font = _try_load_font(16)

    for idx, category in enumerate(categories):
        pixels = render_pixels(_single_node_graph(category), cell)
        x = (idx % cols) * CELL_W
        y = (idx // cols) * cell_total_h
        grid.paste(Image.fromarray(pixels), (x, y))

        # Label below the render
        label_y = y + CELL_H
        draw.rectangle([x, label_y, x + CELL_W, label_y + LABEL_H], fill=LABEL_BG)
        name = category.value
        bbox = font.getbbox(name)
        tw = bbox[2] - bbox[0]
        tx = x + (CELL_W - tw) // 2
        ty = label_y + (LABEL_H - (bbox[3] - bbox[1])) // 2
        draw.text((tx, ty), name, fill=LABEL_FG, font=font)

    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "catalog.png"
    grid.save(out_path)
    return out_path

"""
Centralized configuration for export and preview.

All settings in one place; the CLI overrides fields from its flags.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class ExportConfig:
    """Where and how an export bundle is written."""

    output_dir: str = "Export"
    room_filename: str = "Room.json"  # Raw capture records
    scene_filename: str = "Room.xml"  # Assembled scene as MJCF
    model_name: str = "room"
    json_indent: int = 2
    archive: bool = False  # Also zip the export folder for sharing

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class PreviewConfig:
    """Offscreen render settings."""

    width: int = 800
    height: int = 600
    azimuth: float = 135.0  # degrees
    elevation: float = -35.0  # degrees
    distance_scale: float = 1.6  # camera distance / scene extent
    background: tuple[int, int, int] = (40, 42, 48)

    def to_dict(self) -> dict:
        return asdict(self)

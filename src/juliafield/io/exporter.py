"""
Snapshot serialization module.

Exports the current frame of a particle field for external renderers:
a NumPy archive with every array, a JSON document with the driver
state, and a PNG preview of a single lattice layer.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import numpy as np
from PIL import Image

from juliafield.field import ParticleField


@dataclass
class SnapshotMetadata:
    """Metadata header for an exported frame."""

    count: int
    dimensions: tuple[int, int, int]
    unit: float
    max_iter: int
    frame: int
    driving_value: float
    velocity: float
    direction: str
    channel_order: tuple[int, int, int]
    schema_version: str = "1.0"


class SnapshotExporter:
    """Exports particle field frames to JSON, .npz and PNG."""

    def __init__(self, precision: int = 4):
        """
        Initialize the exporter.

        Args:
            precision: Decimal places for floating point values in JSON.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        return round(float(value), self.precision)

    def build_metadata(self, field: ParticleField) -> SnapshotMetadata:
        osc = field.oscillator
        return SnapshotMetadata(
            count=len(field),
            dimensions=tuple(int(d) for d in field.dimensions),
            unit=self._round(field.cfg.unit),
            max_iter=field.cfg.max_iter,
            frame=field.frame,
            driving_value=self._round(osc.position),
            velocity=self._round(osc.velocity),
            direction=osc.direction,
            channel_order=field.channel_order,
        )

    def build_snapshot(
        self,
        field: ParticleField,
        include_particles: bool = False,
    ) -> dict[str, Any]:
        """
        Build the snapshot dictionary.

        Args:
            field: Source field.
            include_particles: Add one record per particle. Large for
                full-size fields.

        Returns:
            Dictionary ready for JSON serialization.
        """
        meta = self.build_metadata(field)
        snapshot: dict[str, Any] = {
            "metadata": {
                "count": meta.count,
                "dimensions": list(meta.dimensions),
                "unit": meta.unit,
                "max_iter": meta.max_iter,
                "frame": meta.frame,
                "driving_value": meta.driving_value,
                "velocity": meta.velocity,
                "direction": meta.direction,
                "channel_order": list(meta.channel_order),
                "schema_version": meta.schema_version,
            },
        }

        if include_particles:
            snapshot["particles"] = [
                {
                    "position": [self._round(v) for v in position],
                    "color": [self._round(v) for v in color],
                }
                for position, color in field
            ]

        return snapshot

    def export_json(
        self,
        field: ParticleField,
        output_path: Union[str, Path],
        include_particles: bool = False,
        indent: int = 2,
    ) -> Path:
        """Write the snapshot dictionary as JSON."""
        snapshot = self.build_snapshot(field, include_particles=include_particles)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(snapshot, f, indent=indent)

        return output_path

    def export_numpy(
        self,
        field: ParticleField,
        output_path: Union[str, Path],
    ) -> Path:
        """
        Export the frame as a compressed NumPy archive.

        Args:
            field: Source field.
            output_path: Path for output .npz file.

        Returns:
            Path to written file.
        """
        output_path = Path(output_path)
        if output_path.suffix != ".npz":
            # savez_compressed appends the suffix itself
            output_path = output_path.with_name(output_path.name + ".npz")
        output_path.parent.mkdir(parents=True, exist_ok=True)

        np.savez_compressed(
            output_path,
            positions=field.positions,
            colors=field.colors,
            normalized=field.normalized_positions,
            lattice=field.lattice,
            dimensions=np.asarray(field.dimensions, dtype=np.int64),
            channel_order=np.asarray(field.channel_order, dtype=np.int64),
            driving_value=field.oscillator.position,
            velocity=field.oscillator.velocity,
            frame=field.frame,
        )

        return output_path

    def layer_image(self, field: ParticleField, layer: int = 0) -> np.ndarray:
        """
        Rasterize one z-layer of the lattice to an RGB image.

        Colors are clamped to [0, 1] here; the field itself never clamps.
        Cells no particle maps to stay black.

        Returns:
            (height, width, 3) uint8 array.
        """
        width, height, depth = field.dimensions
        if not 0 <= layer < depth:
            raise ValueError(f"Layer {layer} outside lattice depth {depth}")

        mask = field.lattice[:, 2] == layer
        xs = field.lattice[mask, 0]
        ys = field.lattice[mask, 1]
        rgb = np.clip(field.colors[mask, :3], 0.0, 1.0)

        image = np.zeros((height, width, 3), dtype=np.uint8)
        image[ys, xs] = (rgb * 255).astype(np.uint8)
        return image

    def export_layer_png(
        self,
        field: ParticleField,
        output_path: Union[str, Path],
        layer: int = 0,
        scale: int = 4,
    ) -> Path:
        """Write a nearest-neighbour upscaled PNG of one lattice layer."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        img = Image.fromarray(self.layer_image(field, layer))
        if scale > 1:
            img = img.resize((img.width * scale, img.height * scale), Image.NEAREST)
        img.save(output_path)

        return output_path


def load_snapshot(path: Union[str, Path]) -> dict[str, Any]:
    """Load an exported .npz snapshot into a plain dictionary."""
    with np.load(Path(path)) as data:
        snapshot = {key: data[key] for key in data.files}
    for key in ("driving_value", "velocity"):
        snapshot[key] = float(snapshot[key])
    snapshot["frame"] = int(snapshot["frame"])
    return snapshot

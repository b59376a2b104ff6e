"""Escape-time particle field for a 3D Julia set."""

from juliafield.errors import InvalidConfiguration
from juliafield.field import FieldConfig, Particle, ParticleField
from juliafield.io.exporter import SnapshotExporter

__version__ = "0.1.0"
__all__ = [
    "FieldConfig",
    "InvalidConfiguration",
    "Particle",
    "ParticleField",
    "SnapshotExporter",
]

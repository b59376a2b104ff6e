"""Snapshot export."""

from juliafield.io.exporter import SnapshotExporter, load_snapshot

__all__ = ["SnapshotExporter", "load_snapshot"]

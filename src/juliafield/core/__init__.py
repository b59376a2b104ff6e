"""Core particle field algorithms."""

from juliafield.core.channels import ChannelOrder
from juliafield.core.colorizer import colorize, escape_ratio
from juliafield.core.grid import DomainBounds, Grid, generate_grid, grid_dimensions
from juliafield.core.oscillator import Oscillator
from juliafield.core.permutation import build_permutation_table, next_permutation

__all__ = [
    "ChannelOrder",
    "DomainBounds",
    "Grid",
    "Oscillator",
    "build_permutation_table",
    "colorize",
    "escape_ratio",
    "generate_grid",
    "grid_dimensions",
    "next_permutation",
]

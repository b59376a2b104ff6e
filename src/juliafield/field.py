"""
Particle field.

Owns the particle lattice, the oscillator and the channel order, and
recomputes every particle's color once per frame. Consumers read
(display_position, color) pairs after each update.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, NamedTuple, Optional, Tuple

import numpy as np

from juliafield.core.channels import ChannelOrder
from juliafield.core.colorizer import BAILOUT, MAX_ITER, SPLIT, colorize
from juliafield.core.grid import DomainBounds, generate_grid
from juliafield.core.oscillator import Oscillator
from juliafield.core.permutation import build_permutation_table
from juliafield.errors import InvalidConfiguration

# 3^6 particles per render batch, 729 batches
BATCH_SIZE = 3 * 3 * 3 * 3 * 3 * 3
BATCH_MULTIPLE = 729
NUM_PARTICLES = BATCH_SIZE * BATCH_MULTIPLE

INITIAL_COLOR = (1.0, 1.0, 0.0, 1.0)


@dataclass
class FieldConfig:
    """Configuration for a particle field."""
    particle_count: int = NUM_PARTICLES
    unit: float = 0.2
    bounds: DomainBounds = field(default_factory=DomainBounds)

    # Escape-time iteration
    max_iter: int = MAX_ITER
    bailout: float = BAILOUT
    split: float = SPLIT

    # Oscillator
    initial_position: float = -2.0
    step: float = 0.0005

    # Performance
    workers: int = 1  # >1 colorizes contiguous chunks on a thread pool

    def validate(self):
        if self.particle_count <= 0:
            raise InvalidConfiguration(f"Particle count must be positive, got {self.particle_count}")
        if self.max_iter <= 0:
            raise InvalidConfiguration(f"Iteration bound must be positive, got {self.max_iter}")
        if self.workers <= 0:
            raise InvalidConfiguration(f"Worker count must be positive, got {self.workers}")
        self.bounds.validate()


# Named sizes for headless runs
PROFILES: Dict[str, Dict[str, float]] = {
    "small": {"particle_count": 27 ** 3, "unit": 0.6},
    "medium": {"particle_count": 54 ** 3, "unit": 0.3},
    "full": {"particle_count": NUM_PARTICLES, "unit": 0.2},
}


class Particle(NamedTuple):
    normalized_position: Tuple[float, float, float]
    display_position: Tuple[float, float, float]
    color: Tuple[float, float, float, float]


class ParticleField:
    """
    Particle lattice animated by an oscillating escape-time iteration.

    Positions are fixed at construction. ``update()`` advances the
    oscillator, rotates the channel order on a velocity reversal and then
    recolors every particle.
    """

    def __init__(self, config: FieldConfig | None = None):
        self.cfg = config or FieldConfig()
        self.cfg.validate()

        grid = generate_grid(self.cfg.particle_count, self.cfg.bounds, self.cfg.unit)
        self.dimensions = grid.dimensions
        self.lattice = grid.lattice
        self._normalized = grid.normalized
        self._display = grid.display

        self._colors = np.empty((grid.count, 4), dtype=np.float32)
        self._colors[:] = INITIAL_COLOR

        self.permutation = build_permutation_table()
        self.oscillator = Oscillator(position=self.cfg.initial_position, step_size=self.cfg.step)
        self.channels = ChannelOrder()
        self.frame = 0

    @classmethod
    def initialize(cls, count: int, **kwargs) -> "ParticleField":
        """Build a field of ``count`` particles; extra kwargs go to FieldConfig."""
        return cls(FieldConfig(particle_count=count, **kwargs))

    # --- Per-frame update ---

    def update(self):
        """Advance the oscillator and recolor every particle."""
        if self.oscillator.step():
            self.channels.rotate()

        driving_value = self.oscillator.position
        order = self.channels.order

        if self.cfg.workers > 1:
            self._colorize_parallel(driving_value, order)
        else:
            colorize(
                self._normalized,
                driving_value,
                order,
                max_iter=self.cfg.max_iter,
                bailout=self.cfg.bailout,
                split=self.cfg.split,
                out=self._colors,
            )

        self.frame += 1

    def _colorize_parallel(self, driving_value: float, order: Tuple[int, int, int]):
        bounds = np.linspace(0, len(self), self.cfg.workers + 1, dtype=np.int64)

        def work(start: int, stop: int):
            colorize(
                self._normalized[start:stop],
                driving_value,
                order,
                max_iter=self.cfg.max_iter,
                bailout=self.cfg.bailout,
                split=self.cfg.split,
                out=self._colors[start:stop],
            )

        with ThreadPoolExecutor(max_workers=self.cfg.workers) as pool:
            futures = [
                pool.submit(work, int(start), int(stop))
                for start, stop in zip(bounds[:-1], bounds[1:])
                if stop > start
            ]
            for future in futures:
                future.result()

    def run(
        self,
        frames: int,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> Iterator["ParticleField"]:
        """
        Update ``frames`` times as a generator.

        Yields:
            The field itself after each update, ready to be read.
        """
        for i in range(frames):
            self.update()
            yield self

            if progress_callback:
                progress_callback(i + 1, frames)

    def reset(self):
        """Return oscillator, channel order and colors to their initial state."""
        self.oscillator.reset()
        self.channels.reset()
        self._colors[:] = INITIAL_COLOR
        self.frame = 0

    # --- Read access ---

    @property
    def driving_value(self) -> float:
        return self.oscillator.position

    @property
    def channel_order(self) -> Tuple[int, int, int]:
        return self.channels.order

    @property
    def positions(self) -> np.ndarray:
        """(N, 3) float32 display positions."""
        return self._display

    @property
    def normalized_positions(self) -> np.ndarray:
        return self._normalized

    @property
    def colors(self) -> np.ndarray:
        """(N, 4) float32 RGBA, read-only view of the current frame."""
        view = self._colors.view()
        view.flags.writeable = False
        return view

    def particle(self, index: int) -> Particle:
        return Particle(
            normalized_position=tuple(float(v) for v in self._normalized[index]),
            display_position=tuple(float(v) for v in self._display[index]),
            color=tuple(float(v) for v in self._colors[index]),
        )

    def iter_batches(self, batch_size: int = BATCH_SIZE) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Yield (positions, colors) slices of at most ``batch_size`` particles."""
        if batch_size <= 0:
            raise InvalidConfiguration(f"Batch size must be positive, got {batch_size}")
        colors = self.colors
        for start in range(0, len(self), batch_size):
            yield self._display[start:start + batch_size], colors[start:start + batch_size]

    def __len__(self) -> int:
        return len(self._display)

    def __iter__(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        colors = self.colors
        for i in range(len(self)):
            yield self._display[i], colors[i]

"""
Escape-time colorizer.

Vectorized with numpy over the whole particle array. Each particle runs
the quadratic recurrence seeded from its normalized position and the
driving value; the escape ratio is then spread across the ordered color
channels and tone adjusted. Values are not clamped.
"""

from typing import Sequence

import numpy as np

MAX_ITER = 64
BAILOUT = 8.0
SPLIT = 1.0 / 3.0

# Fixed tone adjustments applied after distribution
LEAD_GAIN = 0.5
TAIL_GAIN = 0.02


def escape_iterations(
    a: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    d: np.ndarray,
    max_iter: int = MAX_ITER,
    bailout: float = BAILOUT,
) -> np.ndarray:
    """
    Count iterations until a*a + b*b leaves the bailout radius.

    Args:
        a, b: Starting iterate (driving value and z).
        c, d: Per-particle constants (x and y).
        max_iter: Iteration bound.
        bailout: Squared escape radius.

    Returns:
        int32 array of iteration counts in [0, max_iter].
    """
    a = np.array(a, dtype=np.float64)
    b = np.array(b, dtype=np.float64)
    c = np.broadcast_to(np.asarray(c, dtype=np.float64), a.shape)
    d = np.broadcast_to(np.asarray(d, dtype=np.float64), a.shape)

    iters = np.zeros(a.shape, dtype=np.int32)
    mask = np.ones(a.shape, dtype=bool)

    for _ in range(max_iter):
        mask &= (a * a + b * b) < bailout
        if not mask.any():
            break
        am = a[mask]
        bm = b[mask]
        temp = am * am - bm * bm + c[mask]
        b[mask] = 2.0 * am * bm + d[mask]
        a[mask] = temp
        iters[mask] += 1

    return iters


def escape_ratio(
    driving_value: float,
    normalized: np.ndarray,
    max_iter: int = MAX_ITER,
    bailout: float = BAILOUT,
) -> np.ndarray:
    """
    Escape ratio iter / max_iter for every particle.

    The iteration roles are a = driving value, b = z, c = x, d = y.
    A zero iteration bound yields all zeros.
    """
    normalized = np.asarray(normalized)
    if max_iter <= 0:
        return np.zeros(len(normalized), dtype=np.float64)

    a = np.full(len(normalized), driving_value, dtype=np.float64)
    iters = escape_iterations(
        a,
        normalized[:, 2],
        normalized[:, 0],
        normalized[:, 1],
        max_iter=max_iter,
        bailout=bailout,
    )
    return iters / float(max_iter)


def distribute_channels(ratio: np.ndarray, split: float = SPLIT) -> np.ndarray:
    """
    Spread the escape ratio over three ranked slots.

    Walking the slots in rank order, every slot reached while the
    remaining ratio exceeds ``split`` gets the full magnitude; the first
    slot where it no longer does gets ``remaining * 3 * magnitude`` and
    the walk stops. The last slot always terminates the walk.

    Args:
        ratio: (N,) escape ratios, also used as the magnitude.
        split: Per-slot budget.

    Returns:
        (3, N) float64 array, row k is the slot for ``order[k]``.
    """
    ratio = np.asarray(ratio, dtype=np.float64)
    magnitude = ratio
    remaining = ratio.copy()
    walking = np.ones(ratio.shape, dtype=bool)
    slots = np.zeros((3,) + ratio.shape, dtype=np.float64)

    for rank in range(3):
        if rank < 2:
            full = walking & (remaining > split)
        else:
            full = np.zeros(ratio.shape, dtype=bool)
        partial = walking & ~full

        slots[rank] = np.where(full, magnitude, 0.0)
        slots[rank] = np.where(partial, remaining * 3.0 * magnitude, slots[rank])

        remaining = np.where(full, remaining - split, remaining)
        walking = full

    return slots


def tone_adjust(slots: np.ndarray) -> np.ndarray:
    """Apply the fixed lead/tail tone curve in place, in rank order."""
    slots[0] -= slots[1]
    slots[1] -= slots[2]
    slots[0] *= LEAD_GAIN
    slots[2] *= TAIL_GAIN
    return slots


def colorize(
    normalized: np.ndarray,
    driving_value: float,
    order: Sequence[int],
    max_iter: int = MAX_ITER,
    bailout: float = BAILOUT,
    split: float = SPLIT,
    out: np.ndarray | None = None,
) -> np.ndarray:
    """
    Compute RGBA colors for a block of particles.

    Args:
        normalized: (N, 3) normalized positions.
        driving_value: Current oscillator position.
        order: Channel order, a permutation of (0, 1, 2).
        max_iter: Iteration bound.
        bailout: Squared escape radius.
        split: Per-channel budget.
        out: Optional (N, 4) float32 buffer to write into.

    Returns:
        (N, 4) float32 RGBA, alpha fixed at 1.0.
    """
    ratio = escape_ratio(driving_value, normalized, max_iter=max_iter, bailout=bailout)
    slots = tone_adjust(distribute_channels(ratio, split=split))

    if out is None:
        out = np.empty((len(ratio), 4), dtype=np.float32)

    for rank, channel in enumerate(order):
        out[:, channel] = slots[rank]
    out[:, 3] = 1.0

    return out

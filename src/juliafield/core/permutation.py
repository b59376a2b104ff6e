"""
Lexicographic permutation table.

Computed once when a field is initialized. Nothing in the update
pipeline reads it; with zero advances it is simply the sorted indices.
"""

import math
from typing import List, Sequence


def next_permutation(values: List[int]) -> bool:
    """
    Rearrange ``values`` in place into the next lexicographic permutation.

    Returns False (and leaves ``values`` sorted ascending) when the input
    was already the last permutation.
    """
    n = len(values)
    i = n - 2
    while i >= 0 and values[i] >= values[i + 1]:
        i -= 1

    if i < 0:
        values.reverse()
        return False

    j = n - 1
    while values[j] <= values[i]:
        j -= 1
    values[i], values[j] = values[j], values[i]
    values[i + 1:] = reversed(values[i + 1:])
    return True


def build_permutation_table(indices: Sequence[int] = (0, 1, 2, 3), advances: int = 0) -> List[int]:
    """Sort ``indices`` and advance them ``advances`` steps (mod n!)."""
    table = sorted(indices)
    for _ in range(advances % math.factorial(len(table))):
        next_permutation(table)
    return table

"""Color channel ordering."""

from typing import List, Tuple


class ChannelOrder:
    """
    Assignment of escape magnitude to the R, G, B channels.

    ``order[0]`` receives magnitude first, then ``order[1]``, then
    ``order[2]``. Rotated on every oscillation reversal.
    """

    def __init__(self, initial: Tuple[int, int, int] = (0, 1, 2)):
        if sorted(initial) != [0, 1, 2]:
            raise ValueError(f"Channel order must be a permutation of (0, 1, 2), got {initial}")
        self._initial = tuple(initial)
        self._order: List[int] = list(initial)
        self.rotations = 0

    @property
    def order(self) -> Tuple[int, int, int]:
        return tuple(self._order)

    def rotate(self):
        """Swap slots 0/1, then 1/2: (o0, o1, o2) -> (o1, o2, o0)."""
        o = self._order
        o[0], o[1] = o[1], o[0]
        o[1], o[2] = o[2], o[1]
        self.rotations += 1

    def reset(self):
        self._order = list(self._initial)
        self.rotations = 0

    def __getitem__(self, index: int) -> int:
        return self._order[index]

    def __repr__(self) -> str:
        return f"ChannelOrder({self.order})"

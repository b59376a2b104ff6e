"""
Oscillating driving value.

The oscillator accelerates toward zero from either side, flipping
direction whenever its position crosses zero. Its position is the 4th
coordinate of the escape-time iteration.
"""

from dataclasses import dataclass

FORWARD = True
BACKWARD = False


@dataclass
class Oscillator:
    """Scalar position/velocity state machine."""
    position: float = -2.0
    velocity: float = 0.0
    forward: bool = FORWARD
    step_size: float = 0.0005

    def __post_init__(self):
        self._initial = (self.position, self.velocity, self.forward)

    def step(self) -> bool:
        """
        Advance one frame.

        Returns:
            True when the velocity changed sign this step. This is a
            separate condition from the position-boundary flip and the two
            do not fire on the same frame in general.
        """
        last_velocity = self.velocity

        if self.forward:
            self.velocity += self.step_size
            self.position += self.velocity
            if self.position > 0:
                self.forward = BACKWARD
        else:
            self.velocity -= self.step_size
            self.position += self.velocity
            if self.position < 0:
                self.forward = FORWARD

        return (
            (self.velocity < 0 and last_velocity > 0)
            or (self.velocity > 0 and last_velocity < 0)
        )

    def reset(self):
        self.position, self.velocity, self.forward = self._initial

    @property
    def direction(self) -> str:
        return "forward" if self.forward else "backward"

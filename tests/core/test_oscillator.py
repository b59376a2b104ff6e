"""Tests for the oscillating driving value."""

import pytest

from juliafield.core.oscillator import Oscillator


class TestOscillator:
    def test_initial_state(self):
        osc = Oscillator()
        assert osc.position == -2.0
        assert osc.velocity == 0.0
        assert osc.forward
        assert osc.direction == "forward"

    def test_first_step(self):
        osc = Oscillator()
        reversed_ = osc.step()
        assert not reversed_, "Leaving zero velocity is not a reversal"
        assert osc.velocity == pytest.approx(0.0005)
        assert osc.position == pytest.approx(-1.9995)
        assert osc.forward

    def test_flips_direction_after_crossing_zero(self):
        osc = Oscillator()
        while osc.forward:
            osc.step()
        assert osc.position > 0
        assert osc.direction == "backward"

    def test_overshoot_bounded_by_velocity(self):
        osc = Oscillator()
        for _ in range(5000):
            was_forward = osc.forward
            osc.step()
            if was_forward:
                assert osc.position <= osc.velocity
            else:
                assert osc.position >= osc.velocity

    def test_reversal_matches_velocity_sign_change(self):
        osc = Oscillator()
        for _ in range(3000):
            last = osc.velocity
            event = osc.step()
            expected = (last > 0 > osc.velocity) or (last < 0 < osc.velocity)
            assert event == expected

    def test_reversal_and_boundary_flip_are_independent(self):
        osc = Oscillator()
        reversal_steps = set()
        flip_steps = set()
        for i in range(2000):
            was_forward = osc.forward
            if osc.step():
                reversal_steps.add(i)
            if osc.forward != was_forward:
                flip_steps.add(i)

        assert flip_steps
        assert reversal_steps.isdisjoint(flip_steps)

    def test_reset(self):
        osc = Oscillator(position=-1.0, step_size=0.01)
        for _ in range(50):
            osc.step()
        osc.reset()
        assert (osc.position, osc.velocity, osc.forward) == (-1.0, 0.0, True)

"""Tests for the escape-time colorizer."""

import numpy as np
import pytest

from juliafield.core.colorizer import (
    colorize,
    distribute_channels,
    escape_iterations,
    escape_ratio,
    tone_adjust,
)
from juliafield.core.grid import generate_grid


class TestEscapeIterations:
    def test_origin_never_escapes(self):
        zeros = np.zeros(1)
        iters = escape_iterations(zeros, zeros, zeros, zeros, max_iter=64)
        assert iters[0] == 64

    def test_outside_bailout_escapes_immediately(self):
        iters = escape_iterations(np.array([3.0]), np.zeros(1), np.zeros(1), np.zeros(1))
        assert iters[0] == 0

    def test_single_step_escape(self):
        # (2, 0) -> (4, 0): 4 < 8 passes once, 16 fails
        iters = escape_iterations(np.array([2.0]), np.zeros(1), np.zeros(1), np.zeros(1))
        assert iters[0] == 1

    def test_matches_scalar_loop(self):
        rng = np.random.default_rng(7)
        a, b, c, d = rng.uniform(-2.0, 2.0, size=(4, 200))

        iters = escape_iterations(a, b, c, d, max_iter=64)

        for k in range(200):
            x, y, n = a[k], b[k], 0
            while n < 64 and x * x + y * y < 8.0:
                x, y = x * x - y * y + c[k], 2.0 * x * y + d[k]
                n += 1
            assert iters[k] == n

    def test_inputs_not_mutated(self):
        a = np.array([0.5, 1.5])
        b = np.array([0.25, -0.5])
        escape_iterations(a, b, np.zeros(2), np.zeros(2))
        np.testing.assert_array_equal(a, [0.5, 1.5])
        np.testing.assert_array_equal(b, [0.25, -0.5])


class TestEscapeRatio:
    def test_range(self):
        grid = generate_grid(10 ** 3)
        ratio = escape_ratio(-0.5, grid.normalized)
        assert ratio.min() >= 0.0
        assert ratio.max() <= 1.0

    def test_origin_full_ratio(self):
        ratio = escape_ratio(0.0, np.zeros((1, 3), dtype=np.float32))
        assert ratio[0] == 1.0

    def test_axis_roles(self):
        # b comes from z: a large z escapes immediately, a large x does not
        z_heavy = np.array([[0.0, 0.0, 2.9]], dtype=np.float32)
        x_heavy = np.array([[2.9, 0.0, 0.0]], dtype=np.float32)
        assert escape_ratio(0.0, z_heavy)[0] == 0.0
        assert escape_ratio(0.0, x_heavy)[0] > 0.0

    def test_zero_iteration_bound(self):
        ratio = escape_ratio(0.0, np.zeros((4, 3)), max_iter=0)
        np.testing.assert_array_equal(ratio, np.zeros(4))


class TestDistributeChannels:
    def test_half_ratio(self):
        slots = distribute_channels(np.array([0.5]))
        assert slots[0, 0] == pytest.approx(0.5)
        assert slots[1, 0] == pytest.approx(0.25)
        assert slots[2, 0] == 0.0

    def test_low_ratio_fills_first_slot_only(self):
        slots = distribute_channels(np.array([0.2]))
        assert slots[0, 0] == pytest.approx(0.2 * 3 * 0.2)
        assert slots[1, 0] == 0.0
        assert slots[2, 0] == 0.0

    def test_full_ratio_reaches_last_slot(self):
        slots = distribute_channels(np.array([1.0]))
        np.testing.assert_allclose(slots[:, 0], [1.0, 1.0, 1.0])

    def test_zero_ratio(self):
        slots = distribute_channels(np.array([0.0]))
        np.testing.assert_array_equal(slots[:, 0], [0.0, 0.0, 0.0])


class TestToneAdjust:
    def test_half_ratio_final_triple(self):
        slots = tone_adjust(distribute_channels(np.array([0.5])))
        np.testing.assert_allclose(slots[:, 0], [0.125, 0.25, 0.0], atol=1e-12)

    def test_order_of_operations(self):
        slots = np.array([[1.0], [0.6], [0.2]])
        tone_adjust(slots)
        # lead uses the tail-free middle: (1.0 - 0.6) * 0.5
        np.testing.assert_allclose(slots[:, 0], [0.2, 0.4, 0.004])


class TestColorize:
    def test_shape_and_alpha(self):
        grid = generate_grid(125)
        colors = colorize(grid.normalized, -1.2, (0, 1, 2))
        assert colors.shape == (125, 4)
        assert colors.dtype == np.float32
        np.testing.assert_array_equal(colors[:, 3], 1.0)

    def test_channel_order_routes_slots(self):
        origin = np.zeros((1, 3), dtype=np.float32)
        identity = colorize(origin, 0.0, (0, 1, 2))
        rotated = colorize(origin, 0.0, (1, 2, 0))
        # full ratio leaves only the tail slot: 1.0 * 0.02
        np.testing.assert_allclose(identity[0], [0.0, 0.0, 0.02, 1.0], atol=1e-6)
        np.testing.assert_allclose(rotated[0], [0.02, 0.0, 0.0, 1.0], atol=1e-6)

    def test_writes_into_buffer(self):
        grid = generate_grid(27)
        out = np.zeros((27, 4), dtype=np.float32)
        result = colorize(grid.normalized, -2.0, (0, 1, 2), out=out)
        assert result is out
        np.testing.assert_array_equal(out[:, 3], 1.0)

    def test_deterministic(self):
        grid = generate_grid(8 ** 3)
        c1 = colorize(grid.normalized, -0.73, (2, 0, 1))
        c2 = colorize(grid.normalized, -0.73, (2, 0, 1))
        np.testing.assert_array_equal(c1, c2)

    def test_driving_value_changes_output(self):
        grid = generate_grid(8 ** 3)
        c1 = colorize(grid.normalized, -2.0, (0, 1, 2))
        c2 = colorize(grid.normalized, -0.5, (0, 1, 2))
        assert not np.allclose(c1, c2)

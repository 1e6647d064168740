"""Tests for the Fibonacci sphere scatter and 2D spiral fallback."""

import math

import pytest

from coinbubbles.layout.scatter import SPIRAL_RADIUS, scatter_position


class TestScatterPosition:
    """Tests for scatter_position."""

    def test_points_on_unit_sphere(self):
        for i in range(50):
            p = scatter_position(i, 50)
            assert p.x * p.x + p.y * p.y + p.z * p.z == pytest.approx(1.0)

    def test_z_follows_fibonacci_lattice(self):
        total = 20
        for i in range(total):
            p = scatter_position(i, total)
            assert p.z == pytest.approx(2 * (i + 0.5) / total - 1)

    def test_deterministic(self):
        assert scatter_position(7, 30) == scatter_position(7, 30)

    def test_depth_maps_z_into_range(self):
        p = scatter_position(3, 10, depth_range=(0.0, 10.0))

        assert p.depth == pytest.approx((p.z + 1) / 2 * 10.0)

    def test_single_item_sits_on_equator(self):
        p = scatter_position(0, 1)

        assert p.z == pytest.approx(0.0, abs=1e-12)

    def test_spiral_radius(self):
        total = 40
        for i in range(total):
            p = scatter_position(i, total)
            r = math.hypot(p.x2d, p.y2d)
            assert r == pytest.approx(math.sqrt((i + 0.5) / total) * SPIRAL_RADIUS)
            assert r <= SPIRAL_RADIUS

    def test_zero_total_does_not_fail(self):
        p = scatter_position(0, 0)

        assert math.isfinite(p.x) and math.isfinite(p.z)

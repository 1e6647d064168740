"""
Tests for the pack layout.

Tests cover:
- Coverage target selection
- Area scale derivation and clamping
- Fresh placement inside the viewport
- Rescale-only behavior for nodes that already have layout state
"""

import random

import pytest

from coinbubbles.config import EngineConfig
from coinbubbles.layout.nodes import Layout2DState, Node
from coinbubbles.layout.pack import compute_2d_layout, coverage_target, effective_scale
from coinbubbles.market.instrument import Instrument


def unpacked_nodes(radii):
    config = EngineConfig()
    return [
        Node(
            instrument=Instrument(id=f"n{i}"),
            radius=r,
            size_factor=(r - config.min_radius) / config.radius_span,
        )
        for i, r in enumerate(radii)
    ]


@pytest.fixture
def config() -> EngineConfig:
    return EngineConfig()


class TestCoverageTarget:
    """Tests for coverage_target."""

    @pytest.mark.parametrize("count,expected", [
        (10, 0.82),
        (60, 0.82),
        (61, 0.78),
        (80, 0.78),
        (81, 0.75),
        (250, 0.75),
    ])
    def test_by_batch_size(self, config, count, expected):
        assert coverage_target(count, 20.0, config) == pytest.approx(expected)

    def test_large_average_radius_reduces_coverage(self, config):
        assert coverage_target(10, 39.0, config) == pytest.approx(0.82 - 0.06)
        assert coverage_target(10, 80.0, config) == pytest.approx(0.70)

    def test_coverage_floor(self):
        config = EngineConfig(radius_inflation_cut=0.5)

        assert coverage_target(100, 80.0, config) == pytest.approx(0.62)


class TestComputeLayout:
    """Tests for compute_2d_layout."""

    def test_empty_batch(self, config):
        assert compute_2d_layout([], 800, 600, config) is None

    def test_every_node_gets_layout(self, config):
        nodes = unpacked_nodes([20, 30, 40, 50])
        result = compute_2d_layout(nodes, 1000, 800, config, random.Random(1))

        assert result.placed == 4
        assert result.rescaled == 0
        assert all(n.layout is not None for n in nodes)

    def test_scale_is_effective_times_area_scale(self, config):
        nodes = unpacked_nodes([20, 30, 40])
        result = compute_2d_layout(nodes, 1000, 800, config, random.Random(1))

        for n in nodes:
            assert n.layout.scale == pytest.approx(effective_scale(n, config) * result.area_scale)

    def test_area_scale_clamped_high(self, config):
        """Test that a sparse batch in a big viewport stops at the max scale."""
        nodes = unpacked_nodes([18, 18])
        result = compute_2d_layout(nodes, 3000, 3000, config, random.Random(1))

        assert result.area_scale == pytest.approx(config.area_scale_max)

    def test_area_scale_clamped_low(self, config):
        """Test that an overfull viewport stops at the min scale."""
        nodes = unpacked_nodes([80] * 40)
        result = compute_2d_layout(nodes, 200, 200, config, random.Random(1))

        assert result.area_scale == pytest.approx(config.area_scale_min)

    def test_positions_inside_viewport(self, config):
        nodes = unpacked_nodes([18 + i for i in range(30)])
        compute_2d_layout(nodes, 1200, 900, config, random.Random(5))

        for n in nodes:
            inset = config.pack_margin + n.scaled_radius
            assert inset <= n.layout.x <= 1200 - inset
            assert inset <= n.layout.y <= 900 - inset

    def test_initial_velocity_and_phase_ranges(self, config):
        nodes = unpacked_nodes([20] * 25)
        compute_2d_layout(nodes, 1200, 900, config, random.Random(5))

        for n in nodes:
            assert -5.0 <= n.layout.vx <= 5.0
            assert -5.0 <= n.layout.vy <= 5.0
            assert 0.0 <= n.layout.seed < 6.3
            assert 0.0 <= n.layout.t < 6.3

    def test_viewport_floored(self, config):
        """Test that a zero-size viewport is treated as 200x200."""
        nodes = unpacked_nodes([18, 18])
        compute_2d_layout(nodes, 0, 0, config, random.Random(3))

        for n in nodes:
            assert 0 < n.layout.x < 200
            assert 0 < n.layout.y < 200

    def test_seeded_layout_is_reproducible(self, config):
        a = unpacked_nodes([20, 30, 40])
        b = unpacked_nodes([20, 30, 40])
        compute_2d_layout(a, 900, 700, config, random.Random(11))
        compute_2d_layout(b, 900, 700, config, random.Random(11))

        assert [n.layout for n in a] == [n.layout for n in b]

    def test_existing_layout_only_rescaled(self, config):
        """Test that packed nodes keep position and velocity."""
        nodes = unpacked_nodes([20, 30])
        nodes[0].layout = Layout2DState(x=123.0, y=45.0, scale=9.0, vx=1.5, vy=-2.5, seed=1.0, t=2.0)

        result = compute_2d_layout(nodes, 900, 700, config, random.Random(2))

        kept = nodes[0].layout
        assert (kept.x, kept.y, kept.vx, kept.vy, kept.seed, kept.t) == (123.0, 45.0, 1.5, -2.5, 1.0, 2.0)
        assert kept.scale == pytest.approx(effective_scale(nodes[0], config) * result.area_scale)
        assert result.placed == 1
        assert result.rescaled == 1

"""
Shared test fixtures for CoinBubbles tests.

Provides reusable instrument batches, engine configs and seeded random
sources for testing layout, physics and the CLI.
"""

import random
from typing import Dict, List

import pytest

from coinbubbles.config import EngineConfig
from coinbubbles.layout.nodes import Layout2DState, Node
from coinbubbles.market.instrument import Instrument


def make_instrument(ident: str, cap: float = 1e9, volume: float = 1e8,
                    change_24h: float = 0.0, **kwargs) -> Instrument:
    """Instrument with sensible defaults for tests."""
    return Instrument(
        id=ident,
        symbol=kwargs.pop("symbol", ident[:4]),
        name=kwargs.pop("name", ident.title()),
        market_cap=cap,
        total_volume=volume,
        change_24h=change_24h,
        current_price=kwargs.pop("current_price", 1.0),
        **kwargs,
    )


def make_node(ident: str, x: float, y: float, radius: float = 20.0, scale: float = 1.0,
              vx: float = 0.0, vy: float = 0.0) -> Node:
    """Laid-out node at a fixed position."""
    return Node(
        instrument=make_instrument(ident),
        radius=radius,
        size_factor=0.0,
        layout=Layout2DState(x=x, y=y, scale=scale, vx=vx, vy=vy),
    )


@pytest.fixture
def market_records() -> List[Dict]:
    """Raw coin-markets style records."""
    return [
        {
            "id": "bitcoin",
            "symbol": "btc",
            "name": "Bitcoin",
            "image": "https://example.invalid/btc.png",
            "current_price": 64000.5,
            "market_cap": 1.26e12,
            "total_volume": 3.1e10,
            "market_cap_rank": 1,
            "price_change_percentage_1h_in_currency": 0.12,
            "price_change_percentage_24h": -1.8,
            "price_change_percentage_7d_in_currency": 4.2,
            "price_change_percentage_30d_in_currency": 9.9,
            "price_change_percentage_1y_in_currency": 120.0,
        },
        {
            "id": "ethereum",
            "symbol": "eth",
            "name": "Ethereum",
            "current_price": 3100.0,
            "market_cap": 3.7e11,
            "total_volume": 1.5e10,
            "market_cap_rank": 2,
            "price_change_percentage_24h": 2.5,
        },
        {
            "id": "tether",
            "symbol": "usdt",
            "name": "Tether",
            "current_price": 1.0,
            "market_cap": 1.1e11,
            "total_volume": 4.5e10,
            "market_cap_rank": 3,
            "price_change_percentage_24h": 0.01,
        },
    ]


@pytest.fixture
def ranked_batch() -> List[Instrument]:
    """Thirty instruments with geometrically falling caps and volumes."""
    return [
        make_instrument(
            f"coin{i:02d}",
            cap=5e11 * (0.8 ** i),
            volume=2e10 * (0.85 ** i),
            change_24h=(i % 7) - 3.0,
        )
        for i in range(30)
    ]


@pytest.fixture
def default_config() -> EngineConfig:
    return EngineConfig()


@pytest.fixture
def still_config() -> EngineConfig:
    """Config with wander, jitter and damping disabled to isolate collisions."""
    return EngineConfig(wander_strength=0.0, jitter_strength=0.0, velocity_damping=1.0)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def instrument_factory():
    return make_instrument


@pytest.fixture
def node_factory():
    return make_node

import numpy as np
import pytest

from photon.config import ArenaConfig
from photon.game.world import GameWorld


@pytest.fixture
def cfg():
    return ArenaConfig()


@pytest.fixture
def world():
    """A fresh world with the generated first row removed."""
    w = GameWorld(seed=0)
    w.grid.clear()
    return w


@pytest.fixture
def make_projectile():
    def _make(world: GameWorld, pos: list, vel: list, radius: float = 5.0, damage: int = 1, pierce: int = 0):
        idx = world.pool.acquire()
        assert idx is not None
        p = world.pool.slots[idx]
        p.pos[:] = np.array(pos, dtype=np.float64)
        p.vel[:] = np.array(vel, dtype=np.float64)
        p.radius = radius
        p.damage = damage
        p.pierce = pierce
        return p

    return _make

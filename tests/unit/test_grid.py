import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from photon.config import ArenaConfig
from photon.gen.level import populate_row, roll_hp
from photon.powerups import FAIRNESS_WEIGHTS, PowerupKind
from photon.sim.grid import BlockGrid


def test_block_geometry_derived_from_row_and_col(cfg):
    grid = BlockGrid(cfg)
    b = grid.add(row=2, col=3, hp=4)

    assert b.x == pytest.approx(3 * 45.0 + 2.0)
    assert b.y == pytest.approx(60.0 + 2 * 28.0 + 2.0)
    assert b.w == pytest.approx(41.0)
    assert b.h == pytest.approx(24.0)
    assert b.hp == b.max_hp == 4
    assert b.alive


def test_make_block_rejects_bad_input(cfg):
    grid = BlockGrid(cfg)
    with pytest.raises(ValueError):
        grid.add(row=0, col=cfg.grid_cols, hp=1)
    with pytest.raises(ValueError):
        grid.add(row=0, col=0, hp=0)


def test_advance_level_shifts_blocks_down(cfg):
    grid = BlockGrid(cfg)
    old = grid.add(row=0, col=3, hp=5)

    assert grid.advance_level(2, np.random.default_rng(0))

    assert old.row == 1
    assert old.y == pytest.approx(cfg.block_y(1))
    assert len(grid.blocks_in_row(0)) >= 1


def test_game_over_row_matches_band(cfg):
    grid = BlockGrid(cfg)
    row = grid.game_over_row()
    # Default geometry: bottom of row r is 86 + 28r, band top is 580.
    assert row == 18
    assert cfg.block_y(row) + cfg.block_h > cfg.danger_y
    assert cfg.block_y(row - 1) + cfg.block_h <= cfg.danger_y


def test_advance_level_signals_game_over_without_mutation(cfg):
    grid = BlockGrid(cfg)
    last_safe = grid.game_over_row() - 1
    low = grid.add(row=last_safe, col=0, hp=1)
    high = grid.add(row=0, col=5, hp=1)

    assert not grid.advance_level(9, np.random.default_rng(0))

    assert len(grid) == 2
    assert low.row == last_safe
    assert high.row == 0
    assert low.y == pytest.approx(cfg.block_y(last_safe))


def test_advance_level_allows_block_one_row_above_limit(cfg):
    grid = BlockGrid(cfg)
    b = grid.add(row=grid.game_over_row() - 2, col=0, hp=1)
    assert grid.advance_level(9, np.random.default_rng(0))
    assert b.bottom <= cfg.danger_y


def test_roll_hp_early_levels_equal_level():
    rng = np.random.default_rng(0)
    for level in range(1, 6):
        assert roll_hp(level, rng) == level


@settings(deadline=None, max_examples=50)
@given(seed=st.integers(min_value=0, max_value=2**31 - 1), level=st.integers(min_value=1, max_value=60))
def test_prop_new_row_never_empty(seed, level):
    cfg = ArenaConfig()
    grid = BlockGrid(cfg)
    spawned = populate_row(grid, level, np.random.default_rng(seed))

    row0 = grid.blocks_in_row(0)
    assert len(row0) >= 1
    assert len(spawned) == len(row0)
    assert len({b.col for b in row0}) == len(row0)
    for b in row0:
        if level <= 5:
            assert b.hp == level
        else:
            assert max(1, level - 2) <= b.hp <= level
        assert b.hp == b.max_hp


@settings(deadline=None, max_examples=25)
@given(seed=st.integers(min_value=0, max_value=2**31 - 1))
def test_prop_forced_block_when_nothing_spawns(seed):
    cfg = ArenaConfig(block_spawn_chance=0.0, powerup_chance=0.0)
    grid = BlockGrid(cfg)
    populate_row(grid, 4, np.random.default_rng(seed))
    assert len(grid) == 1
    assert grid.blocks[0].row == 0
    assert grid.blocks[0].powerup is None


def test_cadence_level_guarantees_one_powerup():
    cfg = ArenaConfig(block_spawn_chance=1.0, powerup_chance=0.0, powerup_cadence=3)
    for seed in range(10):
        grid = BlockGrid(cfg)
        populate_row(grid, 3, np.random.default_rng(seed))
        assert len(grid) == cfg.grid_cols
        assert sum(1 for b in grid.blocks if b.powerup is not None) == 1


def test_off_cadence_level_gets_no_forced_powerup():
    cfg = ArenaConfig(block_spawn_chance=1.0, powerup_chance=0.0, powerup_cadence=3)
    grid = BlockGrid(cfg)
    populate_row(grid, 4, np.random.default_rng(0))
    assert all(b.powerup is None for b in grid.blocks)


def test_fairness_table_favors_most_common_kind():
    table = dict(FAIRNESS_WEIGHTS)
    assert table[PowerupKind.MULTI] == pytest.approx(60.0)
    assert table[PowerupKind.LASER] == pytest.approx(6.0)


def test_iteration_is_back_to_front(cfg):
    grid = BlockGrid(cfg)
    a = grid.add(0, 0, 1)
    b = grid.add(0, 1, 1)
    c = grid.add(1, 2, 1)
    assert list(grid.iter_back_to_front()) == [c, b, a]


def test_remove_drops_block_from_grid(cfg):
    grid = BlockGrid(cfg)
    a = grid.add(0, 0, 1)
    grid.remove(a)
    assert not a.alive
    assert len(grid) == 0


def test_block_ids_are_per_grid_and_reset_on_clear(cfg):
    a = BlockGrid(cfg)
    b = BlockGrid(cfg)
    assert [a.add(0, c, 1).block_id for c in range(3)] == [0, 1, 2]
    assert b.add(0, 5, 1).block_id == 0
    a.clear()
    assert a.add(1, 1, 2).block_id == 0

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ..powerups import FAIRNESS_WEIGHTS, select_weighted

if TYPE_CHECKING:
    from ..sim.grid import Block, BlockGrid

logger = logging.getLogger(__name__)


def roll_hp(level: int, rng: np.random.Generator) -> int:
    """Early levels use the level number; later ones draw from [level-2, level]."""
    if level <= 5:
        return max(1, level)
    lo = max(1, level - 2)
    return int(rng.integers(lo, level + 1))


def populate_row(grid: BlockGrid, level: int, rng: np.random.Generator) -> list[Block]:
    """
    Fill row 0 for a new level:
    1. Roll each column for a block (and an optional power-up).
    2. Never leave the row empty: force one block at a random column.
    3. On cadence levels with no power-up in the row, attach one retroactively.
    """
    cfg = grid.config
    spawned: list[Block] = []

    for col in range(cfg.grid_cols):
        if rng.random() >= cfg.block_spawn_chance:
            continue
        hp = roll_hp(level, rng)
        powerup = None
        if rng.random() < cfg.powerup_chance:
            powerup = select_weighted(rng)
        spawned.append(grid.add(0, col, hp, powerup))

    if not spawned:
        col = int(rng.integers(0, cfg.grid_cols))
        spawned.append(grid.add(0, col, roll_hp(level, rng)))

    has_powerup = any(b.powerup is not None for b in spawned)
    if not has_powerup and cfg.powerup_cadence > 0 and level % cfg.powerup_cadence == 0:
        candidates = [b for b in spawned if b.powerup is None]
        target = candidates[int(rng.integers(0, len(candidates)))]
        target.powerup = select_weighted(rng, FAIRNESS_WEIGHTS)

    logger.debug(
        f"level {level}: spawned {len(spawned)} blocks, "
        f"powerups={[b.powerup.name for b in spawned if b.powerup is not None]}"
    )
    return spawned

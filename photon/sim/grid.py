from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

from ..config import ArenaConfig
from ..powerups import PowerupKind

if TYPE_CHECKING:
    import numpy as np


@dataclass
class Block:
    row: int
    col: int
    hp: int
    max_hp: int  # fixes the color tier
    x: float
    y: float
    w: float
    h: float
    powerup: PowerupKind | None = None
    alive: bool = True
    block_id: int = 0  # unique within its grid until the next clear

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)

    @property
    def bottom(self) -> float:
        return self.y + self.h


class BlockGrid:
    """Owns the live blocks. Blocks are removed from the list the moment they die."""

    def __init__(self, config: ArenaConfig):
        self.config = config
        self.blocks: list[Block] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self.blocks)

    def clear(self) -> None:
        self.blocks = []
        self._next_id = 0

    def make_block(self, row: int, col: int, hp: int, powerup: PowerupKind | None = None) -> Block:
        if not 0 <= col < self.config.grid_cols:
            raise ValueError(f"column {col} outside grid of {self.config.grid_cols} columns")
        if hp <= 0:
            raise ValueError(f"block hp must be positive, got {hp}")
        cfg = self.config
        block_id = self._next_id
        self._next_id += 1
        return Block(
            row=row,
            col=col,
            hp=hp,
            max_hp=hp,
            x=cfg.block_x(col),
            y=cfg.block_y(row),
            w=cfg.block_w,
            h=cfg.block_h,
            powerup=powerup,
            block_id=block_id,
        )

    def add(self, row: int, col: int, hp: int, powerup: PowerupKind | None = None) -> Block:
        block = self.make_block(row, col, hp, powerup)
        self.blocks.append(block)
        return block

    def remove(self, block: Block) -> None:
        block.alive = False
        self.blocks.remove(block)

    def iter_back_to_front(self) -> Iterator[Block]:
        # Snapshot so callers may remove while iterating.
        for block in reversed(list(self.blocks)):
            if block.alive:
                yield block

    def blocks_in_row(self, row: int) -> list[Block]:
        return [b for b in self.blocks if b.alive and b.row == row]

    def bottom_after_shift(self, block: Block) -> float:
        return self.config.block_y(block.row + 1) + block.h

    def game_over_row(self) -> int:
        """Smallest row index whose block bottom lies past the launch band's top edge."""
        cfg = self.config
        row = 0
        while cfg.block_y(row) + cfg.block_h <= cfg.danger_y:
            row += 1
        return row

    def would_cross_band(self) -> bool:
        danger_y = self.config.danger_y
        return any(self.bottom_after_shift(b) > danger_y for b in self.blocks if b.alive)

    def shift_down(self) -> None:
        for block in self.blocks:
            block.row += 1
            block.y = self.config.block_y(block.row)

    def advance_level(self, level: int, rng: np.random.Generator) -> bool:
        """Shift every block one row and spawn a new top row.

        Returns False (and leaves the grid untouched) if the shift would push a
        block into the launch band.
        """
        if self.would_cross_band():
            return False
        self.shift_down()
        # Deferred: gen.level imports this module.
        from ..gen.level import populate_row

        populate_row(self, level, rng)
        return True

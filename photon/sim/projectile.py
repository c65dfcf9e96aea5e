from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np


class ProjectileType(IntEnum):
    NORMAL = 0
    FLAME = 1  # +1 damage per hit


@dataclass
class Projectile:
    pos: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=np.float64))
    vel: np.ndarray = field(default_factory=lambda: np.zeros(2, dtype=np.float64))
    radius: float = 5.0
    damage: int = 1
    pierce: int = 0
    kind: ProjectileType = ProjectileType.NORMAL

    # State
    active: bool = False
    returned: bool = False
    return_x: float = 0.0  # valid once returned

    def reset(self) -> None:
        self.pos[:] = 0.0
        self.vel[:] = 0.0
        self.damage = 1
        self.pierce = 0
        self.kind = ProjectileType.NORMAL
        self.active = False
        self.returned = False
        self.return_x = 0.0

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.vel))


class ProjectilePool:
    """
    Fixed-capacity slot store with an index free-list.

    `acquire` hands out a slot index (or None when every slot is in use) and
    `release` pushes it back. Slots are allocated once up front.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = int(capacity)
        self.slots: list[Projectile] = [Projectile() for _ in range(self.capacity)]
        # Pop from the end so slot 0 is handed out first.
        self._free: list[int] = list(range(self.capacity - 1, -1, -1))
        self._in_use: list[int] = []

    def __len__(self) -> int:
        return len(self._in_use)

    @property
    def free_count(self) -> int:
        return len(self._free)

    def acquire(self) -> int | None:
        if not self._free:
            return None
        idx = self._free.pop()
        self._in_use.append(idx)
        slot = self.slots[idx]
        slot.reset()
        slot.active = True
        return idx

    def release(self, idx: int) -> None:
        if idx not in self._in_use:
            raise ValueError(f"slot {idx} is not in use")
        self._in_use.remove(idx)
        self.slots[idx].active = False
        self._free.append(idx)

    def release_all(self) -> int:
        n = len(self._in_use)
        for idx in list(self._in_use):
            self.release(idx)
        return n

    def in_use(self) -> list[int]:
        return list(self._in_use)

    def active(self) -> list[Projectile]:
        return [self.slots[i] for i in self._in_use if self.slots[i].active]

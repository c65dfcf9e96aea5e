from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any

import numpy as np

from .constants import (
    HINT_SEGMENTS_MAX,
    PIERCE_PER_PICKUP,
    POWERUP_SCORE,
    SPEED_MULT_MAX,
    SPEED_MULT_STEP,
)

if TYPE_CHECKING:
    from .game.world import GameWorld


class PowerupKind(IntEnum):
    MULTI = 0  # +1 ball per launch (permanent)
    POWER = 1  # +1 damage (permanent)
    PIERCE = 2  # pass through blocks (next batch)
    BIG = 3  # double radius (next batch)
    SPEED = 4  # faster projectiles (permanent)
    FLAME = 5  # +1 damage per hit (next batch)
    LASER = 6  # instant beam at launch (next batch)
    AIM = 7  # longer aim preview (permanent)


LABELS: dict[PowerupKind, str] = {
    PowerupKind.MULTI: "+Ball",
    PowerupKind.POWER: "+Dmg",
    PowerupKind.PIERCE: "Pierce",
    PowerupKind.BIG: "Big",
    PowerupKind.SPEED: "Speed",
    PowerupKind.FLAME: "Flame",
    PowerupKind.LASER: "Laser",
    PowerupKind.AIM: "Aim",
}

# Order matters: cumulative sampling walks this table front to back.
WEIGHTS: tuple[tuple[PowerupKind, float], ...] = (
    (PowerupKind.MULTI, 30.0),
    (PowerupKind.POWER, 14.0),
    (PowerupKind.PIERCE, 12.0),
    (PowerupKind.BIG, 12.0),
    (PowerupKind.FLAME, 10.0),
    (PowerupKind.SPEED, 8.0),
    (PowerupKind.AIM, 8.0),
    (PowerupKind.LASER, 6.0),
)


def most_common_kind(weights: tuple[tuple[PowerupKind, float], ...] = WEIGHTS) -> PowerupKind:
    return max(weights, key=lambda kw: kw[1])[0]


def boosted_weights(
    weights: tuple[tuple[PowerupKind, float], ...] = WEIGHTS, factor: float = 2.0
) -> tuple[tuple[PowerupKind, float], ...]:
    """Same table with the most common kind's weight multiplied by `factor`."""
    top = most_common_kind(weights)
    return tuple((kind, w * factor if kind == top else w) for kind, w in weights)


# Used for the guaranteed power-up on cadence levels.
FAIRNESS_WEIGHTS = boosted_weights()


def select_weighted(
    rng: np.random.Generator, weights: tuple[tuple[PowerupKind, float], ...] = WEIGHTS
) -> PowerupKind:
    total = sum(w for _, w in weights)
    if total <= 0.0:
        raise ValueError("weight table has no positive weight")
    remainder = float(rng.random()) * total
    for kind, w in weights:
        remainder -= w
        if remainder <= 0.0:
            return kind
    # Float round-off can leave a tiny positive remainder.
    return weights[-1][0]


@dataclass
class OneShotBuffs:
    """Effects for the next fired batch only; cleared once the batch is launched."""

    big: bool = False
    flame: bool = False
    laser: bool = False
    pierce: int = 0

    def clear(self) -> None:
        self.big = False
        self.flame = False
        self.laser = False
        self.pierce = 0

    def active_labels(self) -> list[str]:
        out = []
        if self.big:
            out.append(LABELS[PowerupKind.BIG])
        if self.flame:
            out.append(LABELS[PowerupKind.FLAME])
        if self.laser:
            out.append(LABELS[PowerupKind.LASER])
        if self.pierce > 0:
            out.append(LABELS[PowerupKind.PIERCE])
        return out

    def to_dict(self) -> dict[str, Any]:
        return {"big": self.big, "flame": self.flame, "laser": self.laser, "pierce": self.pierce}


@dataclass
class PermanentUpgrades:
    damage_bonus: int = 0
    speed_mult: float = 1.0
    hint_segments: int = 2

    def to_dict(self) -> dict[str, Any]:
        return {
            "damage_bonus": self.damage_bonus,
            "speed_mult": self.speed_mult,
            "hint_segments": self.hint_segments,
        }


def activate(world: GameWorld, kind: PowerupKind, pos: tuple[float, float] | None = None) -> list[dict]:
    state = world.state
    buffs = world.buffs
    upgrades = world.upgrades

    if kind == PowerupKind.MULTI:
        state.ball_count += 1
    elif kind == PowerupKind.POWER:
        upgrades.damage_bonus += 1
    elif kind == PowerupKind.SPEED:
        upgrades.speed_mult = min(SPEED_MULT_MAX, upgrades.speed_mult + SPEED_MULT_STEP)
    elif kind == PowerupKind.AIM:
        upgrades.hint_segments = min(HINT_SEGMENTS_MAX, upgrades.hint_segments + 1)
    elif kind == PowerupKind.PIERCE:
        buffs.pierce += PIERCE_PER_PICKUP
    elif kind == PowerupKind.BIG:
        buffs.big = True
    elif kind == PowerupKind.FLAME:
        buffs.flame = True
    elif kind == PowerupKind.LASER:
        buffs.laser = True
    else:
        raise ValueError(f"Unknown power-up kind: {kind!r}")

    state.score += POWERUP_SCORE
    if pos is not None:
        world.add_floating_text(pos, LABELS[kind])
    return [
        {
            "type": "powerup",
            "kind": kind.name.lower(),
            "score": POWERUP_SCORE,
            "pitch": 2.0,
        }
    ]

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from ..constants import BREAK_SCORE, FLAME_BONUS_DAMAGE, HIT_SCORE, NORMAL_EPS, PUSH_OUT_MARGIN
from ..powerups import activate
from .projectile import Projectile, ProjectileType

if TYPE_CHECKING:
    from ..game.world import GameWorld
    from .grid import Block


def _clamp(v: float, lo: float, hi: float) -> float:
    return lo if v < lo else hi if v > hi else v


def closest_point(block: Block, x: float, y: float) -> tuple[float, float]:
    return _clamp(x, block.x, block.x + block.w), _clamp(y, block.y, block.y + block.h)


def circle_overlaps_box(block: Block, x: float, y: float, radius: float) -> bool:
    cx, cy = closest_point(block, x, y)
    dx = x - cx
    dy = y - cy
    return dx * dx + dy * dy < radius * radius


def hit_damage(p: Projectile) -> int:
    if p.kind == ProjectileType.FLAME:
        return p.damage + FLAME_BONUS_DAMAGE
    return p.damage


def contact_normal(dx: float, dy: float, vel: np.ndarray) -> np.ndarray:
    """Unit normal from the contact point to the circle centre.

    The distance is clamped to NORMAL_EPS; a centre sitting exactly on the
    contact point falls back to the reversed travel direction.
    """
    dist = max(math.sqrt(dx * dx + dy * dy), NORMAL_EPS)
    n = np.asarray([dx / dist, dy / dist], dtype=np.float64)
    if float(np.dot(n, n)) > 1e-12:
        return n / float(np.linalg.norm(n))
    speed = float(np.linalg.norm(vel))
    if speed <= 1e-9:
        return np.asarray([0.0, -1.0], dtype=np.float64)
    return -vel / speed


def reflect(vel: np.ndarray, normal: np.ndarray) -> np.ndarray:
    dot = float(np.dot(vel, normal))
    return vel - 2.0 * dot * normal


def destroy_block(world: GameWorld, block: Block) -> list[dict]:
    world.grid.remove(block)
    world.state.score += BREAK_SCORE
    world.add_fading_block(block)
    center = block.center
    world.add_floating_text(center, f"+{BREAK_SCORE}")
    events: list[dict] = [
        {
            "type": "block_break",
            "block": block.block_id,
            "row": block.row,
            "col": block.col,
            "max_hp": block.max_hp,
            "score": BREAK_SCORE,
            "pitch": 1.5 + 0.05 * min(block.max_hp, 10),
        }
    ]
    if block.powerup is not None:
        events.extend(activate(world, block.powerup, pos=center))
    return events


def apply_damage(world: GameWorld, block: Block, damage: int) -> list[dict]:
    """Damage a live block; destroys it (and fires its power-up) once hp <= 0."""
    block.hp -= int(damage)
    world.state.score += HIT_SCORE
    events: list[dict] = [
        {
            "type": "hit",
            "block": block.block_id,
            "damage": int(damage),
            "hp": max(0, block.hp),
            "score": HIT_SCORE,
            "pitch": 1.0 + 0.5 * (1.0 - max(0, block.hp) / block.max_hp),
        }
    ]
    if block.hp <= 0:
        events.extend(destroy_block(world, block))
    return events


def resolve_block_collisions(world: GameWorld, p: Projectile) -> list[dict]:
    """
    Resolve at most one reflecting block contact for `p` this substep.

    Blocks are scanned back-to-front. A piercing projectile damages every block
    it overlaps (spending one pierce charge each) without reflecting; the first
    non-pierced contact reflects the projectile and ends the scan.
    """
    events: list[dict] = []
    r = float(p.radius)
    r2 = r * r

    for block in world.grid.iter_back_to_front():
        px = float(p.pos[0])
        py = float(p.pos[1])
        cx, cy = closest_point(block, px, py)
        dx = px - cx
        dy = py - cy
        if dx * dx + dy * dy >= r2:
            continue

        events.extend(apply_damage(world, block, hit_damage(p)))

        if p.pierce > 0:
            p.pierce -= 1
            continue

        n = contact_normal(dx, dy, p.vel)
        p.pos[0] = cx + n[0] * (r + PUSH_OUT_MARGIN)
        p.pos[1] = cy + n[1] * (r + PUSH_OUT_MARGIN)
        # Only bounce when moving into the face.
        if float(np.dot(p.vel, n)) < 0.0:
            p.vel = reflect(p.vel, n)
        return events

    return events

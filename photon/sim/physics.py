from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from .collision import resolve_block_collisions
from .projectile import Projectile, ProjectileType

if TYPE_CHECKING:
    from ..game.world import GameWorld

logger = logging.getLogger(__name__)


def bounce_walls(p: Projectile, width: float) -> bool:
    """Reflect off the left, right and top walls. Returns True on any contact."""
    r = float(p.radius)
    hit = False
    if p.pos[0] - r < 0.0:
        p.pos[0] = r
        p.vel[0] = abs(p.vel[0])
        hit = True
    if p.pos[0] + r > width:
        p.pos[0] = width - r
        p.vel[0] = -abs(p.vel[0])
        hit = True
    if p.pos[1] - r < 0.0:
        p.pos[1] = r
        p.vel[1] = abs(p.vel[1])
        hit = True
    return hit


def spawn_projectile(world: GameWorld) -> bool:
    """Launch one projectile from the launch point along the current aim.

    No-op (returns False) when the pool is at capacity or no aim is set.
    """
    if world.aim is None:
        return False
    idx = world.pool.acquire()
    if idx is None:
        logger.debug(f"spawn dropped: pool full ({world.pool.capacity})")
        return False

    cfg = world.config
    buffs = world.buffs
    upgrades = world.upgrades
    p = world.pool.slots[idx]

    speed = cfg.photon_speed * cfg.level_speed_scale(world.state.level) * upgrades.speed_mult
    p.pos[0] = world.state.launch_x
    p.pos[1] = cfg.launch_y
    p.vel[:] = np.asarray(world.aim, dtype=np.float64) * speed
    p.radius = cfg.photon_radius * cfg.big_radius_mult if buffs.big else cfg.photon_radius
    p.damage = 1 + upgrades.damage_bonus
    p.pierce = int(buffs.pierce)
    p.kind = ProjectileType.FLAME if buffs.flame else ProjectileType.NORMAL
    world.state.launched_count += 1
    return True


def step(world: GameWorld, dt: float) -> list[dict]:
    """Advance every active projectile by one fixed substep."""
    events: list[dict] = []
    cfg = world.config
    state = world.state
    return_line = cfg.launch_y + cfg.return_tolerance

    for idx in world.pool.in_use():
        p = world.pool.slots[idx]
        if not p.active:
            continue

        p.pos += p.vel * dt
        bounce_walls(p, cfg.width)

        if p.pos[1] + p.radius > return_line:
            p.active = False
            p.returned = True
            p.return_x = float(np.clip(p.pos[0], cfg.photon_radius, cfg.width - cfg.photon_radius))
            if state.first_return_x is None:
                state.first_return_x = p.return_x
            state.returned_count += 1
            world.pool.release(idx)
            events.append({"type": "return", "x": p.return_x})
            continue

        events.extend(resolve_block_collisions(world, p))
    return events

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from ..constants import RAY_MIN_T

if TYPE_CHECKING:
    from ..config import ArenaConfig
    from .grid import Block, BlockGrid


@dataclass(frozen=True)
class TraceResult:
    points: list[tuple[float, float]]
    # Beam mode only: every block the ray passed through, in crossing order.
    crossed: list[Block] = field(default_factory=list)
    reached_launch_line: bool = False


def ray_aabb_span(
    ox: float, oy: float, dx: float, dy: float, x0: float, y0: float, x1: float, y1: float
) -> tuple[float, float] | None:
    """Slab test. Returns (t_enter, t_exit) along the ray, or None on a miss."""
    tmin = -math.inf
    tmax = math.inf
    if dx != 0.0:
        t1 = (x0 - ox) / dx
        t2 = (x1 - ox) / dx
        if t1 > t2:
            t1, t2 = t2, t1
        tmin = max(tmin, t1)
        tmax = min(tmax, t2)
    elif ox < x0 or ox > x1:
        return None
    if dy != 0.0:
        t1 = (y0 - oy) / dy
        t2 = (y1 - oy) / dy
        if t1 > t2:
            t1, t2 = t2, t1
        tmin = max(tmin, t1)
        tmax = min(tmax, t2)
    elif oy < y0 or oy > y1:
        return None
    if tmin > tmax or tmax < 0.0:
        return None
    return tmin, tmax


def ray_aabb(
    ox: float, oy: float, dx: float, dy: float, x0: float, y0: float, x1: float, y1: float
) -> float | None:
    """Distance to the first face hit, or to the exit face when starting inside."""
    span = ray_aabb_span(ox, oy, dx, dy, x0, y0, x1, y1)
    if span is None:
        return None
    tmin, tmax = span
    return tmin if tmin >= 0.0 else tmax


def face_normal(block: Block, hx: float, hy: float, inflate: float) -> tuple[float, float]:
    # The axis with the larger normalized offset from the box centre owns the face.
    bcx, bcy = block.center
    ex = block.w / 2 + inflate
    ey = block.h / 2 + inflate
    px = (hx - bcx) / ex
    py = (hy - bcy) / ey
    if abs(px) > abs(py):
        return (1.0 if px > 0 else -1.0, 0.0)
    return (0.0, 1.0 if py > 0 else -1.0)


def nearest_wall(
    rx: float, ry: float, dx: float, dy: float, config: ArenaConfig, radius: float
) -> tuple[float, float, float]:
    """(t, nx, ny) for the closest of the left, right and top walls; t is inf if none."""
    best = (math.inf, 0.0, 0.0)
    if dx < 0.0:
        t = (radius - rx) / dx
        if 1e-9 < t < best[0]:
            best = (t, 1.0, 0.0)
    if dx > 0.0:
        t = (config.width - radius - rx) / dx
        if 1e-9 < t < best[0]:
            best = (t, -1.0, 0.0)
    if dy < 0.0:
        t = (radius - ry) / dy
        if 1e-9 < t < best[0]:
            best = (t, 0.0, 1.0)
    return best


def _blocks_crossed(
    blocks: list[Block], rx: float, ry: float, dx: float, dy: float, t_end: float
) -> list[tuple[float, Block]]:
    out = []
    for b in blocks:
        span = ray_aabb_span(rx, ry, dx, dy, b.x, b.y, b.x + b.w, b.y + b.h)
        if span is None:
            continue
        t_enter, _t_exit = span
        if t_enter <= t_end:
            out.append((max(0.0, t_enter), b))
    out.sort(key=lambda tb: tb[0])
    return out


def trace(
    origin: tuple[float, float] | np.ndarray,
    direction: tuple[float, float] | np.ndarray,
    segment_limit: int,
    *,
    grid: BlockGrid,
    config: ArenaConfig,
    radius: float = 0.0,
    beam: bool = False,
    max_travel: float | None = None,
) -> TraceResult:
    """
    Follow a reflecting ray for up to `segment_limit` segments.

    Preview mode reflects off walls and radius-inflated block boxes. Beam mode
    only reflects off walls, collects every block it passes through, and stops
    where it comes back down across the launch line. Nothing is mutated.
    """
    rx, ry = float(origin[0]), float(origin[1])
    dx, dy = float(direction[0]), float(direction[1])
    norm = math.hypot(dx, dy)
    if norm <= 1e-9 or segment_limit <= 0:
        return TraceResult(points=[(rx, ry)])
    dx /= norm
    dy /= norm

    if max_travel is None:
        max_travel = config.beam_travel if beam else config.preview_travel

    blocks = [b for b in grid.blocks if b.alive]
    points: list[tuple[float, float]] = [(rx, ry)]
    crossed: list[Block] = []
    seen: set[int] = set()

    def _collect(t_end: float) -> None:
        for _t, b in _blocks_crossed(blocks, rx, ry, dx, dy, t_end):
            if b.block_id not in seen:
                seen.add(b.block_id)
                crossed.append(b)

    for _seg in range(int(segment_limit)):
        min_t, hit_nx, hit_ny = nearest_wall(rx, ry, dx, dy, config, radius)

        if not beam:
            for b in blocks:
                t = ray_aabb(rx, ry, dx, dy, b.x - radius, b.y - radius, b.x + b.w + radius, b.y + b.h + radius)
                if t is not None and RAY_MIN_T < t < min_t:
                    min_t = t
                    hit_nx, hit_ny = face_normal(b, rx + dx * t, ry + dy * t, radius)

        if beam and dy > 0.0:
            t_line = (config.launch_y - ry) / dy
            if 0.0 <= t_line <= min_t:
                _collect(t_line)
                points.append((rx + dx * t_line, ry + dy * t_line))
                return TraceResult(points=points, crossed=crossed, reached_launch_line=True)

        if math.isinf(min_t):
            if beam:
                _collect(max_travel)
            points.append((rx + dx * max_travel, ry + dy * max_travel))
            break

        if beam:
            _collect(min_t)
        rx += dx * min_t
        ry += dy * min_t
        points.append((rx, ry))

        dot = dx * hit_nx + dy * hit_ny
        dx -= 2.0 * dot * hit_nx
        dy -= 2.0 * dot * hit_ny

    return TraceResult(points=points, crossed=crossed)

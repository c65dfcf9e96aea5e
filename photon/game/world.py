from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

from ..config import ArenaConfig
from ..constants import FADE_RATE_PER_S, TEXT_FADE_PER_S, TEXT_RISE_PX_S
from ..powerups import OneShotBuffs, PermanentUpgrades
from ..sim import physics
from ..sim.collision import apply_damage
from ..sim.grid import Block, BlockGrid
from ..sim.projectile import Projectile, ProjectilePool
from ..sim.raycast import trace
from .snapshot import BeamView, BlockView, FadingBlock, FloatingText, ProjectileView, Snapshot

logger = logging.getLogger(__name__)


class Phase(IntEnum):
    AIMING = 0
    FIRING = 1  # timed spawn queue draining
    SIMULATING = 2  # everything launched, waiting for returns
    ROUND_END = 3
    ADVANCE = 4
    GAME_OVER = 5


@dataclass
class RoundState:
    phase: Phase = Phase.AIMING
    level: int = 0
    score: int = 0
    ball_count: int = 1  # projectiles per launch
    launch_x: float = 0.0

    # Per-round scratch.
    fire_queue: int = 0
    fire_timer: float = 0.0
    first_return_x: float | None = None
    returned_count: int = 0
    launched_count: int = 0

    def reset_round(self) -> None:
        self.fire_queue = 0
        self.fire_timer = 0.0
        self.first_return_x = None
        self.returned_count = 0
        self.launched_count = 0


@dataclass
class Beam:
    points: list[tuple[float, float]]
    life: float
    max_life: float


class GameWorld:
    """
    Explicit game context: round phase machine plus every entity collection.

    Collaborators drive it through `set_aim`, `fire`, `tick` and `restart`,
    and read it through `snapshot`. `tick` returns the notification events
    raised since the previous tick.
    """

    def __init__(
        self,
        config: ArenaConfig | None = None,
        *,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config = config or ArenaConfig()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.grid = BlockGrid(self.config)
        self.pool = ProjectilePool(self.config.max_photons)
        self.state = RoundState()
        self.buffs = OneShotBuffs()
        self.upgrades = PermanentUpgrades(hint_segments=self.config.preview_segments)
        self.aim: np.ndarray | None = None
        self.beam: Beam | None = None
        self.fading_blocks: list[FadingBlock] = []
        self.floating_texts: list[FloatingText] = []
        self.accumulator = 0.0
        self._pending_events: list[dict] = []
        self.restart()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def restart(self, seed: int | None = None) -> None:
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        self.grid.clear()
        self.pool.release_all()
        self.state = RoundState(launch_x=self.config.width / 2)
        self.buffs = OneShotBuffs()
        self.upgrades = PermanentUpgrades(hint_segments=self.config.preview_segments)
        self.aim = None
        self.beam = None
        self.fading_blocks = []
        self.floating_texts = []
        self.accumulator = 0.0
        self._pending_events = []
        logger.info(f"restart (seed={seed})")
        self._advance()

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def game_over(self) -> bool:
        return self.state.phase == Phase.GAME_OVER

    # ------------------------------------------------------------------
    # Input surface
    # ------------------------------------------------------------------

    def set_aim(self, direction: tuple[float, float] | np.ndarray | None) -> bool:
        """Accept an aim only while AIMING and only if it points far enough upward."""
        if self.state.phase != Phase.AIMING:
            return False
        if direction is None:
            self.aim = None
            return False
        d = np.asarray(direction, dtype=np.float64)
        n = float(np.linalg.norm(d))
        if n <= 1e-9:
            self.aim = None
            return False
        d = d / n
        # Screen space: up is -y.
        if d[1] > -self.config.min_aim_up:
            self.aim = None
            return False
        self.aim = d
        return True

    def clear_aim(self) -> None:
        if self.state.phase == Phase.AIMING:
            self.aim = None

    def fire(self) -> bool:
        if self.state.phase != Phase.AIMING or self.aim is None:
            return False
        state = self.state
        state.phase = Phase.FIRING
        state.reset_round()
        state.fire_queue = state.ball_count
        self.accumulator = 0.0
        if self.buffs.laser:
            self._pending_events.extend(self._fire_beam())
        return True

    # ------------------------------------------------------------------
    # Frame tick
    # ------------------------------------------------------------------

    def tick(self, dt: float) -> list[dict]:
        cfg = self.config
        state = self.state
        dt = float(np.clip(dt, 0.0, cfg.max_frame_dt))
        events = self._pending_events
        self._pending_events = []
        self._age_effects(dt)

        if state.phase == Phase.FIRING:
            state.fire_timer += dt
            while state.fire_timer >= cfg.fire_interval_s and state.fire_queue > 0:
                if not physics.spawn_projectile(self) and self.aim is None:
                    break
                state.fire_queue -= 1
                state.fire_timer -= cfg.fire_interval_s
            if state.fire_queue <= 0:
                state.phase = Phase.SIMULATING
                self.buffs.clear()
            events.extend(self._run_physics(dt))
        elif state.phase == Phase.SIMULATING:
            events.extend(self._run_physics(dt))
        elif state.phase == Phase.ROUND_END:
            self._end_round()

        if (
            state.phase == Phase.SIMULATING
            and state.launched_count > 0
            and state.returned_count >= state.launched_count
        ):
            state.phase = Phase.ROUND_END
        return events

    def _run_physics(self, dt: float) -> list[dict]:
        events: list[dict] = []
        step_dt = self.config.physics_dt
        self.accumulator += dt
        while self.accumulator >= step_dt:
            events.extend(physics.step(self, step_dt))
            self.accumulator -= step_dt
        return events

    def _end_round(self) -> None:
        state = self.state
        self.pool.release_all()
        if state.first_return_x is not None:
            state.launch_x = state.first_return_x
        self.accumulator = 0.0
        logger.debug(
            f"round end: level={state.level} launched={state.launched_count} "
            f"score={state.score} launch_x={state.launch_x:.1f}"
        )
        self._advance()

    def _advance(self) -> None:
        state = self.state
        state.phase = Phase.ADVANCE
        state.level += 1
        if self.grid.advance_level(state.level, self.rng):
            state.phase = Phase.AIMING
            return
        state.phase = Phase.GAME_OVER
        self.aim = None
        logger.info(f"game over at level {state.level} with score {state.score}")

    # ------------------------------------------------------------------
    # Beam and preview
    # ------------------------------------------------------------------

    def _fire_beam(self) -> list[dict]:
        cfg = self.config
        if self.aim is None:
            return []
        result = trace(
            (self.state.launch_x, cfg.launch_y),
            self.aim,
            cfg.beam_segments,
            grid=self.grid,
            config=cfg,
            radius=0.0,
            beam=True,
        )
        events: list[dict] = [
            {
                "type": "beam",
                "points": [list(pt) for pt in result.points],
                "blocks": len(result.crossed),
                "pitch": 0.8,
            }
        ]
        for block in result.crossed:
            if block.alive:
                events.extend(apply_damage(self, block, block.hp))
        self.beam = Beam(points=result.points, life=cfg.beam_life_s, max_life=cfg.beam_life_s)
        return events

    def next_radius(self) -> float:
        cfg = self.config
        return cfg.photon_radius * cfg.big_radius_mult if self.buffs.big else cfg.photon_radius

    def preview(self) -> list[tuple[float, float]]:
        if self.state.phase != Phase.AIMING or self.aim is None:
            return []
        return trace(
            (self.state.launch_x, self.config.launch_y),
            self.aim,
            self.upgrades.hint_segments,
            grid=self.grid,
            config=self.config,
            radius=self.next_radius(),
        ).points

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def add_fading_block(self, block: Block) -> None:
        self.fading_blocks.append(FadingBlock(x=block.x, y=block.y, w=block.w, h=block.h, max_hp=block.max_hp))

    def add_floating_text(self, pos: tuple[float, float], text: str) -> None:
        self.floating_texts.append(FloatingText(x=float(pos[0]), y=float(pos[1]), text=text))

    def _age_effects(self, dt: float) -> None:
        if self.beam is not None:
            self.beam.life -= dt
            if self.beam.life <= 0.0:
                self.beam = None
        for fb in self.fading_blocks:
            fb.fade -= dt * FADE_RATE_PER_S
        self.fading_blocks = [fb for fb in self.fading_blocks if fb.fade > 0.0]
        for t in self.floating_texts:
            t.life -= dt * TEXT_FADE_PER_S
            t.y -= dt * TEXT_RISE_PX_S
        self.floating_texts = [t for t in self.floating_texts if t.life > 0.0]

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def active_projectiles(self) -> list[Projectile]:
        return self.pool.active()

    def snapshot(self) -> Snapshot:
        state = self.state
        beam = None
        if self.beam is not None:
            beam = BeamView(points=tuple(self.beam.points), life=self.beam.life / self.beam.max_life)
        return Snapshot(
            phase=state.phase.name,
            level=state.level,
            score=state.score,
            ball_count=state.ball_count,
            launch_x=state.launch_x,
            launch_y=self.config.launch_y,
            blocks=tuple(
                BlockView(
                    block_id=b.block_id,
                    row=b.row,
                    col=b.col,
                    x=b.x,
                    y=b.y,
                    w=b.w,
                    h=b.h,
                    hp=b.hp,
                    max_hp=b.max_hp,
                    powerup=b.powerup.name.lower() if b.powerup is not None else None,
                )
                for b in self.grid.blocks
                if b.alive
            ),
            projectiles=tuple(
                ProjectileView(x=float(p.pos[0]), y=float(p.pos[1]), radius=float(p.radius), kind=p.kind.name.lower())
                for p in self.active_projectiles()
            ),
            beam=beam,
            fading_blocks=tuple(dataclasses.replace(fb) for fb in self.fading_blocks),
            floating_texts=tuple(dataclasses.replace(t) for t in self.floating_texts),
            preview=tuple(self.preview()),
            buffs=self.buffs.to_dict(),
            upgrades=self.upgrades.to_dict(),
            next_labels=tuple(self.buffs.active_labels()),
        )

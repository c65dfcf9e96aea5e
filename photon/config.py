from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ArenaConfig:
    # Geometry (virtual pixels, y grows downward)
    width: float = 360.0
    height: float = 640.0
    grid_cols: int = 8
    top_margin: float = 60.0
    cell_h: float = 28.0
    block_pad: float = 2.0
    band_h: float = 60.0  # bottom launch band

    # Projectiles
    photon_radius: float = 5.0
    photon_speed: float = 420.0  # px / s
    fire_interval_s: float = 0.065  # between sequential launches
    physics_dt: float = 1.0 / 120.0
    max_photons: int = 60
    return_tolerance: float = 10.0
    big_radius_mult: float = 2.0

    # Level generation
    block_spawn_chance: float = 0.65
    powerup_chance: float = 0.12
    powerup_cadence: int = 3  # guarantee a power-up every N levels
    speed_scale_interval: int = 10  # every N levels, slight speed bump
    speed_scale_amount: float = 0.04

    # Frame clock
    max_frame_dt: float = 0.1  # clamp after a stall

    # Aim / raycast
    min_aim_up: float = 0.08  # minimum upward component of a unit aim vector
    preview_segments: int = 2
    preview_travel: float = 400.0
    beam_segments: int = 8
    beam_travel: float = 2000.0
    beam_life_s: float = 0.35

    def __post_init__(self) -> None:
        if self.grid_cols <= 0:
            raise ValueError(f"grid_cols must be positive, got {self.grid_cols}")
        if self.physics_dt <= 0.0:
            raise ValueError(f"physics_dt must be positive, got {self.physics_dt}")
        if self.fire_interval_s <= 0.0:
            raise ValueError(f"fire_interval_s must be positive, got {self.fire_interval_s}")
        if self.max_photons <= 0:
            raise ValueError(f"max_photons must be positive, got {self.max_photons}")
        if not 0.0 <= self.block_spawn_chance <= 1.0:
            raise ValueError(f"block_spawn_chance out of range: {self.block_spawn_chance}")
        if not 0.0 <= self.powerup_chance <= 1.0:
            raise ValueError(f"powerup_chance out of range: {self.powerup_chance}")

    @property
    def cell_w(self) -> float:
        return self.width / self.grid_cols

    @property
    def block_w(self) -> float:
        return self.cell_w - self.block_pad * 2

    @property
    def block_h(self) -> float:
        return self.cell_h - self.block_pad * 2

    @property
    def launch_y(self) -> float:
        return self.height - self.band_h / 2

    @property
    def danger_y(self) -> float:
        """Top edge of the launch band; a block whose bottom passes it ends the run."""
        return self.height - self.band_h

    def block_x(self, col: int) -> float:
        return col * self.cell_w + self.block_pad

    def block_y(self, row: int) -> float:
        return self.top_margin + row * self.cell_h + self.block_pad

    def level_speed_scale(self, level: int) -> float:
        steps = max(0, (level - 1) // self.speed_scale_interval)
        return 1.0 + steps * self.speed_scale_amount

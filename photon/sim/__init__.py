from .grid import Block, BlockGrid
from .physics import spawn_projectile, step
from .projectile import Projectile, ProjectilePool, ProjectileType
from .raycast import TraceResult, trace

__all__ = [
    "Block",
    "BlockGrid",
    "Projectile",
    "ProjectilePool",
    "ProjectileType",
    "TraceResult",
    "spawn_projectile",
    "step",
    "trace",
]

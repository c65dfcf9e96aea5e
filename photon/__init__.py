from .config import ArenaConfig
from .game.world import GameWorld, Phase
from .powerups import PowerupKind

__all__ = ["ArenaConfig", "GameWorld", "Phase", "PowerupKind"]

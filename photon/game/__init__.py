from .snapshot import Snapshot
from .world import GameWorld, Phase

__all__ = ["GameWorld", "Phase", "Snapshot"]

"""Read-only views of the world handed to render and audio collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class BlockView:
    block_id: int
    row: int
    col: int
    x: float
    y: float
    w: float
    h: float
    hp: int
    max_hp: int
    powerup: str | None


@dataclass(frozen=True)
class ProjectileView:
    x: float
    y: float
    radius: float
    kind: str


@dataclass(frozen=True)
class BeamView:
    points: tuple[tuple[float, float], ...]
    life: float  # fraction of the original lifetime left, 1 -> 0


@dataclass
class FadingBlock:
    """Outline of a just-destroyed block, faded out by the renderer."""

    x: float
    y: float
    w: float
    h: float
    max_hp: int
    fade: float = 1.0


@dataclass
class FloatingText:
    x: float
    y: float
    text: str
    life: float = 1.0


@dataclass(frozen=True)
class Snapshot:
    phase: str
    level: int
    score: int
    ball_count: int
    launch_x: float
    launch_y: float
    blocks: tuple[BlockView, ...]
    projectiles: tuple[ProjectileView, ...]
    beam: BeamView | None
    fading_blocks: tuple[FadingBlock, ...]
    floating_texts: tuple[FloatingText, ...]
    preview: tuple[tuple[float, float], ...]
    buffs: dict[str, Any] = field(default_factory=dict)
    upgrades: dict[str, Any] = field(default_factory=dict)
    next_labels: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible data."""
        return {
            "phase": self.phase,
            "level": self.level,
            "score": self.score,
            "ball_count": self.ball_count,
            "launch": [self.launch_x, self.launch_y],
            "blocks": [
                {
                    "id": b.block_id,
                    "row": b.row,
                    "col": b.col,
                    "rect": [b.x, b.y, b.w, b.h],
                    "hp": b.hp,
                    "max_hp": b.max_hp,
                    "powerup": b.powerup,
                }
                for b in self.blocks
            ],
            "projectiles": [{"pos": [p.x, p.y], "r": p.radius, "kind": p.kind} for p in self.projectiles],
            "beam": (
                {"points": [list(pt) for pt in self.beam.points], "life": self.beam.life}
                if self.beam is not None
                else None
            ),
            "fading_blocks": [
                {"rect": [f.x, f.y, f.w, f.h], "max_hp": f.max_hp, "fade": f.fade} for f in self.fading_blocks
            ],
            "floating_texts": [{"pos": [t.x, t.y], "text": t.text, "life": t.life} for t in self.floating_texts],
            "preview": [list(pt) for pt in self.preview],
            "buffs": dict(self.buffs),
            "upgrades": dict(self.upgrades),
            "next": list(self.next_labels),
        }

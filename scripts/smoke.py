# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from photon import GameWorld, Phase
from photon.settings import settings

logger = logging.getLogger("photon.smoke")

AIM_RETRIES = 32


def random_aim(rng: np.random.Generator) -> np.ndarray:
    # Somewhere between 15 and 165 degrees above the horizon.
    angle = rng.uniform(math.radians(15.0), math.radians(165.0))
    return np.asarray([math.cos(angle), -math.sin(angle)], dtype=np.float64)


def play_round(world: GameWorld, rng: np.random.Generator, frame_dt: float, max_ticks: int) -> dict | None:
    """Aim, fire and tick until the round settles. Returns None if the world is not ready to aim."""
    if world.phase != Phase.AIMING:
        return None
    for _ in range(AIM_RETRIES):
        if world.set_aim(random_aim(rng)):
            break
    else:
        logger.warning(f"no aim accepted after {AIM_RETRIES} tries")
        return None
    world.fire()

    counts = {"hit": 0, "block_break": 0, "powerup": 0, "beam": 0}
    ticks = 0
    while world.phase not in (Phase.AIMING, Phase.GAME_OVER):
        for ev in world.tick(frame_dt):
            if ev["type"] in counts:
                counts[ev["type"]] += 1
        ticks += 1
        if ticks >= max_ticks:
            logger.warning(f"round at level {world.state.level} did not settle after {ticks} ticks")
            break

    settled = world.phase in (Phase.AIMING, Phase.GAME_OVER)
    return {"level": world.state.level, "score": world.state.score, "ticks": ticks, "settled": settled, **counts}


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--seed", type=int, default=settings.SEED if settings.SEED is not None else 0)
    parser.add_argument("--rounds", type=int, default=settings.MAX_ROUNDS)
    parser.add_argument("--frame-dt", type=float, default=settings.FRAME_DT)
    parser.add_argument("--max-ticks", type=int, default=settings.MAX_TICKS_PER_ROUND)
    parser.add_argument("--snapshot", type=str, default=None, help="Write the final snapshot as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    world = GameWorld(seed=args.seed)
    aim_rng = np.random.default_rng(args.seed + 1)

    for rnd in range(args.rounds):
        if world.game_over:
            break
        result = play_round(world, aim_rng, args.frame_dt, args.max_ticks)
        if result is None:
            break
        print(f"round {rnd}: {result}")
        if not result["settled"]:
            logger.error(f"stopping: world stuck in {world.phase.name}")
            break

    print("summary:", {"level": world.state.level, "score": world.state.score, "game_over": world.game_over})

    if args.snapshot:
        p = Path(args.snapshot)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(world.snapshot().to_dict()), encoding="utf-8")


if __name__ == "__main__":
    main()

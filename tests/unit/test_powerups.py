import numpy as np
import pytest

from photon.constants import (
    HINT_SEGMENTS_MAX,
    PIERCE_PER_PICKUP,
    POWERUP_SCORE,
    SPEED_MULT_MAX,
    SPEED_MULT_STEP,
)
from photon.game.world import Phase
from photon.powerups import WEIGHTS, PowerupKind, activate, most_common_kind, select_weighted


class _FixedRng:
    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value


def test_weighted_selection_converges_to_table():
    rng = np.random.default_rng(123)
    n = 40_000
    counts = {kind: 0 for kind, _ in WEIGHTS}
    for _ in range(n):
        counts[select_weighted(rng)] += 1

    total = sum(w for _, w in WEIGHTS)
    for kind, w in WEIGHTS:
        assert counts[kind] / n == pytest.approx(w / total, abs=0.015), kind.name


def test_weighted_selection_walks_table_in_order():
    assert select_weighted(_FixedRng(0.0)) == WEIGHTS[0][0]
    assert select_weighted(_FixedRng(0.29)) == PowerupKind.MULTI
    assert select_weighted(_FixedRng(0.31)) == PowerupKind.POWER
    assert select_weighted(_FixedRng(0.999999)) == WEIGHTS[-1][0]


def test_weighted_selection_rejects_empty_table():
    with pytest.raises(ValueError):
        select_weighted(_FixedRng(0.5), weights=((PowerupKind.MULTI, 0.0),))


def test_most_common_kind_is_multi():
    assert most_common_kind() == PowerupKind.MULTI


def test_permanent_effects(world):
    activate(world, PowerupKind.MULTI)
    activate(world, PowerupKind.POWER)
    activate(world, PowerupKind.SPEED)
    activate(world, PowerupKind.AIM)

    assert world.state.ball_count == 2
    assert world.upgrades.damage_bonus == 1
    assert world.upgrades.speed_mult == pytest.approx(1.0 + SPEED_MULT_STEP)
    assert world.upgrades.hint_segments == world.config.preview_segments + 1
    assert world.state.score == 4 * POWERUP_SCORE


def test_one_shot_flags_are_idempotent_and_pierce_adds(world):
    for _ in range(2):
        activate(world, PowerupKind.BIG)
        activate(world, PowerupKind.FLAME)
        activate(world, PowerupKind.LASER)
        activate(world, PowerupKind.PIERCE)

    assert world.buffs.big and world.buffs.flame and world.buffs.laser
    assert world.buffs.pierce == 2 * PIERCE_PER_PICKUP


def test_upgrades_are_capped_but_never_decrease(world):
    for _ in range(50):
        before_speed = world.upgrades.speed_mult
        before_hint = world.upgrades.hint_segments
        activate(world, PowerupKind.SPEED)
        activate(world, PowerupKind.AIM)
        assert world.upgrades.speed_mult >= before_speed
        assert world.upgrades.hint_segments >= before_hint

    assert world.upgrades.speed_mult == pytest.approx(SPEED_MULT_MAX)
    assert world.upgrades.hint_segments == HINT_SEGMENTS_MAX


def test_activation_event_and_label(world):
    events = activate(world, PowerupKind.LASER, pos=(50.0, 60.0))
    assert events == [{"type": "powerup", "kind": "laser", "score": POWERUP_SCORE, "pitch": 2.0}]
    assert world.floating_texts[-1].text == "Laser"


def test_one_shot_buffs_clear_after_batch_launch(world):
    world.buffs.big = True
    world.buffs.pierce = 2
    world.upgrades.damage_bonus = 3
    world.state.ball_count = 2
    world.set_aim((0.0, -1.0))
    world.fire()

    world.tick(0.065)
    assert world.phase == Phase.FIRING
    assert world.buffs.big

    world.tick(0.065)
    assert world.phase == Phase.SIMULATING
    assert not world.buffs.big
    assert world.buffs.pierce == 0
    assert world.upgrades.damage_bonus == 3
    # Both projectiles of the batch carried the buff.
    assert all(p.radius == pytest.approx(10.0) for p in world.active_projectiles())

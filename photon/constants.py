from __future__ import annotations

# ==============================================================================
# Scoring
# ==============================================================================

# Awarded for every projectile/block contact (including the killing blow)
HIT_SCORE = 1

# Bonus on top of HIT_SCORE when a block's hp drops to zero
BREAK_SCORE = 5

# Flat bonus per power-up activation
POWERUP_SCORE = 10

# ==============================================================================
# Projectile Physics
# ==============================================================================

# Extra damage dealt by flame-type projectiles per hit
FLAME_BONUS_DAMAGE = 1

# Minimum contact distance used to build a reflection normal
NORMAL_EPS = 1e-3

# Distance past the projectile radius a reflected projectile is pushed out to
PUSH_OUT_MARGIN = 0.5

# Block intersections closer than this along a ray are ignored (ray origin on a face)
RAY_MIN_T = 0.1

# ==============================================================================
# Power-up Economy
# ==============================================================================

# Pierce charges granted per PIERCE pickup (one-shot, additive)
PIERCE_PER_PICKUP = 2

# Permanent speed multiplier gained per SPEED pickup, and its ceiling
SPEED_MULT_STEP = 0.1
SPEED_MULT_MAX = 2.0

# Aim-preview reflections gained per AIM pickup, and its ceiling
HINT_SEGMENTS_MAX = 6

# ==============================================================================
# Ephemeral Effects (render-only)
# ==============================================================================

FADE_RATE_PER_S = 3.0
TEXT_FADE_PER_S = 1.5
TEXT_RISE_PX_S = 30.0

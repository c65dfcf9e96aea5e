# photon/settings.py
"""Runtime settings for headless drivers, overridable via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level knobs; gameplay tuning lives in ArenaConfig."""

    SEED: int | None = None
    LOG_LEVEL: str = "INFO"

    # Headless play
    FRAME_DT: float = 1.0 / 60.0
    MAX_ROUNDS: int = 50
    MAX_TICKS_PER_ROUND: int = 60 * 60  # one simulated minute at 60 fps

    model_config = SettingsConfigDict(env_prefix="PHOTON_", env_file=".env", extra="ignore")


settings = Settings()

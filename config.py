"""
Configuration settings for the adaptive practice engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///practice.db",
        description="SQLAlchemy connection string for the skill/question/drill stores",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # Session Selection
    # ========================================
    default_session_size: int = Field(
        default=10,
        ge=1,
        description="Questions per regular practice session",
    )
    beginner_modules: str = Field(
        default="0,1,2",
        description="Comma-separated foundational module ids used for new learners",
    )
    beginner_max_difficulty: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Highest difficulty offered on the beginner path",
    )

    # ─── Skill Decay ────────────────────────────────────────────────────────────
    decay_rate: float = Field(
        default=0.05,
        gt=0,
        description="Exponential forgetting rate per day since last practice",
    )
    decay_floor: float = Field(
        default=0.1,
        ge=0,
        le=1,
        description="Minimum retention multiplier",
    )

    # ─── Adaptive Drills ────────────────────────────────────────────────────────
    drill_size: int = Field(
        default=10,
        ge=1,
        description="Questions per adaptive drill",
    )
    allocation_window: int = Field(
        default=3,
        ge=2,
        description="Recent completed drills analysed for allocation weighting",
    )

    # ─── Randomness ─────────────────────────────────────────────────────────────
    random_seed: int | None = Field(
        default=None,
        description="Seed for question shuffling (None for non-deterministic order)",
    )

    @property
    def beginner_module_ids(self) -> list[int]:
        """Parse the beginner module list."""
        return [int(m.strip()) for m in self.beginner_modules.split(",") if m.strip()]

    def get_selection_config(self) -> dict[str, Any]:
        """Get selection configuration as a dictionary."""
        return {
            "session_size": self.default_session_size,
            "beginner": {
                "modules": self.beginner_module_ids,
                "max_difficulty": self.beginner_max_difficulty,
            },
            "decay": {
                "rate": self.decay_rate,
                "floor": self.decay_floor,
            },
            "drill": {
                "size": self.drill_size,
                "allocation_window": self.allocation_window,
            },
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


class ReasoningSettings(BaseModel):
    """Remote reasoning service settings (primary + fallback backends)."""
    primary_model: str = "x-ai/grok-4.1-fast"
    fallback_model: str = "claude-sonnet-4-5-20250929"
    temperature: float = 0.2
    max_tokens: int = 2048
    timeout_seconds: float = 30.0
    rollover_max_attempts: int = 2


class ShiftSettings(BaseModel):
    """Shift calendar settings."""
    rest_weekday: int = Field(default=4, ge=0, le=6, description="Monday=0 ... Friday=4")
    regular_shifts: list[str] = ["First Shift", "Second Shift", "Third Shift"]
    regular_shift_minutes: int = Field(default=480, gt=0)
    rest_day_shifts: list[str] = ["First Shift", "Second Shift"]
    rest_day_shift_minutes: int = Field(default=720, gt=0)


class RolloverSettings(BaseModel):
    """Offline rollover algorithm settings."""
    tolerance: float = Field(default=5.0, ge=0)
    fallback_rate_per_hour: float = Field(default=100.0, gt=0)
    nominal_shift_hours: float = Field(default=8.0, gt=0)


class Settings(BaseModel):
    """Top-level application settings."""
    reasoning: ReasoningSettings = Field(default_factory=ReasoningSettings)
    shifts: ShiftSettings = Field(default_factory=ShiftSettings)
    rollover: RolloverSettings = Field(default_factory=RolloverSettings)
    fault_rules_path: str = str(CONFIG_DIR / "fault_rules.yaml")

    @classmethod
    def load(cls) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()

    @property
    def fault_rules_abs_path(self) -> Path:
        """Resolve the fault rule table path relative to project root."""
        p = Path(self.fault_rules_path)
        if p.is_absolute():
            return p
        return PROJECT_ROOT / p


def get_openai_api_key() -> str:
    """Get the primary (OpenAI-compatible) API key from environment."""
    key = os.getenv("OPENAI_API_KEY", "")
    if not key:
        raise ValueError("OPENAI_API_KEY not set in environment")
    return key


def get_openai_base_url() -> str | None:
    """Optional OpenAI-compatible endpoint (OpenRouter, Groq, ...)."""
    return os.getenv("OPENAI_BASE_URL") or None


def get_anthropic_api_key() -> str:
    """Get Anthropic API key from environment."""
    key = os.getenv("ANTHROPIC_API_KEY", "")
    if not key:
        raise ValueError("ANTHROPIC_API_KEY not set in environment")
    return key


# Singleton settings instance
settings = Settings.load()

"""Configuration loading for ontomap."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ontomap.models import LayoutMode


class AIConfig(BaseModel):
    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "openai/gpt-4o-mini"
    api_key: str = ""
    api_key_env: str = "ONTOMAP_API_KEY"
    demo_mode: bool = False
    demo_latency: float = 0.8  # seconds of fake latency in demo mode
    timeout: float = 60.0
    expand_temperature: float = 0.7
    detail_temperature: float = 0.5
    detail_max_tokens: int = 100

    @property
    def resolved_api_key(self) -> str:
        """Explicit key wins; otherwise read the configured environment variable."""
        if self.api_key:
            return self.api_key
        return os.environ.get(self.api_key_env, "")


class MissionConfig(BaseModel):
    first_tab_name: str = "Mission 1"
    tab_name_prefix: str = "OP"
    promote_name_limit: int = 20
    default_layout: LayoutMode = LayoutMode.MINDMAP


class Config(BaseModel):
    ai: AIConfig = Field(default_factory=AIConfig)
    missions: MissionConfig = Field(default_factory=MissionConfig)


def _project_root() -> Path:
    """Return the ontomap project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()

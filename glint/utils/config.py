"""Application configuration.

Values resolve with priority: explicit CLI flag -> config file -> environment
-> built-in fallback. The config file lives at ``<config dir>/config.json``
(``~/.config/glint`` unless ``GLINT_CONFIG_DIR`` says otherwise).
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"
DEFAULT_REGISTRY = "https://glint.sethgholson.com"
DEFAULT_INSTALLATION_ID = "glint"
DEFAULT_STYLE = "default"


class Settings(BaseSettings):
    """Runtime settings loaded from .env and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    tidbyt_token: str = ""
    tidbyt_device_id: str = ""
    glint_style: str = ""
    glint_installation_id: str = ""
    glint_registry: str = DEFAULT_REGISTRY
    glint_token: str = ""
    glint_config_dir: str = Field(default_factory=lambda: str(Path.home() / ".config" / "glint"))


class GlintConfig(BaseModel):
    """Contents of config.json; accepts camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: Optional[str] = None
    device_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("deviceId", "device_id"))
    style: Optional[str] = None
    installation_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("installationId", "installation_id"),
    )


# config key -> Settings attribute consulted when the file has no value
ENV_FALLBACKS: Dict[str, str] = {
    "token": "tidbyt_token",
    "device_id": "tidbyt_device_id",
    "style": "glint_style",
    "installation_id": "glint_installation_id",
}


def load_config_file(path: Path) -> GlintConfig:
    if not path.exists():
        return GlintConfig()
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return GlintConfig.model_validate(raw)
    except (json.JSONDecodeError, ValidationError, OSError) as exc:
        logger.warning("Could not parse %s, using defaults: %s", path, exc)
        return GlintConfig()


@dataclass
class AppConfig:
    """Configuration built once at startup and handed to whatever needs it."""

    settings: Settings = field(default_factory=Settings)
    file: GlintConfig = field(default_factory=GlintConfig)

    @classmethod
    def load(cls, settings: Optional[Settings] = None) -> "AppConfig":
        settings = settings or Settings()
        file_config = load_config_file(Path(settings.glint_config_dir) / CONFIG_FILE_NAME)
        return cls(settings=settings, file=file_config)

    @property
    def config_dir(self) -> Path:
        return Path(self.settings.glint_config_dir)

    @property
    def styles_dir(self) -> Path:
        return self.config_dir / "styles"

    @property
    def registry_url(self) -> str:
        return self.settings.glint_registry.rstrip("/")

    def resolve(self, explicit: Optional[str], key: str, fallback: Optional[str] = None) -> Optional[str]:
        if explicit:
            return explicit
        from_file = getattr(self.file, key, None)
        if from_file:
            return from_file
        env_attr = ENV_FALLBACKS.get(key)
        from_env = getattr(self.settings, env_attr) if env_attr else None
        if from_env:
            return from_env
        return fallback

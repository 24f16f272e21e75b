"""Configuration management for scaffold-cli."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class RewriteConfig(BaseModel):
    """Configuration for the history rewrite command."""

    git_executable: str = Field(
        default="git", description="Name or path of the git executable"
    )
    remote_name: str = Field(
        default="origin",
        description="Remote used in the suggested force-push command",
    )
    backup_namespace: str = Field(
        default="refs/original/",
        description="Ref namespace where git filter-branch keeps pre-rewrite refs",
    )

    @field_validator("git_executable", "remote_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("backup_namespace")
    @classmethod
    def validate_backup_namespace(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith("refs/"):
            raise ValueError("backup_namespace must start with 'refs/'")
        return v if v.endswith("/") else v + "/"


class Config(BaseModel):
    """Main configuration."""

    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)


class ConfigManager:
    """Loads configuration from a JSON file, falling back to defaults."""

    DEFAULT_CONFIG_PATH = Path(".scaffold-cli/config.json")

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH

    def load(self) -> Config:
        """Load configuration from file or create the default one."""
        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    data = json.load(f)
                config = Config(**data)
            except Exception as e:
                raise ValueError(f"Failed to load config from {self.config_path}: {e}")
            logger.debug("Loaded configuration from %s", self.config_path)
        else:
            config = Config()

        return config

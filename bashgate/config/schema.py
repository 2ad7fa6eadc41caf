"""Configuration schema using Pydantic."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from bashgate.gate.normalize import DEFAULT_NORMALIZE_BINARIES


class HookConfig(BaseModel):
    """Host boundary configuration."""
    shell_tools: list[str] = Field(default_factory=lambda: ["Bash"])  # Compared case-insensitively
    normalize_binaries: list[str] = Field(default_factory=lambda: list(DEFAULT_NORMALIZE_BINARIES))


class RulesConfig(BaseModel):
    """Rule table sources."""
    file: str | None = None  # Operator rules file, appended after the defaults
    include_defaults: bool = True


class LoggingConfig(BaseModel):
    """Logging configuration (stderr only)."""
    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class Config(BaseSettings):
    """Root configuration for bashgate."""
    hook: HookConfig = Field(default_factory=HookConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(env_prefix="BASHGATE_", env_nested_delimiter="__")

    @property
    def rules_path(self) -> Path | None:
        """Get expanded operator rules file path."""
        if not self.rules.file:
            return None
        return Path(self.rules.file).expanduser()

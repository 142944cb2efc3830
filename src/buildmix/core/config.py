"""Configuration management.

Loads from TOML config files + environment variables.
Uses pydantic-settings for validation and env var overriding.
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from .enums import LogFormat


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------

class ObservabilityConfig(BaseModel):
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE


class BuildOptions(BaseModel):
    """Mutable build options owned by a single build group.

    The root group shares the orchestrator's instance; every other group
    gets a fresh copy so components configuring one group never leak into
    another.
    """

    model_config = {"validate_assignment": True}

    public_path: str = ""
    resource_root: str = "/"
    production: bool = False
    hmr: bool = False
    versioning: bool = False
    source_maps: bool = False
    devtool: str | None = None
    output_filename: str = "[name].js"
    babel_config: dict[str, Any] = Field(default_factory=dict)
    aliases: dict[str, str] = Field(default_factory=dict)
    extensions: list[str] = Field(default_factory=lambda: [".js", ".mjs", ".json"])
    options: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Top-level settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """Top-level application settings.

    Loaded from TOML config files, overridden by environment variables.
    """

    mixfile: str = "mix.config.py"
    context_dir: str = "."
    public_path: str = ""
    production: bool = False
    hot: bool = False
    watch: bool = False
    poll: bool = False

    # Shell-style patterns; when non-empty only matching groups are built
    groups: list[str] = Field(default_factory=list)

    manifest_name: str = "mix-manifest.json"
    modules_dir: str = "node_modules"
    install_command: list[str] = Field(default_factory=lambda: ["npm", "install"])
    # Inserted before the package specs when installing dev dependencies
    install_dev_flag: str = "--save-dev"
    notifications: bool = True

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    model_config = {"env_prefix": "MIX_", "env_nested_delimiter": "__"}

    def selects_group(self, name: str) -> bool:
        """Return True if the group filter allows building ``name``."""
        if not self.groups:
            return True
        return any(fnmatchcase(name, pattern) for pattern in self.groups)

    def build_options(self) -> BuildOptions:
        """Fresh per-group build options seeded from these settings."""
        return BuildOptions(
            public_path=self.public_path,
            production=self.production,
            hmr=self.hot,
        )


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from TOML file + env vars.

    Args:
        config_path: Path to TOML config file (optional).
        overrides: Dict of overrides to apply on top.
    """
    data: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            import tomli

            with open(path, "rb") as f:
                data = tomli.load(f)

    if overrides:
        data.update(overrides)

    return Settings(**data)

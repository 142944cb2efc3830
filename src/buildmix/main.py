"""Application bootstrap and the top-level build driver.

Loads settings, sets up logging, imports the user's mixfile, and drives
a fresh orchestrator through every lifecycle phase.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .core.config import Settings, load_settings
from .core.interfaces import ConfigCallback
from .loader import load_mixfile
from .mix import Mix, create_mix
from .observability.logger import new_build_id, setup_logging

logger = logging.getLogger(__name__)


async def run_build(mix: Mix, configure: ConfigCallback) -> list[dict[str, Any]]:
    """Run Load, Setup, dependency installation, Init and Build in order."""
    if not mix.booted:
        logger.warning(
            "buildmix was not set up correctly: the orchestrator was never "
            "booted. Please create it with create_mix(). Booting now."
        )
        mix.boot()

    # 1. Pull in the user's configuration
    await mix.load(configure)

    # 2. Prepare any matching build groups
    await mix.setup()

    # 3. Install any missing dependencies
    await mix.install_dependencies()

    # 4. Boot components and wire their build hooks
    await mix.init()

    # 5. Turn everything into configs
    return await mix.build()


async def run(
    config_path: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> list[dict[str, Any]]:
    """Main entry point. Load config, read the mixfile, build, return configs."""

    # 1. Load settings
    settings = load_settings(config_path=config_path, overrides=overrides)

    # 2. Set up logging
    _setup_logging(settings)
    build_id = new_build_id()

    mixfile = Path(settings.context_dir) / settings.mixfile
    logger.info("Starting build %s (mixfile=%s)", build_id, mixfile)

    # 3. Import the user's configuration callback
    configure = load_mixfile(mixfile)

    # 4. Drive a fresh orchestrator
    mix = create_mix(settings)
    configs = await run_build(mix, configure)

    if len(mix.manifest):
        mix.manifest.refresh()

    logger.info("Build %s produced %d configs", build_id, len(configs))
    return configs


def _setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    obs = settings.observability
    setup_logging(level=obs.log_level, format=obs.log_format.value)

"""Mixfile loading.

A mixfile is a Python module defining ``configure(mix)``; the function may
be a coroutine function. It receives the root group's Api.
"""

from __future__ import annotations

import importlib.util
import logging
from pathlib import Path

from buildmix.core.errors import ConfigurationError
from buildmix.core.interfaces import ConfigCallback

logger = logging.getLogger(__name__)

CONFIGURE_ATTR = "configure"


def load_mixfile(path: str | Path) -> ConfigCallback:
    """Import the mixfile at ``path`` and return its ``configure`` callable."""
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Mixfile not found: {path}")

    spec = importlib.util.spec_from_file_location(f"buildmix_mixfile_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ConfigurationError(f"Cannot import mixfile: {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        raise ConfigurationError(f"Error while importing mixfile {path}: {exc}") from exc

    configure = getattr(module, CONFIGURE_ATTR, None)
    if not callable(configure):
        raise ConfigurationError(
            f"Mixfile {path} must define a callable '{CONFIGURE_ATTR}(mix)'"
        )

    logger.debug("Loaded mixfile %s", path)
    return configure

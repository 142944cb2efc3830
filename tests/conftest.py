"""Shared fixtures for the buildmix test suite."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from buildmix.bus.dispatcher import EventDispatcher
from buildmix.core.config import Settings
from buildmix.dependencies import Dependency
from buildmix.mix import Mix, create_mix


# ---------------------------------------------------------------------------
# Installer
# ---------------------------------------------------------------------------

class RecordingInstaller:
    """Installer double that records every call instead of spawning npm."""

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], bool]] = []

    async def install(
        self, dependencies: Sequence[Dependency], requires_reload: bool
    ) -> None:
        self.calls.append(([dep.spec for dep in dependencies], requires_reload))

    @property
    def installed(self) -> list[str]:
        return [spec for specs, _ in self.calls for spec in specs]


@pytest.fixture
def installer() -> RecordingInstaller:
    return RecordingInstaller()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings rooted in a temp dir, with notifications off."""
    return Settings(context_dir=str(tmp_path), notifications=False)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

@pytest.fixture
def mix(settings: Settings, installer: RecordingInstaller) -> Mix:
    """A booted orchestrator with every default component installed."""
    return create_mix(settings, installer)


@pytest.fixture
def bare_mix(settings: Settings, installer: RecordingInstaller) -> Mix:
    """An orchestrator with no components installed (not booted)."""
    return Mix(settings, installer)


# ---------------------------------------------------------------------------
# Event dispatcher
# ---------------------------------------------------------------------------

@pytest.fixture
def dispatcher() -> EventDispatcher:
    """Return a fresh EventDispatcher instance."""
    return EventDispatcher()

"""Declaring extra build groups from a mixfile."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from buildmix.components.base import Component
from buildmix.core.interfaces import ConfigCallback


class Groups(Component):
    """Adds ``group(name, callback, enabled=True)`` to the Api.

    The callback runs during Setup with the new group current and receives
    that group's Api.
    """

    passive = True

    def api_methods(self) -> dict[str, Callable[..., Any]]:
        return {"group": self.declare}

    def declare(self, name: str, callback: ConfigCallback, enabled: bool = True) -> Any:
        self.mix.add_group(name, callback, enabled=enabled)
        return self.mix.current_group.api

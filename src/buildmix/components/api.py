"""Fluent Api object handed to user configuration code.

Each build group owns one ``Api``. Attribute access looks the alias up in
the registry's table; calling it runs the entry with the Api's group
current. Composite entries return the Api so calls chain::

    api.js("src/app.js", "js").sass("src/app.scss", "css").version()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from buildmix.core.errors import UnknownComponentError

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup
    from buildmix.components.registry import ComponentRegistry


class Api:
    def __init__(self, registry: ComponentRegistry, group: BuildGroup) -> None:
        self._registry = registry
        self._group = group

    @property
    def build_group(self) -> BuildGroup:
        return self._group

    def __getattr__(self, alias: str) -> Callable[..., Any]:
        if alias.startswith("_"):
            raise AttributeError(alias)

        entry = self._registry.get(alias)
        if entry is None:
            raise UnknownComponentError(alias)

        group = self._group

        def invoke(*args: Any, **kwargs: Any) -> Any:
            with group.mix.stack.using(group):
                return entry.method(*args, **kwargs)

        invoke.__name__ = alias
        return invoke

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._registry.aliases()))

    def __repr__(self) -> str:
        return f"Api(group={self._group.name!r})"

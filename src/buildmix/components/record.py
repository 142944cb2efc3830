"""Record of which component answered each alias the user invoked."""

from __future__ import annotations

from typing import Any


class ComponentRecord:
    def __init__(self) -> None:
        self._components: dict[str, Any] = {}

    def record(self, alias: str, component: Any) -> None:
        self._components[alias] = component

    def has(self, alias: str) -> bool:
        return alias in self._components

    def get(self, alias: str) -> Any | None:
        return self._components.get(alias)

    def all(self) -> dict[str, Any]:
        return dict(self._components)

    def __len__(self) -> int:
        return len(self._components)

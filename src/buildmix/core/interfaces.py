"""Protocol interfaces for the build orchestrator.

Module boundaries are defined here as Protocol classes so collaborators
(installers, loaders, components written outside this package) can be
swapped without changing callers.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from buildmix.dependencies import Dependency


Handler = Callable[..., Any]
"""Event handler. May be a plain function or a coroutine function."""

ConfigCallback = Callable[[Any], Any]
"""User configuration callback, invoked with a group's Api."""


# ---------------------------------------------------------------------------
# Event dispatcher
# ---------------------------------------------------------------------------

@runtime_checkable
class IEventDispatcher(Protocol):
    """Ordered publish/subscribe registry of named handlers."""

    def listen(self, event: str, handler: Handler) -> None: ...

    async def fire(self, event: str, *args: Any) -> None: ...


# ---------------------------------------------------------------------------
# Dependency installer
# ---------------------------------------------------------------------------

@runtime_checkable
class IDependencyInstaller(Protocol):
    """Installs packages out of process."""

    async def install(
        self,
        dependencies: Sequence["Dependency"],
        requires_reload: bool,
    ) -> None: ...


# ---------------------------------------------------------------------------
# Component
# ---------------------------------------------------------------------------

class ComponentProtocol(Protocol):
    """The minimal surface every component has.

    Every hook below is optional; the registry detects which ones a
    component provides once, at install time:

    - ``name() -> str | list[str]``: alias(es) exposed on the Api
    - ``register(*args, **kwargs)``: record the user's options
    - ``dependencies() -> list``: packages needed when active
    - ``boot()``: one-off work during Init
    - ``babel_config() -> dict``: merged into the shared babel config
    - ``webpack_entry(entry, group)``
    - ``webpack_rules(group) -> rule | list[rule] | None``
    - ``webpack_plugins(group) -> plugin | list[plugin] | None``
    - ``webpack_config(config, group)``
    - ``api_methods() -> dict[str, Callable]``: extra Api methods
    """

    activated: bool
    passive: bool
    requires_reload: bool
    caller: str | None

"""Component registry: aliases, composite methods and lifecycle wiring.

The registry keeps an explicit ordered table mapping every alias to the
component answering it and the callable the Api invokes. Installing a
component:

1. detects its optional hooks once (``ComponentCapabilities``),
2. adds one composite method per alias (plus any ``api_methods()``),
3. subscribes it exactly once to the dependency-gathering and init events.

Inactive, non-passive components stay installed but every handler returns
immediately for them.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Any

from buildmix.components.base import Component, ComponentCapabilities
from buildmix.core.enums import LifecycleEvent
from buildmix.core.merge import deep_merge

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup
    from buildmix.mix import Mix

logger = logging.getLogger(__name__)


@dataclass
class RegisteredComponent:
    """One row of the alias table."""

    alias: str
    component: Any
    method: Callable[..., Any]
    # True for ``api_methods()`` entries, which skip the composite wrapper
    direct: bool = False


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [item for item in value if item is not None]
    return [value]


class ComponentRegistry:
    """Installs components and exposes them by alias.

    Usage::

        registry = ComponentRegistry(mix)
        registry.install(JavaScript)
        registry.get("js").method("src/app.js", "public/js")
    """

    def __init__(self, mix: Mix) -> None:
        self._mix = mix
        self._table: dict[str, RegisteredComponent] = {}
        self._capabilities: dict[int, ComponentCapabilities] = {}
        self._installed: list[Any] = []

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def install_all(self, definitions: Iterable[Any] | None = None) -> dict[str, RegisteredComponent]:
        """Install every default component (or the given definitions)."""
        if definitions is None:
            from buildmix.components.defaults import DEFAULT_COMPONENTS

            definitions = DEFAULT_COMPONENTS

        for definition in definitions:
            self.install(definition)
        return self.table

    def install(self, definition: Any) -> dict[str, RegisteredComponent]:
        """Install a component class or instance. Returns the alias table."""
        component = self._instantiate(definition)
        capabilities = ComponentCapabilities.detect(component)
        self._capabilities[id(component)] = capabilities
        self._installed.append(component)

        self._register_component(component, capabilities)

        self._mix.listen(
            LifecycleEvent.GATHER_DEPENDENCIES,
            partial(self._gather_dependencies, component, capabilities),
        )
        self._mix.listen(
            LifecycleEvent.INIT,
            partial(self._init_component, component, capabilities),
        )

        logger.debug(
            "Installed component %s (hooks=%s)",
            type(component).__name__,
            ",".join(capabilities.hooks) or "none",
        )
        return self.table

    def _instantiate(self, definition: Any) -> Any:
        if isinstance(definition, type):
            if issubclass(definition, Component):
                component = definition(self._mix)
            else:
                component = definition()
        else:
            component = definition

        # Plain objects get the bookkeeping attributes the registry relies on
        for attr, default in (
            ("activated", False),
            ("passive", False),
            ("requires_reload", False),
            ("caller", None),
        ):
            if not hasattr(component, attr):
                setattr(component, attr, default)
        return component

    @staticmethod
    def aliases_for(component: Any) -> list[str]:
        """Explicit ``name()`` result, else the class name in lowerCamelCase."""
        name = getattr(component, "name", None)
        if callable(name):
            name = name()
        if isinstance(name, str):
            return [name]
        if name:
            return list(name)

        cls_name = type(component).__name__
        return [cls_name[:1].lower() + cls_name[1:]]

    def _register_component(
        self, component: Any, capabilities: ComponentCapabilities
    ) -> None:
        aliases = self.aliases_for(component)

        for alias in aliases:
            self._set(
                RegisteredComponent(
                    alias=alias,
                    component=component,
                    method=self._composite(alias, component, capabilities),
                )
            )

        # Passive components don't need to be triggered by the user
        if component.passive:
            self._table[aliases[0]].method()

        # Components may also write to the Api directly
        if capabilities.api_methods:
            for alias, method in component.api_methods().items():
                self._set(
                    RegisteredComponent(
                        alias=alias, component=component, method=method, direct=True
                    )
                )

    def _set(self, entry: RegisteredComponent) -> None:
        previous = self._table.get(entry.alias)
        if previous is not None and previous.component is not entry.component:
            logger.debug(
                "Alias %s now resolves to %s (was %s)",
                entry.alias,
                type(entry.component).__name__,
                type(previous.component).__name__,
            )
        self._table[entry.alias] = entry

    def _composite(
        self, alias: str, component: Any, capabilities: ComponentCapabilities
    ) -> Callable[..., Any]:
        mix = self._mix

        def composite(*args: Any, **kwargs: Any) -> Any:
            group = mix.current_group

            mix.components.record(alias, component)
            component.caller = alias

            if capabilities.register:
                component.register(*args, **kwargs)

            component.activated = True
            if not component.passive:
                group.context.touched = True

            return group.api

        composite.__name__ = alias
        composite.__qualname__ = f"{type(component).__name__}.{alias}"
        return composite

    # ------------------------------------------------------------------
    # Lifecycle handlers
    # ------------------------------------------------------------------

    @staticmethod
    def _is_active(component: Any) -> bool:
        return bool(component.activated or component.passive)

    async def _gather_dependencies(
        self,
        component: Any,
        capabilities: ComponentCapabilities,
        _data: Any = None,
        _group: BuildGroup | None = None,
    ) -> None:
        if not self._is_active(component) or not capabilities.dependencies:
            return

        dependencies = await _resolve(component.dependencies())
        self._mix.dependencies.queue(
            dependencies, bool(getattr(component, "requires_reload", False))
        )

    async def _init_component(
        self,
        component: Any,
        capabilities: ComponentCapabilities,
        _data: Any = None,
        _group: BuildGroup | None = None,
    ) -> None:
        if not self._is_active(component):
            return

        if capabilities.boot:
            await _resolve(component.boot())
        if capabilities.babel_config:
            await self._apply_babel_config(component)

        mix = self._mix
        if capabilities.webpack_entry:
            mix.listen(
                LifecycleEvent.LOADING_ENTRY,
                lambda entry, group: component.webpack_entry(entry, group),
            )
        if capabilities.webpack_rules:
            mix.listen(
                LifecycleEvent.LOADING_RULES,
                partial(self._apply_items, component.webpack_rules),
            )
        if capabilities.webpack_plugins:
            mix.listen(
                LifecycleEvent.LOADING_PLUGINS,
                partial(self._apply_items, component.webpack_plugins),
            )
        if capabilities.webpack_config:
            mix.listen(
                LifecycleEvent.CONFIG_READY,
                lambda config, group: component.webpack_config(config, group),
            )

    async def _apply_babel_config(self, component: Any) -> None:
        contribution = await _resolve(component.babel_config())
        self._mix.config.babel_config = deep_merge(
            self._mix.config.babel_config, contribution
        )

    @staticmethod
    async def _apply_items(
        hook: Callable[[BuildGroup], Any], items: list[Any], group: BuildGroup
    ) -> None:
        items.extend(_as_list(await _resolve(hook(group))))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, alias: str) -> RegisteredComponent | None:
        return self._table.get(alias)

    def aliases(self) -> list[str]:
        return list(self._table)

    def capabilities_of(self, component: Any) -> ComponentCapabilities | None:
        return self._capabilities.get(id(component))

    @property
    def installed(self) -> list[Any]:
        return list(self._installed)

    @property
    def table(self) -> dict[str, RegisteredComponent]:
        return dict(self._table)

    def __contains__(self, alias: object) -> bool:
        return alias in self._table

"""Small components that adjust a group's options or final config."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from buildmix.components.base import Component
from buildmix.core.errors import ConfigurationError
from buildmix.core.merge import deep_merge

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup


class Define(Component):
    def register(self, definitions: dict[str, Any]) -> None:
        self.state().setdefault("definitions", {}).update(definitions)

    def webpack_plugins(self, group: BuildGroup) -> dict[str, Any] | None:
        definitions = self.state(group).get("definitions")
        if not definitions:
            return None
        return {"plugin": "DefinePlugin", "options": dict(definitions)}


class Alias(Component):
    def register(self, paths: dict[str, str]) -> None:
        options = self.context.config
        options.aliases = {**options.aliases, **paths}


class SetPublicPath(Component):
    def register(self, path: str) -> None:
        self.context.config.public_path = path.replace("\\", "/").rstrip("/")


class SetResourceRoot(Component):
    def register(self, path: str) -> None:
        self.context.config.resource_root = path


class Options(Component):
    def register(self, options: dict[str, Any] | None = None, **kwargs: Any) -> None:
        config = self.context.config
        config.options = deep_merge(config.options, {**(options or {}), **kwargs})


class SourceMaps(Component):
    def register(
        self,
        generate_for_production: bool = True,
        dev_type: str = "eval-source-map",
        production_type: str = "source-map",
    ) -> None:
        config = self.context.config
        if config.production and not generate_for_production:
            return
        config.source_maps = True
        config.devtool = production_type if config.production else dev_type


class BabelConfig(Component):
    """User babel options for the current group.

    Options given in the root group also reach every other group, through
    the shared babel config the script loader starts from.
    """

    def register(self, config: dict[str, Any]) -> None:
        options = self.context.config
        options.babel_config = deep_merge(options.babel_config, config)


class WebpackConfig(Component):
    """Merge a fragment (or a callable returning one) into the final config."""

    def register(self, fragment: dict[str, Any] | Callable[[], dict[str, Any]]) -> None:
        self.state().setdefault("fragments", []).append(fragment)

    async def webpack_config(self, config: dict[str, Any], group: BuildGroup) -> None:
        for fragment in self.state(group).get("fragments", []):
            if callable(fragment):
                fragment = fragment()
                if inspect.isawaitable(fragment):
                    fragment = await fragment
            merged = deep_merge(config, fragment)
            config.clear()
            config.update(merged)


class Override(Component):
    """Run a callback against the final config of the group."""

    def register(self, callback: Callable[[dict[str, Any]], Any]) -> None:
        self.state().setdefault("callbacks", []).append(callback)

    async def webpack_config(self, config: dict[str, Any], group: BuildGroup) -> None:
        for callback in self.state(group).get("callbacks", []):
            result = callback(config)
            if inspect.isawaitable(result):
                await result


class When(Component):
    """``when(condition, callback)``: run ``callback(api)`` if truthy."""

    def register(self, condition: Any, callback: Callable[[Any], Any]) -> None:
        if callable(condition):
            condition = condition()
        if not condition:
            return

        result = callback(self.mix.current_group.api)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise ConfigurationError(
                "when() callbacks must be synchronous; "
                "await inside the configuration callback instead"
            )

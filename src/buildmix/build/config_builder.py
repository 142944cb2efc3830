"""Per-group configuration emission.

The builder owns no knowledge of any bundler's option schema. It creates
the empty containers, lets components fill them through the loading
events, assembles a plain dict, and gives components one last chance to
mutate it on ``config-ready``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from buildmix.core.enums import LifecycleEvent

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup

logger = logging.getLogger(__name__)


class Entry:
    """Ordered mapping of entry name → source paths."""

    def __init__(self) -> None:
        self._entries: dict[str, list[str]] = {}

    def add(self, name: str, paths: str | Iterable[str]) -> Entry:
        if isinstance(paths, str):
            paths = [paths]
        bucket = self._entries.setdefault(name, [])
        for path in paths:
            if path not in bucket:
                bucket.append(path)
        return self

    def names(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(paths) for name, paths in self._entries.items()}


class ConfigBuilder:
    """Builds the configuration object of one group.

    Must run with the group current; ``BuildGroup.config`` arranges that.
    """

    def __init__(self, group: BuildGroup) -> None:
        self.group = group

    async def build(self) -> dict[str, Any]:
        group = self.group
        mix = group.mix
        options = group.config_options

        entry = Entry()
        await mix.dispatch(LifecycleEvent.LOADING_ENTRY, entry, group=group)

        rules: list[Any] = []
        await mix.dispatch(LifecycleEvent.LOADING_RULES, rules, group=group)

        plugins: list[Any] = []
        await mix.dispatch(LifecycleEvent.LOADING_PLUGINS, plugins, group=group)

        config: dict[str, Any] = {
            "name": group.name,
            "mode": "production" if options.production else "development",
            "context": str(mix.paths_root),
            "entry": entry.to_dict(),
            "output": {
                "path": options.public_path or ".",
                "filename": options.output_filename,
                "publicPath": options.resource_root,
            },
            "module": {"rules": rules},
            "plugins": plugins,
            "resolve": {
                "alias": dict(options.aliases),
                "extensions": list(options.extensions),
            },
            "devtool": options.devtool if options.source_maps else False,
            "stats": {"preset": "errors-warnings" if options.production else "normal"},
        }
        if options.options:
            config["options"] = dict(options.options)

        await mix.dispatch(LifecycleEvent.CONFIG_READY, config, group=group)

        logger.info(
            "Built config for group %s (%d entries, %d rules, %d plugins)",
            group.name,
            len(entry),
            len(rules),
            len(plugins),
        )
        return config

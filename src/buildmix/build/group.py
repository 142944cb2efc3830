"""Build groups: independently configured scopes, one config each."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from buildmix.build.config_builder import ConfigBuilder
from buildmix.components.api import Api
from buildmix.core.config import BuildOptions
from buildmix.core.interfaces import ConfigCallback

if TYPE_CHECKING:
    from buildmix.mix import Mix

logger = logging.getLogger(__name__)

ROOT_GROUP_NAME = "Mix"


@dataclass
class GroupContext:
    """Mutable state private to one build group."""

    config: BuildOptions
    api: Api
    # component key → that component's options for this group
    state: dict[str, dict[str, Any]] = field(default_factory=dict)
    # set once a non-passive component is invoked while the group is current
    touched: bool = False

    def state_for(self, key: str) -> dict[str, Any]:
        return self.state.setdefault(key, {})


class BuildGroup:
    """A named build scope producing exactly one configuration object.

    Parameters
    ----------
    name:
        Group name; matched against ``Settings.groups`` patterns.
    mix:
        The owning orchestrator.
    callback:
        Configuration callback run during Setup with this group's Api.
    enabled:
        ``False`` excludes the group from Setup and Build.
    config:
        Build options to share. Defaults to fresh options from settings.
    """

    def __init__(
        self,
        name: str,
        mix: Mix,
        callback: ConfigCallback | None = None,
        *,
        enabled: bool = True,
        config: BuildOptions | None = None,
    ) -> None:
        self.name = name
        self.mix = mix
        self.callback = callback
        self.enabled = enabled
        self.context = GroupContext(
            config=config if config is not None else mix.settings.build_options(),
            api=Api(mix.registry, self),
        )

    def __repr__(self) -> str:
        return f"BuildGroup(name={self.name!r}, enabled={self.enabled})"

    @property
    def api(self) -> Api:
        return self.context.api

    @property
    def config_options(self) -> BuildOptions:
        return self.context.config

    @property
    def is_root(self) -> bool:
        return self.mix.root_group is self

    @property
    def should_be_built(self) -> bool:
        if not self.enabled:
            return False
        if not self.mix.settings.selects_group(self.name):
            return False
        if self.is_root:
            # The default group only builds when the user configured it
            return self.context.touched
        return True

    async def setup(self) -> None:
        """Run this group's configuration callback with the group current."""
        if self.callback is None:
            return
        logger.debug("Setting up group %s", self.name)
        await self.mix.stack.while_current(self, self.callback, self.api)

    async def config(self) -> dict[str, Any]:
        """Emit this group's finished configuration object."""
        logger.debug("Building config for group %s", self.name)
        return await self.mix.stack.while_current(
            self, ConfigBuilder(self).build
        )

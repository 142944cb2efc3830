"""The build orchestrator.

``Mix`` owns the event dispatcher, the group stack and the component
registry, and drives the lifecycle in a fixed order:

1. ``load``                 user configuration in the root group (once)
2. ``setup``                group callbacks, buildable groups concurrently
3. ``install_dependencies`` gather, dedupe and install packages (once)
4. ``init``                 component boot + build-event wiring (once)
5. ``build``                one config per buildable group, declaration order

There is no process-wide instance: ``create_mix()`` returns a fresh one and
components and groups hold an explicit reference to it.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from buildmix.build.context import BuildContextStack
from buildmix.build.group import ROOT_GROUP_NAME, BuildGroup
from buildmix.bus.dispatcher import EventDispatcher
from buildmix.components.record import ComponentRecord
from buildmix.components.registry import ComponentRegistry
from buildmix.core.config import Settings
from buildmix.core.enums import LifecycleEvent, Phase
from buildmix.core.errors import ConfigurationError, LifecycleError
from buildmix.core.interfaces import ConfigCallback, Handler, IDependencyInstaller
from buildmix.dependencies import Dependencies, Resolver, SubprocessInstaller
from buildmix.manifest import Manifest

logger = logging.getLogger(__name__)


class Mix:
    """Orchestrates components and build groups through the build lifecycle.

    Usage::

        mix = create_mix(settings)
        await mix.load(configure)
        await mix.setup()
        await mix.install_dependencies()
        await mix.init()
        configs = await mix.build()
    """

    def __init__(
        self,
        settings: Settings | None = None,
        installer: IDependencyInstaller | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.paths_root = Path(self.settings.context_dir).resolve()

        self.config = self.settings.build_options()
        self.dispatcher = EventDispatcher()
        self.components = ComponentRecord()
        self.registry = ComponentRegistry(self)
        # Read on every use: setPublicPath() may change it after construction
        self.manifest = Manifest(
            lambda: self.config.public_path,
            self.settings.manifest_name,
            root=self.paths_root,
        )
        self.resolver = Resolver(self.paths_root / self.settings.modules_dir)
        self.dependencies = Dependencies(
            installer
            or SubprocessInstaller(
                self.settings.install_command,
                cwd=self.paths_root,
                dev_flag=self.settings.install_dev_flag,
            ),
            self.resolver,
        )

        root = BuildGroup(ROOT_GROUP_NAME, self, config=self.config)
        self.groups: list[BuildGroup] = [root]
        self.stack: BuildContextStack[BuildGroup] = BuildContextStack(root)

        self.booted = False
        self.loaded = False
        self.setup_started = False
        self.dependencies_installed = False
        self.initialized = False

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    def boot(self) -> Mix:
        """Install the default components. Safe to call more than once."""
        if self.booted:
            return self

        self.booted = True
        self.registry.install_all()
        logger.debug("Booted with %d aliases", len(self.registry.aliases()))
        return self

    # ------------------------------------------------------------------
    # Lifecycle phases
    # ------------------------------------------------------------------

    async def load(self, callback: ConfigCallback) -> None:
        """Run the user's configuration callback in the root group."""
        if self.loaded:
            return
        self.loaded = True

        logger.info("Phase %s", Phase.LOAD.value)
        try:
            await self.stack.while_current(
                self.root_group, callback, self.root_group.api
            )
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError(f"Configuration callback failed: {exc}") from exc

    async def setup(self) -> None:
        """Run the configuration callback of every buildable group."""
        self.setup_started = True
        groups = self.buildable_groups
        logger.info("Phase %s (%d groups)", Phase.SETUP.value, len(groups))
        await asyncio.gather(*(group.setup() for group in groups))

    async def install_dependencies(self) -> None:
        """Gather every active component's dependencies and install them."""
        if self.dependencies_installed:
            return
        self.dependencies_installed = True

        logger.info("Phase %s", Phase.GATHER_DEPENDENCIES.value)
        await self.dispatch(LifecycleEvent.GATHER_DEPENDENCIES)

        logger.info(
            "Phase %s (%d queued)",
            Phase.INSTALL_DEPENDENCIES.value,
            len(self.dependencies.queued),
        )
        await self.dependencies.install_queued()

    async def init(self) -> None:
        """Boot active components and wire their build hooks."""
        if self.initialized:
            return
        self.initialized = True

        logger.info("Phase %s", Phase.INIT.value)
        await self.dispatch(LifecycleEvent.INIT, self)

    async def build(self) -> list[dict[str, Any]]:
        """Return one configuration object per buildable group."""
        if not self.booted:
            logger.warning(
                "buildmix was not set up correctly: the orchestrator was never "
                "booted. Booting now."
            )
            self.boot()

        groups = self.buildable_groups
        logger.info("Phase %s (%d groups)", Phase.BUILD.value, len(groups))
        return list(await asyncio.gather(*(group.config() for group in groups)))

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def listen(self, event: str, handler: Handler) -> None:
        self.dispatcher.listen(event, handler)

    async def dispatch(
        self, event: str, data: Any = None, group: BuildGroup | None = None
    ) -> None:
        """Fire ``event`` with ``group`` current.

        Handlers receive ``(data, group)``. ``data`` may be a zero-argument
        callable, evaluated once the group is current.
        """
        group = group or self.current_group

        async def _fire() -> None:
            payload = data() if callable(data) else data
            await self.dispatcher.fire(event, payload, group)

        await self.stack.while_current(group, _fire)

    # ------------------------------------------------------------------
    # Groups
    # ------------------------------------------------------------------

    @property
    def root_group(self) -> BuildGroup:
        return self.groups[0]

    @property
    def current_group(self) -> BuildGroup:
        return self.stack.current()

    @property
    def api(self) -> Any:
        return self.current_group.api

    @property
    def buildable_groups(self) -> list[BuildGroup]:
        return [group for group in self.groups if group.should_be_built]

    def add_group(
        self, name: str, callback: ConfigCallback, *, enabled: bool = True
    ) -> BuildGroup:
        """Declare a new build group. Only allowed before Setup starts."""
        if self.setup_started:
            raise LifecycleError(
                f"Cannot declare group '{name}' after setup has started"
            )
        group = BuildGroup(name, self, callback, enabled=enabled)
        self.groups.append(group)
        logger.debug("Declared group %s (enabled=%s)", name, enabled)
        return group

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    def in_production(self) -> bool:
        return self.config.production

    def is_hot(self) -> bool:
        return self.settings.hot

    def is_watching(self) -> bool:
        return self.is_hot() or self.settings.watch

    def is_polling(self) -> bool:
        return self.is_watching() and self.settings.poll

    def sees_npm_package(self, package: str) -> bool:
        """True when ``package`` is already present in the modules dir."""
        return self.resolver.has(package)


def create_mix(
    settings: Settings | None = None,
    installer: IDependencyInstaller | None = None,
) -> Mix:
    """Create and boot a fresh orchestrator."""
    return Mix(settings, installer).boot()

"""Dependency queueing and out-of-process installation.

Components declare the packages they need while gathering dependencies;
nothing is installed until every component has been asked. The queue is
then deduplicated by package name and only packages missing from the
modules directory are handed to the installer.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from buildmix.core.errors import DependencyError, DependencyInstallFailure
from buildmix.core.interfaces import IDependencyInstaller

logger = logging.getLogger(__name__)


class Dependency(BaseModel):
    """A package descriptor: ``{package, version?, dev?}``."""

    model_config = {"frozen": True}

    package: str
    version: str | None = None
    dev: bool = True

    @classmethod
    def parse(cls, spec: str) -> Dependency:
        """Parse ``name``, ``name@version`` or ``@scope/name@version``."""
        spec = spec.strip()
        if not spec:
            raise DependencyError("Empty dependency specifier")

        scoped = spec.startswith("@")
        body = spec[1:] if scoped else spec
        name, sep, version = body.partition("@")
        if scoped:
            name = "@" + name
        return cls(package=name, version=version if sep and version else None)

    @classmethod
    def coerce(cls, value: Any) -> Dependency:
        if isinstance(value, Dependency):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, dict):
            return cls(**value)
        raise DependencyError(f"Unsupported dependency declaration: {value!r}")

    @property
    def spec(self) -> str:
        return f"{self.package}@{self.version}" if self.version else self.package


class Resolver:
    """Answers whether a package is already present in the modules dir."""

    def __init__(self, modules_dir: str | Path = "node_modules") -> None:
        self.modules_dir = Path(modules_dir)

    def has(self, package: str) -> bool:
        return (self.modules_dir / package / "package.json").is_file()


class SubprocessInstaller:
    """Runs the configured install command with the missing package specs.

    Dev and runtime dependencies are installed by separate invocations;
    ``dev_flag`` is inserted before the specs of the dev batch.
    """

    def __init__(
        self,
        command: Sequence[str],
        cwd: str | Path | None = None,
        dev_flag: str | None = "--save-dev",
    ) -> None:
        self.command = list(command)
        self.cwd = str(cwd) if cwd is not None else None
        self.dev_flag = dev_flag

    async def install(
        self, dependencies: Sequence[Dependency], requires_reload: bool
    ) -> None:
        runtime = [dep.spec for dep in dependencies if not dep.dev]
        dev = [dep.spec for dep in dependencies if dep.dev]

        if runtime:
            await self._run(runtime)
        if dev:
            await self._run(dev, *([self.dev_flag] if self.dev_flag else []))

    async def _run(self, specs: list[str], *flags: str) -> None:
        cmd = [*self.command, *flags, *specs]
        logger.info("Installing dependencies: %s", " ".join(specs))

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=self.cwd,
            )
        except OSError as exc:
            raise DependencyInstallFailure(specs, -1, str(exc)) from exc

        stdout, _ = await proc.communicate()
        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        if proc.returncode != 0:
            raise DependencyInstallFailure(specs, proc.returncode or -1, output)


class Dependencies:
    """Queue of declared dependencies for one build.

    Usage::

        deps = Dependencies(installer, Resolver("node_modules"))
        deps.queue(["sass", "sass-loader@^12.1.0"])
        await deps.install_queued()
    """

    def __init__(
        self,
        installer: IDependencyInstaller,
        resolver: Resolver | None = None,
    ) -> None:
        self._installer = installer
        self._resolver = resolver or Resolver()
        self._queued: list[tuple[Dependency, bool]] = []

    def queue(self, dependencies: Iterable[Any] | Any, requires_reload: bool = False) -> None:
        """Queue declarations (strings, dicts or ``Dependency``)."""
        if dependencies is None:
            return
        if isinstance(dependencies, (str, dict, Dependency)):
            dependencies = [dependencies]

        for declaration in dependencies:
            if not declaration:
                continue
            self._queued.append((Dependency.coerce(declaration), requires_reload))

    @property
    def queued(self) -> list[tuple[Dependency, bool]]:
        return list(self._queued)

    def deduplicated(self) -> list[tuple[Dependency, bool]]:
        """One entry per package, in first-queued order.

        Reload flags of all contributors are OR-ed together. A later entry
        supplies the version when the first one declared none. A package
        any contributor needs at runtime is not installed as a dev one.
        """
        merged: dict[str, tuple[Dependency, bool]] = {}
        for dependency, reload in self._queued:
            existing = merged.get(dependency.package)
            if existing is None:
                merged[dependency.package] = (dependency, reload)
                continue

            current, current_reload = existing
            update: dict[str, Any] = {}
            if current.version is None and dependency.version is not None:
                update["version"] = dependency.version
            if current.dev and not dependency.dev:
                update["dev"] = False
            if update:
                current = current.model_copy(update=update)
            merged[dependency.package] = (current, current_reload or reload)
        return list(merged.values())

    def missing(self) -> list[tuple[Dependency, bool]]:
        return [
            (dep, reload)
            for dep, reload in self.deduplicated()
            if not self._resolver.has(dep.package)
        ]

    async def install_queued(self) -> None:
        """Install missing packages; exit if any of them needs a reload."""
        missing = self.missing()
        if not missing:
            logger.debug("All %d queued dependencies present", len(self._queued))
            return

        requires_reload = any(reload for _, reload in missing)
        await self._installer.install([dep for dep, _ in missing], requires_reload)

        if requires_reload:
            logger.warning(
                "Installed dependencies that require a restart. "
                "Please run the build again."
            )
            raise SystemExit(0)

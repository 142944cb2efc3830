"""Static asset components: file copying and versioning."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from buildmix.components.base import Component

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup

logger = logging.getLogger(__name__)


class Copy(Component):
    """``copy(src, dest)`` / ``copyDirectory(src, dest)``."""

    def name(self) -> list[str]:
        return ["copy", "copyDirectory"]

    def register(self, src: str | list[str], dest: str) -> None:
        sources = [src] if isinstance(src, str) else list(src)
        self.state().setdefault("pairs", []).append(
            {"from": sources, "to": dest, "directory": self.caller == "copyDirectory"}
        )

    def webpack_plugins(self, group: BuildGroup) -> list[dict[str, Any]]:
        return [
            {"plugin": "CopyFilesPlugin", "options": dict(pair)}
            for pair in self.state(group).get("pairs", [])
        ]


class Version(Component):
    """Enable ``?id=`` versioning, optionally for extra static files."""

    def register(self, files: str | list[str] | None = None) -> None:
        self.context.config.versioning = True
        if files:
            extra = [files] if isinstance(files, str) else list(files)
            self.state().setdefault("files", []).extend(extra)

    def boot(self) -> None:
        # Static files are known up front; bundle outputs are added later
        # by whoever runs the bundler.
        for group in self.mix.groups:
            for file in self.state(group).get("files", []):
                self.mix.manifest.add(file)
        logger.debug("Version booted with %d manifest entries", len(self.mix.manifest))

    def webpack_plugins(self, group: BuildGroup) -> dict[str, Any] | None:
        if not group.config_options.versioning:
            return None
        return {
            "plugin": "ManifestPlugin",
            "options": {
                "name": self.mix.manifest.name,
                "files": list(self.state(group).get("files", [])),
            },
        }

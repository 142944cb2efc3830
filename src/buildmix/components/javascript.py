"""Script components: plain JavaScript entries and React support."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from buildmix.build.config_builder import Entry
from buildmix.components.base import Component
from buildmix.core.merge import deep_merge

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup

SCRIPT_TEST = r"\.(cjs|mjs|jsx?|tsx?)$"
VENDOR_EXCLUDE = r"(node_modules|bower_components)"


def entry_name(source: str, output: str, extension: str) -> str:
    """Chunk name for ``source`` written to ``output``.

    ``output`` is either a file (``js/app.js``) or a directory (``js``).
    """
    output = output.replace("\\", "/").strip("/")
    stem, ext = posixpath.splitext(output)
    if ext == extension:
        return stem
    base = posixpath.splitext(posixpath.basename(source))[0]
    return posixpath.join(output, base) if output else base


def _sources(src: str | Iterable[str]) -> list[str]:
    return [src] if isinstance(src, str) else list(src)


class JavaScript(Component):
    def name(self) -> list[str]:
        return ["js"]

    def register(self, src: str | Iterable[str], output: str) -> None:
        self.state().setdefault("entries", []).append(
            {"src": _sources(src), "output": output}
        )

    def webpack_entry(self, entry: Entry, group: BuildGroup) -> None:
        for item in self.state(group).get("entries", []):
            for source in item["src"]:
                entry.add(entry_name(source, item["output"], ".js"), source)

    def webpack_rules(self, group: BuildGroup) -> dict[str, Any] | None:
        if not self.state(group).get("entries"):
            return None
        return {
            "test": SCRIPT_TEST,
            "exclude": VENDOR_EXCLUDE,
            "use": [
                {
                    "loader": "babel-loader",
                    "options": deep_merge(
                        self.mix.config.babel_config,
                        group.config_options.babel_config,
                    ),
                }
            ],
        }


class React(Component):
    requires_reload = True

    def register(self, options: dict[str, Any] | None = None) -> None:
        self.state()["options"] = dict(options or {})

    def dependencies(self) -> list[str]:
        return ["react", "react-dom", "@babel/preset-react"]

    def babel_config(self) -> dict[str, Any]:
        return {"presets": ["@babel/preset-react"]}

    def webpack_config(self, config: dict[str, Any], group: BuildGroup) -> None:
        if "options" not in self.state(group):
            return
        extensions = config["resolve"]["extensions"]
        for ext in (".jsx", ".tsx"):
            if ext not in extensions:
                extensions.append(ext)

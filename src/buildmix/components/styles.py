"""Stylesheet preprocessing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from buildmix.build.config_builder import Entry
from buildmix.components.base import Component
from buildmix.components.javascript import entry_name

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup


class Sass(Component):
    def register(
        self,
        src: str,
        output: str,
        plugin_options: dict[str, Any] | None = None,
    ) -> None:
        self.state().setdefault("entries", []).append(
            {"src": src, "output": output, "options": dict(plugin_options or {})}
        )

    def dependencies(self) -> list[str]:
        return ["sass", "sass-loader@^12.1.0"]

    def webpack_entry(self, entry: Entry, group: BuildGroup) -> None:
        for item in self.state(group).get("entries", []):
            entry.add(entry_name(item["src"], item["output"], ".css"), item["src"])

    def webpack_rules(self, group: BuildGroup) -> list[dict[str, Any]]:
        rules = []
        for item in self.state(group).get("entries", []):
            rules.append(
                {
                    "test": item["src"],
                    "use": [
                        "css-loader",
                        {
                            "loader": "sass-loader",
                            "options": {
                                "sourceMap": group.config_options.source_maps,
                                **item["options"],
                            },
                        },
                    ],
                }
            )
        return rules

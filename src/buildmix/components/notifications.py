"""Desktop build notifications, on unless disabled."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from buildmix.components.base import Component

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup


class Notifications(Component):
    passive = True

    def name(self) -> list[str]:
        return ["notifications", "disableNotifications"]

    def register(self, on_success: bool = True, on_failure: bool = True) -> None:
        state = self.state()
        if self.caller == "disableNotifications":
            state["enabled"] = False
            return
        state.update(enabled=True, on_success=on_success, on_failure=on_failure)

    def _enabled(self, group: BuildGroup) -> bool:
        return self.mix.settings.notifications and self.state(group).get("enabled", True)

    def dependencies(self) -> list[str]:
        if not self.mix.settings.notifications:
            return []
        return ["webpack-notifier@^1.15.0"]

    def webpack_plugins(self, group: BuildGroup) -> dict[str, Any] | None:
        if not self._enabled(group):
            return None
        state = self.state(group)
        return {
            "plugin": "WebpackNotifierPlugin",
            "options": {
                "title": group.name,
                "alwaysNotify": state.get("on_success", True),
                "excludeWarnings": not state.get("on_failure", True),
            },
        }

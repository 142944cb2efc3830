"""Component base class and capability descriptor.

Components are the pluggable units users configure from their mixfile. A
component may subclass ``Component`` (and then receives the orchestrator
at construction) or be any object with the attributes of
``ComponentProtocol``; hooks are optional either way.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from buildmix.build.group import BuildGroup, GroupContext
    from buildmix.mix import Mix


@dataclass(frozen=True)
class ComponentCapabilities:
    """Which optional hooks a component implements. Detected once."""

    name: bool = False
    register: bool = False
    dependencies: bool = False
    boot: bool = False
    babel_config: bool = False
    webpack_entry: bool = False
    webpack_rules: bool = False
    webpack_plugins: bool = False
    webpack_config: bool = False
    api_methods: bool = False

    @classmethod
    def detect(cls, component: Any) -> ComponentCapabilities:
        return cls(
            **{
                f.name: callable(getattr(component, f.name, None))
                for f in fields(cls)
            }
        )

    @property
    def hooks(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name)]


class Component:
    """Base class for built-in components.

    Subclasses set ``passive`` / ``requires_reload`` as class attributes and
    implement whichever hooks they need. Per-group options go through
    ``state()`` so a component used in several groups keeps them apart.
    """

    passive: bool = False
    requires_reload: bool = False

    def __init__(self, mix: Mix) -> None:
        self.mix = mix
        self.activated = False
        self.caller: str | None = None

    @property
    def key(self) -> str:
        return type(self).__name__

    @property
    def context(self) -> GroupContext:
        """Context of the group that is current right now."""
        return self.mix.current_group.context

    def state(self, group: BuildGroup | None = None) -> dict[str, Any]:
        """This component's mutable options for ``group`` (default: current)."""
        context = group.context if group is not None else self.context
        return context.state_for(self.key)

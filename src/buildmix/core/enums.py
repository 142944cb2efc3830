"""Enumerations used across the build orchestrator."""

from enum import Enum


class Phase(str, Enum):
    LOAD = "load"
    SETUP = "setup"
    GATHER_DEPENDENCIES = "gather_dependencies"
    INSTALL_DEPENDENCIES = "install_dependencies"
    INIT = "init"
    BUILD = "build"


class LifecycleEvent(str, Enum):
    """Event names fired on the dispatcher.

    The two standing events (``GATHER_DEPENDENCIES``, ``INIT``) fire once per
    process; the rest fire once per buildable group during the Build phase.
    """

    GATHER_DEPENDENCIES = "internal:gather-dependencies"
    INIT = "init"
    LOADING_ENTRY = "loading-entry"
    LOADING_RULES = "loading-rules"
    LOADING_PLUGINS = "loading-plugins"
    CONFIG_READY = "config-ready"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"

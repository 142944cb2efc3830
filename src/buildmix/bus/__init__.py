"""Event dispatch for the build lifecycle."""

from buildmix.bus.dispatcher import EventDispatcher

__all__ = ["EventDispatcher"]

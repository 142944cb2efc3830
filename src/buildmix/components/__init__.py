"""Pluggable build components and the registry that exposes them."""

from buildmix.components.base import Component, ComponentCapabilities

__all__ = ["Component", "ComponentCapabilities"]

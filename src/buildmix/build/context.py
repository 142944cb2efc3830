"""Stack of build groups with exactly one "current" group.

The stack lives in a ``ContextVar`` holding an immutable tuple. Every task
created by ``asyncio.gather`` runs in a copy of the caller's context, so
groups set up or built concurrently each see their own top of stack and
never the group another task pushed.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class BuildContextStack(Generic[T]):
    """LIFO stack of scopes whose bottom element (the root) is permanent."""

    def __init__(self, root: T) -> None:
        self._root = root
        self._stack: ContextVar[tuple[T, ...]] = ContextVar(
            f"buildmix_scope_stack_{id(self):x}", default=(root,)
        )

    @property
    def root(self) -> T:
        return self._root

    @property
    def depth(self) -> int:
        return len(self._stack.get())

    def push(self, scope: T) -> T:
        """Make ``scope`` current and return it."""
        self._stack.set(self._stack.get() + (scope,))
        return scope

    def pop(self) -> T | None:
        """Remove and return the top scope. The root is never removed."""
        stack = self._stack.get()
        if len(stack) == 1:
            return None
        self._stack.set(stack[:-1])
        return stack[-1]

    def current(self) -> T:
        return self._stack.get()[-1]

    @contextmanager
    def using(self, scope: T) -> Iterator[T]:
        """Keep ``scope`` current for the duration of the ``with`` block."""
        self.push(scope)
        try:
            yield scope
        finally:
            self.pop()

    async def while_current(
        self, scope: T, fn: Callable[..., Any], *args: Any
    ) -> Any:
        """Run ``fn(*args)`` with ``scope`` current and return its result.

        ``fn`` may be synchronous or return an awaitable. The scope is popped
        on every exit path, including when ``fn`` raises.
        """
        with self.using(scope):
            result = fn(*args)
            if inspect.isawaitable(result):
                result = await result
            return result

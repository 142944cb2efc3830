"""Property test: dispatch order and scope restoration.

Handlers run exactly in registration order however they are interleaved
across events, and the scope stack is back at the root once any nesting
of ``while_current`` calls unwinds, whether or not the innermost raises.
"""

import asyncio

from hypothesis import given, settings, strategies as st

from buildmix.build.context import BuildContextStack
from buildmix.bus.dispatcher import EventDispatcher


@given(
    registrations=st.lists(
        st.tuples(st.sampled_from(["a", "b", "c"]), st.booleans()),
        max_size=30,
    )
)
@settings(max_examples=100)
def test_handlers_run_in_registration_order(registrations):
    dispatcher = EventDispatcher()
    calls = []

    for index, (event, is_async) in enumerate(registrations):
        if is_async:
            async def handler(*_, i=index):
                calls.append(i)
        else:
            def handler(*_, i=index):
                calls.append(i)
        dispatcher.listen(event, handler)

    for event in ("a", "b", "c"):
        calls.clear()
        asyncio.run(dispatcher.fire(event, None))
        expected = [i for i, (name, _) in enumerate(registrations) if name == event]
        assert calls == expected


@given(depth=st.integers(min_value=0, max_value=20), fail=st.booleans())
@settings(max_examples=50)
def test_nested_scopes_unwind_to_root(depth, fail):
    stack = BuildContextStack("root")

    async def nest(level):
        if level == depth:
            expected = f"scope-{depth}" if depth else "root"
            assert stack.current() == expected
            if fail:
                raise RuntimeError("boom")
            return
        await stack.while_current(f"scope-{level + 1}", nest, level + 1)

    async def main():
        try:
            await nest(0)
        except RuntimeError:
            pass
        return stack.current(), stack.depth

    assert asyncio.run(main()) == ("root", 1)

"""Property test: dependency deduplication.

Whatever order components queue packages in, every package appears once
and needs a reload exactly when some contributor asked for one.
"""

from hypothesis import given, settings, strategies as st

from buildmix.dependencies import Dependencies

packages = st.sampled_from(["sass", "react", "vue", "@babel/core", "postcss"])


@given(queued=st.lists(st.tuples(packages, st.booleans()), max_size=25))
@settings(max_examples=200)
def test_dedupe_is_unique_and_ors_reload(queued):
    deps = Dependencies(installer=None)
    for package, reload in queued:
        deps.queue(package, requires_reload=reload)

    result = deps.deduplicated()
    names = [dep.package for dep, _ in result]

    assert len(names) == len(set(names))
    assert names == list(dict.fromkeys(package for package, _ in queued))
    for dep, reload in result:
        assert reload == any(r for p, r in queued if p == dep.package)

import pytest

from fedcat.core.namespace import Namespace
from fedcat.core.resolver import CatalogResolver


class _CountingRegistry:
    def __init__(self, inner):
        self.inner = inner
        self.lookups: list[tuple[str, str]] = []

    def lookup_datasource(self, owner, name):
        self.lookups.append((str(owner), name))
        return self.inner.lookup_datasource(owner, name)


@pytest.mark.parametrize(
    "residual",
    [[], ["sales"], ["sales", "eu"], ["a", "b", "c"]],
)
def test_resolve_owner_returns_datasource_and_residual(registry, register_ds, residual):
    ds = register_ds(["datasource", "team"], "lake")
    namespace = Namespace(["datasource", "team", "lake", *residual])

    resolution = CatalogResolver(registry).resolve_owner(namespace)

    assert resolution is not None
    assert resolution.datasource == ds
    assert resolution.residual == Namespace(residual)


def test_datasource_directly_under_a_root_is_never_resolved(registry, register_ds):
    register_ds(["datasource"], "lake")

    assert CatalogResolver(registry).resolve_owner(
        Namespace(["datasource", "lake", "sales"])
    ) is None


def test_resolve_owner_matches_case_insensitively(registry, register_ds):
    ds = register_ds(["datasource", "team"], "lake")

    resolution = CatalogResolver(registry).resolve_owner(
        Namespace(["DataSource", "TEAM", "Lake", "Sales"])
    )

    assert resolution.datasource == ds
    assert list(resolution.residual) == ["Sales"]


def test_resolve_owner_not_found_without_registration(registry):
    registry.create_namespace(Namespace(["datasource", "team"]), {})

    assert CatalogResolver(registry).resolve_owner(
        Namespace(["datasource", "team", "x", "y"])
    ) is None


@pytest.mark.parametrize("segments", [[], ["datasource"], ["datasource", "lake"]])
def test_shallow_namespaces_never_resolve(registry, register_ds, segments):
    register_ds(["datasource"], "lake")
    counting = _CountingRegistry(registry)

    assert CatalogResolver(counting).resolve_owner(Namespace(segments)) is None
    assert counting.lookups == []


def test_resolution_walks_upward_one_level_at_a_time(registry):
    counting = _CountingRegistry(registry)

    CatalogResolver(counting).resolve_owner(Namespace(["datasource", "a", "b", "c"]))

    assert counting.lookups == [
        ("datasource.a.b", "c"),
        ("datasource.a", "b"),
    ]

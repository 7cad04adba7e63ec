from types import SimpleNamespace

import pytest
from databricks.sdk.errors import NotFound

from fedcat.core.adapters import BACKENDS, catalog_for
from fedcat.core.adapters.delta import DeltaCatalog
from fedcat.core.adapters.sqlite import SqliteCatalog
from fedcat.core.adapters.unitycatalog import UnityCatalogBackend
from fedcat.core.errors import (
    ConfigurationError,
    InvalidNamespace,
    NamespaceNotEmpty,
    TableAlreadyExists,
    TableNotFound,
    UnsupportedOperation,
)
from fedcat.core.models import DatasourceDefinition, DatasourceKind
from fedcat.core.namespace import Identifier, Namespace
from fedcat.core.tables import Column


def test_every_kind_has_a_backend():
    assert set(BACKENDS) == set(DatasourceKind)


def test_catalog_for_rejects_kind_without_backend():
    ds = DatasourceDefinition(Namespace(["datasource", "a"]), "x", DatasourceKind.SQLITE)

    with pytest.raises(ConfigurationError, match="No backend catalog"):
        catalog_for(ds, backends={})


def test_catalog_for_builds_backend_from_properties(tmp_path):
    ds = DatasourceDefinition(
        Namespace(["datasource", "a"]),
        "lake",
        DatasourceKind.DELTA,
        {"path": str(tmp_path)},
    )

    backend = catalog_for(ds)

    assert isinstance(backend, DeltaCatalog)
    assert backend.root == tmp_path


def test_missing_path_property_is_configuration_error():
    ds = DatasourceDefinition(Namespace(["datasource", "a"]), "db", DatasourceKind.SQLITE)

    with pytest.raises(ConfigurationError, match="'path'"):
        catalog_for(ds)


# -- delta ---------------------------------------------------------------------


def test_delta_table_lifecycle(tmp_path):
    delta = DeltaCatalog(tmp_path)
    delta.create_namespace(Namespace(["sales"]), {})
    ident = Identifier(["sales"], "Orders")

    created = delta.create_table(
        ident, [Column("id", "bigint", nullable=False), Column("day", "date")], ["day"], {}
    )

    assert created.table_type == "DELTA"
    assert created.properties["partitioning"] == "day"
    assert delta.list_tables(Namespace(["SALES"])) == [Identifier(["sales"], "Orders")]
    assert delta.table_exists(Identifier(["sales"], "orders"))
    assert [c.name for c in delta.load_table(ident).columns] == ["id", "day"]

    with pytest.raises(TableAlreadyExists):
        delta.create_table(ident, [Column("id", "bigint")], [], {})

    assert delta.drop_table(ident) is True
    assert delta.drop_table(ident) is False
    with pytest.raises(TableNotFound):
        delta.load_table(ident)


def test_delta_lists_only_last_segment(tmp_path):
    delta = DeltaCatalog(tmp_path)

    assert delta.listing_namespace(
        Namespace(["datasource", "t", "lake", "sales", "eu"]), Namespace(["sales", "eu"])
    ) == ["eu"]


def test_delta_namespaces_exclude_tables(tmp_path):
    delta = DeltaCatalog(tmp_path)
    delta.create_namespace(Namespace(["sales"]), {"owner": "me"})
    delta.create_namespace(Namespace(["sales", "eu"]), {})
    delta.create_table(Identifier(["sales"], "t"), [Column("id", "int")], [], {})

    assert delta.list_namespaces(Namespace(["sales"])) == [Namespace(["sales", "eu"])]
    assert delta.namespace_exists(Namespace(["sales", "eu"]))
    assert not delta.namespace_exists(Namespace(["sales", "t"]))


def test_delta_drop_namespace_requires_cascade_when_not_empty(tmp_path):
    delta = DeltaCatalog(tmp_path)
    delta.create_namespace(Namespace(["sales"]), {"owner": "me"})
    delta.create_table(Identifier(["sales"], "t"), [Column("id", "int")], [], {})

    with pytest.raises(NamespaceNotEmpty):
        delta.drop_namespace(Namespace(["sales"]), cascade=False)
    assert delta.drop_namespace(Namespace(["sales"]), cascade=True) is True
    assert delta.drop_namespace(Namespace(["sales"]), cascade=True) is False


def test_delta_partition_columns_must_exist(tmp_path):
    delta = DeltaCatalog(tmp_path)
    delta.create_namespace(Namespace(["sales"]), {})

    with pytest.raises(ValueError, match="Partition columns"):
        delta.create_table(Identifier(["sales"], "t"), [Column("id", "int")], ["day"], {})


# -- sqlite --------------------------------------------------------------------


def test_sqlite_table_lifecycle(tmp_path):
    sqlite = SqliteCatalog(tmp_path / "db.sqlite")
    ident = Identifier(["main"], "users")

    sqlite.create_table(
        ident, [Column("id", "INTEGER", nullable=False), Column("name", "TEXT")], [], {}
    )

    assert sqlite.list_tables(Namespace(["main"])) == [ident]
    assert sqlite.table_exists(Identifier(["main"], "USERS"))
    loaded = sqlite.load_table(ident)
    assert [(c.name, c.data_type, c.nullable) for c in loaded.columns] == [
        ("id", "INTEGER", False),
        ("name", "TEXT", True),
    ]
    assert sqlite.drop_table(ident) is True
    assert sqlite.table_exists(ident) is False


def test_sqlite_rejects_foreign_namespaces_and_partitions(tmp_path):
    sqlite = SqliteCatalog(tmp_path / "db.sqlite")

    with pytest.raises(InvalidNamespace):
        sqlite.list_tables(Namespace(["other"]))
    with pytest.raises(UnsupportedOperation):
        sqlite.create_table(Identifier([], "t"), [Column("id", "INTEGER")], ["id"], {})
    with pytest.raises(UnsupportedOperation):
        sqlite.create_namespace(Namespace(["x"]), {})
    assert sqlite.list_namespaces(Namespace()) == [Namespace(["main"])]


# -- unity catalog -------------------------------------------------------------


class _Tables:
    def __init__(self):
        self.deleted: list[str] = []

    def list(self, *, catalog_name, schema_name):
        return [
            SimpleNamespace(name="t1", full_name=f"{catalog_name}.{schema_name}.t1"),
            SimpleNamespace(name=None, full_name=f"{catalog_name}.{schema_name}.t2"),
        ]

    def get(self, *, full_name):
        if full_name.endswith(".missing"):
            raise NotFound("missing")
        return SimpleNamespace(
            columns=[SimpleNamespace(name="id", type_text="bigint", nullable=False)],
            properties={"delta.minReaderVersion": "1"},
            table_type=SimpleNamespace(value="MANAGED"),
        )

    def delete(self, *, full_name):
        self.deleted.append(full_name)

    def exists(self, *, full_name):
        return SimpleNamespace(table_exists=full_name.endswith(".t1"))


class _Schemas:
    def list(self, *, catalog_name):
        return [SimpleNamespace(name="sales"), SimpleNamespace(name="hr")]

    def get(self, *, full_name):
        if full_name != "main.sales":
            raise NotFound(full_name)
        return SimpleNamespace(full_name=full_name)


class _Catalogs:
    def list(self):
        return [SimpleNamespace(name="main")]

    def get(self, *, name):
        if name != "main":
            raise NotFound(name)
        return SimpleNamespace(name=name)


@pytest.fixture
def uc():
    client = SimpleNamespace(tables=_Tables(), schemas=_Schemas(), catalogs=_Catalogs())
    return UnityCatalogBackend(client)


def test_unity_catalog_lists_tables_in_schema(uc):
    assert uc.list_tables(Namespace(["main", "sales"])) == [
        Identifier(["main", "sales"], "t1"),
        Identifier(["main", "sales"], "t2"),
    ]


def test_unity_catalog_requires_two_level_namespace(uc):
    with pytest.raises(InvalidNamespace, match="catalog.schema"):
        uc.list_tables(Namespace(["main"]))


def test_unity_catalog_load_table_maps_columns(uc):
    table = uc.load_table(Identifier(["main", "sales"], "t1"))

    assert table.table_type == "MANAGED"
    assert table.columns[0].name == "id"
    assert table.columns[0].nullable is False

    with pytest.raises(TableNotFound):
        uc.load_table(Identifier(["main", "sales"], "missing"))


def test_unity_catalog_namespaces(uc):
    assert uc.list_namespaces(Namespace()) == [Namespace(["main"])]
    assert uc.list_namespaces(Namespace(["main"])) == [
        Namespace(["main", "sales"]),
        Namespace(["main", "hr"]),
    ]
    assert uc.namespace_exists(Namespace(["main", "sales"])) is True
    assert uc.namespace_exists(Namespace(["main", "ghost"])) is False
    assert uc.namespace_exists(Namespace(["ghost"])) is False


def test_unity_catalog_table_exists_and_drop(uc):
    assert uc.table_exists(Identifier(["main", "sales"], "t1")) is True
    assert uc.table_exists(Identifier(["main"], "t1")) is False
    assert uc.drop_table(Identifier(["main", "sales"], "t1")) is True
    assert uc.client.tables.deleted == ["main.sales.t1"]


def test_unity_catalog_create_table_is_unsupported(uc):
    with pytest.raises(UnsupportedOperation):
        uc.create_table(Identifier(["main", "sales"], "t"), [Column("id", "int")], [], {})

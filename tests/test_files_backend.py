import pytest

from fedcat.core.adapters.files import UnstructuredFileCatalog, UnstructuredTable
from fedcat.core.catalog import FederatedCatalog
from fedcat.core.errors import (
    ConfigurationError,
    NamespaceNotDefined,
    TableNotFound,
    UnsupportedOperation,
)
from fedcat.core.models import DatasourceKind
from fedcat.core.namespace import Identifier, Namespace
from fedcat.core.tables import Column
from fedcat.core.unstructured.filters import StringContains


@pytest.fixture
def docs(tmp_path):
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "one.txt").write_text("first note body")
    (tmp_path / "two.md").write_text("second")
    return tmp_path


@pytest.fixture
def files(docs):
    return UnstructuredFileCatalog([docs], file_format="text", preview_len=5)


def test_file_catalog_has_two_fixed_tables(files):
    assert files.list_tables(Namespace()) == [
        Identifier([], "metadata"),
        Identifier([], "content"),
    ]
    assert files.table_exists(Identifier([], "CONTENT"))
    assert not files.table_exists(Identifier([], "other"))
    assert files.list_namespaces(Namespace()) == []
    with pytest.raises(NamespaceNotDefined):
        files.list_tables(Namespace(["x"]))


def test_metadata_table_scan(files, docs):
    table = files.load_table(Identifier([], "Metadata"))

    results = table.scan(["subdir", "type", "preview", "sizeinbytes"], max_parallel=1)

    assert isinstance(table, UnstructuredTable)
    assert table.table_type == "UNSTRUCTURED_METADATA"
    assert [r.row for r in results] == [
        ("notes", "txt", "first", 15),
        ("", "md", "secon", 6),
    ]


def test_content_table_scan_with_pushed_filter(files):
    table = files.load_table(Identifier([], "content"))

    results = table.scan(["textcontent"], [StringContains("subdir", "notes")])

    assert [r.row for r in results if r.emitted] == [("first note body",)]


def test_unknown_table_and_mutations(files):
    with pytest.raises(TableNotFound):
        files.load_table(Identifier([], "blobs"))
    with pytest.raises(UnsupportedOperation):
        files.create_table(Identifier([], "t"), [Column("id", "int")], [], {})
    with pytest.raises(UnsupportedOperation):
        files.drop_table(Identifier([], "metadata"))


def test_file_catalog_needs_paths():
    with pytest.raises(ConfigurationError):
        UnstructuredFileCatalog([])
    with pytest.raises(ConfigurationError, match="Unsupported document format"):
        UnstructuredFileCatalog(["/tmp"], file_format="docx")


def test_federated_catalog_reaches_file_tables(registry, register_ds, docs):
    register_ds(
        ["datasource", "team"],
        "docs",
        DatasourceKind.UNSTRUCTURED,
        paths=str(docs),
        format="text",
        preview_len="3",
    )

    with FederatedCatalog(registry) as catalog:
        tables = catalog.list_tables(Namespace.parse("datasource.team.docs"))
        table = catalog.load_table(Identifier.parse("datasource.team.docs.metadata"))

    assert [t.name for t in tables] == ["metadata", "content"]
    assert tables[0].namespace == ["datasource", "team", "docs"]
    assert [r.row for r in table.scan(["preview"])] == [("fir",), ("sec",)]


def test_federated_catalog_reaches_sqlite_and_delta(registry, register_ds, tmp_path):
    register_ds(["datasource", "team"], "db", DatasourceKind.SQLITE, path=str(tmp_path / "x.db"))
    (tmp_path / "lake").mkdir()
    register_ds(["datasource", "team"], "lake", DatasourceKind.DELTA, path=str(tmp_path / "lake"))

    with FederatedCatalog(registry) as catalog:
        catalog.create_table(
            Identifier.parse("datasource.team.db.main.users"), [Column("id", "INTEGER")]
        )
        catalog.create_namespace(Namespace.parse("datasource.team.lake.sales"))
        catalog.create_table(
            Identifier.parse("datasource.team.lake.sales.orders"), [Column("id", "bigint")]
        )

        assert catalog.table_exists(Identifier.parse("datasource.team.db.main.users"))
        assert catalog.list_tables(Namespace.parse("datasource.team.lake.sales")) == [
            Identifier.parse("datasource.team.lake.sales.orders")
        ]
        assert catalog.list_namespaces(Namespace.parse("datasource.team.lake")) == [
            Namespace.parse("datasource.team.lake.sales")
        ]


def test_system_tables_describe_the_registry(registry, register_ds):
    register_ds(["datasource", "team"], "db", DatasourceKind.SQLITE, path="x.db")

    with FederatedCatalog(registry) as catalog:
        datasources = catalog.load_table(Identifier.parse("lightning.datasources"))
        namespaces = catalog.load_table(Identifier.parse("lightning.namespaces"))
        with pytest.raises(TableNotFound):
            catalog.load_table(Identifier.parse("lightning.jobs"))

    assert list(datasources.rows()) == [("datasource.team", "db", "sqlite")]
    assert ("datasource.team",) in list(namespaces.rows())

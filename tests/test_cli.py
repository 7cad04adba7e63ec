import pytest
from typer.testing import CliRunner

from fedcat.cli.cli import app
from fedcat.cli.common.output import _cell


@pytest.fixture
def invoke(tmp_path):
    runner = CliRunner()
    registry = tmp_path / "registry.json"

    def _run(*args):
        return runner.invoke(app, ["--registry", str(registry), *args])

    return _run


def test_cell_rendering():
    assert _cell(None) == "[meta]null[/]"
    assert _cell(b"abc") == "<3 bytes>"
    assert _cell("a\nb") == "a b"
    assert _cell("x" * 100).endswith("...")
    assert len(_cell("x" * 100)) == 60


def test_register_and_browse_datasource(invoke, tmp_path):
    assert invoke("namespaces", "create", "datasource.team").exit_code == 0

    result = invoke(
        "datasources", "register", "datasource.team", "db",
        "--kind", "sqlite", "--prop", f"path={tmp_path / 'x.db'}",
    )
    assert result.exit_code == 0, result.output
    assert "datasource.team.db" in result.output

    listed = invoke("namespaces", "list", "datasource.team")
    assert listed.exit_code == 0
    assert "datasource.team.db" in listed.output

    assert invoke("namespaces", "exists", "datasource.team.db").exit_code == 0
    assert invoke("namespaces", "exists", "datasource.nobody").exit_code == 1


def test_unknown_kind_is_rejected(invoke):
    invoke("namespaces", "create", "datasource.team")

    result = invoke("datasources", "register", "datasource.team", "x", "--kind", "oracle")

    assert result.exit_code == 1
    assert "Unknown datasource kind" in result.output


def test_root_namespace_cannot_be_dropped(invoke):
    result = invoke("namespaces", "drop", "datasource", "--yes")

    assert result.exit_code == 1
    assert "not allowed" in result.output


def test_files_scan_reports_rows_and_errors(invoke, tmp_path):
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "ok.txt").write_text("hello")
    (docs / "bad.txt").write_bytes(b"\xff\xfe")

    result = invoke(
        "files", "scan", str(docs), "--format", "text", "--mode", "content",
        "-c", "textcontent", "--parallel", "1",
    )

    assert result.exit_code == 1
    assert "Rows: 1" in result.output
    assert "Errors: 1" in result.output

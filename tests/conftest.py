from __future__ import annotations

import sys
from pathlib import Path

# Ensure tests always import the local src tree, not an older installed wheel.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
sys.path.insert(0, str(SRC))

import pytest

from fedcat.core.backends import BackendCatalog
from fedcat.core.models import DatasourceDefinition, DatasourceKind
from fedcat.core.namespace import Identifier, Namespace
from fedcat.core.registry import InMemoryRegistry


class RecordingBackend(BackendCatalog):
    """Backend stub that records every delegated call."""

    def __init__(self, datasource: DatasourceDefinition, *, nested: bool = False):
        self.datasource = datasource
        self.nested = nested
        self.calls: list[tuple] = []
        self.closed = False

    def listing_namespace(self, namespace, residual):
        return namespace[-1:] if self.nested else residual

    def list_tables(self, namespace):
        self.calls.append(("list_tables", namespace))
        return [Identifier(namespace, "t1"), Identifier(namespace, "t2")]

    def load_table(self, identifier):
        self.calls.append(("load_table", identifier))
        return ("table", identifier)

    def create_table(self, identifier, columns, partitioning, properties):
        self.calls.append(("create_table", identifier, tuple(columns), tuple(partitioning)))
        return ("created", identifier)

    def drop_table(self, identifier):
        self.calls.append(("drop_table", identifier))
        return True

    def list_namespaces(self, namespace):
        self.calls.append(("list_namespaces", namespace))
        return [namespace.child("child")]

    def namespace_exists(self, namespace):
        self.calls.append(("namespace_exists", namespace))
        return True

    def create_namespace(self, namespace, properties):
        self.calls.append(("create_namespace", namespace, dict(properties)))

    def drop_namespace(self, namespace, cascade):
        self.calls.append(("drop_namespace", namespace, cascade))
        return True

    def table_exists(self, identifier):
        self.calls.append(("table_exists", identifier))
        return True

    def close(self):
        self.closed = True


class BackendRecorder:
    """Backend factory that keeps every backend it builds."""

    def __init__(self):
        self.built: list[RecordingBackend] = []

    def __call__(self, datasource: DatasourceDefinition) -> RecordingBackend:
        backend = RecordingBackend(
            datasource, nested=datasource.kind is DatasourceKind.DELTA
        )
        self.built.append(backend)
        return backend

    @property
    def last(self) -> RecordingBackend:
        return self.built[-1]


@pytest.fixture
def registry() -> InMemoryRegistry:
    return InMemoryRegistry()


@pytest.fixture
def recorder() -> BackendRecorder:
    return BackendRecorder()


def _register(
    registry: InMemoryRegistry,
    owner: list[str],
    name: str,
    kind: DatasourceKind = DatasourceKind.SQLITE,
    **properties: str,
) -> DatasourceDefinition:
    """Register a datasource, creating organizational namespaces on the way."""
    for depth in range(2, len(owner) + 1):
        ns = Namespace(owner[:depth])
        if ns.last not in registry.list_child_namespaces(ns.parent):
            registry.create_namespace(ns, {})
    definition = DatasourceDefinition(
        namespace=Namespace(owner), name=name, kind=kind, properties=properties
    )
    registry.register_datasource(definition)
    return definition


@pytest.fixture
def register_ds(registry):
    def _do(owner, name, kind=DatasourceKind.SQLITE, **properties):
        return _register(registry, owner, name, kind, **properties)

    return _do


def _pdf_document(text: str) -> bytes:
    """Build a one-page PDF showing `text` in Helvetica."""
    content = f"BT /F1 12 Tf 20 100 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 300 144] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        b"<< /Length %d >>\nstream\n" % len(content) + content + b"\nendstream",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref,
    )
    return bytes(out)


@pytest.fixture
def make_pdf():
    return _pdf_document

"""Backend catalog implementations and the kind -> backend mapping."""

from __future__ import annotations

from typing import Callable, Mapping

from fedcat.core.adapters.delta import DeltaCatalog
from fedcat.core.adapters.files import UnstructuredFileCatalog
from fedcat.core.adapters.sqlite import SqliteCatalog
from fedcat.core.adapters.unitycatalog import UnityCatalogBackend
from fedcat.core.backends import BackendCatalog
from fedcat.core.errors import ConfigurationError
from fedcat.core.models import DatasourceDefinition, DatasourceKind

BackendFactory = Callable[[DatasourceDefinition], BackendCatalog]

BACKENDS: Mapping[DatasourceKind, BackendFactory] = {
    DatasourceKind.DELTA: DeltaCatalog.from_datasource,
    DatasourceKind.SQLITE: SqliteCatalog.from_datasource,
    DatasourceKind.UNITY_CATALOG: UnityCatalogBackend.from_datasource,
    DatasourceKind.UNSTRUCTURED: UnstructuredFileCatalog.from_datasource,
}


def catalog_for(
    datasource: DatasourceDefinition,
    backends: Mapping[DatasourceKind, BackendFactory] = BACKENDS,
) -> BackendCatalog:
    """Build the backend catalog for a datasource from its kind."""
    factory = backends.get(datasource.kind)
    if factory is None:
        raise ConfigurationError(
            f"No backend catalog for kind '{datasource.kind.value}' "
            f"(datasource {datasource.full_namespace})"
        )
    return factory(datasource)

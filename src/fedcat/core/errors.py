"""Catalog error taxonomy.

Catalog-level errors are fatal for the call that raised them. Extraction
errors are scoped to the single file being scanned.
"""


class CatalogError(RuntimeError):
    """Base class for all catalog errors."""


class NamespaceNotDefined(CatalogError):
    """Raised when no owning datasource or registry namespace exists for a path."""

    def __init__(self, namespace) -> None:
        super().__init__(f"namespace({namespace}) is not defined")
        self.namespace = namespace


class MissingNamespace(CatalogError):
    """Raised when a table identifier carries no namespace."""

    def __init__(self) -> None:
        super().__init__("namespace is not provided")


class InvalidNamespace(CatalogError):
    """Raised when an identifier's namespace is malformed for the operation."""


class UnsupportedOperation(CatalogError):
    """Raised for operations the catalog (or a backend) explicitly rejects."""


class ConfigurationError(CatalogError):
    """Raised for inconsistent configuration (unknown backend kind, root paths)."""


class ExtractionError(CatalogError):
    """Raised when text cannot be derived from a file's bytes."""


class NamespaceAlreadyExists(CatalogError):
    """Raised when creating a namespace that is already present."""


class NamespaceNotEmpty(CatalogError):
    """Raised when dropping a non-empty namespace without cascade."""


class TableNotFound(CatalogError):
    """Raised when a table does not exist in the owning backend."""


class TableAlreadyExists(CatalogError):
    """Raised when creating a table that is already present."""

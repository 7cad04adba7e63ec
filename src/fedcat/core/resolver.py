"""Owner resolution: map a virtual namespace to the datasource that owns it.

A datasource registered as `name` under owner namespace `P` owns every
namespace that starts with `P + [name]`. Resolution walks upward from the
deepest candidate, so one registration can own an arbitrarily deep sub-tree.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fedcat.core.models import DatasourceDefinition
from fedcat.core.namespace import Namespace
from fedcat.core.registry import MetadataRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """
    Result of a successful owner lookup.

    Attributes:
        datasource: The owning datasource definition.
        residual: Backend-relative namespace (routing prefix removed).
    """

    datasource: DatasourceDefinition
    residual: Namespace


class CatalogResolver:
    """Find the nearest registered datasource owning a namespace."""

    def __init__(self, registry: MetadataRegistry) -> None:
        self.registry = registry

    def resolve_owner(self, namespace: Namespace) -> Resolution | None:
        """
        Walk `namespace` upward until a registered datasource is found.

        At step `i` the candidate is the datasource named `namespace[i]`
        registered under `namespace[:i]`. The walk stops before `i == 1`,
        so a datasource registered directly under a root never owns anything.

        Args:
            namespace: Absolute namespace to resolve.

        Returns:
            The owning datasource and the residual namespace, or None.
        """
        index = len(namespace) - 1
        while index > 1:
            root = namespace[:index]
            name = namespace[index]
            datasource = self.registry.lookup_datasource(root, name)
            if datasource is not None:
                residual = namespace.drop(len(datasource.namespace) + 1)
                logger.debug(
                    "Resolved %s to datasource %s (residual=%s)",
                    namespace,
                    datasource.full_namespace,
                    residual,
                )
                return Resolution(datasource=datasource, residual=residual)
            index -= 1

        logger.debug("No datasource owns %s", namespace)
        return None

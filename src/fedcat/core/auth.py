"""Workspace client construction for Unity Catalog datasources.

A datasource carries either a unified-auth profile or a host/token pair in
its properties; a client is built each time the backend is created.
"""

import re
from typing import Mapping

from databricks.sdk import WorkspaceClient
from databricks.sdk.core import Config

from fedcat.core.errors import CatalogError


class AuthError(CatalogError):
    """Raised when a workspace client cannot be configured for a datasource."""


def _format_auth_error(message: str, profile: str | None) -> str:
    """Turn an SDK configuration error into a re-login hint when possible."""
    login_match = re.search(r"databricks auth login ([^\s]+)", message)
    host = login_match.group(1) if login_match else None
    if host:
        cmd = "databricks auth login"
        if profile:
            cmd = f"{cmd} --profile {profile}"
        return (
            f"Datasource credentials for {host} have expired.\n"
            f"Re-authenticate with:\n  $ {cmd}"
        )
    return f"Cannot configure the Databricks client: {message}"


def _sanitize_host(host: str | None) -> str | None:
    """
    Normalize a Databricks host URL.

    - Removes query strings (e.g. '?o=123456789')
    - Removes trailing slashes
    """
    if not host:
        return host
    host = host.split("?", 1)[0]
    return host.rstrip("/")


def client_from_properties(properties: Mapping[str, str]) -> WorkspaceClient:
    """
    Create a WorkspaceClient from datasource connection properties.

    Recognized properties:
        profile: Databricks unified-auth profile (~/.databrickscfg).
        host: Workspace URL; combined with `token` when given.
        token: Personal access token.

    With none of these, the SDK falls back to its environment variables.
    """
    profile = properties.get("profile") or None
    kwargs: dict[str, str] = {}
    if profile:
        kwargs["profile"] = profile
    if properties.get("host"):
        kwargs["host"] = _sanitize_host(properties["host"]) or ""
    if properties.get("token"):
        kwargs["token"] = properties["token"]
    try:
        cfg = Config(**kwargs)
    except ValueError as exc:
        raise AuthError(_format_auth_error(str(exc), profile)) from exc
    cfg.host = _sanitize_host(cfg.host)
    return WorkspaceClient(config=cfg)

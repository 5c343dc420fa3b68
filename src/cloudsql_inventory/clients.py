from __future__ import annotations

import threading
from functools import lru_cache
from typing import Any

import google.auth
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError
from googleapiclient import discovery

from .core import SQLADMIN_API, SQLADMIN_VERSION, SQLSERVICE_ADMIN_SCOPE
from .errors import ClientBuildError, CredentialsError

# Shared Client Registry (Lazy-loaded and cached)

_local = threading.local()


@lru_cache(maxsize=1)
def get_credentials() -> Credentials:
    """
    Application Default Credentials scoped to the Cloud SQL Admin API.
    Raises CredentialsError when none can be found.
    """
    try:
        credentials, _project = google.auth.default(scopes=[SQLSERVICE_ADMIN_SCOPE])
    except DefaultCredentialsError as e:
        raise CredentialsError(f"Failed to find default credentials: {e}") from e
    return credentials


def build_sql_client(credentials: Credentials) -> Any:
    try:
        return discovery.build(
            SQLADMIN_API,
            SQLADMIN_VERSION,
            credentials=credentials,
            cache_discovery=False,
        )
    except Exception as e:
        raise ClientBuildError(f"Failed to create Cloud SQL Admin client: {e}") from e


@lru_cache(maxsize=1)
def get_sql_client() -> Any:
    return build_sql_client(get_credentials())


def get_thread_sql_client() -> Any:
    """
    One client per worker thread.
    The discovery client's httplib2 transport must not be shared across threads.
    """
    client = getattr(_local, "sql_client", None)
    if client is None:
        client = build_sql_client(get_credentials())
        _local.sql_client = client
    return client


@lru_cache(maxsize=1)
def get_projects_client() -> Any:
    from google.cloud import resourcemanager_v3

    return resourcemanager_v3.ProjectsClient()

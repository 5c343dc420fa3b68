import subprocess
from collections.abc import Callable

from google.cloud import resourcemanager_v3

from ..clients import get_projects_client
from ..config import ProjectSource
from ..core import GCLOUD_PROJECTS_CMD
from ..errors import ProjectDiscoveryError
from ..logger import logger

# Anything that returns an ordered list of project IDs can drive a run
ProjectLister = Callable[[], list[str]]


def parse_project_ids(output: str) -> list[str]:
    """One project ID per line; blank lines dropped, order kept."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def list_gcloud_projects() -> list[str]:
    """
    Lists the projects visible to the active gcloud account.
    Raises ProjectDiscoveryError if gcloud is missing or exits non-zero.
    """
    try:
        res = subprocess.run(
            GCLOUD_PROJECTS_CMD, capture_output=True, text=True, check=False
        )
    except (OSError, subprocess.SubprocessError) as e:
        raise ProjectDiscoveryError(f"Failed to list projects: {e}") from e

    if res.returncode != 0:
        err = res.stderr.strip() if res.stderr else "Unknown error"
        raise ProjectDiscoveryError(
            f"Failed to list projects: gcloud exited with {res.returncode}: {err}"
        )

    projects = parse_project_ids(res.stdout)
    logger.info(f"gcloud returned {len(projects)} project(s)")
    return projects


def list_all_projects() -> list[str]:
    """
    Lists all ACTIVE projects that the current user has access to,
    via the Resource Manager API. Returns a list of project_id strings.
    """
    try:
        client = get_projects_client()

        # We don't specify a parent to list all projects the user can see
        # filtering for ACTIVE state.
        request = resourcemanager_v3.SearchProjectsRequest(query="state:ACTIVE")

        projects = [
            project.project_id for project in client.search_projects(request=request)
        ]
    except Exception as e:
        raise ProjectDiscoveryError(f"Failed to discover projects: {e}") from e

    logger.info(f"Resource Manager returned {len(projects)} project(s)")
    return projects


def get_project_lister(source: ProjectSource) -> ProjectLister:
    if source is ProjectSource.API:
        return list_all_projects
    return list_gcloud_projects

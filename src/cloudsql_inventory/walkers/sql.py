from collections.abc import Iterator
from typing import Any

from rich.markup import escape

from ..logger import logger
from ..schemas.sql import InstanceRecord, ProjectResult


def iter_instances(service: Any, project_id: str) -> Iterator[InstanceRecord]:
    """
    Yields every Cloud SQL instance in the project, page by page.

    The SQL Admin API paginates with nextPageToken; list_next() returns None
    once the last page has been read. There is no total count to rely on.
    """
    instances = service.instances()
    request = instances.list(project=project_id)

    while request is not None:
        response = request.execute()

        # A page with no instances omits "items" entirely
        for instance in response.get("items", []):
            yield InstanceRecord(
                project_id=project_id,
                name=instance.get("name", ""),
                database_version=instance.get("databaseVersion", ""),
            )

        request = instances.list_next(
            previous_request=request, previous_response=response
        )


def list_instances(service: Any, project_id: str) -> ProjectResult:
    """
    Lists all Cloud SQL instances in the project using the SQL Admin API.

    A failure on any page ends this project only: it is logged, the records
    read so far are kept, and the error text is returned on the result.
    """
    result = ProjectResult(project_id=project_id)
    try:
        for record in iter_instances(service, project_id):
            result.records.append(record)
    except Exception as e:
        logger.warning(
            f"Failed to list SQL instances for {project_id}: {escape(str(e))}"
        )
        result.error = str(e)
    else:
        logger.info(f"{project_id}: {len(result.records)} SQL instance(s)")

    return result

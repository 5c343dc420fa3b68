import pytest

from cloudsql_inventory import clients


class FakeRequest:
    def __init__(self, instances, project, page):
        self.instances = instances
        self.project = project
        self.page = page

    def execute(self):
        pages = self.instances.pages[self.project]
        item = pages[self.page]
        if isinstance(item, Exception):
            raise item
        response = {}
        if item:
            response["items"] = [
                {"name": name, "databaseVersion": version} for name, version in item
            ]
        if self.page + 1 < len(pages):
            response["nextPageToken"] = f"token-{self.page + 1}"
        return response


class FakeInstances:
    """Stand-in for service.instances() of the discovery-based SQL Admin client."""

    def __init__(self, pages):
        self.pages = pages
        self.list_calls = []

    def list(self, project):
        self.list_calls.append(project)
        if isinstance(self.pages.get(project), Exception):
            raise self.pages[project]
        return FakeRequest(self, project, 0)

    def list_next(self, previous_request, previous_response):
        if "nextPageToken" not in previous_response:
            return None
        return FakeRequest(self, previous_request.project, previous_request.page + 1)


class FakeSQLService:
    def __init__(self, pages):
        self._instances = FakeInstances(pages)

    def instances(self):
        return self._instances


@pytest.fixture
def fake_sql_service():
    """
    Builds a fake SQL Admin client from {project: [page, ...]}.
    A page is a list of (name, databaseVersion) tuples or an Exception to raise.
    """
    return FakeSQLService


@pytest.fixture(autouse=True)
def clear_client_cache():
    """Clear cached credentials and clients for every test."""
    clients.get_credentials.cache_clear()
    clients.get_sql_client.cache_clear()
    clients.get_projects_client.cache_clear()
    clients._local.__dict__.clear()
    yield
    clients.get_credentials.cache_clear()
    clients.get_sql_client.cache_clear()
    clients.get_projects_client.cache_clear()

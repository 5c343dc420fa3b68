import pytest
from pydantic import ValidationError

from cloudsql_inventory.config import OutputFormat, ProjectSource, RunConfig

PROJECTS = ["p1", "p2", "p3"]


def test_defaults():
    config = RunConfig()
    assert config.output is OutputFormat.TABLE
    assert config.limit is None
    assert config.concurrency == 1
    assert config.pause == 0.0
    assert config.project_source is ProjectSource.GCLOUD


@pytest.mark.parametrize(
    "limit,expected",
    [
        (-1, PROJECTS),
        (-5, PROJECTS),
        (None, PROJECTS),
        (0, []),
        (2, ["p1", "p2"]),
        (3, PROJECTS),
        (10, PROJECTS),
    ],
)
def test_apply_limit(limit, expected):
    assert RunConfig(limit=limit).apply_limit(PROJECTS) == expected


def test_negative_limit_is_unlimited():
    assert RunConfig(limit=-1).limit is None


def test_invalid_concurrency():
    with pytest.raises(ValidationError):
        RunConfig(concurrency=0)


def test_invalid_pause():
    with pytest.raises(ValidationError):
        RunConfig(pause=-0.5)


def test_config_is_frozen():
    config = RunConfig()
    with pytest.raises(ValidationError):
        config.limit = 3

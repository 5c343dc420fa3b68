from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OutputFormat(str, Enum):
    TABLE = "table"
    CSV = "csv"


class ProjectSource(str, Enum):
    GCLOUD = "gcloud"
    API = "api"


class RunConfig(BaseModel):
    """Settings for one inventory run, parsed once from the command line."""

    model_config = ConfigDict(frozen=True)

    output: OutputFormat = OutputFormat.TABLE
    limit: int | None = Field(
        default=None, description="Max projects to process (None = unlimited)"
    )
    concurrency: int = Field(default=1, ge=1)
    pause: float = Field(
        default=0.0, ge=0.0, description="Seconds to sleep before each project"
    )
    project_source: ProjectSource = ProjectSource.GCLOUD
    output_dir: Path = Field(default_factory=Path.cwd)

    @field_validator("limit", mode="before")
    @classmethod
    def negative_limit_is_unlimited(cls, v: int | None) -> int | None:
        # -1 (the CLI default) and any other negative value mean "no limit"
        if v is not None and v < 0:
            return None
        return v

    def apply_limit(self, project_ids: list[str]) -> list[str]:
        if self.limit is None:
            return list(project_ids)
        return project_ids[: self.limit]

from pydantic import BaseModel, ConfigDict, Field


class InstanceRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_id: str
    name: str
    database_version: str = Field(description="Engine + version, e.g. MYSQL_8_0")

    def as_row(self) -> list[str]:
        return [self.project_id, self.name, self.database_version]


class ProjectResult(BaseModel):
    """Outcome of listing one project. Records gathered before a failure are kept."""

    project_id: str
    records: list[InstanceRecord] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

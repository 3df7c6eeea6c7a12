from pydantic import BaseModel, Field, field_validator


# Nomes de owner/repo do GitHub: viram segmentos do diretorio de trabalho.
REPOSITORY_NAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


class RunMaintenanceRequest(BaseModel):
    owner: str = Field(..., min_length=1, max_length=100, pattern=REPOSITORY_NAME_PATTERN)
    repo: str = Field(..., min_length=1, max_length=100, pattern=REPOSITORY_NAME_PATTERN)
    build_number: int = Field(..., gt=0)
    base_branch: str | None = Field(default=None, min_length=1)
    dry_run: bool = False

    @field_validator("owner", "repo")
    @classmethod
    def reject_relative_segments(cls, value: str) -> str:
        if value in (".", ".."):
            raise ValueError("must not be a relative path segment")
        return value


class StepOutcomeSchema(BaseModel):
    step: str
    status: str
    detail: str | None = None


class RunMaintenanceResponse(BaseModel):
    status: str
    message: str
    changes_detected: bool
    branch: str | None = None
    commit: str | None = None
    pr_number: int | None = None
    pr_url: str | None = None
    changed_files: list[str] = Field(default_factory=list)
    steps: list[StepOutcomeSchema] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

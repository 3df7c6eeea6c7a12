from dataclasses import dataclass
from datetime import datetime
from typing import Literal


StepStatus = Literal["success", "skipped", "warning", "failed"]


@dataclass(frozen=True)
class RunContext:
    build_number: int
    repository_owner: str
    repository_name: str
    base_branch: str
    feature_branch: str
    started_at: datetime


@dataclass(frozen=True)
class ProbeResult:
    name: str
    signal: bool
    detail: str | None = None


@dataclass(frozen=True)
class DetectionResult:
    probes: tuple[ProbeResult, ...]

    @property
    def changes_detected(self) -> bool:
        return any(probe.signal for probe in self.probes)


@dataclass(frozen=True)
class StepOutcome:
    step: str
    status: StepStatus
    detail: str | None = None


@dataclass(frozen=True)
class PullRequestDraft:
    title: str
    body: str
    head: str
    base: str

    def to_payload(self) -> dict[str, str]:
        return {
            "title": self.title,
            "body": self.body,
            "head": self.head,
            "base": self.base,
        }


@dataclass(frozen=True)
class CreatedPullRequest:
    number: int
    html_url: str | None = None

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Literal, Sequence

from domain.models import (
    CreatedPullRequest,
    DetectionResult,
    ProbeResult,
    PullRequestDraft,
    StepOutcome,
)
from domain.pull_request import parse_pull_request_response
from domain.templates import DEFAULT_CHANGELOG_FILE


BranchConflictPolicy = Literal["fail", "overwrite", "suffix"]
BRANCH_CONFLICT_POLICIES: tuple[str, ...] = ("fail", "overwrite", "suffix")

FlowStatus = Literal["no_changes", "dry_run", "success", "error"]


def _noop_observe_detection(_: DetectionResult) -> None:
    return None


def _noop_observe_step_outcome(_: StepOutcome) -> None:
    return None


def _noop_observe_step(step: str, status: str, detail: str | None = None) -> None:
    return None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class MaintenanceFlowConfig:
    build_number: int
    repository_owner: str
    repository_name: str
    base_branch: str
    repository_directory: Path
    clone_repository: bool = False
    dry_run: bool = False
    branch_conflict_policy: BranchConflictPolicy = "fail"
    changelog_file: str = DEFAULT_CHANGELOG_FILE


@dataclass(frozen=True)
class MaintenanceFlowDependencies:
    git_setup: Callable[[Path], None]
    probes: Sequence[Callable[[Path], ProbeResult]]
    updaters: Sequence[Callable[[Path], StepOutcome]]
    local_branch_exists: Callable[[str, Path], bool]
    remote_branch_exists: Callable[[str, Path], bool]
    create_branch: Callable[[Path, str], None]
    checkout_branch: Callable[[Path, str], None]
    delete_branch: Callable[[Path, str], None]
    changed_paths: Callable[[Path], list[str]]
    discard_changes: Callable[[Path], None]
    commit_changes: Callable[[Path, str], str]
    push_branch: Callable[..., None]
    create_pr: Callable[[PullRequestDraft], str]
    parse_pr_response: Callable[[str], CreatedPullRequest] = parse_pull_request_response
    clone_repo: Callable[[str, str, Path], None] | None = None
    now: Callable[[], datetime] = _utc_now
    observe_detection: Callable[[DetectionResult], None] = _noop_observe_detection
    observe_step_outcome: Callable[[StepOutcome], None] = _noop_observe_step_outcome
    observe_step: Callable[[str, str, str | None], None] = _noop_observe_step


@dataclass(frozen=True)
class FeatureBranch:
    name: str
    force_push: bool = False


@dataclass
class RunReport:
    outcomes: list[StepOutcome] = field(default_factory=list)
    changes_detected: bool = False
    branch: str | None = None

    def record(self, outcome: StepOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(
            f"{outcome.step}: {outcome.detail or outcome.status}"
            for outcome in self.outcomes
            if outcome.status in ("warning", "failed")
        )


@dataclass(frozen=True)
class MaintenanceFlowResult:
    status: FlowStatus
    message: str
    changes_detected: bool = False
    branch: str | None = None
    commit: str | None = None
    pr_number: int | None = None
    pr_url: str | None = None
    changed_files: tuple[str, ...] = ()
    steps: tuple[StepOutcome, ...] = ()
    warnings: tuple[str, ...] = ()
    error: str | None = None

    @property
    def exit_code(self) -> int:
        return 1 if self.status == "error" else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "changes_detected": self.changes_detected,
            "branch": self.branch,
            "commit": self.commit,
            "pr_number": self.pr_number,
            "pr_url": self.pr_url,
            "changed_files": list(self.changed_files),
            "steps": [
                {"step": outcome.step, "status": outcome.status, "detail": outcome.detail}
                for outcome in self.steps
            ],
            "warnings": list(self.warnings),
            "error": self.error,
        }

from dataclasses import replace
from pathlib import PurePosixPath

from application.maintenance_flow.contracts import (
    FeatureBranch,
    MaintenanceFlowConfig,
    MaintenanceFlowDependencies,
    MaintenanceFlowResult,
    RunReport,
)
from application.maintenance_flow.errors import BranchConflictError, DirtyWorkingTreeError
from domain.models import CreatedPullRequest, DetectionResult, RunContext, StepOutcome
from domain.pull_request import PullRequestResponseError
from domain.templates import build_commit_message, build_pull_request_draft, feature_branch_name


MAX_BRANCH_SUFFIX_ATTEMPTS = 20
MAX_DIRTY_PATHS_IN_MESSAGE = 5


def build_run_context(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
) -> RunContext:
    return RunContext(
        build_number=config.build_number,
        repository_owner=config.repository_owner,
        repository_name=config.repository_name,
        base_branch=config.base_branch,
        feature_branch=feature_branch_name(config.build_number),
        started_at=dependencies.now(),
    )


def record_outcome(
    report: RunReport,
    dependencies: MaintenanceFlowDependencies,
    outcome: StepOutcome,
) -> None:
    report.record(outcome)
    dependencies.observe_step_outcome(outcome)


def prepare_repository(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
) -> None:
    # Clona apenas quando a execucao nao recebe uma working tree pronta (ex.: API HTTP).
    if config.clone_repository:
        if dependencies.clone_repo is None:
            raise RuntimeError("clone_repository is enabled but no clone_repo dependency was provided")
        dependencies.clone_repo(
            config.repository_owner,
            config.repository_name,
            config.repository_directory,
        )
    dependencies.git_setup(config.repository_directory)


def detect_changes(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
) -> DetectionResult:
    # Todas as sondas rodam sempre; o resultado e o OR dos sinais.
    probe_results = tuple(probe(config.repository_directory) for probe in dependencies.probes)
    detection = DetectionResult(probes=probe_results)
    dependencies.observe_detection(detection)
    return detection


def ensure_clean_worktree(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
) -> None:
    # O diff verificado, o commit e o descarte assumem que so o updater alterou a arvore.
    pending_paths = dependencies.changed_paths(config.repository_directory)
    if not pending_paths:
        return
    preview = ", ".join(pending_paths[:MAX_DIRTY_PATHS_IN_MESSAGE])
    if len(pending_paths) > MAX_DIRTY_PATHS_IN_MESSAGE:
        preview += ", ..."
    raise DirtyWorkingTreeError(
        f"Working tree at {config.repository_directory} has {len(pending_paths)} uncommitted "
        f"path(s) ({preview}); commit or stash them before running maintenance"
    )


def _branch_exists(
    branch: str,
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
) -> bool:
    return dependencies.local_branch_exists(
        branch, config.repository_directory
    ) or dependencies.remote_branch_exists(branch, config.repository_directory)


def resolve_feature_branch(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    context: RunContext,
) -> FeatureBranch:
    branch = context.feature_branch
    if not _branch_exists(branch, config, dependencies):
        return FeatureBranch(name=branch)

    if config.branch_conflict_policy == "overwrite":
        if dependencies.local_branch_exists(branch, config.repository_directory):
            dependencies.delete_branch(config.repository_directory, branch)
        return FeatureBranch(name=branch, force_push=True)

    if config.branch_conflict_policy == "suffix":
        for attempt in range(2, MAX_BRANCH_SUFFIX_ATTEMPTS + 2):
            candidate = f"{branch}-{attempt}"
            if not _branch_exists(candidate, config, dependencies):
                return FeatureBranch(name=candidate)
        raise BranchConflictError(
            f"Feature branch '{branch}' and its {MAX_BRANCH_SUFFIX_ATTEMPTS} suffixed variants already exist"
        )

    raise BranchConflictError(
        f"Feature branch '{branch}' already exists; rerun with a new build number "
        "or set BRANCH_CONFLICT_POLICY to 'overwrite' or 'suffix'"
    )


def create_feature_branch(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    branch: FeatureBranch,
) -> None:
    dependencies.create_branch(config.repository_directory, branch.name)


def apply_updates(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    report: RunReport,
) -> None:
    # Sem rollback: cada passo registra seu proprio resultado e o fluxo segue.
    for updater in dependencies.updaters:
        record_outcome(report, dependencies, updater(config.repository_directory))


def verify_changes(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
) -> list[str]:
    # A entrada de changelog sozinha nao conta como alteracao real.
    changelog_path = PurePosixPath(config.changelog_file.replace("\\", "/")).as_posix()
    return [
        path
        for path in dependencies.changed_paths(config.repository_directory)
        if path != changelog_path
    ]


def discard_feature_branch(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    branch: FeatureBranch,
    report: RunReport,
) -> None:
    try:
        dependencies.discard_changes(config.repository_directory)
        dependencies.checkout_branch(config.repository_directory, config.base_branch)
        dependencies.delete_branch(config.repository_directory, branch.name)
    except Exception as error:
        record_outcome(report, dependencies, StepOutcome(step="discard_branch", status="warning", detail=str(error)))
        return
    record_outcome(report, dependencies, StepOutcome(step="discard_branch", status="success", detail=branch.name))


def commit_feature_changes(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    context: RunContext,
) -> str:
    return dependencies.commit_changes(
        config.repository_directory,
        build_commit_message(context.build_number),
    )


def push_feature_branch(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    branch: FeatureBranch,
) -> None:
    dependencies.push_branch(config.repository_directory, branch.name, force=branch.force_push)


def open_pull_request(
    dependencies: MaintenanceFlowDependencies,
    context: RunContext,
    branch: FeatureBranch,
    report: RunReport,
) -> CreatedPullRequest | None:
    draft = build_pull_request_draft(context, head=branch.name)
    response_text = dependencies.create_pr(draft)
    try:
        return dependencies.parse_pr_response(response_text)
    except PullRequestResponseError as error:
        # O PR ja foi criado; so o numero fica indisponivel.
        record_outcome(report, dependencies, StepOutcome(step="create_pr", status="warning", detail=str(error)))
        return None


def cleanup_workspace(
    config: MaintenanceFlowConfig,
    dependencies: MaintenanceFlowDependencies,
    report: RunReport,
) -> None:
    dependencies.observe_step("cleanup", "start")
    try:
        dependencies.checkout_branch(config.repository_directory, config.base_branch)
    except Exception as error:
        record_outcome(report, dependencies, StepOutcome(step="cleanup", status="warning", detail=str(error)))
        dependencies.observe_step("cleanup", "warning", detail=str(error))
        return
    dependencies.observe_step("cleanup", "success", detail=config.base_branch)


def build_no_changes_result(message: str) -> MaintenanceFlowResult:
    return MaintenanceFlowResult(status="no_changes", message=message, changes_detected=False)


def build_dry_run_result(branch: FeatureBranch, changed_files: list[str]) -> MaintenanceFlowResult:
    return MaintenanceFlowResult(
        status="dry_run",
        message=f"Dry run completed: {len(changed_files)} file(s) would change; nothing was published",
        changes_detected=True,
        branch=branch.name,
        changed_files=tuple(changed_files),
    )


def build_success_result(
    branch: FeatureBranch,
    *,
    commit: str,
    changed_files: list[str],
    pull_request: CreatedPullRequest | None,
) -> MaintenanceFlowResult:
    if pull_request is None:
        message = f"PR created for {branch.name}; PR number unavailable"
    else:
        message = f"PR #{pull_request.number} created successfully"
    return MaintenanceFlowResult(
        status="success",
        message=message,
        changes_detected=True,
        branch=branch.name,
        commit=commit,
        pr_number=pull_request.number if pull_request else None,
        pr_url=pull_request.html_url if pull_request else None,
        changed_files=tuple(changed_files),
    )


def build_error_result(report: RunReport, error: Exception) -> MaintenanceFlowResult:
    return MaintenanceFlowResult(
        status="error",
        message="Maintenance flow execution failed",
        changes_detected=report.changes_detected,
        branch=report.branch,
        error=str(error),
    )


def finalize_result(result: MaintenanceFlowResult, report: RunReport) -> MaintenanceFlowResult:
    return replace(result, steps=tuple(report.outcomes), warnings=report.warnings)

import logging
from functools import partial
from pathlib import Path

from application.maintenance_flow import MaintenanceFlowConfig, MaintenanceFlowDependencies
from application.ports import SecretProvider
from domain.models import PullRequestDraft
from domain.pull_request import parse_pull_request_response
from infrastructure.github.github_client import GitHubClient
from infrastructure.observability.logging_utils import log_event
from infrastructure.observability.workflow_observer import (
    observe_detection,
    observe_step_outcome,
    observe_workflow_step,
)
from infrastructure.repo import operations
from infrastructure.repo.probes import (
    probe_documentation,
    probe_formatting,
    probe_outdated_dependencies,
)
from infrastructure.repo.updaters import (
    DEPENDENCY_UPDATE_STEP,
    DOCS_STEP,
    FORMAT_STEP,
    append_changelog,
    run_update_command,
)
from infrastructure.secrets import GitCredentials, resolve_git_credentials
from infrastructure.settings import MaintenanceSettings


logger = logging.getLogger(__name__)


def build_maintenance_flow_config(
    settings: MaintenanceSettings,
    *,
    owner: str,
    repo: str,
    build_number: int,
    base_branch: str | None = None,
    dry_run: bool | None = None,
    repository_directory: Path | None = None,
    clone_repository: bool = False,
) -> MaintenanceFlowConfig:
    return MaintenanceFlowConfig(
        build_number=build_number,
        repository_owner=owner,
        repository_name=repo,
        base_branch=base_branch or settings.base_branch,
        repository_directory=repository_directory or settings.repository_directory,
        clone_repository=clone_repository,
        dry_run=settings.dry_run if dry_run is None else dry_run,
        branch_conflict_policy=settings.branch_conflict_policy,
        changelog_file=settings.changelog_file,
    )


def build_maintenance_flow_dependencies(
    settings: MaintenanceSettings,
    *,
    owner: str,
    repo: str,
    secret_provider: SecretProvider,
) -> MaintenanceFlowDependencies:
    # Segredos sao resolvidos sob demanda, no ponto de uso (push/clone/API).
    def credentials_provider() -> GitCredentials:
        return resolve_git_credentials(secret_provider)

    def create_pr(draft: PullRequestDraft) -> str:
        github_client = GitHubClient(
            token=secret_provider.get_secret("GITHUB_TOKEN"),
            owner=owner,
            repo=repo,
            api_url=settings.github_api_url,
            timeout=settings.http_timeout,
        )
        return github_client.create_pr(draft)

    commands = settings.commands
    timeout = settings.command_timeout
    log_event(
        logger,
        logging.INFO,
        "workflow.tools.configured",
        outdated=" ".join(commands.outdated),
        format_check=" ".join(commands.format_check),
        dependency_update=" ".join(commands.dependency_update),
        format=" ".join(commands.format),
        docs=" ".join(commands.docs),
    )

    return MaintenanceFlowDependencies(
        clone_repo=partial(
            operations.clone_repo,
            credentials_provider=credentials_provider,
            server_url=settings.github_server_url,
        ),
        git_setup=partial(
            operations.git_setup,
            git_author_name=settings.git_author_name,
            git_author_email=settings.git_author_email,
        ),
        probes=(
            partial(probe_outdated_dependencies, command=commands.outdated, timeout=timeout),
            partial(probe_formatting, command=commands.format_check, timeout=timeout),
            partial(
                probe_documentation,
                source_dirs=settings.docs_source_dirs,
                artifact=settings.docs_artifact,
            ),
        ),
        updaters=(
            partial(run_update_command, DEPENDENCY_UPDATE_STEP, command=commands.dependency_update, timeout=timeout),
            partial(run_update_command, FORMAT_STEP, command=commands.format, timeout=timeout),
            partial(run_update_command, DOCS_STEP, command=commands.docs, timeout=timeout),
            partial(append_changelog, changelog_file=settings.changelog_file),
        ),
        local_branch_exists=operations.local_branch_exists,
        remote_branch_exists=partial(
            operations.remote_branch_exists,
            remote=settings.git_remote,
            credentials_provider=credentials_provider,
        ),
        create_branch=operations.create_branch,
        checkout_branch=operations.checkout_branch,
        delete_branch=operations.delete_branch,
        changed_paths=operations.changed_paths,
        discard_changes=operations.discard_changes,
        commit_changes=operations.commit_changes,
        push_branch=partial(
            operations.push_branch,
            remote=settings.git_remote,
            credentials_provider=credentials_provider,
        ),
        create_pr=create_pr,
        parse_pr_response=parse_pull_request_response,
        observe_detection=observe_detection,
        observe_step_outcome=observe_step_outcome,
        observe_step=observe_workflow_step,
    )

from pathlib import Path

from application.maintenance_flow import MaintenanceFlowConfig, MaintenanceFlowResult
from infrastructure.http.errors import InvalidWorkspaceError
from infrastructure.http.schemas import RunMaintenanceRequest, RunMaintenanceResponse, StepOutcomeSchema
from infrastructure.settings import MaintenanceSettings
from infrastructure.workflow_factory import build_maintenance_flow_config


def workspace_directory(settings: MaintenanceSettings, payload: RunMaintenanceRequest) -> Path:
    # O clone apaga o diretorio antes de clonar: ele nunca pode sair do workdir.
    workdir = settings.workdir.resolve()
    workspace = (workdir / payload.owner / payload.repo).resolve()
    if workspace == workdir or not workspace.is_relative_to(workdir):
        raise InvalidWorkspaceError(f"workspace for {payload.owner}/{payload.repo} escapes {workdir}")
    return workspace


def to_maintenance_flow_config(
    payload: RunMaintenanceRequest,
    settings: MaintenanceSettings,
) -> MaintenanceFlowConfig:
    return build_maintenance_flow_config(
        settings,
        owner=payload.owner,
        repo=payload.repo,
        build_number=payload.build_number,
        base_branch=payload.base_branch,
        dry_run=payload.dry_run,
        repository_directory=workspace_directory(settings, payload),
        clone_repository=True,
    )


def to_run_maintenance_response(result: MaintenanceFlowResult) -> RunMaintenanceResponse:
    return RunMaintenanceResponse(
        status=result.status,
        message=result.message,
        changes_detected=result.changes_detected,
        branch=result.branch,
        commit=result.commit,
        pr_number=result.pr_number,
        pr_url=result.pr_url,
        changed_files=list(result.changed_files),
        steps=[
            StepOutcomeSchema(step=outcome.step, status=outcome.status, detail=outcome.detail)
            for outcome in result.steps
        ],
        warnings=list(result.warnings),
    )

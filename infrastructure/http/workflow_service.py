import logging
from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock

from application.maintenance_flow import run_maintenance_flow
from infrastructure.http.errors import WorkflowConfigurationError, WorkflowExecutionError
from infrastructure.http.mappers import to_maintenance_flow_config, to_run_maintenance_response
from infrastructure.http.schemas import RunMaintenanceRequest, RunMaintenanceResponse
from infrastructure.observability.logging_utils import log_event
from infrastructure.secrets import EnvSecretProvider
from infrastructure.settings import MaintenanceSettings, SettingsError
from infrastructure.workflow_factory import build_maintenance_flow_dependencies


logger = logging.getLogger(__name__)

# Uma execucao por vez em cada diretorio de trabalho; a entrada some quando ninguem mais a usa.
_workspace_locks: dict[str, tuple[Lock, int]] = {}
_workspace_locks_guard = Lock()


@contextmanager
def workspace_lock(key: str) -> Iterator[None]:
    with _workspace_locks_guard:
        lock, holders = _workspace_locks.get(key, (Lock(), 0))
        _workspace_locks[key] = (lock, holders + 1)
    try:
        with lock:
            yield
    finally:
        with _workspace_locks_guard:
            _, holders = _workspace_locks[key]
            if holders <= 1:
                del _workspace_locks[key]
            else:
                _workspace_locks[key] = (lock, holders - 1)


def active_workspace_locks() -> int:
    with _workspace_locks_guard:
        return len(_workspace_locks)


def _load_settings() -> MaintenanceSettings:
    try:
        return MaintenanceSettings.from_env()
    except SettingsError as error:
        log_event(logger, logging.ERROR, "http.workflow.invalid_settings", error=str(error))
        raise WorkflowConfigurationError(str(error)) from error


def execute_workflow(payload: RunMaintenanceRequest) -> RunMaintenanceResponse:
    settings = _load_settings()
    flow_config = to_maintenance_flow_config(payload, settings)
    with workspace_lock(str(flow_config.repository_directory)):
        try:
            flow_dependencies = build_maintenance_flow_dependencies(
                settings,
                owner=payload.owner,
                repo=payload.repo,
                secret_provider=EnvSecretProvider(),
            )
            result = run_maintenance_flow(flow_config, flow_dependencies, raise_on_error=False)
        except Exception as error:
            log_event(logger, logging.ERROR, "http.workflow.execution_failed", error=str(error))
            raise WorkflowExecutionError("maintenance workflow execution failed") from error

    if result.status == "error":
        error_message = result.error or "maintenance workflow execution failed"
        log_event(logger, logging.ERROR, "http.workflow.execution_failed", error=error_message)
        raise WorkflowExecutionError(error_message)

    return to_run_maintenance_response(result)

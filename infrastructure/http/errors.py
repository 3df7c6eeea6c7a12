from fastapi import HTTPException, status


INTERNAL_WORKFLOW_ERROR_MESSAGE = "Internal error while executing maintenance workflow"
INVALID_SETTINGS_MESSAGE = "Maintenance service is misconfigured"
INVALID_WORKSPACE_MESSAGE = "Repository owner/name does not map to a valid workspace"


class WorkflowExecutionError(RuntimeError):
    """Controlled exception for workflow execution failures in the HTTP adapter."""


class WorkflowConfigurationError(RuntimeError):
    """Raised when the service settings cannot be loaded."""


class InvalidWorkspaceError(ValueError):
    """Raised when a request would place the clone outside the work directory."""


def to_http_exception(error: Exception) -> HTTPException:
    if isinstance(error, InvalidWorkspaceError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=INVALID_WORKSPACE_MESSAGE,
        )

    if isinstance(error, WorkflowConfigurationError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=INVALID_SETTINGS_MESSAGE,
        )

    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=INTERNAL_WORKFLOW_ERROR_MESSAGE,
    )

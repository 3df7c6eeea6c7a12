from infrastructure.observability.logging_utils import (
    configure_logging,
    log_event,
    register_sensitive_values,
    safe_message,
)
from infrastructure.observability.workflow_observer import (
    is_pull_request_response_error,
    log_pull_request_response_error,
    observe_detection,
    observe_step_outcome,
    observe_workflow_step,
    summarize_signals,
)

__all__ = [
    "configure_logging",
    "log_event",
    "register_sensitive_values",
    "safe_message",
    "is_pull_request_response_error",
    "log_pull_request_response_error",
    "observe_detection",
    "observe_step_outcome",
    "observe_workflow_step",
    "summarize_signals",
]

import logging

from domain.models import DetectionResult, StepOutcome
from domain.pull_request import RESPONSE_ERROR_PREFIX
from infrastructure.observability.logging_utils import log_event


logger = logging.getLogger(__name__)


def summarize_signals(detection: DetectionResult) -> str:
    signalled = [probe.name for probe in detection.probes if probe.signal]
    return ",".join(signalled) if signalled else "none"


def observe_detection(detection: DetectionResult) -> None:
    for probe in detection.probes:
        log_event(
            logger,
            logging.INFO,
            "workflow.probe.result",
            probe=probe.name,
            signal=probe.signal,
            detail=probe.detail,
        )
    log_event(
        logger,
        logging.INFO,
        "workflow.detection.completed",
        changes_detected=detection.changes_detected,
        signals=summarize_signals(detection),
        probes_count=len(detection.probes),
    )


def observe_step_outcome(outcome: StepOutcome) -> None:
    level = logging.WARNING if outcome.status in ("warning", "failed") else logging.INFO
    log_event(
        logger,
        level,
        "workflow.step.outcome",
        step=outcome.step,
        status=outcome.status,
        detail=outcome.detail,
    )


def is_pull_request_response_error(error_message: str) -> bool:
    return error_message.startswith(RESPONSE_ERROR_PREFIX)


def log_pull_request_response_error(error_message: str) -> None:
    log_event(
        logger,
        logging.WARNING,
        "workflow.pull_request.response_invalid",
        error=error_message,
    )


def observe_workflow_step(step: str, status: str, detail: str | None = None) -> None:
    level = logging.ERROR if status == "error" else logging.INFO
    log_event(
        logger,
        level,
        "workflow.step",
        step=step,
        status=status,
        detail=detail,
    )

import json
import logging
import sys

from dotenv import load_dotenv

from application.maintenance_flow import MaintenanceFlowResult, run_maintenance_flow
from infrastructure.observability.context import run_scope
from infrastructure.observability.logging_utils import configure_logging, log_event
from infrastructure.observability.workflow_observer import (
    is_pull_request_response_error,
    log_pull_request_response_error,
)
from infrastructure.secrets import EnvSecretProvider
from infrastructure.settings import (
    MaintenanceSettings,
    SettingsError,
    parse_build_number,
    required_env,
)
from infrastructure.workflow_factory import (
    build_maintenance_flow_config,
    build_maintenance_flow_dependencies,
)


logger = logging.getLogger(__name__)


def _report_result(result: MaintenanceFlowResult) -> None:
    for warning in result.warnings:
        if is_pull_request_response_error(warning.split(": ", 1)[-1]):
            log_pull_request_response_error(warning)
        else:
            log_event(logger, logging.WARNING, "cli.workflow.warning", warning=warning)
    log_event(
        logger,
        logging.ERROR if result.status == "error" else logging.INFO,
        "cli.workflow.end",
        status=result.status,
        message=result.message,
        changes_detected=result.changes_detected,
        branch=result.branch,
        commit=result.commit,
        pr_number=result.pr_number,
        pr_url=result.pr_url,
        warnings_count=len(result.warnings),
        error=result.error,
    )


def _write_summary(settings: MaintenanceSettings, result: MaintenanceFlowResult) -> None:
    if settings.summary_file is None:
        return
    settings.summary_file.parent.mkdir(parents=True, exist_ok=True)
    settings.summary_file.write_text(json.dumps(result.to_dict(), indent=2) + "\n", encoding="utf-8")
    log_event(logger, logging.INFO, "cli.workflow.summary_written", path=str(settings.summary_file))


def main() -> int:
    load_dotenv()
    configure_logging()
    with run_scope():
        log_event(logger, logging.INFO, "cli.workflow.start")
        try:
            settings = MaintenanceSettings.from_env()
            owner = required_env("GH_OWNER")
            repo = required_env("GH_REPO")
            build_number = parse_build_number(required_env("BUILD_NUMBER"))
        except SettingsError as error:
            log_event(logger, logging.ERROR, "cli.workflow.invalid_settings", error=str(error))
            return 2

        flow_config = build_maintenance_flow_config(
            settings,
            owner=owner,
            repo=repo,
            build_number=build_number,
        )
        flow_dependencies = build_maintenance_flow_dependencies(
            settings,
            owner=owner,
            repo=repo,
            secret_provider=EnvSecretProvider(),
        )
        result = run_maintenance_flow(flow_config, flow_dependencies, raise_on_error=False)
        _report_result(result)
        _write_summary(settings, result)
        return result.exit_code


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()

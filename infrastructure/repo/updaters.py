import logging
import subprocess
from datetime import date
from pathlib import Path
from typing import Callable, Sequence

from domain.models import StepOutcome
from domain.templates import build_changelog_entry
from infrastructure.observability.logging_utils import log_event, safe_message
from infrastructure.repo.operations import run_capture


logger = logging.getLogger(__name__)

DEPENDENCY_UPDATE_STEP = "update_dependencies"
FORMAT_STEP = "format_code"
DOCS_STEP = "regenerate_docs"
CHANGELOG_STEP = "append_changelog"


def _last_output_line(result: subprocess.CompletedProcess[str]) -> str | None:
    output = (result.stderr or result.stdout or "").strip()
    if not output:
        return None
    return safe_message(output.splitlines()[-1])


def run_update_command(
    step: str,
    repo_dir: Path,
    *,
    command: Sequence[str],
    timeout: float | None = None,
) -> StepOutcome:
    # Passos de atualizacao sao best-effort: qualquer falha vira warning no relatorio.
    try:
        result = run_capture(command, cwd=repo_dir, timeout=timeout)
    except FileNotFoundError:
        return StepOutcome(step=step, status="warning", detail=f"tool unavailable: {command[0]}")
    except subprocess.TimeoutExpired as error:
        return StepOutcome(step=step, status="warning", detail=f"timed out after {error.timeout}s")
    except OSError as error:
        return StepOutcome(step=step, status="warning", detail=safe_message(f"could not execute: {error}"))

    if result.returncode != 0:
        last_line = _last_output_line(result)
        log_event(
            logger,
            logging.WARNING,
            "updater.command.failed",
            step=step,
            exit_code=result.returncode,
            output=last_line,
        )
        detail = f"exit code {result.returncode}"
        if last_line:
            detail = f"{detail}: {last_line}"
        return StepOutcome(step=step, status="warning", detail=detail)
    return StepOutcome(step=step, status="success")


def append_changelog(
    repo_dir: Path,
    *,
    changelog_file: str,
    today: Callable[[], date] = date.today,
) -> StepOutcome:
    changelog_path = repo_dir / changelog_file
    entry = build_changelog_entry(today())
    try:
        changelog_path.parent.mkdir(parents=True, exist_ok=True)
        existing = changelog_path.read_bytes() if changelog_path.exists() else b""
        separator = "" if not existing or existing.endswith(b"\n") else "\n"
        with changelog_path.open("a", encoding="utf-8") as changelog:
            changelog.write(separator + entry)
    except OSError as error:
        return StepOutcome(step=CHANGELOG_STEP, status="warning", detail=safe_message(str(error)))
    return StepOutcome(step=CHANGELOG_STEP, status="success", detail=changelog_file)

import json
import logging
import subprocess
from pathlib import Path
from typing import Iterable, Sequence

from domain.models import ProbeResult
from infrastructure.observability.logging_utils import log_event, safe_message
from infrastructure.repo.operations import run_capture


logger = logging.getLogger(__name__)

DEPENDENCIES_PROBE = "dependencies"
FORMATTING_PROBE = "formatting"
DOCUMENTATION_PROBE = "documentation"

_IGNORED_DIRECTORIES = {".git", ".hg", ".svn", "node_modules", "__pycache__"}


def _run_probe_command(
    name: str,
    command: Sequence[str],
    repo_dir: Path,
    timeout: float | None,
) -> subprocess.CompletedProcess[str] | ProbeResult:
    # Falha ao executar a ferramenta nao aborta o pipeline: vira "sem sinal".
    try:
        return run_capture(command, cwd=repo_dir, timeout=timeout)
    except FileNotFoundError:
        detail = f"tool unavailable: {command[0]}"
    except subprocess.TimeoutExpired as error:
        detail = f"timed out after {error.timeout}s"
    except OSError as error:
        detail = f"could not execute: {error}"
    log_event(logger, logging.WARNING, "probe.command.unavailable", probe=name, detail=detail)
    return ProbeResult(name=name, signal=False, detail=safe_message(detail))


def _read_listing(stdout: str) -> tuple[bool, str | None]:
    """Return (has outdated entries, error reported by the tool)."""
    text = stdout.strip()
    if not text:
        return False, None
    try:
        decoded = json.loads(text)
    except ValueError:
        # Saida tabular (sem --json): qualquer linha listada conta como sinal.
        return True, None
    # npm outdated --json reporta falhas (ex.: registry inacessivel) como {"error": {...}}.
    if isinstance(decoded, dict) and "error" in decoded:
        error = decoded["error"]
        summary = (error.get("summary") or error.get("code")) if isinstance(error, dict) else error
        return False, str(summary or "unknown error")
    return bool(decoded), None


def probe_outdated_dependencies(
    repo_dir: Path,
    *,
    command: Sequence[str],
    timeout: float | None = None,
) -> ProbeResult:
    outcome = _run_probe_command(DEPENDENCIES_PROBE, command, repo_dir, timeout)
    if isinstance(outcome, ProbeResult):
        return outcome
    # npm outdated sai com 1 quando ha pacotes desatualizados; ainda e uma listagem valida.
    if outcome.returncode not in (0, 1):
        return ProbeResult(
            name=DEPENDENCIES_PROBE,
            signal=False,
            detail=f"unexpected exit code {outcome.returncode}",
        )
    listed, tool_error = _read_listing(outcome.stdout)
    if tool_error is not None:
        return ProbeResult(
            name=DEPENDENCIES_PROBE,
            signal=False,
            detail=safe_message(f"tool reported an error: {tool_error}"),
        )
    if listed:
        return ProbeResult(name=DEPENDENCIES_PROBE, signal=True, detail="outdated packages listed")
    return ProbeResult(name=DEPENDENCIES_PROBE, signal=False, detail="dependencies up to date")


def probe_formatting(
    repo_dir: Path,
    *,
    command: Sequence[str],
    timeout: float | None = None,
) -> ProbeResult:
    outcome = _run_probe_command(FORMATTING_PROBE, command, repo_dir, timeout)
    if isinstance(outcome, ProbeResult):
        return outcome
    if outcome.returncode == 0:
        return ProbeResult(name=FORMATTING_PROBE, signal=False, detail="formatting compliant")
    if outcome.returncode == 1:
        return ProbeResult(name=FORMATTING_PROBE, signal=True, detail="formatter would change files")
    return ProbeResult(
        name=FORMATTING_PROBE,
        signal=False,
        detail=f"unexpected exit code {outcome.returncode}",
    )


def _iter_source_files(source_dir: Path) -> Iterable[Path]:
    for file_path in source_dir.rglob("*"):
        relative_parts = file_path.relative_to(source_dir).parts
        if any(part in _IGNORED_DIRECTORIES for part in relative_parts):
            continue
        if file_path.is_file():
            yield file_path


def probe_documentation(
    repo_dir: Path,
    *,
    source_dirs: Sequence[str],
    artifact: str,
) -> ProbeResult:
    artifact_path = repo_dir / artifact
    if not artifact_path.is_file():
        return ProbeResult(
            name=DOCUMENTATION_PROBE,
            signal=False,
            detail=f"documentation artifact not found: {artifact}",
        )

    artifact_mtime = artifact_path.stat().st_mtime
    existing_dirs = [repo_dir / source for source in source_dirs if (repo_dir / source).is_dir()]
    if not existing_dirs:
        return ProbeResult(
            name=DOCUMENTATION_PROBE,
            signal=False,
            detail="no documentation source directories found",
        )

    for source_dir in existing_dirs:
        for file_path in _iter_source_files(source_dir):
            if file_path.stat().st_mtime > artifact_mtime:
                relative_path = file_path.relative_to(repo_dir).as_posix()
                return ProbeResult(
                    name=DOCUMENTATION_PROBE,
                    signal=True,
                    detail=f"{relative_path} is newer than {artifact}",
                )
    return ProbeResult(name=DOCUMENTATION_PROBE, signal=False, detail="documentation up to date")

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Mapping, Sequence

from infrastructure.observability.logging_utils import log_event, safe_message
from infrastructure.secrets import GitCredentials


logger = logging.getLogger(__name__)

CredentialsProvider = Callable[[], GitCredentials]


class CommandError(RuntimeError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, message: str, *, returncode: int) -> None:
        super().__init__(message)
        self.returncode = returncode


def _execute_command(
    command: Sequence[str],
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    process_env = {**os.environ, **env} if env else None
    return subprocess.run(
        command,
        cwd=cwd,
        env=process_env,
        capture_output=True,
        # Ferramentas podem imprimir nomes de arquivo fora de UTF-8.
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
    )


def run_capture(
    command: Sequence[str],
    cwd: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command and return its result whatever the exit code."""
    log_event(logger, logging.DEBUG, "repo.command", argv=list(command), cwd=cwd)
    return _execute_command(command, cwd=cwd, env=env, timeout=timeout)


def run(
    command: Sequence[str],
    cwd: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a command and raise CommandError on a non-zero exit code."""
    result = run_capture(command, cwd=cwd, env=env, timeout=timeout)
    if result.returncode == 0:
        return result
    for stream_name, output in (("stdout", result.stdout), ("stderr", result.stderr)):
        if output and output.strip():
            log_event(logger, logging.ERROR, "repo.command.failed", stream=stream_name, output=output.strip())
    raise CommandError(
        safe_message(f"Command failed (exit_code={result.returncode}): {' '.join(command)}"),
        returncode=result.returncode,
    )


def git_auth_env(credentials: GitCredentials) -> dict[str, str]:
    # Header entregue ao git via config de ambiente: nunca aparece no argv nem nos logs.
    return {
        "GIT_TERMINAL_PROMPT": "0",
        "GIT_CONFIG_COUNT": "1",
        "GIT_CONFIG_KEY_0": "http.extraHeader",
        "GIT_CONFIG_VALUE_0": credentials.basic_auth_header(),
    }


def _auth_env(credentials_provider: CredentialsProvider | None) -> dict[str, str] | None:
    if credentials_provider is None:
        return None
    return git_auth_env(credentials_provider())


def clone_repo(
    owner: str,
    repo: str,
    repo_dir: Path,
    *,
    credentials_provider: CredentialsProvider,
    server_url: str = "https://github.com",
) -> None:
    if repo_dir.exists():
        shutil.rmtree(repo_dir)
    repo_dir.parent.mkdir(parents=True, exist_ok=True)
    clone_url = f"{server_url.rstrip('/')}/{owner}/{repo}.git"
    run(["git", "clone", clone_url, str(repo_dir)], env=_auth_env(credentials_provider))


def git_setup(
    repo_dir: Path,
    *,
    git_author_name: str,
    git_author_email: str,
) -> None:
    run(["git", "config", "user.name", git_author_name], cwd=repo_dir)
    run(["git", "config", "user.email", git_author_email], cwd=repo_dir)
    run(["git", "config", "--local", "credential.helper", ""], cwd=repo_dir)


def local_branch_exists(branch: str, repo_dir: Path) -> bool:
    command_result = run_capture(
        ["git", "rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"],
        cwd=repo_dir,
    )
    return command_result.returncode == 0


def remote_branch_exists(
    branch: str,
    repo_dir: Path,
    *,
    remote: str = "origin",
    credentials_provider: CredentialsProvider | None = None,
) -> bool:
    command_result = run_capture(
        ["git", "ls-remote", "--exit-code", "--heads", remote, branch],
        cwd=repo_dir,
        env=_auth_env(credentials_provider),
    )
    if command_result.returncode not in (0, 2):
        # 2 significa "nenhuma ref encontrada"; qualquer outro codigo e falha de acesso ao remoto.
        raise CommandError(
            safe_message(
                f"Command failed (exit_code={command_result.returncode}): git ls-remote {remote} {branch}"
            ),
            returncode=command_result.returncode,
        )
    return command_result.returncode == 0


def create_branch(repo_dir: Path, branch: str) -> None:
    run(["git", "checkout", "-b", branch], cwd=repo_dir)


def checkout_branch(repo_dir: Path, branch: str) -> None:
    run(["git", "checkout", branch], cwd=repo_dir)


def delete_branch(repo_dir: Path, branch: str) -> None:
    run(["git", "branch", "-D", branch], cwd=repo_dir)


def parse_porcelain_status(output: str) -> list[str]:
    entries = output.split("\0")
    changed_paths: list[str] = []
    index = 0
    while index < len(entries):
        entry = entries[index]
        index += 1
        if len(entry) < 4:
            continue
        status_code, path = entry[:2], entry[3:]
        changed_paths.append(path)
        # Em renomeacoes/copias o caminho de origem vem na entrada seguinte.
        if "R" in status_code or "C" in status_code:
            index += 1
    return changed_paths


def repository_prefix(repo_dir: Path) -> str:
    # Caminho de repo_dir relativo a raiz do repositorio ("" na raiz, "sub/dir/" abaixo dela).
    return run(["git", "rev-parse", "--show-prefix"], cwd=repo_dir).stdout.strip()


def changed_paths(repo_dir: Path) -> list[str]:
    # Porcelain sempre reporta caminhos a partir da raiz; o pathspec "." limita a repo_dir.
    prefix = repository_prefix(repo_dir)
    result = run(["git", "status", "--porcelain", "-z", "--untracked-files=all", "--", "."], cwd=repo_dir)
    return [
        path[len(prefix):] if prefix and path.startswith(prefix) else path
        for path in parse_porcelain_status(result.stdout)
    ]


def discard_changes(repo_dir: Path) -> None:
    run(["git", "restore", "--source=HEAD", "--staged", "--worktree", "--", "."], cwd=repo_dir)
    run(["git", "clean", "-fd", "--", "."], cwd=repo_dir)


def commit_changes(repo_dir: Path, commit_message: str) -> str:
    run(["git", "add", "--all", "--", "."], cwd=repo_dir)
    run(["git", "commit", "-m", commit_message, "--", "."], cwd=repo_dir)
    return run(["git", "rev-parse", "HEAD"], cwd=repo_dir).stdout.strip()


def push_branch(
    repo_dir: Path,
    branch: str,
    *,
    force: bool = False,
    remote: str = "origin",
    credentials_provider: CredentialsProvider | None = None,
) -> None:
    command = ["git", "push", "-u"]
    if force:
        command.append("--force")
    command.extend([remote, branch])
    run(command, cwd=repo_dir, env=_auth_env(credentials_provider))

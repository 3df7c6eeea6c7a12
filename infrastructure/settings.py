import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from application.maintenance_flow import BRANCH_CONFLICT_POLICIES, BranchConflictPolicy
from domain.templates import DEFAULT_CHANGELOG_FILE
from infrastructure.github.github_client import DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS


_DEFAULT_OUTDATED_COMMAND = "npm outdated --json"
_DEFAULT_FORMAT_CHECK_COMMAND = "npx --no-install prettier --check ."
_DEFAULT_DEPENDENCY_UPDATE_COMMAND = "npm update"
_DEFAULT_FORMAT_COMMAND = "npx --no-install prettier --write ."
_DEFAULT_DOCS_COMMAND = "npm run docs --if-present"
_DEFAULT_COMMAND_TIMEOUT_SECONDS = 600.0
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class SettingsError(RuntimeError):
    """Raised when an environment variable holds an invalid value."""


@dataclass(frozen=True)
class ToolCommands:
    outdated: tuple[str, ...]
    format_check: tuple[str, ...]
    dependency_update: tuple[str, ...]
    format: tuple[str, ...]
    docs: tuple[str, ...]


@dataclass(frozen=True)
class MaintenanceSettings:
    git_author_name: str
    git_author_email: str
    github_api_url: str
    github_server_url: str
    git_remote: str
    repository_directory: Path
    workdir: Path
    base_branch: str
    dry_run: bool
    branch_conflict_policy: BranchConflictPolicy
    changelog_file: str
    docs_source_dirs: tuple[str, ...]
    docs_artifact: str
    command_timeout: float
    http_timeout: float
    commands: ToolCommands
    summary_file: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MaintenanceSettings":
        env = environ if environ is not None else os.environ
        summary_file = env.get("MAINTENANCE_SUMMARY_FILE", "").strip()
        return cls(
            git_author_name=env.get("GIT_AUTHOR_NAME", "Maintenance Bot"),
            git_author_email=env.get("GIT_AUTHOR_EMAIL", "maintenance-bot@example.com"),
            github_api_url=env.get("GITHUB_API_URL", DEFAULT_API_URL),
            github_server_url=env.get("GITHUB_SERVER_URL", "https://github.com"),
            git_remote=env.get("GIT_REMOTE", "origin"),
            repository_directory=Path(env.get("REPOSITORY_DIR", ".")),
            workdir=Path(env.get("MAINTENANCE_WORKDIR", "/work")),
            base_branch=env.get("GH_BASE_BRANCH", "main"),
            dry_run=parse_bool(env, "DRY_RUN", default=False),
            branch_conflict_policy=parse_branch_conflict_policy(env.get("BRANCH_CONFLICT_POLICY", "fail")),
            changelog_file=env.get("CHANGELOG_FILE", DEFAULT_CHANGELOG_FILE),
            docs_source_dirs=parse_list(env.get("DOCS_SOURCE_DIRS", "src")),
            docs_artifact=env.get("DOCS_ARTIFACT", "docs/index.html"),
            command_timeout=parse_positive_float(env, "COMMAND_TIMEOUT_SECONDS", _DEFAULT_COMMAND_TIMEOUT_SECONDS),
            http_timeout=parse_positive_float(env, "HTTP_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            commands=ToolCommands(
                outdated=parse_command(env, "OUTDATED_COMMAND", _DEFAULT_OUTDATED_COMMAND),
                format_check=parse_command(env, "FORMAT_CHECK_COMMAND", _DEFAULT_FORMAT_CHECK_COMMAND),
                dependency_update=parse_command(env, "DEPENDENCY_UPDATE_COMMAND", _DEFAULT_DEPENDENCY_UPDATE_COMMAND),
                format=parse_command(env, "FORMAT_COMMAND", _DEFAULT_FORMAT_COMMAND),
                docs=parse_command(env, "DOCS_COMMAND", _DEFAULT_DOCS_COMMAND),
            ),
            summary_file=Path(summary_file) if summary_file else None,
        )


def required_env(name: str, environ: Mapping[str, str] | None = None) -> str:
    env = environ if environ is not None else os.environ
    value = env.get(name)
    if not value:
        raise SettingsError(f"Missing required environment variable: {name}")
    return value


def parse_build_number(raw_value: str) -> int:
    try:
        build_number = int(raw_value.strip())
    except ValueError as error:
        raise SettingsError(f"BUILD_NUMBER must be an integer, got '{raw_value}'") from error
    if build_number <= 0:
        raise SettingsError(f"BUILD_NUMBER must be positive, got {build_number}")
    return build_number


def parse_bool(env: Mapping[str, str], name: str, *, default: bool) -> bool:
    raw_value = env.get(name)
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise SettingsError(f"Invalid boolean for {name}: '{raw_value}'")


def parse_positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw_value = env.get(name)
    if raw_value is None or not raw_value.strip():
        return default
    try:
        value = float(raw_value)
    except ValueError as error:
        raise SettingsError(f"Invalid number for {name}: '{raw_value}'") from error
    if value <= 0:
        raise SettingsError(f"{name} must be positive, got {value}")
    return value


def parse_branch_conflict_policy(raw_value: str) -> BranchConflictPolicy:
    policy = raw_value.strip().lower()
    if policy not in BRANCH_CONFLICT_POLICIES:
        supported = ", ".join(BRANCH_CONFLICT_POLICIES)
        raise SettingsError(f"Invalid BRANCH_CONFLICT_POLICY '{raw_value}'. Supported values: {supported}")
    return policy  # type: ignore[return-value]


def parse_list(raw_value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in raw_value.split(",") if item.strip())


def parse_command(env: Mapping[str, str], name: str, default: str) -> tuple[str, ...]:
    raw_value = env.get(name, default)
    try:
        command = tuple(shlex.split(raw_value))
    except ValueError as error:
        raise SettingsError(f"Invalid command for {name}: {error}") from error
    if not command:
        raise SettingsError(f"{name} must not be empty")
    return command

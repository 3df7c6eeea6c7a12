import base64
import os
from dataclasses import dataclass, field

from application.ports import SecretProvider
from infrastructure.observability.logging_utils import register_sensitive_values


class MissingSecretError(RuntimeError):
    """Raised when a required secret is not provisioned."""


@dataclass(frozen=True)
class GitCredentials:
    username: str
    password: str = field(repr=False)

    def basic_auth_header(self) -> str:
        raw_credentials = f"{self.username}:{self.password}".encode("utf-8")
        encoded = base64.b64encode(raw_credentials).decode("ascii")
        return f"Authorization: Basic {encoded}"


class EnvSecretProvider:
    """Reads secrets from environment variables and registers them for log redaction."""

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def get_secret(self, name: str) -> str:
        value = self._environ.get(name)
        if not value:
            raise MissingSecretError(f"Missing required secret: {name}")
        register_sensitive_values(value)
        return value

    def get_optional_secret(self, name: str) -> str | None:
        try:
            return self.get_secret(name)
        except MissingSecretError:
            return None


def resolve_git_credentials(provider: SecretProvider) -> GitCredentials:
    username = provider.get_secret("GIT_USERNAME")
    try:
        password = provider.get_secret("GIT_PASSWORD")
    except MissingSecretError:
        password = provider.get_secret("GITHUB_TOKEN")
    credentials = GitCredentials(username=username, password=password)
    register_sensitive_values(credentials.basic_auth_header().split(" ", 2)[-1])
    return credentials

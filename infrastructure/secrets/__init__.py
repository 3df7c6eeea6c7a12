from infrastructure.secrets.env_provider import (
    EnvSecretProvider,
    GitCredentials,
    MissingSecretError,
    resolve_git_credentials,
)

__all__ = [
    "EnvSecretProvider",
    "GitCredentials",
    "MissingSecretError",
    "resolve_git_credentials",
]

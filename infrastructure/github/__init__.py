from infrastructure.github.github_client import GitHubAPIError, GitHubClient

__all__ = ["GitHubAPIError", "GitHubClient"]

import logging

import requests

from domain.models import PullRequestDraft
from infrastructure.observability.logging_utils import log_event, safe_message


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT_SECONDS = 30.0


class GitHubAPIError(RuntimeError):
    """Raised when the hosting API rejects a request."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    def __init__(
        self,
        *,
        token: str,
        owner: str,
        repo: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.timeout = timeout
        self.base = f"{api_url.rstrip('/')}/repos/{self.owner}/{self.repo}"
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    def _error_details(self, response: requests.Response) -> str:
        error_details = response.text
        try:
            error_payload = response.json()
            api_message = error_payload.get("message", "")
            api_errors = error_payload.get("errors", "")
            error_details = f"{api_message} | errors={api_errors}"
        except (ValueError, AttributeError):
            pass
        return safe_message(error_details)

    def create_pr(self, draft: PullRequestDraft) -> str:
        """Open a pull request and return the raw response body.

        Decoding is left to the caller so a malformed body can be reported
        without losing the fact that the request itself succeeded.
        """
        log_event(logger, logging.INFO, "github.pr.create", head=draft.head, base=draft.base, title=draft.title)
        response = self.session.post(f"{self.base}/pulls", json=draft.to_payload(), timeout=self.timeout)
        if response.status_code >= 400:
            safe_error_details = self._error_details(response)
            log_event(
                logger,
                logging.ERROR,
                "github.pr.create_failed",
                status_code=response.status_code,
                details=safe_error_details,
            )
            raise GitHubAPIError(
                safe_message(
                    f"GitHub PR creation failed ({response.status_code}): {safe_error_details}"
                ),
                status_code=response.status_code,
            )
        log_event(logger, logging.INFO, "github.pr.created", status_code=response.status_code)
        return response.text

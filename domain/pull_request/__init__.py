from domain.pull_request.errors import RESPONSE_ERROR_PREFIX, PullRequestResponseError
from domain.pull_request.parser import parse_pull_request_response

__all__ = [
    "RESPONSE_ERROR_PREFIX",
    "PullRequestResponseError",
    "parse_pull_request_response",
]

RESPONSE_ERROR_PREFIX = "Pull request response invalid"


class PullRequestResponseError(RuntimeError):
    """Raised when the hosting API response cannot be decoded into a pull request."""


def response_error(details: str) -> PullRequestResponseError:
    return PullRequestResponseError(f"{RESPONSE_ERROR_PREFIX}: {details}")

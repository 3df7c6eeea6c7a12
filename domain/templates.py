from datetime import date, datetime

from domain.models import PullRequestDraft, RunContext


FEATURE_BRANCH_PREFIX = "automated-update"
DEFAULT_CHANGELOG_FILE = "CHANGELOG.md"

_COMMIT_MESSAGE_TEMPLATE = """chore: automated maintenance update (build {build_number})

- Update outdated dependencies
- Apply automatic code formatting
- Regenerate documentation

Build: {build_number}
"""

_PR_TITLE_TEMPLATE = "Automated maintenance update (build {build_number})"

_PR_BODY_TEMPLATE = """## Automated maintenance update

This pull request was opened automatically by build **{build_number}** on {timestamp}.

Changes applied:
- Updated outdated dependencies
- Applied automatic code formatting
- Regenerated documentation

Merge `{head}` into `{base}` after the checks pass.
"""

_CHANGELOG_ENTRY_TEMPLATE = """
## Automated maintenance - {day}

- Updated outdated dependencies
- Applied automatic code formatting
- Regenerated documentation
"""


def feature_branch_name(build_number: int) -> str:
    return f"{FEATURE_BRANCH_PREFIX}-{build_number}"


def build_commit_message(build_number: int) -> str:
    return _COMMIT_MESSAGE_TEMPLATE.format(build_number=build_number)


def format_timestamp(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def build_pull_request_draft(context: RunContext, *, head: str | None = None) -> PullRequestDraft:
    # O head pode diferir do nome deterministico quando a politica de conflito aplica sufixo.
    head_branch = head or context.feature_branch
    return PullRequestDraft(
        title=_PR_TITLE_TEMPLATE.format(build_number=context.build_number),
        body=_PR_BODY_TEMPLATE.format(
            build_number=context.build_number,
            timestamp=format_timestamp(context.started_at),
            head=head_branch,
            base=context.base_branch,
        ),
        head=head_branch,
        base=context.base_branch,
    )


def build_changelog_entry(day: date) -> str:
    return _CHANGELOG_ENTRY_TEMPLATE.format(day=day.isoformat())

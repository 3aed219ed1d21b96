"""
Policy evaluation and status report rendering.

``evaluate`` turns a ``FullMergeRequest`` into a ``Report``: the one-off
notices the bot should post (reminder, naming warnings) and the markdown
body of the status report that the reconciler keeps in sync. Nothing is
written here; the only remote calls are reads of pipeline jobs and traces.
"""

import html
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from gitlab_bot.comments import CommentKind
from gitlab_bot.config import ValidationRule
from gitlab_bot.types.merge_requests import FullMergeRequest

if TYPE_CHECKING:
    from gitlab_bot.async_client import AsyncGitLabClient

REMINDER_DAYS = 5
REPORT_MARKER_LINE = f"<!-- {CommentKind.REPORT.marker} -->"

RUNNING_STATUSES = frozenset({"pending", "running"})


@dataclass
class Notice:
    """A standalone comment the bot should create."""

    kind: CommentKind
    body: str


@dataclass
class Report:
    """Outcome of evaluating one merge request."""

    notices: list[Notice] = field(default_factory=list)
    body: str = ""


def reminder_notice(mr: FullMergeRequest, now: datetime) -> Notice | None:
    """
    Build a reminder when the source branch has been idle for too long.

    No reminder is produced if the bot already posted one within the same
    window.
    """
    window = timedelta(days=REMINDER_DAYS)
    if mr.source_branch.commit.committed_date >= now - window:
        return None
    if mr.has_bot_comment(CommentKind.REMINDER, max_age=window, now=now):
        return None

    body = (
        f"@{mr.request.author.username} friendly reminder: this merge request "
        f"has not been updated for {REMINDER_DAYS} days!\n"
        "Let's get going! ;)\n\n"
        f"{CommentKind.REMINDER.marker}"
    )
    return Notice(kind=CommentKind.REMINDER, body=body)


def _check_rule(
    mr: FullMergeRequest,
    rule: ValidationRule | None,
    subject: str,
    label: str,
    what: str,
    kind: CommentKind,
) -> tuple[Notice | None, str | None]:
    if rule is None:
        return None, None
    regex = rule.regex
    if regex is None:
        return None, None

    is_valid = regex.search(subject) is not None
    notice = None
    if not is_valid and not mr.has_bot_comment(kind):
        err = rule.error_message(what)
        body = (
            f"@{mr.request.author.username}\n\n"
            f"The {what.lower()} is invalid.\n{err}\n\n"
            f"{kind.marker}"
        )
        notice = Notice(kind=kind, body=body)

    line = f"- [{'x' if is_valid else ' '}] {label}{'' if is_valid else ' :warning:'}"
    return notice, line


def validate(mr: FullMergeRequest) -> tuple[list[Notice], list[str]]:
    """
    Run the naming and reviewer checks.

    Returns:
        Warning notices to post and the checklist lines of the report
    """
    notices: list[Notice] = []
    lines: list[str] = []
    config = mr.repo_config

    checks = [
        (config.title_rule, mr.request.title, "Valid Merge Request Title",
         "Merge request title", CommentKind.TITLE_WARNING),
        (config.branch_name_rule, mr.source_branch.name, "Valid Branch Name",
         "Branch name", CommentKind.BRANCH_NAME_WARNING),
    ]
    for rule, subject, label, what, kind in checks:
        notice, line = _check_rule(mr, rule, subject, label, what, kind)
        if notice is not None:
            notices.append(notice)
        if line is not None:
            lines.append(line)

    if mr.request.assignee is None:
        lines.append("- [ ] Reviewer selected :warning:")
    else:
        lines.append("- [x] Reviewer selected")

    return notices, lines


async def render_build_status(mr: FullMergeRequest, client: "AsyncGitLabClient") -> str:
    """Render the build status section for the most recent pipeline, or ""."""
    if not mr.pipelines:
        return ""

    pipeline = mr.pipelines[0]
    project_id = mr.request.project_id
    msg = "## Build Status\n\n"

    if pipeline.status == "failed":
        jobs = await client.pipelines.jobs(project_id, pipeline.id)
        msg += "Pipeline failed! :warning:\n\n"
        for job in jobs:
            if job.status != "failed":
                continue
            trace = await client.pipelines.job_trace(project_id, job.id)
            msg += (
                f"#### Job: [{job.name}]({mr.job_url(job.id)})\n\n"
                "<details>"
                "<summary>Show Logs</summary>"
                f"<pre><code>{html.escape(trace)}</code></pre>"
                "</details><br>\n"
            )
    elif pipeline.status == "success":
        jobs = await client.pipelines.jobs(project_id, pipeline.id)
        links = ", ".join(
            f"[{job.name}]({mr.job_url(job.id)})" for job in jobs if job.status == "success"
        )
        msg += f"Pipeline passed! :rocket:\n\nSuccessful jobs: {links}\n"
    elif pipeline.status in RUNNING_STATUSES:
        msg += "Pipeline is running...\n"
    else:
        msg += f"Pipeline status: `{pipeline.status}`\n"

    return msg


async def evaluate(
    mr: FullMergeRequest,
    client: "AsyncGitLabClient",
    now: datetime | None = None,
) -> Report:
    """
    Evaluate the project's policy against a merge request.

    Args:
        mr: Full snapshot of the merge request
        client: GitLab client, used to read pipeline jobs and traces
        now: Reference instant (default: current UTC time)

    Returns:
        Report with the notices to post, in order (reminder first), and the
        status report body. Both are empty when the bot is disabled for the
        project.
    """
    if mr.repo_config.is_disabled():
        return Report()

    now = now or datetime.now(timezone.utc)
    report = Report()

    reminder = reminder_notice(mr, now)
    if reminder is not None:
        report.notices.append(reminder)

    warnings, checklist = validate(mr)
    report.notices.extend(warnings)

    body = await render_build_status(mr, client)
    if checklist:
        body += "## Validation\n\n" + "\n".join(checklist) + "\n"

    if body:
        body += f"\n{REPORT_MARKER_LINE}\n"
    report.body = body
    return report

"""
Reconciliation of the bot's status report comment.

At most one live ``[report]`` comment exists per merge request. A new
report is written first (update in place or create) and older report
comments are pruned afterwards, so the merge request never shows zero
reports in between.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from gitlab_bot.comments import CommentKind
from gitlab_bot.types.merge_requests import FullMergeRequest

if TYPE_CHECKING:
    from gitlab_bot.async_client import AsyncGitLabClient


class ReportAction(Enum):
    """What to do with the status report comment."""

    NONE = "none"  # nothing to report
    SKIP = "skip"  # report unchanged
    CREATE = "create"
    UPDATE = "update"


@dataclass
class ReportPlan:
    """Writes needed to bring the report comment in sync."""

    action: ReportAction
    note_id: int | None = None
    delete_ids: list[int] = field(default_factory=list)


def plan_report_update(mr: FullMergeRequest, body: str, bot_id: int) -> ReportPlan:
    """
    Decide how to publish ``body``.

    - empty body: nothing to do
    - body equal to the newest bot report: skip
    - newest comment on the MR is a bot report: update it in place
    - otherwise: create a new comment

    Every other bot report is scheduled for deletion after the write.
    """
    if not body:
        return ReportPlan(action=ReportAction.NONE)

    current = mr.latest_bot_comment(CommentKind.REPORT)
    if current is not None and current.body == body:
        return ReportPlan(action=ReportAction.SKIP)

    newest = mr.comments[0] if mr.comments else None
    if newest is not None and newest.is_authored_by(bot_id) and newest.is_kind(CommentKind.REPORT):
        action = ReportAction.UPDATE
        note_id: int | None = newest.id
    else:
        action = ReportAction.CREATE
        note_id = None

    delete_ids = [
        c.id for c in mr.bot_comments if c.is_kind(CommentKind.REPORT) and c.id != note_id
    ]
    return ReportPlan(action=action, note_id=note_id, delete_ids=delete_ids)


async def apply_report_plan(
    client: "AsyncGitLabClient",
    mr: FullMergeRequest,
    plan: ReportPlan,
    body: str,
) -> int | None:
    """
    Execute a ReportPlan.

    Returns:
        Id of the report comment that was written, or None if nothing was written
    """
    if plan.action in (ReportAction.NONE, ReportAction.SKIP):
        return None

    project_id = mr.request.project_id
    iid = mr.request.iid

    if plan.action is ReportAction.UPDATE and plan.note_id is not None:
        note = await client.merge_requests.update_note(project_id, iid, plan.note_id, body)
    else:
        note = await client.merge_requests.create_note(project_id, iid, body)

    for note_id in plan.delete_ids:
        if note_id != note.id:
            await client.merge_requests.delete_note(project_id, iid, note_id)

    return note.id


async def reconcile_report(
    client: "AsyncGitLabClient",
    mr: FullMergeRequest,
    body: str,
    bot_id: int,
) -> ReportAction:
    """Plan and apply the report update; returns the action taken."""
    plan = plan_report_update(mr, body, bot_id)
    await apply_report_plan(client, mr, plan, body)
    return plan.action

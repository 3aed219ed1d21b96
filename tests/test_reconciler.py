"""
Tests for report comment reconciliation.
"""

import asyncio

from hypothesis import given, settings
from hypothesis import strategies as st

from gitlab_bot.comments import CommentKind
from gitlab_bot.reconciler import ReportAction, plan_report_update, reconcile_report
from gitlab_bot.testing import (
    MockGitLabClient,
    create_full_merge_request,
    create_mock_author,
    create_mock_note,
)
from gitlab_bot.testing.fixtures import BOT_USER_ID, FIXED_NOW, create_mock_user

BOT = create_mock_author(id=BOT_USER_ID, username="gitlab-bot")
HUMAN = create_mock_author()

REPORT_V1 = "## Validation\n\n- [ ] Reviewer selected :warning:\n\n<!-- [report] -->\n"
REPORT_V2 = "## Validation\n\n- [x] Reviewer selected\n\n<!-- [report] -->\n"


def seeded_client(notes_newest_first):
    """Mock client whose MR (project 1, iid 1) already carries ``notes``."""
    client = MockGitLabClient(user=create_mock_user(), clock=lambda: FIXED_NOW)
    client.notes_data[(1, 1)] = list(notes_newest_first)
    return client


def snapshot(client: MockGitLabClient):
    return create_full_merge_request(comments=list(client.notes_for(1, 1)))


def live_reports(client: MockGitLabClient):
    return [
        n for n in client.notes_for(1, 1)
        if n.is_authored_by(BOT_USER_ID) and n.is_kind(CommentKind.REPORT)
    ]


class TestPlan:
    def test_empty_body_plans_nothing(self) -> None:
        plan = plan_report_update(create_full_merge_request(), "", BOT_USER_ID)
        assert plan.action is ReportAction.NONE

    def test_first_report_is_created(self) -> None:
        plan = plan_report_update(create_full_merge_request(), REPORT_V1, BOT_USER_ID)

        assert plan.action is ReportAction.CREATE
        assert plan.delete_ids == []

    def test_identical_report_is_skipped(self) -> None:
        mr = create_full_merge_request(comments=[
            create_mock_note(2, "lgtm", author=HUMAN),
            create_mock_note(1, REPORT_V1, author=BOT),
        ])

        assert plan_report_update(mr, REPORT_V1, BOT_USER_ID).action is ReportAction.SKIP

    def test_report_on_top_is_updated_in_place(self) -> None:
        mr = create_full_merge_request(comments=[
            create_mock_note(3, REPORT_V1, author=BOT),
            create_mock_note(2, "lgtm", author=HUMAN),
        ])

        plan = plan_report_update(mr, REPORT_V2, BOT_USER_ID)

        assert plan.action is ReportAction.UPDATE
        assert plan.note_id == 3
        assert plan.delete_ids == []

    def test_buried_report_is_replaced(self) -> None:
        mr = create_full_merge_request(comments=[
            create_mock_note(4, "please rebase", author=HUMAN),
            create_mock_note(3, REPORT_V1, author=BOT),
        ])

        plan = plan_report_update(mr, REPORT_V2, BOT_USER_ID)

        assert plan.action is ReportAction.CREATE
        assert plan.delete_ids == [3]

    def test_report_quoted_by_a_human_is_not_ours(self) -> None:
        mr = create_full_merge_request(comments=[create_mock_note(5, REPORT_V1, author=HUMAN)])

        plan = plan_report_update(mr, REPORT_V1, BOT_USER_ID)

        assert plan.action is ReportAction.CREATE
        assert plan.delete_ids == []

    def test_other_bot_comments_are_kept(self) -> None:
        mr = create_full_merge_request(comments=[
            create_mock_note(4, "please rebase", author=HUMAN),
            create_mock_note(3, "@alice reminder [reminder]", author=BOT),
            create_mock_note(2, REPORT_V1, author=BOT),
        ])

        plan = plan_report_update(mr, REPORT_V2, BOT_USER_ID)

        assert plan.delete_ids == [2]


class TestReconcile:
    def test_second_run_with_same_body_writes_nothing(self) -> None:
        client = seeded_client([])

        first = asyncio.run(reconcile_report(client, snapshot(client), REPORT_V1, BOT_USER_ID))
        client.reset()
        second = asyncio.run(reconcile_report(client, snapshot(client), REPORT_V1, BOT_USER_ID))

        assert first is ReportAction.CREATE
        assert second is ReportAction.SKIP
        assert client.get_calls() == []

    def test_update_in_place_keeps_note_id(self) -> None:
        client = seeded_client([create_mock_note(3, REPORT_V1, author=BOT)])

        action = asyncio.run(reconcile_report(client, snapshot(client), REPORT_V2, BOT_USER_ID))

        assert action is ReportAction.UPDATE
        assert [(n.id, n.body) for n in live_reports(client)] == [(3, REPORT_V2)]
        assert not client.was_called("merge_requests.delete_note")

    def test_create_then_prune_leaves_one_report(self) -> None:
        client = seeded_client([
            create_mock_note(9, "please rebase", author=HUMAN),
            create_mock_note(8, REPORT_V1, author=BOT),
            create_mock_note(7, "lgtm", author=HUMAN),
            create_mock_note(6, REPORT_V1, author=BOT),
        ])

        action = asyncio.run(reconcile_report(client, snapshot(client), REPORT_V2, BOT_USER_ID))

        assert action is ReportAction.CREATE
        reports = live_reports(client)
        assert len(reports) == 1
        assert reports[0].body == REPORT_V2
        assert client.notes_for(1, 1)[0] is reports[0]
        methods = [c.method for c in client.get_calls()]
        assert methods.index("merge_requests.create_note") < methods.index("merge_requests.delete_note")
        assert {c.args[2] for c in client.get_calls("merge_requests.delete_note")} == {6, 8}

    def test_human_comments_survive(self) -> None:
        client = seeded_client([
            create_mock_note(9, "please rebase", author=HUMAN),
            create_mock_note(8, REPORT_V1, author=BOT),
        ])

        asyncio.run(reconcile_report(client, snapshot(client), REPORT_V2, BOT_USER_ID))

        assert any(n.id == 9 for n in client.notes_for(1, 1))


@given(
    layout=st.lists(st.sampled_from(["human", "report", "reminder"]), max_size=8),
)
@settings(max_examples=80, deadline=None)
def test_reconcile_always_leaves_exactly_one_current_report(layout: list[str]) -> None:
    """Whatever comments precede it, one run leaves one live, current report."""
    body = REPORT_V2
    notes = []
    for index, kind in enumerate(layout):
        note_id = len(layout) - index
        if kind == "human":
            notes.append(create_mock_note(note_id, "a comment", author=HUMAN))
        elif kind == "report":
            notes.append(create_mock_note(note_id, REPORT_V1, author=BOT))
        else:
            notes.append(create_mock_note(note_id, "ping [reminder]", author=BOT))
    client = seeded_client(notes)

    asyncio.run(reconcile_report(client, snapshot(client), body, BOT_USER_ID))
    again = asyncio.run(reconcile_report(client, snapshot(client), body, BOT_USER_ID))

    reports = live_reports(client)
    assert len(reports) == 1
    assert reports[0].body == body
    assert again is ReportAction.SKIP

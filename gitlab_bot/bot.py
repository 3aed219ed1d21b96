"""
The reconciliation loop.

Each cycle lists the open merge requests, drops the ones whose snapshot in
the cache is still current, and processes the rest with bounded
concurrency. A failing merge request is logged and skipped; a failing
cycle is logged and retried on the next tick.
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from gitlab_bot.cache import Cache
from gitlab_bot.config import BotConfig
from gitlab_bot.logging import log_event
from gitlab_bot.reconciler import ReportAction, reconcile_report
from gitlab_bot.report import evaluate
from gitlab_bot.snapshot import load_full_merge_request
from gitlab_bot.types.merge_requests import MergeRequest
from gitlab_bot.types.users import User

if TYPE_CHECKING:
    from gitlab_bot.async_client import AsyncGitLabClient

logger = logging.getLogger("gitlab_bot.bot")

DEFAULT_INTERVAL = 300.0
DEFAULT_CONCURRENCY = 5


class Outcome(Enum):
    """Result of handling one merge request in a cycle."""

    UNCHANGED = "unchanged"
    DISABLED = "disabled"
    REPORT_UNCHANGED = "report_unchanged"
    REPORT_CREATED = "report_created"
    REPORT_UPDATED = "report_updated"
    NO_REPORT = "no_report"
    FAILED = "failed"


_ACTION_OUTCOMES = {
    ReportAction.NONE: Outcome.NO_REPORT,
    ReportAction.SKIP: Outcome.REPORT_UNCHANGED,
    ReportAction.CREATE: Outcome.REPORT_CREATED,
    ReportAction.UPDATE: Outcome.REPORT_UPDATED,
}


@dataclass
class CycleSummary:
    """Per merge request outcomes of one cycle, keyed by MR id."""

    outcomes: dict[int, Outcome] = field(default_factory=dict)

    def count(self, outcome: Outcome) -> int:
        return sum(1 for o in self.outcomes.values() if o is outcome)

    def counts(self) -> dict[str, int]:
        return {o.value: n for o, n in Counter(self.outcomes.values()).items()}


class Bot:
    """
    Periodic reconciler of open merge requests.

    Example:
        ```python
        import asyncio
        from gitlab_bot import Bot

        asyncio.run(Bot.from_env().run_forever())
        ```
    """

    def __init__(
        self,
        client: "AsyncGitLabClient",
        cache: Cache | None = None,
        interval: float = DEFAULT_INTERVAL,
        concurrency: int = DEFAULT_CONCURRENCY,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the bot.

        Args:
            client: GitLab client (the real one or a mock with the same surface)
            cache: Shared cache (default: a fresh one)
            interval: Seconds to sleep after each cycle
            concurrency: Maximum number of merge requests processed at once
            clock: Source of the current UTC time (tests)
            sleep: Coroutine used to wait between cycles (tests)
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.client = client
        self.cache = cache if cache is not None else Cache()
        self.interval = interval
        self.concurrency = concurrency
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: BotConfig) -> "Bot":
        from gitlab_bot.async_client import AsyncGitLabClient

        return cls(
            client=AsyncGitLabClient.from_config(config),
            interval=config.interval,
            concurrency=config.concurrency,
        )

    @classmethod
    def from_env(cls) -> "Bot":
        """Create a bot from the GITLAB_BOT_* environment variables."""
        return cls.from_config(BotConfig.from_env())

    async def process_merge_request(self, bot: User, mr: MergeRequest) -> Outcome:
        """
        Bring one merge request in sync.

        Loads the full snapshot, evaluates the policy, posts notices,
        reconciles the report comment and finally stores the snapshot in
        the cache. Nothing is written unless the whole report was built.
        """
        full = await load_full_merge_request(self.client, mr, bot.id, self.cache)

        if full.repo_config.is_disabled():
            self.cache.set_merge_request(full)
            return Outcome.DISABLED

        report = await evaluate(full, self.client, now=self._clock())

        for notice in report.notices:
            await self.client.merge_requests.create_note(mr.project_id, mr.iid, notice.body)
            log_event(
                logger,
                "merge_request_notice",
                kind=notice.kind.value,
                project_id=mr.project_id,
                mr_iid=mr.iid,
            )

        action = await reconcile_report(self.client, full, report.body, bot.id)
        self.cache.set_merge_request(full)
        return _ACTION_OUTCOMES[action]

    async def _process_guarded(
        self, semaphore: asyncio.Semaphore, bot: User, mr: MergeRequest
    ) -> Outcome:
        async with semaphore:
            log_event(
                logger,
                "merge_request_check",
                logging.DEBUG,
                project_id=mr.project_id,
                mr_iid=mr.iid,
                mr_name=mr.title,
            )
            try:
                outcome = await self.process_merge_request(bot, mr)
            except Exception as exc:  # noqa: BLE001
                log_event(
                    logger,
                    "merge_request_failed",
                    logging.ERROR,
                    project_id=mr.project_id,
                    mr_iid=mr.iid,
                    mr_name=mr.title,
                    error=str(exc),
                )
                return Outcome.FAILED

            log_event(
                logger,
                "merge_request_complete",
                logging.DEBUG,
                project_id=mr.project_id,
                mr_iid=mr.iid,
                mr_name=mr.title,
                outcome=outcome.value,
            )
            return outcome

    async def process(self) -> CycleSummary:
        """
        Run one reconciliation cycle.

        Raises:
            GitLabBotError: If the bot identity or the merge request list
                cannot be loaded
        """
        log_event(logger, "process_start")

        bot = await self.client.users.current()
        merge_requests = await self.client.merge_requests.list_open()

        summary = CycleSummary()
        pending: list[MergeRequest] = []
        for mr in merge_requests:
            if self.cache.merge_request_changed(mr.ref):
                pending.append(mr)
            else:
                log_event(
                    logger,
                    "merge_request_unchanged",
                    logging.DEBUG,
                    project_id=mr.project_id,
                    mr_iid=mr.iid,
                )
                summary.outcomes[mr.id] = Outcome.UNCHANGED

        semaphore = asyncio.Semaphore(self.concurrency)
        results = await asyncio.gather(
            *(self._process_guarded(semaphore, bot, mr) for mr in pending)
        )
        for mr, outcome in zip(pending, results):
            summary.outcomes[mr.id] = outcome

        log_event(logger, "process_complete", total=len(merge_requests), **summary.counts())
        return summary

    async def run_once(self) -> CycleSummary | None:
        """Run one cycle, logging instead of raising a cycle-level failure."""
        try:
            return await self.process()
        except Exception as exc:  # noqa: BLE001
            log_event(logger, "cycle_failed", logging.ERROR, error=str(exc))
            return None

    async def run_forever(self) -> None:
        """Run cycles forever, sleeping ``interval`` seconds after each."""
        while True:
            await self.run_once()
            await self._sleep(self.interval)

    async def close(self) -> None:
        await self.client.close()

"""
Process-local cache of merge request snapshots and repo configs.

The cache is the only piece of shared mutable state in the bot. It is
created once and handed to every component that needs it. All access goes
through the accessors below, each of which holds the lock only for the
map operation itself.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from gitlab_bot.config import RepoConfig
from gitlab_bot.types.merge_requests import FullMergeRequest, MergeRequestRef

CONFIG_TTL = timedelta(minutes=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _ConfigEntry:
    config: RepoConfig
    expires_at: datetime


class Cache:
    """
    Two-tier cache.

    - Merge requests: keyed by MR id. An entry is valid only while its
      ``updated_at`` equals the one observed remotely.
    - Repo configs: keyed by project id. An entry is valid for
      ``config_ttl`` after it was set; expired entries are dropped on the
      next lookup.
    """

    def __init__(
        self,
        config_ttl: timedelta = CONFIG_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.config_ttl = config_ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._merge_requests: dict[int, FullMergeRequest] = {}
        self._configs: dict[int, _ConfigEntry] = {}

    def get_merge_request(self, mr_id: int) -> FullMergeRequest | None:
        with self._lock:
            return self._merge_requests.get(mr_id)

    def set_merge_request(self, mr: FullMergeRequest) -> None:
        with self._lock:
            self._merge_requests[mr.request.id] = mr

    def merge_request_changed(self, ref: MergeRequestRef) -> bool:
        """Return True when no snapshot is stored or the stored one is stale."""
        with self._lock:
            cached = self._merge_requests.get(ref.id)
            return cached is None or cached.request.updated_at != ref.updated_at

    def get_project_config(self, project_id: int) -> RepoConfig | None:
        now = self._clock()
        with self._lock:
            entry = self._configs.get(project_id)
            if entry is None:
                return None
            if now >= entry.expires_at:
                del self._configs[project_id]
                return None
            return entry.config

    def set_project_config(self, project_id: int, config: RepoConfig) -> None:
        expires_at = self._clock() + self.config_ttl
        with self._lock:
            self._configs[project_id] = _ConfigEntry(config=config, expires_at=expires_at)

    def __len__(self) -> int:
        with self._lock:
            return len(self._merge_requests)

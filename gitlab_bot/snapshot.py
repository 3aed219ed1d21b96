"""Assembly of full merge request snapshots."""

import logging
from typing import TYPE_CHECKING

from gitlab_bot.cache import Cache
from gitlab_bot.config import FALLBACK_BRANCH, REPO_CONFIG_PATH, RepoConfig
from gitlab_bot.exceptions import ConfigurationError, GitLabBotError, NotFoundError
from gitlab_bot.logging import log_event
from gitlab_bot.types.merge_requests import FullMergeRequest, MergeRequest
from gitlab_bot.types.projects import Project

if TYPE_CHECKING:
    from gitlab_bot.async_client import AsyncGitLabClient

logger = logging.getLogger("gitlab_bot.snapshot")

MAX_BRANCH_COMMITS = 100


async def load_repo_config(
    client: "AsyncGitLabClient",
    project: Project,
    cache: Cache,
) -> RepoConfig:
    """
    Resolve the policy of a project, consulting the cache first.

    A missing or malformed policy file yields the default config, which is
    cached like any other. A transport failure also yields the default but
    is not cached, so the file is fetched again on the next call.
    """
    cached = cache.get_project_config(project.id)
    if cached is not None:
        return cached

    branch = project.default_branch or FALLBACK_BRANCH
    try:
        data = await client.projects.file_raw(project.id, REPO_CONFIG_PATH, branch)
    except NotFoundError:
        log_event(logger, "repo_config_missing", logging.DEBUG, project_id=project.id, branch=branch)
        config = RepoConfig()
    except GitLabBotError as e:
        log_event(logger, "repo_config_unavailable", logging.WARNING, project_id=project.id, error=str(e))
        return RepoConfig()
    else:
        try:
            config = RepoConfig.from_toml(data)
        except ConfigurationError as e:
            log_event(logger, "repo_config_invalid", logging.WARNING, project_id=project.id, error=e.message)
            config = RepoConfig()

    cache.set_project_config(project.id, config)
    return config


async def load_full_merge_request(
    client: "AsyncGitLabClient",
    mr: MergeRequest,
    bot_id: int,
    cache: Cache,
) -> FullMergeRequest:
    """
    Fetch everything needed to judge ``mr``.

    Steps run strictly one after another: project, repo config, source
    branch, branch histories, notes, pipelines.

    Args:
        client: GitLab client
        mr: Merge request as returned by the open-MR listing
        bot_id: User id of the bot account, used to pick out its own notes
        cache: Shared cache, used for the repo config

    Raises:
        GitLabBotError: If any required resource cannot be loaded
    """
    project = await client.projects.get(mr.project_id)
    repo_config = await load_repo_config(client, project, cache)

    source_branch = await client.projects.branch(mr.project_id, mr.source_branch)
    source_branch_commits = await client.projects.commits(
        mr.project_id, mr.source_branch, MAX_BRANCH_COMMITS
    )
    target_branch_commits = await client.projects.commits(
        mr.project_id, mr.target_branch, MAX_BRANCH_COMMITS
    )

    comments = await client.merge_requests.notes(mr.project_id, mr.iid)
    bot_comments = [c for c in comments if c.is_authored_by(bot_id)]

    pipelines = await client.merge_requests.pipelines(mr.project_id, mr.iid)

    return FullMergeRequest(
        project=project,
        request=mr,
        source_branch=source_branch,
        source_branch_commits=source_branch_commits,
        target_branch_commits=target_branch_commits,
        comments=comments,
        bot_comments=bot_comments,
        pipelines=pipelines,
        repo_config=repo_config,
    )

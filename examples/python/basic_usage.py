#!/usr/bin/env python3
"""
Basic gitlab-bot usage example.

Runs a few bot cycles against the in-memory mock GitLab, so it needs no
GitLab instance or token.
Run with: python examples/python/basic_usage.py
"""

import asyncio
from dataclasses import replace
from datetime import timedelta

from gitlab_bot import Bot, ConfigurationError, GitLabBotError
from gitlab_bot.testing import (
    FIXED_NOW,
    MockGitLabClient,
    create_mock_job,
    create_mock_merge_request,
    create_mock_pipeline,
    seed_merge_request,
)

print("=== gitlab-bot Basic Usage Example ===\n")

# 1. Exception hierarchy
print("1. Testing exception classes...")
try:
    raise ConfigurationError("Missing env var: GITLAB_BOT_URL")
except GitLabBotError as e:
    print(f"   Caught GitLabBotError: {e}")
    print(f"   Code: {e.code}, Message: {e.message}")

print("\n   OK: Exception classes working\n")

# 2. A merge request with a bad title in a project that requires tickets
print("2. Seeding the mock GitLab...")
client = MockGitLabClient(clock=lambda: FIXED_NOW)
mr = seed_merge_request(
    client,
    create_mock_merge_request(title="fix bug"),
    repo_config="merge_request_title_pattern = '^\\[[A-Z]+-\\d+\\]'\n",
)
client.set_pipelines(1, mr.iid, [create_mock_pipeline(status="running")])
print(f"   MR !{mr.iid}: {mr.title!r}")

bot = Bot(client, clock=lambda: FIXED_NOW)

# 3. First cycle: warning + report
print("\n3. First cycle...")
summary = asyncio.run(bot.process())
print(f"   Outcomes: {summary.counts()}")
for note in client.notes_for(1, mr.iid):
    print(f"   --- note {note.id} ---")
    print("   " + note.body.replace("\n", "\n   "))

# 4. Nothing changed: the MR is skipped without fetching anything
print("\n4. Second cycle (no activity)...")
summary = asyncio.run(bot.process())
print(f"   Outcomes: {summary.counts()}")

# 5. The pipeline fails: the report is updated in place
print("\n5. Pipeline failed...")
client.set_pipelines(1, mr.iid, [create_mock_pipeline(status="failed")])
client.set_jobs(1, 50, [create_mock_job(71, "unit", status="failed")])
client.set_trace(1, 71, "AssertionError: expected 2 widgets, got 1")
client.merge_requests_data[0] = replace(mr, updated_at=mr.updated_at + timedelta(minutes=5))
summary = asyncio.run(bot.process())
print(f"   Outcomes: {summary.counts()}")
print("   " + client.notes_for(1, mr.iid)[0].body.replace("\n", "\n   "))

print("\n=== Done ===")

"""
Pytest plugin for gitlab-bot testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["gitlab_bot.testing.conftest"]
"""

# Re-export all fixtures for pytest auto-discovery
from gitlab_bot.testing.fixtures import (
    bot_user,
    mock_client,
    mock_client_with_merge_request,
    sample_full_merge_request,
    sample_merge_request,
)

__all__ = [
    "mock_client",
    "bot_user",
    "sample_merge_request",
    "sample_full_merge_request",
    "mock_client_with_merge_request",
]

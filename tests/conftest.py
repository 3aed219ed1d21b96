from gitlab_bot.testing.fixtures import (  # noqa: F401
    bot_user,
    mock_client,
    mock_client_with_merge_request,
    sample_full_merge_request,
    sample_merge_request,
)

"""Settings for how the webhook should behave."""

import os


GITHUB_PERSONAL_TOKEN = os.environ.get("GITHUB_PERSONAL_TOKEN", None)

# The commit status context used for the merge gate.
MERGE_STATUS_CONTEXT = os.environ.get("MERGE_STATUS_CONTEXT", "blocker")

# Every bot comment links here for the list of commands the bot understands.
COMMAND_HELP_URL = os.environ.get(
    "COMMAND_HELP_URL",
    "https://github.com/prbot-webhooks/prbot-webhooks/blob/main/docs/commands.md",
)

# Linked from the comment asking for a release note.
RELEASE_NOTE_PROCESS_URL = os.environ.get(
    "RELEASE_NOTE_PROCESS_URL",
    "https://github.com/prbot-webhooks/prbot-webhooks#release-notes-process",
)

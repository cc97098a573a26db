"""Made-up settings to use during tests."""

# These should be in the in-memory form ready to patch into prbot_webhooks.settings

GITHUB_PERSONAL_TOKEN = "github_pat_FooBarBaz"
MERGE_STATUS_CONTEXT = "blocker"
COMMAND_HELP_URL = "https://example.com/prbot/commands.md"
RELEASE_NOTE_PROCESS_URL = "https://example.com/prbot/release-notes.md"

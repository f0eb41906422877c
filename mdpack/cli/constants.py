"""Exit codes shared by CLI commands."""

VALIDATION_EXIT_CODE = 10
RUN_FAILURE_EXIT_CODE = 20
SYSTEM_EXIT_CODE = 30

"""
Exit codes for Worklog CLI.

Semantic exit codes so scripts wrapping the CLI can tell what happened.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Storage could not be read or written
ERROR_STORAGE = 4

# Resource not found
ERROR_NOT_FOUND = 5

# Import file rejected
ERROR_INVALID_DATA = 7


def get_exit_code_name(code: int) -> str:
    """Symbolic name of an exit code, as written to the command log."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_STORAGE: "ERROR_STORAGE",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
        ERROR_INVALID_DATA: "ERROR_INVALID_DATA",
    }
    return code_names.get(code, f"UNKNOWN({code})")

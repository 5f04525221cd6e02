"""
Exit codes for tasktui.

The process exits 0 on a normal quit and non-zero when startup fails.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Database could not be opened, read or written
ERROR_STORAGE = 3

# Resource not found
ERROR_NOT_FOUND = 5

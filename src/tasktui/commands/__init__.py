"""Command-line plumbing for tasktui."""

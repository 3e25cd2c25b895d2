"""Review Gate - post static-analysis findings as code review comments and a vote."""

__version__ = "0.1.0"

"""Worklog CLI - WBS task tracking and time logging from the terminal."""

__version__ = "0.3.0"

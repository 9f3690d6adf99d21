"""Command modules for worklog CLI."""

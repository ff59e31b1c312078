"""Persistence — the CSV codec and the activity log file."""

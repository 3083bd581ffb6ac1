"""Daybook reminders: local task notifications for the day's schedule."""

__version__ = "0.1.0"

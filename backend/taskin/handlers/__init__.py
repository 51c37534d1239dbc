"""
Command and query handlers.

Importing this package registers every handler with the mediator.
"""

from taskin.handlers import pomodoros, projects, tasks

__all__ = ["pomodoros", "projects", "tasks"]

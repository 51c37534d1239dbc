"""
Taskin - projects, tasks and pomodoro sessions behind a REST API.
"""

__version__ = "0.1.0"

from taskin.routes import pomodoros, projects, tasks

__all__ = ["pomodoros", "projects", "tasks"]

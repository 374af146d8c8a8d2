"""VitaTasks: terminal client for a personal task manager with reminders."""

__version__ = "0.1.0"

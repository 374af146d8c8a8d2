"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Reminder, ReminderState, TaskHistory)
- timestamps.py: wire timestamp parsing and local <-> UTC conversion
- reminders.py: reminder due-state engine
- history.py: completed-task grouping by day
- task_scheduler.py: periodic reminder monitor (recompute + refetch jobs)
- task_api.py: small high-level task actions used by the commands
"""

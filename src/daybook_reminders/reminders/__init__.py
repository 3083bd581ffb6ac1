"""
Reminder subsystem.

Components:
- models.py: data structures (Task, ReminderTrigger, ScheduleReport, ...)
- errors.py: non-fatal reminder error kinds
- triggers.py: per-task trigger computation (-10 / -1 / +5 minutes)
- scheduler.py: ReminderScheduler (schedule_all / cancel_all / cancel_one)
- refresh.py: polling loop that keeps reminders in sync with today's tasks
"""

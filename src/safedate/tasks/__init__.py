"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskDraft, TaskStatus)
- task_codec.py: JSON records for the persisted collection
- task_store.py: in-memory collection, lifecycle operations, load/persist
"""

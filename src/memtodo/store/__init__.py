"""
Record store subsystem.

Components:
- models.py: User, Task, NewTask, TaskPatch, Priority
- record_store.py: in-memory RecordStore (single source of truth)
- persistence.py: snapshot persistence over key-value storage
"""

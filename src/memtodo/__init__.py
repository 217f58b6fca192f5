"""
memtodo: a personal todo manager over an in-memory record store.

Components:
- store/: data model, RecordStore and its durable key-value mirror
- providers/: DataProvider (task CRUD) and AuthProvider (session lifecycle)
- cli/ + connectors/: console front end driving the providers
"""

__version__ = "0.1.0"

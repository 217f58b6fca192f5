"""
Provider adaptors consumed by front ends.

Components:
- types.py: filter/sort/pagination inputs and result objects
- data_provider.py: resource CRUD over tasks, scoped to the signed-in user
- auth_provider.py: login/logout/register/check over the session pointer
- dashboard.py: summary counts for the signed-in user's tasks
"""

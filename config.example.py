# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "MEMTODO_APP_NAME": "App display name (default: memtodo).",
    "MEMTODO_LOG_LEVEL": "Console logging level (default: WARNING). The log file always gets DEBUG.",
    # Paths (gitignored)
    "MEMTODO_DATA_DIR": "Local data directory (default: .local/memtodo).",
    "MEMTODO_STORAGE_PATH": "JSON key-value storage file (default: <data_dir>/storage.json).",
    # Persistence
    "MEMTODO_PERSIST": "Mirror the store to STORAGE_PATH (true/false, default: true).",
    # Auth redirects
    "MEMTODO_LOGIN_REDIRECT": "Redirect target after login/register (default: /dashboard).",
    "MEMTODO_LOGOUT_REDIRECT": "Redirect target after logout / failed check (default: /login).",
    # Console
    "MEMTODO_PAGE_SIZE": "Default page size for /list (default: 10).",
}

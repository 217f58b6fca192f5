"""Shared core pieces: error types, ports (Protocols) and application state."""

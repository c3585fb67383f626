"""Adapters binding the core to SQLite, HTTP and the filesystem."""

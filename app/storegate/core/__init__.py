"""Whitelist synchronization and resolution engine."""

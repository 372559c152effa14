"""storegate - remote app whitelist synchronization and resolution."""

__version__ = "0.3.0"

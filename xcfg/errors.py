"""Error taxonomy for the config store."""

from __future__ import annotations


class ConfigStoreError(Exception):
    """Base class for every error raised by :mod:`xcfg`."""


class InvalidKeyError(ConfigStoreError, ValueError):
    """A key was missing, empty or not a string."""

    def __init__(self, method: str, key: object = None) -> None:
        super().__init__(f"ConfigStore {method}() key must be a non-empty string")
        self.method = method
        self.key = key


class InitializationError(ConfigStoreError):
    """The config directory or file could not be created."""


class PersistenceError(ConfigStoreError):
    """Saving or loading the config file failed."""


__all__ = ["ConfigStoreError", "InvalidKeyError", "InitializationError", "PersistenceError"]

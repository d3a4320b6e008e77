"""Minimal per-application JSON config store.

Each application gets a single JSON file under the user's home folder
(``~/.config/<id>/config.json`` by default). Values live in memory and are
only written when explicitly saved.
"""

from .errors import ConfigStoreError, InitializationError, InvalidKeyError, PersistenceError
from .fs import FileSystem, LocalFileSystem
from .options import ConfigOptions, sanitize_identifier
from .store import MISSING, ConfigStore

__version__ = "0.1.0"

__all__ = [
    "ConfigOptions",
    "ConfigStore",
    "ConfigStoreError",
    "FileSystem",
    "InitializationError",
    "InvalidKeyError",
    "LocalFileSystem",
    "MISSING",
    "PersistenceError",
    "sanitize_identifier",
]

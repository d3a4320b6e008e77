from __future__ import annotations

import json
import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union

from .errors import InitializationError, InvalidKeyError, PersistenceError
from .fs import FileSystem, LocalFileSystem
from .options import ConfigOptions, sanitize_identifier

log = logging.getLogger(__name__)

SaveCallback = Callable[[Optional[BaseException]], None]


class _Missing:
    """Type of :data:`MISSING`."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


# Returned by ConfigStore.get() for keys that were never set (distinct from None).
MISSING: Any = _Missing()


def _check_key(method: str, key: object) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(method, key)


class ConfigStore:
    """Per-application JSON config file under ``~/<confdir>/<id>/``.

    Construction creates the directory tree and an empty config file if they
    are missing, but it does **not** read the file: the in-memory data always
    starts empty. Changes stay in memory until :meth:`save` is called (or a
    mutator is called with ``should_save=True``). Use :meth:`load` to read a
    previously saved file back explicitly.

    Saves run on a background thread and report completion through the
    returned :class:`concurrent.futures.Future` and an optional callback.
    Overlapping saves are not ordered; whichever write finishes last wins.
    Pending saves keep the interpreter alive until their write has finished.
    """

    def __init__(
        self,
        identifier: str,
        options: Union[ConfigOptions, Mapping[str, Any], None] = None,
        fs: Optional[FileSystem] = None,
    ) -> None:
        if not isinstance(identifier, str) or not identifier:
            raise InitializationError("ConfigStore identifier must be a non-empty string")

        if options is None:
            options = ConfigOptions()
        elif not isinstance(options, ConfigOptions):
            options = ConfigOptions.from_dict(options)

        self._id = sanitize_identifier(identifier)
        self._options = options
        self._fs = fs if fs is not None else LocalFileSystem()

        try:
            self._directory = self._fs.home() / options.confdir / self._id
            self._path = self._directory / options.filename
            self._fs.ensure_dir(self._directory, options.dir_mode)
            if not self._fs.exists(self._path):
                self._fs.create_file(self._path, options.file_mode)
        except (OSError, RuntimeError) as e:
            raise InitializationError(f"There was a problem creating the config file for '{self._id}': {e}") from e

        self._data: Dict[str, Any] = {}
        log.debug("Config store '%s' ready at %s", self._id, self._path)

    # Accessors -----------------------------------------------------------
    def id(self) -> str:
        """Sanitized identifier used as the config directory name."""
        return self._id

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def path(self) -> Path:
        return self._path

    @property
    def minify(self) -> bool:
        return self._options.minify

    @property
    def file_mode(self) -> int:
        return self._options.file_mode

    @property
    def dir_mode(self) -> int:
        return self._options.dir_mode

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    # In-memory operations ------------------------------------------------
    def get(self, key: str, default: Any = MISSING) -> Any:
        """Return the value stored at ``key`` or ``default`` (:data:`MISSING`)."""
        _check_key("get", key)
        return self._data.get(key, default)

    def set(
        self,
        key: str,
        value: Any = "",
        should_save: bool = False,
        callback: Optional[SaveCallback] = None,
    ) -> Optional["Future[Path]"]:
        """Store ``value`` at ``key``; save to disk as well if ``should_save``.

        Returns the save future when a save was triggered, otherwise ``None``.
        """
        _check_key("set", key)
        self._data[key] = value
        if should_save:
            return self.save(callback)
        return None

    def delete(
        self,
        key: str,
        should_save: bool = False,
        callback: Optional[SaveCallback] = None,
    ) -> Optional["Future[Path]"]:
        """Remove ``key`` (no-op if it is not set); save if ``should_save``."""
        _check_key("delete", key)
        self._data.pop(key, None)
        if should_save:
            return self.save(callback)
        return None

    def delete_all(
        self,
        should_save: bool = False,
        callback: Optional[SaveCallback] = None,
    ) -> Optional["Future[Path]"]:
        self._data = {}
        if should_save:
            return self.save(callback)
        return None

    # Persistence ---------------------------------------------------------
    def to_json(self) -> str:
        """Serialize the current data exactly as :meth:`save` writes it."""
        try:
            if self._options.minify:
                return json.dumps(self._data, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
            return json.dumps(self._data, indent=2, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Config data for '{self._id}' is not JSON serializable: {e}") from e

    def save(self, callback: Optional[SaveCallback] = None) -> "Future[Path]":
        """Write the current data to :attr:`path` in the background.

        The data is serialized before this returns, so later mutations do not
        affect the pending write. The returned future resolves to the file
        path, or fails with :class:`PersistenceError`. ``callback`` (if given)
        is called with ``None`` on success or the error on failure.
        """

        text = self.to_json()
        path = self._path
        mode = self._options.file_mode

        future: "Future[Path]" = Future()
        # No cancellation: the write is considered in flight from here on.
        future.set_running_or_notify_cancel()
        if callback is not None:
            future.add_done_callback(lambda f: callback(f.exception()))

        def _worker() -> None:
            try:
                self._fs.write_text(path, text, mode)
            except Exception as e:
                log.warning("Saving config %s failed: %s", path, e)
                err = PersistenceError(f"There was a problem writing {path}: {e}")
                err.__cause__ = e
                future.set_exception(err)
            else:
                log.debug("Saved config %s (%d bytes)", path, len(text))
                future.set_result(path)

        log.debug("Scheduling save of %s", path)
        threading.Thread(target=_worker, name=f"xcfg-save-{self._id}", daemon=False).start()
        return future

    def load(self) -> Dict[str, Any]:
        """Replace the in-memory data with the contents of :attr:`path`.

        This is the only way data is ever read from disk. An empty file loads
        as ``{}``. On failure the in-memory data is left untouched.
        """

        try:
            raw = self._fs.read_text(self._path)
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"There was a problem reading {self._path}: {e}") from e

        if not raw.strip():
            data: Any = {}
        else:
            try:
                data = json.loads(raw)
            except ValueError as e:
                raise PersistenceError(f"{self._path} does not contain valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"{self._path} root is not a JSON object")

        self._data = data
        log.debug("Loaded %d key(s) from %s", len(data), self._path)
        return dict(data)

    def __repr__(self) -> str:
        return f"ConfigStore(id={self._id!r}, path={str(self._path)!r})"


__all__ = ["ConfigStore", "MISSING", "SaveCallback"]

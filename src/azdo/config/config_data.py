"""
In-memory representation of the azdo configuration files.

The general settings (``config.yml``) and the per-organization settings
(``organizations.yml``) are loaded into one logical tree: the
organizations document is attached to the general document under the
reserved ``organizations`` key. Writing splits them again and persists
only the documents that were modified since they were read.
"""

import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from azdo.config import paths
from azdo.config.errors import InvalidConfigFileError, KeyNotFoundError
from azdo.config.options import DEFAULT_GENERAL_ENTRIES, default_for
from azdo.config.yamlmap import (
    InvalidFormatError,
    InvalidYamlError,
    YamlKeyNotFoundError,
    YamlMap,
)
from azdo.constants import CONFIG_DIR_MODE, CONFIG_FILE_MODE, ORGANIZATIONS_KEY


class ConfigData:
    """
    Nested key/value store where each key maps to a string or another map.

    All operations take a sequence of keys so that nested entries can be
    addressed, e.g. ``["organizations", "myorg", "url"]``.
    """

    def __init__(
        self,
        entries: YamlMap,
        general_path: Optional[Path] = None,
        organizations_path: Optional[Path] = None,
    ):
        self._entries = entries
        self._general_path = general_path
        self._organizations_path = organizations_path
        self._lock = threading.RLock()

    @classmethod
    def from_string(cls, text: str) -> "ConfigData":
        """Build a ConfigData from a YAML string, without backing files"""
        try:
            entries = YamlMap.unmarshal(text)
        except (InvalidYamlError, InvalidFormatError):
            entries = YamlMap.map_value()
        return cls(entries)

    @property
    def general_path(self) -> Path:
        return self._general_path or paths.general_config_file()

    @property
    def organizations_path(self) -> Path:
        return self._organizations_path or paths.organizations_config_file()

    def _descend(self, keys: Sequence[str]) -> YamlMap:
        node = self._entries
        for key in keys:
            try:
                node = node.find_entry(key)
            except YamlKeyNotFoundError:
                raise KeyNotFoundError(key) from None
        return node

    def get(self, keys: Sequence[str]) -> str:
        """
        Get a string value.

        Returns an empty string if the keys address a map.

        Raises:
            KeyNotFoundError: At the first key that does not exist
        """
        with self._lock:
            return self._descend(keys).value

    def get_or_default(self, keys: Sequence[str]) -> str:
        """Get a string value, falling back to the default for the last key"""
        with self._lock:
            try:
                return self._descend(keys).value
            except KeyNotFoundError:
                return default_for(keys[-1]) if keys else ""

    def keys(self, keys: Sequence[str]) -> List[str]:
        """
        Enumerate the child keys of the map at ``keys``.

        Raises:
            KeyNotFoundError: At the first key that does not exist
        """
        with self._lock:
            return self._descend(keys).keys()

    def set(self, keys: Sequence[str], value: str) -> None:
        """Set a string value, creating missing intermediate maps"""
        if not keys:
            raise ValueError("at least one key is required")

        with self._lock:
            node = self._entries
            for key in keys[:-1]:
                try:
                    entry = node.find_entry(key)
                except YamlKeyNotFoundError:
                    entry = None
                if entry is None or not entry.is_map():
                    entry = YamlMap.map_value()
                    node.set_entry(key, entry)
                entry.set_modified()
                node = entry
            node.set_entry(keys[-1], YamlMap.string_value(value))

    def remove(self, keys: Sequence[str]) -> None:
        """
        Remove an entry and everything nested under it.

        Raises:
            KeyNotFoundError: If any of the keys does not exist
        """
        if not keys:
            raise ValueError("at least one key is required")

        with self._lock:
            parent = self._descend(keys[:-1])
            try:
                parent.remove_entry(keys[-1])
            except YamlKeyNotFoundError:
                raise KeyNotFoundError(keys[-1]) from None

    def is_modified(self) -> bool:
        with self._lock:
            return self._entries.is_modified()

    @contextmanager
    def _detached(self, key: str) -> Iterator[Optional[YamlMap]]:
        subtree = self._entries.detach(key)
        try:
            yield subtree
        finally:
            if subtree is not None:
                self._entries.attach(key, subtree)

    def write(self) -> None:
        """
        Persist the files that were modified since they were read.

        The organizations subtree is written to its own file, then detached
        while the general settings are written, and attached again afterwards
        even if writing fails.
        """
        with self._lock:
            try:
                organizations = self._entries.find_entry(ORGANIZATIONS_KEY)
            except YamlKeyNotFoundError:
                organizations = None

            if organizations is not None and organizations.is_modified():
                write_file(self.organizations_path, str(organizations))
                organizations.set_unmodified()

            with self._detached(ORGANIZATIONS_KEY):
                if self._entries.is_modified():
                    write_file(self.general_path, str(self._entries))
                    self._entries.set_unmodified()


def _map_from_file(path: Path) -> Optional[YamlMap]:
    try:
        data = path.read_bytes()
    except FileNotFoundError:
        return None
    try:
        return YamlMap.unmarshal(data)
    except (InvalidYamlError, InvalidFormatError) as e:
        raise InvalidConfigFileError(path, e) from e


def load(general_path: Path, organizations_path: Path) -> ConfigData:
    """
    Load both configuration files into one ConfigData.

    A missing or empty general file is replaced by the built-in defaults.

    Raises:
        InvalidConfigFileError: If a file exists but cannot be parsed
        OSError: If a file exists but cannot be read
    """
    general = _map_from_file(general_path)
    if general is None or general.empty():
        general = YamlMap.unmarshal(DEFAULT_GENERAL_ENTRIES)

    organizations = _map_from_file(organizations_path)
    if organizations is not None and not organizations.empty():
        general.attach(ORGANIZATIONS_KEY, organizations)

    return ConfigData(general, general_path, organizations_path)


def write_file(path: Path, data: str) -> None:
    """Write ``data`` to ``path`` with owner-only permissions"""
    os.makedirs(path.parent, mode=CONFIG_DIR_MODE, exist_ok=True)
    fd = os.open(path, os.O_RDWR | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(data)


_instance: Optional[ConfigData] = None
_load_error: Optional[BaseException] = None
_loaded = False
_read_lock = threading.Lock()


def read() -> ConfigData:
    """
    Load the configuration files once per process.

    The first call pays the cost and any load error; later calls get the
    cached instance or raise the cached error again.
    """
    global _instance, _load_error, _loaded

    with _read_lock:
        if not _loaded:
            try:
                _instance = load(
                    paths.general_config_file(), paths.organizations_config_file()
                )
            except Exception as e:
                _load_error = e
            _loaded = True

    if _load_error is not None:
        raise _load_error
    return _instance


def reset() -> None:
    """Forget the cached configuration so the next read() loads again"""
    global _instance, _load_error, _loaded

    with _read_lock:
        _instance = None
        _load_error = None
        _loaded = False

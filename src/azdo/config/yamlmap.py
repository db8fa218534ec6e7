"""
Ordered, nested YAML mapping with modification tracking.

``YamlMap`` wraps the round-trip node tree produced by ruamel.yaml so that
comments, key order and formatting survive a read-modify-write cycle. Each
wrapper remembers whether it (or anything below it) changed since it was
loaded, which lets the configuration layer rewrite only the files that
actually changed.
"""

import io
from typing import Any, Dict, List, Optional, Union

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarbool import ScalarBoolean


class YamlMapError(Exception):
    """Base class for YAML map errors"""


class InvalidYamlError(YamlMapError):
    """The document is not valid YAML."""


class InvalidFormatError(YamlMapError):
    """The document is valid YAML but its top level is not a mapping."""


class YamlKeyNotFoundError(YamlMapError):
    """A key is not present in the mapping."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"key not found: {key}")


def _new_yaml() -> YAML:
    yaml = YAML(typ="rt")
    yaml.preserve_quotes = True
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


class YamlMap:
    """A node of a YAML document: either a mapping or a leaf value."""

    def __init__(self, node: Any = None):
        self._node = node
        self._children: Dict[str, "YamlMap"] = {}
        self._modified = False

    @classmethod
    def string_value(cls, value: str) -> "YamlMap":
        """Create a leaf node holding ``value``"""
        return cls(str(value))

    @classmethod
    def map_value(cls) -> "YamlMap":
        """Create an empty mapping node"""
        return cls(CommentedMap())

    @classmethod
    def unmarshal(cls, data: Union[bytes, str]) -> "YamlMap":
        """
        Parse a YAML document into a YamlMap.

        Args:
            data: Raw document contents

        Returns:
            YamlMap: The root mapping (empty for an empty document)

        Raises:
            InvalidYamlError: If the document cannot be parsed
            InvalidFormatError: If the top level is not a mapping
        """
        if isinstance(data, bytes):
            data = data.decode("utf-8")

        try:
            node = _new_yaml().load(data)
        except YAMLError as e:
            raise InvalidYamlError(str(e)) from e

        if node is None:
            return cls.map_value()
        if not isinstance(node, CommentedMap):
            raise InvalidFormatError(
                f"expected a mapping at the top level, got {type(node).__name__}"
            )
        return cls(node)

    def is_map(self) -> bool:
        return isinstance(self._node, CommentedMap)

    @property
    def value(self) -> str:
        """Leaf value as a string; empty for mappings and null leaves"""
        node = self._node
        if node is None or self.is_map():
            return ""
        if isinstance(node, (bool, ScalarBoolean)):
            return "true" if node else "false"
        if isinstance(node, (list, dict)):
            return ""
        return str(node)

    def empty(self) -> bool:
        if self.is_map():
            return len(self._node) == 0
        return self.value == ""

    def keys(self) -> List[str]:
        if not self.is_map():
            return []
        return [str(key) for key in self._node]

    def find_entry(self, key: str) -> "YamlMap":
        """
        Return the child node stored under ``key``.

        Raises:
            YamlKeyNotFoundError: If this node is not a mapping or has no such key
        """
        if not self.is_map() or key not in self._node:
            raise YamlKeyNotFoundError(key)

        child = self._children.get(key)
        if child is None:
            child = YamlMap(self._node[key])
            self._children[key] = child
        return child

    def set_entry(self, key: str, value: "YamlMap") -> None:
        """Replace the value of ``key`` in place, or append it if absent"""
        self._put(key, value)
        self._modified = True

    def add_entry(self, key: str, value: "YamlMap") -> None:
        """Append ``key`` with ``value``; an existing key keeps its position"""
        self.set_entry(key, value)

    def remove_entry(self, key: str) -> None:
        """
        Remove ``key`` and everything nested below it.

        Raises:
            YamlKeyNotFoundError: If the key is absent
        """
        self._pop(key)
        self._modified = True

    def attach(self, key: str, value: "YamlMap") -> None:
        """Add ``key`` without marking this node modified"""
        self._put(key, value)

    def detach(self, key: str) -> Optional["YamlMap"]:
        """Remove and return ``key`` without marking this node modified"""
        try:
            child = self.find_entry(key)
        except YamlKeyNotFoundError:
            return None
        self._pop(key)
        return child

    def is_modified(self) -> bool:
        """True if this node or any loaded descendant changed"""
        if self._modified:
            return True
        return any(child.is_modified() for child in self._children.values())

    def set_modified(self) -> None:
        self._modified = True

    def set_unmodified(self) -> None:
        self._modified = False
        for child in self._children.values():
            child.set_unmodified()

    def _put(self, key: str, value: "YamlMap") -> None:
        if not self.is_map():
            raise InvalidFormatError(f"cannot add key {key} to a non-mapping node")
        self._node[key] = value._node
        self._children[key] = value

    def _pop(self, key: str) -> None:
        if not self.is_map() or key not in self._node:
            raise YamlKeyNotFoundError(key)
        del self._node[key]
        self._children.pop(key, None)

    def __str__(self) -> str:
        if not self.is_map():
            return self.value
        if not self._node:
            return ""
        stream = io.StringIO()
        _new_yaml().dump(self._node, stream)
        return stream.getvalue()

    def __repr__(self) -> str:
        if self.is_map():
            return f"YamlMap(keys={self.keys()!r})"
        return f"YamlMap(value={self.value!r})"

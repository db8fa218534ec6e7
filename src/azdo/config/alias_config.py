"""
Command aliases stored under the ``aliases`` key of the general config.
"""

from typing import TYPE_CHECKING, Dict

from azdo.config.errors import KeyNotFoundError
from azdo.constants import ALIASES_KEY

if TYPE_CHECKING:
    from azdo.config.config import Config


class AliasConfig:
    def __init__(self, cfg: "Config"):
        self.cfg = cfg

    def get(self, alias: str) -> str:
        """
        Get the expansion of an alias.

        Raises:
            KeyNotFoundError: If the alias is not defined
        """
        return self.cfg.get([ALIASES_KEY, alias])

    def add(self, alias: str, expansion: str) -> None:
        self.cfg.set([ALIASES_KEY, alias], expansion)

    def delete(self, alias: str) -> None:
        """
        Remove an alias.

        Raises:
            KeyNotFoundError: If the alias is not defined
        """
        self.cfg.remove([ALIASES_KEY, alias])

    def all(self) -> Dict[str, str]:
        """All aliases with their expansions, in file order"""
        try:
            keys = self.cfg.keys([ALIASES_KEY])
        except KeyNotFoundError:
            return {}
        return {key: self.cfg.get([ALIASES_KEY, key]) for key in keys}

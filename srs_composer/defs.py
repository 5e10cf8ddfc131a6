"""
Registry of named SRS definitions (e.g. 'EPSG:4326').

Built-in definitions come from defs.yaml; callers can register more.
"""

from typing import Any, Dict, Mapping, Optional, Union
import copy
import logging

from .proj_string import parse_proj_string
from .tables import definitions_table

logger = logging.getLogger(__name__)


class DefinitionRegistry:
    """
    Named definitions, stored parsed.

    Args:
        load_builtins: Register the definitions and aliases from defs.yaml
    """

    def __init__(self, load_builtins: bool = True):
        self._defs: Dict[str, Dict[str, Any]] = {}
        if load_builtins:
            table = definitions_table()
            for name, definition in table['definitions'].items():
                self.register(name, definition)
            for alias, target in table['aliases'].items():
                self._defs[alias] = self._defs[target]

    def register(self, name: str, definition: Union[str, Mapping[str, Any]]):
        """
        Register a definition under name.

        Args:
            name: Code callers will resolve (e.g., 'EPSG:27700')
            definition: '+proj=...' string or an already-normalized mapping
        """
        if isinstance(definition, str):
            parsed = parse_proj_string(definition)
        else:
            parsed = dict(definition)
        parsed.setdefault('srs_code', name)
        self._defs[name] = parsed
        logger.debug("Registered definition '%s'", name)

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the definition registered under name, or None."""
        definition = self._defs.get(name)
        return copy.deepcopy(definition) if definition is not None else None

    def __contains__(self, name: str) -> bool:
        return name in self._defs


# Default registry shared by all parsers
DEFS = DefinitionRegistry()

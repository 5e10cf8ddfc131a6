"""
Definition parser: raw SRS input -> normalized definition mapping.
"""

from typing import Any, Dict, Mapping, Optional
import logging

from .defs import DEFS, DefinitionRegistry
from .proj_string import parse_proj_string

logger = logging.getLogger(__name__)

WKT_KEYWORDS = ('PROJCS', 'GEOGCS', 'GEOCCS', 'LOCAL_CS', 'PROJCRS', 'GEOGCRS', 'GEODCRS')


class DefinitionParser:
    """
    Turns an SRS code, a parameter string or a definition mapping into a
    normalized definition.

    Args:
        definitions: Named definition registry (default: DEFS)
    """

    def __init__(self, definitions: Optional[DefinitionRegistry] = None):
        self.definitions = definitions if definitions is not None else DEFS

    def parse(self, srs_input: Any) -> Optional[Dict[str, Any]]:
        """
        Parse srs_input.

        Returns:
            A fresh mapping the caller may modify, or None when the input
            cannot be understood (unknown code, WKT, malformed parameters,
            mapping without a projection name)
        """
        if isinstance(srs_input, str):
            return self._parse_string(srs_input)

        if isinstance(srs_input, Mapping):
            if 'projName' in srs_input or 'proj_name' in srs_input:
                return dict(srs_input)
            logger.debug("Definition mapping has no projection name")
            return None

        return None

    def _parse_string(self, code: str) -> Optional[Dict[str, Any]]:
        if code in self.definitions:
            return self.definitions.get(code)

        if code.startswith('+'):
            try:
                return parse_proj_string(code)
            except ValueError as e:
                logger.debug("Malformed parameter string %r: %s", code, e)
                return None

        if code.lstrip().upper().startswith(WKT_KEYWORDS):
            logger.debug("WKT definitions are not supported: %r", code[:40])
        return None

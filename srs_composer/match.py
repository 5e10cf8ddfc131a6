"""
Fuzzy key lookup for the reference tables.
"""

import re
from typing import Any, Mapping, Optional

# Characters ignored when comparing table keys
IGNORED_CHARS = re.compile(r"[\s_\-/()]")


def _normalize_key(key: str) -> str:
    return IGNORED_CHARS.sub('', key.lower())


def match(table: Mapping[str, Any], key: Optional[str]) -> Optional[Any]:
    """
    Look up key in table, exact first, then ignoring case and separators.

    Args:
        table: Mapping of codes to records
        key: Code to look up (e.g., 'WGS84', 'nad_83')

    Returns:
        The matching record, or None if no key matches

    Example:
        >>> match({'nad83': 1}, 'NAD 83')
        1
    """
    if not key:
        return None
    if key in table:
        return table[key]

    wanted = _normalize_key(key)
    for table_key, value in table.items():
        if _normalize_key(table_key) == wanted:
            return value
    return None

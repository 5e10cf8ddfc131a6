"""
Static reference tables.

The datum, ellipsoid, unit, prime meridian and named-definition tables are
YAML files shipped beside this module. Each is read once on first use and
cached for the life of the process; callers must treat the returned dicts as
read-only.
"""

from pathlib import Path
from typing import Any, Dict
import yaml

from .core import DatumRecord

# Cache for loaded YAML tables, keyed by file name
_TABLE_CACHE: Dict[str, Dict[str, Any]] = {}


def _load_table(yaml_filename: str) -> Dict[str, Any]:
    """
    Load a table file from the package directory.

    Args:
        yaml_filename: Name of the YAML file (e.g., 'datums.yaml')

    Returns:
        Parsed YAML content, or an empty dict for an empty file
    """
    if yaml_filename in _TABLE_CACHE:
        return _TABLE_CACHE[yaml_filename]

    yaml_path = Path(__file__).parent / yaml_filename
    with open(yaml_path, 'r') as f:
        content = yaml.safe_load(f) or {}

    _TABLE_CACHE[yaml_filename] = content
    return content


def datum_table() -> Dict[str, DatumRecord]:
    """Datum code -> DatumRecord."""
    raw = _load_table('datums.yaml').get('datums', {})
    return {code: DatumRecord(**entry) for code, entry in raw.items()}


def ellipsoid_table() -> Dict[str, Dict[str, Any]]:
    """Ellipsoid key -> {'a', 'b' or 'rf', 'name'}."""
    return _load_table('ellipsoids.yaml').get('ellipsoids', {})


def units_table() -> Dict[str, float]:
    return _load_table('units.yaml').get('units', {})


def prime_meridian_table() -> Dict[str, float]:
    return _load_table('prime_meridians.yaml').get('prime_meridians', {})


def definitions_table() -> Dict[str, Dict[str, str]]:
    """Built-in named definitions plus their aliases."""
    content = _load_table('defs.yaml')
    return {
        'definitions': content.get('definitions', {}),
        'aliases': content.get('aliases', {}),
    }

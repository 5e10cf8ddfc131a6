"""
Parser for "+proj=..." parameter strings.
"""

from typing import Any, Callable, Dict

from .core import D2R
from .match import match
from .tables import prime_meridian_table, units_table

LEGAL_AXIS = "ewnsud"

# Parameter name -> output field, for values kept as strings
RENAMED = {
    'proj': 'proj_name',
    'datum': 'datum_code',
    'ellps': 'ellps',
    'title': 'title',
}


def _split_params(text: str) -> Dict[str, Any]:
    params = {}
    for part in text.split('+'):
        part = part.strip()
        if not part:
            continue
        key, sep, value = part.partition('=')
        params[key.lower()] = value if sep else True
    return params


def _require_value(name: str, value: Any) -> str:
    # Bare flags arrive as True
    if value is True:
        raise ValueError(f"parameter '{name}' needs a value")
    return value


def _angle(name: str) -> Callable[[Dict[str, Any], Any], None]:
    def setter(out, value):
        out[name] = float(_require_value(name, value)) * D2R
    return setter


def _number(name: str) -> Callable[[Dict[str, Any], Any], None]:
    def setter(out, value):
        out[name] = float(_require_value(name, value))
    return setter


def _flag(name: str) -> Callable[[Dict[str, Any], Any], None]:
    def setter(out, value):
        out[name] = True
    return setter


def _radius(out, value):
    out['a'] = out['b'] = float(_require_value('R', value))


def _zone(out, value):
    out['zone'] = int(_require_value('zone', value))


def _towgs84(out, value):
    out['datum_params'] = [float(v) for v in _require_value('towgs84', value).split(',')]


def _units(out, value):
    out['units'] = _require_value('units', value)
    to_meter = match(units_table(), value)
    if to_meter is not None:
        out['to_meter'] = to_meter


def _prime_meridian(out, value):
    pm = match(prime_meridian_table(), _require_value('pm', value))
    out['from_greenwich'] = (pm if pm is not None else float(value)) * D2R


def _nadgrids(out, value):
    if _require_value('nadgrids', value) == '@null':
        out['datum_code'] = 'none'
    else:
        out['nadgrids'] = value


def _axis(out, value):
    value = _require_value('axis', value)
    if len(value) == 3 and all(c in LEGAL_AXIS for c in value):
        out['axis'] = value


HANDLERS = {
    'rf': _number('rf'),
    'a': _number('a'),
    'b': _number('b'),
    'r': _radius,
    'r_a': _flag('r_a'),
    'lat_0': _angle('lat0'),
    'lat_1': _angle('lat1'),
    'lat_2': _angle('lat2'),
    'lat_ts': _angle('lat_ts'),
    'lon_0': _angle('long0'),
    'lon_1': _angle('long1'),
    'lon_2': _angle('long2'),
    'lonc': _angle('longc'),
    'alpha': _angle('alpha'),
    'gamma': _angle('gamma'),
    'x_0': _number('x0'),
    'y_0': _number('y0'),
    'k_0': _number('k0'),
    'k': _number('k0'),
    'zone': _zone,
    'south': _flag('utm_south'),
    'towgs84': _towgs84,
    'to_meter': _number('to_meter'),
    'units': _units,
    'from_greenwich': _angle('from_greenwich'),
    'pm': _prime_meridian,
    'nadgrids': _nadgrids,
    'axis': _axis,
    'approx': _flag('approx'),
    'over': _flag('over'),
}


def parse_proj_string(text: str) -> Dict[str, Any]:
    """
    Parse a parameter string into a normalized definition mapping.

    Angles are converted from degrees to radians. Parameters without a
    handler are passed through as strings (or True for bare flags).

    Raises:
        ValueError: If a numeric parameter cannot be parsed, or a parameter
            that needs a value is given as a bare flag

    Example:
        >>> parse_proj_string('+proj=merc +lon_0=0 +datum=WGS84')['proj_name']
        'merc'
    """
    out: Dict[str, Any] = {}
    for key, value in _split_params(text).items():
        if key in HANDLERS:
            HANDLERS[key](out, value)
        elif key in RENAMED:
            out[RENAMED[key]] = _require_value(key, value)
        else:
            out[key] = value

    datum_code = out.get('datum_code')
    if isinstance(datum_code, str) and datum_code != 'WGS84':
        out['datum_code'] = datum_code.lower()

    out['proj_str'] = text
    return out

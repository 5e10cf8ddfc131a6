"""
Grid-shift (nadgrid) loading, caching and resolution.

Grids are registered under a key, either from raw NTv2 bytes via nadgrid()
or from a file via load_grid_file(). A nadgrids specification such as
"@null,@conus,ntv2_0.gsb" is resolved against the registry into a list of
GridShiftEntry. A leading '@' marks a grid optional.

NTv2 layout reference:
    overview header 11 records x 16 bytes, then per subgrid an 11 record
    header followed by gridNodeCount records of 4 float32 values
    (latitude shift, longitude shift, latitude accuracy, longitude accuracy)
    in arc-seconds. Longitudes are positive west, so each row of nodes starts
    at the eastern edge. Subgrid extents are converted to east-positive
    radians on read.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union
import logging
import math
import struct
import threading

import numpy as np

from .core import GridShiftError

logger = logging.getLogger(__name__)

HEADER_SIZE = 176
NODE_RECORD_SIZE = 16


@dataclass
class NTv2Subgrid:
    name: str
    parent: str
    ll: List[float]       # lower-left (lon, lat) in radians, east-positive
    delta: List[float]    # node spacing (lon, lat) in radians
    lim: List[int]        # node count (lon, lat)
    count: int
    # (count, 2) shifts (lon, lat) in radians, as stored: rows run south to
    # north, nodes within a row east to west, longitude shift positive west
    cvs: np.ndarray = field(repr=False, compare=False)


@dataclass
class NTv2Grid:
    header: Dict[str, object]
    subgrids: List[NTv2Subgrid]


@dataclass
class GridShiftEntry:
    name: str
    mandatory: bool
    grid: Optional[NTv2Grid] = None
    is_null: bool = False


def _seconds_to_radians(seconds):
    return seconds / 3600.0 * math.pi / 180.0


def _decode_string(data: bytes, start: int, end: int) -> str:
    return data[start:end].decode('ascii', errors='replace').replace('\x00', '').strip()


def _detect_byte_order(data: bytes) -> str:
    # NUM_OREC is always 11
    if struct.unpack_from('>i', data, 8)[0] == 11:
        return '>'
    return '<'


def _read_header(data: bytes, order: str) -> Dict[str, object]:
    return {
        'n_fields': struct.unpack_from(order + 'i', data, 8)[0],
        'n_subgrid_fields': struct.unpack_from(order + 'i', data, 24)[0],
        'n_subgrids': struct.unpack_from(order + 'i', data, 40)[0],
        'shift_type': _decode_string(data, 56, 64),
        'from_semi_major_axis': struct.unpack_from(order + 'd', data, 120)[0],
        'from_semi_minor_axis': struct.unpack_from(order + 'd', data, 136)[0],
        'to_semi_major_axis': struct.unpack_from(order + 'd', data, 152)[0],
        'to_semi_minor_axis': struct.unpack_from(order + 'd', data, 168)[0],
    }


def _read_subgrid(data: bytes, offset: int, order: str) -> NTv2Subgrid:
    lower_lat, upper_lat, lower_lon, upper_lon, lat_interval, lon_interval = (
        struct.unpack_from(order + 'd', data, offset + pos)[0]
        for pos in (72, 88, 104, 120, 136, 152)
    )
    node_count = struct.unpack_from(order + 'i', data, offset + 168)[0]

    nodes = np.frombuffer(
        data, dtype=np.dtype(order + 'f4'), count=node_count * 4, offset=offset + HEADER_SIZE
    ).reshape(node_count, 4)

    return NTv2Subgrid(
        name=_decode_string(data, offset + 8, offset + 16),
        parent=_decode_string(data, offset + 24, offset + 32),
        # West-positive upper longitude is the east-positive western edge
        ll=[-_seconds_to_radians(upper_lon), _seconds_to_radians(lower_lat)],
        delta=[_seconds_to_radians(lon_interval), _seconds_to_radians(lat_interval)],
        lim=[
            int(round(1 + (upper_lon - lower_lon) / lon_interval)),
            int(round(1 + (upper_lat - lower_lat) / lat_interval)),
        ],
        count=node_count,
        cvs=_seconds_to_radians(nodes[:, [1, 0]].astype(np.float64)),
    )


def read_ntv2(data: bytes) -> NTv2Grid:
    """
    Parse an NTv2 grid file held in memory.

    Raises:
        GridShiftError: If the buffer is too short to hold the declared grid
    """
    try:
        order = _detect_byte_order(data)
        header = _read_header(data, order)
        subgrids = []
        offset = HEADER_SIZE
        for _ in range(header['n_subgrids']):
            subgrid = _read_subgrid(data, offset, order)
            subgrids.append(subgrid)
            offset += HEADER_SIZE + subgrid.count * NODE_RECORD_SIZE
    except (struct.error, ValueError) as e:
        raise GridShiftError(f"Could not read NTv2 grid: {e}") from e
    return NTv2Grid(header=header, subgrids=subgrids)


class GridRegistry:
    """Process-wide cache of loaded grids, keyed by grid name."""

    def __init__(self):
        self._grids: Dict[str, NTv2Grid] = {}
        self._lock = threading.Lock()

    def add(self, key: str, data: Union[bytes, NTv2Grid]) -> NTv2Grid:
        grid = data if isinstance(data, NTv2Grid) else read_ntv2(data)
        with self._lock:
            self._grids[key] = grid
        logger.debug("Registered grid '%s' with %d subgrids", key, len(grid.subgrids))
        return grid

    def get(self, key: str) -> Optional[NTv2Grid]:
        return self._grids.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._grids

    def clear(self):
        with self._lock:
            self._grids.clear()


# Default registry shared by all resolutions
GRIDS = GridRegistry()


def nadgrid(key: str, data: Union[bytes, NTv2Grid]) -> NTv2Grid:
    """Load NTv2 bytes (or a parsed grid) into the default registry under key."""
    return GRIDS.add(key, data)


def load_grid_file(key: str, path: Union[str, Path]) -> NTv2Grid:
    """Read an NTv2 file from disk into the default registry under key."""
    with open(path, 'rb') as f:
        return GRIDS.add(key, f.read())


class NadgridResolver:
    """
    Resolves a nadgrids specification into a list of GridShiftEntry.

    Args:
        registry: Grid registry to look grids up in (default: GRIDS)
        strict: If True, a missing mandatory grid raises GridShiftError;
                otherwise it is logged and left with grid=None
    """

    def __init__(self, registry: Optional[GridRegistry] = None, strict: bool = False):
        self.registry = registry if registry is not None else GRIDS
        self.strict = strict

    def resolve(self, nadgrids: Optional[str]) -> Optional[List[GridShiftEntry]]:
        if nadgrids is None:
            return None
        entries = []
        for value in nadgrids.split(','):
            entry = self._parse_entry(value.strip())
            if entry is not None:
                entries.append(entry)
        return entries

    def _parse_entry(self, value: str) -> Optional[GridShiftEntry]:
        if not value:
            return None
        optional = value.startswith('@')
        if optional:
            value = value[1:]
        if value == 'null':
            return GridShiftEntry(name='null', mandatory=not optional, grid=None, is_null=True)

        grid = self.registry.get(value)
        if grid is None and not optional:
            if self.strict:
                raise GridShiftError(f"Required grid shift file not loaded: {value}")
            logger.warning("Required grid shift file '%s' is not loaded", value)
        return GridShiftEntry(name=value, mandatory=not optional, grid=grid, is_null=False)

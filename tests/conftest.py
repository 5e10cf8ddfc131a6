"""
Shared pytest fixtures and utilities for srs_composer tests.

This file is automatically discovered by pytest and makes fixtures available
to all test files in this directory.
"""

import math
import struct

import pytest

from srs_composer import ProjectionComposer
from srs_composer.nadgrid import GridRegistry, NadgridResolver


D2R = math.pi / 180.0

# WGS84 reference values
WGS84_A = 6378137.0
WGS84_RF = 298.257223563
WGS84_B = (1.0 - 1.0 / WGS84_RF) * WGS84_A

# Codes that ship with the library
BUILTIN_CODES = ['EPSG:4326', 'EPSG:4269', 'EPSG:3857', 'WGS84', 'GOOGLE', 'EPSG:900913']


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def composer():
    """Composer using the shared registry and tables."""
    return ProjectionComposer()


@pytest.fixture
def grid_registry():
    """Empty grid registry, isolated from the process-wide one."""
    return GridRegistry()


@pytest.fixture
def grid_composer(grid_registry):
    """Composer that resolves nadgrids against the isolated grid registry."""
    return ProjectionComposer(grid_resolver=NadgridResolver(registry=grid_registry))


@pytest.fixture
def callback_recorder():
    """Callable that records every (error_message, instance) call."""
    return CallbackRecorder()


# ============================================================================
# Utility Functions
# ============================================================================

class CallbackRecorder:
    """Records callback invocations for resolve()."""

    def __init__(self):
        self.calls = []

    def __call__(self, error_message, instance=None):
        self.calls.append((error_message, instance))

    @property
    def error(self):
        return self.calls[0][0]

    @property
    def instance(self):
        return self.calls[0][1]


def resolve_ok(composer, srs_input):
    """
    Resolve srs_input and fail the test with the resolution message if it errors.

    Returns:
        ProjectionInstance
    """
    result = composer.compose(srs_input)
    assert result.ok, f"Resolution of {srs_input!r} failed: {result.error}"
    return result.instance


# Subgrid extent in arc-seconds, longitudes positive west: 45N-46N, 52W-53W
NTV2_EXTENT = {'lower_lat': 162000.0, 'upper_lat': 165600.0, 'lower_lon': 187200.0, 'upper_lon': 190800.0}


def build_ntv2_bytes(order='<', nodes=((1.0, 2.0), (3.0, 4.0), (5.0, 6.0), (7.0, 8.0)), extent=None):
    """
    Build a minimal NTv2 file with one 2x2 subgrid covering one degree.

    Args:
        order: struct byte order ('<' or '>')
        nodes: (latitude shift, longitude shift) per node, in arc-seconds
        extent: lower/upper latitude and longitude in arc-seconds,
                longitudes positive west (default: NTV2_EXTENT)

    Returns:
        bytes of the grid file
    """
    extent = extent or NTV2_EXTENT
    header = bytearray(176)
    struct.pack_into(order + 'i', header, 8, 11)
    struct.pack_into(order + 'i', header, 24, 11)
    struct.pack_into(order + 'i', header, 40, 1)
    header[56:64] = b'SECONDS '
    struct.pack_into(order + 'd', header, 120, 6378206.4)
    struct.pack_into(order + 'd', header, 136, 6356583.8)
    struct.pack_into(order + 'd', header, 152, 6378137.0)
    struct.pack_into(order + 'd', header, 168, 6356752.314)

    subgrid = bytearray(176)
    subgrid[8:16] = b'TESTGRID'
    subgrid[24:32] = b'NONE    '
    for pos, value in ((72, extent['lower_lat']), (88, extent['upper_lat']),
                       (104, extent['lower_lon']), (120, extent['upper_lon']),
                       (136, 3600.0), (152, 3600.0)):
        struct.pack_into(order + 'd', subgrid, pos, value)
    struct.pack_into(order + 'i', subgrid, 168, len(nodes))

    records = b''.join(struct.pack(order + 'ffff', lat, lon, 0.0, 0.0) for lat, lon in nodes)
    return bytes(header) + bytes(subgrid) + records

from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional
from enum import Enum
import logging
import math

logger = logging.getLogger(__name__)

D2R = math.pi / 180.0
HALF_PI = math.pi / 2.0
FORTPI = math.pi / 4.0
TWO_PI = math.pi * 2.0
SPI = 3.14159265359
EPSLN = 1.0e-10
SEC_TO_RAD = 4.84813681109535993589914102357e-6


class SRSResolutionError(ValueError):
    """Base error for a failed resolution; the message is the callback message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnparseableInputError(SRSResolutionError):
    pass


class UnknownProjectionError(SRSResolutionError):
    pass


class GridShiftError(SRSResolutionError):
    pass


class ProjectionInitError(SRSResolutionError):
    pass


class DatumParameterError(SRSResolutionError):
    pass


class DatumType(Enum):
    THREE_PARAM = 1
    SEVEN_PARAM = 2
    GRIDSHIFT = 3
    WGS84 = 4
    NODATUM = 5


@dataclass(frozen=True)
class DatumRecord:
    ellipse: str
    datum_name: Optional[str] = None
    towgs84: Optional[str] = None

    def towgs84_params(self) -> Optional[List[float]]:
        """Parse the comma-separated transform string into numbers."""
        if not self.towgs84:
            return None
        return [float(v) for v in self.towgs84.split(',')]


@dataclass(frozen=True)
class EllipsoidParameters:
    a: float
    b: float
    rf: Optional[float]
    sphere: bool


@dataclass(frozen=True)
class EccentricityParameters:
    es: float
    e: float
    ep2: float


# Input keys accepted in camelCase form (as produced by JSON definitions)
FIELD_ALIASES = {
    'projName': 'proj_name',
    'datumCode': 'datum_code',
    'datumName': 'datum_name',
    'R_A': 'r_a',
    'utmSouth': 'utm_south',
    'srsCode': 'srs_code',
    'projStr': 'proj_str',
}


@dataclass
class ProjectionDefinition:
    """
    Every field a projection method can read from a normalized definition.

    Angles are in radians. Absent values are None; the composer fills
    k0, axis, ellps and lat1 before the definition is merged.
    """
    proj_name: Optional[str] = None
    title: Optional[str] = None
    srs_code: Optional[str] = None
    proj_str: Optional[str] = None

    # datum
    datum_code: Optional[str] = None
    datum_name: Optional[str] = None
    datum_params: Optional[List[float]] = None
    datum: Any = None
    nadgrids: Optional[str] = None

    # ellipsoid
    ellps: Optional[str] = None
    a: Optional[float] = None
    b: Optional[float] = None
    rf: Optional[float] = None
    r_a: Optional[bool] = None
    sphere: Optional[bool] = None

    # projection parameters
    lat0: Optional[float] = None
    lat1: Optional[float] = None
    lat2: Optional[float] = None
    lat_ts: Optional[float] = None
    long0: Optional[float] = None
    long1: Optional[float] = None
    long2: Optional[float] = None
    longc: Optional[float] = None
    alpha: Optional[float] = None
    gamma: Optional[float] = None
    x0: Optional[float] = None
    y0: Optional[float] = None
    k0: Optional[float] = None
    zone: Optional[int] = None
    utm_south: Optional[bool] = None

    # units and axes
    units: Optional[str] = None
    to_meter: Optional[float] = None
    from_greenwich: Optional[float] = None
    axis: Optional[str] = None
    approx: Optional[bool] = None
    over: Optional[bool] = None

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Any]) -> 'ProjectionDefinition':
        """
        Build a definition from a parsed mapping.

        camelCase keys listed in FIELD_ALIASES are renamed; keys that are not
        fields of the definition are dropped.
        """
        known = set(cls.field_names())
        values = {}
        ignored = []
        for key, value in mapping.items():
            name = FIELD_ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                ignored.append(key)
        if ignored:
            logger.debug("Ignoring unrecognized definition fields: %s", sorted(ignored))
        return cls(**values)

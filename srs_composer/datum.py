"""
Datum object factory.

Classifies a datum by its transform parameters and grids and bundles the
ellipsoid constants a datum transformation needs.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .core import SEC_TO_RAD, DatumParameterError, DatumType
from .nadgrid import GridShiftEntry


@dataclass
class DatumObject:
    datum_type: DatumType
    a: float
    b: float
    es: float
    ep2: float
    datum_params: Optional[List[float]] = None
    grids: Optional[List[GridShiftEntry]] = None


def build_datum(datum_code: Optional[str], datum_params: Optional[Sequence],
                a: float, b: float, es: float, ep2: float,
                grids: Optional[List[GridShiftEntry]] = None) -> DatumObject:
    """
    Build the datum attached to a projection instance.

    Args:
        datum_code: Datum code, or None / 'none' for no datum
        datum_params: 3 or 7 Helmert parameters (dx, dy, dz[, rx, ry, rz, s]),
                      rotations in arc-seconds and scale in ppm
        a, b, es, ep2: Derived ellipsoid constants
        grids: Resolved grid-shift entries; any list makes a GRIDSHIFT datum

    Returns:
        DatumObject with rotations converted to radians and scale to a factor

    Raises:
        DatumParameterError: If datum_params does not hold 3 or 7 numbers
    """
    if datum_code is None or datum_code == 'none':
        datum_type = DatumType.NODATUM
    else:
        datum_type = DatumType.WGS84

    params = None
    if datum_params:
        if len(datum_params) not in (3, 7):
            raise DatumParameterError(
                f"Datum parameters must have 3 or 7 values, got {len(datum_params)}: {list(datum_params)}"
            )
        try:
            params = [float(v) for v in datum_params]
        except (TypeError, ValueError) as e:
            raise DatumParameterError(f"Datum parameters must be numbers: {list(datum_params)}") from e
        if params[0] != 0 or params[1] != 0 or params[2] != 0:
            datum_type = DatumType.THREE_PARAM
        if len(params) > 3:
            if params[3] != 0 or params[4] != 0 or params[5] != 0 or params[6] != 0:
                datum_type = DatumType.SEVEN_PARAM
                params[3] *= SEC_TO_RAD
                params[4] *= SEC_TO_RAD
                params[5] *= SEC_TO_RAD
                params[6] = (params[6] / 1000000.0) + 1.0

    if grids is not None:
        datum_type = DatumType.GRIDSHIFT

    return DatumObject(
        datum_type=datum_type,
        a=a,
        b=b,
        es=es,
        ep2=ep2,
        datum_params=params,
        grids=grids,
    )

"""
Shared numeric helpers for projection methods.

All helpers accept scalars or numpy arrays.
"""

import numpy as np

from ..core import EPSLN, HALF_PI, SPI, TWO_PI

PHI2Z_MAX_ITER = 15


def adjust_lon(x, skip_adjust: bool = False):
    """Wrap a longitude into [-pi, pi] unless skip_adjust (+over) is set."""
    if skip_adjust:
        return x
    return np.where(np.abs(x) <= SPI, x, x - np.sign(x) * TWO_PI)


def adjust_lat(x):
    return np.where(np.abs(x) < HALF_PI, x, x - np.sign(x) * np.pi)


def msfnz(eccent, sinphi, cosphi):
    con = eccent * sinphi
    return cosphi / np.sqrt(1.0 - con * con)


def tsfnz(eccent, phi, sinphi):
    con = eccent * sinphi
    com = 0.5 * eccent
    con = np.power((1.0 - con) / (1.0 + con), com)
    return np.tan(0.5 * (HALF_PI - phi)) / con


def phi2z(eccent, ts):
    """
    Latitude from the isometric function ts by fixed-point iteration.

    Points that do not converge are returned as NaN.
    """
    ts = np.asarray(ts, dtype=np.float64)
    eccnth = 0.5 * eccent
    phi = HALF_PI - 2.0 * np.arctan(ts)
    converged = np.zeros(ts.shape, dtype=bool)
    for _ in range(PHI2Z_MAX_ITER + 1):
        con = eccent * np.sin(phi)
        dphi = HALF_PI - 2.0 * np.arctan(ts * np.power((1.0 - con) / (1.0 + con), eccnth)) - phi
        phi = np.where(converged, phi, phi + dphi)
        converged |= np.abs(dphi) <= EPSLN
        if converged.all():
            break
    return np.where(converged, phi, np.nan)


def as_output(x, y):
    """Return floats for scalar input, arrays otherwise."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if x.ndim == 0 and y.ndim == 0:
        return float(x), float(y)
    return x, y

"""
Ellipsoid and eccentricity derivation.

These two functions are the single source of truth for a, b, rf, sphere,
es, e and ep2 on a composed projection instance.
"""

import math
from typing import Optional

from .core import EPSLN, EccentricityParameters, EllipsoidParameters
from .match import match
from .tables import ellipsoid_table

# Authalic radius series coefficients
SIXTH = 0.1666666666666666667
RA4 = 0.04722222222222222222
RA6 = 0.02215608465608465608


def sphere(a: Optional[float], b: Optional[float], rf: Optional[float],
           ellps: Optional[str], is_sphere: Optional[bool] = None) -> EllipsoidParameters:
    """
    Resolve the ellipsoid axes from whatever subset of inputs is present.

    Args:
        a: Semi-major axis, takes precedence over the named ellipsoid
        b: Semi-minor axis
        rf: Inverse flattening, used to derive b when b is absent
        ellps: Ellipsoid key, consulted only when a is absent
        is_sphere: Sphere flag from the definition

    Returns:
        EllipsoidParameters. Unknown ellipsoid names fall back to WGS84;
        rf == 0 or a == b makes the result a sphere.
    """
    if not a:
        table = ellipsoid_table()
        ellipse = match(table, ellps) or table['WGS84']
        a = ellipse['a']
        b = ellipse.get('b')
        rf = ellipse.get('rf')

    if rf and not b:
        b = (1.0 - 1.0 / rf) * a

    if b is None:
        b = a

    if rf == 0 or abs(a - b) < EPSLN:
        is_sphere = True
        b = a

    return EllipsoidParameters(a=a, b=b, rf=rf, sphere=bool(is_sphere))


def eccentricity(a: float, b: float, rf: Optional[float] = None,
                 r_a: Optional[bool] = None) -> EccentricityParameters:
    """
    Compute eccentricity squared, eccentricity and second eccentricity squared.

    With r_a set the sphere of equal area (authalic radius) is used and the
    first eccentricity collapses to zero.
    """
    a2 = a * a
    b2 = b * b
    es = (a2 - b2) / a2
    e = 0.0
    if r_a:
        a *= 1 - es * (SIXTH + es * (RA4 + es * RA6))
        a2 = a * a
        es = 0.0
    else:
        e = math.sqrt(es)
    ep2 = (a2 - b2) / b2
    return EccentricityParameters(es=es, e=e, ep2=ep2)

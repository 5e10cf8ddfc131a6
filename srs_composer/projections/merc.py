"""
Mercator projection, ellipsoidal and spherical forms.

Also serves the pseudo-Mercator (web Mercator) definitions, which are
spherical Mercator on a sphere of radius a.
"""

import numpy as np

from ..core import EPSLN, FORTPI, HALF_PI
from .base import ProjectionMethod, value_or
from .common import adjust_lon, as_output, msfnz, phi2z, tsfnz


class MercProjection(ProjectionMethod):
    """Mercator; lat_ts, when set, defines the scale factor."""

    NAMES = [
        "Mercator",
        "Popular Visualisation Pseudo Mercator",
        "Mercator_1SP",
        "Mercator_Auxiliary_Sphere",
        "Mercator_Variant_A",
        "merc",
    ]

    def init(self, instance):
        self.a = instance.a
        self.sphere = instance.sphere
        self.over = bool(instance.over)
        self.x0 = value_or(instance.x0, 0.0)
        self.y0 = value_or(instance.y0, 0.0)
        self.long0 = value_or(instance.long0, 0.0)

        con = instance.b / instance.a
        self.e = np.sqrt(1.0 - con * con)

        if instance.lat_ts:
            if self.sphere:
                self.k0 = np.cos(instance.lat_ts)
            else:
                self.k0 = float(msfnz(self.e, np.sin(instance.lat_ts), np.cos(instance.lat_ts)))
        else:
            self.k0 = value_or(instance.k0, 1.0)

    def forward(self, lon, lat):
        lon = np.asarray(lon, dtype=np.float64)
        lat = np.asarray(lat, dtype=np.float64)
        with np.errstate(divide='ignore', invalid='ignore'):
            x = self.x0 + self.a * self.k0 * adjust_lon(lon - self.long0, self.over)
            if self.sphere:
                y = self.y0 + self.a * self.k0 * np.log(np.tan(FORTPI + 0.5 * lat))
            else:
                ts = tsfnz(self.e, lat, np.sin(lat))
                y = self.y0 - self.a * self.k0 * np.log(ts)
        # Poles project to infinity
        at_pole = np.abs(np.abs(lat) - HALF_PI) <= EPSLN
        return as_output(np.where(at_pole, np.nan, x), np.where(at_pole, np.nan, y))

    def inverse(self, x, y):
        x = np.asarray(x, dtype=np.float64) - self.x0
        y = np.asarray(y, dtype=np.float64) - self.y0
        if self.sphere:
            lat = HALF_PI - 2.0 * np.arctan(np.exp(-y / (self.a * self.k0)))
        else:
            ts = np.exp(-y / (self.a * self.k0))
            lat = phi2z(self.e, ts)
        lon = adjust_lon(self.long0 + x / (self.a * self.k0), self.over)
        return as_output(lon, lat)

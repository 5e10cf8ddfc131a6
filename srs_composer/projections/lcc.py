"""
Lambert Conformal Conic, one or two standard parallels.

A one-parallel definition relies on lat1 having been filled from lat0.
"""

import numpy as np

from ..core import EPSLN, HALF_PI, ProjectionInitError
from .base import ProjectionMethod, value_or
from .common import adjust_lon, as_output, msfnz, phi2z, tsfnz


class LccProjection(ProjectionMethod):

    NAMES = [
        "Lambert Tangential Conformal Conic Projection",
        "Lambert_Conformal_Conic",
        "Lambert_Conformal_Conic_1SP",
        "Lambert_Conformal_Conic_2SP",
        "lcc",
        "Lambert Conic Conformal (1SP)",
        "Lambert Conic Conformal (2SP)",
    ]

    def init(self, instance):
        self.a = instance.a
        self.over = bool(instance.over)
        self.k0 = value_or(instance.k0, 1.0)
        self.x0 = value_or(instance.x0, 0.0)
        self.y0 = value_or(instance.y0, 0.0)
        self.long0 = value_or(instance.long0, 0.0)
        lat0 = value_or(instance.lat0, 0.0)
        lat1 = value_or(instance.lat1, 0.0)
        lat2 = instance.lat2 if instance.lat2 else lat1

        if not instance.title:
            instance.title = "Lambert Conformal Conic"

        temp = instance.b / instance.a
        self.e = np.sqrt(1.0 - temp * temp)

        # Standard parallels symmetric about the equator: cone degenerates
        if abs(lat1 + lat2) < EPSLN:
            raise ProjectionInitError("Lambert Conformal Conic needs standard parallels not symmetric about the equator")

        sin1 = np.sin(lat1)
        cos1 = np.cos(lat1)
        ms1 = msfnz(self.e, sin1, cos1)
        ts1 = tsfnz(self.e, lat1, sin1)

        sin2 = np.sin(lat2)
        cos2 = np.cos(lat2)
        ms2 = msfnz(self.e, sin2, cos2)
        ts2 = tsfnz(self.e, lat2, sin2)

        ts0 = 0.0 if abs(abs(lat0) - HALF_PI) < EPSLN else tsfnz(self.e, lat0, np.sin(lat0))

        if abs(lat1 - lat2) > EPSLN:
            self.ns = np.log(ms1 / ms2) / np.log(ts1 / ts2)
        else:
            self.ns = sin1
        if np.isnan(self.ns):
            self.ns = sin1
        self.f0 = ms1 / (self.ns * np.power(ts1, self.ns))
        self.rh = self.a * self.f0 * np.power(ts0, self.ns)

    def forward(self, lon, lat):
        lon = np.asarray(lon, dtype=np.float64)
        lat = np.asarray(lat, dtype=np.float64)
        lat = np.where(np.abs(2.0 * np.abs(lat) - np.pi) <= EPSLN, np.sign(lat) * (HALF_PI - 2.0 * EPSLN), lat)

        at_pole = np.abs(np.abs(lat) - HALF_PI) <= EPSLN
        with np.errstate(divide='ignore', invalid='ignore'):
            ts = tsfnz(self.e, lat, np.sin(lat))
            rh1 = np.where(at_pole, 0.0, self.a * self.f0 * np.power(ts, self.ns))
        # The pole opposite the cone apex cannot be projected
        invalid = at_pole & (lat * self.ns <= 0)

        theta = self.ns * adjust_lon(lon - self.long0, self.over)
        x = self.k0 * (rh1 * np.sin(theta)) + self.x0
        y = self.k0 * (self.rh - rh1 * np.cos(theta)) + self.y0
        return as_output(np.where(invalid, np.nan, x), np.where(invalid, np.nan, y))

    def inverse(self, x, y):
        x = (np.asarray(x, dtype=np.float64) - self.x0) / self.k0
        y = self.rh - (np.asarray(y, dtype=np.float64) - self.y0) / self.k0
        if self.ns > 0:
            rh1 = np.sqrt(x * x + y * y)
            con = 1.0
        else:
            rh1 = -np.sqrt(x * x + y * y)
            con = -1.0
        theta = np.where(rh1 != 0, np.arctan2(con * x, con * y), 0.0)

        if self.ns > 0:
            ts = np.power(rh1 / (self.a * self.f0), 1.0 / self.ns)
            lat = phi2z(self.e, ts)
        else:
            with np.errstate(invalid='ignore'):
                ts = np.power(rh1 / (self.a * self.f0), 1.0 / self.ns)
            lat = np.where(rh1 != 0, phi2z(self.e, ts), -HALF_PI)
        lon = adjust_lon(theta / self.ns + self.long0, self.over)
        return as_output(lon, lat)

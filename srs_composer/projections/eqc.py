"""
Equidistant Cylindrical (Plate Carree), spherical form.
"""

import numpy as np

from .base import ProjectionMethod, value_or
from .common import adjust_lat, adjust_lon, as_output


class EqcProjection(ProjectionMethod):

    NAMES = ["Equirectangular", "Equidistant_Cylindrical", "Equidistant_Cylindrical_Spherical", "eqc"]

    def init(self, instance):
        self.a = instance.a
        self.over = bool(instance.over)
        self.x0 = value_or(instance.x0, 0.0)
        self.y0 = value_or(instance.y0, 0.0)
        self.lat0 = value_or(instance.lat0, 0.0)
        self.long0 = value_or(instance.long0, 0.0)
        self.lat_ts = value_or(instance.lat_ts, 0.0)
        self.rc = np.cos(self.lat_ts)
        if not instance.title:
            instance.title = "Equidistant Cylindrical (Plate Carre)"

    def forward(self, lon, lat):
        dlon = adjust_lon(np.asarray(lon, dtype=np.float64) - self.long0, self.over)
        dlat = adjust_lat(np.asarray(lat, dtype=np.float64) - self.lat0)
        x = self.x0 + self.a * dlon * self.rc
        y = self.y0 + self.a * dlat
        return as_output(x, y)

    def inverse(self, x, y):
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        lon = adjust_lon(self.long0 + (x - self.x0) / (self.a * self.rc), self.over)
        lat = adjust_lat(self.lat0 + (y - self.y0) / self.a)
        return as_output(lon, lat)

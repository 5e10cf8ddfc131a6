"""
Geographic coordinates (identity transform).
"""

from .base import ProjectionMethod
from .common import as_output


class LonglatProjection(ProjectionMethod):
    """Longitude/latitude pass-through."""

    NAMES = ["longlat", "identity"]

    def forward(self, lon, lat):
        return as_output(lon, lat)

    def inverse(self, x, y):
        return as_output(x, y)

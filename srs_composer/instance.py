"""
The fully composed projection instance.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .core import ProjectionDefinition
from .projections.base import ProjectionMethod


@dataclass
class ProjectionInstance(ProjectionDefinition):
    """
    A resolved SRS: every definition field plus the derived constants,
    the datum and the selected projection method.

    a, b, rf, sphere, es, e, ep2 and datum are final once the composer
    returns the instance; forward/inverse delegate to the method.
    """
    es: Optional[float] = None
    e: Optional[float] = None
    ep2: Optional[float] = None
    name: Optional[str] = None
    names: List[str] = field(default_factory=list)
    method: Optional[ProjectionMethod] = field(default=None, repr=False, compare=False)

    def init(self):
        """Run the method's precomputation, if it has one."""
        if self.method is not None and callable(self.method.init):
            self.method.init(self)

    def forward(self, coords):
        """
        Project (lon, lat) in radians to (x, y).

        Args:
            coords: (lon, lat) pair of scalars or numpy arrays

        Returns:
            (x, y) as floats for scalar input, arrays otherwise
        """
        lon, lat = coords
        return self.method.forward(lon, lat)

    def inverse(self, coords):
        """Unproject (x, y) to (lon, lat) in radians."""
        x, y = coords
        return self.method.inverse(x, y)

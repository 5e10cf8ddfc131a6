"""
Base class for projection methods.

Each projection method is one variant of ProjectionMethod. A variant holds
the method-specific constants it needs and is created fresh for every
composed ProjectionInstance, which keeps a reference to it and delegates
forward/inverse to it.

Pattern for a new method (module `foo.py` in this package, class
`FooProjection`, discovered automatically by the registry):

    class FooProjection(ProjectionMethod):
        NAMES = ["Foo_Projection", "foo"]

        def init(self, instance):
            # Copy what forward/inverse need, precompute the rest
            self.a = instance.a
            self.x0 = value_or(instance.x0, 0.0)

        def forward(self, lon, lat):
            ...
            return as_output(x, y)

        def inverse(self, x, y):
            ...
            return as_output(lon, lat)

Angles are radians. forward/inverse accept scalars or numpy arrays; points
that cannot be projected come back as NaN.
"""

from typing import Any, Callable, ClassVar, Dict, List, Optional


def value_or(value, default):
    """Return value unless it is None."""
    return default if value is None else value


class ProjectionMethod:
    """Base class for all projection methods."""

    # Subclasses should override these
    NAMES: ClassVar[List[str]] = []

    # Instance fields the method sets over the definition's values
    OVERRIDES: ClassVar[Dict[str, Any]] = {}

    # Subclasses that need precomputation define init(self, instance)
    init: Optional[Callable] = None

    @property
    def name(self) -> Optional[str]:
        return self.NAMES[0] if self.NAMES else None

    def forward(self, lon, lat):
        raise NotImplementedError(f"{type(self).__name__} has no forward transform")

    def inverse(self, x, y):
        raise NotImplementedError(f"{type(self).__name__} has no inverse transform")

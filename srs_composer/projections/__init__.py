"""
Projection methods.

One module per method; the registry discovers them on start().
"""

from .base import ProjectionMethod
from .registry import PROJECTIONS, ProjectionRegistry

__all__ = ['ProjectionMethod', 'ProjectionRegistry', 'PROJECTIONS']

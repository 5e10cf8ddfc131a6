"""
SRS Composer - Resolve spatial reference system definitions into projection instances.

Public API:
    ProjectionComposer: Main interface for resolving SRS input
    resolve: Callback-style resolution with the shared composer
    compose: Result-style resolution with the shared composer
    ProjectionInstance: The composed projection
"""

import logging

from .composer import ProjectionComposer, Resolution, compose, resolve
from .core import (
    DatumParameterError,
    DatumType,
    GridShiftError,
    ProjectionDefinition,
    ProjectionInitError,
    SRSResolutionError,
    UnknownProjectionError,
    UnparseableInputError,
)
from .datum import DatumObject
from .defs import DEFS
from .instance import ProjectionInstance
from .nadgrid import load_grid_file, nadgrid

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'ProjectionComposer',
    'Resolution',
    'compose',
    'resolve',
    'ProjectionInstance',
    'ProjectionDefinition',
    'DatumObject',
    'DatumType',
    'DEFS',
    'nadgrid',
    'load_grid_file',
    'SRSResolutionError',
    'UnparseableInputError',
    'UnknownProjectionError',
    'GridShiftError',
    'ProjectionInitError',
    'DatumParameterError',
]

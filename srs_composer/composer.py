"""
ProjectionComposer - Public API for resolving SRS input into projection instances.

This is the main interface for external applications to use srs_composer.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional
import logging

from .core import (
    DatumRecord,
    EccentricityParameters,
    EllipsoidParameters,
    ProjectionDefinition,
    SRSResolutionError,
    UnknownProjectionError,
    UnparseableInputError,
)
from .datum import build_datum
from .derive_constants import eccentricity, sphere
from .instance import ProjectionInstance
from .match import match
from .nadgrid import NadgridResolver
from .parse_code import DefinitionParser
from .projections.base import ProjectionMethod
from .projections.registry import PROJECTIONS, ProjectionRegistry
from .tables import datum_table

logger = logging.getLogger(__name__)

# Filled in only when the definition leaves them absent
DEFINITION_DEFAULTS = {
    'k0': 1.0,
    'axis': 'enu',
    'ellps': 'wgs84',
}

Callback = Callable[[Optional[str], Optional[ProjectionInstance]], Any]


@dataclass
class Resolution:
    """Outcome of one resolution: an instance or an error, never both."""
    instance: Optional[ProjectionInstance] = None
    error: Optional[SRSResolutionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ProjectionInstance:
        """Return the instance, or raise the resolution error."""
        if self.error is not None:
            raise self.error
        return self.instance


class ProjectionComposer:
    """
    Main interface for composing projection instances.

    Each call runs a single pass: parse, look up the projection method,
    apply the datum record, fill defaults, derive the ellipsoid and
    eccentricity, resolve grids, build the datum, merge, and initialize
    the method.

    Usage:
        composer = ProjectionComposer()

        result = composer.compose('EPSG:3857')
        if result.ok:
            x, y = result.instance.forward((lon, lat))

        # Or with the callback interface
        composer.resolve('+proj=merc +datum=WGS84', lambda err, proj: ...)
    """

    def __init__(self,
                 registry: Optional[ProjectionRegistry] = None,
                 datum_records: Optional[Mapping[str, DatumRecord]] = None,
                 grid_resolver: Optional[NadgridResolver] = None,
                 parser: Optional[DefinitionParser] = None):
        """
        Initialize ProjectionComposer.

        Args:
            registry: Projection method registry. Default: the shared
                      registry, started on first use.
            datum_records: Datum code -> DatumRecord. Default: datums.yaml.
            grid_resolver: Resolver for nadgrids specifications.
            parser: Definition parser. Default: shared named definitions.
        """
        if registry is None:
            registry = PROJECTIONS.start()
        self.registry = registry
        self.datum_records = datum_records if datum_records is not None else datum_table()
        self.grid_resolver = grid_resolver if grid_resolver is not None else NadgridResolver()
        self.parser = parser if parser is not None else DefinitionParser()

    def compose(self, srs_input: Any) -> Resolution:
        """
        Resolve srs_input into a ProjectionInstance.

        Args:
            srs_input: Named code ('EPSG:4326'), parameter string
                       ('+proj=merc ...') or a definition mapping

        Returns:
            Resolution carrying the instance, or the error that stopped it.
            Resolution errors are never raised from here; other exceptions
            propagate.
        """
        try:
            instance = self._compose(srs_input)
        except SRSResolutionError as e:
            logger.debug("Resolution failed: %s", e.message)
            return Resolution(error=e)
        return Resolution(instance=instance)

    def resolve(self, srs_input: Any, callback: Optional[Callback] = None) -> Optional[ProjectionInstance]:
        """
        Resolve srs_input and report the outcome through callback.

        callback(error_message, instance) is called exactly once: with
        (message, None) on failure and (None, instance) on success. Without
        a callback, a failure is raised as SRSResolutionError.

        Returns:
            The instance, or None on a reported failure
        """
        result = self.compose(srs_input)
        if callback is None:
            return result.unwrap()
        if result.error is not None:
            callback(result.error.message, None)
            return None
        callback(None, result.instance)
        return result.instance

    def _compose(self, srs_input: Any) -> ProjectionInstance:
        parsed = self.parser.parse(srs_input)
        if not isinstance(parsed, dict):
            raise UnparseableInputError(f"Could not parse to valid json: {srs_input}")
        definition = ProjectionDefinition.from_mapping(parsed)

        method = self.registry.get(definition.proj_name)
        if method is None:
            raise UnknownProjectionError(f"Could not get projection name from: {srs_input}")

        self._apply_datum_record(definition)
        self._apply_defaults(definition)

        ellipsoid = sphere(definition.a, definition.b, definition.rf, definition.ellps, definition.sphere)
        ecc = eccentricity(ellipsoid.a, ellipsoid.b, ellipsoid.rf, definition.r_a)
        grids = self.grid_resolver.resolve(definition.nadgrids)

        if definition.datum is not None:
            datum_obj = definition.datum
        else:
            datum_obj = build_datum(definition.datum_code, definition.datum_params,
                                    ellipsoid.a, ellipsoid.b, ecc.es, ecc.ep2, grids)

        instance = self._merge(definition, method, ellipsoid, ecc, datum_obj)
        instance.init()
        logger.debug("Composed %s projection (a=%s, es=%s)", instance.name, instance.a, instance.es)
        return instance

    def _apply_datum_record(self, definition: ProjectionDefinition):
        """Fill datum parameters, ellipsoid and datum name from the datum table."""
        code = definition.datum_code
        if not code or code == 'none':
            return

        record = match(self.datum_records, code)
        if record is None:
            # Unlisted datum codes are valid; they carry no adjustment
            logger.debug("No datum record for '%s'", code)
            return

        if definition.datum_params is None:
            definition.datum_params = record.towgs84_params()
        definition.ellps = record.ellipse
        definition.datum_name = record.datum_name if record.datum_name else code

    def _apply_defaults(self, definition: ProjectionDefinition):
        for name, default in DEFINITION_DEFAULTS.items():
            if getattr(definition, name) is None:
                setattr(definition, name, default)
        # One-standard-parallel conics reuse the latitude of origin
        if definition.lat1 is None:
            definition.lat1 = definition.lat0

    def _merge(self,
               definition: ProjectionDefinition,
               method: type,
               ellipsoid: EllipsoidParameters,
               ecc: EccentricityParameters,
               datum_obj: Any) -> ProjectionInstance:
        """
        Assemble the instance. The order is fixed: definition fields, then
        method fields, then derived ellipsoid and eccentricity, then datum.
        """
        values: Dict[str, Any] = {
            name: getattr(definition, name) for name in ProjectionDefinition.field_names()
        }
        instance = ProjectionInstance(**values)

        variant: ProjectionMethod = method()
        for name, value in method.OVERRIDES.items():
            setattr(instance, name, value)
        instance.method = variant
        instance.name = variant.name
        instance.names = list(method.NAMES)

        instance.a = ellipsoid.a
        instance.b = ellipsoid.b
        instance.rf = ellipsoid.rf
        instance.sphere = ellipsoid.sphere

        instance.es = ecc.es
        instance.e = ecc.e
        instance.ep2 = ecc.ep2

        instance.datum = datum_obj
        return instance


_DEFAULT_COMPOSER: Optional[ProjectionComposer] = None


def _default_composer() -> ProjectionComposer:
    global _DEFAULT_COMPOSER
    if _DEFAULT_COMPOSER is None:
        _DEFAULT_COMPOSER = ProjectionComposer()
    return _DEFAULT_COMPOSER


def compose(srs_input: Any) -> Resolution:
    """Resolve srs_input with the shared default composer."""
    return _default_composer().compose(srs_input)


def resolve(srs_input: Any, callback: Optional[Callback] = None) -> Optional[ProjectionInstance]:
    """
    Resolve srs_input with the shared default composer.

    Example:
        >>> merc = resolve('EPSG:3857')
        >>> merc.sphere
        True
    """
    return _default_composer().resolve(srs_input, callback)

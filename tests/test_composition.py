"""
Test the composition pipeline: defaults, datum resolution, derived constant
precedence, merge order and the error channels.
"""

import math

import pytest

import srs_composer
from srs_composer import (
    DatumObject,
    DatumParameterError,
    DatumType,
    GridShiftError,
    ProjectionComposer,
    SRSResolutionError,
    UnknownProjectionError,
    UnparseableInputError,
)
from srs_composer.core import DatumRecord
from srs_composer.derive_constants import eccentricity, sphere
from srs_composer.nadgrid import NadgridResolver
from srs_composer.projections import ProjectionRegistry
from srs_composer.projections.longlat import LonglatProjection
from tests.conftest import BUILTIN_CODES, D2R, WGS84_A, WGS84_RF, build_ntv2_bytes, resolve_ok

class StaleEllipsoidProjection(LonglatProjection):
    """Method that carries placeholder ellipsoid values and its own k0."""
    NAMES = ['stale']
    OVERRIDES = {'a': 1.0, 'b': 1.0, 'rf': 0.0, 'k0': 0.5, 'title': 'Stale'}

# ============================================================================
# Derived constants
# ============================================================================

@pytest.mark.parametrize('srs_input', BUILTIN_CODES + [
    '+proj=lcc +lat_1=33 +lat_2=45 +lat_0=39 +lon_0=-96 +datum=NAD83',
    '+proj=merc +ellps=clrk66 +R_A',
    {'projName': 'longlat', 'a': 6378137.0, 'b': 6378000.0, 'rf': 5.0, 'sphere': False},
])
def test_instance_constants_match_derivation(composer, srs_input):
    instance = resolve_ok(composer, srs_input)

    expected = sphere(instance.a, instance.b, instance.rf, None, instance.sphere)
    assert (instance.a, instance.b, instance.rf, instance.sphere) == (
        expected.a, expected.b, expected.rf, expected.sphere
    )
    ecc = eccentricity(instance.a, instance.b, instance.rf, instance.r_a)
    assert (instance.es, instance.e, instance.ep2) == (ecc.es, ecc.e, ecc.ep2)

def test_datum_ellipsoid_replaces_input_ellipsoid_name(composer):
    instance = resolve_ok(composer, {'projName': 'longlat', 'ellps': 'intl', 'datumCode': 'nad27'})

    assert instance.ellps == 'clrk66'
    assert instance.a == 6378206.4
    assert instance.b == 6356583.8

def test_conflicting_input_axes_are_reconciled(composer):
    instance = resolve_ok(composer, {'projName': 'longlat', 'a': 6371000.0, 'b': 6371000.0, 'rf': 298.0})

    assert instance.sphere is True
    assert instance.es == 0.0
    assert instance.e == 0.0

def test_derived_values_win_over_method_fields():
    registry = ProjectionRegistry()
    registry.add(StaleEllipsoidProjection)
    composer = ProjectionComposer(registry=registry)

    instance = resolve_ok(composer, {'projName': 'stale', 'k0': 2.0, 'title': 'Mine'})

    # Method fields win over the definition
    assert instance.k0 == 0.5
    assert instance.title == 'Stale'
    # Derived ellipsoid wins over the method
    assert instance.a == WGS84_A
    assert instance.rf == WGS84_RF
    assert instance.sphere is False
    assert instance.es > 0

# ============================================================================
# Defaults
# ============================================================================

def test_defaults_fill_absent_fields(composer):
    instance = resolve_ok(composer, {'projName': 'longlat'})

    assert instance.axis == 'enu'
    assert instance.k0 == 1.0
    assert instance.ellps == 'wgs84'
    assert instance.lat1 is None

def test_defaults_keep_explicit_values(composer):
    instance = resolve_ok(composer, {'projName': 'longlat', 'axis': 'neu', 'k0': 0.9996, 'ellps': 'GRS80'})

    assert instance.axis == 'neu'
    assert instance.k0 == 0.9996
    assert instance.ellps == 'GRS80'

def test_lat1_falls_back_to_lat0(composer):
    instance = resolve_ok(composer, {'projName': 'longlat', 'lat0': 0.7})
    assert instance.lat1 == 0.7

def test_explicit_zero_lat1_is_kept(composer):
    instance = resolve_ok(composer, {'projName': 'longlat', 'lat0': 0.7, 'lat1': 0.0})
    assert instance.lat1 == 0.0

def test_input_mapping_is_not_modified(composer):
    source = {'projName': 'longlat', 'datumCode': 'wgs84'}
    resolve_ok(composer, source)
    assert source == {'projName': 'longlat', 'datumCode': 'wgs84'}

def test_unrecognized_fields_are_dropped(composer):
    instance = resolve_ok(composer, {'projName': 'longlat', 'wktext': True, 'es': 42.0})

    assert not hasattr(instance, 'wktext')
    assert instance.es != 42.0

# ============================================================================
# Datum resolution
# ============================================================================

def test_none_datum_skips_lookup():
    trap = {'none': DatumRecord(ellipse='clrk66', datum_name='trap', towgs84='1,2,3')}
    composer = ProjectionComposer(datum_records=trap)

    instance = resolve_ok(composer, {'projName': 'longlat', 'datumCode': 'none', 'ellps': 'intl'})

    assert instance.ellps == 'intl'
    assert instance.datum_name is None
    assert instance.datum_params is None
    assert instance.datum.datum_type == DatumType.NODATUM

def test_datum_record_fills_fields(composer):
    instance = resolve_ok(composer, '+proj=longlat +datum=potsdam')

    assert instance.ellps == 'bessel'
    assert instance.datum_name == 'Potsdam Rauenberg 1950 DHDN'
    assert instance.datum_params == [598.1, 73.7, 418.2, 0.202, 0.045, -2.455, 6.7]
    assert instance.datum.datum_type == DatumType.SEVEN_PARAM

def test_explicit_datum_params_win_over_record(composer):
    instance = resolve_ok(composer, '+proj=longlat +datum=ch1903 +towgs84=1,2,3')

    assert instance.datum_params == [1.0, 2.0, 3.0]
    assert instance.ellps == 'bessel'
    assert instance.datum.datum_params == [1.0, 2.0, 3.0]

def test_record_without_parameters(composer):
    instance = resolve_ok(composer, '+proj=longlat +datum=NAD27')

    assert instance.datum_name == 'North_American_Datum_1927'
    assert instance.datum_params is None
    assert instance.datum.datum_type == DatumType.WGS84

def test_record_without_name_uses_code():
    records = {'local': DatumRecord(ellipse='intl', towgs84='10,20,30')}
    composer = ProjectionComposer(datum_records=records)

    instance = resolve_ok(composer, {'projName': 'longlat', 'datumCode': 'LOCAL'})

    assert instance.datum_name == 'LOCAL'
    assert instance.ellps == 'intl'
    assert instance.datum.datum_type == DatumType.THREE_PARAM

def test_unknown_datum_code_is_not_an_error(composer):
    instance = resolve_ok(composer, {'projName': 'longlat', 'datumCode': 'mystery', 'ellps': 'krass'})

    assert instance.ellps == 'krass'
    assert instance.a == 6378245.0
    assert instance.datum_name is None
    assert instance.datum.datum_type == DatumType.WGS84

def test_explicit_datum_object_is_used_as_is(composer):
    datum = DatumObject(datum_type=DatumType.THREE_PARAM, a=1.0, b=1.0, es=0.0, ep2=0.0,
                        datum_params=[1.0, 2.0, 3.0])
    instance = resolve_ok(composer, {'projName': 'longlat', 'datumCode': 'nad83', 'datum': datum})

    assert instance.datum is datum
    assert instance.ellps == 'GRS80'

@pytest.mark.parametrize('srs_input', [
    '+proj=longlat +towgs84=1,2,3,4',
    '+proj=longlat +towgs84=1,2,3,4,5,6',
    {'projName': 'longlat', 'datum_params': [1.0, 2.0]},
])
def test_wrong_datum_parameter_count_is_reported(composer, callback_recorder, srs_input):
    assert composer.resolve(srs_input, callback_recorder) is None

    assert len(callback_recorder.calls) == 1
    assert callback_recorder.error.startswith('Datum parameters must have 3 or 7 values')
    assert callback_recorder.instance is None
    assert isinstance(composer.compose(srs_input).error, DatumParameterError)

# ============================================================================
# Grid shifts
# ============================================================================

def test_null_grid_in_nadgrids(grid_composer):
    instance = resolve_ok(grid_composer, '+proj=longlat +datum=NAD27 +nadgrids=@null,@conus')

    assert instance.datum.datum_type == DatumType.GRIDSHIFT
    assert [g.name for g in instance.datum.grids] == ['null', 'conus']

def test_loaded_grid_is_attached(grid_registry, grid_composer):
    grid = grid_registry.add('test.gsb', build_ntv2_bytes())

    instance = resolve_ok(grid_composer, '+proj=longlat +ellps=clrk66 +nadgrids=test.gsb')

    assert instance.datum.grids[0].grid is grid

def test_strict_grid_failure_is_reported(grid_registry, callback_recorder):
    composer = ProjectionComposer(grid_resolver=NadgridResolver(registry=grid_registry, strict=True))

    assert composer.resolve('+proj=longlat +nadgrids=missing.gsb', callback_recorder) is None
    assert len(callback_recorder.calls) == 1
    assert 'missing.gsb' in callback_recorder.error
    assert callback_recorder.instance is None

    result = composer.compose('+proj=longlat +nadgrids=missing.gsb')
    assert isinstance(result.error, GridShiftError)

def test_projection_lookup_precedes_grid_resolution(grid_registry, callback_recorder):
    composer = ProjectionComposer(grid_resolver=NadgridResolver(registry=grid_registry, strict=True))
    srs = '+proj=bogus +nadgrids=missing.gsb'

    result = composer.compose(srs)
    assert isinstance(result.error, UnknownProjectionError)

    composer.resolve(srs, callback_recorder)
    assert callback_recorder.calls == [(f"Could not get projection name from: {srs}", None)]

# ============================================================================
# Error channels
# ============================================================================

def test_unknown_projection_reported_through_callback(composer, callback_recorder):
    srs = '+proj=bogus +ellps=WGS84'
    assert composer.resolve(srs, callback_recorder) is None

    assert callback_recorder.calls == [(f"Could not get projection name from: {srs}", None)]

def test_unknown_projection_mapping(composer, callback_recorder):
    composer.resolve({'projName': 'bogus'}, callback_recorder)

    assert len(callback_recorder.calls) == 1
    assert callback_recorder.error.startswith("Could not get projection name from: ")
    assert callback_recorder.instance is None

def test_unparseable_input_without_callback_raises(composer):
    with pytest.raises(SRSResolutionError) as excinfo:
        composer.resolve('not-a-code')

    assert str(excinfo.value) == "Could not parse to valid json: not-a-code"
    assert isinstance(excinfo.value, UnparseableInputError)

def test_unparseable_input_with_callback(composer, callback_recorder):
    composer.resolve('not-a-code', callback_recorder)
    assert callback_recorder.calls == [("Could not parse to valid json: not-a-code", None)]

def test_success_callback(composer, callback_recorder):
    instance = composer.resolve('EPSG:4326', callback_recorder)

    assert callback_recorder.calls == [(None, instance)]
    assert instance.name == 'longlat'

def test_result_unwrap(composer):
    result = composer.compose('+proj=bogus')

    assert not result.ok
    assert result.instance is None
    assert isinstance(result.error, UnknownProjectionError)
    with pytest.raises(UnknownProjectionError):
        result.unwrap()

# ============================================================================
# Scenarios
# ============================================================================

def test_mercator_with_explicit_axes_and_no_datum(composer):
    instance = resolve_ok(
        composer, {'projName': 'merc', 'a': 6378137, 'b': 6356752.3142, 'datumCode': 'none'}
    )

    assert instance.sphere is False
    assert instance.es > 0
    assert instance.datum.datum_type == DatumType.NODATUM
    assert 'merc' in instance.names

    point = (10 * D2R, 50 * D2R)
    x, y = instance.forward(point)
    assert math.isfinite(x) and math.isfinite(y)
    assert instance.inverse((x, y)) == pytest.approx(point, abs=1e-9)

@pytest.mark.parametrize('srs_input', BUILTIN_CODES + ['+proj=lcc +lat_0=40 +datum=potsdam'])
def test_resolution_is_repeatable(srs_input):
    first = ProjectionComposer().compose(srs_input).unwrap()
    second = ProjectionComposer().compose(srs_input).unwrap()

    assert first is not second
    for name in ('a', 'b', 'rf', 'sphere', 'es', 'e', 'ep2', 'datum'):
        assert getattr(first, name) == getattr(second, name)

def test_module_level_entry_points():
    instance = srs_composer.resolve('EPSG:4269')
    assert instance.datum_name == 'North_American_Datum_1983'
    assert instance.a == 6378137.0

    assert srs_composer.compose('EPSG:3857').instance.sphere is True

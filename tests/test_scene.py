import numpy as np
import pytest
from keplerviz import (
    OrbitalElements,
    SceneAdapter,
    ParameterSnapshot,
    build_geometry,
    DEFAULT_ELEMENTS,
)
from keplerviz.geometry import plot_point, orbit_center, apsides


class RecordingRenderer:
    """
    Stand-in renderer that keeps every geometry it is asked to draw.
    """
    def __init__(self):
        self.drawn = []

    def draw(self, geometry):
        self.drawn.append(geometry)


@pytest.fixture
def adapter():
    """
    Setup a SceneAdapter with a recording renderer.
    """
    return SceneAdapter(renderer=RecordingRenderer())

# Change detection

def test_snapshot_exact_equality():
    """
    Check that snapshots compare exactly, with no tolerance
    """
    s1 = ParameterSnapshot.capture(DEFAULT_ELEMENTS, 1.0, 0.05)
    s2 = ParameterSnapshot.capture(DEFAULT_ELEMENTS, 1.0, 0.05)
    s3 = ParameterSnapshot.capture(DEFAULT_ELEMENTS, np.nextafter(1.0, 2.0), 0.05)
    assert s1 == s2
    assert s1 != s3

def test_first_update_draws(adapter):
    """
    Check that the first update computes and draws the scene
    """
    assert adapter.needs_update
    assert adapter.update() is True
    assert len(adapter.renderer.drawn) == 1
    assert not adapter.needs_update

def test_update_idempotent(adapter):
    """
    Check that a second update without changes does nothing and leaves the geometry untouched
    """
    adapter.update()
    geometry = adapter.geometry
    orbit = geometry.orbit.copy()
    assert adapter.update() is False
    assert adapter.geometry is geometry
    assert np.array_equal(adapter.geometry.orbit, orbit)
    assert len(adapter.renderer.drawn) == 1
    assert adapter.n_updates == 1

def test_any_change_triggers_update(adapter):
    """
    Check that changing any parameter, however slightly, triggers a recompute
    """
    adapter.update()
    setters = [
        (adapter.set_true_anomaly, lambda: adapter.true_anomaly),
        (adapter.set_eccentricity, lambda: adapter.elements.eccentricity),
        (adapter.set_semi_major_axis, lambda: adapter.elements.semi_major_axis),
        (adapter.set_argument_of_periapsis, lambda: adapter.elements.argument_of_periapsis),
        (adapter.set_inclination, lambda: adapter.elements.inclination),
        (adapter.set_longitude_of_ascending_node, lambda: adapter.elements.longitude_of_ascending_node),
        (adapter.set_resolution, lambda: adapter.resolution),
    ]
    for setter, getter in setters:
        setter(np.nextafter(getter(), 1.0))
        assert adapter.update() is True
        assert adapter.update() is False
    assert len(adapter.renderer.drawn) == 1 + len(setters)

def test_setters_do_not_recompute(adapter):
    """
    Check that setters only record values; the recompute happens on update
    """
    adapter.update()
    adapter.set_eccentricity(0.1)
    adapter.set_true_anomaly(1.0)
    assert len(adapter.renderer.drawn) == 1
    adapter.update()
    assert len(adapter.renderer.drawn) == 2

def test_setters_replace_elements(adapter):
    """
    Check that setting an element replaces the elements rather than mutating them
    """
    before = adapter.elements
    adapter.set_eccentricity(0.2)
    assert before.eccentricity == 0.5
    assert adapter.elements.eccentricity == 0.2
    assert adapter.elements is not before

def test_setting_same_value_is_noop(adapter):
    """
    Check that writing an unchanged value does not trigger a redraw
    """
    adapter.update()
    adapter.set_semi_major_axis(adapter.elements.semi_major_axis)
    assert adapter.update() is False

def test_invalid_resolution():
    """
    Check that a non-positive resolution is rejected
    """
    with pytest.raises(ValueError, match="strictly positive"):
        SceneAdapter(resolution=0)
    adapter = SceneAdapter()
    with pytest.raises(ValueError, match="strictly positive"):
        adapter.set_resolution(-0.1)

# Geometry content

def test_geometry_contents():
    """
    Check every primitive of a recomputed scene
    """
    elements = OrbitalElements(0.3, 8, 0.4, 0.9, 1.7)
    nu = 2.0
    geometry = build_geometry(elements, nu, 0.05)

    assert np.array_equal(geometry.orbit[0], geometry.orbit[-1])
    assert len(geometry.orbit) == len(np.arange(0, 2 * np.pi, 0.05)) + 1
    assert np.allclose(geometry.apsides, apsides(elements))
    assert np.allclose(geometry.satellite, plot_point(elements, nu))
    assert np.isclose(np.linalg.norm(geometry.arrow_direction), 1)

    assert np.allclose(geometry.true_anomaly_segment[0], 0)
    assert np.allclose(geometry.true_anomaly_segment[1], geometry.satellite)

    center = orbit_center(elements)
    for segment in [geometry.eccentric_anomaly_segment, geometry.mean_anomaly_segment]:
        assert segment.shape == (2, 3)
        assert np.allclose(segment[0], center)
        assert np.isclose(np.linalg.norm(segment[1] - segment[0]), 8)

def test_build_geometry_deterministic():
    """
    Check that building the geometry twice gives identical arrays
    """
    g1 = build_geometry(DEFAULT_ELEMENTS, 1.3)
    g2 = build_geometry(DEFAULT_ELEMENTS, 1.3)
    assert np.array_equal(g1.orbit, g2.orbit)
    assert np.array_equal(g1.mean_anomaly_segment, g2.mean_anomaly_segment)
    assert g1.eccentric_anomaly == g2.eccentric_anomaly

def test_geometry_arrays_read_only(adapter):
    """
    Check that the cached geometry cannot be edited in place by a renderer
    """
    geometry = adapter.geometry
    for arr in (geometry.orbit, geometry.apsides, geometry.satellite, geometry.arrow_direction,
                geometry.mean_anomaly_segment):
        assert not arr.flags.writeable
    with pytest.raises(ValueError):
        geometry.orbit[0, 0] = 99.0
    assert adapter.update() is False
    assert adapter.geometry is geometry

def test_nan_parameter_redraws_every_update(adapter):
    """
    Check that a NaN parameter never compares equal, so each update redraws
    """
    adapter.set_true_anomaly(float('nan'))
    assert adapter.update() is True
    assert adapter.update() is True
    assert len(adapter.renderer.drawn) == 2

def test_resolution_changes_orbit(adapter):
    """
    Check that a finer resolution gives a longer orbit polyline
    """
    coarse = len(adapter.geometry.orbit)
    adapter.set_resolution(0.01)
    assert len(adapter.geometry.orbit) > coarse

# Anomaly readout

def test_anomaly_readout_values():
    """
    Check the displayed eccentric and mean anomalies for e = 0.5 at ν = 90°
    """
    adapter = SceneAdapter(true_anomaly=np.pi / 2)
    readout = adapter.anomaly_readout()
    assert readout['eccentric'] == 60.0
    assert readout['mean'] == 35.2

def test_anomaly_readout_circular():
    """
    Check that all anomalies agree on a circular orbit
    """
    adapter = SceneAdapter(elements=OrbitalElements(0, 10), true_anomaly=np.radians(123.4))
    readout = adapter.anomaly_readout()
    assert readout['eccentric'] == 123.4
    assert readout['mean'] == 123.4

def test_anomaly_readout_follows_changes(adapter):
    """
    Check that the readout is recomputed when the anomaly changes
    """
    assert adapter.anomaly_readout() == {'eccentric': 0.0, 'mean': 0.0}
    adapter.set_true_anomaly(np.pi / 2)
    assert adapter.anomaly_readout()['eccentric'] == 60.0

def test_adapter_string_repr(adapter):
    """
    Check that the string representation of the adapter is a string
    """
    assert isinstance(str(adapter), str)

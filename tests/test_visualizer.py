import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest
from types import SimpleNamespace
from keplerviz import SceneAdapter, OrbitalElements
from keplerviz.visualizer import OrbitVisualizer, UNDEFINED


@pytest.fixture
def visualizer():
    """
    Setup a visualizer with a still camera, closed after the test.
    """
    v = OrbitVisualizer(auto_rotate=False)
    yield v
    plt.close('all')

def test_initial_state(visualizer):
    """
    Check that the scene is drawn and the readouts filled on start-up
    """
    assert visualizer.renderer.n_draws == 1
    assert visualizer.anomaly_text.get_text() == "E = 0.0°\nM = 0.0°"
    assert visualizer.grade_text.get_text() == 'prograde'
    assert visualizer.tick() is False

def test_true_anomaly_slider(visualizer):
    """
    Check that the true anomaly slider converts degrees and triggers one redraw
    """
    visualizer.sliders['true_anomaly'].set_val(90)
    assert np.isclose(visualizer.adapter.true_anomaly, np.pi / 2)
    assert visualizer.tick() is True
    assert visualizer.tick() is False
    assert visualizer.anomaly_text.get_text() == "E = 60.0°\nM = 35.2°"

def test_element_sliders(visualizer):
    """
    Check that the element sliders write radians (or plain values) to the adapter
    """
    visualizer.sliders['eccentricity'].set_val(0.3)
    visualizer.sliders['semi_major_axis'].set_val(12)
    visualizer.sliders['argument_of_periapsis'].set_val(30)
    visualizer.sliders['longitude_of_ascending_node'].set_val(60)
    elements = visualizer.adapter.elements
    assert elements.eccentricity == 0.3
    assert elements.semi_major_axis == 12
    assert np.isclose(elements.argument_of_periapsis, np.radians(30))
    assert np.isclose(elements.longitude_of_ascending_node, np.radians(60))

def test_circular_orbit_periapsis_undefined(visualizer):
    """
    Check that the periapsis argument reads 'Undef' for a circular orbit
    """
    visualizer.sliders['eccentricity'].set_val(0)
    assert visualizer.sliders['argument_of_periapsis'].valtext.get_text() == UNDEFINED
    visualizer.sliders['eccentricity'].set_val(0.2)
    assert visualizer.sliders['argument_of_periapsis'].valtext.get_text() != UNDEFINED

def test_equatorial_orbit_longitude_undefined(visualizer):
    """
    Check that the node longitude is undefined and held at zero for an equatorial orbit
    """
    visualizer.sliders['longitude_of_ascending_node'].set_val(40)
    visualizer.sliders['inclination'].set_val(0)
    assert visualizer.sliders['longitude_of_ascending_node'].valtext.get_text() == UNDEFINED
    assert visualizer.adapter.elements.longitude_of_ascending_node == 0

    visualizer.sliders['inclination'].set_val(30)
    assert np.isclose(visualizer.adapter.elements.longitude_of_ascending_node, np.radians(40))

def test_grade_label(visualizer):
    """
    Check the grade label for polar and retrograde orbits
    """
    visualizer.sliders['inclination'].set_val(90)
    assert visualizer.grade_text.get_text() == 'polar'
    visualizer.sliders['inclination'].set_val(120)
    assert visualizer.grade_text.get_text() == 'retrograde'

def test_definition_popup(visualizer):
    """
    Check that picking a slider label shows the definition of that element
    """
    label = visualizer.sliders['eccentricity'].label
    visualizer._on_pick(SimpleNamespace(artist=label))
    assert visualizer.definition_text.get_text().startswith('eccentricity')

    visualizer._on_pick(SimpleNamespace(artist=visualizer.grade_text))
    assert visualizer.definition_text.get_text().startswith('inclination')

def test_auto_rotate():
    """
    Check that the camera turns on every tick when auto-rotation is on
    """
    v = OrbitVisualizer(auto_rotate=True, rotate_speed=2.0)
    azim = v.renderer.ax.azim
    v.tick()
    assert np.isclose(v.renderer.ax.azim, (azim + 2.0) % 360)
    plt.close('all')

def test_uses_given_adapter():
    """
    Check that the sliders start from the state of a supplied adapter
    """
    adapter = SceneAdapter(elements=OrbitalElements.from_degrees(0.2, 7, 10, 60, 20), true_anomaly=np.radians(45))
    v = OrbitVisualizer(adapter, auto_rotate=False)
    assert v.adapter is adapter
    assert np.isclose(v.sliders['semi_major_axis'].val, 7)
    assert np.isclose(v.sliders['true_anomaly'].val, 45)
    assert np.isclose(v.sliders['inclination'].val, 60)
    plt.close('all')

def test_adapter_values_outside_slider_range():
    """
    Check that starting angles below a slider's range are kept, not clamped
    """
    adapter = SceneAdapter(
        elements=OrbitalElements.from_degrees(0.5, 10, -30, 45, -30),
        true_anomaly=np.radians(-400),
    )
    v = OrbitVisualizer(adapter, auto_rotate=False)
    elements = v.adapter.elements
    assert np.isclose(np.degrees(elements.longitude_of_ascending_node), -30)
    assert np.isclose(np.degrees(elements.argument_of_periapsis), -30)
    assert np.isclose(np.degrees(v.adapter.true_anomaly), -400)
    assert np.isclose(v.sliders['argument_of_periapsis'].val, -30)
    assert np.isclose(v.sliders['true_anomaly'].val, -400)
    assert v.sliders['argument_of_periapsis'].valtext.get_text() == '-30.0'
    plt.close('all')

def test_save_animation(visualizer, tmp_path):
    """
    Check that a short turn-around animation is written to disk
    """
    path = tmp_path / "orbit.gif"
    visualizer.save_animation(str(path), n_frames=3, dpi=30, verbose=False)
    assert path.exists()

def test_save_animation_requires_path(visualizer):
    """
    Check that saving an animation without a path raises an error
    """
    with pytest.raises(ValueError, match="filepath"):
        visualizer.save_animation()

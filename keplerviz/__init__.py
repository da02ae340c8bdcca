"""
KeplerViz: an interactive visualizer for Keplerian orbital elements, drawing an orbit,
a satellite on it and its true, eccentric and mean anomalies in 3D.
"""

from .elements import (
    OrbitalElements,
    AnomalyKind,
    AnomalyAngle,
    DEFAULT_ELEMENTS,
    DEFAULT_RESOLUTION,
    check_elements,
    undefined_elements,
    orbit_grade,
)
from .geometry import (
    radius,
    perifocal_point,
    to_equatorial,
    plot_point,
    plot_orbit,
    orbit_center,
    anomaly_correction,
    true_to_eccentric_anomaly,
    eccentric_to_mean_anomaly,
    true_to_mean_anomaly,
    arrow_vectors,
)
from .scene import SceneAdapter, SceneGeometry, ParameterSnapshot, build_geometry
from .definitions import lookup, format_definition

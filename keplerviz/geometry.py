# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import numpy as np
import numpy.typing as npt
import warnings

from scipy.spatial.transform import Rotation
from typing import Tuple, Union

from .elements import OrbitalElements, DEFAULT_RESOLUTION
# ------------------------------------------------------------------------------------------------ #

# Pure functions mapping orbital elements and an anomaly to points in the equatorial frame.
# Angles are in radians. Every function accepts a scalar or an array of angles; points
# come back with shape (3,) for a scalar angle and (N, 3) for an array of N angles.

ArrayLike = Union[float, npt.NDArray[np.float64]]

ARROW_ANOMALY = 1.5 * np.pi / 2
ARROW_SPAN = 0.3
ARROW_OFFSET = 1.1
MAX_ORBIT_SAMPLES = 100_000


def radius(e: float, a: float, nu: ArrayLike) -> ArrayLike:
    """Compute radius r given eccentricity e, semi-major axis a, and true anomaly nu."""
    return a * (1 - e**2) / (1 + e * np.cos(nu))

def periapsis(a: float, e: float) -> float:
    """Compute periapsis distance, r_p."""
    return a * (1 - e)

def apoapsis(a: float, e: float) -> float:
    """Compute apoapsis distance, r_a."""
    return a * (1 + e)


def perifocal_point(e: float, a: float, nu: ArrayLike) -> np.ndarray:
    """
    Position in the perifocal frame (focus at the origin, periapsis on +x).

    Parameters
    ----------
    e : float
        Eccentricity.
    a : float
        Semi-major axis.
    nu : float or array-like
        True anomaly.

    Returns
    -------
    np.ndarray
        (x, y, 0) with shape (3,) or (N, 3).
    """
    nu = np.asarray(nu, dtype=float)
    r = radius(e, a, nu)
    x = r * np.cos(nu)
    y = r * np.sin(nu)
    return np.stack([x, y, np.zeros_like(x)], axis=-1)


def perifocal_to_equatorial(omega: float, inc: float, raan: float) -> Rotation:
    """
    Rotation taking perifocal coordinates to the equatorial frame.

    Rotates by ω about +z, then by i about +y, then by Ω about +z. The axes are
    fixed (extrinsic), so the order of the three rotations matters.
    """
    return Rotation.from_euler('zyz', [omega, inc, raan])


def to_equatorial(points: npt.ArrayLike, omega: float, inc: float, raan: float) -> np.ndarray:
    """
    Transform point(s) from the perifocal frame to the equatorial frame.

    Parameters
    ----------
    points : array-like
        A point of shape (3,) or a stack of points of shape (N, 3).
    omega : float
        Argument of periapsis.
    inc : float
        Inclination.
    raan : float
        Longitude of the ascending node.

    Returns
    -------
    np.ndarray
        Transformed point(s), same shape as the input.
    """
    return perifocal_to_equatorial(omega, inc, raan).apply(np.asarray(points, dtype=float))


def _to_equatorial(elements: OrbitalElements, points: npt.ArrayLike) -> np.ndarray:
    return to_equatorial(
        points,
        elements.argument_of_periapsis,
        elements.inclination,
        elements.longitude_of_ascending_node,
    )


def plot_point(elements: OrbitalElements, nu: ArrayLike) -> np.ndarray:
    """
    Position on the orbit at true anomaly nu, in the equatorial frame.
    """
    return _to_equatorial(elements, perifocal_point(elements.eccentricity, elements.semi_major_axis, nu))


def orbit_anomalies(resolution: float = DEFAULT_RESOLUTION) -> np.ndarray:
    """
    True anomalies sampled from 0 (inclusive) to 2π (exclusive) in steps of resolution.

    Raises
    ------
    ValueError: If resolution is not strictly positive.
    """
    if not resolution > 0:
        raise ValueError("Resolution must be strictly positive.")
    nu = np.arange(0.0, 2 * np.pi, resolution)
    if len(nu) > MAX_ORBIT_SAMPLES:
        warnings.warn(f"Resolution {resolution} gives {len(nu)} samples per orbit; drawing will be slow.")
    return nu


def plot_orbit(elements: OrbitalElements, resolution: float = DEFAULT_RESOLUTION) -> np.ndarray:
    """
    Sample the orbit as an open polyline.

    Parameters
    ----------
    elements : OrbitalElements
        The orbit to sample.
    resolution : float, optional
        Step in true anomaly between samples (radians). Smaller values give a
        smoother curve with more points. Defaults to 0.05.

    Returns
    -------
    np.ndarray
        Points of shape (N, 3) ordered by increasing true anomaly. The last point
        is not joined back to the first; use `close_loop` for that.
    """
    return plot_point(elements, orbit_anomalies(resolution))


def close_loop(points: np.ndarray) -> np.ndarray:
    """Append the first point to the end of a polyline."""
    return np.vstack([points, points[:1]])


def apsides(elements: OrbitalElements) -> np.ndarray:
    """Periapsis (ν = 0) and apoapsis (ν = π), shape (2, 3)."""
    return plot_point(elements, np.array([0.0, np.pi]))


def orbit_center(elements: OrbitalElements) -> np.ndarray:
    """
    Centre of the ellipse in the equatorial frame.

    In the perifocal frame the centre sits at (-e·a, 0, 0), on the far side of
    the focus from periapsis.
    """
    center = np.array([-elements.eccentricity * elements.semi_major_axis, 0.0, 0.0])
    return _to_equatorial(elements, center)


def auxiliary_circle_point(elements: OrbitalElements, angle: ArrayLike) -> np.ndarray:
    """
    Point on the auxiliary circle (radius a, centred on the ellipse centre) at the given angle.

    The angle is measured at the centre from the direction of periapsis, so this
    is where an eccentric or mean anomaly points.
    """
    a = elements.semi_major_axis
    angle = np.asarray(angle, dtype=float)
    x = a * np.cos(angle) - elements.eccentricity * a
    y = a * np.sin(angle)
    return _to_equatorial(elements, np.stack([x, y, np.zeros_like(x)], axis=-1))


def arrow_vectors(elements: OrbitalElements) -> Tuple[np.ndarray, np.ndarray]:
    """
    Direction and origin of the arrow marking the direction of motion.

    The direction is the unit chord between the points at ν = 3π/4 and
    ν = 3π/4 + 0.3; the origin is the first of these pushed out by 10% from the focus.

    Returns
    -------
    direction : np.ndarray
        Unit vector, shape (3,).
    origin : np.ndarray
        Arrow tail position, shape (3,).
    """
    point1, point2 = plot_point(elements, np.array([ARROW_ANOMALY, ARROW_ANOMALY + ARROW_SPAN]))
    chord = point2 - point1
    direction = chord / np.linalg.norm(chord)
    origin = point1 * ARROW_OFFSET
    return direction, origin


# Anomaly conversions
# ------------------------------------------------------------------------------------------------ #

# atan2 returns angles in (-π, π]. For an input anomaly that has been swept past ±π
# the result would jump by 2π; the correction adds one revolution back so the output
# keeps tracking the input. Only a single extra revolution is handled.

def anomaly_correction(nu: ArrayLike) -> ArrayLike:
    """
    Branch correction for an anomaly outside [-π, π].

    Returns
    -------
    float or np.ndarray
        +2π if |ν| > π and ν > 0, -2π if |ν| > π and ν ≤ 0, otherwise 0.
    """
    nu = np.asarray(nu, dtype=float)
    correction = np.where(np.abs(nu) > np.pi, np.where(nu > 0, 2 * np.pi, -2 * np.pi), 0.0)
    return correction if correction.ndim else float(correction)


def true_to_eccentric_anomaly(e: float, nu: ArrayLike, corrected: bool = True) -> ArrayLike:
    """
    Eccentric anomaly E from true anomaly ν.

    E = atan2(√(1 - e²)·sin ν, e + cos ν) + correction(ν)

    Parameters
    ----------
    e : float
        Eccentricity.
    nu : float or array-like
        True anomaly.
    corrected : bool, optional
        If False, return the raw atan2 value in (-π, π]. Defaults to True.

    Returns
    -------
    float or np.ndarray
        Eccentric anomaly.
    """
    E = np.arctan2(np.sqrt(1 - e**2) * np.sin(nu), e + np.cos(nu))
    if corrected:
        E = E + anomaly_correction(nu)
    return E


def eccentric_to_mean_anomaly(e: float, eccentric_anomaly: ArrayLike, true_anomaly: ArrayLike) -> ArrayLike:
    """
    Mean anomaly from Kepler's equation, M = E - e·sin E, with the branch correction.

    Parameters
    ----------
    e : float
        Eccentricity.
    eccentric_anomaly : float or array-like
        Uncorrected eccentric anomaly, as returned by
        ``true_to_eccentric_anomaly(e, nu, corrected=False)``.
    true_anomaly : float or array-like
        The true anomaly E was computed from. The correction is taken from it,
        once.

    Returns
    -------
    float or np.ndarray
        Mean anomaly.
    """
    E = eccentric_anomaly
    return E - e * np.sin(E) + anomaly_correction(true_anomaly)


def true_to_mean_anomaly(e: float, nu: ArrayLike) -> ArrayLike:
    """Mean anomaly M from true anomaly ν."""
    return eccentric_to_mean_anomaly(e, true_to_eccentric_anomaly(e, nu, corrected=False), nu)


def eccentric_to_true_anomaly(e: float, E: ArrayLike) -> ArrayLike:
    """True anomaly ν from eccentric anomaly E, with the same branch correction."""
    nu = np.arctan2(np.sqrt(1 - e**2) * np.sin(E), np.cos(E) - e)
    return nu + anomaly_correction(E)


def kepler_solver(
        M: ArrayLike,
        e: float,
        tol: float = 1e-10,
        max_iter: int = 100
    ) -> ArrayLike:
    """
    Solve Kepler's equation for the eccentric anomaly E given the mean anomaly M and eccentricity e.
    This function uses Newton-Raphson method to solve the equation.

    Parameters
    ----------
    M : float or array-like
        Mean anomaly.
    e : float
        Eccentricity.
    tol : float, optional
        Tolerance for the solution.
    max_iter : int, optional
        Maximum number of iterations.

    Returns
    -------
    E : float or array-like
        Eccentric anomaly.
    """
    scalar = np.ndim(M) == 0
    M = np.atleast_1d(np.asarray(M, dtype=float))
    E = np.copy(M)

    # Iterate until the solution converges
    for _ in range(max_iter):
        f = E - e * np.sin(E) - M
        f_prime = 1 - e * np.cos(E)
        delta_E = -f / f_prime
        E += delta_E
        if np.max(np.abs(delta_E)) < tol:
            break
    return float(E[0]) if scalar else E


def mean_to_true_anomaly(e: float, M: ArrayLike) -> ArrayLike:
    """True anomaly ν from mean anomaly M."""
    return eccentric_to_true_anomaly(e, kepler_solver(M, e))

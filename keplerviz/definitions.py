"""
Glossary entries shown when the user asks what an orbital element means.

Paragraphs are separated by '@@'. Reference markers [1] and [2] point to:
[1] Curtis, H. D., Orbital Mechanics for Engineering Students.
[2] Wikipedia, Orbital elements.
"""

# Import necessary modules
# ------------------------------------------------------------------------------------------------ #
import textwrap
from dataclasses import dataclass
# ------------------------------------------------------------------------------------------------ #


@dataclass(frozen=True)
class Definition:
    term: str
    symbol: str
    text: str


DEFINITIONS = {
    'true anomaly': Definition(
        term='true anomaly',
        symbol='ν',
        text=(
            "The true anomaly (ν, f, or θ) describes the location of the satellite in the orbital plane at a "
            "specific time. It is defined as the angular displacement from the periapsis to the position vector "
            "of the satellite, as measured in the direction of motion from the perspective of the primary focus.[2]"
            " @@ Circular orbits (where the eccentricity is 0) lack a periapsis; thus the true anomaly is undefined "
            "for circular orbits.[2]"
        ),
    ),
    'mean anomaly': Definition(
        term='mean anomaly',
        symbol='M',
        text=(
            "Mean anomaly, M, is a mathematically convenient angle used in the calculation of true anomaly with "
            "respect to time. While true anomaly changes at a varying rate with time, mean anomaly increases at a "
            "constant rate with respect to time.[1] Accordingly, M = (2π / T)·t, where T is the period of the "
            "orbit.[1] @@ To relate M to true anomaly, an intermediary angle is used: the eccentric anomaly, E. "
            "This relation is as follows: M = E - e·sin E. It is implemented here by use of this equation, which "
            "is known as Kepler's Equation.[1]"
        ),
    ),
    'eccentric anomaly': Definition(
        term='eccentric anomaly',
        symbol='E',
        text=(
            "Eccentric anomaly, E, is a mathematically convenient angle used to relate true anomaly to mean "
            "anomaly. @@ Consider a concentric auxiliary circle of radius a circumscribed around the ellipse. Draw "
            "a line from the satellite to perpendicularly intersect the line of apsides. Extend it upwards to "
            "intersect the auxiliary circle. Angle E is the angle between this intersection with the auxiliary "
            "circle and the periapsis, as measured at the center of the ellipse.[1] @@ It is related to the true anomaly by "
            "the equation E = 2·arctan(√((1 - e) / (1 + e))·tan(ν / 2))."
        ),
    ),
    'eccentricity': Definition(
        term='eccentricity',
        symbol='e',
        text=(
            "Eccentricity, e, measures the divergence of a conic section from a perfect circle.[2] It describes "
            "the shape of an orbit. @@ An eccentricity of 0 corresponds to a perfect circle. When e < 1 and "
            "e ≥ 0, the orbit is an ellipse."
        ),
    ),
    'periapsis argument': Definition(
        term='argument of periapsis',
        symbol='ω',
        text=(
            "The argument of periapsis, ω, is the angular displacement of the periapsis from the ascending node "
            "(where the orbital plane intersects the equatorial plane).[2] It indicates the orientation of "
            "periapsis. @@ In a circular orbit (with an eccentricity of 0), the argument of periapsis is "
            "undefined.[2] @@ This angle is the first rotation applied in the process of the transformation from "
            "the perifocal frame of reference to the geocentric frame of reference (which is how it is "
            "implemented here).[1]"
        ),
    ),
    'inclination': Definition(
        term='inclination',
        symbol='i',
        text=(
            "Inclination, i, describes the tilt of the orbital plane. It is the angle at which the orbital plane "
            "intersects the equatorial plane of the main body (the node line).[1][2] @@ The inclination ranges "
            "from 0° to 180° inclusive. When i < 90°, the orbit is direct or prograde - the satellite travels "
            "with the rotation of the primary body. If i > 90°, it is a retrograde orbit, and the satellite "
            "travels against the rotation of the primary body. Orbits with an inclination of 90° are considered "
            "to be polar orbits.[2] @@ If i is 0° or 180°, then the orbit lies wholly in the equatorial plane and "
            "is called an equatorial orbit.[2] @@ Inclination is the second angle applied in the transformation "
            "from the perifocal frame of reference to the geocentric frame of reference (which is how it is "
            "implemented here).[1]"
        ),
    ),
    'longitude': Definition(
        term='longitude of the node',
        symbol='Ω',
        text=(
            "The right ascension of the ascending node, Ω, is the angle between the ascending node and a "
            "reference longitude (in this case the periapsis before transformations are applied). The ascending "
            "node, ☊, is the point on the equatorial plane where the satellite crosses it from south to north.[2]"
            " @@ Ω is undefined in equatorial orbits (with an inclination of 0° or 180°).[2] @@ The right "
            "ascension of the ascending node is the third and final angle applied in the transformation from the "
            "perifocal frame of reference to the geocentric frame of reference (which is how it is implemented "
            "here).[1]"
        ),
    ),
    'semi-major axis': Definition(
        term='semi-major axis',
        symbol='a',
        text=(
            "The semi-major axis, a, is half the length of the major axis of an elliptical orbit. It is also "
            "equal to half the sum of the altitude at periapsis and apoapsis.[1]"
        ),
    ),
}

# Labels that name a term differently from its glossary key
ALIASES = {
    'argument of periapsis': 'periapsis argument',
    'longitude of the node': 'longitude',
    'longitude of ascending node': 'longitude',
    'semi-major': 'semi-major axis',
}


def lookup(term: str) -> Definition:
    """
    Find the glossary entry for a term.

    The lookup ignores case and surrounding whitespace. Orbit grade labels
    (prograde, polar, retrograde) resolve to the inclination entry.

    Raises
    ------
    KeyError: If the term has no entry.
    """
    key = term.strip().lower()
    if any(grade in key for grade in ('prograde', 'polar', 'retrograde')):
        key = 'inclination'
    key = ALIASES.get(key, key)
    if key not in DEFINITIONS:
        raise KeyError(f"No definition for '{term}'. Choose from {sorted(DEFINITIONS)}")
    return DEFINITIONS[key]


def format_definition(definition: Definition, width: int = 70) -> str:
    """Title line followed by the wrapped paragraphs of a definition."""
    paragraphs = [p.strip() for p in definition.text.split('@@')]
    body = '\n\n'.join(textwrap.fill(p, width=width) for p in paragraphs)
    return f"{definition.term} ({definition.symbol})\n\n{body}"

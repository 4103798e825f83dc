"""
magnitude.py
============
Magnitudini visuali apparenti (fuori atmosfera) dei corpi del sistema solare.

Contenuto:
  • ApparentMagnitudeAlgorithm — cinque varianti di formule pubblicate
  • generic_magnitude()        — sfera lambertiana (Russell 1916), fallback
  • modelli per pianeta        — Mercurio ... Nettuno, Plutone, Sole
  • hg_magnitude()             — sistema H,G (Bowell et al. 1989) per asteroidi
  • comet_magnitude()          — legge di attività cometaria
  • mean_opposition_magnitude()

Dispatch:
  Un modello di corpo riceve (algoritmo, geometria) e restituisce la sua
  magnitudine solo per gli algoritmi che dichiara; per tutti gli altri
  restituisce None e si usa la formula GENERIC.

Formule di riferimento:
  Müller 1893, Astronomical Almanac 1984, Explanatory Supplement 1992 e 2013
  Russell, H.N. 1916, ApJ 43, 173 (sfera lambertiana)
  Meeus, "Astronomical Algorithms" cap. 41 e 45

Unità:
  Distanze in AU, angolo di fase in radianti nella geometria,
  in gradi dentro le formule empiriche.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from core.settings import AU_KM, PARSEC_KM, SUN_MAGNITUDE_1AU


class ApparentMagnitudeAlgorithm(Enum):
    MUELLER_1893 = "Mueller 1893"
    ASTRONOMICAL_ALMANAC_1984 = "Astronomical Almanac 1984"
    EXPLANATORY_SUPPLEMENT_1992 = "Explanatory Supplement 1992"
    EXPLANATORY_SUPPLEMENT_2013 = "Explanatory Supplement 2013"
    GENERIC = "Generic"

    @classmethod
    def parse(cls, value: Union[str, 'ApparentMagnitudeAlgorithm']) -> 'ApparentMagnitudeAlgorithm':
        """Accept a member, its name or its label; anything else is a ValueError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            if key.upper() in cls.__members__:
                return cls[key.upper()]
            for member in cls:
                if member.value.lower() == key.lower():
                    return member
        raise ValueError(f"unknown apparent magnitude algorithm: {value!r}")


MUELLER = ApparentMagnitudeAlgorithm.MUELLER_1893
AA1984 = ApparentMagnitudeAlgorithm.ASTRONOMICAL_ALMANAC_1984
ES1992 = ApparentMagnitudeAlgorithm.EXPLANATORY_SUPPLEMENT_1992
ES2013 = ApparentMagnitudeAlgorithm.EXPLANATORY_SUPPLEMENT_2013
GENERIC = ApparentMagnitudeAlgorithm.GENERIC


# ---------------------------------------------------------------------------
# Geometria
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MagnitudeGeometry:
    """
    Sun-body-observer geometry, all distances in AU.

        phase_angle        : Sun-body-observer angle χ (rad)
        cos_chi            : cos χ
        observer_rq        : |observer|²        (Sun-observer distance²)
        planet_rq          : |body|²            (Sun-body distance²)
        observer_planet_rq : |observer - body|²
        d                  : 5·log10(sqrt(observer_planet_rq·planet_rq))
        shadow_factor      : fraction of sunlight reaching the body (0..1)
        ring_sin_tilt      : sine of the observer's latitude over the ring
                             plane, None for bodies without rings
    """
    phase_angle:        float
    cos_chi:            float
    observer_rq:        float
    planet_rq:          float
    observer_planet_rq: float
    d:                  float
    shadow_factor:      float = 1.0
    ring_sin_tilt:      Optional[float] = None

    @classmethod
    def from_squared_distances(cls, observer_rq: float, planet_rq: float,
                               observer_planet_rq: float,
                               shadow_factor: float = 1.0,
                               ring_sin_tilt: Optional[float] = None) -> 'MagnitudeGeometry':
        denom = 2.0 * math.sqrt(observer_planet_rq * planet_rq)
        cos_chi = (observer_planet_rq + planet_rq - observer_rq) / denom
        cos_chi = max(-1.0, min(1.0, cos_chi))
        d = 5.0 * math.log10(math.sqrt(observer_planet_rq * planet_rq))
        return cls(math.acos(cos_chi), cos_chi, observer_rq, planet_rq,
                   observer_planet_rq, d, shadow_factor, ring_sin_tilt)

    @property
    def phase_deg(self) -> float:
        return math.degrees(self.phase_angle)


# A body model returns a magnitude for the algorithms it knows, else None
MagnitudeModel = Callable[[ApparentMagnitudeAlgorithm, MagnitudeGeometry], Optional[float]]


# ---------------------------------------------------------------------------
# GENERIC: sfera lambertiana
# ---------------------------------------------------------------------------

def generic_magnitude(geom: MagnitudeGeometry, albedo: float, radius_au: float) -> float:
    """
    Lambert sphere of geometric albedo `albedo` and radius `radius_au`
    (Russell 1916, ApJ 43, 173).

        p = (1 - χ/π)·cos χ + sqrt(1 - cos²χ)/π
        F = 2·albedo·r²·p / (3·Δ²·R²) · shadow_factor
        m = -26.73 - 2.5·log10(F)

    The shadow factor scales the reflected flux, so it is applied before
    taking the logarithm.
    """
    chi = geom.phase_angle
    cos_chi = geom.cos_chi
    p = (1.0 - chi / math.pi) * cos_chi + math.sqrt(max(0.0, 1.0 - cos_chi * cos_chi)) / math.pi
    F = (2.0 * albedo * radius_au * radius_au * p
         / (3.0 * geom.observer_planet_rq * geom.planet_rq)
         * geom.shadow_factor)
    return SUN_MAGNITUDE_1AU - 2.5 * math.log10(F)


def compute_visual_magnitude(algorithm: Union[str, ApparentMagnitudeAlgorithm],
                             geom: MagnitudeGeometry,
                             albedo: float,
                             radius_au: float,
                             model: Optional[MagnitudeModel] = None) -> float:
    """
    Visual magnitude of a body: its own model for the algorithms it
    declares, GENERIC for everything else.
    """
    algorithm = ApparentMagnitudeAlgorithm.parse(algorithm)
    if model is not None:
        mag = model(algorithm, geom)
        if mag is not None:
            return mag
    return generic_magnitude(geom, albedo, radius_au)


# ---------------------------------------------------------------------------
# Modelli per pianeta
# ---------------------------------------------------------------------------

def mercury_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    ph, d = g.phase_deg, g.d
    if algorithm is ES2013:
        return -0.6 + d + ((3.02e-6 * ph - 0.000488) * ph + 0.0498) * ph
    if algorithm is ES1992:
        f1 = 1.5 if ph > 150.0 else ph / 100.0
        return -0.36 + d + 3.8 * f1 - 2.73 * f1 * f1 + 2.0 * f1 ** 3
    if algorithm is MUELLER:
        ph50 = ph - 50.0
        return 1.16 + d + 0.02838 * ph50 + 0.0001023 * ph50 * ph50
    if algorithm is AA1984:
        return -0.42 + d + 0.038 * ph - 0.000273 * ph * ph + 0.000002 * ph ** 3
    return None


def venus_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    ph, d = g.phase_deg, g.d
    if algorithm is ES2013:
        if ph < 163.6:
            return -4.47 + d + ((0.13e-6 * ph + 0.000057) * ph + 0.0103) * ph
        # Forward-scattering near inferior conjunction (Mallama)
        return 236.05828 + d - 2.81914 * ph + 8.39034e-3 * ph * ph
    if algorithm is ES1992:
        f1 = ph / 100.0
        return -4.29 + d + 0.09 * f1 + 2.39 * f1 * f1 - 0.65 * f1 ** 3
    if algorithm is MUELLER:
        return -4.00 + d + 0.01322 * ph + 0.0000004247 * ph ** 3
    if algorithm is AA1984:
        return -4.40 + d + 0.0009 * ph + 0.000239 * ph * ph - 0.00000065 * ph ** 3
    return None


def earth_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    ph, d = g.phase_deg, g.d
    if algorithm is ES2013:
        return -3.87 + d + ((0.48e-6 * ph + 0.000019) * ph + 0.0130) * ph
    return None


def mars_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    ph, d = g.phase_deg, g.d
    if algorithm in (ES2013, ES1992, AA1984):
        return -1.52 + d + 0.016 * ph
    if algorithm is MUELLER:
        return -1.30 + d + 0.01486 * ph
    return None


def jupiter_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    ph, d = g.phase_deg, g.d
    if algorithm in (ES2013, AA1984):
        return -9.40 + d + 0.005 * ph
    if algorithm is ES1992:
        return -9.25 + d + 0.005 * ph
    if algorithm is MUELLER:
        return -8.93 + d
    return None


def saturn_rings_term(sin_tilt: Optional[float]) -> float:
    """Brightening by the rings; sin_tilt is sin B of the ring opening."""
    if sin_tilt is None:
        return 0.0
    return -2.6 * abs(sin_tilt) + 1.25 * sin_tilt * sin_tilt


def saturn_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    ph, d = g.phase_deg, g.d
    rings = saturn_rings_term(g.ring_sin_tilt)
    if algorithm in (ES2013, ES1992, AA1984):
        return -8.88 + d + 0.044 * ph + rings
    if algorithm is MUELLER:
        return -8.68 + d + 0.044 * ph + rings
    return None


def uranus_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    ph, d = g.phase_deg, g.d
    if algorithm is ES2013:
        return -7.19 + d + 0.002 * ph
    if algorithm is ES1992:
        return -7.19 + d + 0.0028 * ph
    if algorithm is MUELLER:
        return -6.85 + d
    if algorithm is AA1984:
        return -7.19 + d
    return None


def neptune_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    d = g.d
    if algorithm in (ES2013, ES1992, AA1984):
        return -6.87 + d
    if algorithm is MUELLER:
        return -7.05 + d
    return None


def pluto_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    ph, d = g.phase_deg, g.d
    if algorithm in (ES2013, MUELLER):
        return -1.01 + d
    if algorithm is ES1992:
        return -1.01 + d + 0.041 * ph
    if algorithm is AA1984:
        return -1.00 + d
    return None


# Lowest shadow factor seen from Earth during a total solar eclipse
_SUN_MIN_SHADOW_FACTOR = 0.000128

SUN_ABSOLUTE_MAGNITUDE = 4.83


def sun_model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
    """Same for every algorithm: absolute magnitude and distance in parsecs."""
    dist_pc = math.sqrt(g.observer_rq) * AU_KM / PARSEC_KM
    shadow = max(g.shadow_factor, _SUN_MIN_SHADOW_FACTOR)
    return SUN_ABSOLUTE_MAGNITUDE + 5.0 * (math.log10(dist_pc) - 1.0) - 2.5 * math.log10(shadow)


# ---------------------------------------------------------------------------
# Corpi minori
# ---------------------------------------------------------------------------

# Slope values at or below this mean "no H,G data"
NO_SLOPE = -10.0
# Absolute magnitudes at or below this mean "unknown"
NO_ABSOLUTE_MAGNITUDE = -99.0


def hg_magnitude(H: float, G: float, g: MagnitudeGeometry) -> float:
    """IAU two-parameter H,G magnitude (Bowell et al. 1989)."""
    half_tan = math.tan(0.5 * g.phase_angle)
    phi1 = math.exp(-3.33 * half_tan ** 0.63)
    phi2 = math.exp(-1.87 * half_tan ** 1.22)
    return (H - 2.5 * math.log10((1.0 - G) * phi1 + G * phi2)
            + 5.0 * math.log10(math.sqrt(g.planet_rq * g.observer_planet_rq)))


def minor_planet_model(H: float, G: float) -> MagnitudeModel:
    def model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
        if G < NO_SLOPE + 0.01:
            return None
        return hg_magnitude(H, G, g)
    return model


def comet_magnitude(H: float, slope: float, g: MagnitudeGeometry) -> float:
    """
    m = H + 5·log10(Δ) + 2.5·slope·log10(r)
    (XEphem "g,k" model; slope is the MPC activity parameter)
    """
    delta = math.sqrt(g.observer_planet_rq)
    r = math.sqrt(g.planet_rq)
    return H + 5.0 * math.log10(delta) + 2.5 * slope * math.log10(r)


def comet_model(H: float, slope: float) -> MagnitudeModel:
    def model(algorithm: ApparentMagnitudeAlgorithm, g: MagnitudeGeometry) -> Optional[float]:
        if slope < NO_SLOPE + 0.01:
            return None
        return comet_magnitude(H, slope, g)
    return model


def mean_opposition_magnitude(absolute_magnitude: float, semi_major_axis: float) -> float:
    """Magnitude at a mean opposition; 100 when it can not be estimated."""
    a = semi_major_axis
    if absolute_magnitude <= NO_ABSOLUTE_MAGNITUDE or a <= 1.0:
        return 100.0
    return absolute_magnitude + 5.0 * math.log10(a * (a - 1.0))

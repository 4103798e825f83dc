"""
Luna — teoria perturbativa (Jean Meeus, Astronomical Algorithms, cap. 47).

Serie troncata ai termini principali delle tabelle 47.A e 47.B
(ELP-2000/82 semplificata): precisione ~10" in longitudine, ~4" in
latitudine, ~20 km in distanza.

La posizione è geocentrica (eclittica della data), poi precessata a J2000.
Planet somma la posizione eliocentrica della Terra.
"""

from __future__ import annotations
import math
from typing import Tuple

import numpy as np

from core.astro_time import julian_centuries
from core.coords import wrap_deg
from core.frames import precession_matrix
from core.settings import AU_KM
from .orbit import Orbit, PositionVelocity, finite_difference_velocity

# Mean distance Earth-Moon (km), ELP-2000/82
MEAN_DISTANCE_KM = 385000.56

# ---------------------------------------------------------------------------
# Tabella 47.A: longitudine (Σl, 1e-6 deg) e distanza (Σr, 1e-3 km)
# colonne: D, M, M', F, Σl, Σr
# ---------------------------------------------------------------------------

_TABLE_47A = (
    (0,  0,  1,  0, 6288774, -20905355),
    (2,  0, -1,  0, 1274027,  -3699111),
    (2,  0,  0,  0,  658314,  -2955968),
    (0,  0,  2,  0,  213618,   -569925),
    (0,  1,  0,  0, -185116,     48888),
    (0,  0,  0,  2, -114332,     -3149),
    (2,  0, -2,  0,   58793,    246158),
    (2, -1, -1,  0,   57066,   -152138),
    (2,  0,  1,  0,   53322,   -170733),
    (2, -1,  0,  0,   45758,   -204586),
    (0,  1, -1,  0,  -40923,   -129620),
    (1,  0,  0,  0,  -34720,    108743),
    (0,  1,  1,  0,  -30383,    104755),
    (2,  0,  0, -2,   15327,     10321),
    (0,  0,  1,  2,  -12528,         0),
    (0,  0,  1, -2,   10980,     79661),
    (4,  0, -1,  0,   10675,    -34782),
    (0,  0,  3,  0,   10034,    -23210),
    (4,  0, -2,  0,    8548,    -21636),
    (2,  1, -1,  0,   -7888,     24208),
    (2,  1,  0,  0,   -6766,     30824),
    (1,  0, -1,  0,   -5163,     -8379),
    (1,  1,  0,  0,    4987,    -16675),
    (2, -1,  1,  0,    4036,    -12831),
    (2,  0,  2,  0,    3994,    -10445),
    (4,  0,  0,  0,    3861,    -11650),
    (2,  0, -3,  0,    3665,     14403),
    (0,  1, -2,  0,   -2689,     -7003),
    (2,  0, -1,  2,   -2602,         0),
    (2, -1, -2,  0,    2390,     10056),
    (1,  0,  1,  0,   -2348,      6322),
    (2, -2,  0,  0,    2236,     -9884),
)

# ---------------------------------------------------------------------------
# Tabella 47.B: latitudine (Σb, 1e-6 deg)
# colonne: D, M, M', F, Σb
# ---------------------------------------------------------------------------

_TABLE_47B = (
    (0,  0,  0,  1, 5128122),
    (0,  0,  1,  1,  280602),
    (0,  0,  1, -1,  277693),
    (2,  0,  0, -1,  173237),
    (2,  0, -1,  1,   55413),
    (2,  0, -1, -1,   46271),
    (2,  0,  0,  1,   32573),
    (0,  0,  2,  1,   17198),
    (2,  0,  1, -1,    9266),
    (0,  0,  2, -1,    8822),
    (2, -1,  0, -1,    8216),
    (2,  0, -2, -1,    4324),
    (2,  0,  1,  1,    4200),
    (2,  1,  0, -1,   -3359),
    (2, -1, -1,  1,    2463),
    (2, -1,  0,  1,    2211),
    (2, -1, -1, -1,    2065),
    (0,  1, -1, -1,   -1870),
    (4,  0, -1, -1,    1828),
    (0,  1,  0,  1,   -1794),
)


def _eccentricity_factor(m: int, E: float) -> float:
    if m == 0:
        return 1.0
    if abs(m) == 1:
        return E
    return E * E


def geocentric_ecliptic(jde: float) -> Tuple[float, float, float]:
    """
    Geocentric ecliptic longitude, latitude (degrees, mean ecliptic of date)
    and distance (km) of the Moon.
    """
    T = julian_centuries(jde)
    T2, T3, T4 = T*T, T**3, T**4

    # Fundamental arguments (degrees)
    Lp = wrap_deg(218.3164477 + 481267.88123421*T - 0.0015786*T2 + T3/538841.0 - T4/65194000.0)
    D  = wrap_deg(297.8501921 + 445267.1114034*T - 0.0018819*T2 + T3/545868.0 - T4/113065000.0)
    M  = wrap_deg(357.5291092 + 35999.0502909*T - 0.0001536*T2 + T3/24490000.0)
    Mp = wrap_deg(134.9633964 + 477198.8675055*T + 0.0087414*T2 + T3/69699.0 - T4/14712000.0)
    F  = wrap_deg(93.2720950 + 483202.0175233*T - 0.0036539*T2 - T3/3526000.0 + T4/863310000.0)
    E  = 1.0 - 0.002516*T - 0.0000074*T2

    A1 = math.radians(wrap_deg(119.75 + 131.849*T))
    A2 = math.radians(wrap_deg(53.09 + 479264.290*T))
    A3 = math.radians(wrap_deg(313.45 + 481266.484*T))

    D_r, M_r, Mp_r, F_r, Lp_r = (math.radians(x) for x in (D, M, Mp, F, Lp))

    sum_l = 0.0
    sum_r = 0.0
    for d, m, mp, f, sl, sr in _TABLE_47A:
        arg = d*D_r + m*M_r + mp*Mp_r + f*F_r
        k = _eccentricity_factor(m, E)
        sum_l += sl * k * math.sin(arg)
        sum_r += sr * k * math.cos(arg)

    sum_b = 0.0
    for d, m, mp, f, sb in _TABLE_47B:
        arg = d*D_r + m*M_r + mp*Mp_r + f*F_r
        sum_b += sb * _eccentricity_factor(m, E) * math.sin(arg)

    # Venus, Jupiter and flattening of the Earth
    sum_l += 3958*math.sin(A1) + 1962*math.sin(Lp_r - F_r) + 318*math.sin(A2)
    sum_b += (-2235*math.sin(Lp_r) + 382*math.sin(A3)
              + 175*math.sin(A1 - F_r) + 175*math.sin(A1 + F_r)
              + 127*math.sin(Lp_r - Mp_r) - 115*math.sin(Lp_r + Mp_r))

    lam = wrap_deg(Lp + sum_l / 1e6)
    beta = sum_b / 1e6
    delta_km = MEAN_DISTANCE_KM + sum_r / 1000.0
    return lam, beta, delta_km


class LunarOrbit(Orbit):
    """Geocentric orbit of the Moon in the VSOP87 frame."""

    def _position(self, jde: float) -> np.ndarray:
        lam, beta, delta_km = geocentric_ecliptic(jde)
        lam_r, beta_r = math.radians(lam), math.radians(beta)
        r = delta_km / AU_KM
        cb = math.cos(beta_r)
        pos = np.array([r*cb*math.cos(lam_r), r*cb*math.sin(lam_r), r*math.sin(beta_r)])
        return precession_matrix(julian_centuries(jde)) @ pos

    def position_at(self, jde: float) -> PositionVelocity:
        return self._position(jde), finite_difference_velocity(self._position, jde)

    @property
    def semi_major_axis(self) -> float:
        return MEAN_DISTANCE_KM / AU_KM

    @property
    def eccentricity(self) -> float:
        return 0.0549

    @property
    def sidereal_period(self) -> float:
        return 27.321661714

    def __repr__(self) -> str:
        return "LunarOrbit()"

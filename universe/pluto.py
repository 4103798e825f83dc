"""
Plutone — teoria di Meeus, "Astronomical Algorithms" cap. 37.

Serie di 43 termini periodici nelle longitudini medie di Giove (J),
Saturno (S) e Plutone (P). Il risultato è eliocentrico sull'eclittica ed
equinozio J2000, quindi già nel sistema VSOP87.

Valida tra il 1885 e il 2099; fuori intervallo la serie non converge
alla posizione reale e l'errore cresce rapidamente.
"""

from __future__ import annotations
import math

import numpy as np

from core.astro_time import julian_centuries
from core.coords import sph_to_rect
from .orbit import Orbit, PositionVelocity, finite_difference_velocity

# Validity interval, JDE (1885-01-01 .. 2099-12-31)
VALID_FROM_JDE = 2409543.5
VALID_TO_JDE = 2488069.5

# ---------------------------------------------------------------------------
# Tabella 37.A
# colonne: J, S, P, longitudine (sin, cos), latitudine (sin, cos),
#          raggio (sin, cos); angoli in 1e-6 deg, raggio in 1e-7 AU
# ---------------------------------------------------------------------------

_TABLE_37A = (
    (0,  0,  1, -19799805,  19850055,  -5452852, -14974862,  66865439,  68951812),
    (0,  0,  2,    897144,  -4954829,   3527812,   1672790, -11827535,   -332538),
    (0,  0,  3,    611149,   1211027,  -1050748,    327647,   1593179,  -1438890),
    (0,  0,  4,   -341243,   -189585,    178690,   -292153,    -18444,    483220),
    (0,  0,  5,    129287,    -34992,     18650,    100340,    -65977,    -85431),
    (0,  0,  6,    -38164,     30893,    -30697,    -25823,     31174,     -6032),
    (0,  1, -1,     20442,     -9987,      4878,     11248,     -5794,     22161),
    (0,  1,  0,     -4063,     -5071,       226,       -64,      4601,      4032),
    (0,  1,  1,     -6016,     -3336,      2030,      -836,     -1729,       234),
    (0,  1,  2,     -3956,      3039,        69,      -604,      -415,       702),
    (0,  1,  3,      -667,      3572,      -247,      -567,       239,       723),
    (0,  2, -2,      1276,       501,       -57,         1,        67,       -67),
    (0,  2, -1,      1152,      -917,      -122,       175,      1034,      -451),
    (0,  2,  0,       630,     -1277,       -49,      -164,      -129,       504),
    (1, -1,  0,      2571,      -459,      -197,       199,       480,      -231),
    (1, -1,  1,       899,     -1449,       -25,       217,         2,      -441),
    (1,  0, -3,     -1016,      1043,       589,      -248,     -3359,       265),
    (1,  0, -2,     -2343,     -1012,      -269,       711,      7856,     -7832),
    (1,  0, -1,      7042,       788,       185,       193,        36,     45763),
    (1,  0,  0,      1199,      -338,       315,       807,      8663,      8547),
    (1,  0,  1,       418,       -67,      -130,       -43,      -809,      -769),
    (1,  0,  2,       120,      -274,         5,         3,       263,      -144),
    (1,  0,  3,       -60,      -159,         2,        17,      -126,        32),
    (1,  0,  4,       -82,       -29,         2,         5,       -35,       -16),
    (1,  1, -3,       -36,       -20,         2,         3,       -19,        -4),
    (1,  1, -2,       -40,         7,         3,         1,       -15,         8),
    (1,  1, -1,       -14,        22,         2,        -1,        -4,        12),
    (1,  1,  0,         4,        13,         1,        -1,         5,         6),
    (1,  1,  1,         5,         2,         0,        -1,         3,         1),
    (1,  1,  3,        -1,         0,         0,         0,         6,        -2),
    (2,  0, -6,         2,         0,         0,        -2,         2,         2),
    (2,  0, -5,        -4,         5,         2,         2,        -2,        -2),
    (2,  0, -4,         4,        -7,        -7,         0,        14,        13),
    (2,  0, -3,        14,        24,        10,        -8,       -63,        13),
    (2,  0, -2,       -49,       -34,        -3,        20,       136,      -236),
    (2,  0, -1,       163,       -48,         6,         5,       273,      1065),
    (2,  0,  0,         9,        24,        14,        17,       251,       149),
    (2,  0,  1,        -4,         1,        -2,         0,       -25,        -9),
    (2,  0,  2,        -3,         1,         0,         0,         9,        -2),
    (2,  0,  3,         1,         3,         0,         0,        -8,         7),
    (3,  0, -2,        -3,        -1,         0,         1,         2,       -10),
    (3,  0, -1,         5,        -3,         0,         0,        19,        35),
    (3,  0,  0,         0,         0,         1,         0,        10,         2),
)


class PlutoOrbit(Orbit):
    """Heliocentric orbit of Pluto from the Meeus periodic series."""

    def _position(self, jde: float) -> np.ndarray:
        t = julian_centuries(jde)
        J = 34.35 + 3034.9057 * t
        S = 50.08 + 1222.1138 * t
        P = 238.96 + 144.9600 * t

        lon = lat = rad = 0.0
        for j, s, p, ls, lc, bs, bc, rs, rc in _TABLE_37A:
            a = math.radians(j * J + s * S + p * P)
            sa, ca = math.sin(a), math.cos(a)
            lon += ls * sa + lc * ca
            lat += bs * sa + bc * ca
            rad += rs * sa + rc * ca

        L = math.radians(238.958116 + 144.96 * t + lon * 1e-6)
        B = math.radians(-3.908239 + lat * 1e-6)
        R = 40.7241346 + rad * 1e-7
        return sph_to_rect(L, B, R)

    @staticmethod
    def covers(jde: float) -> bool:
        return VALID_FROM_JDE <= jde <= VALID_TO_JDE

    def position_at(self, jde: float) -> PositionVelocity:
        return self._position(jde), finite_difference_velocity(self._position, jde)

    @property
    def semi_major_axis(self) -> float:
        return 39.48168677

    @property
    def eccentricity(self) -> float:
        return 0.24880766

    @property
    def sidereal_period(self) -> float:
        return 90797.0

    def __repr__(self) -> str:
        return "PlutoOrbit()"

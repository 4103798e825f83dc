"""
Fixed reference-frame matrices.

  MAT_J2000_TO_VSOP87   equatorial J2000 -> ecliptic J2000 (VSOP87 frame)
  MAT_VSOP87_TO_J2000   inverse (transpose)
  precession_matrix(T)  ecliptic of date -> ecliptic of J2000 (Meeus 21.5)
  mean_obliquity(T)     obliquity of the ecliptic of date (Meeus 22.2)

Matrices are numpy 3x3 arrays built with scipy Rotation.
scipy's from_euler rotates the vector (active), which is the convention
of the Rx/Rz matrices used here: Rx(a) = [[1,0,0],[0,c,-s],[0,s,c]].
"""

from __future__ import annotations
import math

import numpy as np
from scipy.spatial.transform import Rotation

from .settings import EPS_0_DEG

_ARCSEC = math.pi / 648000.0

# Frame bias between the VSOP87 dynamical equinox and the ICRS, degrees
_VSOP87_EQUINOX_OFFSET_DEG = 0.0000275


def _rx(angle: float) -> Rotation:
    return Rotation.from_euler("x", angle)


def _rz(angle: float) -> Rotation:
    return Rotation.from_euler("z", angle)


MAT_J2000_TO_VSOP87: np.ndarray = (
    _rx(-math.radians(EPS_0_DEG)) * _rz(math.radians(_VSOP87_EQUINOX_OFFSET_DEG))
).as_matrix()

MAT_VSOP87_TO_J2000: np.ndarray = MAT_J2000_TO_VSOP87.T.copy()

MAT_J2000_TO_VSOP87.setflags(write=False)
MAT_VSOP87_TO_J2000.setflags(write=False)


def precession_matrix(T: float) -> np.ndarray:
    """
    Rotation from the mean ecliptic and equinox of date to J2000.

    T: Julian centuries of the date from J2000. Meeus eq. 21.5 with the
    date as starting epoch and J2000 as final epoch (t = -T).
    """
    if T == 0.0:
        return np.identity(3)
    t = -T
    eta = ((47.0029 - 0.06603*T + 0.000598*T*T) * t
           + (-0.03302 + 0.000598*T) * t*t
           + 0.000060 * t**3) * _ARCSEC
    pi_ = (math.radians(174.876384)
           + (3289.4789*T + 0.60622*T*T
              - (869.8089 + 0.50491*T) * t
              + 0.03536 * t*t) * _ARCSEC)
    p = ((5029.0966 + 2.22226*T - 0.000042*T*T) * t
         + (1.11113 - 0.000042*T) * t*t
         - 0.000006 * t**3) * _ARCSEC
    return (_rz(p + pi_) * _rx(-eta) * _rz(-pi_)).as_matrix()


def mean_obliquity(T: float) -> float:
    """Mean obliquity of the ecliptic of date in radians (Meeus 22.2)."""
    seconds = 46.8150*T + 0.00059*T*T - 0.001813*T**3
    return math.radians(23.4392911111 - seconds / 3600.0)


def ecliptic_to_equatorial_matrix(obliquity: float) -> np.ndarray:
    """Rotate ecliptic rectangular coordinates to equatorial for the given obliquity."""
    return _rx(obliquity).as_matrix()

"""
Rotational pole orientation of a body in the VSOP87 frame.

The IAU catalogues give the north pole of rotation as (RA, Dec) in the
equatorial J2000 frame. Planet geometry (ring tilt, shadow cones) needs it
as obliquity and ascending node on the ecliptic J2000 plane.
"""

from __future__ import annotations
import math
from typing import NamedTuple

import numpy as np

from .coords import sph_to_rect, rect_to_sph, wrap_rad
from .frames import MAT_J2000_TO_VSOP87

_HALF_PI = 0.5 * math.pi


class RotationElements(NamedTuple):
    """Angles in radians."""
    obliquity: float
    ascending_node: float
    offset: float = 0.0

    def pole_vector(self) -> np.ndarray:
        """Unit vector of the rotation pole in the VSOP87 frame."""
        so, co = math.sin(self.obliquity), math.cos(self.obliquity)
        sn, cn = math.sin(self.ascending_node), math.cos(self.ascending_node)
        return np.array([so * sn, -so * cn, co])


def compute(pole_ra: float, pole_dec: float, w0: float = 0.0) -> RotationElements:
    """
    Pole (RA, Dec) in radians -> (obliquity, ascending node, offset).

    w0 is the prime meridian angle at epoch; the returned offset refers it
    to the ecliptic longitude of the pole.
    """
    pole = MAT_J2000_TO_VSOP87 @ sph_to_rect(pole_ra, pole_dec)
    lng, lat = rect_to_sph(pole)
    obliquity = _HALF_PI - lat
    ascending_node = wrap_rad(lng + _HALF_PI)
    return RotationElements(obliquity, ascending_node, w0 + lng)


def compute_deg(pole_ra_deg: float, pole_dec_deg: float,
                w0_deg: float = 0.0) -> RotationElements:
    """Same as compute() with catalogue angles in degrees."""
    return compute(math.radians(pole_ra_deg), math.radians(pole_dec_deg),
                   math.radians(w0_deg))

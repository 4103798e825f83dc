"""
Observer — luogo e istante di osservazione.

Un osservatore sta al centro del suo corpo (home, di solito la Terra):
non c'è correzione topocentrica né di tempo luce. Latitudine e
longitudine servono solo per l'orientazione alt-az.

jd è il Julian Date in UT; jde (TT) si ottiene con ΔT.
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Tuple, Union

import numpy as np

from atmosphere.extinction import Extinction
from atmosphere.refraction import Refraction
from core.astro_time import jd_to_jde, julian_centuries, lst_deg
from core.coords import cart_to_sph, equatorial_to_horizontal, horizontal_to_vector
from core.frames import (
    MAT_VSOP87_TO_J2000, ecliptic_to_equatorial_matrix, mean_obliquity,
    precession_matrix,
)
from core.settings import DEFAULT_MAGNITUDE_ALGORITHM
from .magnitude import ApparentMagnitudeAlgorithm

if TYPE_CHECKING:
    from .planet import Planet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Observer:
    home:          'Planet'
    jd:            float
    latitude_deg:  float = 0.0
    longitude_deg: float = 0.0      # east positive
    altitude_m:    float = 0.0
    algorithm:     Union[str, ApparentMagnitudeAlgorithm] = DEFAULT_MAGNITUDE_ALGORITHM
    extinction:    Extinction = field(default_factory=Extinction)
    refraction:    Refraction = field(default_factory=Refraction)

    def __post_init__(self):
        if not -90.0 <= self.latitude_deg <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude_deg}")
        object.__setattr__(self, "algorithm", ApparentMagnitudeAlgorithm.parse(self.algorithm))
        logger.debug("Observer on %s at JD %.5f (%.4f, %.4f), %s",
                     self.home.name, self.jd, self.latitude_deg,
                     self.longitude_deg, self.algorithm.value)

    @property
    def jde(self) -> float:
        return jd_to_jde(self.jd)

    def heliocentric_position(self) -> np.ndarray:
        return self.home.heliocentric_position(self.jde)

    # ------------------------------------------------------------------

    def equatorial_j2000(self, body: 'Planet') -> np.ndarray:
        """Observer->body vector, equatorial J2000 (AU)."""
        rel = body.heliocentric_position(self.jde) - self.heliocentric_position()
        return MAT_VSOP87_TO_J2000 @ rel

    def equatorial_of_date(self, body: 'Planet') -> np.ndarray:
        """Observer->body vector, mean equator and equinox of date (AU)."""
        rel = body.heliocentric_position(self.jde) - self.heliocentric_position()
        T = julian_centuries(self.jde)
        ecl_of_date = precession_matrix(T).T @ rel
        return ecliptic_to_equatorial_matrix(mean_obliquity(T)) @ ecl_of_date

    def radec_of_date(self, body: 'Planet') -> Tuple[float, float]:
        """(RA, Dec) in degrees, mean equinox of date."""
        x, y, z = self.equatorial_of_date(body)
        return cart_to_sph(float(x), float(y), float(z))

    def horizontal(self, body: 'Planet') -> Tuple[float, float]:
        """Geometric (az, alt) in degrees, azimuth from north through east."""
        ra, dec = self.radec_of_date(body)
        return equatorial_to_horizontal(ra, dec, self.latitude_deg,
                                        lst_deg(self.jd, self.longitude_deg))

    def altaz_vector(self, body: 'Planet', refract: bool = False) -> np.ndarray:
        """Unit alt-az vector: x north, y east, z up."""
        az, alt = self.horizontal(body)
        vec = horizontal_to_vector(az, alt)
        if refract:
            vec = self.refraction.forward(vec)
        return vec

    def is_above_horizon(self, body: 'Planet') -> bool:
        return bool(self.altaz_vector(body)[2] > 0.0)

    def altitude_deg(self, body: 'Planet', refract: bool = False) -> float:
        z = float(self.altaz_vector(body, refract)[2])
        return math.degrees(math.asin(max(-1.0, min(1.0, z))))

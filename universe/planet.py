"""
planet.py
=========
Planet — aggregato di un corpo del sistema solare.

Un Planet unisce:
  • orbita relativa al genitore (Sole, Terra per la Luna)
  • costanti fisiche (raggio equatoriale, schiacciamento, albedo)
  • polo di rotazione (RA/Dec J2000) -> obliquità e nodo ascendente
  • modello di magnitudine specifico, se esiste

La posizione eliocentrica si ottiene risalendo la catena dei genitori.
Le magnitudini richiedono un Observer (vedi observer.py): la geometria
Sole-corpo-osservatore è costruita qui e passata a magnitude.py.

Unità: AU, AU/giorno, radianti salvo dove indicato (_deg).
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

import numpy as np

from core.rotation import RotationElements, compute_deg
from core.settings import AU_KM
from .magnitude import (
    MagnitudeGeometry, MagnitudeModel, NO_ABSOLUTE_MAGNITUDE,
    compute_visual_magnitude,
)
from .orbit import Orbit, PositionVelocity

if TYPE_CHECKING:
    from .observer import Observer

# Shadow factor inside the umbra: the Moon keeps the light refracted
# by the Earth's atmosphere
_MOON_UMBRA_FACTOR = 2.718e-5
_UMBRA_FACTOR = 1e-9

# Below this altitude airmass() reports 0 (deg)
_AIRMASS_MIN_ALTITUDE_DEG = -2.0


class PlanetType(Enum):
    STAR         = "star"
    PLANET       = "planet"
    MOON         = "moon"
    DWARF_PLANET = "dwarf_planet"
    ASTEROID     = "asteroid"
    COMET        = "comet"


@dataclass(frozen=True)
class Ring:
    """Ring system, radii in AU."""
    min_radius: float
    max_radius: float

    @classmethod
    def from_km(cls, min_km: float, max_km: float) -> 'Ring':
        return cls(min_km / AU_KM, max_km / AU_KM)

    @property
    def size(self) -> float:
        return self.max_radius


@dataclass(frozen=True, eq=False)
class Planet:
    name:            str
    planet_type:     PlanetType
    radius:          float                  # equatorial, AU
    orbit:           Orbit
    parent:          Optional['Planet'] = None
    oblateness:      float = 0.0
    albedo:          float = 0.3
    ring:            Optional[Ring] = None
    pole_ra:         Optional[float] = None  # deg, J2000
    pole_dec:        Optional[float] = None  # deg, J2000
    absolute_magnitude:        float = NO_ABSOLUTE_MAGNITUDE
    mean_opposition_magnitude: float = 100.0
    sidereal_day:    Optional[float] = None  # days, negative = retrograde
    sidereal_period: Optional[float] = None  # days
    magnitude_model: Optional[MagnitudeModel] = None

    def __post_init__(self):
        if not self.radius > 0.0:
            raise ValueError(f"{self.name}: radius must be positive, got {self.radius}")
        if not 0.0 <= self.oblateness < 1.0:
            raise ValueError(f"{self.name}: oblateness must be in [0, 1), got {self.oblateness}")
        if (self.pole_ra is None) != (self.pole_dec is None):
            raise ValueError(f"{self.name}: pole needs both RA and Dec")

    def __repr__(self) -> str:
        return f"Planet({self.name!r}, {self.planet_type.value})"

    # ------------------------------------------------------------------
    # Gerarchia e posizione
    # ------------------------------------------------------------------

    @property
    def root(self) -> 'Planet':
        body = self
        while body.parent is not None:
            body = body.parent
        return body

    @property
    def polar_radius(self) -> float:
        return self.radius * (1.0 - self.oblateness)

    def compute_position(self, jde: float) -> PositionVelocity:
        """Heliocentric position and velocity (VSOP87 frame)."""
        pos, vel = self.orbit.position_at(jde)
        if self.parent is not None:
            ppos, pvel = self.parent.compute_position(jde)
            pos = pos + ppos
            vel = vel + pvel
        return pos, vel

    def heliocentric_position(self, jde: float) -> np.ndarray:
        return self.compute_position(jde)[0]

    # ------------------------------------------------------------------
    # Rotazione
    # ------------------------------------------------------------------

    @property
    def rotation(self) -> Optional[RotationElements]:
        if self.pole_ra is None:
            return None
        return compute_deg(self.pole_ra, self.pole_dec)

    def ring_sin_tilt(self, observer: 'Observer') -> Optional[float]:
        """
        Sine of the observer's elevation over the ring plane.
        None when the body has no ring or no known pole.
        """
        rot = self.rotation
        if self.ring is None or rot is None:
            return None
        rel = self.heliocentric_position(observer.jde) - observer.heliocentric_position()
        norm = float(np.linalg.norm(rel))
        if norm == 0.0:
            return None
        return float(-np.dot(rot.pole_vector(), rel / norm))

    # ------------------------------------------------------------------
    # Ombra
    # ------------------------------------------------------------------

    def shadow_factor(self, observer: 'Observer') -> float:
        """
        Fraction of sunlight reaching the body, reduced when it lies in
        the shadow cone of its parent (lunar eclipse).
        """
        parent = self.parent
        if parent is None or parent.parent is None:
            return 1.0

        jde = observer.jde
        pos = self.heliocentric_position(jde)
        parent_pos = parent.heliocentric_position(jde)
        parent_rq = float(np.dot(parent_pos, parent_pos))
        pos_times_parent = float(np.dot(pos, parent_pos))
        if pos_times_parent <= parent_rq:
            return 1.0

        sun_radius = self.root.radius
        sun_minus_parent = sun_radius - parent.radius
        quot = pos_times_parent / parent_rq
        planet_rq = float(np.dot(pos, pos))
        perp_sq = max(0.0, planet_rq - pos_times_parent * quot)
        ds = (sun_radius - sun_minus_parent * quot
              - math.sqrt((1.0 - sun_minus_parent / math.sqrt(parent_rq)) * perp_sq))

        if ds >= self.radius:
            return _MOON_UMBRA_FACTOR if self.planet_type is PlanetType.MOON else _UMBRA_FACTOR
        if ds > -self.radius:
            ds /= self.radius
            return 0.5 - (math.asin(ds) + ds * math.sqrt(1.0 - ds * ds)) / math.pi
        return 1.0

    # ------------------------------------------------------------------
    # Geometria di fase
    # ------------------------------------------------------------------

    def magnitude_geometry(self, observer: 'Observer') -> MagnitudeGeometry:
        jde = observer.jde
        obs_pos = observer.heliocentric_position()
        pos = self.heliocentric_position(jde)
        rel = pos - obs_pos

        observer_rq = float(np.dot(obs_pos, obs_pos))
        planet_rq = float(np.dot(pos, pos))
        observer_planet_rq = float(np.dot(rel, rel))
        shadow = self.shadow_factor(observer)

        if self.parent is None:
            # The Sun: no phase, distance modulus undefined
            return MagnitudeGeometry(0.0, 1.0, observer_rq, planet_rq,
                                     observer_planet_rq, 0.0, shadow, None)

        if observer_planet_rq == 0.0:
            # Observer standing on this body: full disk, zero distance
            return MagnitudeGeometry(0.0, 1.0, observer_rq, planet_rq,
                                     0.0, 0.0, shadow, None)

        return MagnitudeGeometry.from_squared_distances(
            observer_rq, planet_rq, observer_planet_rq,
            shadow_factor=shadow,
            ring_sin_tilt=self.ring_sin_tilt(observer),
        )

    def phase_angle(self, observer: 'Observer') -> float:
        return self.magnitude_geometry(observer).phase_angle

    def illumination(self, observer: 'Observer') -> float:
        """Illuminated fraction of the disk, 0..1."""
        return 0.5 * abs(1.0 + self.magnitude_geometry(observer).cos_chi)

    def elongation(self, observer: 'Observer') -> float:
        """Sun-observer-body angle (rad)."""
        g = self.magnitude_geometry(observer)
        if g.observer_rq == 0.0 or g.observer_planet_rq == 0.0:
            return 0.0
        c = ((g.observer_planet_rq + g.observer_rq - g.planet_rq)
             / (2.0 * math.sqrt(g.observer_planet_rq * g.observer_rq)))
        return math.acos(max(-1.0, min(1.0, c)))

    def distance(self, observer: 'Observer') -> float:
        """Observer-body distance (AU)."""
        rel = self.heliocentric_position(observer.jde) - observer.heliocentric_position()
        return float(np.linalg.norm(rel))

    def angular_size(self, observer: 'Observer') -> float:
        """Apparent diameter in degrees, ring included."""
        r = self.ring.size if self.ring is not None else self.radius
        return 2.0 * math.degrees(math.atan2(r, self.distance(observer)))

    # ------------------------------------------------------------------
    # Magnitudine
    # ------------------------------------------------------------------

    def visual_magnitude(self, observer: 'Observer') -> float:
        """
        Magnitude above the atmosphere with the observer's algorithm.
        The observer's home body has no apparent magnitude: math.inf.
        """
        geometry = self.magnitude_geometry(observer)
        if geometry.observer_planet_rq == 0.0:
            return math.inf
        return compute_visual_magnitude(
            observer.algorithm,
            geometry,
            self.albedo,
            self.radius,
            self.magnitude_model,
        )

    def visual_magnitude_with_extinction(self, observer: 'Observer') -> float:
        """Magnitude seen through the observer's atmosphere."""
        mag = self.visual_magnitude(observer)
        if math.isinf(mag):
            return mag
        altaz = observer.altaz_vector(self)
        if altaz[2] > 0.0:
            return observer.extinction.forward(altaz, mag)
        return mag

    def airmass(self, observer: 'Observer') -> float:
        """Airmass along the refracted line of sight, 0 below the horizon."""
        altaz = observer.altaz_vector(self, refract=True)
        if math.degrees(math.asin(max(-1.0, min(1.0, altaz[2])))) > _AIRMASS_MIN_ALTITUDE_DEG:
            return observer.extinction.airmass(float(altaz[2]), True)
        return 0.0

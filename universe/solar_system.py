"""
solar_system.py
===============
Catalogo dei corpi del sistema solare: Sole, otto pianeti, Luna, Plutone.

build_solar_system() restituisce un SolarSystem con la gerarchia
  Sole ← pianeti, Plutone
  Terra ← Luna

Orbite:
  • pianeti maggiori -> Vsop87Orbit (tabelle in data/vsop87/*.csv)
  • pianeti senza tabella -> MeanElementsOrbit (Standish 1992, ~1' tra il 1800 e il 2050)
  • Luna -> LunarOrbit, Plutone -> PlutoOrbit

Costanti fisiche: raggi equatoriali IAU/WGCCRE, poli di rotazione
RA/Dec J2000 (gradi), periodi in giorni (giorno siderale negativo =
rotazione retrograda).
"""

from __future__ import annotations
import logging
from typing import Dict, Iterator, List, Optional

from core.settings import AU_KM
from .lunar import LunarOrbit
from .magnitude import (
    earth_model, jupiter_model, mars_model, mercury_model, neptune_model,
    pluto_model, saturn_model, sun_model, uranus_model, venus_model,
)
from .orbit import MeanElementsOrbit, Orbit, OrbitalElements, StaticOrbit
from .planet import Planet, PlanetType, Ring
from .pluto import PlutoOrbit
from .vsop87 import Vsop87Orbit, available_bodies

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Elementi medi (Standish 1992, epoca J2000, variazioni per secolo)
# Format: (a, a_dot, e, e_dot, i, i_dot, L, L_dot, w_bar, w_bar_dot, Om, Om_dot)
# ---------------------------------------------------------------------------

_MEAN_ELEMENTS = {
    "mercury": (0.38709927, 0.00000037,
                0.20563593, 0.00001906,
                7.00497902, -0.00594749,
                252.25032350, 149472.67411175,
                77.45779628, 0.16047689,
                48.33076593, -0.12534081),
    "venus":   (0.72333566, 0.00000390,
                0.00677672, -0.00004107,
                3.39467605, -0.00078890,
                181.97909950, 58517.81538729,
                131.60246718, 0.00268329,
                76.67984255, -0.27769418),
    "earth":   (1.00000261, 0.00000562,
                0.01671123, -0.00004392,
                -0.00001531, -0.01294668,
                100.46457166, 35999.37244981,
                102.93768193, 0.32327364,
                0.0, 0.0),
    "mars":    (1.52371034, 0.00001847,
                0.09339410, 0.00007882,
                1.84969142, -0.00813131,
                -4.55343205, 19140.30268499,
                -23.94362959, 0.44441088,
                49.55953891, -0.29257343),
    "jupiter": (5.20288700, -0.00011607,
                0.04838624, -0.00013253,
                1.30439695, -0.00183714,
                34.39644051, 3034.74612775,
                14.72847983, 0.21252668,
                100.47390909, 0.20469106),
    "saturn":  (9.53667594, -0.00125060,
                0.05386179, -0.00050991,
                2.48599187, 0.00193609,
                49.95424423, 1222.49362201,
                92.59887831, -0.41897216,
                113.66242448, -0.28867794),
    "uranus":  (19.18916464, -0.00196176,
                0.04725744, -0.00004397,
                0.77263783, -0.00242939,
                313.23810451, 428.48202785,
                170.95427630, 0.40805281,
                74.01692503, 0.04240589),
    "neptune": (30.06992276, 0.00026291,
                0.00859048, 0.00005105,
                1.77004347, 0.00035372,
                -55.12002969, 218.45945325,
                44.96476227, -0.32241464,
                131.78422574, -0.00508664),
}


def mean_elements(name: str) -> OrbitalElements:
    a, ad, e, ed, i, id_, L, Ld, wp, wpd, Om, Omd = _MEAN_ELEMENTS[name.lower()]
    return OrbitalElements(a=a, a_dot=ad, e=e, e_dot=ed, i=i, i_dot=id_,
                           L=L, L_dot=Ld, w_bar=wp, w_bar_dot=wpd,
                           Om=Om, Om_dot=Omd)


def planet_orbit(name: str) -> Orbit:
    """Series orbit when a table ships for the planet, mean elements otherwise."""
    key = name.lower()
    elems = mean_elements(key)
    if key in available_bodies():
        return Vsop87Orbit(key, semi_major_axis=elems.a, eccentricity=elems.e)
    logger.debug("No VSOP87 table for %s, using mean elements", name)
    return MeanElementsOrbit(elems)


# ---------------------------------------------------------------------------
# SolarSystem
# ---------------------------------------------------------------------------

class SolarSystem:
    """Name -> Planet lookup, case-insensitive, in catalogue order."""

    def __init__(self, bodies: List[Planet]):
        self._bodies: Dict[str, Planet] = {}
        for body in bodies:
            key = body.name.lower()
            if key in self._bodies:
                raise ValueError(f"duplicate body name {body.name!r}")
            self._bodies[key] = body

    def get(self, name: str) -> Planet:
        try:
            return self._bodies[name.lower()]
        except KeyError:
            raise ValueError(f"unknown solar-system body {name!r}") from None

    def __getitem__(self, name: str) -> Planet:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._bodies

    def __iter__(self) -> Iterator[Planet]:
        return iter(self._bodies.values())

    def __len__(self) -> int:
        return len(self._bodies)

    @property
    def sun(self) -> Planet:
        return self.get("sun")

    def names(self) -> List[str]:
        return [b.name for b in self._bodies.values()]

    def children_of(self, parent: Optional[Planet]) -> List[Planet]:
        return [b for b in self._bodies.values() if b.parent is parent]


# ---------------------------------------------------------------------------
# Catalogo
# ---------------------------------------------------------------------------

def _km(radius_km: float) -> float:
    return radius_km / AU_KM


def build_solar_system() -> SolarSystem:
    """Return the default Solar System bodies."""

    # ── Sole ───────────────────────────────────────────────────────────────
    sun = Planet(
        name="Sun", planet_type=PlanetType.STAR,
        radius=_km(695700.0), orbit=StaticOrbit(),
        albedo=-1.0,
        pole_ra=286.13, pole_dec=63.87,
        absolute_magnitude=4.83,
        sidereal_day=360.0 / 14.1844,
        magnitude_model=sun_model,
    )

    def planet(name, r_km, oblateness, albedo, abs_mag, opp_mag,
               pole, sid_day, sid_period, model, ring=None):
        return Planet(
            name=name, planet_type=PlanetType.PLANET,
            radius=_km(r_km), orbit=planet_orbit(name), parent=sun,
            oblateness=oblateness, albedo=albedo, ring=ring,
            pole_ra=pole[0], pole_dec=pole[1],
            absolute_magnitude=abs_mag, mean_opposition_magnitude=opp_mag,
            sidereal_day=sid_day, sidereal_period=sid_period,
            magnitude_model=model,
        )

    # ── Pianeti ────────────────────────────────────────────────────────────
    mercury = planet("Mercury", 2440.53, 0.0009301258, 0.06, -0.60, 100.0,
                     (281.0103, 61.4155), 58.646145902, 87.97, mercury_model)

    venus = planet("Venus", 6051.8, 0.0, 0.77, -5.18, 100.0,
                   (272.76, 67.16), -243.018483986, 224.70, venus_model)

    earth = planet("Earth", 6378.1366, 0.003352810664747481, 0.3, -3.86, 100.0,
                   (0.0, 90.0), 0.99726963226, 365.256363004, earth_model)

    mars = planet("Mars", 3396.19, 0.005886, 0.150, -1.52, -2.01,
                  (317.269202, 54.432516), 1.025956756, 686.971, mars_model)

    jupiter = planet("Jupiter", 71492.0, 0.064874, 0.51, -9.40, -2.7,
                     (268.056595, 64.495303), 360.0 / 870.270, 4331.87, jupiter_model)

    saturn = planet("Saturn", 60268.0, 0.09796243446, 0.50, -8.88, 0.67,
                    (40.589, 83.537), 0.444009259, 10760.0, saturn_model,
                    ring=Ring.from_km(74510.0, 140390.0))

    uranus = planet("Uranus", 25559.0, 0.0229273446, 0.66, -7.19, 5.52,
                    (257.311, -15.175), -0.718333333, 30685.0, uranus_model,
                    ring=Ring.from_km(26840.0, 97700.0))

    neptune = planet("Neptune", 24764.0, 0.01708124697, 0.62, -6.87, 7.84,
                     (299.36, 43.46), 0.67125, 60189.0, neptune_model,
                     ring=Ring.from_km(40900.0, 62932.0))

    # ── Luna ───────────────────────────────────────────────────────────────
    # Nessun modello proprio: sfera lambertiana (GENERIC)
    moon = Planet(
        name="Moon", planet_type=PlanetType.MOON,
        radius=_km(1737.4), orbit=LunarOrbit(), parent=earth,
        albedo=0.12,
        pole_ra=269.9949, pole_dec=66.5392,
        absolute_magnitude=0.21, mean_opposition_magnitude=-12.74,
        sidereal_day=27.321661714, sidereal_period=27.321661714,
    )

    # ── Plutone ────────────────────────────────────────────────────────────
    pluto = Planet(
        name="Pluto", planet_type=PlanetType.DWARF_PLANET,
        radius=_km(1188.3), orbit=PlutoOrbit(), parent=sun,
        albedo=0.55,
        pole_ra=132.993, pole_dec=-6.163,
        absolute_magnitude=-0.4, mean_opposition_magnitude=15.12,
        sidereal_day=6.38722299911257520456, sidereal_period=90797.0,
        magnitude_model=pluto_model,
    )

    return SolarSystem([sun, mercury, venus, earth, moon, mars,
                        jupiter, saturn, uranus, neptune, pluto])

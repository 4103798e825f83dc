"""
Universe module — solar-system bodies, orbits and brightness.

Usage:
    from universe import build_solar_system, Observer
    from core.astro_time import datetime_to_julian_date

    system = build_solar_system()
    observer = Observer(home=system["Earth"], jd=datetime_to_julian_date(now),
                        latitude_deg=45.0, longitude_deg=9.2)

    saturn = system.get("saturn")
    pos, vel = saturn.compute_position(observer.jde)
    mag = saturn.visual_magnitude_with_extinction(observer)
"""

from .orbit import (
    Orbit,
    StaticOrbit,
    OrbitalElements,
    MeanElementsOrbit,
    KeplerOrbit,
    mean_motion,
    sidereal_period,
)
from .vsop87 import Vsop87Orbit
from .lunar import LunarOrbit
from .pluto import PlutoOrbit
from .magnitude import (
    ApparentMagnitudeAlgorithm,
    MagnitudeGeometry,
    compute_visual_magnitude,
    generic_magnitude,
    mean_opposition_magnitude,
)
from .planet import Planet, PlanetType, Ring
from .observer import Observer
from .solar_system import SolarSystem, build_solar_system

__all__ = [
    # orbits
    "Orbit",
    "StaticOrbit",
    "OrbitalElements",
    "MeanElementsOrbit",
    "KeplerOrbit",
    "Vsop87Orbit",
    "LunarOrbit",
    "PlutoOrbit",
    "mean_motion",
    "sidereal_period",
    # magnitude
    "ApparentMagnitudeAlgorithm",
    "MagnitudeGeometry",
    "compute_visual_magnitude",
    "generic_magnitude",
    "mean_opposition_magnitude",
    # bodies
    "Planet",
    "PlanetType",
    "Ring",
    "Observer",
    "SolarSystem",
    "build_solar_system",
]

# Minor bodies
from .minor_bodies import (
    MinorBodyElements,
    parse_mpc_line,
    load_mpc_file,
    minor_planet,
    comet,
    coma_diameter_and_tail_length,
    build_minor_bodies,
)

__all__ += [
    "MinorBodyElements",
    "parse_mpc_line",
    "load_mpc_file",
    "minor_planet",
    "comet",
    "coma_diameter_and_tail_length",
    "build_minor_bodies",
]

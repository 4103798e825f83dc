"""
minor_bodies.py
===============
Asteroidi, pianeti nani e comete nel sistema solare.

STRUTTURA:
  MinorBodyElements  — elementi orbitali formato MPC (epoca + anomalia media)
  parse_mpc_line()   — una riga MPCORB.DAT -> MinorBodyElements (o None)
  load_mpc_file()    — intero file MPCORB.DAT, filtrato per H massima
  minor_planet()     — Planet con KeplerOrbit e magnitudine H,G
  comet()            — Planet con KeplerOrbit e magnitudine cometaria
  coma_diameter_and_tail_length()
  build_minor_bodies() — i corpi minori più brillanti, elementi hardcoded

FORMATO MPC:
  Gli elementi MPC danno l'anomalia media M0 all'epoca; KeplerOrbit vuole
  il tempo di passaggio al perielio:  t0 = epoca - M0 / n.

Tutti i corpi minori hanno come genitore il Sole.
"""

from __future__ import annotations
import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union

from core.astro_time import datetime_to_julian_date
from core.settings import AU_KM, GAUSS_GRAV_K
from .magnitude import (
    NO_ABSOLUTE_MAGNITUDE, NO_SLOPE, comet_model, mean_opposition_magnitude,
    minor_planet_model,
)
from .orbit import KeplerOrbit
from .planet import Planet, PlanetType

logger = logging.getLogger(__name__)

# Albedo assumed for MPC objects without a measured one
DEFAULT_ALBEDO = 0.15

_PACKED_EPOCH = re.compile(r"^([IJK])(\d\d)([1-9A-C])([1-9A-V])$")
_CENTURIES = {"I": 1800, "J": 1900, "K": 2000}


# ---------------------------------------------------------------------------
# Elementi orbitali formato MPC
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MinorBodyElements:
    """
    Elementi orbitali per asteroidi nel formato MPC.

    Differenza dagli elementi medi dei pianeti (Standish):
      • epoch_jd: JD dell'epoca degli elementi (non J2000)
      • M0: anomalia media all'epoca (non longitudine media)
      • omega: argomento del perielio (non longitudine del perielio)

    Angoli in gradi, a in AU. daily_motion (deg/giorno) è quello del
    file MPC; se manca si ricava dalla terza legge di Keplero.
    """
    epoch_jd: float = 2451545.0
    a:        float = 1.0
    e:        float = 0.0
    i:        float = 0.0
    omega:    float = 0.0
    Om:       float = 0.0
    M0:       float = 0.0
    H:        float = NO_ABSOLUTE_MAGNITUDE
    G:        float = NO_SLOPE
    daily_motion: Optional[float] = None
    designation: str = ""
    name:        str = ""

    @property
    def n(self) -> float:
        """Mean motion in rad/day."""
        if self.daily_motion is not None:
            return math.radians(self.daily_motion)
        return GAUSS_GRAV_K / (self.a ** 1.5)

    @property
    def q(self) -> float:
        return self.a * (1.0 - self.e)

    @property
    def perihelion_jd(self) -> float:
        return self.epoch_jd - math.radians(self.M0) / self.n

    def to_orbit(self) -> KeplerOrbit:
        return KeplerOrbit(
            q=self.q, e=self.e,
            i=math.radians(self.i),
            Om=math.radians(self.Om),
            w=math.radians(self.omega),
            t0=self.perihelion_jd,
            n=self.n,
        )


def _unpack_mpc_epoch(packed: str) -> float:
    """
    Decodifica l'epoca MPC packed (5 caratteri) in Julian Date.
    Formato: K234A = 2023 Apr 10, 0h TT
    Caratteri speciali: I=1800, J=1900, K=2000; A=10, B=11, ..., V=31
    """
    m = _PACKED_EPOCH.match(packed)
    if m is None:
        raise ValueError(f"invalid packed epoch {packed!r}")

    def unpack(c: str) -> int:
        return int(c) if c.isdigit() else 10 + ord(c) - ord("A")

    year = _CENTURIES[m.group(1)] + int(m.group(2))
    month = unpack(m.group(3))
    day = unpack(m.group(4))
    return datetime_to_julian_date(datetime(year, month, day, tzinfo=timezone.utc))


def estimate_radius_km(H: float, albedo: float = DEFAULT_ALBEDO) -> float:
    """Radius from absolute magnitude and albedo: D = 1329/sqrt(p)·10^(-H/5)."""
    if H <= NO_ABSOLUTE_MAGNITUDE:
        return 1.0
    return math.ceil(0.5 * (1329.0 / math.sqrt(albedo)) * 10.0 ** (-0.2 * H))


def parse_mpc_line(line: str) -> Optional[MinorBodyElements]:
    """
    Parse una riga del formato MPCORB.DAT (ASCII, colonne fisse).
    Restituisce None (con un warning) se la riga non è valida.

    Colonne (0-based, da MPC documentation):
      0-6:     numero/designazione
      8-12:    H (magnitudine assoluta)
      14-18:   G (slope)
      20-24:   epoca (packed MPC format)
      26-34:   M (anomalia media, deg)
      37-45:   omega (argomento perielio, deg)
      48-56:   Om (nodo ascendente, deg)
      59-67:   i (inclinazione, deg)
      70-78:   e (eccentricità)
      80-90:   n (moto medio, deg/giorno)
      92-102:  a (semiasse maggiore, AU)
      166-193: nome leggibile
    """
    line = line.rstrip("\n")
    if not line.strip() or line.startswith("#"):
        return None
    if not 152 <= len(line) <= 202:
        logger.warning("Skipping MPC line of length %d: %.40r", len(line), line)
        return None
    try:
        return MinorBodyElements(
            H            = float(line[8:13]),
            G            = float(line[14:19]),
            epoch_jd     = _unpack_mpc_epoch(line[20:25].strip()),
            M0           = float(line[26:35]),
            omega        = float(line[37:46]),
            Om           = float(line[48:57]),
            i            = float(line[59:68]),
            e            = float(line[70:79]),
            daily_motion = float(line[80:91]),
            a            = float(line[92:103]),
            designation  = line[0:7].strip(),
            name         = line[166:194].strip(),
        )
    except (ValueError, IndexError) as exc:
        logger.warning("Skipping malformed MPC line (%s): %.40r", exc, line)
        return None


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def minor_planet(name: str, sun: Planet, elements: MinorBodyElements,
                 albedo: float = DEFAULT_ALBEDO,
                 radius_km: Optional[float] = None,
                 planet_type: PlanetType = PlanetType.ASTEROID) -> Planet:
    """
    Asteroid or dwarf planet. H,G magnitudes when G is known, otherwise
    the Lambert sphere of the given radius and albedo.
    """
    if radius_km is None:
        radius_km = estimate_radius_km(elements.H, albedo)
    orbit = elements.to_orbit()
    period = orbit.sidereal_period
    return Planet(
        name=name,
        planet_type=planet_type,
        radius=radius_km / AU_KM,
        orbit=orbit,
        parent=sun,
        albedo=albedo,
        absolute_magnitude=elements.H,
        mean_opposition_magnitude=mean_opposition_magnitude(elements.H, elements.a),
        sidereal_day=period,
        sidereal_period=period,
        magnitude_model=minor_planet_model(elements.H, elements.G),
    )


def comet(name: str, sun: Planet,
          q: float, e: float, i: float, Om: float, w: float, t0: float,
          n: Optional[float] = None,
          H: float = NO_ABSOLUTE_MAGNITUDE,
          slope: float = NO_SLOPE,
          albedo: float = DEFAULT_ALBEDO,
          radius_km: float = 1.0) -> Planet:
    """
    Comet from perihelion elements: q (AU), angles in degrees,
    t0 = perihelion JDE, n in deg/day (computed when omitted).
    """
    orbit = KeplerOrbit(q=q, e=e, i=math.radians(i), Om=math.radians(Om),
                        w=math.radians(w), t0=t0,
                        n=None if n is None else math.radians(n))
    return Planet(
        name=name,
        planet_type=PlanetType.COMET,
        radius=radius_km / AU_KM,
        orbit=orbit,
        parent=sun,
        albedo=albedo,
        absolute_magnitude=H,
        sidereal_day=orbit.sidereal_period,
        sidereal_period=orbit.sidereal_period,
        magnitude_model=comet_model(H, slope),
    )


def coma_diameter_and_tail_length(H: float, slope: float, r: float) -> Tuple[float, float]:
    """
    Coma diameter and tail length in km for a comet at heliocentric
    distance r (AU). Empirical fit from Project Pluto (Guide 7).
    """
    mhelio = H + slope * math.log10(r)
    Do = 10.0 ** ((-0.0033 * mhelio - 0.07) * mhelio + 3.25)
    common = 1.0 - 10.0 ** (-2.0 * r)
    D = Do * common * (1.0 - 10.0 ** (-r)) * 1000.0
    Lo = 10.0 ** ((-0.0075 * mhelio - 0.19) * mhelio + 2.1)
    L = Lo * (1.0 - 10.0 ** (-4.0 * r)) * common * 1e6
    return D, L


# ---------------------------------------------------------------------------
# Loader MPCORB.DAT
# ---------------------------------------------------------------------------

def load_mpc_file(path: Union[str, Path], sun: Planet,
                  max_H: Optional[float] = None,
                  max_objects: Optional[int] = None) -> List[Planet]:
    """
    Asteroidi da file MPCORB.DAT (formato MPC ASCII).

        max_H       : magnitudine assoluta massima da includere
        max_objects : limite massimo oggetti caricati

    Le righe non valide (intestazione inclusa) vengono saltate.
    """
    bodies: List[Planet] = []
    with open(path, "r", encoding="ascii", errors="ignore") as f:
        for line in f:
            if max_objects is not None and len(bodies) >= max_objects:
                break
            elems = parse_mpc_line(line)
            if elems is None:
                continue
            if max_H is not None and elems.H > max_H:
                continue
            bodies.append(minor_planet(elems.name or elems.designation, sun, elems))
    logger.debug("Loaded %d minor planets from %s", len(bodies), path)
    return bodies


# ---------------------------------------------------------------------------
# Oggetti hardcoded: i più brillanti e significativi
# ---------------------------------------------------------------------------

def build_minor_bodies(sun: Planet) -> List[Planet]:
    """
    Costruisce la lista degli oggetti minori principali.
    Elementi da MPC/JPL Horizons, epoca 2024-11-18 (JD 2460632.5).
    """
    EPOCH = 2460632.5  # 2024 Nov 18

    def asteroid(name, H, G, a, e, i, omega, Om, M0, r_km, albedo,
                 planet_type=PlanetType.ASTEROID):
        return minor_planet(
            name, sun,
            MinorBodyElements(epoch_jd=EPOCH, a=a, e=e, i=i,
                              omega=omega, Om=Om, M0=M0, H=H, G=G, name=name),
            albedo=albedo, radius_km=r_km, planet_type=planet_type,
        )

    return [
        # ── Pianeti nani e grandi asteroidi ───────────────────────────────
        asteroid("Ceres", H=3.34, G=0.12,
                 a=2.7658, e=0.0785, i=10.594, omega=73.115, Om=80.327, M0=291.4,
                 r_km=476.2, albedo=0.090, planet_type=PlanetType.DWARF_PLANET),
        asteroid("Vesta", H=3.20, G=0.32,
                 a=2.3615, e=0.0887, i=7.141, omega=151.198, Om=103.851, M0=20.9,
                 r_km=262.7, albedo=0.423),
        asteroid("Pallas", H=4.13, G=0.11,
                 a=2.7736, e=0.2313, i=34.841, omega=310.156, Om=173.100, M0=215.6,
                 r_km=256.0, albedo=0.101),
        asteroid("Juno", H=5.33, G=0.12,
                 a=2.6692, e=0.2563, i=12.991, omega=247.885, Om=169.869, M0=113.2,
                 r_km=116.5, albedo=0.238),
        asteroid("Hygiea", H=5.43, G=0.15,
                 a=3.1417, e=0.1126, i=3.838, omega=312.328, Om=283.416, M0=348.9,
                 r_km=216.5, albedo=0.072),

        # ── Near-Earth ────────────────────────────────────────────────────
        asteroid("433 Eros", H=11.16, G=0.25,
                 a=1.4580, e=0.2228, i=10.828, omega=178.875, Om=304.421, M0=359.0,
                 r_km=8.42, albedo=0.250),
        asteroid("99942 Apophis", H=19.09, G=0.24,
                 a=0.9224, e=0.1914, i=3.339, omega=126.393, Om=204.446, M0=201.6,
                 r_km=0.185, albedo=0.301),

        # ── Comete periodiche ─────────────────────────────────────────────
        # Halley: perielio 9 febbraio 1986, prossimo ~2061
        comet("1P/Halley", sun, q=0.5860, e=0.9671, i=162.26, Om=58.42, w=111.33,
              t0=2446470.96, H=5.5, slope=4.0, radius_km=5.5),
        # Encke: periodo più corto conosciuto, 3.3 anni
        comet("2P/Encke", sun, q=0.3363, e=0.8483, i=11.78, Om=334.57, w=186.54,
              t0=2460373.0, H=10.0, slope=3.5, radius_km=2.4),
    ]

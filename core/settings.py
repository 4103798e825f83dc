"""
settings.py
===========
Costanti fisiche e valori di default della pipeline.

Contenuto:
  • Costanti astronomiche (AU, parsec, costante di Gauss, J2000, obliquità)
  • Default dell'estinzione atmosferica e dell'algoritmo di magnitudine
  • Default di pressione e temperatura per la rifrazione

Override da ambiente (letti una sola volta all'import):
  ASTRO_EXTINCTION_COEFFICIENT   float, mag/airmass
  ASTRO_MAGNITUDE_ALGORITHM      nome dell'algoritmo (es. "MUELLER_1893")
  ASTRO_PRESSURE_MBAR            float, millibar
  ASTRO_TEMPERATURE_C            float, gradi Celsius
"""

from __future__ import annotations
import logging
import os

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Costanti fisiche
# ---------------------------------------------------------------------------

AU_KM = 149597870.691
PARSEC_KM = 30856775813060.0
SECONDS_PER_DAY = 86400.0

# Gaussian gravitational constant (rad/day, AU^1.5)
GAUSS_GRAV_K = 0.01720209895
GAUSS_GRAV_K_SQ = GAUSS_GRAV_K * GAUSS_GRAV_K

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0
DAYS_PER_MILLENNIUM = 365250.0

# Obliquity of the ecliptic at J2000 (IAU 2006), degrees
EPS_0_DEG = 23.4392803055555555555556

# Sun apparent magnitude at 1 AU, used by the Lambert-sphere reflection model
SUN_MAGNITUDE_1AU = -26.73


# ---------------------------------------------------------------------------
# Default configurabili
# ---------------------------------------------------------------------------

def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    logger.debug("%s overridden from environment: %s", name, value)
    return value


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    logger.debug("%s overridden from environment: %s", name, raw.strip())
    return raw.strip().upper()


DEFAULT_EXTINCTION_COEFFICIENT = _env_float("ASTRO_EXTINCTION_COEFFICIENT", 0.13)
DEFAULT_MAGNITUDE_ALGORITHM = _env_str("ASTRO_MAGNITUDE_ALGORITHM",
                                       "EXPLANATORY_SUPPLEMENT_2013")
DEFAULT_PRESSURE_MBAR = _env_float("ASTRO_PRESSURE_MBAR", 1013.0)
DEFAULT_TEMPERATURE_C = _env_float("ASTRO_TEMPERATURE_C", 15.0)

"""
Rifrazione atmosferica su vettori alt-az.

  forward()  : geometrico -> apparente (Saemundsson, S&T 1986 p.70, in Meeus)
  backward() : apparente -> geometrico (Bennett, in Meeus; sotto l'orizzonte
               fit polinomiale contro Saemundsson)

Sotto le altitudini minime le correzioni svaniscono linearmente in una
zona di transizione, così non ci sono salti. Il vettore conserva azimut e
lunghezza, cambia solo l'altezza.
"""

from __future__ import annotations
import math
from dataclasses import dataclass

import numpy as np

from core.settings import DEFAULT_PRESSURE_MBAR, DEFAULT_TEMPERATURE_C
from core.units import Pressure, Temperature

MIN_GEO_ALTITUDE_DEG = -3.54
MIN_APP_ALTITUDE_DEG = -3.21783
TRANSITION_WIDTH_GEO_DEG = 1.46
TRANSITION_WIDTH_APP_DEG = 1.78217

# Bennett formula is used above this apparent altitude (deg)
_BENNETT_MIN_ALT_DEG = 0.22879


def _saemundsson(alt_deg: float) -> float:
    return 1.02 / math.tan(math.radians(alt_deg + 10.3 / (alt_deg + 5.11))) + 0.0019279


def _below_horizon_fit(alt_deg: float) -> float:
    return (((((0.0444 * alt_deg + 0.7662) * alt_deg + 4.9746) * alt_deg + 13.599)
             * alt_deg + 8.052) * alt_deg - 11.308) * alt_deg + 34.341


@dataclass(frozen=True)
class Refraction:
    pressure:    Pressure = Pressure(DEFAULT_PRESSURE_MBAR)
    temperature: Temperature = Temperature(DEFAULT_TEMPERATURE_C)

    @property
    def ptc(self) -> float:
        """Pressure/temperature correction, degrees per arcminute."""
        return self.pressure.millibar / 1010.0 * 283.0 / (273.0 + self.temperature.celsius) / 60.0

    def forward(self, pos) -> np.ndarray:
        pos = np.asarray(pos, dtype=float)
        length = float(np.linalg.norm(pos))
        if length == 0.0:
            return pos

        sin_geo = pos[2] / length
        alt = math.degrees(math.asin(max(-1.0, min(1.0, sin_geo))))
        ptc = self.ptc

        if alt > MIN_GEO_ALTITUDE_DEG:
            alt += ptc * _saemundsson(alt)
            if alt > 90.0:
                alt = 90.0
        elif alt > MIN_GEO_ALTITUDE_DEG - TRANSITION_WIDTH_GEO_DEG:
            r_min = ptc * _saemundsson(MIN_GEO_ALTITUDE_DEG)
            alt += r_min * (alt - (MIN_GEO_ALTITUDE_DEG - TRANSITION_WIDTH_GEO_DEG)) / TRANSITION_WIDTH_GEO_DEG
        else:
            return pos

        return _with_altitude(pos, sin_geo, alt, length)

    def backward(self, pos) -> np.ndarray:
        pos = np.asarray(pos, dtype=float)
        length = float(np.linalg.norm(pos))
        if length == 0.0:
            return pos

        sin_obs = pos[2] / length
        alt = math.degrees(math.asin(max(-1.0, min(1.0, sin_obs))))
        ptc = self.ptc

        if alt > _BENNETT_MIN_ALT_DEG:
            alt -= ptc * (1.0 / math.tan(math.radians(alt + 7.31 / (alt + 4.4))) + 0.0013515)
        elif alt > MIN_APP_ALTITUDE_DEG:
            alt -= ptc * _below_horizon_fit(alt)
        elif alt > MIN_APP_ALTITUDE_DEG - TRANSITION_WIDTH_APP_DEG:
            r_min = _below_horizon_fit(MIN_APP_ALTITUDE_DEG)
            alt -= r_min * ptc * (alt - (MIN_APP_ALTITUDE_DEG - TRANSITION_WIDTH_APP_DEG)) / TRANSITION_WIDTH_APP_DEG
        else:
            return pos

        return _with_altitude(pos, sin_obs, alt, length)


def _with_altitude(pos: np.ndarray, sin_old: float, alt_deg: float, length: float) -> np.ndarray:
    sin_new = math.sin(math.radians(alt_deg))
    if abs(sin_old) >= 1.0:
        s = 1.0
    else:
        s = math.sqrt((1.0 - sin_new * sin_new) / (1.0 - sin_old * sin_old))
    return np.array([pos[0] * s, pos[1] * s, sin_new * length])

"""
Estinzione atmosferica — airmass e attenuazione della magnitudine.

Modelli:
  • Rozenberg (1966)  per angolo zenitale apparente (rifratto)
  • Young (1994)      per angolo zenitale vero (geometrico)

Sotto l'orizzonte (cos z < -0.035, circa 2° sotto) il comportamento
dipende dalla modalità UndergroundExtinctionMode:
  ZERO    nessuna estinzione
  MAX     estinzione satura (MAX_AIRMASS)
  MIRROR  la profondità sotto l'orizzonte viene riflessa sopra,
          la funzione resta continua attorno al bordo

forward() aggiunge l'estinzione a una magnitudine fuori atmosfera,
backward() la toglie. Le due operazioni sono inverse esatte.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

from core.settings import DEFAULT_EXTINCTION_COEFFICIENT

# Soglia di cos z sotto la quale il corpo è considerato "sotto terra"
HORIZON_COS_Z = -0.035

# Sentinel "completely extinguished" airmass; not physically derived
MAX_AIRMASS = 42.0


class UndergroundExtinctionMode(Enum):
    ZERO = "zero"
    MAX = "max"
    MIRROR = "mirror"


@dataclass(frozen=True)
class Extinction:
    """
    coefficient     : mag per unit airmass (V band, ~0.13 for a good site)
    mode            : policy below the horizon
    apparent_zenith : default formula choice for airmass()
    """
    coefficient:     float = DEFAULT_EXTINCTION_COEFFICIENT
    mode:            UndergroundExtinctionMode = UndergroundExtinctionMode.MIRROR
    apparent_zenith: bool = True

    def __post_init__(self):
        mode = self.mode
        if isinstance(mode, str):
            try:
                mode = UndergroundExtinctionMode[mode.upper()]
            except KeyError:
                raise ValueError(f"unknown extinction mode {self.mode!r}") from None
            object.__setattr__(self, "mode", mode)
        elif not isinstance(mode, UndergroundExtinctionMode):
            raise TypeError(f"mode must be UndergroundExtinctionMode, got {type(mode).__name__}")

    # ------------------------------------------------------------------

    def airmass(self, cos_z: float, apparent_z: Union[bool, None] = None) -> float:
        """
        Airmass for cosine of zenith angle cos_z.
        apparent_z: True -> Rozenberg, False -> Young; None -> self.apparent_zenith
        """
        if apparent_z is None:
            apparent_z = self.apparent_zenith

        cz = cos_z
        if cz < HORIZON_COS_Z:
            if self.mode is UndergroundExtinctionMode.ZERO:
                return 0.0
            if self.mode is UndergroundExtinctionMode.MAX:
                return MAX_AIRMASS
            cz = min(1.0, HORIZON_COS_Z - (cz - HORIZON_COS_Z))

        if apparent_z:
            # Rozenberg 1966
            return 1.0 / (cz + 0.025 * math.exp(-11.0 * cz))

        # Young 1994
        nom = (1.002432 * cz + 0.148386) * cz + 0.0096467
        denum = ((cz + 0.149864) * cz + 0.0102963) * cz + 0.000303978
        return nom / denum

    def forward(self, pos, mag: float) -> float:
        """
        Magnitude seen through the atmosphere.
        pos: alt-az vector (unit length), pos[2] is cos of zenith angle.
        """
        return mag + self.airmass(_cos_z(pos), False) * self.coefficient

    def backward(self, pos, mag: float) -> float:
        """Above-atmosphere magnitude from an observed one."""
        return mag - self.airmass(_cos_z(pos), False) * self.coefficient


def _cos_z(pos) -> float:
    try:
        return float(pos[2])
    except (TypeError, IndexError):
        raise TypeError("pos must be a 3-component alt-az vector") from None

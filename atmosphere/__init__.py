"""
Atmosphere package — what the air does to light from a body.

Main exports:
    Extinction                 — airmass + magnitude dimming (forward/backward)
    UndergroundExtinctionMode  — enum: ZERO / MAX / MIRROR below the horizon
    MAX_AIRMASS                — saturating airmass for mode MAX
    Refraction                 — alt-az vector refraction (forward/backward)
"""
from .extinction import (
    Extinction,
    UndergroundExtinctionMode,
    MAX_AIRMASS,
    HORIZON_COS_Z,
)
from .refraction import Refraction

__all__ = [
    "Extinction",
    "UndergroundExtinctionMode",
    "MAX_AIRMASS",
    "HORIZON_COS_Z",
    "Refraction",
]

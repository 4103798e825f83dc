from __future__ import annotations
import math

import numpy as np

TWO_PI = 2.0 * math.pi

# Below this the horizontal component is treated as zero (pole on the axis)
_POLE_EPSILON = 1e-12


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x

def wrap_deg(x: float) -> float:
    x = x % 360.0
    return x if x >= 0 else x + 360.0

def wrap_rad(x: float) -> float:
    x = x % TWO_PI
    return x if x >= 0 else x + TWO_PI


def sph_to_rect(lng: float, lat: float, r: float = 1.0) -> np.ndarray:
    """Spherical (radians) -> rectangular vector."""
    c = math.cos(lat)
    return np.array([r * c * math.cos(lng), r * c * math.sin(lng), r * math.sin(lat)])

def rect_to_sph(v) -> tuple[float, float]:
    """
    Rectangular vector -> (longitude, latitude) in radians.
    Longitude is 0 when the vector lies on the z axis.
    """
    x, y, z = float(v[0]), float(v[1]), float(v[2])
    h = math.hypot(x, y)
    lng = 0.0 if h < _POLE_EPSILON else math.atan2(y, x)
    lat = math.atan2(z, h)
    return lng, lat


def cart_to_sph(x: float, y: float, z: float) -> tuple[float,float]:
    h = math.hypot(x, y)
    ra = math.degrees(math.atan2(y, x)) % 360.0
    dec = math.degrees(math.atan2(z, h))
    return ra, dec

def equatorial_to_horizontal(ra_deg: float, dec_deg: float, lat_deg: float, lst_deg: float) -> tuple[float,float]:
    """
    Return (az_deg, alt_deg). Az measured from North towards East (0..360).
    """
    ha = math.radians((lst_deg - ra_deg) % 360.0)
    dec = math.radians(dec_deg)
    lat = math.radians(lat_deg)

    sin_alt = math.sin(dec)*math.sin(lat) + math.cos(dec)*math.cos(lat)*math.cos(ha)
    alt = math.asin(clamp(sin_alt, -1.0, 1.0))

    # Azimuth
    cos_az = (math.sin(dec) - math.sin(alt)*math.sin(lat)) / (math.cos(alt)*math.cos(lat) + 1e-12)
    az = math.acos(clamp(cos_az, -1.0, 1.0))
    if math.sin(ha) > 0:
        az = TWO_PI - az
    az_deg = (math.degrees(az) + 360.0) % 360.0
    alt_deg = math.degrees(alt)
    return az_deg, alt_deg

def horizontal_to_vector(az_deg: float, alt_deg: float) -> np.ndarray:
    """Unit alt-az vector: x north, y east, z up (z = cosine of zenith angle)."""
    az = math.radians(az_deg)
    alt = math.radians(alt_deg)
    c = math.cos(alt)
    return np.array([c*math.cos(az), c*math.sin(az), math.sin(alt)])

from __future__ import annotations
from datetime import datetime, timezone

from .settings import J2000, DAYS_PER_CENTURY, DAYS_PER_MILLENNIUM, SECONDS_PER_DAY

# Lightweight time utilities.
# We use UTC internally; caller can feed local time and tz if needed.
# JD is the UT-based Julian Date, JDE the Julian Ephemeris Day (TT).

def datetime_to_julian_date(dt: datetime) -> float:
    """Convert a datetime (timezone-aware recommended) to Julian Date."""
    if dt.tzinfo is None:
        # assume UTC if naive
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)

    year = dt.year
    month = dt.month
    day = dt.day + (dt.hour + (dt.minute + (dt.second + dt.microsecond/1e6)/60.0)/60.0)/24.0

    if month <= 2:
        year -= 1
        month += 12

    A = year // 100
    B = 2 - A + (A // 4)

    jd = int(365.25*(year + 4716)) + int(30.6001*(month + 1)) + day + B - 1524.5
    return float(jd)

def julian_centuries(jde: float) -> float:
    """Julian centuries from J2000.0"""
    return (jde - J2000) / DAYS_PER_CENTURY

def julian_millennia(jde: float) -> float:
    return (jde - J2000) / DAYS_PER_MILLENNIUM

def decimal_year(jd: float) -> float:
    return 2000.0 + (jd - J2000) / 365.25

def delta_t_seconds(jd: float) -> float:
    """
    TT - UT in seconds.
    Espenak & Meeus (2006) polynomials for 1941..2150,
    long-term parabola -20 + 32u^2 elsewhere.
    """
    y = decimal_year(jd)
    u = (y - 1820.0) / 100.0

    if 1941.0 <= y < 1961.0:
        t = y - 1950.0
        return 29.07 + 0.407*t - t*t/233.0 + t**3/2547.0
    if 1961.0 <= y < 1986.0:
        t = y - 1975.0
        return 45.45 + 1.067*t - t*t/260.0 - t**3/718.0
    if 1986.0 <= y < 2005.0:
        t = y - 2000.0
        return (63.86 + 0.3345*t - 0.060374*t**2 + 0.0017275*t**3
                + 0.000651814*t**4 + 0.00002373599*t**5)
    if 2005.0 <= y < 2050.0:
        t = y - 2000.0
        return 62.92 + 0.32217*t + 0.005589*t*t
    if 2050.0 <= y < 2150.0:
        return -20.0 + 32.0*u*u - 0.5628*(2150.0 - y)
    return -20.0 + 32.0*u*u

def jd_to_jde(jd: float) -> float:
    return jd + delta_t_seconds(jd) / SECONDS_PER_DAY

def gmst_deg(jd: float) -> float:
    """
    Greenwich Mean Sidereal Time in degrees (Meeus 12.4).
    """
    T = julian_centuries(jd)
    gmst = 280.46061837 + 360.98564736629*(jd - J2000) + 0.000387933*T*T - (T*T*T)/38710000.0
    return gmst % 360.0

def lst_deg(jd: float, lon_deg: float) -> float:
    return (gmst_deg(jd) + lon_deg) % 360.0

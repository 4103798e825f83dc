"""
Unit value types: angle, distance, pressure, temperature.

Each type stores one canonical unit and converts on demand.
An exact zero converts to an exact zero (no -0.0 from negative factors
or subtractions).
"""

from __future__ import annotations
import math
from dataclasses import dataclass

from .settings import AU_KM


def _scale(value: float, factor: float) -> float:
    if value == 0.0:
        return 0.0
    return value * factor


@dataclass(frozen=True, order=True)
class Angle:
    """Angle stored in radians."""
    radians: float = 0.0

    @classmethod
    def from_degrees(cls, deg: float) -> 'Angle':
        return cls(_scale(deg, math.pi / 180.0))

    @classmethod
    def from_hours(cls, hours: float) -> 'Angle':
        return cls(_scale(hours, math.pi / 12.0))

    @classmethod
    def from_arcsec(cls, arcsec: float) -> 'Angle':
        return cls(_scale(arcsec, math.pi / 648000.0))

    @property
    def degrees(self) -> float:
        return _scale(self.radians, 180.0 / math.pi)

    @property
    def hours(self) -> float:
        return _scale(self.radians, 12.0 / math.pi)

    @property
    def arcsec(self) -> float:
        return _scale(self.radians, 648000.0 / math.pi)

    def normalized(self) -> 'Angle':
        r = self.radians % (2.0 * math.pi)
        return Angle(r + 0.0)

    def __add__(self, other: 'Angle') -> 'Angle':
        return Angle(self.radians + other.radians)

    def __sub__(self, other: 'Angle') -> 'Angle':
        return Angle(self.radians - other.radians)

    def __neg__(self) -> 'Angle':
        return Angle(-self.radians + 0.0)

    def __mul__(self, k: float) -> 'Angle':
        return Angle(_scale(self.radians, k))

    __rmul__ = __mul__


@dataclass(frozen=True, order=True)
class Distance:
    """Distance stored in astronomical units."""
    au: float = 0.0

    @classmethod
    def from_km(cls, km: float) -> 'Distance':
        return cls(_scale(km, 1.0 / AU_KM))

    @property
    def km(self) -> float:
        return _scale(self.au, AU_KM)

    def __add__(self, other: 'Distance') -> 'Distance':
        return Distance(self.au + other.au)

    def __sub__(self, other: 'Distance') -> 'Distance':
        return Distance(self.au - other.au)


@dataclass(frozen=True, order=True)
class Pressure:
    """Pressure stored in millibar."""
    millibar: float = 0.0

    @classmethod
    def from_pascal(cls, pa: float) -> 'Pressure':
        return cls(_scale(pa, 0.01))

    @classmethod
    def from_atm(cls, atm: float) -> 'Pressure':
        return cls(_scale(atm, 1013.25))

    @property
    def pascal(self) -> float:
        return _scale(self.millibar, 100.0)

    @property
    def atm(self) -> float:
        return _scale(self.millibar, 1.0 / 1013.25)


@dataclass(frozen=True, order=True)
class Temperature:
    """Temperature stored in degrees Celsius."""
    celsius: float = 0.0

    @classmethod
    def from_kelvin(cls, k: float) -> 'Temperature':
        return cls(_offset(k, -273.15))

    @classmethod
    def from_fahrenheit(cls, f: float) -> 'Temperature':
        return cls(_scale(_offset(f, -32.0), 5.0 / 9.0))

    @property
    def kelvin(self) -> float:
        return _offset(self.celsius, 273.15)

    @property
    def fahrenheit(self) -> float:
        return _offset(_scale(self.celsius, 9.0 / 5.0), 32.0)


def _offset(value: float, delta: float) -> float:
    out = value + delta
    return 0.0 if out == 0.0 else out

"""
Orbit — posizione e velocità di un corpo rispetto al suo genitore.

Tutte le orbite producono (posizione, velocità) nel sistema VSOP87
(eclittica ed equinozio J2000), in AU e AU/giorno, relative al corpo
genitore: eliocentriche per pianeti e corpi minori, geocentriche per la Luna.
La composizione gerarchica (Luna -> Terra -> Sole) è fatta da Planet.

Implementazioni:
  StaticOrbit        — il Sole (vettore nullo)
  MeanElementsOrbit  — elementi medi Standish con variazioni secolari
  KeplerOrbit        — elementi osculanti q,e,i,Ω,ω,t0,n (asteroidi, comete)
  Vsop87Orbit        — vedi vsop87.py
  LunarOrbit         — vedi lunar.py

Ogni orbita è una funzione pura di jde: nessuna cache, nessuno stato.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from core.settings import GAUSS_GRAV_K, GAUSS_GRAV_K_SQ
from core.astro_time import julian_centuries

TWO_PI = 2.0 * math.pi

# Convergence of the anomaly solvers (radians)
_EPSILON = 1e-12

PositionVelocity = Tuple[np.ndarray, np.ndarray]


class Orbit:
    """Base class: subclasses implement position_at()."""

    def position_at(self, jde: float) -> PositionVelocity:
        raise NotImplementedError

    @property
    def semi_major_axis(self) -> Optional[float]:
        return None

    @property
    def eccentricity(self) -> Optional[float]:
        return None

    @property
    def sidereal_period(self) -> Optional[float]:
        a = self.semi_major_axis
        if a is None:
            return None
        return sidereal_period(a, 1.0)


def finite_difference_velocity(position: Callable[[float], np.ndarray],
                               jde: float, step: float = 0.01) -> np.ndarray:
    """Central difference of a position function, AU/day."""
    return (position(jde + step) - position(jde - step)) / (2.0 * step)


# ---------------------------------------------------------------------------
# StaticOrbit
# ---------------------------------------------------------------------------

class StaticOrbit(Orbit):
    """The root of the hierarchy never moves."""

    def position_at(self, jde: float) -> PositionVelocity:
        return np.zeros(3), np.zeros(3)

    def __repr__(self) -> str:
        return "StaticOrbit()"


# ---------------------------------------------------------------------------
# Orbital Elements (J2000 epoch, with secular rates)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian orbital elements at J2000.0 epoch, plus secular rates per century.

    Units:
        a     : semi-major axis (AU)
        e     : eccentricity (dimensionless)
        i     : inclination (degrees)
        L     : mean longitude (degrees)
        w_bar : longitude of perihelion (degrees)
        Om    : longitude of ascending node (degrees)

    Each element has a secular rate suffix _dot (per Julian century).

    Source: Standish 1992, "Keplerian Elements for Approximate Positions
    of the Major Planets" (valid 1800 AD - 2050 AD)
    """
    # Semi-major axis
    a:     float = 1.0;   a_dot:     float = 0.0
    # Eccentricity
    e:     float = 0.0;   e_dot:     float = 0.0
    # Inclination
    i:     float = 0.0;   i_dot:     float = 0.0
    # Mean longitude
    L:     float = 0.0;   L_dot:     float = 0.0
    # Longitude of perihelion
    w_bar: float = 0.0;   w_bar_dot: float = 0.0
    # Longitude of ascending node
    Om:    float = 0.0;   Om_dot:    float = 0.0

    def at_epoch(self, T: float) -> 'OrbitalElements':
        """Return elements at T Julian centuries from J2000."""
        return OrbitalElements(
            a     = self.a     + self.a_dot     * T,
            e     = self.e     + self.e_dot     * T,
            i     = self.i     + self.i_dot     * T,
            L     = self.L     + self.L_dot     * T,
            w_bar = self.w_bar + self.w_bar_dot * T,
            Om    = self.Om    + self.Om_dot    * T,
        )


def solve_kepler(M: float, e: float, tol: float = _EPSILON, max_iter: int = 50) -> float:
    """
    Solve Kepler's equation M = E - e*sin(E) by Newton iteration.
    M and the returned eccentric anomaly E in radians.
    """
    M = M % TWO_PI
    E = M + e * math.sin(M) * (1.0 + e * math.cos(M))
    for _ in range(max_iter):
        dE = (M - E + e * math.sin(E)) / (1.0 - e * math.cos(E))
        E += dE
        if abs(dE) < tol:
            break
    return E


def _orbital_plane_to_ecliptic(x_orb: float, y_orb: float,
                               i: float, Om: float, w: float) -> np.ndarray:
    cos_w, sin_w   = math.cos(w),  math.sin(w)
    cos_Om, sin_Om = math.cos(Om), math.sin(Om)
    cos_i, sin_i   = math.cos(i),  math.sin(i)

    x = (cos_Om*cos_w - sin_Om*sin_w*cos_i)*x_orb + (-cos_Om*sin_w - sin_Om*cos_w*cos_i)*y_orb
    y = (sin_Om*cos_w + cos_Om*sin_w*cos_i)*x_orb + (-sin_Om*sin_w + cos_Om*cos_w*cos_i)*y_orb
    z = (sin_w*sin_i)*x_orb + (cos_w*sin_i)*y_orb
    return np.array([x, y, z])


def heliocentric_ecliptic(elems: OrbitalElements) -> np.ndarray:
    """
    Heliocentric ecliptic J2000 position (AU) from mean elements
    already propagated to the wanted epoch.
    """
    w = math.radians(elems.w_bar - elems.Om)
    M = math.radians(elems.L - elems.w_bar)
    E = solve_kepler(M, elems.e)

    a, e = elems.a, elems.e
    x_orb = a * (math.cos(E) - e)
    y_orb = a * math.sqrt(1.0 - e*e) * math.sin(E)
    return _orbital_plane_to_ecliptic(x_orb, y_orb,
                                      math.radians(elems.i), math.radians(elems.Om), w)


class MeanElementsOrbit(Orbit):
    """Planet orbit from mean elements (Standish), ~arcminute accuracy."""

    def __init__(self, elements: OrbitalElements):
        self.elements = elements

    def _position(self, jde: float) -> np.ndarray:
        return heliocentric_ecliptic(self.elements.at_epoch(julian_centuries(jde)))

    def position_at(self, jde: float) -> PositionVelocity:
        return self._position(jde), finite_difference_velocity(self._position, jde)

    @property
    def semi_major_axis(self) -> float:
        return self.elements.a

    @property
    def eccentricity(self) -> float:
        return self.elements.e

    def __repr__(self) -> str:
        return f"MeanElementsOrbit(a={self.elements.a:.4f}, e={self.elements.e:.5f})"


# ---------------------------------------------------------------------------
# KeplerOrbit
# ---------------------------------------------------------------------------

def mean_motion(e: float, q: float) -> float:
    """Mean motion (rad/day) from eccentricity and pericenter distance q (AU)."""
    if e == 1.0:
        return GAUSS_GRAV_K * (1.5 / q) * math.sqrt(0.5 / q)
    a = q / (1.0 - e)
    return GAUSS_GRAV_K / (abs(a) * math.sqrt(abs(a)))


def sidereal_period(a: float, central_mass: float = 1.0) -> float:
    """Sidereal period in days; 0 for open orbits (a <= 0)."""
    if a <= 0.0:
        return 0.0
    return TWO_PI / GAUSS_GRAV_K * math.sqrt(a * a * a / central_mass)


def _sign(x: float) -> float:
    return math.copysign(1.0, x) if x != 0.0 else 0.0


class KeplerOrbit(Orbit):
    """
    Two-body orbit from osculating elements.

        q   : pericenter distance (AU)
        e   : eccentricity (<1 ellipse, 1 parabola, >1 hyperbola)
        i   : inclination (rad)
        Om  : longitude of ascending node (rad)
        w   : argument of pericenter (rad)
        t0  : time of pericenter passage (JDE)
        n   : mean motion (rad/day); computed from q,e when omitted

    Anomalies are solved with Laguerre-Conway (Heafner ch. 5.3-5.5),
    which stays stable for near-parabolic comets.
    """

    def __init__(self, q: float, e: float, i: float, Om: float, w: float,
                 t0: float, n: Optional[float] = None, central_mass: float = 1.0):
        self.q = q
        self.e = e
        self.i = i
        self.Om = Om
        self.w = w
        self.t0 = t0
        self.n = mean_motion(e, q) if n is None else n
        self.central_mass = central_mass

        cw, sw = math.cos(w), math.sin(w)
        cOm, sOm = math.cos(Om), math.sin(Om)
        ci, si = math.cos(i), math.sin(i)
        # Heafner 5.3.1 - 5.3.6
        self._P = np.array([-sw*sOm*ci + cw*cOm, sw*cOm*ci + cw*sOm, sw*si])
        self._Q = np.array([-cw*sOm*ci - sw*cOm, cw*cOm*ci - sw*sOm, cw*si])

    # ------------------------------------------------------------------

    def _elliptic(self, dt: float) -> Tuple[float, float]:
        e, q = self.e, self.q
        a = q / (1.0 - e)
        M = (self.n * dt) % TWO_PI
        E = M + 0.85 * e * _sign(math.sin(M))
        for _ in range(10):
            Ep = E
            f2 = e * math.sin(E)
            f = E - f2 - M
            f1 = 1.0 - e * math.cos(E)
            E += (-5.0 * f) / (f1 + _sign(f1) * math.sqrt(abs(16.0*f1*f1 - 20.0*f*f2)))
            if abs(E - Ep) < _EPSILON:
                break
        h1 = q * math.sqrt((1.0 + e) / (1.0 - e))
        return a * (math.cos(E) - e), h1 * math.sin(E)

    def _hyperbolic(self, dt: float) -> Tuple[float, float]:
        e, q = self.e, self.q
        a = q / (e - 1.0)
        M = self.n * dt
        E = _sign(M) * math.log(2.0 * abs(M) / e + 1.85)
        for _ in range(50):
            Ep = E
            f2 = e * math.sinh(E)
            f = f2 - E - M
            f1 = e * math.cosh(E) - 1.0
            E += (-5.0 * f) / (f1 + _sign(f1) * math.sqrt(abs(16.0*f1*f1 - 20.0*f*f2)))
            if abs(E - Ep) < _EPSILON:
                break
        return a * (e - math.cosh(E)), a * math.sqrt(e*e - 1.0) * math.sinh(E)

    def _parabolic(self, dt: float) -> Tuple[float, float]:
        # Barker's equation
        q = self.q
        W = dt * self.n
        Y = (W + math.sqrt(W*W + 1.0)) ** (1.0 / 3.0)
        tan_nu2 = Y - 1.0 / Y
        return q * (1.0 - tan_nu2*tan_nu2), 2.0 * q * tan_nu2

    def position_at(self, jde: float) -> PositionVelocity:
        dt = jde - self.t0
        if self.e < 1.0:
            r_cos_nu, r_sin_nu = self._elliptic(dt)
        elif self.e > 1.0:
            r_cos_nu, r_sin_nu = self._hyperbolic(dt)
        else:
            r_cos_nu, r_sin_nu = self._parabolic(dt)

        pos = self._P * r_cos_nu + self._Q * r_sin_nu

        r = math.hypot(r_cos_nu, r_sin_nu)
        sin_nu, cos_nu = r_sin_nu / r, r_cos_nu / r
        p = self.q * (1.0 + self.e)   # semilatus rectum
        sqrt_mu_p = math.sqrt(GAUSS_GRAV_K_SQ * self.central_mass / p)
        vel = sqrt_mu_p * ((self.e + cos_nu) * self._Q - sin_nu * self._P)
        return pos, vel

    @property
    def semi_major_axis(self) -> float:
        if self.e == 1.0:
            return 0.0
        return self.q / (1.0 - self.e)

    @property
    def eccentricity(self) -> float:
        return self.e

    @property
    def sidereal_period(self) -> float:
        return sidereal_period(self.semi_major_axis, self.central_mass)

    def __repr__(self) -> str:
        return f"KeplerOrbit(q={self.q:.6f}, e={self.e:.6f}, t0={self.t0:.4f})"

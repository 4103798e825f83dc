"""
vsop87.py
=========
Posizioni planetarie da serie periodiche VSOP87 (Bretagnon & Francou 1988).

Ogni coordinata sferica X ∈ {L, B, R} (eclittica media della data) è:

    X(τ) = Σ_k τ^k · Σ_i A_i · cos(B_i + C_i·τ)      τ = (JDE − 2451545) / 365250

Le tabelle dei termini sono dati esterni: file CSV in data/vsop87/<corpo>.csv
con colonne coord,power,A,B,C (A in unità di 1e-8). Sono distribuite le
versioni troncate di Meeus, "Astronomical Algorithms" App. III, sufficienti
per ~1" nei secoli attorno a J2000.

La velocità è la derivata analitica della serie. Il risultato è precessato
dall'eclittica della data a quella di J2000 (sistema VSOP87).
"""

from __future__ import annotations
import functools
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from core.astro_time import julian_millennia
from core.frames import precession_matrix
from core.settings import DAYS_PER_MILLENNIUM
from .orbit import Orbit, PositionVelocity

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data" / "vsop87"

_AMPLITUDE_SCALE = 1e-8
_COORDS = ("L", "B", "R")


# ---------------------------------------------------------------------------
# Tabelle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SeriesTerms:
    """Terms of one coordinate and one power of τ, as numpy columns."""
    A: np.ndarray
    B: np.ndarray
    C: np.ndarray


SeriesTable = Dict[str, Tuple[SeriesTerms, ...]]


def available_bodies() -> list[str]:
    return sorted(p.stem for p in DATA_DIR.glob("*.csv"))


@functools.lru_cache(maxsize=None)
def load_series(body: str) -> SeriesTable:
    """
    Read the term table of a body. Result is cached and read-only.
    Raises FileNotFoundError if no table ships for the body.
    """
    path = DATA_DIR / f"{body.lower()}.csv"
    df = pd.read_csv(path, dtype={"coord": str, "power": int,
                                  "A": float, "B": float, "C": float})

    table: SeriesTable = {}
    for coord in _COORDS:
        rows = df[df["coord"] == coord]
        max_power = int(rows["power"].max()) if len(rows) else -1
        powers = []
        for k in range(max_power + 1):
            sub = rows[rows["power"] == k]
            terms = SeriesTerms(
                A=sub["A"].to_numpy(dtype=float) * _AMPLITUDE_SCALE,
                B=sub["B"].to_numpy(dtype=float),
                C=sub["C"].to_numpy(dtype=float),
            )
            for arr in (terms.A, terms.B, terms.C):
                arr.setflags(write=False)
            powers.append(terms)
        table[coord] = tuple(powers)

    logger.debug("Loaded VSOP87 series for %s: %d terms from %s",
                 body, len(df), path.name)
    return table


def evaluate_series(series: Tuple[SeriesTerms, ...], tau: float) -> Tuple[float, float]:
    """
    Value and τ-derivative of one coordinate.
        X  = Σ τ^k S_k          S_k  = Σ A cos(B + Cτ)
        X' = Σ (k τ^(k-1) S_k + τ^k S_k')
    """
    value = 0.0
    rate = 0.0
    tau_k = 1.0
    tau_km1 = 0.0
    for k, terms in enumerate(series):
        phase = terms.B + terms.C * tau
        s = float(np.sum(terms.A * np.cos(phase)))
        ds = float(np.sum(-terms.A * terms.C * np.sin(phase)))
        value += tau_k * s
        rate += k * tau_km1 * s + tau_k * ds
        tau_km1 = tau_k
        tau_k *= tau
    return value, rate


def spherical_of_date(body: str, jde: float) -> Tuple[Tuple[float, float, float], Tuple[float, float, float]]:
    """
    Heliocentric (L, B, R) of the mean ecliptic of date and their rates
    per day. L is wrapped to [0, 2π).
    """
    table = load_series(body)
    tau = julian_millennia(jde)
    (L, dL), (B, dB), (R, dR) = (evaluate_series(table[c], tau) for c in _COORDS)
    rates = (dL / DAYS_PER_MILLENNIUM, dB / DAYS_PER_MILLENNIUM, dR / DAYS_PER_MILLENNIUM)
    return (L % (2.0 * math.pi), B, R), rates


# ---------------------------------------------------------------------------
# Orbit
# ---------------------------------------------------------------------------

class Vsop87Orbit(Orbit):
    """Major-planet orbit summed from a VSOP87 term table."""

    def __init__(self, body: str, semi_major_axis: Optional[float] = None,
                 eccentricity: Optional[float] = None):
        self.body = body.lower()
        self._a = semi_major_axis
        self._e = eccentricity
        # FileNotFoundError for bodies without a table
        load_series(self.body)

    def position_at(self, jde: float) -> PositionVelocity:
        (L, B, R), (dL, dB, dR) = spherical_of_date(self.body, jde)

        cL, sL = math.cos(L), math.sin(L)
        cB, sB = math.cos(B), math.sin(B)
        pos = np.array([R * cB * cL, R * cB * sL, R * sB])
        vel = np.array([
            dR * cB * cL - R * sB * dB * cL - R * cB * sL * dL,
            dR * cB * sL - R * sB * dB * sL + R * cB * cL * dL,
            dR * sB + R * cB * dB,
        ])

        P = precession_matrix(julian_millennia(jde) * 10.0)
        return P @ pos, P @ vel

    @property
    def semi_major_axis(self):
        return self._a

    @property
    def eccentricity(self):
        return self._e

    def __repr__(self) -> str:
        return f"Vsop87Orbit({self.body!r})"

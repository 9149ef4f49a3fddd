"""Quartic shaping curves for terrain; domain and range are roughly [-1, 1]."""

from __future__ import annotations


def poly4(x: float, a: float, b: float, c: float, d: float, f: float) -> float:
    """Evaluate ``a*x^4 + b*x^3 + c*x^2 + d*x + f``."""
    x2 = x * x
    x3 = x2 * x
    x4 = x2 * x2
    return a * x4 + b * x3 + c * x2 + d * x + f


def continent(x: float) -> float:
    """Continentalness curve: steep, flat, steep."""
    return poly4(x, 2.41, -2.376, -1.62, 2.33, 0.177)


def erosion(x: float) -> float:
    """Erosion curve."""
    return poly4(x, -1.72, -1.465, 2.682, 0.454, -0.957)


def peak_valley(x: float) -> float:
    """Peaks-and-valleys curve."""
    return poly4(x, -1.585, -0.164, 1.924, 1.05, -0.422)
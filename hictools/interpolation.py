"""
One-dimensional interpolation of tabulated data.

  LinearSegment            straight line through two points
  DataLinearInterpolator   piecewise linear, linear extrapolation
  CubicSplineInterpolator  natural cubic spline, constant extrapolation

Sample pairs are sorted together by x through a stable permutation, and
repeated x values are rejected (exact floating-point equality).
Interpolators are immutable once built, so evaluation is safe to share
between readers.
"""
from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
from scipy.interpolate import CubicSpline

from .errors import DuplicateAbscissa, InsufficientData, InvalidInput


# ===================================================================
# Sorting helpers
# ===================================================================

def sort_permutation(x) -> np.ndarray:
    """Permutation that sorts x ascending, keeping the order of equal values."""
    return np.argsort(np.asarray(x, dtype=np.float64), kind="stable")


def apply_permutation(values, perm) -> np.ndarray:
    """Reorder values by a permutation from sort_permutation()."""
    return np.asarray(values, dtype=np.float64)[perm]


def find_index(sorted_values, value) -> int:
    """Index of the largest element of sorted_values that is < value.

    Returns 0 when no element is smaller.
    """
    idx = int(np.searchsorted(sorted_values, value, side="left")) - 1
    return max(idx, 0)


def _sorted_samples(x, y, name: str, min_points: int) -> Tuple[np.ndarray, np.ndarray]:
    """Validate (x, y), sort the pairs by x and reject duplicate abscissae."""
    try:
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"{name}: x and y must be numeric ({exc}).") from exc
    if x.ndim != 1 or y.ndim != 1:
        raise InvalidInput(
            f"{name}: x and y must be one-dimensional "
            f"(got shapes {x.shape} and {y.shape})."
        )
    if len(x) != len(y):
        raise InvalidInput(
            f"{name}: Need two vectors of equal length for interpolation "
            f"(got {len(x)} x and {len(y)} y values)."
        )
    if len(x) < min_points:
        raise InsufficientData(
            f"{name}: Need at least {min_points} data points for interpolation "
            f"(got {len(x)})."
        )
    for label, values in (("x", x), ("y", y)):
        bad = ~np.isfinite(values)
        if np.any(bad):
            raise InvalidInput(
                f'{name}: {label} values must be finite. "{values[bad][0]:g}" was found.'
            )
    perm = sort_permutation(x)
    sorted_x = apply_permutation(x, perm)
    sorted_y = apply_permutation(y, perm)

    same = sorted_x[:-1] == sorted_x[1:]
    if np.any(same):
        value = float(sorted_x[:-1][same][0])
        raise DuplicateAbscissa(
            value,
            f'{name}: Each x value must be unique. "{value:g}" was found twice.',
        )
    return sorted_x, sorted_y


def _evaluate(fn, xi):
    """Apply fn to a scalar or array and return float / ndarray to match."""
    xi = np.asarray(xi, dtype=np.float64)
    result = fn(xi)
    if result.ndim == 0:
        return float(result)
    return result


# ===================================================================
# Linear interpolation
# ===================================================================

class LinearSegment:
    """Straight line through (x0, y0) and (x1, y1)."""

    def __init__(self, x0: float, y0: float, x1: float, y1: float):
        if x0 == x1:
            raise InvalidInput(
                f"LinearSegment: x values of the two points must differ (both {x0:g})."
            )
        self.slope = (y1 - y0) / (x1 - x0)
        self.yintercept = y0 - self.slope * x0

    def __call__(self, x):
        return _evaluate(lambda v: self.slope * v + self.yintercept, x)


class DataLinearInterpolator:
    """Piecewise linear interpolation through tabulated points.

    Outside the sampled range the first (last) segment is extended, i.e.
    extrapolation is linear.
    """

    def __init__(self, x: Sequence[float], y: Sequence[float]):
        self._x, self._y = _sorted_samples(x, y, "DataLinearInterpolator", 2)
        self._slopes = np.diff(self._y) / np.diff(self._x)

    @property
    def x(self) -> np.ndarray:
        return self._x.copy()

    @property
    def y(self) -> np.ndarray:
        return self._y.copy()

    def _linear(self, xi: np.ndarray) -> np.ndarray:
        # segment i spans [x_i, x_{i+1}]; clip so edge segments extrapolate
        idx = np.searchsorted(self._x, xi, side="right") - 1
        idx = np.clip(idx, 0, len(self._slopes) - 1)
        return self._y[idx] + self._slopes[idx] * (xi - self._x[idx])

    def __call__(self, xi):
        return _evaluate(self._linear, xi)


# ===================================================================
# Natural cubic spline
# ===================================================================

class CubicSplineInterpolator:
    """Natural cubic spline through (x, y) with constant extrapolation.

    Needs at least 3 points with distinct x. Below the smallest sampled x
    the value at that point is returned, above the largest x the value at
    the largest x; the spline is only evaluated inside [first_x, last_x].

    Raises:
        InvalidInput: x and y have different lengths
        InsufficientData: fewer than 3 points
        DuplicateAbscissa: an x value occurs twice
    """

    def __init__(self, x: Sequence[float], y: Sequence[float]):
        self._x, self._y = _sorted_samples(x, y, "CubicSplineInterpolator", 3)
        self.first_x = float(self._x[0])
        self.last_x = float(self._x[-1])
        self.first_y = float(self._y[0])
        self.last_y = float(self._y[-1])
        # second derivative vanishes at both ends
        self._spline = CubicSpline(self._x, self._y, bc_type="natural", extrapolate=False)

    @property
    def x(self) -> np.ndarray:
        return self._x.copy()

    @property
    def y(self) -> np.ndarray:
        return self._y.copy()

    def _piecewise(self, xi: np.ndarray) -> np.ndarray:
        inside = np.clip(xi, self.first_x, self.last_x)
        return np.where(
            xi < self.first_x,
            self.first_y,
            np.where(xi > self.last_x, self.last_y, self._spline(inside)),
        )

    def evaluate(self, xi):
        """Interpolated value(s) at xi (scalar or array-like)."""
        return _evaluate(self._piecewise, xi)

    def __call__(self, xi):
        return self.evaluate(xi)

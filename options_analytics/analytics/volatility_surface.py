"""Volatility surface construction and bilinear interpolation.

A surface is built once from scattered (strike, maturity, volatility) points
into a rectangular grid, then queried many times. The builder expects a fully
populated grid: a (strike, maturity) cell with no input point is filled with
0.0, so sparse uploads introduce zero-volatility cells. This is logged as a
warning and otherwise left as is.
"""

import bisect
import logging
from typing import Any, Iterable, List, Mapping, Tuple

from ..models.option import OptionContract
from ..models.vol_surface import VolatilitySurfaceGrid
from ..utils.error_handling import DataValidationError, InsufficientDataError, safe_divide

logger = logging.getLogger("options_analytics.volatility_surface")


def _point_fields(point: Any) -> Tuple[float, float, float]:
    """Extract (strike, maturity, volatility) from a mapping or an object."""
    if isinstance(point, Mapping):
        vol = point['volatility'] if 'volatility' in point else point.get('vol')
        strike, maturity = point.get('strike'), point.get('maturity')
    else:
        vol = getattr(point, 'volatility', getattr(point, 'vol', None))
        strike, maturity = getattr(point, 'strike', None), getattr(point, 'maturity', None)

    if strike is None or maturity is None or vol is None:
        raise DataValidationError(f"Surface point missing strike, maturity or volatility: {point!r}")

    return float(strike), float(maturity), float(vol)


def build_surface(points: Iterable[Any]) -> VolatilitySurfaceGrid:
    """Build a rectangular volatility grid from scattered points.

    Args:
        points: Mappings or objects with strike, maturity and volatility
            (``vol`` is accepted as an alias)

    Returns:
        VolatilitySurfaceGrid with sorted unique axes. Cells without an input
        point hold 0.0. If a (strike, maturity) pair appears more than once,
        the first occurrence wins.

    Raises:
        InsufficientDataError: If no points are given
        DataValidationError: If a point lacks one of the three fields

    Example:
        >>> grid = build_surface([
        >>>     {'strike': 90, 'maturity': 0.5, 'volatility': 0.24},
        >>>     {'strike': 110, 'maturity': 0.5, 'volatility': 0.21},
        >>>     {'strike': 90, 'maturity': 1.0, 'volatility': 0.25},
        >>>     {'strike': 110, 'maturity': 1.0, 'volatility': 0.22},
        >>> ])
    """
    lookup = {}
    for point in points:
        strike, maturity, vol = _point_fields(point)
        lookup.setdefault((strike, maturity), vol)

    if not lookup:
        raise InsufficientDataError("Cannot build volatility surface from an empty point set")

    strikes = sorted({strike for strike, _ in lookup})
    maturities = sorted({maturity for _, maturity in lookup})

    missing = 0
    rows = []
    for maturity in maturities:
        row = []
        for strike in strikes:
            vol = lookup.get((strike, maturity))
            if vol is None:
                missing += 1
                vol = 0.0
            row.append(vol)
        rows.append(tuple(row))

    if missing:
        logger.warning(
            "Volatility surface is sparse: %d of %d cells missing, filled with 0.0",
            missing, len(strikes) * len(maturities)
        )

    logger.info(
        "Built volatility surface: %d strikes x %d maturities",
        len(strikes), len(maturities)
    )

    return VolatilitySurfaceGrid(
        strikes=tuple(strikes),
        maturities=tuple(maturities),
        vols=tuple(rows),
    )


def _bracket(axis: Tuple[float, ...], value: float) -> Tuple[int, int, float]:
    """Bracketing indices and fractional weight of value on a sorted axis.

    The value is clamped to the axis bounds, so queries outside the grid take
    the boundary value. The weight is 0 when both indices coincide.
    """
    clamped = min(max(value, axis[0]), axis[-1])
    lower = bisect.bisect_right(axis, clamped) - 1
    upper = min(lower + 1, len(axis) - 1)
    weight = safe_divide(clamped - axis[lower], axis[upper] - axis[lower])
    return lower, upper, weight


def interpolate_vol(grid: VolatilitySurfaceGrid, strike: float, maturity: float) -> float:
    """Bilinear interpolation of the surface at (strike, maturity).

    With x the strike weight and y the maturity weight inside the bracketing
    cell:
        v11 * (1-x)(1-y) + v12 * x(1-y) + v21 * (1-x)y + v22 * xy

    Args:
        grid: Surface to query
        strike: Strike price
        maturity: Time to expiration in years

    Returns:
        Interpolated volatility. Exactly the stored value at grid points.

    Raises:
        InsufficientDataError: If the grid has no strikes or maturities
    """
    if not grid.strikes or not grid.maturities:
        raise InsufficientDataError("Cannot query an empty volatility surface")

    i1, i2, x = _bracket(grid.strikes, strike)
    j1, j2, y = _bracket(grid.maturities, maturity)

    v11 = grid.vols[j1][i1]
    v12 = grid.vols[j1][i2]
    v21 = grid.vols[j2][i1]
    v22 = grid.vols[j2][i2]

    return (
        v11 * (1 - x) * (1 - y) +
        v12 * x * (1 - y) +
        v21 * (1 - x) * y +
        v22 * x * y
    )


def apply_volatility_surface(
    contracts: Iterable[OptionContract],
    grid: VolatilitySurfaceGrid
) -> List[OptionContract]:
    """Replace each contract's volatility with the surface value at its strike and maturity.

    Args:
        contracts: Contracts to re-mark
        grid: Volatility surface

    Returns:
        New contracts, in input order
    """
    marked = []
    for contract in contracts:
        vol = interpolate_vol(grid, contract.strike, contract.maturity)
        logger.debug(
            "Surface vol for %s K=%s T=%s: %.4f (was %.4f)",
            contract.ticker, contract.strike, contract.maturity, vol, contract.volatility
        )
        marked.append(contract.with_changes(volatility=vol))
    return marked

"""Volatility surface grid model."""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class VolatilitySurfaceGrid:
    """Rectangular implied volatility grid.

    ``vols[j][i]`` is the volatility at ``maturities[j]`` and ``strikes[i]``.
    Axes are sorted ascending and hold no duplicates.
    """

    strikes: Tuple[float, ...]
    maturities: Tuple[float, ...]
    vols: Tuple[Tuple[float, ...], ...]

    @property
    def shape(self) -> Tuple[int, int]:
        """(number of maturities, number of strikes)."""
        return len(self.maturities), len(self.strikes)

    def vol_at(self, maturity_index: int, strike_index: int) -> float:
        return self.vols[maturity_index][strike_index]

    def query(self, strike: float, maturity: float) -> float:
        """Bilinearly interpolated volatility at (strike, maturity)."""
        from ..analytics.volatility_surface import interpolate_vol
        return interpolate_vol(self, strike, maturity)

    def __repr__(self) -> str:
        n_mat, n_strike = self.shape
        return f"VolatilitySurfaceGrid({n_mat} maturities x {n_strike} strikes)"

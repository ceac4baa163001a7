"""Greek surfaces over a strike x maturity grid.

Re-prices a template contract at every node of an evenly spaced grid and
records one Greek, producing the 2-D array behind 3-D surface and contour
plots.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import numpy as np

from ..models.option import GREEK_NAMES, OptionContract
from ..models.portfolio import Portfolio
from ..utils.error_handling import InsufficientDataError
from .greeks import BlackScholesEngine

logger = logging.getLogger("options_analytics.surface_sampler")


class SurfaceConfig:
    """Sampling policy for Greek surfaces."""

    def __init__(
        self,
        strike_low_pct: float = 0.7,
        strike_high_pct: float = 1.3,
        maturity_min: float = 0.1,
        maturity_max: float = 2.0,
        resolution: int = 40,
    ):
        """Initialize surface sampling configuration.

        Args:
            strike_low_pct: Lowest strike as a fraction of spot (0.7 = 70%)
            strike_high_pct: Highest strike as a fraction of spot
            maturity_min: Shortest maturity in years
            maturity_max: Longest maturity in years
            resolution: Points along each axis
        """
        self.strike_low_pct = strike_low_pct
        self.strike_high_pct = strike_high_pct
        self.maturity_min = maturity_min
        self.maturity_max = maturity_max
        self.resolution = resolution

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "SurfaceConfig":
        """Create SurfaceConfig from dictionary (e.g., from YAML)."""
        return cls(
            strike_low_pct=config.get('strike_low_pct', 0.7),
            strike_high_pct=config.get('strike_high_pct', 1.3),
            maturity_min=config.get('maturity_min', 0.1),
            maturity_max=config.get('maturity_max', 2.0),
            resolution=config.get('resolution', 40),
        )

    def strike_range(self, spot: float) -> Tuple[float, float]:
        return spot * self.strike_low_pct, spot * self.strike_high_pct

    @property
    def maturity_range(self) -> Tuple[float, float]:
        return self.maturity_min, self.maturity_max


@dataclass(frozen=True)
class GreekSurface:
    """Sampled Greek values.

    ``values[j, i]`` is the Greek at ``maturities[j]`` and ``strikes[i]``.
    """
    greek: str
    strikes: np.ndarray
    maturities: np.ndarray
    values: np.ndarray

    def cross_section(self, maturity_index: int) -> np.ndarray:
        """Greek values across strikes at one maturity."""
        return self.values[maturity_index]


@dataclass(frozen=True)
class SurfaceStatistics:
    """Summary of a sampled surface (population standard deviation)."""
    min: float
    max: float
    mean: float
    std: float


def sample_greek_surface(
    template: OptionContract,
    greek: str,
    strike_range: Optional[Tuple[float, float]] = None,
    maturity_range: Tuple[float, float] = (0.1, 2.0),
    resolution: int = 40,
) -> GreekSurface:
    """Evaluate one Greek over an evenly spaced strike x maturity grid.

    Args:
        template: Contract supplying spot, volatility, rate and type
        greek: One of delta, gamma, theta, vega, rho
        strike_range: (low, high) strikes; defaults to 70%-130% of spot
        maturity_range: (shortest, longest) maturity in years
        resolution: Points along each axis (40 gives 1600 evaluations)

    Returns:
        GreekSurface with values indexed [maturity][strike]

    Raises:
        ValueError: If greek is unknown or resolution is below 2

    Example:
        >>> surface = sample_greek_surface(template, 'gamma')
        >>> surface.values.shape
        (40, 40)
    """
    if greek not in GREEK_NAMES:
        raise ValueError(f"Invalid greek: {greek!r} (expected one of {', '.join(GREEK_NAMES)})")
    if resolution < 2:
        raise ValueError(f"Resolution must be at least 2, got {resolution}")

    if strike_range is None:
        strike_range = (template.spot * 0.7, template.spot * 1.3)

    strikes = np.linspace(strike_range[0], strike_range[1], resolution)
    maturities = np.linspace(maturity_range[0], maturity_range[1], resolution)

    values = np.empty((len(maturities), len(strikes)))
    for j, maturity in enumerate(maturities):
        for i, strike in enumerate(strikes):
            node = template.with_changes(strike=float(strike), maturity=float(maturity))
            values[j, i] = BlackScholesEngine.greeks(node).get(greek)

    logger.debug(
        "Sampled %s surface for %s: %d x %d nodes",
        greek, template.ticker, len(maturities), len(strikes)
    )

    return GreekSurface(greek=greek, strikes=strikes, maturities=maturities, values=values)


def sample_with_config(template: OptionContract, greek: str, config: SurfaceConfig) -> GreekSurface:
    """Sample a Greek surface using a SurfaceConfig policy."""
    return sample_greek_surface(
        template,
        greek,
        strike_range=config.strike_range(template.spot),
        maturity_range=config.maturity_range,
        resolution=config.resolution,
    )


def surface_statistics(surface: GreekSurface) -> SurfaceStatistics:
    """Min, max, mean and population standard deviation of all surface values."""
    flat = surface.values.ravel()
    return SurfaceStatistics(
        min=float(np.min(flat)),
        max=float(np.max(flat)),
        mean=float(np.mean(flat)),
        std=float(np.std(flat)),
    )


def template_from_portfolio(portfolio: Portfolio) -> OptionContract:
    """First position of a portfolio, used as the surface template.

    Raises:
        InsufficientDataError: If the portfolio has no positions
    """
    if portfolio.is_empty:
        raise InsufficientDataError("Cannot sample a Greek surface from an empty portfolio")
    return portfolio.options[0].contract

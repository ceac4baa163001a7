"""Core data models for options portfolio analytics."""

from .attribution import PnLAttribution
from .option import GREEK_NAMES, Greeks, OptionContract, OptionMetrics
from .portfolio import Portfolio
from .scenario import StressScenario, TuningParams
from .vol_surface import VolatilitySurfaceGrid

__all__ = [
    "GREEK_NAMES",
    "Greeks",
    "OptionContract",
    "OptionMetrics",
    "Portfolio",
    "StressScenario",
    "TuningParams",
    "PnLAttribution",
    "VolatilitySurfaceGrid",
]

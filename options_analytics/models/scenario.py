"""Scenario descriptors for stress tests and what-if tuning.

Both descriptors shift the risk-free rate by ``rate_shift_bps / 100``, so the
shift value is read in percentage points of the decimal rate.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class StressScenario:
    """Discrete market shock applied to every position.

    Attributes:
        spot_pct_change: Spot change in percent (+10 means spot * 1.10)
        vol_pct_change: Volatility change in percent (multiplicative)
        rate_shift_bps: Additive rate shift, applied as rate_shift_bps / 100
        name: Optional label used in reports
    """

    spot_pct_change: float = 0.0
    vol_pct_change: float = 0.0
    rate_shift_bps: float = 0.0
    name: str = ""

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "StressScenario":
        """Create StressScenario from dictionary (e.g., from YAML).

        Args:
            config: Dictionary with scenario parameters

        Returns:
            StressScenario instance
        """
        return cls(
            spot_pct_change=float(config.get('spot_pct_change', 0.0)),
            vol_pct_change=float(config.get('vol_pct_change', 0.0)),
            rate_shift_bps=float(config.get('rate_shift_bps', 0.0)),
            name=str(config.get('name', '')),
        )

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        return (f"spot {self.spot_pct_change:+g}% / vol {self.vol_pct_change:+g}% / "
                f"rate {self.rate_shift_bps:+g}")


@dataclass(frozen=True)
class TuningParams:
    """Continuous what-if adjustments.

    Attributes:
        volatility_multiplier: Factor applied to every volatility (1.0 = unchanged)
        time_decay_days: Days subtracted from every maturity
        rate_shift_bps: Additive rate shift, applied as rate_shift_bps / 100
    """

    volatility_multiplier: float = 1.0
    time_decay_days: float = 0.0
    rate_shift_bps: float = 0.0

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "TuningParams":
        return cls(
            volatility_multiplier=float(config.get('volatility_multiplier', 1.0)),
            time_decay_days=float(config.get('time_decay_days', 0.0)),
            rate_shift_bps=float(config.get('rate_shift_bps', 0.0)),
        )

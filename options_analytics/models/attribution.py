"""P&L attribution result model."""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class PnLAttribution:
    """Decomposition of a portfolio value change into Greek contributions.

    All values in currency. ``unexplained`` is the residual, so
    total == delta + gamma + theta + vega + rho + unexplained.
    """

    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float
    unexplained: float
    total: float

    @property
    def explained(self) -> float:
        """Sum of the Taylor-series components."""
        return self.delta + self.gamma + self.theta + self.vega + self.rho

    def components(self) -> List[Tuple[str, float]]:
        """Ordered (label, value) pairs, ending with the total.

        Suitable for a waterfall chart: each component bar followed by the
        total bar.
        """
        return [
            ("Delta", self.delta),
            ("Gamma", self.gamma),
            ("Theta", self.theta),
            ("Vega", self.vega),
            ("Rho", self.rho),
            ("Unexplained", self.unexplained),
            ("Total", self.total),
        ]

    def __repr__(self) -> str:
        return (f"PnLAttribution(total={self.total:.2f} Δ={self.delta:.2f} "
                f"Γ={self.gamma:.2f} Θ={self.theta:.2f} V={self.vega:.2f} "
                f"ρ={self.rho:.2f} unexplained={self.unexplained:.2f})")

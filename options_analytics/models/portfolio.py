"""Portfolio snapshot model."""

from dataclasses import dataclass, field
from typing import Tuple

from .option import Greeks, OptionContract, OptionMetrics


@dataclass(frozen=True)
class Portfolio:
    """Priced positions plus their quantity-weighted totals.

    Built by ``aggregate_portfolio``; totals always equal the sums over
    ``options`` of price * quantity and greek * quantity.
    """

    options: Tuple[OptionMetrics, ...] = ()
    total_value: float = 0.0
    aggregate_greeks: Greeks = field(default_factory=Greeks.zero)

    @property
    def contracts(self) -> Tuple[OptionContract, ...]:
        """Underlying contracts in position order."""
        return tuple(opt.contract for opt in self.options)

    @property
    def is_empty(self) -> bool:
        return not self.options

    def __len__(self) -> int:
        return len(self.options)

    def __repr__(self) -> str:
        g = self.aggregate_greeks
        return (f"Portfolio(positions={len(self.options)} value={self.total_value:.2f} "
                f"Δ={g.delta:.2f} Γ={g.gamma:.4f} Θ={g.theta:.2f} V={g.vega:.2f} ρ={g.rho:.2f})")

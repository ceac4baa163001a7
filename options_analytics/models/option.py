"""Core option contract, Greeks and per-position metrics models."""

from dataclasses import dataclass, replace, asdict
from typing import Dict, Literal

GREEK_NAMES = ("delta", "gamma", "theta", "vega", "rho")

OptionType = Literal["Call", "Put"]


@dataclass(frozen=True)
class OptionContract:
    """Represents a single European option position.

    Immutable dataclass to prevent accidental mutations during scenario runs.
    Maturity in years, volatility and rate as decimals (0.25 = 25%).
    Quantity is a signed contract count (negative = short).
    """

    ticker: str
    option_type: OptionType
    spot: float
    strike: float
    maturity: float
    volatility: float
    rate: float
    quantity: float

    @property
    def sign(self) -> int:
        """+1 for calls, -1 for puts."""
        return 1 if self.option_type == "Call" else -1

    @property
    def is_call(self) -> bool:
        return self.option_type == "Call"

    @property
    def intrinsic_value(self) -> float:
        """Payoff if exercised now: max(0, sign * (S - K))."""
        return float(max(0.0, self.sign * (self.spot - self.strike)))

    def with_changes(self, **changes) -> "OptionContract":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def __repr__(self) -> str:
        """Compact string representation for debugging."""
        return (f"OptionContract({self.ticker} {self.strike:g}{self.option_type[0]} "
                f"S={self.spot:g} T={self.maturity:.3f} σ={self.volatility:.2%} "
                f"r={self.rate:.2%} x{self.quantity:g})")


@dataclass(frozen=True)
class Greeks:
    """The five Black-Scholes sensitivities, always computed together.

    Units:
        delta: per 1.0 change in spot
        gamma: per 1.0 change in spot, squared
        theta: per year (use theta_per_day for daily decay)
        vega: per 1.0 change in volatility (use vega_per_vol_point for 1%)
        rho: per 1.0 change in rate
    """

    delta: float
    gamma: float
    theta: float
    vega: float
    rho: float

    @classmethod
    def zero(cls) -> "Greeks":
        return cls(delta=0.0, gamma=0.0, theta=0.0, vega=0.0, rho=0.0)

    @property
    def theta_per_day(self) -> float:
        return self.theta / 365

    @property
    def vega_per_vol_point(self) -> float:
        return self.vega / 100

    def scaled(self, factor: float) -> "Greeks":
        """Multiply every Greek by factor (e.g. a position quantity)."""
        return Greeks(
            delta=self.delta * factor,
            gamma=self.gamma * factor,
            theta=self.theta * factor,
            vega=self.vega * factor,
            rho=self.rho * factor,
        )

    def __add__(self, other: "Greeks") -> "Greeks":
        if not isinstance(other, Greeks):
            return NotImplemented
        return Greeks(
            delta=self.delta + other.delta,
            gamma=self.gamma + other.gamma,
            theta=self.theta + other.theta,
            vega=self.vega + other.vega,
            rho=self.rho + other.rho,
        )

    def get(self, name: str) -> float:
        """Look up a Greek by name.

        Raises:
            ValueError: If name is not one of GREEK_NAMES
        """
        if name not in GREEK_NAMES:
            raise ValueError(f"Invalid greek: {name!r} (expected one of {', '.join(GREEK_NAMES)})")
        return getattr(self, name)

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class OptionMetrics:
    """An option contract together with its theoretical price and Greeks.

    Derived once from the contract and never mutated; a changed input means
    a new OptionMetrics.
    """

    contract: OptionContract
    price: float
    greeks: Greeks

    @property
    def total_value(self) -> float:
        """Position value: price * quantity."""
        return self.price * self.contract.quantity

    @property
    def position_greeks(self) -> Greeks:
        """Greeks weighted by the position quantity."""
        return self.greeks.scaled(self.contract.quantity)

    @property
    def ticker(self) -> str:
        return self.contract.ticker

    @property
    def quantity(self) -> float:
        return self.contract.quantity

    def __repr__(self) -> str:
        return (f"OptionMetrics({self.contract.ticker} {self.contract.strike:g}"
                f"{self.contract.option_type[0]} price={self.price:.4f} "
                f"Δ={self.greeks.delta:.3f} value={self.total_value:.2f})")

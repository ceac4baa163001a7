"""Console output formatter for portfolio analytics results."""

from typing import List, Tuple

from ..analytics.surface_sampler import GreekSurface, SurfaceStatistics
from ..models.attribution import PnLAttribution
from ..models.option import GREEK_NAMES
from ..models.portfolio import Portfolio
from ..models.scenario import StressScenario
from ..risk.scenarios import ScenarioImpact


def _fmt_pct(value: float | None) -> str:
    if value is None:
        return "n/a"
    return f"{value:+.2f}%"


def print_header(title: str):
    """Print a section header."""
    print("\n" + "=" * 80)
    print(f"  {title}")
    print("=" * 80)


def print_portfolio(portfolio: Portfolio):
    """Print positions and portfolio totals.

    Args:
        portfolio: Aggregated portfolio
    """
    if portfolio.is_empty:
        print("Portfolio is empty.")
        return

    header = (
        f"{'Ticker':<8} {'Type':<4} {'Spot':>9} {'Strike':>9} {'T':>6} {'Vol':>7} "
        f"{'Qty':>6} {'Price':>10} {'Delta':>8} {'Gamma':>8} {'Value':>12}"
    )
    print(header)
    print("-" * len(header))

    for opt in portfolio.options:
        c = opt.contract
        print(
            f"{c.ticker:<8} {c.option_type:<4} {c.spot:>9.2f} {c.strike:>9.2f} "
            f"{c.maturity:>6.3f} {c.volatility:>7.2%} {c.quantity:>6g} "
            f"{opt.price:>10.4f} {opt.greeks.delta:>8.4f} {opt.greeks.gamma:>8.5f} "
            f"{opt.total_value:>12.2f}"
        )

    print("-" * len(header))
    g = portfolio.aggregate_greeks
    print(f"  Total value: ${portfolio.total_value:,.2f}")
    print(f"  Delta: {g.delta:.4f}  Gamma: {g.gamma:.6f}  Theta: {g.theta:.4f}/yr "
          f"({g.theta_per_day:.4f}/day)")
    print(f"  Vega: {g.vega:.4f}  Rho: {g.rho:.4f}")


def print_stress_results(results: List[Tuple[StressScenario, Portfolio, ScenarioImpact]]):
    """Print value and Greek changes for each stress scenario."""
    if not results:
        print("No stress scenarios run.")
        return

    header = f"{'Scenario':<28} {'Value':>14} {'Change':>10} {'dDelta':>10} {'dGamma':>10} {'dVega':>10}"
    print(header)
    print("-" * len(header))

    for scenario, stressed, impact in results:
        print(
            f"{scenario.label:<28} {stressed.total_value:>14,.2f} "
            f"{_fmt_pct(impact.value_change_pct):>10} "
            f"{_fmt_pct(impact.greek_changes_pct['delta']):>10} "
            f"{_fmt_pct(impact.greek_changes_pct['gamma']):>10} "
            f"{_fmt_pct(impact.greek_changes_pct['vega']):>10}"
        )


def print_impact(title: str, impact: ScenarioImpact):
    """Print the full before/after comparison of one scenario."""
    print(f"\n{title}")
    print(f"  Value: {impact.base_value:,.2f} -> {impact.scenario_value:,.2f} "
          f"({_fmt_pct(impact.value_change_pct)})")
    for name in GREEK_NAMES:
        print(f"  {name.capitalize():<6} change: {impact.greek_changes[name]:+.4f} "
              f"({_fmt_pct(impact.greek_changes_pct[name])})")


def print_attribution(attribution: PnLAttribution):
    """Print P&L attribution components."""
    print("\nP&L Attribution:")
    for label, value in attribution.components():
        if label == "Total":
            print("  " + "-" * 26)
        print(f"  {label:<12} {value:>14,.2f}")


def print_surface_summary(surface: GreekSurface, stats: SurfaceStatistics):
    """Print the axes and summary statistics of a sampled Greek surface."""
    print(f"\n{surface.greek.capitalize()} surface "
          f"({len(surface.maturities)} maturities x {len(surface.strikes)} strikes)")
    print(f"  Strikes: {surface.strikes[0]:.2f} to {surface.strikes[-1]:.2f}")
    print(f"  Maturities: {surface.maturities[0]:.2f} to {surface.maturities[-1]:.2f} years")
    print(f"  Min: {stats.min:.6f}  Max: {stats.max:.6f}  "
          f"Mean: {stats.mean:.6f}  Std: {stats.std:.6f}")

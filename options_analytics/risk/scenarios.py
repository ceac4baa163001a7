"""Stress testing and what-if tuning of a portfolio.

Both transforms map every underlying contract to a shifted copy and
re-aggregate; the source portfolio is never modified.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from ..models.option import GREEK_NAMES, OptionContract
from ..models.portfolio import Portfolio
from ..models.scenario import StressScenario, TuningParams
from ..utils.error_handling import percent_change
from .portfolio import aggregate_portfolio

logger = logging.getLogger("options_analytics.scenarios")

DAYS_PER_YEAR = 365


def stress_contract(contract: OptionContract, scenario: StressScenario) -> OptionContract:
    """Apply a stress scenario to one contract.

    spot' = spot * (1 + spot_pct_change / 100)
    volatility' = volatility * (1 + vol_pct_change / 100)
    rate' = rate + rate_shift_bps / 100
    """
    return contract.with_changes(
        spot=contract.spot * (1 + scenario.spot_pct_change / 100),
        volatility=contract.volatility * (1 + scenario.vol_pct_change / 100),
        rate=contract.rate + scenario.rate_shift_bps / 100,
    )


def tune_contract(contract: OptionContract, tuning: TuningParams) -> OptionContract:
    """Apply what-if tuning to one contract.

    volatility' = volatility * volatility_multiplier
    maturity' = max(0, maturity - time_decay_days / 365)
    rate' = rate + rate_shift_bps / 100

    A maturity decayed to zero is priced at intrinsic value by the engine.
    """
    return contract.with_changes(
        volatility=contract.volatility * tuning.volatility_multiplier,
        maturity=max(0.0, contract.maturity - tuning.time_decay_days / DAYS_PER_YEAR),
        rate=contract.rate + tuning.rate_shift_bps / 100,
    )


def apply_stress(portfolio: Portfolio, scenario: StressScenario) -> Portfolio:
    """Re-price a portfolio under a stress scenario.

    Args:
        portfolio: Source portfolio (unchanged)
        scenario: Spot, volatility and rate shocks

    Returns:
        New Portfolio built from the stressed contracts

    Example:
        >>> crash = StressScenario(spot_pct_change=-20, vol_pct_change=50)
        >>> stressed = apply_stress(portfolio, crash)
    """
    logger.debug("Applying stress scenario %s to %d positions", scenario.label, len(portfolio))
    return aggregate_portfolio(stress_contract(c, scenario) for c in portfolio.contracts)


def apply_tuning(portfolio: Portfolio, tuning: TuningParams) -> Portfolio:
    """Re-price a portfolio under what-if tuning parameters.

    Args:
        portfolio: Source portfolio (unchanged)
        tuning: Volatility multiplier, time decay and rate shift

    Returns:
        New Portfolio built from the tuned contracts
    """
    logger.debug(
        "Applying tuning vol x%.2f, decay %.1f days, rate shift %+.2f to %d positions",
        tuning.volatility_multiplier, tuning.time_decay_days, tuning.rate_shift_bps, len(portfolio)
    )
    return aggregate_portfolio(tune_contract(c, tuning) for c in portfolio.contracts)


@dataclass(frozen=True)
class ScenarioImpact:
    """Change in portfolio value and aggregate Greeks between two portfolios.

    Attributes:
        base_value: Total value before the scenario
        scenario_value: Total value after the scenario
        value_change: scenario_value - base_value
        value_change_pct: Percent change relative to |base_value|, None if base is zero
        greek_changes: Greek name -> absolute change in aggregate Greek
        greek_changes_pct: Greek name -> percent change, None where base is zero
    """
    base_value: float
    scenario_value: float
    value_change: float
    value_change_pct: float | None
    greek_changes: Dict[str, float]
    greek_changes_pct: Dict[str, float | None]


def compare_portfolios(base: Portfolio, shocked: Portfolio) -> ScenarioImpact:
    """Measure how a scenario moved the portfolio totals.

    Args:
        base: Portfolio before the scenario
        shocked: Portfolio after the scenario

    Returns:
        ScenarioImpact with absolute and percentage changes
    """
    greek_changes = {}
    greek_changes_pct = {}
    for name in GREEK_NAMES:
        old = base.aggregate_greeks.get(name)
        new = shocked.aggregate_greeks.get(name)
        greek_changes[name] = new - old
        greek_changes_pct[name] = percent_change(new, old)

    return ScenarioImpact(
        base_value=base.total_value,
        scenario_value=shocked.total_value,
        value_change=shocked.total_value - base.total_value,
        value_change_pct=percent_change(shocked.total_value, base.total_value),
        greek_changes=greek_changes,
        greek_changes_pct=greek_changes_pct,
    )


def run_stress_suite(
    portfolio: Portfolio,
    scenarios: Iterable[StressScenario]
) -> List[Tuple[StressScenario, Portfolio, ScenarioImpact]]:
    """Run several stress scenarios against the same portfolio.

    Returns:
        One (scenario, stressed portfolio, impact) tuple per scenario, in order
    """
    results = []
    for scenario in scenarios:
        stressed = apply_stress(portfolio, scenario)
        impact = compare_portfolios(portfolio, stressed)
        results.append((scenario, stressed, impact))

    logger.info("Ran %d stress scenarios on %d positions", len(results), len(portfolio))
    return results

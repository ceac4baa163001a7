"""Portfolio aggregation, scenario analysis and P&L attribution."""

from options_analytics.risk.portfolio import (
    TickerExposure,
    aggregate_portfolio,
    build_portfolio,
    exposure_by_ticker,
)
from options_analytics.risk.scenarios import (
    ScenarioImpact,
    apply_stress,
    apply_tuning,
    compare_portfolios,
    run_stress_suite,
)
from options_analytics.risk.attribution import attribute_pnl

__all__ = [
    'TickerExposure',
    'aggregate_portfolio',
    'build_portfolio',
    'exposure_by_ticker',
    'ScenarioImpact',
    'apply_stress',
    'apply_tuning',
    'compare_portfolios',
    'run_stress_suite',
    'attribute_pnl',
]

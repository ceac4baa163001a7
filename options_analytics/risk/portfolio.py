"""Portfolio-level aggregation of prices and Greeks.

Prices every position with the Black-Scholes engine and reduces the results
to quantity-weighted portfolio totals.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..analytics.greeks import BlackScholesEngine
from ..models.option import Greeks, OptionContract, OptionMetrics
from ..models.portfolio import Portfolio

logger = logging.getLogger("options_analytics.portfolio")


def aggregate_portfolio(contracts: Iterable[OptionContract]) -> Portfolio:
    """Price every contract and aggregate to portfolio totals.

    Args:
        contracts: Option contracts in position order

    Returns:
        Portfolio whose total_value is the sum of price * quantity and whose
        aggregate_greeks are the sums of greek * quantity. Positions keep
        their input order. An empty input gives an empty portfolio with zero
        totals.

    Example:
        >>> portfolio = aggregate_portfolio([call_contract, put_contract])
        >>> portfolio.aggregate_greeks.delta
    """
    options = tuple(BlackScholesEngine.metrics(contract) for contract in contracts)
    return build_portfolio(options)


def build_portfolio(options: Iterable[OptionMetrics]) -> Portfolio:
    """Reduce already-priced positions to a Portfolio."""
    options = tuple(options)

    total_value = 0.0
    delta = gamma = theta = vega = rho = 0.0

    for opt in options:
        quantity = opt.contract.quantity
        total_value += opt.price * quantity

        delta += opt.greeks.delta * quantity
        gamma += opt.greeks.gamma * quantity
        theta += opt.greeks.theta * quantity
        vega += opt.greeks.vega * quantity
        rho += opt.greeks.rho * quantity

    aggregate = Greeks(delta=delta, gamma=gamma, theta=theta, vega=vega, rho=rho)

    logger.debug(
        "Aggregated %d positions: value=%.2f delta=%.4f gamma=%.6f theta=%.4f vega=%.4f rho=%.4f",
        len(options), total_value, delta, gamma, theta, vega, rho
    )

    return Portfolio(options=options, total_value=total_value, aggregate_greeks=aggregate)


@dataclass(frozen=True)
class TickerExposure:
    """Value and quantity-weighted Greeks of all positions on one ticker.

    Attributes:
        ticker: Underlying identifier
        positions: Number of positions on this ticker
        total_value: Sum of position values
        greeks: Sum of greek * quantity
    """
    ticker: str
    positions: int
    total_value: float
    greeks: Greeks


def exposure_by_ticker(portfolio: Portfolio) -> Dict[str, TickerExposure]:
    """Group a portfolio's positions by ticker.

    Args:
        portfolio: Aggregated portfolio

    Returns:
        Dictionary mapping ticker to TickerExposure, ordered by the first
        appearance of each ticker in the portfolio
    """
    grouped: Dict[str, List[OptionMetrics]] = {}
    for opt in portfolio.options:
        grouped.setdefault(opt.ticker, []).append(opt)

    exposures = {}
    for ticker, options in grouped.items():
        sub = build_portfolio(options)
        exposures[ticker] = TickerExposure(
            ticker=ticker,
            positions=len(options),
            total_value=sub.total_value,
            greeks=sub.aggregate_greeks,
        )

    return exposures

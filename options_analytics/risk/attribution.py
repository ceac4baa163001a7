"""P&L attribution between two portfolio snapshots.

Explains the change in portfolio value with a Taylor expansion around the
previous snapshot's Greeks. Cross terms and higher-order effects end up in
the unexplained residual, which grows with the size of the market move and
is not an error.
"""

import logging

from ..models.attribution import PnLAttribution
from ..models.portfolio import Portfolio
from ..utils.error_handling import PortfolioMismatchError

logger = logging.getLogger("options_analytics.attribution")


def attribute_pnl(
    current: Portfolio,
    previous: Portfolio,
    elapsed_days: float = 1.0
) -> PnLAttribution:
    """Decompose the value change from previous to current.

    Positions are matched by index. For each pair, with quantity taken from
    the current position:
        delta += prev.delta * dS * q
        gamma += 0.5 * prev.gamma * dS^2 * q
        theta += prev.theta * (elapsed_days / 365) * q
        vega  += prev.vega * d_vol * q
        rho   += prev.rho * d_rate * q

    Args:
        current: Later snapshot
        previous: Earlier snapshot, positionally aligned with current
        elapsed_days: Calendar days between the snapshots

    Returns:
        PnLAttribution whose components sum exactly to total

    Raises:
        PortfolioMismatchError: If the snapshots hold different numbers of positions
    """
    if len(current.options) != len(previous.options):
        raise PortfolioMismatchError(
            f"Cannot attribute P&L: current portfolio has {len(current.options)} positions, "
            f"previous has {len(previous.options)}"
        )

    delta_pnl = gamma_pnl = theta_pnl = vega_pnl = rho_pnl = 0.0
    year_fraction = elapsed_days / 365

    for index, (cur, prev) in enumerate(zip(current.options, previous.options)):
        cur_contract, prev_contract = cur.contract, prev.contract

        if cur_contract.ticker != prev_contract.ticker or cur_contract.quantity != prev_contract.quantity:
            logger.warning(
                "Position %d differs between snapshots (%s x%s vs %s x%s); "
                "using current quantity",
                index, prev_contract.ticker, prev_contract.quantity,
                cur_contract.ticker, cur_contract.quantity
            )

        quantity = cur_contract.quantity
        spot_change = cur_contract.spot - prev_contract.spot
        vol_change = cur_contract.volatility - prev_contract.volatility
        rate_change = cur_contract.rate - prev_contract.rate

        delta_pnl += prev.greeks.delta * spot_change * quantity
        gamma_pnl += 0.5 * prev.greeks.gamma * spot_change * spot_change * quantity
        theta_pnl += prev.greeks.theta * year_fraction * quantity
        vega_pnl += prev.greeks.vega * vol_change * quantity
        rho_pnl += prev.greeks.rho * rate_change * quantity

    total = current.total_value - previous.total_value
    unexplained = total - (delta_pnl + gamma_pnl + theta_pnl + vega_pnl + rho_pnl)

    logger.debug(
        "P&L attribution over %.1f days: total=%.2f unexplained=%.2f",
        elapsed_days, total, unexplained
    )

    return PnLAttribution(
        delta=delta_pnl,
        gamma=gamma_pnl,
        theta=theta_pnl,
        vega=vega_pnl,
        rho=rho_pnl,
        unexplained=unexplained,
        total=total,
    )

"""Black-Scholes pricing and Greeks for European options.

Closed-form price and the five Greeks for a single contract. The engine does
not validate its inputs: spot, strike and volatility must be positive, and a
violation surfaces as an arithmetic error or a non-finite result rather than
a coerced value. A maturity of zero or less is priced at expiry (intrinsic
value, degenerate Greeks).
"""

import logging
import math
from typing import List, Tuple

from scipy.stats import norm

from ..models.option import Greeks, OptionContract, OptionMetrics

logger = logging.getLogger("options_analytics.greeks")


class BlackScholesEngine:
    """Price European options and compute Greeks using Black-Scholes.

    Assumes no dividends. Theta is per year, vega per 1.0 change in
    volatility and rho per 1.0 change in rate.
    """

    @staticmethod
    def d1_d2(
        spot: float,
        strike: float,
        maturity: float,
        rate: float,
        vol: float
    ) -> Tuple[float, float]:
        """Calculate the d1 and d2 terms of the Black-Scholes formula.

        Args:
            spot: Current underlying price
            strike: Strike price
            maturity: Time to expiration in years
            rate: Risk-free interest rate (annualized)
            vol: Volatility (annualized)

        Returns:
            Tuple of (d1, d2)
        """
        vol_sqrt_t = vol * math.sqrt(maturity)
        d1 = (math.log(spot / strike) + (rate + 0.5 * vol ** 2) * maturity) / vol_sqrt_t
        d2 = d1 - vol_sqrt_t
        return d1, d2

    @staticmethod
    def price(contract: OptionContract) -> float:
        """Theoretical value of one contract.

        Call: S * N(d1) - K * e^(-rT) * N(d2)
        Put:  K * e^(-rT) * N(-d2) - S * N(-d1)

        Example:
            >>> BlackScholesEngine.price(OptionContract(
            >>>     'ABC', 'Call', spot=100, strike=100, maturity=1.0,
            >>>     volatility=0.2, rate=0.05, quantity=1))
            >>> # Returns ~10.4506
        """
        if contract.maturity <= 0:
            return contract.intrinsic_value

        S, K, T = contract.spot, contract.strike, contract.maturity
        r, sigma = contract.rate, contract.volatility

        d1, d2 = BlackScholesEngine.d1_d2(S, K, T, r, sigma)
        discount = math.exp(-r * T)

        if contract.is_call:
            return float(S * norm.cdf(d1) - K * discount * norm.cdf(d2))
        return float(K * discount * norm.cdf(-d2) - S * norm.cdf(-d1))

    @staticmethod
    def greeks(contract: OptionContract) -> Greeks:
        """All five Greeks of one contract.

        With sign = +1 for calls and -1 for puts:
            delta = sign * N(sign * d1)
            gamma = N'(d1) / (S * sigma * sqrt(T))
            theta = -S * sigma * N'(d1) / (2 * sqrt(T)) - sign * r * K * e^(-rT) * N(sign * d2)
            vega  = S * sqrt(T) * N'(d1)
            rho   = sign * K * T * e^(-rT) * N(sign * d2)
        """
        if contract.maturity <= 0:
            return BlackScholesEngine._expiry_greeks(contract)

        S, K, T = contract.spot, contract.strike, contract.maturity
        r, sigma = contract.rate, contract.volatility
        sign = contract.sign

        d1, d2 = BlackScholesEngine.d1_d2(S, K, T, r, sigma)
        sqrt_t = math.sqrt(T)
        discount = math.exp(-r * T)
        pdf_d1 = norm.pdf(d1)
        cdf_sign_d2 = norm.cdf(sign * d2)

        return Greeks(
            delta=float(sign * norm.cdf(sign * d1)),
            gamma=float(pdf_d1 / (S * sigma * sqrt_t)),
            theta=float(-S * sigma * pdf_d1 / (2 * sqrt_t) - sign * r * K * discount * cdf_sign_d2),
            vega=float(S * sqrt_t * pdf_d1),
            rho=float(sign * K * T * discount * cdf_sign_d2),
        )

    @staticmethod
    def metrics(contract: OptionContract) -> OptionMetrics:
        """Price and Greeks of one contract bundled as OptionMetrics."""
        return OptionMetrics(
            contract=contract,
            price=BlackScholesEngine.price(contract),
            greeks=BlackScholesEngine.greeks(contract),
        )

    @staticmethod
    def _expiry_greeks(contract: OptionContract) -> Greeks:
        """Greeks at expiration: delta is sign for ITM options, the rest zero."""
        in_the_money = contract.sign * (contract.spot - contract.strike) > 0
        logger.debug(
            "Contract %s strike %s at expiry (T=%s), using intrinsic value",
            contract.ticker, contract.strike, contract.maturity
        )
        return Greeks(
            delta=float(contract.sign) if in_the_money else 0.0,
            gamma=0.0,
            theta=0.0,
            vega=0.0,
            rho=0.0,
        )


def spot_profile(contract: OptionContract, points: int = 100) -> List[OptionMetrics]:
    """Price and Greeks of one contract across a range of spot prices.

    Spots run from 0.5 * S upward in steps of S / 50, the range used for the
    single-option price and Greeks charts.

    Args:
        contract: Contract whose spot is swept
        points: Number of spot values

    Returns:
        OptionMetrics for each spot, in ascending spot order
    """
    base_spot = contract.spot
    spots = [base_spot * 0.5 + base_spot * i / 50 for i in range(points)]
    return [BlackScholesEngine.metrics(contract.with_changes(spot=s)) for s in spots]

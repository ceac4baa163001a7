"""Tests for P&L attribution between portfolio snapshots."""

import pytest

from options_analytics.models.option import OptionContract
from options_analytics.models.scenario import StressScenario, TuningParams
from options_analytics.risk.attribution import attribute_pnl
from options_analytics.risk.portfolio import aggregate_portfolio
from options_analytics.risk.scenarios import apply_stress, apply_tuning
from options_analytics.utils.error_handling import PortfolioMismatchError


@pytest.fixture
def previous_portfolio():
    return aggregate_portfolio([
        OptionContract('AAPL', 'Call', 150.0, 155.0, 0.5, 0.30, 0.05, 10),
        OptionContract('AAPL', 'Put', 150.0, 145.0, 0.25, 0.35, 0.05, -5),
        OptionContract('NVDA', 'Call', 480.0, 490.0, 0.45, 0.38, 0.05, 4),
    ])


class TestAttributePnL:
    """Test suite for attribute_pnl."""

    def test_components_reconcile_to_total(self, previous_portfolio):
        """Test the six components sum to the total."""
        current = apply_stress(previous_portfolio, StressScenario(spot_pct_change=5, vol_pct_change=10,
                                                                  rate_shift_bps=0.5))
        attribution = attribute_pnl(current, previous_portfolio, elapsed_days=3)

        assert attribution.total == pytest.approx(current.total_value - previous_portfolio.total_value)
        assert attribution.total == pytest.approx(attribution.explained + attribution.unexplained, abs=1e-9)

    def test_unchanged_market_is_pure_theta(self, previous_portfolio):
        """Test identical snapshots attribute only theta, offset by the residual."""
        attribution = attribute_pnl(previous_portfolio, previous_portfolio, elapsed_days=1)

        expected_theta = sum(
            opt.greeks.theta / 365 * opt.quantity for opt in previous_portfolio.options
        )
        assert attribution.delta == 0.0
        assert attribution.gamma == 0.0
        assert attribution.vega == 0.0
        assert attribution.rho == 0.0
        assert attribution.total == 0.0
        assert attribution.theta == pytest.approx(expected_theta)
        assert attribution.unexplained == pytest.approx(-expected_theta)

    def test_delta_and_gamma_terms(self):
        """Test delta and gamma terms for a single position."""
        previous = aggregate_portfolio([OptionContract('X', 'Call', 100.0, 100.0, 1.0, 0.2, 0.05, 3)])
        current = apply_stress(previous, StressScenario(spot_pct_change=2))
        greeks = previous.options[0].greeks

        attribution = attribute_pnl(current, previous, elapsed_days=0)

        assert attribution.delta == pytest.approx(greeks.delta * 2.0 * 3)
        assert attribution.gamma == pytest.approx(0.5 * greeks.gamma * 4.0 * 3)
        assert attribution.theta == 0.0

    def test_vega_and_rho_terms(self):
        """Test vega and rho use the change in vol and rate."""
        previous = aggregate_portfolio([OptionContract('X', 'Put', 100.0, 95.0, 0.5, 0.25, 0.03, 2)])
        current = apply_tuning(previous, TuningParams(volatility_multiplier=1.2, rate_shift_bps=1.0))
        greeks = previous.options[0].greeks

        attribution = attribute_pnl(current, previous, elapsed_days=0)

        assert attribution.vega == pytest.approx(greeks.vega * 0.05 * 2)
        assert attribution.rho == pytest.approx(greeks.rho * 0.01 * 2)
        assert attribution.delta == 0.0

    def test_small_move_mostly_explained(self):
        """Test the residual is tiny relative to a small spot move."""
        previous = aggregate_portfolio([OptionContract('X', 'Call', 100.0, 100.0, 1.0, 0.2, 0.05, 10)])
        current = apply_stress(previous, StressScenario(spot_pct_change=0.1))

        attribution = attribute_pnl(current, previous, elapsed_days=0)

        assert abs(attribution.unexplained) < 1e-3 * abs(attribution.total)

    def test_large_move_leaves_residual(self):
        """Test large shocks leave a non-zero residual that is not an error."""
        previous = aggregate_portfolio([OptionContract('X', 'Call', 100.0, 100.0, 1.0, 0.2, 0.05, 10)])
        current = apply_stress(previous, StressScenario(spot_pct_change=-30, vol_pct_change=80))

        attribution = attribute_pnl(current, previous, elapsed_days=0)

        assert attribution.unexplained != 0.0
        assert attribution.total == pytest.approx(attribution.explained + attribution.unexplained, abs=1e-9)

    def test_mismatched_lengths_raise(self, previous_portfolio):
        """Test misaligned snapshots fail fast instead of truncating."""
        current = aggregate_portfolio(previous_portfolio.contracts[:2])

        with pytest.raises(PortfolioMismatchError, match="3"):
            attribute_pnl(current, previous_portfolio)

    def test_mismatch_error_is_value_error(self, previous_portfolio):
        """Test PortfolioMismatchError can be caught as ValueError."""
        with pytest.raises(ValueError):
            attribute_pnl(aggregate_portfolio([]), previous_portfolio)

    def test_empty_snapshots(self):
        """Test two empty portfolios attribute to all zeros."""
        empty = aggregate_portfolio([])
        attribution = attribute_pnl(empty, empty)

        assert attribution.total == 0.0
        assert attribution.unexplained == 0.0

    def test_quantity_change_uses_current_quantity(self, caplog):
        """Test a changed quantity is logged and the current quantity used."""
        previous = aggregate_portfolio([OptionContract('X', 'Call', 100.0, 100.0, 1.0, 0.2, 0.05, 1)])
        current = aggregate_portfolio([OptionContract('X', 'Call', 101.0, 100.0, 1.0, 0.2, 0.05, 4)])

        with caplog.at_level("WARNING", logger="options_analytics.attribution"):
            attribution = attribute_pnl(current, previous, elapsed_days=0)

        assert attribution.delta == pytest.approx(previous.options[0].greeks.delta * 1.0 * 4)
        assert "differs between snapshots" in caplog.text

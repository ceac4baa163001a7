"""Streamlit GUI for the options portfolio analytics engine.

Run with: streamlit run app.py
"""

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
from pathlib import Path

from options_analytics.analytics.greeks import BlackScholesEngine, spot_profile
from options_analytics.analytics.surface_sampler import (
    SurfaceConfig,
    sample_with_config,
    surface_statistics,
    template_from_portfolio,
)
from options_analytics.analytics.volatility_surface import apply_volatility_surface, build_surface
from options_analytics.data.loaders import load_contracts, load_surface_points_from_csv
from options_analytics.models.option import GREEK_NAMES, OptionContract
from options_analytics.models.scenario import StressScenario, TuningParams
from options_analytics.risk import (
    aggregate_portfolio,
    apply_stress,
    apply_tuning,
    attribute_pnl,
    compare_portfolios,
    exposure_by_ticker,
)
from options_analytics.utils.config import load_params
from options_analytics.utils.error_handling import AnalyticsError

# Page config
st.set_page_config(
    page_title="Options Portfolio Analytics",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.title("📈 Options Portfolio Analytics")
st.markdown("*Black-Scholes pricing, Greeks, stress tests and P&L attribution*")

params = load_params()
bounds = params['tuning'].get('bounds', {})


def _save_upload(uploaded_file) -> Path:
    temp_path = Path("/tmp") / uploaded_file.name
    with open(temp_path, 'wb') as f:
        f.write(uploaded_file.getbuffer())
    return temp_path


def _fmt_pct(value):
    return "n/a" if value is None else f"{value:+.2f}%"


# Sidebar - data
st.sidebar.header("⚙️ Configuration")
st.sidebar.subheader("📁 Portfolio")
portfolio_upload = st.sidebar.file_uploader(
    "Upload portfolio",
    type=['csv', 'json'],
    help="CSV or JSON with ticker, type, spotPrice, strikePrice, timeToExpiry, volatility, riskFreeRate, quantity"
)
surface_upload = st.sidebar.file_uploader(
    "Upload volatility surface (optional)",
    type=['csv'],
    help="CSV with strike, maturity, volatility"
)

# Sidebar - what-if sliders
st.sidebar.subheader("🎛️ What-If")
vol_bounds = bounds.get('volatility_multiplier', [0.5, 2.0])
decay_bounds = bounds.get('time_decay_days', [0, 30])
rate_bounds = bounds.get('rate_shift_bps', [-50, 50])

vol_multiplier = st.sidebar.slider(
    "Volatility Multiplier", float(vol_bounds[0]), float(vol_bounds[1]), 1.0, 0.1
)
decay_days = st.sidebar.slider(
    "Time Decay (Days)", int(decay_bounds[0]), int(decay_bounds[1]), 0, 1
)
rate_shift = st.sidebar.slider(
    "Interest Rate Shift", float(rate_bounds[0]), float(rate_bounds[1]), 0.0, 5.0
)

if portfolio_upload is None:
    st.info("👈 Upload a portfolio file to get started (see generate_sample_data.py)")
    st.stop()

try:
    contracts = load_contracts(_save_upload(portfolio_upload))
    grid = None
    if surface_upload is not None:
        grid = build_surface(load_surface_points_from_csv(_save_upload(surface_upload)))
        contracts = apply_volatility_surface(contracts, grid)
except (AnalyticsError, FileNotFoundError) as e:
    st.error(f"❌ Error loading data: {e}")
    st.stop()

portfolio = aggregate_portfolio(contracts)

tab_portfolio, tab_stress, tab_whatif, tab_surface, tab_calc = st.tabs(
    ["Portfolio", "Stress Test", "What-If & P&L", "Greek Surface", "Calculator"]
)

# ---------------------------------------------------------------------------
# Portfolio
# ---------------------------------------------------------------------------
with tab_portfolio:
    g = portfolio.aggregate_greeks
    cols = st.columns(6)
    cols[0].metric("Total Value", f"${portfolio.total_value:,.2f}")
    cols[1].metric("Delta", f"{g.delta:.4f}")
    cols[2].metric("Gamma", f"{g.gamma:.6f}")
    cols[3].metric("Theta", f"{g.theta:.4f}")
    cols[4].metric("Vega", f"{g.vega:.4f}")
    cols[5].metric("Rho", f"{g.rho:.4f}")

    df = pd.DataFrame([
        {
            'Ticker': opt.contract.ticker,
            'Type': opt.contract.option_type,
            'Spot': opt.contract.spot,
            'Strike': opt.contract.strike,
            'Maturity': opt.contract.maturity,
            'Volatility': opt.contract.volatility,
            'Rate': opt.contract.rate,
            'Quantity': opt.contract.quantity,
            'Price': opt.price,
            **{name.capitalize(): opt.greeks.get(name) for name in GREEK_NAMES},
            'Value': opt.total_value,
        }
        for opt in portfolio.options
    ])
    st.dataframe(df, use_container_width=True, hide_index=True)

    exposures = exposure_by_ticker(portfolio)
    fig = go.Figure(go.Pie(
        labels=list(exposures),
        values=[abs(e.total_value) for e in exposures.values()],
    ))
    fig.update_layout(title="Value by Ticker", height=400)
    st.plotly_chart(fig, use_container_width=True)

# ---------------------------------------------------------------------------
# Stress test
# ---------------------------------------------------------------------------
with tab_stress:
    col1, col2, col3 = st.columns(3)
    spot_change = col1.number_input("Spot Price Change (%)", value=0.0, step=1.0)
    vol_change = col2.number_input("Volatility Change (%)", value=0.0, step=1.0)
    rate_change = col3.number_input("Interest Rate Change", value=0.0, step=0.25)

    scenario = StressScenario(
        spot_pct_change=spot_change,
        vol_pct_change=vol_change,
        rate_shift_bps=rate_change,
    )
    stressed = apply_stress(portfolio, scenario)
    impact = compare_portfolios(portfolio, stressed)

    cols = st.columns(4)
    cols[0].metric("Stressed Value", f"${stressed.total_value:,.2f}", _fmt_pct(impact.value_change_pct))
    cols[1].metric("Delta", f"{stressed.aggregate_greeks.delta:.4f}", _fmt_pct(impact.greek_changes_pct['delta']))
    cols[2].metric("Gamma", f"{stressed.aggregate_greeks.gamma:.6f}", _fmt_pct(impact.greek_changes_pct['gamma']))
    cols[3].metric("Vega", f"{stressed.aggregate_greeks.vega:.4f}", _fmt_pct(impact.greek_changes_pct['vega']))

# ---------------------------------------------------------------------------
# What-if and P&L attribution
# ---------------------------------------------------------------------------
with tab_whatif:
    tuning = TuningParams(
        volatility_multiplier=vol_multiplier,
        time_decay_days=decay_days,
        rate_shift_bps=rate_shift,
    )
    tuned = apply_tuning(portfolio, tuning)
    impact = compare_portfolios(portfolio, tuned)
    st.metric("Adjusted Value", f"${tuned.total_value:,.2f}", _fmt_pct(impact.value_change_pct))

    attribution = attribute_pnl(tuned, portfolio, elapsed_days=decay_days or 1)
    components = attribution.components()
    fig = go.Figure(go.Waterfall(
        x=[label for label, _ in components],
        y=[value for _, value in components],
        measure=["relative"] * (len(components) - 1) + ["total"],
    ))
    fig.update_layout(title="P&L Attribution", yaxis_title="P&L ($)", height=450)
    st.plotly_chart(fig, use_container_width=True)

# ---------------------------------------------------------------------------
# Greek surface
# ---------------------------------------------------------------------------
with tab_surface:
    greek = st.selectbox("Greek", GREEK_NAMES, index=1)
    template = template_from_portfolio(portfolio)
    surface = sample_with_config(template, greek, SurfaceConfig.from_dict(params['surface']))
    stats = surface_statistics(surface)

    fig = go.Figure(go.Surface(x=surface.strikes, y=surface.maturities, z=surface.values))
    fig.update_layout(
        title=f"{greek.capitalize()} Surface - {template.ticker}",
        scene=dict(xaxis_title="Strike", yaxis_title="Maturity (years)", zaxis_title=greek.capitalize()),
        height=600,
    )
    st.plotly_chart(fig, use_container_width=True)

    cols = st.columns(4)
    cols[0].metric("Min", f"{stats.min:.6f}")
    cols[1].metric("Max", f"{stats.max:.6f}")
    cols[2].metric("Mean", f"{stats.mean:.6f}")
    cols[3].metric("Std Dev", f"{stats.std:.6f}")

    if grid is not None:
        fig = go.Figure(go.Surface(x=list(grid.strikes), y=list(grid.maturities), z=[list(r) for r in grid.vols]))
        fig.update_layout(title="Volatility Surface", height=500)
        st.plotly_chart(fig, use_container_width=True)

# ---------------------------------------------------------------------------
# Single-option calculator
# ---------------------------------------------------------------------------
with tab_calc:
    col1, col2, col3 = st.columns(3)
    calc_contract = OptionContract(
        ticker="CALC",
        option_type=col1.radio("Type", ["Call", "Put"], horizontal=True),
        spot=col1.number_input("Stock Price", min_value=0.01, value=100.0),
        strike=col2.number_input("Strike Price", min_value=0.01, value=100.0),
        maturity=col2.number_input("Time to Maturity (years)", min_value=0.01, max_value=10.0, value=1.0),
        volatility=col3.number_input("Volatility", min_value=0.01, max_value=2.0, value=0.2),
        rate=col3.number_input("Risk-Free Rate", min_value=-0.1, max_value=0.5, value=0.05),
        quantity=1,
    )
    metrics = BlackScholesEngine.metrics(calc_contract)
    d1, d2 = BlackScholesEngine.d1_d2(
        calc_contract.spot, calc_contract.strike, calc_contract.maturity,
        calc_contract.rate, calc_contract.volatility
    )
    cols = st.columns(4)
    cols[0].metric("Option Price", f"{metrics.price:.4f}")
    cols[1].metric("d1", f"{d1:.4f}")
    cols[2].metric("d2", f"{d2:.4f}")
    cols[3].metric("Delta", f"{metrics.greeks.delta:.4f}")

    profile = spot_profile(calc_contract)
    fig = go.Figure(go.Scatter(
        x=[m.contract.spot for m in profile],
        y=[m.price for m in profile],
        mode='lines',
        name=f"{calc_contract.option_type} Option",
    ))
    fig.update_layout(title="Price vs Stock Price", xaxis_title="Stock Price", yaxis_title="Option Price")
    st.plotly_chart(fig, use_container_width=True)

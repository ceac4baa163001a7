"""Generate sample input files for the options analytics engine.

Writes a sample portfolio (CSV and JSON) and a sample volatility surface
with a smile into the data/ directory.
"""

import csv
import json
from math import log
from pathlib import Path

OUTPUT_DIR = Path("data")

PORTFOLIO_FIELDS = [
    'ticker', 'type', 'spotPrice', 'strikePrice', 'timeToExpiry',
    'volatility', 'riskFreeRate', 'quantity',
]

# ticker, type, spot, strike, maturity, vol, rate, quantity
SAMPLE_POSITIONS = [
    ('AAPL', 'Call', 150, 155, 0.5, 0.3, 0.05, 10),
    ('AAPL', 'Put', 150, 145, 0.25, 0.35, 0.05, 5),
    ('GOOGL', 'Call', 2800, 2850, 0.75, 0.25, 0.05, 3),
    ('GOOGL', 'Put', 2800, 2750, 0.5, 0.28, 0.05, 4),
    ('MSFT', 'Call', 310, 315, 0.3, 0.22, 0.05, 8),
    ('MSFT', 'Put', 310, 305, 0.6, 0.24, 0.05, 6),
    ('TSLA', 'Call', 220, 225, 0.4, 0.45, 0.05, 5),
    ('TSLA', 'Put', 220, 215, 0.35, 0.42, 0.05, 7),
    ('NVDA', 'Call', 480, 490, 0.45, 0.38, 0.05, 4),
    ('NVDA', 'Put', 480, 470, 0.55, 0.36, 0.05, 3),
]

SURFACE_STRIKES = [80, 90, 100, 110, 120]
SURFACE_MATURITIES = [0.25, 0.5, 1, 2]
SURFACE_SPOT = 100.0


def sample_portfolio_records():
    """Sample positions as records keyed by the upload column names."""
    return [dict(zip(PORTFOLIO_FIELDS, row)) for row in SAMPLE_POSITIONS]


def smile_vol(strike, maturity, spot=SURFACE_SPOT):
    """Volatility with a smile in log-moneyness and a mild term slope."""
    moneyness = log(spot / strike)
    return 0.2 + 0.05 * moneyness * moneyness + 0.02 * maturity


def sample_surface_rows():
    """(strike, maturity, volatility) rows covering the full sample grid."""
    rows = []
    for strike in SURFACE_STRIKES:
        for maturity in SURFACE_MATURITIES:
            rows.append((strike, maturity, round(smile_vol(strike, maturity), 4)))
    return rows


def write_portfolio_csv(path):
    with open(path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=PORTFOLIO_FIELDS)
        writer.writeheader()
        writer.writerows(sample_portfolio_records())


def write_portfolio_json(path):
    with open(path, 'w') as f:
        json.dump(sample_portfolio_records(), f, indent=2)


def write_surface_csv(path):
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['strike', 'maturity', 'volatility'])
        writer.writerows(sample_surface_rows())


if __name__ == "__main__":
    OUTPUT_DIR.mkdir(exist_ok=True)

    write_portfolio_csv(OUTPUT_DIR / "sample_portfolio.csv")
    write_portfolio_json(OUTPUT_DIR / "sample_portfolio.json")
    write_surface_csv(OUTPUT_DIR / "sample_volatility_surface.csv")

    print(f"Generated {len(SAMPLE_POSITIONS)} sample positions")
    print(f"Generated {len(SURFACE_STRIKES) * len(SURFACE_MATURITIES)} surface points")
    print(f"Files written to {OUTPUT_DIR}/")

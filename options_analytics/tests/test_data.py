"""Tests for loaders, validators and YAML parameters."""

import json

import pytest

from options_analytics.data.loaders import (
    load_contracts,
    load_contracts_from_csv,
    load_contracts_from_json,
    load_surface_points_from_csv,
    normalize_record,
)
from options_analytics.data.validators import validate_contract_record
from options_analytics.utils.config import (
    load_params,
    stress_scenarios_from_params,
    tuning_from_params,
)
from options_analytics.utils.error_handling import (
    ConfigurationError,
    DataValidationError,
    InsufficientDataError,
)

CSV_HEADER = "ticker,type,spotPrice,strikePrice,timeToExpiry,volatility,riskFreeRate,quantity\n"


@pytest.fixture
def valid_record():
    return {
        'ticker': 'AAPL',
        'type': 'Call',
        'spot': 150.0,
        'strike': 155.0,
        'maturity': 0.5,
        'volatility': 0.3,
        'rate': 0.05,
        'quantity': 10.0,
    }


class TestValidateContractRecord:
    """Test suite for validate_contract_record."""

    def test_valid_record(self, valid_record):
        """Test a complete record passes."""
        assert validate_contract_record(valid_record) == (True, "")

    def test_missing_field(self, valid_record):
        """Test missing fields are reported by name."""
        del valid_record['volatility']
        is_valid, error = validate_contract_record(valid_record)

        assert not is_valid
        assert "volatility" in error

    @pytest.mark.parametrize("field", ['spot', 'strike', 'maturity', 'volatility'])
    def test_non_positive_rejected(self, valid_record, field):
        """Test spot, strike, maturity and volatility must be positive."""
        valid_record[field] = 0.0
        is_valid, error = validate_contract_record(valid_record)

        assert not is_valid
        assert field in error

    def test_negative_rate_and_short_quantity_allowed(self, valid_record):
        """Test rates may be negative and positions may be short."""
        valid_record['rate'] = -0.01
        valid_record['quantity'] = -5.0
        assert validate_contract_record(valid_record)[0]

    def test_bad_option_type(self, valid_record):
        """Test only Call and Put are accepted."""
        valid_record['type'] = 'Straddle'
        is_valid, error = validate_contract_record(valid_record)

        assert not is_valid
        assert "Call" in error

    def test_non_numeric_value(self, valid_record):
        """Test strings that did not parse as numbers are rejected."""
        valid_record['spot'] = 'abc'
        assert not validate_contract_record(valid_record)[0]


class TestNormalizeRecord:
    """Test suite for field alias handling."""

    def test_camel_case_columns(self):
        """Test upload column names map onto canonical fields."""
        record = normalize_record({
            'ticker': ' aapl ', 'type': 'call', 'spotPrice': '150', 'strikePrice': '155',
            'timeToExpiry': '0.5', 'volatility': '0.3', 'riskFreeRate': '0.05', 'quantity': '10',
        })

        assert record['ticker'] == 'AAPL'
        assert record['type'] == 'Call'
        assert record['spot'] == 150.0
        assert record['maturity'] == 0.5

    def test_snake_case_columns(self):
        """Test snake_case names are accepted."""
        record = normalize_record({
            'ticker': 'MSFT', 'option_type': 'Put', 'spot': 310, 'strike': 305,
            'maturity': 0.6, 'volatility': 0.24, 'rate': 0.05, 'quantity': 6,
        })

        assert record['type'] == 'Put'
        assert record['rate'] == 0.05

    def test_missing_fields_are_none(self):
        """Test absent fields map to None."""
        assert normalize_record({'ticker': 'X'})['strike'] is None


class TestPortfolioLoaders:
    """Test suite for CSV and JSON portfolio loaders."""

    def test_load_csv(self, tmp_path):
        """Test loading a two-row CSV."""
        path = tmp_path / "portfolio.csv"
        path.write_text(
            CSV_HEADER
            + "AAPL,Call,150,155,0.5,0.3,0.05,10\n"
            + "AAPL,put,150,145,0.25,0.35,-0.01,-5\n"
        )

        contracts = load_contracts_from_csv(path)

        assert len(contracts) == 2
        assert contracts[0].strike == 155.0
        assert contracts[1].option_type == 'Put'
        assert contracts[1].rate == -0.01
        assert contracts[1].quantity == -5.0

    def test_csv_blank_rows_skipped(self, tmp_path):
        """Test blank lines between rows are ignored."""
        path = tmp_path / "portfolio.csv"
        path.write_text(CSV_HEADER + "AAPL,Call,150,155,0.5,0.3,0.05,10\n,,,,,,,\n")

        assert len(load_contracts_from_csv(path)) == 1

    def test_csv_invalid_row_reports_row_number(self, tmp_path):
        """Test the first invalid row fails with its line number."""
        path = tmp_path / "portfolio.csv"
        path.write_text(
            CSV_HEADER
            + "AAPL,Call,150,155,0.5,0.3,0.05,10\n"
            + "AAPL,Call,150,155,0.5,0,0.05,10\n"
        )

        with pytest.raises(DataValidationError, match="at 3"):
            load_contracts_from_csv(path)

    def test_csv_header_only(self, tmp_path):
        """Test a file without rows is insufficient data."""
        path = tmp_path / "portfolio.csv"
        path.write_text(CSV_HEADER)

        with pytest.raises(InsufficientDataError):
            load_contracts_from_csv(path)

    def test_missing_file(self, tmp_path):
        """Test missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_contracts_from_csv(tmp_path / "nope.csv")

    def test_load_json(self, tmp_path, valid_record):
        """Test loading a JSON array with snake_case keys."""
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps([valid_record]))

        contracts = load_contracts_from_json(path)

        assert len(contracts) == 1
        assert contracts[0].ticker == 'AAPL'
        assert contracts[0].volatility == 0.3

    def test_json_must_be_array(self, tmp_path, valid_record):
        """Test a top-level object is rejected."""
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps(valid_record))

        with pytest.raises(DataValidationError, match="array"):
            load_contracts_from_json(path)

    @pytest.mark.parametrize("bad_item", [5, None, "junk", []])
    def test_json_non_object_item_rejected(self, tmp_path, valid_record, bad_item):
        """Test array items that are not objects fail with their position."""
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps([valid_record, bad_item, valid_record]))

        with pytest.raises(DataValidationError, match="at 2: expected an object"):
            load_contracts_from_json(path)

    def test_json_item_numbering_counts_every_item(self, tmp_path, valid_record):
        """Test the reported position is the item's index in the full array."""
        bad_record = dict(valid_record, volatility=-1)
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps([valid_record, valid_record, bad_record]))

        with pytest.raises(DataValidationError, match="at 3"):
            load_contracts_from_json(path)

    def test_json_empty_object_rejected(self, tmp_path, valid_record):
        """Test an empty object is an invalid record, not a skipped one."""
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps([valid_record, {}]))

        with pytest.raises(DataValidationError, match="at 2"):
            load_contracts_from_json(path)

    def test_json_empty_array(self, tmp_path):
        """Test an empty array is insufficient data."""
        path = tmp_path / "portfolio.json"
        path.write_text("[]")

        with pytest.raises(InsufficientDataError):
            load_contracts_from_json(path)

    def test_malformed_json(self, tmp_path):
        """Test broken JSON is a validation error."""
        path = tmp_path / "portfolio.json"
        path.write_text("[{")

        with pytest.raises(DataValidationError):
            load_contracts_from_json(path)

    def test_load_contracts_dispatches_on_extension(self, tmp_path, valid_record):
        """Test load_contracts picks the JSON loader for .json files."""
        path = tmp_path / "portfolio.json"
        path.write_text(json.dumps([valid_record, valid_record]))

        assert len(load_contracts(path)) == 2


class TestSurfaceLoader:
    """Test suite for volatility surface CSV loading."""

    def test_load_points(self, tmp_path):
        """Test rows become strike/maturity/volatility dictionaries."""
        path = tmp_path / "surface.csv"
        path.write_text("strike,maturity,volatility\n90,0.5,0.25\n110,0.5,0.22\n")

        points = load_surface_points_from_csv(path)

        assert points == [
            {'strike': 90.0, 'maturity': 0.5, 'volatility': 0.25},
            {'strike': 110.0, 'maturity': 0.5, 'volatility': 0.22},
        ]

    def test_missing_columns(self, tmp_path):
        """Test a file without a volatility column is rejected."""
        path = tmp_path / "surface.csv"
        path.write_text("strike,maturity\n90,0.5\n")

        with pytest.raises(DataValidationError, match="volatility"):
            load_surface_points_from_csv(path)

    def test_non_numeric_value(self, tmp_path):
        """Test a non-numeric cell reports its row."""
        path = tmp_path / "surface.csv"
        path.write_text("strike,maturity,volatility\n90,0.5,high\n")

        with pytest.raises(DataValidationError, match="row 2"):
            load_surface_points_from_csv(path)


class TestParams:
    """Test suite for YAML parameter loading."""

    def test_default_params(self):
        """Test packaged defaults load with all sections."""
        params = load_params()

        assert params['surface']['resolution'] == 40
        assert params['attribution']['elapsed_days'] == 1

    def test_default_stress_presets(self):
        """Test the five named stress presets."""
        scenarios = stress_scenarios_from_params(load_params())

        assert len(scenarios) == 5
        assert scenarios[0].name == 'Market crash'
        assert scenarios[0].spot_pct_change == -20.0
        assert scenarios[0].vol_pct_change == 50.0

    def test_default_tuning_is_neutral(self):
        """Test default tuning leaves the portfolio unchanged."""
        tuning = tuning_from_params(load_params())

        assert tuning.volatility_multiplier == 1.0
        assert tuning.time_decay_days == 0.0

    def test_custom_yaml(self, tmp_path):
        """Test loading a user-supplied file."""
        path = tmp_path / "params.yaml"
        path.write_text(
            "stress_scenarios:\n"
            "  - name: Tiny\n"
            "    spot_pct_change: 1\n"
            "tuning: {}\n"
            "surface: {resolution: 10}\n"
            "attribution: {elapsed_days: 2}\n"
        )

        params = load_params(path)
        scenarios = stress_scenarios_from_params(params)

        assert scenarios[0].name == 'Tiny'
        assert scenarios[0].vol_pct_change == 0.0

    def test_missing_section(self, tmp_path):
        """Test configs must carry every section."""
        path = tmp_path / "params.yaml"
        path.write_text("tuning: {}\n")

        with pytest.raises(ConfigurationError, match="stress_scenarios"):
            load_params(path)

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML is a configuration error."""
        path = tmp_path / "params.yaml"
        path.write_text("stress_scenarios: [unclosed\n")

        with pytest.raises(ConfigurationError):
            load_params(path)

    def test_missing_file(self, tmp_path):
        """Test a missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_params(tmp_path / "absent.yaml")

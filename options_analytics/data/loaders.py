"""Loaders for option portfolios and volatility surfaces.

Portfolio files use the column names of the original upload format
(``ticker,type,spotPrice,strikePrice,timeToExpiry,volatility,riskFreeRate,quantity``);
snake_case names (``spot``, ``strike``, ``maturity``, ``rate``, ``option_type``)
are accepted as well.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from ..models.option import OptionContract
from ..utils.error_handling import DataValidationError, InsufficientDataError
from .validators import validate_contract_record

logger = logging.getLogger("options_analytics.loaders")

FIELD_ALIASES = {
    'ticker': ('ticker',),
    'type': ('type', 'option_type'),
    'spot': ('spotPrice', 'spot'),
    'strike': ('strikePrice', 'strike'),
    'maturity': ('timeToExpiry', 'maturity'),
    'volatility': ('volatility',),
    'rate': ('riskFreeRate', 'rate'),
    'quantity': ('quantity',),
}
NUMERIC_FIELDS = ('spot', 'strike', 'maturity', 'volatility', 'rate', 'quantity')


def _to_number(value: Any) -> Any:
    """Convert CSV strings to float, leaving unparseable values for the validator."""
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return float(value)
        except ValueError:
            return value
    return value


def normalize_record(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Map a raw upload record onto the canonical field names.

    Args:
        raw: Record from CSV or JSON with original or snake_case keys

    Returns:
        Dictionary keyed by ticker, type, spot, strike, maturity,
        volatility, rate, quantity (missing fields map to None)
    """
    record: Dict[str, Any] = {}
    for field, aliases in FIELD_ALIASES.items():
        record[field] = next((raw[a] for a in aliases if raw.get(a) is not None), None)

    if isinstance(record['ticker'], str):
        record['ticker'] = record['ticker'].strip().upper()
    if isinstance(record['type'], str):
        record['type'] = record['type'].strip().capitalize()
    for field in NUMERIC_FIELDS:
        record[field] = _to_number(record[field])

    return record


def parse_contract(raw: Dict[str, Any], position: int) -> OptionContract:
    """Validate one raw record and build an OptionContract.

    Args:
        raw: Raw record
        position: Row or item number used in error messages

    Raises:
        DataValidationError: If the record fails validation
    """
    record = normalize_record(raw)
    is_valid, error = validate_contract_record(record)
    if not is_valid:
        raise DataValidationError(f"Invalid option record at {position}: {error}")

    return OptionContract(
        ticker=record['ticker'],
        option_type=record['type'],
        spot=float(record['spot']),
        strike=float(record['strike']),
        maturity=float(record['maturity']),
        volatility=float(record['volatility']),
        rate=float(record['rate']),
        quantity=float(record['quantity']),
    )


def contracts_from_records(records: List[Any]) -> List[OptionContract]:
    """Build contracts from already-parsed records such as a JSON array.

    Items are numbered from 1 in error messages.

    Raises:
        DataValidationError: On the first item that is not an object or fails validation
        InsufficientDataError: If there are no records
    """
    contracts = []
    for position, raw in enumerate(records, start=1):
        if not isinstance(raw, dict):
            raise DataValidationError(f"Invalid option record at {position}: expected an object")
        contracts.append(parse_contract(raw, position))

    if not contracts:
        raise InsufficientDataError("No option records found")

    return contracts


def load_contracts_from_csv(csv_path: str | Path) -> List[OptionContract]:
    """Load an option portfolio from a CSV file.

    Args:
        csv_path: Path to CSV file

    Returns:
        List of OptionContract objects in file order

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        DataValidationError: If a row is invalid (the row number is reported)
        InsufficientDataError: If the file holds no rows
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        logger.error("CSV file not found: %s", csv_path)
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    logger.info("Loading portfolio from CSV: %s", csv_path)

    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)
        contracts = []
        # Row 1 is the header
        for row_num, row in enumerate(reader, start=2):
            if all(not (v or '').strip() for v in row.values() if isinstance(v, str)):
                continue
            contracts.append(parse_contract(row, row_num))

    if not contracts:
        logger.error("No option rows found in %s", csv_path)
        raise InsufficientDataError(f"No option rows found in {csv_path}")

    logger.info("Successfully loaded %d positions from %s", len(contracts), csv_path.name)
    return contracts


def load_contracts_from_json(json_path: str | Path) -> List[OptionContract]:
    """Load an option portfolio from a JSON array of records.

    Raises:
        FileNotFoundError: If the file doesn't exist
        DataValidationError: If the JSON is malformed, not an array, or holds an invalid record
        InsufficientDataError: If the array holds no records
    """
    json_path = Path(json_path)
    if not json_path.exists():
        logger.error("JSON file not found: %s", json_path)
        raise FileNotFoundError(f"JSON file not found: {json_path}")

    logger.info("Loading portfolio from JSON: %s", json_path)

    try:
        data = json.loads(json_path.read_text())
    except json.JSONDecodeError as e:
        raise DataValidationError(f"JSON parsing error in {json_path}: {e}") from e

    if not isinstance(data, list):
        raise DataValidationError("JSON must contain an array of options")

    contracts = contracts_from_records(data)
    logger.info("Successfully loaded %d positions from %s", len(contracts), json_path.name)
    return contracts


def load_contracts(path: str | Path) -> List[OptionContract]:
    """Load a portfolio from CSV or JSON, chosen by file extension."""
    path = Path(path)
    if path.suffix.lower() == '.json':
        return load_contracts_from_json(path)
    return load_contracts_from_csv(path)


def load_surface_points_from_csv(csv_path: str | Path) -> List[Dict[str, float]]:
    """Load volatility surface points from a CSV file.

    Expected CSV format:
        strike,maturity,volatility

    Returns:
        List of {'strike', 'maturity', 'volatility'} dictionaries

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        DataValidationError: If columns are missing or a value is not numeric
        InsufficientDataError: If the file holds no rows
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        logger.error("Surface CSV not found: %s", csv_path)
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    required_fields = {'strike', 'maturity', 'volatility'}
    points = []

    with open(csv_path, 'r', newline='') as f:
        reader = csv.DictReader(f)

        if not required_fields.issubset(set(reader.fieldnames or [])):
            missing = required_fields - set(reader.fieldnames or [])
            logger.error("Surface CSV missing required fields: %s", missing)
            raise DataValidationError(f"Surface CSV missing required fields: {missing}")

        for row_num, row in enumerate(reader, start=2):
            if not any((row.get(k) or '').strip() for k in required_fields):
                continue
            try:
                points.append({
                    'strike': float(row['strike']),
                    'maturity': float(row['maturity']),
                    'volatility': float(row['volatility']),
                })
            except (TypeError, ValueError) as e:
                raise DataValidationError(
                    f"Invalid surface row {row_num} in {csv_path.name}: {e}"
                ) from e

    if not points:
        raise InsufficientDataError(f"No surface points found in {csv_path}")

    logger.info("Loaded %d surface points from %s", len(points), csv_path.name)
    return points

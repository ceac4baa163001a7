"""Validation of raw option records before they reach the pricing engine.

The engine itself trusts its inputs; these checks are the upstream guard.
"""

import logging
import math
from typing import Any, Dict, Tuple

logger = logging.getLogger("options_analytics.validators")

REQUIRED_FIELDS = ('ticker', 'type', 'spot', 'strike', 'maturity', 'volatility', 'rate', 'quantity')
POSITIVE_FIELDS = ('spot', 'strike', 'maturity', 'volatility')
VALID_TYPES = ('Call', 'Put')


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float)) and not math.isnan(value)


def validate_contract_record(record: Dict[str, Any]) -> Tuple[bool, str]:
    """Validate a normalized option record for completeness and sanity.

    Args:
        record: Dictionary with ticker, type, spot, strike, maturity,
            volatility, rate and quantity

    Returns:
        Tuple of (is_valid, error_message)

    Rules:
        - ticker is a non-empty string
        - type is "Call" or "Put"
        - spot, strike, maturity and volatility are positive numbers
        - rate and quantity are numbers (rate may be zero or negative)

    Example:
        >>> is_valid, error = validate_contract_record(record)
        >>> if not is_valid:
        >>>     raise DataValidationError(error)
    """
    for field in REQUIRED_FIELDS:
        if record.get(field) is None:
            return False, f"Missing required field: {field}"

    ticker = record['ticker']
    if not isinstance(ticker, str) or not ticker.strip():
        return False, f"Ticker must be a non-empty string, got: {ticker!r}"

    if record['type'] not in VALID_TYPES:
        return False, f'Option type must be either "Call" or "Put", got: {record["type"]!r}'

    for field in POSITIVE_FIELDS:
        value = record[field]
        if not _is_number(value) or value <= 0:
            return False, f"{field} must be a positive number, got: {value!r}"

    for field in ('rate', 'quantity'):
        value = record[field]
        if not _is_number(value):
            return False, f"{field} must be a number, got: {value!r}"

    return True, ""

"""YAML parameter loading."""

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..models.scenario import StressScenario, TuningParams
from .error_handling import ConfigurationError

logger = logging.getLogger("options_analytics.config")

DEFAULT_PARAMS_PATH = Path(__file__).parent.parent / "config" / "default_params.yaml"
REQUIRED_SECTIONS = ('stress_scenarios', 'tuning', 'surface', 'attribution')


def load_params(path: str | Path | None = None) -> Dict[str, Any]:
    """Load analysis parameters from YAML.

    Args:
        path: YAML file to load; the packaged default_params.yaml when None

    Returns:
        Parameter dictionary

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the YAML is malformed or a section is missing
    """
    path = Path(path) if path is not None else DEFAULT_PARAMS_PATH
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            params = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(params, dict):
        raise ConfigurationError(f"Config {path} must be a mapping")

    missing = [section for section in REQUIRED_SECTIONS if section not in params]
    if missing:
        raise ConfigurationError(f"Config {path} missing sections: {', '.join(missing)}")

    logger.debug("Loaded params from %s", path)
    return params


def stress_scenarios_from_params(params: Dict[str, Any]) -> List[StressScenario]:
    """Build the StressScenario presets listed in a params dictionary."""
    scenarios = params.get('stress_scenarios') or []
    if not isinstance(scenarios, list):
        raise ConfigurationError("stress_scenarios must be a list")
    return [StressScenario.from_dict(s) for s in scenarios]


def tuning_from_params(params: Dict[str, Any]) -> TuningParams:
    return TuningParams.from_dict(params.get('tuning') or {})

"""
Configuration management and loading.

Handles the YAML configuration file and environment variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from true_budget.storage.db import DEFAULT_DB_PATH
from true_budget.storage.models import AppSettings, PaycheckFrequency

CONFIG_ENV_VAR = "TRUE_BUDGET_CONFIG"
DB_ENV_VAR = "TRUE_BUDGET_DB"

DEFAULT_SETTINGS = AppSettings()


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    database_path: str = DEFAULT_DB_PATH
    settings: AppSettings = field(default_factory=AppSettings)


def load_app_config(path: str) -> AppConfig:
    """Load and validate application configuration from YAML file.

    Unknown keys are rejected so that typos never silently fall back
    to defaults.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated AppConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    allowed_top_keys = {'database', 'settings'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    database_path = raw_config.get('database', DEFAULT_DB_PATH)
    if not isinstance(database_path, str) or not database_path.strip():
        raise ValueError("'database' must be a non-empty string")

    settings_data = raw_config.get('settings', {})
    if settings_data is None:
        settings_data = {}
    if not isinstance(settings_data, dict):
        raise ValueError("'settings' must be a dictionary")

    return AppConfig(
        database_path=database_path,
        settings=_parse_settings(settings_data),
    )


def _parse_settings(data: Dict) -> AppSettings:
    """Parse and validate the settings section.

    Args:
        data: Settings section data

    Returns:
        Validated AppSettings, defaults filling missing keys

    Raises:
        ValueError: If settings are invalid
    """
    allowed_keys = {'default_paycheck_frequency', 'categories', 'goal_categories'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in settings: {unknown_keys}")

    frequency = DEFAULT_SETTINGS.default_paycheck_frequency
    if 'default_paycheck_frequency' in data:
        frequency_str = data['default_paycheck_frequency']
        if not isinstance(frequency_str, str):
            raise ValueError("'default_paycheck_frequency' in settings must be a string")
        try:
            frequency = PaycheckFrequency(frequency_str.lower())
        except ValueError:
            valid = [f.value for f in PaycheckFrequency]
            raise ValueError(f"'default_paycheck_frequency' in settings must be one of: {valid}")

    categories = list(DEFAULT_SETTINGS.categories)
    if 'categories' in data:
        categories = _parse_category_list(data['categories'], "settings.categories")

    goal_categories = list(DEFAULT_SETTINGS.goal_categories)
    if 'goal_categories' in data:
        goal_categories = _parse_category_list(data['goal_categories'], "settings.goal_categories")

    return AppSettings(
        default_paycheck_frequency=frequency,
        categories=categories,
        goal_categories=goal_categories,
    )


def _parse_category_list(value, path: str) -> List[str]:
    """Validate an ordered list of unique, non-blank category names."""
    if not isinstance(value, list) or not value:
        raise ValueError(f"'{path}' must be a non-empty list")

    categories = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValueError(f"'{path}' entries must be non-empty strings")
        name = item.strip()
        if name in categories:
            raise ValueError(f"Duplicate category '{name}' in {path}")
        categories.append(name)
    return categories


def resolve_app_config(
    config_path: Optional[str] = None,
    db_path: Optional[str] = None,
) -> AppConfig:
    """Build the effective configuration.

    The config file comes from config_path or the TRUE_BUDGET_CONFIG
    environment variable; without either the defaults apply. db_path, or
    TRUE_BUDGET_DB, overrides the file's database.
    """
    config_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    config = load_app_config(config_path) if config_path else AppConfig()

    db_path = db_path or os.environ.get(DB_ENV_VAR)
    if db_path:
        config = AppConfig(database_path=db_path, settings=config.settings)
    return config

"""
Configuration module for the BuyOrBye Assessment Engine.

This module contains all configuration dictionaries used by the calculators.
"""

from .engine_config import (
    FREQUENCY_CONFIG,
    FINANCE_CONFIG,
    HEALTH_CONFIG,
    MEDICAL_COST_CONFIG,
    INSURANCE_CONFIG,
    BUDGET_CONFIG,
    DEBT_CONFIG,
)
from .overrides import load_config_overrides, merge_config

__all__ = [
    "FREQUENCY_CONFIG",
    "FINANCE_CONFIG",
    "HEALTH_CONFIG",
    "MEDICAL_COST_CONFIG",
    "INSURANCE_CONFIG",
    "BUDGET_CONFIG",
    "DEBT_CONFIG",
    "load_config_overrides",
    "merge_config",
]

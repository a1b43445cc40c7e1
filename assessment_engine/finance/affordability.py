"""
Affordability Calculator.
Maximum recommended one-time purchase from disposable income and health tier.
"""

from typing import Dict, Optional

from ..config.engine_config import FINANCE_CONFIG
from ..models.enums import FinancialHealth
from .aggregator import FinanceSummary


def base_multiplier(tier: FinancialHealth, config: Optional[Dict] = None) -> float:
    """Multiplier of monthly disposable income allowed for a tier."""
    return (config or FINANCE_CONFIG)["affordability_multipliers"][tier.value]


def get_max_affordable_amount(
    summary: FinanceSummary,
    priority_adjustment: float = 1.0,
    config: Optional[Dict] = None,
) -> float:
    """
    Maximum recommended one-time purchase.

    disposable income x tier multiplier x priority adjustment, floored at 0.
    Poor tier always gives 0.

    Args:
        summary: Finance summary for the user
        priority_adjustment: Multiplier from the health summary (1.0 without health data)
        config: Optional finance config, defaults to FINANCE_CONFIG

    Returns:
        Maximum affordable amount (never negative)
    """
    amount = summary.disposable_income * base_multiplier(summary.financial_health, config) * priority_adjustment
    return max(0.0, amount)

"""
Financial Health Classifier.
Maps disposable income, DTI and savings rate to a health tier.
"""

from typing import Dict, Optional

from ..config.engine_config import FINANCE_CONFIG
from ..models.enums import FinancialHealth


def classify_financial_health(
    disposable_income: float,
    debt_to_income_ratio: float,
    savings_rate: float,
    config: Optional[Dict] = None,
) -> FinancialHealth:
    """
    Classify financial health. Rules are evaluated in order, first match wins.

    1. Negative disposable income -> Poor
    2. DTI < 0.28 and savings rate >= 0.20 -> Excellent
    3. DTI < 0.36 -> Good
    4. DTI < 0.50 -> Fair
    5. Otherwise -> Poor

    An unbounded DTI (no income) falls through to Poor.

    Args:
        disposable_income: Monthly disposable income
        debt_to_income_ratio: Loan payments / income (may be inf)
        savings_rate: Disposable income / income
        config: Optional finance config, defaults to FINANCE_CONFIG

    Returns:
        FinancialHealth tier
    """
    thresholds = (config or FINANCE_CONFIG)["health_thresholds"]

    if disposable_income < 0:
        return FinancialHealth.POOR

    if (debt_to_income_ratio < thresholds["excellent_max_dti"]
            and savings_rate >= thresholds["excellent_min_savings_rate"]):
        return FinancialHealth.EXCELLENT

    if debt_to_income_ratio < thresholds["good_max_dti"]:
        return FinancialHealth.GOOD

    if debt_to_income_ratio < thresholds["fair_max_dti"]:
        return FinancialHealth.FAIR

    return FinancialHealth.POOR


def health_score(tier: FinancialHealth) -> int:
    """Ordinal score for a tier: Excellent 4 down to Poor 1."""
    return {
        FinancialHealth.EXCELLENT: 4,
        FinancialHealth.GOOD: 3,
        FinancialHealth.FAIR: 2,
        FinancialHealth.POOR: 1,
    }[tier]

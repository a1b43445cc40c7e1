"""
Assessment Engine - Financial and Health Decision Support.

Turns a user's incomes, expenses, loans and health records into normalized
monthly figures, classifications and purchase affordability.

Main Components:
    - models: Record dataclasses and enumerations
    - config: Thresholds, point tables and override loading
    - finance: Normalization, aggregation, classification, affordability,
      budget analysis and debt planning
    - health: Risk scoring, medical costs, insurance coverage and the
      health summary
    - services: Repositories and services around the calculators
"""

from typing import Dict, List, Optional
from datetime import date

from .errors import (
    AssessmentError,
    UnrecognizedFrequency,
    InvalidFinanceData,
    InvalidHealthData,
    MissingFinanceField,
    MissingHealthField,
    ConcurrentUpdateConflict,
    RecordNotFound,
    ProfileNotFound,
    PolicyNotFound,
)

from .models import (
    Frequency,
    FinancialHealth,
    RiskLevel,
    Vulnerability,
    Income,
    Expense,
    Loan,
    HealthProfile,
    MedicalCondition,
    MedicalExpense,
    InsurancePolicy,
)

from .finance import (
    normalize,
    annualize,
    FinanceSummary,
    calculate_finance_summary,
    get_max_affordable_amount,
    BudgetAnalyzer,
    DebtCalculator,
)

from .health import (
    PolicyOrder,
    CoverageResult,
    HealthSummary,
    InsuranceEvaluator,
    MedicalCostAnalyzer,
    calculate_health_risk_score,
    apply_insurance_coverage,
    apply_coverage_to_policies,
    calculate_health_summary,
)

from .config import (
    FINANCE_CONFIG,
    HEALTH_CONFIG,
    load_config_overrides,
)


__version__ = "1.0.0"
__all__ = [
    # Errors
    "AssessmentError",
    "UnrecognizedFrequency",
    "InvalidFinanceData",
    "InvalidHealthData",
    "MissingFinanceField",
    "MissingHealthField",
    "ConcurrentUpdateConflict",
    "RecordNotFound",
    "ProfileNotFound",
    "PolicyNotFound",
    # Models
    "Frequency",
    "FinancialHealth",
    "RiskLevel",
    "Vulnerability",
    "Income",
    "Expense",
    "Loan",
    "HealthProfile",
    "MedicalCondition",
    "MedicalExpense",
    "InsurancePolicy",
    # Finance
    "normalize",
    "annualize",
    "FinanceSummary",
    "calculate_finance_summary",
    "get_max_affordable_amount",
    "BudgetAnalyzer",
    "DebtCalculator",
    # Health
    "PolicyOrder",
    "CoverageResult",
    "HealthSummary",
    "InsuranceEvaluator",
    "MedicalCostAnalyzer",
    "calculate_health_risk_score",
    "apply_insurance_coverage",
    "apply_coverage_to_policies",
    "calculate_health_summary",
    # Configuration
    "FINANCE_CONFIG",
    "HEALTH_CONFIG",
    "load_config_overrides",
    # Main function
    "run_assessment",
]


def _load(records: Dict, key: str, model) -> List:
    return [model.from_dict(item) for item in records.get(key) or []]


def run_assessment(records: Dict, as_of: Optional[date] = None) -> Dict:
    """
    Main entry point for a full assessment of one user.

    This function orchestrates the complete pipeline:
    1. Build record models from plain dictionaries
    2. Calculate the finance summary and tier
    3. If a health profile is present, score health risk and compose the
       health summary
    4. Apply the priority adjustment to purchase affordability

    Args:
        records: Dictionary with keys:
            - incomes: List of income dicts (source, amount, frequency, is_active)
            - expenses: List of expense dicts (category, name, amount, frequency, ...)
            - loans: List of loan dicts (lender, type, principal, remaining_balance, ...)
            - profile: (Optional) Health profile dict (age, gender, height_cm, weight_kg, family_size)
            - conditions: (Optional) List of medical condition dicts
            - medical_expenses: (Optional) List of medical expense dicts
            - policies: (Optional) List of insurance policy dicts
        as_of: Reference date for policy dates and trailing windows (defaults to today)

    Returns:
        Dictionary containing:
            - finance_summary: FinanceSummary fields
            - budget_status: "Surplus", "Break Even" or "Deficit"
            - recommendation: Advice text for the tier
            - health_summary: HealthSummary fields, or None without a profile
            - priority_adjustment: Multiplier applied to affordability
            - max_affordable_amount: Maximum recommended one-time purchase
            - coverage_gaps: Identified insurance gaps (empty without a profile)

    Example:
        >>> result = run_assessment({
        ...     "incomes": [{"source": "Salary", "amount": 8000, "frequency": "monthly"}],
        ...     "expenses": [{"category": "housing", "name": "Rent", "amount": 3200, "frequency": "monthly"}],
        ...     "loans": [{"lender": "Bank", "type": "auto", "principal": 30000,
        ...                "remaining_balance": 20000, "monthly_payment": 1266.71, "interest_rate": 5}],
        ... })
        >>> print(result["finance_summary"]["financial_health"])
        Excellent
    """
    # Step 1: Build records
    incomes = _load(records, "incomes", Income)
    expenses = _load(records, "expenses", Expense)
    loans = _load(records, "loans", Loan)

    # Step 2: Finance summary
    finance_summary = calculate_finance_summary(incomes, expenses, loans)

    # Step 3: Health summary
    health_summary = None
    coverage_gaps = []
    profile_data = records.get("profile")
    if profile_data:
        profile = HealthProfile.from_dict(profile_data)
        conditions = _load(records, "conditions", MedicalCondition)
        medical_expenses = _load(records, "medical_expenses", MedicalExpense)
        policies = _load(records, "policies", InsurancePolicy)

        health_summary = calculate_health_summary(
            profile,
            conditions,
            medical_expenses,
            policies,
            monthly_income=finance_summary.monthly_income,
            monthly_expenses=finance_summary.monthly_expenses,
            as_of=as_of,
        )
        gaps = InsuranceEvaluator().evaluate_coverage_gaps(policies, conditions, medical_expenses, as_of)
        coverage_gaps = [
            {
                "type": gap.type,
                "description": gap.description,
                "risk_level": gap.risk_level,
                "estimated_exposure": gap.estimated_exposure,
            }
            for gap in gaps
        ]

    # Step 4: Affordability
    priority_adjustment = health_summary.priority_adjustment if health_summary else 1.0

    result = {
        "finance_summary": finance_summary.to_dict(),
        "budget_status": finance_summary.budget_status,
        "recommendation": finance_summary.recommendation(),
        "health_summary": health_summary.to_dict() if health_summary else None,
        "priority_adjustment": priority_adjustment,
        "max_affordable_amount": get_max_affordable_amount(finance_summary, priority_adjustment),
        "coverage_gaps": coverage_gaps,
    }

    return result

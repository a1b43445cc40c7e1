"""
Finance calculators: frequency normalization, aggregation, health tier
classification, affordability, budget analysis and debt planning.
"""

from .normalizer import normalize, annualize, is_recurring, MONTHLY_FACTORS
from .classifier import classify_financial_health, health_score
from .aggregator import FinanceSummary, FinanceAggregator, calculate_finance_summary
from .affordability import base_multiplier, get_max_affordable_amount
from .budget_analyzer import (
    BudgetAnalyzer,
    BudgetAnalysis,
    CategorySpending,
    CategoryOverspending,
    SpendingInsights,
    AllocationBreakdown,
    SavingsRecommendation,
    ExpenseOptimization,
)
from .debt_calculator import (
    DebtCalculator,
    DebtAnalysis,
    PaymentStrategy,
    LoanPaymentPlan,
    InterestSavings,
)

__all__ = [
    'normalize',
    'annualize',
    'is_recurring',
    'MONTHLY_FACTORS',
    'classify_financial_health',
    'health_score',
    'FinanceSummary',
    'FinanceAggregator',
    'calculate_finance_summary',
    'base_multiplier',
    'get_max_affordable_amount',
    'BudgetAnalyzer',
    'BudgetAnalysis',
    'CategorySpending',
    'CategoryOverspending',
    'SpendingInsights',
    'AllocationBreakdown',
    'SavingsRecommendation',
    'ExpenseOptimization',
    'DebtCalculator',
    'DebtAnalysis',
    'PaymentStrategy',
    'LoanPaymentPlan',
    'InterestSavings',
]

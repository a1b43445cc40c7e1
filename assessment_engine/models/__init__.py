"""Record models for the assessment engine."""

from .enums import (
    Frequency,
    FinancialHealth,
    ExpenseCategory,
    LoanType,
    Severity,
    ConditionCategory,
    MedicalExpenseCategory,
    PolicyType,
    RiskLevel,
    Vulnerability,
)
from .finance import Income, Expense, Loan
from .health import HealthProfile, MedicalCondition, MedicalExpense, InsurancePolicy

__all__ = [
    'Frequency',
    'FinancialHealth',
    'ExpenseCategory',
    'LoanType',
    'Severity',
    'ConditionCategory',
    'MedicalExpenseCategory',
    'PolicyType',
    'RiskLevel',
    'Vulnerability',
    'Income',
    'Expense',
    'Loan',
    'HealthProfile',
    'MedicalCondition',
    'MedicalExpense',
    'InsurancePolicy',
]

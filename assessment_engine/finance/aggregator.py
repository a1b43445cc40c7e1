"""
Finance Aggregator.
Sums normalized incomes, expenses and loan payments into a FinanceSummary.
"""

import logging
import math
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from ..config.engine_config import FINANCE_CONFIG
from ..errors import InvalidFinanceData
from ..models.enums import FinancialHealth
from ..models.finance import Income, Expense, Loan
from .classifier import classify_financial_health
from .normalizer import normalize

# Initialize logger for this module
logger = logging.getLogger(__name__)


@dataclass
class FinanceSummary:
    """Derived monthly finance figures for one user. Never persisted as source of truth."""
    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    monthly_loan_payments: float = 0.0
    disposable_income: float = 0.0
    debt_to_income_ratio: float = 0.0  # inf when there is no income
    savings_rate: float = 0.0
    financial_health: FinancialHealth = FinancialHealth.POOR
    budget_remaining: float = 0.0
    # Finance config the summary was classified with
    config: Optional[Dict] = field(default=None, repr=False, compare=False)

    @property
    def finance_config(self) -> Dict:
        return self.config or FINANCE_CONFIG

    @property
    def budget_status(self) -> str:
        if self.budget_remaining > 0:
            return "Surplus"
        if self.budget_remaining == 0:
            return "Break Even"
        return "Deficit"

    @property
    def is_overspending(self) -> bool:
        return self.monthly_expenses + self.monthly_loan_payments > self.monthly_income

    @property
    def emergency_fund_target(self) -> float:
        return self.monthly_expenses * self.finance_config["emergency_fund_months"]

    @property
    def dti_level(self) -> str:
        thresholds = self.finance_config["health_thresholds"]
        if self.debt_to_income_ratio <= thresholds["excellent_max_dti"]:
            return "Excellent"
        if self.debt_to_income_ratio <= thresholds["good_max_dti"]:
            return "Good"
        if self.debt_to_income_ratio <= thresholds["fair_max_dti"]:
            return "Fair"
        return "Poor"

    @property
    def savings_level(self) -> str:
        levels = self.finance_config["savings_levels"]
        if self.savings_rate >= levels["excellent"]:
            return "Excellent"
        if self.savings_rate >= levels["good"]:
            return "Good"
        if self.savings_rate >= levels["fair"]:
            return "Fair"
        if self.savings_rate >= 0:
            return "Poor"
        return "Critical"

    def recommendation(self) -> str:
        """Short advice text for the current tier, items joined by '; '."""
        thresholds = self.finance_config["health_thresholds"]
        advice = []

        if self.financial_health == FinancialHealth.EXCELLENT:
            advice.append("Your finances are excellent, continue your current approach")
            advice.append("Consider investing surplus funds for long-term growth")
        elif self.financial_health == FinancialHealth.GOOD:
            advice.append("Your finances are in good shape")
            advice.append("Build your emergency fund to 6 months of expenses")
        elif self.financial_health == FinancialHealth.FAIR:
            if self.debt_to_income_ratio >= thresholds["good_max_dti"]:
                advice.append("Reduce debt to bring your debt-to-income ratio below 36%")
            if self.savings_rate < self.finance_config["savings_levels"]["good"]:
                advice.append("Increase your savings rate to at least 15%")
            advice.append("Review your expenses to find areas for improvement")
        else:
            if self.disposable_income < 0:
                advice.append("You are overspending, reduce expenses immediately")
                advice.append("Look for ways to increase income")
            if self.debt_to_income_ratio >= thresholds["fair_max_dti"]:
                advice.append("Consider debt consolidation or payment plans")
            advice.append("Focus on essential expenses until your situation improves")

        return "; ".join(advice)

    def to_dict(self) -> Dict:
        return {
            "monthly_income": self.monthly_income,
            "monthly_expenses": self.monthly_expenses,
            "monthly_loan_payments": self.monthly_loan_payments,
            "disposable_income": self.disposable_income,
            "debt_to_income_ratio": self.debt_to_income_ratio,
            "savings_rate": self.savings_rate,
            "financial_health": self.financial_health.value,
            "budget_remaining": self.budget_remaining,
        }


class FinanceAggregator:
    """Aggregates a user's financial records into monthly figures."""

    def __init__(self, config: Optional[Dict] = None):
        self.finance_config = config or FINANCE_CONFIG

    def calculate_summary(
        self,
        incomes: List[Income],
        expenses: List[Expense],
        loans: List[Loan],
    ) -> FinanceSummary:
        """
        Calculate the finance summary for one user.

        Args:
            incomes: Income records (inactive ones are ignored)
            expenses: All expense records
            loans: All loan records

        Returns:
            FinanceSummary with tier classification

        Raises:
            InvalidFinanceData: If a record has a negative amount or a
                contradictory loan balance
            UnrecognizedFrequency: If a record uses an unknown cadence
        """
        self._check_records(incomes, expenses, loans)

        monthly_income = sum(
            normalize(income.amount, income.frequency)
            for income in incomes
            if income.is_active
        )
        monthly_expenses = sum(
            normalize(expense.amount, expense.frequency)
            for expense in expenses
        )
        monthly_loan_payments = sum(loan.monthly_payment for loan in loans)

        disposable_income = monthly_income - monthly_expenses - monthly_loan_payments

        if monthly_income > 0:
            dti = monthly_loan_payments / monthly_income
            savings_rate = disposable_income / monthly_income
        else:
            dti = math.inf
            savings_rate = 0.0

        tier = classify_financial_health(
            disposable_income, dti, savings_rate, config=self.finance_config
        )

        logger.debug(
            f"Finance summary: income={monthly_income:.2f}, expenses={monthly_expenses:.2f}, "
            f"loans={monthly_loan_payments:.2f}, dti={dti:.4f}, tier={tier.value}"
        )

        return FinanceSummary(
            monthly_income=monthly_income,
            monthly_expenses=monthly_expenses,
            monthly_loan_payments=monthly_loan_payments,
            disposable_income=disposable_income,
            debt_to_income_ratio=dti,
            savings_rate=savings_rate,
            financial_health=tier,
            budget_remaining=disposable_income,
            config=self.finance_config,
        )

    def _check_records(
        self,
        incomes: List[Income],
        expenses: List[Expense],
        loans: List[Loan],
    ) -> None:
        for income in incomes:
            if income.amount < 0:
                raise InvalidFinanceData(f"income {income.id} has a negative amount")
        for expense in expenses:
            if expense.amount < 0:
                raise InvalidFinanceData(f"expense {expense.id} has a negative amount")
        for loan in loans:
            if loan.monthly_payment <= 0:
                raise InvalidFinanceData(f"loan {loan.id} monthly payment must be greater than 0")
            if loan.remaining_balance < 0 or loan.remaining_balance > loan.principal:
                raise InvalidFinanceData(
                    f"loan {loan.id} remaining balance must be between 0 and the principal"
                )


def calculate_finance_summary(
    incomes: List[Income],
    expenses: List[Expense],
    loans: List[Loan],
) -> FinanceSummary:
    """Calculate a FinanceSummary with the default configuration."""
    return FinanceAggregator().calculate_summary(incomes, expenses, loans)

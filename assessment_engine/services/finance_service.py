"""
Finance service: records financial data through a repository and runs the
finance calculators over a user's records.
"""

import logging
from typing import List, Optional

from ..finance.aggregator import FinanceAggregator, FinanceSummary
from ..finance.affordability import get_max_affordable_amount
from ..finance.budget_analyzer import (
    BudgetAnalyzer,
    BudgetAnalysis,
    ExpenseOptimization,
    SavingsRecommendation,
    SpendingInsights,
)
from ..finance.debt_calculator import DebtAnalysis, DebtCalculator, InterestSavings, PaymentStrategy
from ..models.finance import Income, Expense, Loan

# Initialize logger for this module
logger = logging.getLogger(__name__)


class FinanceService:
    """
    Finance operations for one repository.

    The repository must provide get_active_incomes, get_expenses and
    get_loans, plus the save methods used by the add_* operations.
    """

    def __init__(self, repository, aggregator: Optional[FinanceAggregator] = None):
        self.repository = repository
        self.aggregator = aggregator or FinanceAggregator()
        self.budget_analyzer = BudgetAnalyzer()
        self.debt_calculator = DebtCalculator()

    def add_income(self, income: Income) -> None:
        income.validate()
        self.repository.save_income(income)

    def add_expense(self, expense: Expense) -> None:
        expense.validate()
        self.repository.save_expense(expense)

    def add_loan(self, loan: Loan) -> None:
        loan.validate()
        self.repository.save_loan(loan)

    def calculate_finance_summary(self, user_id: str) -> FinanceSummary:
        summary = self.aggregator.calculate_summary(
            self.repository.get_active_incomes(user_id),
            self.repository.get_expenses(user_id),
            self.repository.get_loans(user_id),
        )
        logger.info(f"Finance summary for user {user_id}: {summary.financial_health.value}")
        return summary

    def get_max_affordable_amount(self, user_id: str, priority_adjustment: float = 1.0) -> float:
        return get_max_affordable_amount(self.calculate_finance_summary(user_id), priority_adjustment)

    def analyze_budget(self, user_id: str) -> BudgetAnalysis:
        return self.budget_analyzer.analyze_budget(
            self.calculate_finance_summary(user_id), self.repository.get_expenses(user_id)
        )

    def get_spending_insights(self, user_id: str) -> SpendingInsights:
        return self.budget_analyzer.get_spending_insights(
            self.calculate_finance_summary(user_id), self.repository.get_expenses(user_id)
        )

    def recommend_savings(self, user_id: str) -> SavingsRecommendation:
        return self.budget_analyzer.recommend_savings(
            self.calculate_finance_summary(user_id), self.repository.get_expenses(user_id)
        )

    def identify_unnecessary_expenses(self, user_id: str) -> List[ExpenseOptimization]:
        return self.budget_analyzer.identify_unnecessary_expenses(self.repository.get_expenses(user_id))

    def get_debt_analysis(self, user_id: str) -> DebtAnalysis:
        return self.debt_calculator.get_debt_analysis(
            self.repository.get_loans(user_id), self.calculate_finance_summary(user_id)
        )

    def suggest_payment_strategy(self, user_id: str, extra_payment: float = 0.0) -> PaymentStrategy:
        return self.debt_calculator.suggest_payment_strategy(self.repository.get_loans(user_id), extra_payment)

    def calculate_interest_savings(self, user_id: str, extra_payment: float) -> InterestSavings:
        return self.debt_calculator.calculate_interest_savings(self.repository.get_loans(user_id), extra_payment)

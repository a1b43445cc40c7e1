"""
Budget Analyzer.
Budget status, category overspending, spending insights, 50/30/20 savings
guidance and expense optimizations derived from a FinanceSummary and the
underlying expense records.
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from ..config.engine_config import BUDGET_CONFIG
from ..models.finance import Expense
from .aggregator import FinanceSummary
from .normalizer import normalize

# Initialize logger for this module
logger = logging.getLogger(__name__)


@dataclass
class CategorySpending:
    """Monthly spending in one expense category."""
    category: str
    monthly_amount: float = 0.0
    percentage_of_income: float = 0.0
    percentage_of_total: float = 0.0
    expense_count: int = 0
    average_amount: float = 0.0
    is_fixed: bool = False


@dataclass
class CategoryOverspending:
    category: str
    monthly_spent: float
    recommended_max: float
    overspend_amount: float
    percentage_of_income: float


@dataclass
class BudgetAnalysis:
    """Budget status with overspending categories and actions."""
    monthly_income: float = 0.0
    monthly_expenses: float = 0.0
    monthly_loan_payments: float = 0.0
    budget_status: str = "Balanced"  # Surplus, Balanced, Deficit
    overspending_amount: float = 0.0
    overspending_categories: List[CategoryOverspending] = field(default_factory=list)
    recommended_actions: List[str] = field(default_factory=list)
    budget_health_score: int = 10  # 1-10


@dataclass
class SpendingInsights:
    total_monthly_spending: float = 0.0
    category_breakdown: List[CategorySpending] = field(default_factory=list)
    highest_category: Optional[CategorySpending] = None
    lowest_category: Optional[CategorySpending] = None
    variable_vs_fixed_ratio: float = 0.0
    spending_efficiency: str = "Moderate"  # Efficient, Moderate, Wasteful


@dataclass
class AllocationBreakdown:
    """Needs / wants / savings split, in amounts and percent of income."""
    needs: float = 0.0
    wants: float = 0.0
    savings: float = 0.0
    needs_percent: float = 0.0
    wants_percent: float = 0.0
    savings_percent: float = 0.0


@dataclass
class SavingsRecommendation:
    monthly_income: float = 0.0
    target_allocation: AllocationBreakdown = field(default_factory=AllocationBreakdown)
    current_allocation: AllocationBreakdown = field(default_factory=AllocationBreakdown)
    savings_gap: float = 0.0
    recommended_actions: List[str] = field(default_factory=list)
    achievability_score: int = 5  # 1-10


@dataclass
class ExpenseOptimization:
    expense_id: str
    category: str
    description: str
    current_amount: float
    recommended_amount: float
    potential_savings: float
    optimization_type: str  # Reduce, Eliminate, Substitute
    priority: int
    reasoning: str


class BudgetAnalyzer:
    """Analyzes a user's budget from their finance summary and expenses."""

    def __init__(self, config: Optional[Dict] = None):
        self.budget_config = config or BUDGET_CONFIG
        self.category_limits = self.budget_config["category_limits"]
        self.allocation_rule = self.budget_config["allocation_rule"]
        self.optimization_rules = self.budget_config["optimization_rules"]

    def analyze_budget(self, summary: FinanceSummary, expenses: List[Expense]) -> BudgetAnalysis:
        """
        Determine budget status and categories spending above recommended limits.

        Args:
            summary: Finance summary for the user
            expenses: Expense records the summary was built from

        Returns:
            BudgetAnalysis with overspending sorted by overspend amount
        """
        insights = self.get_spending_insights(summary, expenses)

        overspending_amount = 0.0
        if summary.disposable_income > 0:
            status = "Surplus"
        elif summary.disposable_income == 0:
            status = "Balanced"
        else:
            status = "Deficit"
            overspending_amount = -summary.disposable_income

        overspending = []
        for spending in insights.category_breakdown:
            limit = self.category_limits.get(spending.category)
            if limit is None:
                continue
            recommended_max = summary.monthly_income * limit
            if spending.monthly_amount > recommended_max:
                overspending.append(CategoryOverspending(
                    category=spending.category,
                    monthly_spent=spending.monthly_amount,
                    recommended_max=recommended_max,
                    overspend_amount=spending.monthly_amount - recommended_max,
                    percentage_of_income=spending.percentage_of_income,
                ))
        overspending.sort(key=lambda o: o.overspend_amount, reverse=True)

        actions = []
        if status == "Deficit":
            actions.append("Reduce expenses immediately to avoid debt accumulation")
            if overspending:
                top = overspending[0]
                actions.append(f"Focus on reducing {top.category} expenses by {top.overspend_amount:.2f}")
            actions.append("Consider increasing income through side work or better employment")
        elif status == "Balanced":
            actions.append("Build an emergency fund with surplus funds")
            actions.append("Look for small optimizations to create savings")
        else:
            actions.append("Allocate surplus to savings and investments")
            if overspending:
                actions.append("Optimize overspending categories to increase savings")

        return BudgetAnalysis(
            monthly_income=summary.monthly_income,
            monthly_expenses=summary.monthly_expenses,
            monthly_loan_payments=summary.monthly_loan_payments,
            budget_status=status,
            overspending_amount=overspending_amount,
            overspending_categories=overspending,
            recommended_actions=actions,
            budget_health_score=self._budget_health_score(summary, len(overspending)),
        )

    def get_spending_insights(self, summary: FinanceSummary, expenses: List[Expense]) -> SpendingInsights:
        """Break monthly spending down by category, largest first."""
        by_category: Dict[str, CategorySpending] = {}

        for expense in expenses:
            monthly_amount = normalize(expense.amount, expense.frequency)
            category = expense.category.value
            if category not in by_category:
                by_category[category] = CategorySpending(category=category, is_fixed=expense.is_fixed)
            spending = by_category[category]
            spending.monthly_amount += monthly_amount
            spending.expense_count += 1

        total_spending = summary.monthly_expenses
        total_income = summary.monthly_income

        breakdown = list(by_category.values())
        for spending in breakdown:
            spending.average_amount = spending.monthly_amount / spending.expense_count
            if total_spending > 0:
                spending.percentage_of_total = spending.monthly_amount / total_spending * 100
            if total_income > 0:
                spending.percentage_of_income = spending.monthly_amount / total_income * 100
        breakdown.sort(key=lambda s: s.monthly_amount, reverse=True)

        fixed_total = sum(s.monthly_amount for s in breakdown if s.is_fixed)
        variable_total = sum(s.monthly_amount for s in breakdown if not s.is_fixed)
        ratio = variable_total / fixed_total if fixed_total > 0 else 0.0

        return SpendingInsights(
            total_monthly_spending=total_spending,
            category_breakdown=breakdown,
            highest_category=breakdown[0] if breakdown else None,
            lowest_category=breakdown[-1] if breakdown else None,
            variable_vs_fixed_ratio=ratio,
            spending_efficiency=self._spending_efficiency(summary, ratio),
        )

    def recommend_savings(self, summary: FinanceSummary, expenses: List[Expense]) -> SavingsRecommendation:
        """
        Compare current allocation with the 50/30/20 rule.

        Fixed expenses and loan payments count as needs, variable expenses
        as wants and positive disposable income as savings.
        """
        income = summary.monthly_income
        rule = self.allocation_rule

        target = AllocationBreakdown(
            needs=income * rule["needs"],
            wants=income * rule["wants"],
            savings=income * rule["savings"],
            needs_percent=rule["needs"] * 100,
            wants_percent=rule["wants"] * 100,
            savings_percent=rule["savings"] * 100,
        )

        needs = summary.monthly_loan_payments
        wants = 0.0
        for expense in expenses:
            monthly_amount = normalize(expense.amount, expense.frequency)
            if expense.is_fixed:
                needs += monthly_amount
            else:
                wants += monthly_amount
        savings = max(0.0, summary.disposable_income)

        current = AllocationBreakdown(needs=needs, wants=wants, savings=savings)
        if income > 0:
            current.needs_percent = needs / income * 100
            current.wants_percent = wants / income * 100
            current.savings_percent = savings / income * 100

        gap = target.savings - savings

        actions = []
        if gap > 0:
            actions.append(f"Increase savings by {gap:.2f} per month to reach the {target.savings_percent:.0f}% target")
            if current.wants_percent > target.wants_percent:
                actions.append(
                    f"Reduce discretionary spending by {wants - target.wants:.2f} "
                    f"to align with the {target.wants_percent:.0f}% guideline"
                )
            if current.needs_percent > target.needs_percent:
                actions.append(
                    f"Consider reducing essential expenses by {needs - target.needs:.2f} or increasing income"
                )
        else:
            actions.append(f"You are meeting the {target.savings_percent:.0f}% savings target")
            actions.append("Consider investing surplus savings for long-term growth")

        return SavingsRecommendation(
            monthly_income=income,
            target_allocation=target,
            current_allocation=current,
            savings_gap=gap,
            recommended_actions=actions,
            achievability_score=self._achievability_score(summary, gap),
        )

    def identify_unnecessary_expenses(self, expenses: List[Expense]) -> List[ExpenseOptimization]:
        """
        Suggest reductions for discretionary expenses.

        Returns:
            Optimizations sorted by priority then potential savings, highest first
        """
        optimizations = []
        min_amount = self.budget_config["min_optimizable_amount"]

        for expense in expenses:
            monthly_amount = normalize(expense.amount, expense.frequency)
            if monthly_amount < min_amount:
                continue

            rule = self.optimization_rules.get(expense.category.value)
            if rule is None or monthly_amount <= rule["min_amount"]:
                continue

            savings = monthly_amount * rule["rate"]
            optimizations.append(ExpenseOptimization(
                expense_id=expense.id,
                category=expense.category.value,
                description=expense.name,
                current_amount=monthly_amount,
                recommended_amount=monthly_amount - savings,
                potential_savings=savings,
                optimization_type=rule["type"],
                priority=rule["priority"],
                reasoning=rule["reasoning"],
            ))

        optimizations.sort(key=lambda o: (o.priority, o.potential_savings), reverse=True)
        logger.debug(f"Identified {len(optimizations)} expense optimizations")
        return optimizations

    def _budget_health_score(self, summary: FinanceSummary, overspending_count: int) -> int:
        thresholds = summary.finance_config["health_thresholds"]
        score = 10

        if summary.disposable_income < 0:
            score -= 4
        elif summary.disposable_income < summary.monthly_income * 0.05:
            score -= 2

        if summary.debt_to_income_ratio > thresholds["fair_max_dti"]:
            score -= 3
        elif summary.debt_to_income_ratio > thresholds["good_max_dti"]:
            score -= 1

        score -= overspending_count // 2
        return max(1, score)

    def _spending_efficiency(self, summary: FinanceSummary, variable_fixed_ratio: float) -> str:
        if summary.savings_rate >= summary.finance_config["savings_levels"]["good"] and variable_fixed_ratio < 0.5:
            return "Efficient"
        if summary.disposable_income < 0 or variable_fixed_ratio > 1.5:
            return "Wasteful"
        return "Moderate"

    def _achievability_score(self, summary: FinanceSummary, savings_gap: float) -> int:
        if savings_gap <= 0:
            return 10

        score = 5
        if summary.monthly_income > 0:
            gap_share = savings_gap / summary.monthly_income
            if gap_share < 0.05:
                score += 3
            elif gap_share < 0.10:
                score += 1
            elif gap_share > 0.20:
                score -= 3

        if summary.disposable_income > 0:
            score += 2
        else:
            score -= 3

        return max(1, min(10, score))

"""
Medical Cost Analyzer.
Normalizes medical expenses into monthly and projected annual figures and
surfaces cost reduction candidates, opportunities and spending trends.
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass
from datetime import date, timedelta
from collections import defaultdict

from ..config.engine_config import MEDICAL_COST_CONFIG
from ..finance.normalizer import normalize
from ..models.enums import MedicalExpenseCategory
from ..models.health import MedicalCondition, MedicalExpense

# Initialize logger for this module
logger = logging.getLogger(__name__)


@dataclass
class CostReductionOpportunity:
    """A suggested way to lower medical spending. Never applied automatically."""
    type: str
    description: str
    potential_savings: float
    recommendation: str


class MedicalCostAnalyzer:
    """Medical expense analysis."""

    def __init__(self, config: Optional[Dict] = None):
        self.cost_config = config or MEDICAL_COST_CONFIG
        self.opportunity_rules = self.cost_config["opportunity_rules"]
        self.trend_rules = self.cost_config["trend_rules"]

    def monthly_amount(self, expense: MedicalExpense) -> float:
        """Recurring monthly equivalent; one-time expenses give 0."""
        if not expense.is_recurring:
            return 0.0
        return normalize(expense.amount, expense.frequency)

    def annual_amount(self, expense: MedicalExpense) -> float:
        if not expense.is_recurring:
            return expense.amount
        return self.monthly_amount(expense) * 12

    def calculate_monthly_average(self, expenses: List[MedicalExpense]) -> float:
        return sum(self.monthly_amount(expense) for expense in expenses)

    def project_annual_costs(self, expenses: List[MedicalExpense], as_of: Optional[date] = None) -> float:
        """
        Projected annual medical cost.

        Recurring monthly average x 12, plus one-time expenses dated within
        the trailing window ending at as_of. Undated one-time expenses are
        counted.

        Args:
            expenses: Medical expenses
            as_of: End of the trailing window (defaults to today)

        Returns:
            Projected annual cost
        """
        as_of = as_of or date.today()
        window_start = as_of - timedelta(days=self.cost_config["trailing_window_days"])

        one_time_total = 0.0
        for expense in expenses:
            if expense.is_recurring:
                continue
            if expense.expense_date is None or window_start < expense.expense_date <= as_of:
                one_time_total += expense.amount

        return self.calculate_monthly_average(expenses) * 12 + one_time_total

    def project_condition_costs(self, conditions: List[MedicalCondition]) -> float:
        """
        Annual medication cost of active conditions.

        Uses the recorded monthly medication cost, or a severity-based
        estimate for conditions that need medication but have no cost recorded.
        """
        estimates = self.cost_config["severity_annual_estimates"]
        total = 0.0
        for condition in conditions:
            if not condition.is_active:
                continue
            if condition.monthly_med_cost > 0:
                total += condition.annual_med_cost
            elif condition.requires_medication:
                total += estimates.get(condition.severity.value, 0.0)
        return total

    def identify_cost_reduction_candidates(
        self,
        expenses: List[MedicalExpense],
        threshold: Optional[float] = None,
    ) -> List[MedicalExpense]:
        """
        Expenses above threshold whose insurance covered little or nothing.

        Returns:
            Matching expenses, largest out-of-pocket first
        """
        if threshold is None:
            threshold = self.cost_config["candidate_min_amount"]
        max_ratio = self.cost_config["candidate_max_coverage_ratio"]

        candidates = [
            expense for expense in expenses
            if expense.amount > threshold and expense.coverage_ratio < max_ratio
        ]
        candidates.sort(key=lambda e: e.out_of_pocket, reverse=True)
        return candidates

    def identify_cost_reduction_opportunities(
        self,
        expenses: List[MedicalExpense],
    ) -> List[CostReductionOpportunity]:
        rules = self.opportunity_rules
        preventive = self.cost_config["preventive_descriptions"]
        opportunities = []

        medication_total = 0.0
        total = 0.0
        has_preventive_care = False

        for expense in expenses:
            total += expense.amount

            if expense.category == MedicalExpenseCategory.MEDICATION:
                medication_total += expense.amount
                if expense.amount > rules["generic_medication_min"]:
                    opportunities.append(CostReductionOpportunity(
                        type="generic_alternative",
                        description="High-cost medication may have a generic alternative",
                        potential_savings=expense.amount * rules["generic_savings_rate"],
                        recommendation="Ask your doctor about generic alternatives or therapeutic substitutes",
                    ))
            elif expense.category == MedicalExpenseCategory.DOCTOR_VISIT:
                if expense.description.strip().lower() in preventive:
                    has_preventive_care = True
            elif expense.category == MedicalExpenseCategory.LAB_TEST:
                if expense.amount > rules["lab_bundle_min"]:
                    opportunities.append(CostReductionOpportunity(
                        type="lab_optimization",
                        description="Lab tests could be bundled for cost savings",
                        potential_savings=expense.amount * rules["lab_bundle_savings_rate"],
                        recommendation="Schedule lab tests together to reduce facility fees",
                    ))

            if expense.out_of_pocket > expense.amount * rules["insurance_gap_oop_ratio"]:
                opportunities.append(CostReductionOpportunity(
                    type="insurance_gap",
                    description="High out-of-pocket expense suggests an insurance coverage gap",
                    potential_savings=expense.out_of_pocket * rules["insurance_gap_savings_rate"],
                    recommendation="Review insurance benefits or consider supplemental coverage",
                ))

        if not has_preventive_care and total > rules["preventive_min_total"]:
            opportunities.append(CostReductionOpportunity(
                type="preventive_care",
                description="Lack of preventive care may lead to higher future costs",
                potential_savings=total * rules["preventive_savings_rate"],
                recommendation="Schedule an annual physical and preventive screenings",
            ))

        if medication_total > total * rules["medication_share"]:
            opportunities.append(CostReductionOpportunity(
                type="medication_review",
                description="High medication costs warrant a comprehensive review",
                potential_savings=medication_total * rules["medication_review_savings_rate"],
                recommendation="Request a medication review and explore patient assistance programs",
            ))

        if total > rules["shopping_min_total"]:
            opportunities.append(CostReductionOpportunity(
                type="healthcare_shopping",
                description="High medical expenses could benefit from price comparison",
                potential_savings=total * rules["shopping_savings_rate"],
                recommendation="Compare prices across providers for non-emergency procedures",
            ))

        logger.debug(f"Found {len(opportunities)} cost reduction opportunities")
        return opportunities

    def analyze_trends(self, expenses: List[MedicalExpense]) -> List[str]:
        """Describe notable patterns in medical spending. Needs at least two expenses."""
        trends: List[str] = []
        if len(expenses) < 2:
            return trends

        category_totals: Dict[str, float] = defaultdict(float)
        for expense in expenses:
            category_totals[expense.category.value] += expense.amount

        total = sum(category_totals.values())
        if total <= 0:
            return trends

        for category, amount in sorted(category_totals.items()):
            percentage = amount / total * 100
            if percentage > self.trend_rules["category_concentration_pct"]:
                trends.append(f"High concentration in {category} category ({percentage:.1f}% of total costs)")

        out_of_pocket_pct = sum(e.out_of_pocket for e in expenses) / total * 100
        if out_of_pocket_pct > self.trend_rules["out_of_pocket_burden_pct"]:
            trends.append(f"High out-of-pocket burden ({out_of_pocket_pct:.1f}% of total costs)")

        recurring_total = sum(self.annual_amount(e) for e in expenses if e.is_recurring)
        one_time_total = sum(e.amount for e in expenses if not e.is_recurring)
        dominance = self.trend_rules["dominance_ratio"]
        if recurring_total > one_time_total * dominance:
            trends.append("Recurring expenses dominate, consider long-term cost management strategies")
        elif one_time_total > recurring_total * dominance:
            trends.append("High one-time expenses may indicate emergency care or delayed treatment")

        medication_total = category_totals.get(MedicalExpenseCategory.MEDICATION.value, 0.0)
        if medication_total > total * self.trend_rules["medication_dependency_share"]:
            trends.append("High medication dependency, explore cost reduction strategies")

        return trends

    def categorize_expense_risk(self, expense: MedicalExpense) -> str:
        annual = self.annual_amount(expense)
        if annual >= 10000:
            return "high"
        if annual >= 3000:
            return "moderate"
        if annual >= 1000:
            return "low"
        return "minimal"

"""
Health Summary Composer.
Combines risk score, medical costs and insurance into a financial
vulnerability tier, emergency fund target and the priority adjustment used
by the affordability calculator.
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass
from datetime import date

from ..config.engine_config import HEALTH_CONFIG
from ..errors import InvalidHealthData
from ..models.enums import PolicyType, RiskLevel, Vulnerability
from ..models.health import HealthProfile, InsurancePolicy, MedicalCondition, MedicalExpense
from .insurance import InsuranceEvaluator, PolicyOrder
from .medical_costs import MedicalCostAnalyzer
from .risk_scorer import HealthRiskScorer

# Initialize logger for this module
logger = logging.getLogger(__name__)


@dataclass
class HealthSummary:
    """Derived health figures for one user."""
    health_risk_score: int = 0
    health_risk_level: RiskLevel = RiskLevel.LOW
    monthly_medical_expenses: float = 0.0
    monthly_insurance_premiums: float = 0.0
    annual_deductible_remaining: float = 0.0
    out_of_pocket_remaining: float = 0.0
    total_health_costs: float = 0.0
    coverage_gap_risk: float = 0.0
    recommended_emergency_fund: float = 0.0
    financial_vulnerability: Optional[Vulnerability] = None
    priority_adjustment: float = 1.0

    def to_dict(self) -> Dict:
        return {
            "health_risk_score": self.health_risk_score,
            "health_risk_level": self.health_risk_level.value,
            "monthly_medical_expenses": self.monthly_medical_expenses,
            "monthly_insurance_premiums": self.monthly_insurance_premiums,
            "annual_deductible_remaining": self.annual_deductible_remaining,
            "out_of_pocket_remaining": self.out_of_pocket_remaining,
            "total_health_costs": self.total_health_costs,
            "coverage_gap_risk": self.coverage_gap_risk,
            "recommended_emergency_fund": self.recommended_emergency_fund,
            "financial_vulnerability": (
                self.financial_vulnerability.value if self.financial_vulnerability else None
            ),
            "priority_adjustment": self.priority_adjustment,
        }


def assess_financial_vulnerability(
    monthly_health_costs: float,
    monthly_income: Optional[float],
    config: Optional[Dict] = None,
) -> Optional[Vulnerability]:
    """
    Vulnerability tier from health costs as a percentage of income.

    Returns None when income is missing or not positive.
    """
    if monthly_income is None or monthly_income <= 0:
        return None

    pct = monthly_health_costs / monthly_income * 100
    for band in (config or HEALTH_CONFIG)["vulnerability_thresholds"]:
        if band["max_pct"] is None or pct < band["max_pct"]:
            return Vulnerability(band["tier"])
    return Vulnerability.CRITICAL


class HealthSummaryComposer:
    """Builds a HealthSummary from health records."""

    def __init__(
        self,
        config: Optional[Dict] = None,
        cost_config: Optional[Dict] = None,
        insurance_config: Optional[Dict] = None,
    ):
        self.health_config = config or HEALTH_CONFIG
        self.risk_scorer = HealthRiskScorer(self.health_config)
        self.cost_analyzer = MedicalCostAnalyzer(cost_config)
        self.insurance_evaluator = InsuranceEvaluator(insurance_config)

    def compose(
        self,
        profile: HealthProfile,
        conditions: List[MedicalCondition],
        expenses: List[MedicalExpense],
        policies: List[InsurancePolicy],
        monthly_income: Optional[float],
        monthly_expenses: Optional[float] = None,
        as_of: Optional[date] = None,
    ) -> HealthSummary:
        """
        Compose the health summary.

        Args:
            profile: Health profile
            conditions: Medical conditions
            expenses: Medical expenses
            policies: Insurance policies; only those in force on as_of count
            monthly_income: Monthly income from the finance summary, or None
            monthly_expenses: Household monthly expenses for the emergency
                fund; defaults to total health costs
            as_of: Reference date (defaults to today)

        Returns:
            HealthSummary

        Raises:
            InvalidHealthData: If a record carries a negative amount or an
                insurance payment above the expense amount
        """
        as_of = as_of or date.today()
        self._check_records(conditions, expenses, policies)

        breakdown = self.risk_scorer.score(profile, conditions)
        score = breakdown.total_score

        in_force = [p for p in policies if p.is_in_force(as_of)]

        monthly_medical = self.cost_analyzer.calculate_monthly_average(expenses)
        monthly_premiums = sum(p.monthly_premium for p in in_force)
        total_health_costs = monthly_medical + monthly_premiums

        if monthly_expenses is None:
            monthly_expenses = total_health_costs

        risk_multiplier = 1 + score / 100
        emergency_fund = self.health_config["emergency_fund_months"] * monthly_expenses * risk_multiplier

        summary = HealthSummary(
            health_risk_score=score,
            health_risk_level=breakdown.risk_level,
            monthly_medical_expenses=monthly_medical,
            monthly_insurance_premiums=monthly_premiums,
            annual_deductible_remaining=sum(p.remaining_deductible for p in in_force),
            out_of_pocket_remaining=sum(p.remaining_out_of_pocket for p in in_force),
            total_health_costs=total_health_costs,
            coverage_gap_risk=self._coverage_gap_risk(conditions, in_force, as_of),
            recommended_emergency_fund=emergency_fund,
            financial_vulnerability=assess_financial_vulnerability(
                total_health_costs, monthly_income, self.health_config
            ),
            priority_adjustment=risk_multiplier,
        )

        if summary.financial_vulnerability is None:
            logger.warning(f"No income available for profile {profile.id}, vulnerability left unclassified")

        logger.debug(
            f"Health summary for profile {profile.id}: score={score}, "
            f"total_costs={total_health_costs:.2f}, gap_risk={summary.coverage_gap_risk:.2f}"
        )
        return summary

    def _check_records(
        self,
        conditions: List[MedicalCondition],
        expenses: List[MedicalExpense],
        policies: List[InsurancePolicy],
    ) -> None:
        for condition in conditions:
            if condition.monthly_med_cost < 0:
                raise InvalidHealthData(f"condition {condition.id} has a negative medication cost")
        for expense in expenses:
            if expense.amount < 0:
                raise InvalidHealthData(f"medical expense {expense.id} has a negative amount")
            if expense.insurance_payment < 0 or expense.insurance_payment > expense.amount:
                raise InvalidHealthData(
                    f"medical expense {expense.id} insurance payment must be between 0 and the amount"
                )
        for policy in policies:
            if min(policy.monthly_premium, policy.deductible, policy.out_of_pocket_max) < 0:
                raise InvalidHealthData(f"policy {policy.policy_number} has a negative premium or limit")
            if not 0 <= policy.coverage_percentage <= 100:
                raise InvalidHealthData(f"policy {policy.policy_number} coverage must be between 0 and 100")

    def _coverage_gap_risk(
        self,
        conditions: List[MedicalCondition],
        in_force: List[InsurancePolicy],
        as_of: date,
    ) -> float:
        """Annual condition costs left to the insured after in-force cover."""
        annual_condition_costs = self.cost_analyzer.project_condition_costs(conditions)
        if annual_condition_costs <= 0:
            return 0.0

        insurance_config = self.insurance_evaluator.insurance_config
        covering_types = {PolicyType(t) for t in insurance_config["condition_covering_types"]}
        covering = [p for p in in_force if p.policy_type in covering_types]

        # Policies are copied by the evaluator; stored counters are untouched
        coverage = self.insurance_evaluator.apply_to_policies(
            annual_condition_costs, covering, PolicyOrder.EARLIEST_START, as_of
        )
        return coverage.out_of_pocket


def calculate_health_summary(
    profile: HealthProfile,
    conditions: List[MedicalCondition],
    expenses: List[MedicalExpense],
    policies: List[InsurancePolicy],
    monthly_income: Optional[float],
    monthly_expenses: Optional[float] = None,
    as_of: Optional[date] = None,
) -> HealthSummary:
    """Compose a HealthSummary with the default configuration."""
    return HealthSummaryComposer().compose(
        profile, conditions, expenses, policies, monthly_income, monthly_expenses, as_of
    )

"""
Insurance Coverage Evaluator.
Splits medical expenses between insurer and insured against one or more
policies, and evaluates coverage gaps and policy adjustments.
"""

import dataclasses
import logging
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from ..config.engine_config import INSURANCE_CONFIG
from ..errors import InvalidHealthData
from ..models.enums import MedicalExpenseCategory, PolicyType
from ..models.health import InsurancePolicy, MedicalCondition, MedicalExpense

# Initialize logger for this module
logger = logging.getLogger(__name__)


class PolicyOrder(Enum):
    """Order in which several in-force policies are applied to one expense."""
    EARLIEST_START = "earliest_start"
    PRIMARY_FIRST = "primary_first"
    HIGHEST_COVERAGE = "highest_coverage"


@dataclass
class CoverageResult:
    """Split of one expense against one policy."""
    insurer_paid: float
    out_of_pocket: float
    toward_deductible: float
    updated_policy: InsurancePolicy


@dataclass
class MultiPolicyCoverage:
    """Split of one expense across several policies applied in order."""
    expense_amount: float
    insurer_paid: float = 0.0
    out_of_pocket: float = 0.0
    applications: List[CoverageResult] = field(default_factory=list)

    @property
    def updated_policies(self) -> List[InsurancePolicy]:
        return [application.updated_policy for application in self.applications]


@dataclass
class CoverageGap:
    type: str
    description: str
    risk_level: str  # low, moderate, high, critical
    recommendation: str
    estimated_exposure: float


@dataclass
class PolicyRecommendation:
    type: str
    description: str
    impact: str
    estimated_savings: float
    policy_id: Optional[str] = None


def _balanced_split(amount: float, out_of_pocket: float) -> Tuple[float, float]:
    """Insurer and insured shares of amount whose float sum is exactly amount."""
    out_of_pocket = min(max(out_of_pocket, 0.0), amount)
    insurer_paid = amount - out_of_pocket
    # Both subtractions are exact (Sterbenz)
    return insurer_paid, amount - insurer_paid


def _order_key(order: PolicyOrder):
    if order == PolicyOrder.PRIMARY_FIRST:
        return lambda p: (not p.is_primary, p.start_date, p.policy_number)
    if order == PolicyOrder.HIGHEST_COVERAGE:
        return lambda p: (-p.coverage_percentage, p.policy_number)
    return lambda p: (p.start_date, p.policy_number)


class InsuranceEvaluator:
    """Coverage calculations and policy review."""

    def __init__(self, config: Optional[Dict] = None):
        self.insurance_config = config or INSURANCE_CONFIG
        self.recommendation_rules = self.insurance_config["recommendation_rules"]

    def apply_coverage(
        self,
        expense_amount: float,
        policy: InsurancePolicy,
        on: Optional[date] = None,
    ) -> CoverageResult:
        """
        Split an expense between insurer and insured for one policy.

        The deductible portion is paid by the insured. Coinsurance applies to
        the rest. The insured's total is clamped to the remaining
        out-of-pocket allowance and any excess moves to the insurer.

        Args:
            expense_amount: Expense amount (must not be negative)
            policy: Policy to apply; never mutated
            on: Date the policy must be in force on (defaults to today)

        Returns:
            CoverageResult with an updated copy of the policy (version + 1).
            A policy not in force pays nothing and is returned unchanged.

        Raises:
            InvalidHealthData: If the amount is negative
        """
        if expense_amount < 0:
            raise InvalidHealthData(f"expense amount cannot be negative: {expense_amount}")

        if not policy.is_in_force(on):
            logger.debug(f"Policy {policy.policy_number} not in force, no coverage applied")
            return CoverageResult(
                insurer_paid=0.0,
                out_of_pocket=expense_amount,
                toward_deductible=0.0,
                updated_policy=policy,
            )

        toward_deductible = min(expense_amount, policy.remaining_deductible)
        after_deductible = expense_amount - toward_deductible

        insurer_share = after_deductible * policy.coverage_percentage / 100
        insured_share = after_deductible - insurer_share

        insurer_paid, out_of_pocket = _balanced_split(
            expense_amount, min(toward_deductible + insured_share, policy.remaining_out_of_pocket)
        )

        updated = dataclasses.replace(
            policy,
            deductible_met=min(policy.deductible, policy.deductible_met + toward_deductible),
            out_of_pocket_current=min(policy.out_of_pocket_max, policy.out_of_pocket_current + out_of_pocket),
            version=policy.version + 1,
        )

        return CoverageResult(
            insurer_paid=insurer_paid,
            out_of_pocket=out_of_pocket,
            toward_deductible=toward_deductible,
            updated_policy=updated,
        )

    def apply_to_policies(
        self,
        expense_amount: float,
        policies: List[InsurancePolicy],
        order: PolicyOrder = PolicyOrder.EARLIEST_START,
        on: Optional[date] = None,
    ) -> MultiPolicyCoverage:
        """
        Apply an expense to several policies in a deterministic order.

        Each in-force policy covers what the previous ones left to the
        insured. Ties are broken by policy number.
        """
        if expense_amount < 0:
            raise InvalidHealthData(f"expense amount cannot be negative: {expense_amount}")

        result = MultiPolicyCoverage(expense_amount=expense_amount, out_of_pocket=expense_amount)
        in_force = sorted((p for p in policies if p.is_in_force(on)), key=_order_key(order))

        remaining = expense_amount
        for policy in in_force:
            if remaining <= 0:
                break
            application = self.apply_coverage(remaining, policy, on)
            result.applications.append(application)
            remaining = application.out_of_pocket

        result.insurer_paid, result.out_of_pocket = _balanced_split(expense_amount, remaining)
        return result

    def evaluate_coverage_gaps(
        self,
        policies: List[InsurancePolicy],
        conditions: List[MedicalCondition],
        expenses: List[MedicalExpense],
        on: Optional[date] = None,
    ) -> List[CoverageGap]:
        """
        Identify missing policy types, uncovered conditions and high out-of-pocket spending.

        A comprehensive policy counts as health, dental and vision cover.
        """
        gaps = []
        held = {p.policy_type for p in policies if p.is_in_force(on)}

        for policy_type, exposure in self.insurance_config["missing_policy_exposure"].items():
            if PolicyType(policy_type) in held or PolicyType.COMPREHENSIVE in held:
                continue
            gaps.append(CoverageGap(
                type=f"missing_{policy_type}_coverage",
                description=f"No active {policy_type} insurance policy found",
                risk_level=exposure["risk_level"],
                recommendation=f"Consider {policy_type} insurance coverage",
                estimated_exposure=exposure["exposure"],
            ))

        covering_types = {PolicyType(t) for t in self.insurance_config["condition_covering_types"]}
        if not held & covering_types:
            for condition in conditions:
                if not condition.is_active:
                    continue
                exposure = self.insurance_config["uncovered_condition_exposure"][condition.severity.value]
                gaps.append(CoverageGap(
                    type="uncovered_condition",
                    description=f"Condition '{condition.name}' is not covered by any active policy",
                    risk_level=exposure["risk_level"],
                    recommendation="Review insurance benefits for condition-specific coverage",
                    estimated_exposure=exposure["exposure"],
                ))

        total = sum(e.amount for e in expenses)
        total_out_of_pocket = sum(e.out_of_pocket for e in expenses)
        if total > 0:
            ratio = total_out_of_pocket / total
            if ratio > self.insurance_config["high_out_of_pocket_ratio"]:
                gaps.append(CoverageGap(
                    type="high_out_of_pocket",
                    description=f"High out-of-pocket expenses ({ratio * 100:.1f}% of total)",
                    risk_level="high",
                    recommendation="Review deductible levels and consider supplemental insurance",
                    estimated_exposure=total_out_of_pocket * 1.5,
                ))

        return gaps

    def recommend_policy_adjustments(
        self,
        policies: List[InsurancePolicy],
        expenses: List[MedicalExpense],
    ) -> List[PolicyRecommendation]:
        rules = self.recommendation_rules
        recommendations = []

        for policy in policies:
            if not policy.is_active:
                continue

            if policy.deductible > 0:
                utilization = policy.deductible_met / policy.deductible
                if (utilization < rules["low_deductible_utilization"]
                        and policy.deductible > rules["high_deductible_min"]):
                    recommendations.append(PolicyRecommendation(
                        type="deductible_adjustment",
                        description="Low deductible utilization, a higher deductible could lower premiums",
                        impact="Lower monthly premiums, higher potential out-of-pocket costs",
                        estimated_savings=policy.annual_premium * rules["premium_savings_rate"],
                        policy_id=policy.id,
                    ))
                elif (utilization > rules["high_deductible_utilization"]
                        and policy.deductible > rules["reduction_deductible_min"]):
                    recommendations.append(PolicyRecommendation(
                        type="deductible_reduction",
                        description="High deductible utilization, a lower deductible may reduce costs",
                        impact="Higher monthly premiums, lower out-of-pocket costs",
                        estimated_savings=(
                            (policy.deductible - rules["reduction_target_deductible"])
                            * rules["reduction_savings_rate"]
                        ),
                        policy_id=policy.id,
                    ))

            if (policy.out_of_pocket_max > 0
                    and policy.out_of_pocket_current / policy.out_of_pocket_max > rules["high_oop_utilization"]):
                recommendations.append(PolicyRecommendation(
                    type="supplemental_coverage",
                    description="High out-of-pocket utilization suggests a need for supplemental coverage",
                    impact="Reduced financial exposure for future medical expenses",
                    estimated_savings=policy.out_of_pocket_max * rules["supplemental_savings_rate"],
                    policy_id=policy.id,
                ))

            if policy.coverage_percentage < rules["min_coverage_percentage"]:
                recommendations.append(PolicyRecommendation(
                    type="coverage_upgrade",
                    description=f"Low coverage percentage ({policy.coverage_percentage:.0f}%) may result in high costs",
                    impact="Better coverage for major medical expenses",
                    estimated_savings=0.0,
                    policy_id=policy.id,
                ))

        medication_total = sum(
            e.amount for e in expenses if e.category == MedicalExpenseCategory.MEDICATION
        )
        if medication_total > rules["high_medication_total"]:
            recommendations.append(PolicyRecommendation(
                type="prescription_coverage",
                description="High medication expenses suggest a need for better prescription coverage",
                impact="Reduced medication costs through better formulary coverage",
                estimated_savings=medication_total * rules["prescription_savings_rate"],
            ))

        return recommendations


def apply_insurance_coverage(
    expense_amount: float,
    policy: InsurancePolicy,
    on: Optional[date] = None,
) -> CoverageResult:
    """Split one expense against one policy with the default configuration."""
    return InsuranceEvaluator().apply_coverage(expense_amount, policy, on)


def apply_coverage_to_policies(
    expense_amount: float,
    policies: List[InsurancePolicy],
    order: PolicyOrder = PolicyOrder.EARLIEST_START,
    on: Optional[date] = None,
) -> MultiPolicyCoverage:
    return InsuranceEvaluator().apply_to_policies(expense_amount, policies, order, on)

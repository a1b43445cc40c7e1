"""
Health service: records health data through a repository, applies insurance
to new medical expenses and composes health summaries.
"""

import dataclasses
import logging
from typing import List, Optional
from dataclasses import dataclass
from datetime import date

from ..health.insurance import (
    CoverageGap,
    MultiPolicyCoverage,
    PolicyOrder,
    PolicyRecommendation,
)
from ..health.medical_costs import CostReductionOpportunity
from ..health.risk_scorer import estimate_risk_factor
from ..health.summary import HealthSummary, HealthSummaryComposer
from ..models.health import HealthProfile, InsurancePolicy, MedicalCondition, MedicalExpense

# Initialize logger for this module
logger = logging.getLogger(__name__)


@dataclass
class RecordedExpense:
    """A stored medical expense with the coverage applied to it."""
    expense: MedicalExpense
    coverage: MultiPolicyCoverage


class HealthService:
    """
    Health operations for one repository.

    The repository must provide get_profile, get_active_conditions,
    get_medical_expenses, get_active_policies, get_policy and
    update_policy_counters / commit_policy_updates.
    """

    def __init__(
        self,
        repository,
        policy_order: PolicyOrder = PolicyOrder.EARLIEST_START,
        composer: Optional[HealthSummaryComposer] = None,
    ):
        self.repository = repository
        self.policy_order = policy_order
        self.composer = composer or HealthSummaryComposer()
        self.insurance_evaluator = self.composer.insurance_evaluator
        self.cost_analyzer = self.composer.cost_analyzer

    def create_profile(self, profile: HealthProfile) -> None:
        profile.validate()
        self.repository.save_profile(profile)

    def update_profile(self, profile: HealthProfile) -> None:
        profile.validate()
        self.repository.get_profile(profile.user_id)
        self.repository.save_profile(profile, replace=True)

    def get_profile(self, user_id: str) -> HealthProfile:
        return self.repository.get_profile(user_id)

    def delete_profile(self, user_id: str) -> None:
        self.repository.delete_profile(user_id)

    def add_condition(self, user_id: str, condition: MedicalCondition) -> MedicalCondition:
        """Attach a condition to the user's profile, defaulting its risk factor from severity."""
        profile = self.repository.get_profile(user_id)
        condition = dataclasses.replace(condition, profile_id=profile.id)
        if condition.risk_factor == 0:
            condition.risk_factor = estimate_risk_factor(condition.severity)
        condition.validate()
        self.repository.save_condition(condition)
        return condition

    def add_policy(self, user_id: str, policy: InsurancePolicy) -> InsurancePolicy:
        profile = self.repository.get_profile(user_id)
        policy = dataclasses.replace(policy, profile_id=profile.id)
        policy.validate()
        self.repository.save_policy(policy)
        return policy

    def record_medical_expense(
        self,
        user_id: str,
        expense: MedicalExpense,
        on: Optional[date] = None,
    ) -> RecordedExpense:
        """
        Store a medical expense after applying the user's in-force policies.

        Policy counters are written back only if no other writer changed
        them since they were read; otherwise nothing is stored.

        Args:
            user_id: Owner of the health profile
            expense: Expense to record; its insurance payment is recalculated
            on: Date the policies must be in force on (defaults to the
                expense date, then today)

        Returns:
            RecordedExpense with the stored expense and coverage split

        Raises:
            ProfileNotFound: If the user has no profile
            InvalidHealthData: If the expense is invalid
            ConcurrentUpdateConflict: If a policy was updated concurrently
        """
        profile = self.repository.get_profile(user_id)
        expense = dataclasses.replace(expense, profile_id=profile.id)
        expense.validate()

        on = on or expense.expense_date or date.today()
        policies = self.repository.get_active_policies(profile.id)
        coverage = self.insurance_evaluator.apply_to_policies(expense.amount, policies, self.policy_order, on)

        updates = [
            (application.updated_policy, application.updated_policy.version - 1)
            for application in coverage.applications
        ]
        if updates:
            self.repository.commit_policy_updates(updates)

        expense.insurance_payment = coverage.insurer_paid
        expense.is_covered = coverage.insurer_paid > 0
        self.repository.save_medical_expense(expense)

        logger.info(
            f"Recorded medical expense {expense.id} for user {user_id}: "
            f"insurer {coverage.insurer_paid:.2f}, out of pocket {coverage.out_of_pocket:.2f}"
        )
        return RecordedExpense(expense=expense, coverage=coverage)

    def calculate_health_summary(
        self,
        user_id: str,
        monthly_income: Optional[float] = None,
        monthly_expenses: Optional[float] = None,
        as_of: Optional[date] = None,
    ) -> HealthSummary:
        profile = self.repository.get_profile(user_id)
        return self.composer.compose(
            profile,
            self.repository.get_active_conditions(profile.id),
            self.repository.get_medical_expenses(profile.id),
            self.repository.get_active_policies(profile.id),
            monthly_income,
            monthly_expenses,
            as_of,
        )

    def get_coverage_gaps(self, user_id: str, on: Optional[date] = None) -> List[CoverageGap]:
        profile = self.repository.get_profile(user_id)
        return self.insurance_evaluator.evaluate_coverage_gaps(
            self.repository.get_active_policies(profile.id),
            self.repository.get_active_conditions(profile.id),
            self.repository.get_medical_expenses(profile.id),
            on,
        )

    def get_policy_recommendations(self, user_id: str) -> List[PolicyRecommendation]:
        profile = self.repository.get_profile(user_id)
        return self.insurance_evaluator.recommend_policy_adjustments(
            self.repository.get_active_policies(profile.id),
            self.repository.get_medical_expenses(profile.id),
        )

    def get_cost_reduction_opportunities(self, user_id: str) -> List[CostReductionOpportunity]:
        profile = self.repository.get_profile(user_id)
        return self.cost_analyzer.identify_cost_reduction_opportunities(
            self.repository.get_medical_expenses(profile.id)
        )

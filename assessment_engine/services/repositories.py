"""
In-memory repositories for financial and health records.

Records are stored per user (finance) or per profile (health). Reads return
copies, so callers never hold a reference to stored state. Insurance policy
counters are written back under a version check.
"""

import copy
import logging
import threading
from typing import Dict, List, Tuple

from ..errors import (
    ConcurrentUpdateConflict,
    InvalidHealthData,
    PolicyNotFound,
    ProfileNotFound,
    RecordNotFound,
)
from ..models.finance import Income, Expense, Loan
from ..models.health import HealthProfile, InsurancePolicy, MedicalCondition, MedicalExpense

# Initialize logger for this module
logger = logging.getLogger(__name__)


class InMemoryFinanceRepository:
    """Stores incomes, expenses and loans keyed by user."""

    def __init__(self):
        self._incomes: Dict[str, Income] = {}
        self._expenses: Dict[str, Expense] = {}
        self._loans: Dict[str, Loan] = {}
        self._lock = threading.Lock()

    def save_income(self, income: Income) -> None:
        with self._lock:
            self._incomes[income.id] = copy.deepcopy(income)

    def save_expense(self, expense: Expense) -> None:
        with self._lock:
            self._expenses[expense.id] = copy.deepcopy(expense)

    def save_loan(self, loan: Loan) -> None:
        with self._lock:
            self._loans[loan.id] = copy.deepcopy(loan)

    def get_incomes(self, user_id: str) -> List[Income]:
        with self._lock:
            return [copy.deepcopy(i) for i in self._incomes.values() if i.user_id == user_id]

    def get_active_incomes(self, user_id: str) -> List[Income]:
        return [i for i in self.get_incomes(user_id) if i.is_active]

    def get_expenses(self, user_id: str) -> List[Expense]:
        with self._lock:
            return [copy.deepcopy(e) for e in self._expenses.values() if e.user_id == user_id]

    def get_loans(self, user_id: str) -> List[Loan]:
        with self._lock:
            return [copy.deepcopy(l) for l in self._loans.values() if l.user_id == user_id]

    def deactivate_income(self, income_id: str) -> None:
        """Soft-delete an income; it stays stored but no longer counts."""
        with self._lock:
            income = self._incomes.get(income_id)
            if income is None:
                raise RecordNotFound(f"Income not found: {income_id}")
            income.is_active = False

    def delete_expense(self, expense_id: str) -> None:
        with self._lock:
            if self._expenses.pop(expense_id, None) is None:
                raise RecordNotFound(f"Expense not found: {expense_id}")

    def delete_loan(self, loan_id: str) -> None:
        with self._lock:
            if self._loans.pop(loan_id, None) is None:
                raise RecordNotFound(f"Loan not found: {loan_id}")


class InMemoryHealthRepository:
    """Stores health profiles and their dependent records."""

    def __init__(self):
        self._profiles: Dict[str, HealthProfile] = {}  # by user id
        self._conditions: Dict[str, MedicalCondition] = {}
        self._medical_expenses: Dict[str, MedicalExpense] = {}
        self._policies: Dict[str, InsurancePolicy] = {}
        self._lock = threading.Lock()

    def save_profile(self, profile: HealthProfile, replace: bool = False) -> None:
        """
        Store a profile. A user has at most one profile.

        Raises:
            InvalidHealthData: If the user already has a profile and replace is False
        """
        with self._lock:
            if profile.user_id in self._profiles and not replace:
                raise InvalidHealthData(f"User {profile.user_id} already has a health profile")
            self._profiles[profile.user_id] = copy.deepcopy(profile)

    def get_profile(self, user_id: str) -> HealthProfile:
        with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                raise ProfileNotFound(f"No health profile for user {user_id}")
            return copy.deepcopy(profile)

    def save_condition(self, condition: MedicalCondition) -> None:
        with self._lock:
            self._conditions[condition.id] = copy.deepcopy(condition)

    def get_conditions(self, profile_id: str) -> List[MedicalCondition]:
        with self._lock:
            return [copy.deepcopy(c) for c in self._conditions.values() if c.profile_id == profile_id]

    def get_active_conditions(self, profile_id: str) -> List[MedicalCondition]:
        return [c for c in self.get_conditions(profile_id) if c.is_active]

    def save_medical_expense(self, expense: MedicalExpense) -> None:
        with self._lock:
            self._medical_expenses[expense.id] = copy.deepcopy(expense)

    def get_medical_expenses(self, profile_id: str) -> List[MedicalExpense]:
        with self._lock:
            return [copy.deepcopy(e) for e in self._medical_expenses.values() if e.profile_id == profile_id]

    def save_policy(self, policy: InsurancePolicy) -> None:
        """
        Store a new policy.

        Raises:
            InvalidHealthData: If another policy already uses the policy number
        """
        with self._lock:
            for existing in self._policies.values():
                if existing.policy_number == policy.policy_number and existing.id != policy.id:
                    raise InvalidHealthData(f"Policy number {policy.policy_number} already exists")
            self._policies[policy.id] = copy.deepcopy(policy)

    def get_policy(self, policy_id: str) -> InsurancePolicy:
        with self._lock:
            policy = self._policies.get(policy_id)
            if policy is None:
                raise PolicyNotFound(f"Policy not found: {policy_id}")
            return copy.deepcopy(policy)

    def get_active_policies(self, profile_id: str) -> List[InsurancePolicy]:
        with self._lock:
            return [
                copy.deepcopy(p) for p in self._policies.values()
                if p.profile_id == profile_id and p.is_active
            ]

    def update_policy_counters(self, policy: InsurancePolicy, expected_version: int) -> None:
        """
        Write back a policy's counters if the stored version still matches.

        Raises:
            PolicyNotFound: If the policy does not exist
            ConcurrentUpdateConflict: If the stored version differs from expected_version
        """
        self.commit_policy_updates([(policy, expected_version)])

    def commit_policy_updates(self, updates: List[Tuple[InsurancePolicy, int]]) -> None:
        """
        Write back several policies atomically.

        Every version is checked before anything is written, so a conflict on
        one policy leaves all of them untouched.
        """
        with self._lock:
            for policy, expected_version in updates:
                stored = self._policies.get(policy.id)
                if stored is None:
                    raise PolicyNotFound(f"Policy not found: {policy.id}")
                if stored.version != expected_version:
                    logger.warning(
                        f"Version conflict on policy {policy.id}: "
                        f"expected {expected_version}, found {stored.version}"
                    )
                    raise ConcurrentUpdateConflict(policy.id, expected_version, stored.version)

            for policy, expected_version in updates:
                stored = self._policies[policy.id]
                stored.deductible_met = policy.deductible_met
                stored.out_of_pocket_current = policy.out_of_pocket_current
                stored.version = expected_version + 1

    def delete_profile(self, user_id: str) -> None:
        """
        Delete a user's profile with its conditions, medical expenses and policies.

        Raises:
            ProfileNotFound: If the user has no profile
        """
        with self._lock:
            profile = self._profiles.pop(user_id, None)
            if profile is None:
                raise ProfileNotFound(f"No health profile for user {user_id}")

            self._conditions = {
                k: c for k, c in self._conditions.items() if c.profile_id != profile.id
            }
            self._medical_expenses = {
                k: e for k, e in self._medical_expenses.items() if e.profile_id != profile.id
            }
            self._policies = {
                k: p for k, p in self._policies.items() if p.profile_id != profile.id
            }

        logger.info(f"Deleted health profile {profile.id} and its dependent records")

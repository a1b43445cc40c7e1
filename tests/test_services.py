"""
Tests for the repositories and the finance, health and assessment services.
"""

import unittest
from datetime import date

from assessment_engine.errors import (
    ConcurrentUpdateConflict,
    InvalidFinanceData,
    InvalidHealthData,
    PolicyNotFound,
    ProfileNotFound,
    RecordNotFound,
)
from assessment_engine.models import (
    ConditionCategory,
    Expense,
    ExpenseCategory,
    FinancialHealth,
    Frequency,
    HealthProfile,
    Income,
    InsurancePolicy,
    Loan,
    LoanType,
    MedicalCondition,
    MedicalExpense,
    MedicalExpenseCategory,
    PolicyType,
    Severity,
)
from assessment_engine.services import (
    AssessmentService,
    FinanceService,
    HealthService,
    InMemoryFinanceRepository,
    InMemoryHealthRepository,
)


AS_OF = date(2025, 6, 1)


def make_policy(policy_id="pol-1", policy_number="HP-001", **overrides):
    fields = dict(
        id=policy_id,
        profile_id="",
        provider="Acme Health",
        policy_number=policy_number,
        policy_type=PolicyType.HEALTH,
        monthly_premium=300,
        deductible=1000,
        out_of_pocket_max=5000,
        coverage_percentage=80,
        start_date=date(2024, 1, 1),
        deductible_met=500,
    )
    fields.update(overrides)
    return InsurancePolicy(**fields)


def make_medical_expense(amount=1200, expense_id="med-1"):
    return MedicalExpense(id=expense_id, profile_id="", amount=amount,
                          category=MedicalExpenseCategory.HOSPITAL, expense_date=date(2025, 3, 1))


class ServiceTestCase(unittest.TestCase):
    """Shared fixtures: one user with finance records and a health profile."""

    def setUp(self):
        self.finance_repo = InMemoryFinanceRepository()
        self.health_repo = InMemoryHealthRepository()
        self.finance_service = FinanceService(self.finance_repo)
        self.health_service = HealthService(self.health_repo)
        self.assessment_service = AssessmentService(self.finance_service, self.health_service)

        self.finance_service.add_income(Income(id="inc-1", user_id="user-1", source="Salary",
                                               amount=8000, frequency=Frequency.MONTHLY))
        self.finance_service.add_expense(Expense(id="exp-1", user_id="user-1", category=ExpenseCategory.HOUSING,
                                                 name="Rent", amount=3200, frequency=Frequency.MONTHLY,
                                                 is_fixed=True, priority=1))
        self.finance_service.add_loan(Loan(id="loan-1", user_id="user-1", lender="Bank", loan_type=LoanType.AUTO,
                                           principal=30000, remaining_balance=20000,
                                           monthly_payment=1266.71, interest_rate=5))

        self.profile = HealthProfile(id="prof-1", user_id="user-1", age=35, gender="male",
                                     height_cm=175, weight_kg=80, family_size=2)

    def create_profile_with_policy(self):
        self.health_service.create_profile(self.profile)
        return self.health_service.add_policy("user-1", make_policy())


class TestFinanceService(ServiceTestCase):

    def test_summary_and_affordability(self):
        summary = self.finance_service.calculate_finance_summary("user-1")
        self.assertEqual(summary.financial_health, FinancialHealth.EXCELLENT)
        self.assertAlmostEqual(self.finance_service.get_max_affordable_amount("user-1"), 12366.515)

    def test_records_are_per_user(self):
        summary = self.finance_service.calculate_finance_summary("user-2")
        self.assertEqual(summary.monthly_income, 0)

    def test_invalid_record_rejected(self):
        with self.assertRaises(InvalidFinanceData):
            self.finance_service.add_income(Income(id="inc-2", user_id="user-1", source="Gift",
                                                   amount=-5, frequency=Frequency.MONTHLY))

    def test_deactivated_income_excluded(self):
        self.finance_repo.deactivate_income("inc-1")
        summary = self.finance_service.calculate_finance_summary("user-1")
        self.assertEqual(summary.monthly_income, 0)
        self.assertEqual(summary.financial_health, FinancialHealth.POOR)
        self.assertEqual(len(self.finance_repo.get_incomes("user-1")), 1)

    def test_delete_unknown_records(self):
        with self.assertRaises(RecordNotFound):
            self.finance_repo.delete_expense("missing")
        with self.assertRaises(RecordNotFound):
            self.finance_repo.delete_loan("missing")

    def test_reads_return_copies(self):
        income = self.finance_repo.get_incomes("user-1")[0]
        income.amount = 1
        self.assertEqual(self.finance_repo.get_incomes("user-1")[0].amount, 8000)

    def test_budget_and_debt_operations(self):
        self.assertEqual(self.finance_service.analyze_budget("user-1").budget_status, "Surplus")
        self.assertEqual(self.finance_service.get_spending_insights("user-1").highest_category.category, "housing")
        self.assertLessEqual(self.finance_service.recommend_savings("user-1").savings_gap, 0)
        self.assertEqual(self.finance_service.identify_unnecessary_expenses("user-1"), [])
        self.assertEqual(self.finance_service.get_debt_analysis("user-1").debt_health_status, "Excellent")
        self.assertEqual(self.finance_service.suggest_payment_strategy("user-1", 200).prioritized_loans[0].loan_id,
                         "loan-1")
        self.assertGreater(self.finance_service.calculate_interest_savings("user-1", 200).interest_saved, 0)


class TestHealthService(ServiceTestCase):

    def test_profile_lifecycle(self):
        self.health_service.create_profile(self.profile)
        with self.assertRaises(InvalidHealthData):
            self.health_service.create_profile(self.profile)

        self.profile.weight_kg = 75
        self.health_service.update_profile(self.profile)
        self.assertEqual(self.health_service.get_profile("user-1").weight_kg, 75)

    def test_missing_profile(self):
        with self.assertRaises(ProfileNotFound):
            self.health_service.get_profile("ghost")
        with self.assertRaises(ProfileNotFound):
            self.health_service.record_medical_expense("ghost", make_medical_expense())
        with self.assertRaises(ProfileNotFound):
            self.health_service.update_profile(HealthProfile(id="p9", user_id="ghost", age=30, gender="other",
                                                             height_cm=170, weight_kg=70))

    def test_missing_policy(self):
        with self.assertRaises(PolicyNotFound):
            self.health_repo.get_policy("nope")

    def test_duplicate_policy_number(self):
        self.create_profile_with_policy()
        with self.assertRaises(InvalidHealthData):
            self.health_service.add_policy("user-1", make_policy(policy_id="pol-2"))

    def test_add_condition_defaults_risk_factor(self):
        self.health_service.create_profile(self.profile)
        condition = self.health_service.add_condition("user-1", MedicalCondition(
            id="c1", profile_id="", name="Asthma", category=ConditionCategory.CHRONIC, severity=Severity.MODERATE,
        ))
        self.assertEqual(condition.profile_id, "prof-1")
        self.assertEqual(condition.risk_factor, 0.25)

    def test_record_medical_expense_updates_policy(self):
        self.create_profile_with_policy()
        recorded = self.health_service.record_medical_expense("user-1", make_medical_expense())

        self.assertAlmostEqual(recorded.coverage.insurer_paid, 560)
        self.assertAlmostEqual(recorded.coverage.out_of_pocket, 640)
        self.assertAlmostEqual(recorded.expense.insurance_payment, 560)
        self.assertTrue(recorded.expense.is_covered)

        stored = self.health_repo.get_policy("pol-1")
        self.assertAlmostEqual(stored.deductible_met, 1000)
        self.assertAlmostEqual(stored.out_of_pocket_current, 640)
        self.assertEqual(stored.version, 1)

        stored_expense = self.health_repo.get_medical_expenses("prof-1")[0]
        self.assertAlmostEqual(stored_expense.out_of_pocket, 640)

    def test_second_expense_sees_updated_counters(self):
        self.create_profile_with_policy()
        self.health_service.record_medical_expense("user-1", make_medical_expense())
        recorded = self.health_service.record_medical_expense("user-1", make_medical_expense(1000, "med-2"))

        self.assertAlmostEqual(recorded.coverage.out_of_pocket, 200)
        self.assertEqual(self.health_repo.get_policy("pol-1").version, 2)

    def test_stale_write_conflicts(self):
        self.create_profile_with_policy()
        stale = self.health_repo.get_policy("pol-1")
        self.health_service.record_medical_expense("user-1", make_medical_expense())

        stale.deductible_met = 0
        with self.assertRaises(ConcurrentUpdateConflict) as ctx:
            self.health_repo.update_policy_counters(stale, expected_version=0)
        self.assertEqual(ctx.exception.actual_version, 1)
        self.assertAlmostEqual(self.health_repo.get_policy("pol-1").deductible_met, 1000)

    def test_multi_policy_commit_is_atomic(self):
        self.create_profile_with_policy()
        self.health_service.add_policy("user-1", make_policy(policy_id="pol-2", policy_number="DN-001",
                                                             policy_type=PolicyType.DENTAL))
        first = self.health_repo.get_policy("pol-1")
        second = self.health_repo.get_policy("pol-2")
        first.out_of_pocket_current = 100
        second.out_of_pocket_current = 100

        with self.assertRaises(ConcurrentUpdateConflict):
            self.health_repo.commit_policy_updates([(first, 0), (second, 7)])
        self.assertEqual(self.health_repo.get_policy("pol-1").out_of_pocket_current, 0)
        self.assertEqual(self.health_repo.get_policy("pol-1").version, 0)

    def test_delete_profile_cascades(self):
        self.create_profile_with_policy()
        self.health_service.add_condition("user-1", MedicalCondition(
            id="c1", profile_id="", name="Asthma", category=ConditionCategory.CHRONIC, severity=Severity.MILD,
        ))
        self.health_service.record_medical_expense("user-1", make_medical_expense())

        self.health_service.delete_profile("user-1")

        with self.assertRaises(ProfileNotFound):
            self.health_service.get_profile("user-1")
        self.assertEqual(self.health_repo.get_conditions("prof-1"), [])
        self.assertEqual(self.health_repo.get_medical_expenses("prof-1"), [])
        self.assertEqual(self.health_repo.get_active_policies("prof-1"), [])
        with self.assertRaises(PolicyNotFound):
            self.health_repo.get_policy("pol-1")
        with self.assertRaises(ProfileNotFound):
            self.health_service.delete_profile("user-1")

    def test_gaps_and_recommendations(self):
        self.create_profile_with_policy()
        gaps = self.health_service.get_coverage_gaps("user-1", on=AS_OF)
        self.assertEqual(sorted(g.type for g in gaps), ["missing_dental_coverage", "missing_vision_coverage"])
        self.assertEqual(self.health_service.get_policy_recommendations("user-1"), [])
        self.assertEqual(self.health_service.get_cost_reduction_opportunities("user-1"), [])


class TestAssessmentService(ServiceTestCase):

    def test_without_health_profile(self):
        assessment = self.assessment_service.assess("user-1", as_of=AS_OF)
        self.assertIsNone(assessment.health_summary)
        self.assertEqual(assessment.priority_adjustment, 1.0)
        self.assertAlmostEqual(assessment.max_affordable_amount, 12366.515)
        self.assertIsNone(assessment.to_dict()["health_summary"])

    def test_with_health_profile(self):
        self.create_profile_with_policy()
        assessment = self.assessment_service.assess("user-1", as_of=AS_OF)

        score = assessment.health_summary.health_risk_score
        self.assertEqual(score, 13)
        self.assertAlmostEqual(assessment.priority_adjustment, 1 + score / 100)
        self.assertAlmostEqual(assessment.max_affordable_amount, 12366.515 * 1.13)
        self.assertAlmostEqual(assessment.health_summary.recommended_emergency_fund, 6 * 3200 * 1.13)


if __name__ == "__main__":
    unittest.main()

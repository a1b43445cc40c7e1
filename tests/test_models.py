"""
Tests for record validation and construction from plain dictionaries.
"""

import unittest
from datetime import date, timedelta

from assessment_engine.errors import (
    InvalidFinanceData,
    InvalidHealthData,
    MissingFinanceField,
    MissingHealthField,
    UnrecognizedFrequency,
)
from assessment_engine.models import (
    Expense,
    ExpenseCategory,
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
from assessment_engine.models.parsing import parse_amount, parse_bool, parse_date


class TestParsing(unittest.TestCase):

    def test_parse_date(self):
        self.assertEqual(parse_date("2025-03-01"), date(2025, 3, 1))
        self.assertEqual(parse_date("2025-03-01T10:15:00Z"), date(2025, 3, 1))
        self.assertEqual(parse_date(date(2025, 3, 1)), date(2025, 3, 1))
        self.assertIsNone(parse_date(""))
        self.assertIsNone(parse_date(None))
        with self.assertRaises(ValueError):
            parse_date("not a date")

    def test_parse_bool(self):
        self.assertTrue(parse_bool("yes"))
        self.assertFalse(parse_bool("false"))
        self.assertTrue(parse_bool(None, default=True))

    def test_parse_amount(self):
        self.assertEqual(parse_amount("12.5"), 12.5)
        self.assertEqual(parse_amount(None), 0.0)
        with self.assertRaises(ValueError):
            parse_amount("twelve")


class TestFinanceRecords(unittest.TestCase):

    def test_income_from_dict(self):
        income = Income.from_dict({"user_id": "u1", "source": "Salary", "amount": "3000",
                                   "frequency": "Bi-Weekly"})
        self.assertEqual(income.frequency, Frequency.BIWEEKLY)
        self.assertEqual(income.amount, 3000.0)
        self.assertTrue(income.is_active)
        self.assertTrue(income.is_recurring)
        income.validate()

    def test_income_validation(self):
        income = Income(id="i1", user_id="", source="", amount=0, frequency=Frequency.MONTHLY)
        with self.assertRaises(InvalidFinanceData) as ctx:
            income.validate()
        message = str(ctx.exception)
        self.assertIn("user ID is required", message)
        self.assertIn("amount must be greater than 0", message)

    def test_income_unknown_frequency(self):
        with self.assertRaises(UnrecognizedFrequency):
            Income.from_dict({"source": "Salary", "amount": 100, "frequency": "hourly"})

    def test_income_missing_amount(self):
        with self.assertRaises(InvalidFinanceData) as ctx:
            Income.from_dict({"source": "Salary"})
        self.assertIsInstance(ctx.exception, KeyError)
        self.assertEqual(str(ctx.exception), "income record is missing required field 'amount'")

    def test_loan_missing_payment(self):
        with self.assertRaises(MissingFinanceField):
            Loan.from_dict({"lender": "Bank", "principal": 1000})

    def test_income_bad_amount(self):
        with self.assertRaises(InvalidFinanceData):
            Income.from_dict({"source": "Salary", "amount": "lots"})

    def test_expense_from_dict(self):
        expense = Expense.from_dict({"user_id": "u1", "category": "Food", "name": "Groceries",
                                     "amount": 120, "frequency": "weekly", "priority": 1})
        self.assertEqual(expense.category, ExpenseCategory.FOOD)
        self.assertTrue(expense.is_essential)

    def test_expense_invalid_category(self):
        with self.assertRaises(InvalidFinanceData):
            Expense.from_dict({"category": "yachts", "name": "Boat", "amount": 100})

    def test_expense_priority_validation(self):
        expense = Expense(id="e1", user_id="u1", category=ExpenseCategory.OTHER, name="Misc",
                          amount=10, frequency=Frequency.MONTHLY, priority=5)
        with self.assertRaises(InvalidFinanceData):
            expense.validate()

    def test_loan_from_dict(self):
        loan = Loan.from_dict({"user_id": "u1", "lender": "Bank", "type": "auto",
                               "principal_amount": 30000, "monthly_payment": 500, "interest_rate": 4.5})
        self.assertEqual(loan.loan_type, LoanType.AUTO)
        self.assertEqual(loan.remaining_balance, 30000)
        loan.validate()

    def test_loan_validation(self):
        loan = Loan(id="l1", user_id="u1", lender="Bank", loan_type=LoanType.PERSONAL,
                    principal=1000, remaining_balance=2000, monthly_payment=100, interest_rate=150)
        with self.assertRaises(InvalidFinanceData) as ctx:
            loan.validate()
        self.assertIn("remaining balance cannot exceed principal amount", str(ctx.exception))
        self.assertIn("interest rate must be between 0 and 100", str(ctx.exception))


class TestHealthRecords(unittest.TestCase):

    def test_profile_from_dict(self):
        profile = HealthProfile.from_dict({"user_id": "u1", "age": 40, "gender": "Female",
                                           "height": 165, "weight": 60, "family_size": 3})
        self.assertEqual(profile.gender, "female")
        self.assertEqual(profile.bmi_category, "normal")
        profile.validate()

    def test_profile_validation(self):
        profile = HealthProfile(id="p1", user_id="u1", age=200, gender="unknown",
                                height_cm=350, weight_kg=0, family_size=0)
        with self.assertRaises(InvalidHealthData) as ctx:
            profile.validate()
        message = str(ctx.exception)
        self.assertIn("age must be between 0 and 150", message)
        self.assertIn("gender must be male, female, or other", message)
        self.assertIn("height must be between 0 and 300 cm", message)

    def test_profile_missing_age(self):
        with self.assertRaises(InvalidHealthData):
            HealthProfile.from_dict({"height_cm": 170, "weight_kg": 70})

    def test_condition_from_dict(self):
        condition = MedicalCondition.from_dict({"profile_id": "p1", "name": "Asthma",
                                                "severity": "Moderate", "monthly_med_cost": 40})
        self.assertEqual(condition.severity, Severity.MODERATE)
        self.assertAlmostEqual(condition.annual_med_cost, 480)
        condition.validate()

    def test_condition_risk_factor_range(self):
        condition = MedicalCondition.from_dict({"profile_id": "p1", "name": "Asthma",
                                                "severity": "mild", "risk_factor": 1.5})
        with self.assertRaises(InvalidHealthData):
            condition.validate()

    def test_medical_expense_from_dict(self):
        expense = MedicalExpense.from_dict({"profile_id": "p1", "amount": 250, "category": "lab_test",
                                            "insurance_payment": 50, "date": "2025-02-01"})
        self.assertEqual(expense.expense_date, date(2025, 2, 1))
        self.assertEqual(expense.frequency, Frequency.ONE_TIME)
        self.assertAlmostEqual(expense.out_of_pocket, 200)
        self.assertAlmostEqual(expense.coverage_ratio, 0.2)

        recurring = MedicalExpense.from_dict({"profile_id": "p1", "amount": 80, "category": "medication",
                                              "is_recurring": True})
        self.assertEqual(recurring.frequency, Frequency.MONTHLY)

    def test_medical_expense_validation(self):
        future = MedicalExpense(id="m1", profile_id="p1", amount=100,
                                category=MedicalExpenseCategory.HOSPITAL,
                                insurance_payment=150, expense_date=date.today() + timedelta(days=3))
        with self.assertRaises(InvalidHealthData) as ctx:
            future.validate()
        self.assertIn("expense date cannot be in the future", str(ctx.exception))
        self.assertIn("insurance payment cannot exceed the expense amount", str(ctx.exception))

    def test_policy_from_dict(self):
        policy = InsurancePolicy.from_dict({
            "profile_id": "p1", "provider": "Acme", "policy_number": "HP-1", "type": "Comprehensive",
            "monthly_premium": 250, "deductible": 1000, "out_of_pocket_max": 4000,
            "coverage_percentage": 80, "start_date": "2024-01-01", "end_date": "2024-12-31",
        })
        self.assertEqual(policy.policy_type, PolicyType.COMPREHENSIVE)
        self.assertTrue(policy.is_in_force(date(2024, 12, 31)))
        self.assertFalse(policy.is_in_force(date(2025, 1, 1)))
        self.assertFalse(policy.is_in_force(date(2023, 12, 31)))
        self.assertEqual(policy.annual_premium, 3000)
        policy.validate()

    def test_policy_requires_start_date(self):
        with self.assertRaises(MissingHealthField):
            InsurancePolicy.from_dict({"provider": "Acme", "policy_number": "HP-1"})

    def test_policy_validation(self):
        policy = InsurancePolicy(id="x", profile_id="p1", provider="Acme", policy_number="HP-1",
                                 policy_type=PolicyType.HEALTH, monthly_premium=100, deductible=6000,
                                 out_of_pocket_max=5000, coverage_percentage=120,
                                 start_date=date(2025, 1, 1), end_date=date(2024, 1, 1))
        with self.assertRaises(InvalidHealthData) as ctx:
            policy.validate()
        message = str(ctx.exception)
        self.assertIn("deductible cannot exceed out-of-pocket max", message)
        self.assertIn("coverage percentage must be between 0 and 100", message)
        self.assertIn("end date cannot be before start date", message)


if __name__ == "__main__":
    unittest.main()

"""
Tests for budget status, spending insights, 50/30/20 savings guidance and
expense optimizations.
"""

import unittest

from assessment_engine.config import FINANCE_CONFIG, merge_config
from assessment_engine.finance.aggregator import FinanceAggregator
from assessment_engine.finance.budget_analyzer import BudgetAnalyzer
from assessment_engine.models.enums import ExpenseCategory, Frequency
from assessment_engine.models.finance import Expense, Income


def make_expense(expense_id, category, amount, is_fixed=False, frequency=Frequency.MONTHLY):
    return Expense(id=expense_id, user_id="user-1", category=category, name=category.value.title(),
                   amount=amount, frequency=frequency, is_fixed=is_fixed)


class TestBudgetAnalyzer(unittest.TestCase):

    def setUp(self):
        self.analyzer = BudgetAnalyzer()
        self.aggregator = FinanceAggregator()
        self.incomes = [Income(id="inc-1", user_id="user-1", source="Salary", amount=5000,
                               frequency=Frequency.MONTHLY)]
        self.expenses = [
            make_expense("exp-1", ExpenseCategory.HOUSING, 1800, is_fixed=True),
            make_expense("exp-2", ExpenseCategory.ENTERTAINMENT, 400),
            make_expense("exp-3", ExpenseCategory.FOOD, 500),
        ]
        self.summary = self.aggregator.calculate_summary(self.incomes, self.expenses, [])

    def test_surplus_with_overspending_categories(self):
        analysis = self.analyzer.analyze_budget(self.summary, self.expenses)

        self.assertEqual(analysis.budget_status, "Surplus")
        self.assertEqual(analysis.overspending_amount, 0)
        self.assertEqual([o.category for o in analysis.overspending_categories], ["housing", "entertainment"])
        self.assertAlmostEqual(analysis.overspending_categories[0].overspend_amount, 300)
        self.assertAlmostEqual(analysis.overspending_categories[1].recommended_max, 250)
        self.assertIn("Allocate surplus to savings and investments", analysis.recommended_actions)

    def test_deficit(self):
        expenses = [make_expense("exp-1", ExpenseCategory.HOUSING, 5500, is_fixed=True)]
        summary = self.aggregator.calculate_summary(self.incomes, expenses, [])
        analysis = self.analyzer.analyze_budget(summary, expenses)

        self.assertEqual(analysis.budget_status, "Deficit")
        self.assertAlmostEqual(analysis.overspending_amount, 500)
        self.assertEqual(analysis.budget_health_score, 6)
        self.assertTrue(analysis.recommended_actions[1].startswith("Focus on reducing housing"))

    def test_spending_insights(self):
        insights = self.analyzer.get_spending_insights(self.summary, self.expenses)

        self.assertAlmostEqual(insights.total_monthly_spending, 2700)
        self.assertEqual(insights.highest_category.category, "housing")
        self.assertEqual(insights.lowest_category.category, "entertainment")
        self.assertAlmostEqual(insights.category_breakdown[0].percentage_of_income, 36)
        self.assertAlmostEqual(insights.variable_vs_fixed_ratio, 0.5)
        self.assertEqual(insights.spending_efficiency, "Moderate")

    def test_custom_savings_levels_follow_the_summary(self):
        expenses = [
            make_expense("exp-1", ExpenseCategory.HOUSING, 1800, is_fixed=True),
            make_expense("exp-2", ExpenseCategory.FOOD, 500),
        ]
        config = merge_config(FINANCE_CONFIG, {"savings_levels": {"excellent": 0.70, "good": 0.60}})

        default_summary = self.aggregator.calculate_summary(self.incomes, expenses, [])
        custom_summary = FinanceAggregator(config).calculate_summary(self.incomes, expenses, [])

        self.assertEqual(default_summary.savings_level, "Excellent")
        self.assertEqual(custom_summary.savings_level, "Fair")
        self.assertEqual(self.analyzer.get_spending_insights(default_summary, expenses).spending_efficiency,
                         "Efficient")
        self.assertEqual(self.analyzer.get_spending_insights(custom_summary, expenses).spending_efficiency,
                         "Moderate")

    def test_insights_without_expenses(self):
        summary = self.aggregator.calculate_summary(self.incomes, [], [])
        insights = self.analyzer.get_spending_insights(summary, [])
        self.assertIsNone(insights.highest_category)
        self.assertEqual(insights.category_breakdown, [])

    def test_recommend_savings_meeting_target(self):
        recommendation = self.analyzer.recommend_savings(self.summary, self.expenses)

        self.assertAlmostEqual(recommendation.target_allocation.savings, 1000)
        self.assertAlmostEqual(recommendation.current_allocation.needs, 1800)
        self.assertAlmostEqual(recommendation.current_allocation.wants, 900)
        self.assertAlmostEqual(recommendation.current_allocation.savings, 2300)
        self.assertAlmostEqual(recommendation.savings_gap, -1300)
        self.assertEqual(recommendation.achievability_score, 10)

    def test_recommend_savings_with_gap(self):
        expenses = [
            make_expense("exp-1", ExpenseCategory.HOUSING, 2600, is_fixed=True),
            make_expense("exp-2", ExpenseCategory.OTHER, 2000),
        ]
        summary = self.aggregator.calculate_summary(self.incomes, expenses, [])
        recommendation = self.analyzer.recommend_savings(summary, expenses)

        self.assertAlmostEqual(recommendation.savings_gap, 600)
        self.assertEqual(len(recommendation.recommended_actions), 3)
        self.assertLess(recommendation.achievability_score, 10)

    def test_identify_unnecessary_expenses(self):
        optimizations = self.analyzer.identify_unnecessary_expenses(self.expenses)

        self.assertEqual([o.category for o in optimizations], ["entertainment", "food"])
        self.assertAlmostEqual(optimizations[0].potential_savings, 100)
        self.assertAlmostEqual(optimizations[0].recommended_amount, 300)
        self.assertAlmostEqual(optimizations[1].potential_savings, 50)

    def test_small_expenses_not_optimized(self):
        expenses = [
            make_expense("exp-1", ExpenseCategory.ENTERTAINMENT, 4),
            make_expense("exp-2", ExpenseCategory.FOOD, 300),
        ]
        self.assertEqual(self.analyzer.identify_unnecessary_expenses(expenses), [])


if __name__ == "__main__":
    unittest.main()

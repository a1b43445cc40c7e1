"""
Debt Calculator.
Payoff projections, avalanche and snowball repayment strategies, interest
savings from extra payments and an overall debt analysis.
"""

import calendar
import logging
import math
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from datetime import date

from ..config.engine_config import DEBT_CONFIG
from ..models.finance import Loan
from .aggregator import FinanceSummary

# Initialize logger for this module
logger = logging.getLogger(__name__)


@dataclass
class LoanPaymentPlan:
    """Payoff projection for a single loan."""
    loan_id: str
    lender: str
    current_balance: float
    interest_rate: float
    minimum_payment: float
    recommended_payment: float
    payoff_order: int
    months_to_payoff: int
    total_interest: float


@dataclass
class PaymentStrategy:
    strategy_type: str  # Avalanche, Snowball, No Debt
    extra_payment_amount: float = 0.0
    prioritized_loans: List[LoanPaymentPlan] = field(default_factory=list)
    total_interest_saved: float = 0.0
    months_saved: int = 0
    monthly_payment_plan: float = 0.0
    months_to_debt_free: int = 0
    recommended_reason: str = ""


@dataclass
class InterestSavings:
    extra_payment_amount: float = 0.0
    current_total_interest: float = 0.0
    new_total_interest: float = 0.0
    interest_saved: float = 0.0
    months_saved: int = 0
    current_months_to_payoff: int = 0
    new_months_to_payoff: int = 0
    break_even_months: int = 0
    recommended_extra_payment: float = 0.0


@dataclass
class DebtAnalysis:
    """Portfolio-level view of a user's loans."""
    total_debt: float = 0.0
    total_monthly_payments: float = 0.0
    weighted_average_rate: float = 0.0
    highest_rate_loan: Optional[Loan] = None
    lowest_rate_loan: Optional[Loan] = None
    largest_balance_loan: Optional[Loan] = None
    smallest_balance_loan: Optional[Loan] = None
    debt_to_income_ratio: float = 0.0  # percent
    months_to_payoff: int = 0
    total_interest_remaining: float = 0.0
    debt_health_status: str = "Excellent"
    recommendations: List[str] = field(default_factory=list)
    payoff_projections: List[LoanPaymentPlan] = field(default_factory=list)


def _interest_saved(before: float, after: float) -> float:
    # Unpayable in both projections leaves nothing to compare
    if math.isinf(before) and math.isinf(after):
        return 0.0
    return before - after


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class DebtCalculator:
    """Loan payoff and repayment strategy calculations."""

    def __init__(self, config: Optional[Dict] = None):
        self.debt_config = config or DEBT_CONFIG
        self.unpayable_months = self.debt_config["unpayable_months"]

    def calculate_total_debt(self, loans: List[Loan]) -> float:
        return sum(loan.remaining_balance for loan in loans)

    def payoff_months(self, balance: float, interest_rate: float, payment: float) -> int:
        """
        Months to repay a balance at a fixed monthly payment.

        Returns the configured unpayable sentinel (999) when the payment never
        covers the monthly interest.
        """
        if payment <= 0 or balance <= 0:
            return 0

        monthly_rate = interest_rate / 12 / 100
        if monthly_rate <= 0:
            return math.ceil(balance / payment)

        if payment <= balance * monthly_rate:
            return self.unpayable_months

        months = -math.log(1 - balance * monthly_rate / payment) / math.log(1 + monthly_rate)
        return math.ceil(months)

    def total_interest(self, balance: float, interest_rate: float, payment: float) -> float:
        """
        Interest paid over the life of a balance at a fixed monthly payment.

        Returns math.inf when the payment never covers the monthly interest.
        """
        if payment <= 0 or balance <= 0:
            return 0.0
        months = self.payoff_months(balance, interest_rate, payment)
        if months >= self.unpayable_months:
            return math.inf
        return max(0.0, months * payment - balance)

    def calculate_minimum_payment(self, principal: float, interest_rate: float, term_months: int) -> float:
        """Level monthly payment that amortizes principal over term_months."""
        if principal <= 0 or term_months <= 0:
            return 0.0
        if interest_rate <= 0:
            return principal / term_months

        monthly_rate = interest_rate / 12 / 100
        factor = (1 + monthly_rate) ** term_months
        return principal * (monthly_rate * factor) / (factor - 1)

    def project_debt_free_months(self, loans: List[Loan]) -> int:
        """Months until the last loan is repaid at current payments."""
        if not loans:
            return 0

        max_months = 0
        for loan in loans:
            months = self.payoff_months(loan.remaining_balance, loan.interest_rate, loan.monthly_payment)
            max_months = max(max_months, months)

        if max_months == 0:
            return self.debt_config["default_payoff_months"]
        return max_months

    def project_debt_free_date(self, loans: List[Loan], as_of: Optional[date] = None) -> date:
        as_of = as_of or date.today()
        if not loans:
            return as_of
        return add_months(as_of, self.project_debt_free_months(loans))

    def suggest_payment_strategy(self, loans: List[Loan], extra_payment: float = 0.0) -> PaymentStrategy:
        """
        Compare avalanche (highest rate first) with snowball (smallest balance first).

        Avalanche is recommended only when it beats snowball by a meaningful
        amount of interest or time.
        """
        if not loans:
            return PaymentStrategy(strategy_type="No Debt")

        avalanche = self._strategy(
            "Avalanche", sorted(loans, key=lambda l: l.interest_rate, reverse=True), loans, extra_payment
        )
        snowball = self._strategy(
            "Snowball", sorted(loans, key=lambda l: l.remaining_balance), loans, extra_payment
        )

        interest_difference = _interest_saved(avalanche.total_interest_saved, snowball.total_interest_saved)
        time_difference = avalanche.months_saved - snowball.months_saved

        if (interest_difference > self.debt_config["avalanche_min_interest_advantage"]
                or time_difference > self.debt_config["avalanche_min_months_advantage"]):
            chosen = avalanche
            chosen.recommended_reason = (
                f"Avalanche method saves {interest_difference:.2f} in interest and "
                f"{time_difference} months compared to snowball"
            )
        else:
            chosen = snowball
            chosen.recommended_reason = (
                "Snowball method provides psychological benefits with similar financial outcomes"
            )

        chosen.extra_payment_amount = extra_payment
        logger.debug(f"Recommended {chosen.strategy_type} strategy for {len(loans)} loans")
        return chosen

    def calculate_interest_savings(self, loans: List[Loan], extra_payment: float) -> InterestSavings:
        """Interest and time saved by spreading an extra monthly payment across loans."""
        current_interest, current_months = self._interest_and_time(loans, 0.0)
        new_interest, new_months = self._interest_and_time(loans, extra_payment)

        interest_saved = _interest_saved(current_interest, new_interest)
        break_even = 0
        if extra_payment > 0 and math.isfinite(interest_saved):
            break_even = math.ceil(interest_saved / extra_payment)
        total_minimum = sum(loan.monthly_payment for loan in loans)

        return InterestSavings(
            extra_payment_amount=extra_payment,
            current_total_interest=current_interest,
            new_total_interest=new_interest,
            interest_saved=interest_saved,
            months_saved=current_months - new_months,
            current_months_to_payoff=current_months,
            new_months_to_payoff=new_months,
            break_even_months=break_even,
            recommended_extra_payment=total_minimum * self.debt_config["recommended_extra_payment_rate"],
        )

    def get_debt_analysis(self, loans: List[Loan], summary: FinanceSummary) -> DebtAnalysis:
        """
        Analyze a loan portfolio against the user's finance summary.

        Args:
            loans: Loans to analyze
            summary: Finance summary for the same user

        Returns:
            DebtAnalysis with health status and recommendations
        """
        if not loans:
            return DebtAnalysis(recommendations=["You have no debt"])

        total_debt = self.calculate_total_debt(loans)
        total_payments = sum(loan.monthly_payment for loan in loans)
        weighted_rate = 0.0
        if total_debt > 0:
            weighted_rate = sum(l.interest_rate * l.remaining_balance for l in loans) / total_debt

        total_interest, total_months = self._interest_and_time(loans, 0.0)

        projections = [
            self._plan(loan, loan.monthly_payment, order)
            for order, loan in enumerate(loans, start=1)
        ]

        status = self._debt_health_status(
            summary.debt_to_income_ratio, weighted_rate, total_debt, summary.monthly_income
        )

        return DebtAnalysis(
            total_debt=total_debt,
            total_monthly_payments=total_payments,
            weighted_average_rate=weighted_rate,
            highest_rate_loan=max(loans, key=lambda l: l.interest_rate),
            lowest_rate_loan=min(loans, key=lambda l: l.interest_rate),
            largest_balance_loan=max(loans, key=lambda l: l.remaining_balance),
            smallest_balance_loan=min(loans, key=lambda l: l.remaining_balance),
            debt_to_income_ratio=summary.debt_to_income_ratio * 100,
            months_to_payoff=total_months,
            total_interest_remaining=total_interest,
            debt_health_status=status,
            recommendations=self._recommendations(status, summary, weighted_rate, loans),
            payoff_projections=projections,
        )

    def _plan(self, loan: Loan, payment: float, order: int) -> LoanPaymentPlan:
        return LoanPaymentPlan(
            loan_id=loan.id,
            lender=loan.lender,
            current_balance=loan.remaining_balance,
            interest_rate=loan.interest_rate,
            minimum_payment=loan.monthly_payment,
            recommended_payment=payment,
            payoff_order=order,
            months_to_payoff=self.payoff_months(loan.remaining_balance, loan.interest_rate, payment),
            total_interest=self.total_interest(loan.remaining_balance, loan.interest_rate, payment),
        )

    def _strategy(
        self,
        name: str,
        ordered: List[Loan],
        loans: List[Loan],
        extra_payment: float,
    ) -> PaymentStrategy:
        # The first loan in order receives the whole extra payment
        plans = []
        for order, loan in enumerate(ordered, start=1):
            payment = loan.monthly_payment + (extra_payment if order == 1 else 0.0)
            plans.append(self._plan(loan, payment, order))

        strategy_interest = sum(plan.total_interest for plan in plans)
        strategy_months = max(plan.months_to_payoff for plan in plans)
        base_interest, base_months = self._interest_and_time(loans, 0.0)

        return PaymentStrategy(
            strategy_type=name,
            prioritized_loans=plans,
            total_interest_saved=_interest_saved(base_interest, strategy_interest),
            months_saved=base_months - strategy_months,
            monthly_payment_plan=sum(loan.monthly_payment for loan in loans) + extra_payment,
            months_to_debt_free=strategy_months,
        )

    def _interest_and_time(self, loans: List[Loan], extra_payment: float) -> Tuple[float, int]:
        """Total interest and longest payoff with extra payment split by balance share."""
        total_balance = self.calculate_total_debt(loans)
        total_interest = 0.0
        max_months = 0

        for loan in loans:
            payment = loan.monthly_payment
            if extra_payment > 0 and total_balance > 0:
                payment += extra_payment * loan.remaining_balance / total_balance
            total_interest += self.total_interest(loan.remaining_balance, loan.interest_rate, payment)
            max_months = max(max_months, self.payoff_months(loan.remaining_balance, loan.interest_rate, payment))

        return total_interest, max_months

    def _debt_health_status(self, dti: float, avg_rate: float, total_debt: float, monthly_income: float) -> str:
        rules = self.debt_config["health_rules"]

        if dti > rules["poor_min_dti"] or avg_rate > rules["poor_min_avg_rate"]:
            return "Poor"
        if monthly_income > 0 and total_debt > monthly_income * rules["poor_debt_income_multiple"]:
            return "Poor"
        if dti > rules["fair_min_dti"] or avg_rate > rules["fair_min_avg_rate"]:
            return "Fair"
        if dti > rules["good_min_dti"] or avg_rate > rules["good_min_avg_rate"]:
            return "Good"
        return "Excellent"

    def _recommendations(
        self,
        status: str,
        summary: FinanceSummary,
        avg_rate: float,
        loans: List[Loan],
    ) -> List[str]:
        rules = self.debt_config["health_rules"]
        dti = summary.debt_to_income_ratio
        recommendations = []

        if status == "Poor":
            recommendations.append("Your debt levels are concerning, immediate action required")
            if dti > rules["poor_min_dti"]:
                recommendations.append(
                    "Your debt-to-income ratio exceeds 50%, focus on debt reduction before new purchases"
                )
            if avg_rate > self.debt_config["consolidation_min_avg_rate"]:
                recommendations.append("Consider debt consolidation to reduce high interest rates")
            recommendations.append("Avoid taking on any new debt")
        elif status == "Fair":
            recommendations.append("Your debt is manageable but needs attention")
            if dti > rules["fair_min_dti"]:
                recommendations.append("Work to reduce your debt-to-income ratio below 36%")
            recommendations.append("Make extra payments when possible to reduce interest")
        elif status == "Good":
            recommendations.append("Your debt levels are reasonable")
            recommendations.append("Consider making extra payments to save on interest")
        else:
            recommendations.append("Excellent debt management")

        if len(loans) > 1:
            highest_rate = max(loan.interest_rate for loan in loans)
            if highest_rate > avg_rate * self.debt_config["avalanche_rate_ratio"]:
                recommendations.append("Focus extra payments on the highest interest rate debt first")
            else:
                recommendations.append("Consider paying the smallest balances first to build momentum")

        if summary.disposable_income > self.debt_config["extra_payment_min_disposable"]:
            extra = summary.disposable_income * self.debt_config["extra_payment_disposable_share"]
            recommendations.append(f"Consider an extra {extra:.2f} monthly payment to accelerate debt payoff")

        return recommendations

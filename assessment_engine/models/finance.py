"""
Financial record models: incomes, expenses and loans.
"""

import math
from typing import Dict, List, Optional
from dataclasses import dataclass
from datetime import date

from ..config.engine_config import DEBT_CONFIG
from ..errors import InvalidFinanceData, MissingFinanceField, UnrecognizedFrequency
from .enums import Frequency, ExpenseCategory, LoanType
from .parsing import parse_amount, parse_bool, parse_date


def _raise_if_errors(errors: List[str]) -> None:
    if errors:
        raise InvalidFinanceData(f"validation failed: {'; '.join(errors)}")


@dataclass
class Income:
    """A recurring or one-time income source."""
    id: str
    user_id: str
    source: str
    amount: float
    frequency: Frequency
    is_active: bool = True

    def validate(self) -> None:
        """Check record invariants, raising InvalidFinanceData on failure."""
        errors = []
        if not self.user_id:
            errors.append("user ID is required")
        if not self.source:
            errors.append("source is required")
        if self.amount <= 0:
            errors.append("amount must be greater than 0")
        if not isinstance(self.frequency, Frequency):
            errors.append(f"unknown frequency: {self.frequency!r}")
        _raise_if_errors(errors)

    @property
    def is_recurring(self) -> bool:
        return self.frequency != Frequency.ONE_TIME

    @classmethod
    def from_dict(cls, data: Dict) -> "Income":
        try:
            return cls(
                id=str(data.get("id", "")),
                user_id=str(data.get("user_id", "")),
                source=data.get("source", ""),
                amount=parse_amount(data["amount"]),
                frequency=Frequency.parse(data.get("frequency", "monthly")),
                is_active=parse_bool(data.get("is_active"), default=True),
            )
        except UnrecognizedFrequency:
            raise
        except KeyError as e:
            raise MissingFinanceField(f"income record is missing required field {e}") from e
        except ValueError as e:
            raise InvalidFinanceData(f"invalid income record: {e}") from e


@dataclass
class Expense:
    """A household expense."""
    id: str
    user_id: str
    category: ExpenseCategory
    name: str
    amount: float
    frequency: Frequency
    is_fixed: bool = False
    priority: int = 2  # 1 essential, 2 important, 3 nice-to-have

    def validate(self) -> None:
        errors = []
        if not self.user_id:
            errors.append("user ID is required")
        if not self.name:
            errors.append("name is required")
        if not isinstance(self.category, ExpenseCategory):
            errors.append(f"unknown category: {self.category!r}")
        if self.amount <= 0:
            errors.append("amount must be greater than 0")
        if not isinstance(self.frequency, Frequency):
            errors.append(f"unknown frequency: {self.frequency!r}")
        if self.priority not in (1, 2, 3):
            errors.append("priority must be between 1 and 3")
        _raise_if_errors(errors)

    @property
    def is_essential(self) -> bool:
        return self.priority == 1

    @classmethod
    def from_dict(cls, data: Dict) -> "Expense":
        try:
            return cls(
                id=str(data.get("id", "")),
                user_id=str(data.get("user_id", "")),
                category=ExpenseCategory(str(data.get("category", "other")).lower()),
                name=data.get("name", ""),
                amount=parse_amount(data["amount"]),
                frequency=Frequency.parse(data.get("frequency", "monthly")),
                is_fixed=parse_bool(data.get("is_fixed")),
                priority=int(data.get("priority", 2)),
            )
        except UnrecognizedFrequency:
            raise
        except KeyError as e:
            raise MissingFinanceField(f"expense record is missing required field {e}") from e
        except ValueError as e:
            raise InvalidFinanceData(f"invalid expense record: {e}") from e


@dataclass
class Loan:
    """An outstanding loan. Monthly payment is already a monthly figure."""
    id: str
    user_id: str
    lender: str
    loan_type: LoanType
    principal: float
    remaining_balance: float
    monthly_payment: float
    interest_rate: float  # annual, percent
    end_date: Optional[date] = None

    def validate(self) -> None:
        errors = []
        if not self.user_id:
            errors.append("user ID is required")
        if not self.lender:
            errors.append("lender is required")
        if not isinstance(self.loan_type, LoanType):
            errors.append(f"unknown loan type: {self.loan_type!r}")
        if self.principal <= 0:
            errors.append("principal amount must be greater than 0")
        if self.remaining_balance < 0:
            errors.append("remaining balance cannot be negative")
        if self.monthly_payment <= 0:
            errors.append("monthly payment must be greater than 0")
        if self.interest_rate < 0 or self.interest_rate > 100:
            errors.append("interest rate must be between 0 and 100")
        if self.remaining_balance > self.principal:
            errors.append("remaining balance cannot exceed principal amount")
        _raise_if_errors(errors)

    @property
    def progress_percentage(self) -> float:
        """Share of the principal already repaid, in percent."""
        if self.principal <= 0:
            return 0.0
        return (self.principal - self.remaining_balance) / self.principal * 100

    @property
    def is_high_interest(self) -> bool:
        thresholds = DEBT_CONFIG["high_interest_thresholds"]
        return self.interest_rate > thresholds.get(self.loan_type.value, thresholds["personal"])

    def months_remaining(self) -> int:
        """
        Months until payoff at the current monthly payment.

        Uses the amortization formula n = -log(1 - B*r/M) / log(1 + r).

        Raises:
            InvalidFinanceData: If the payment does not cover monthly interest
        """
        if self.remaining_balance <= 0:
            return 0
        monthly_rate = self.interest_rate / 100.0 / 12.0
        if monthly_rate == 0:
            return math.ceil(self.remaining_balance / self.monthly_payment)

        if self.monthly_payment <= self.remaining_balance * monthly_rate:
            raise InvalidFinanceData(
                f"monthly payment for loan {self.id} is insufficient to cover interest charges"
            )
        months = -math.log(1 - self.remaining_balance * monthly_rate / self.monthly_payment) / math.log(1 + monthly_rate)
        return math.ceil(months)

    def total_interest(self) -> float:
        """Interest still to be paid over the life of the loan."""
        months = self.months_remaining()
        if months == 0:
            return 0.0
        return max(0.0, months * self.monthly_payment - self.remaining_balance)

    @property
    def is_near_payoff(self) -> bool:
        try:
            months = self.months_remaining()
        except InvalidFinanceData:
            return False
        return 0 < months <= DEBT_CONFIG["near_payoff_months"]

    @classmethod
    def from_dict(cls, data: Dict) -> "Loan":
        try:
            principal = parse_amount(data.get("principal", data.get("principal_amount")))
            return cls(
                id=str(data.get("id", "")),
                user_id=str(data.get("user_id", "")),
                lender=data.get("lender", ""),
                loan_type=LoanType(str(data.get("type", data.get("loan_type", "personal"))).lower()),
                principal=principal,
                remaining_balance=parse_amount(data.get("remaining_balance"), default=principal),
                monthly_payment=parse_amount(data["monthly_payment"]),
                interest_rate=parse_amount(data.get("interest_rate")),
                end_date=parse_date(data.get("end_date")),
            )
        except KeyError as e:
            raise MissingFinanceField(f"loan record is missing required field {e}") from e
        except ValueError as e:
            raise InvalidFinanceData(f"invalid loan record: {e}") from e

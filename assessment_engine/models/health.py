"""
Health record models: profile, medical conditions, medical expenses and
insurance policies.
"""

from typing import Dict, List, Optional
from dataclasses import dataclass
from datetime import date

from ..errors import InvalidHealthData, MissingHealthField, UnrecognizedFrequency
from .enums import (
    ConditionCategory,
    Frequency,
    MedicalExpenseCategory,
    PolicyType,
    Severity,
)
from .parsing import parse_amount, parse_bool, parse_date


def _raise_if_errors(errors: List[str]) -> None:
    if errors:
        raise InvalidHealthData(f"validation failed: {'; '.join(errors)}")


@dataclass
class HealthProfile:
    """Per-user health profile. One profile per user."""
    id: str
    user_id: str
    age: int
    gender: str
    height_cm: float
    weight_kg: float
    family_size: int = 1

    @property
    def bmi(self) -> float:
        """Body mass index, weight(kg) / height(m)^2."""
        if self.height_cm <= 0:
            raise InvalidHealthData("height must be greater than 0 to calculate BMI")
        height_m = self.height_cm / 100.0
        return self.weight_kg / (height_m * height_m)

    @property
    def bmi_category(self) -> str:
        bmi = self.bmi
        if bmi < 18.5:
            return "underweight"
        if bmi < 25:
            return "normal"
        if bmi < 30:
            return "overweight"
        return "obese"

    def validate(self) -> None:
        errors = []
        if not self.user_id:
            errors.append("user ID is required")
        if self.age < 0 or self.age > 150:
            errors.append("age must be between 0 and 150")
        if self.gender not in ("male", "female", "other"):
            errors.append("gender must be male, female, or other")
        if self.height_cm <= 0 or self.height_cm > 300:
            errors.append("height must be between 0 and 300 cm")
        if self.weight_kg <= 0 or self.weight_kg > 500:
            errors.append("weight must be between 0 and 500 kg")
        if self.family_size < 1:
            errors.append("family size must be at least 1")
        _raise_if_errors(errors)

    @classmethod
    def from_dict(cls, data: Dict) -> "HealthProfile":
        try:
            return cls(
                id=str(data.get("id", "")),
                user_id=str(data.get("user_id", "")),
                age=int(data["age"]),
                gender=str(data.get("gender", "other")).lower(),
                height_cm=parse_amount(data.get("height_cm", data.get("height"))),
                weight_kg=parse_amount(data.get("weight_kg", data.get("weight"))),
                family_size=int(data.get("family_size", 1)),
            )
        except KeyError as e:
            raise MissingHealthField(f"health profile is missing required field {e}") from e
        except ValueError as e:
            raise InvalidHealthData(f"invalid health profile: {e}") from e


@dataclass
class MedicalCondition:
    """A diagnosed condition belonging to a health profile."""
    id: str
    profile_id: str
    name: str
    category: ConditionCategory
    severity: Severity
    is_active: bool = True
    requires_medication: bool = False
    monthly_med_cost: float = 0.0
    risk_factor: float = 0.0

    def validate(self) -> None:
        errors = []
        if not self.profile_id:
            errors.append("profile ID is required")
        if not self.name:
            errors.append("condition name is required")
        if not isinstance(self.category, ConditionCategory):
            errors.append(f"unknown category: {self.category!r}")
        if not isinstance(self.severity, Severity):
            errors.append(f"unknown severity: {self.severity!r}")
        if self.monthly_med_cost < 0:
            errors.append("monthly medication cost cannot be negative")
        if self.risk_factor < 0 or self.risk_factor > 1:
            errors.append("risk factor must be between 0 and 1")
        _raise_if_errors(errors)

    @property
    def annual_med_cost(self) -> float:
        return self.monthly_med_cost * 12

    @classmethod
    def from_dict(cls, data: Dict) -> "MedicalCondition":
        try:
            return cls(
                id=str(data.get("id", "")),
                profile_id=str(data.get("profile_id", "")),
                name=data.get("name", ""),
                category=ConditionCategory(str(data.get("category", "chronic")).lower()),
                severity=Severity(str(data["severity"]).lower()),
                is_active=parse_bool(data.get("is_active"), default=True),
                requires_medication=parse_bool(data.get("requires_medication")),
                monthly_med_cost=parse_amount(data.get("monthly_med_cost")),
                risk_factor=parse_amount(data.get("risk_factor")),
            )
        except KeyError as e:
            raise MissingHealthField(f"medical condition is missing required field {e}") from e
        except ValueError as e:
            raise InvalidHealthData(f"invalid medical condition: {e}") from e


@dataclass
class MedicalExpense:
    """A medical bill, either one-off or recurring."""
    id: str
    profile_id: str
    amount: float
    category: MedicalExpenseCategory
    description: str = ""
    is_recurring: bool = False
    frequency: Frequency = Frequency.ONE_TIME
    is_covered: bool = False
    insurance_payment: float = 0.0
    expense_date: Optional[date] = None

    @property
    def out_of_pocket(self) -> float:
        return self.amount - self.insurance_payment

    @property
    def coverage_ratio(self) -> float:
        """Share of the amount paid by insurance, 0 to 1."""
        if self.amount == 0:
            return 0.0
        return self.insurance_payment / self.amount

    def validate(self, today: Optional[date] = None) -> None:
        today = today or date.today()
        errors = []
        if not self.profile_id:
            errors.append("profile ID is required")
        if self.amount < 0:
            errors.append("amount cannot be negative")
        if not isinstance(self.category, MedicalExpenseCategory):
            errors.append(f"unknown category: {self.category!r}")
        if not isinstance(self.frequency, Frequency):
            errors.append(f"unknown frequency: {self.frequency!r}")
        if self.insurance_payment < 0:
            errors.append("insurance payment cannot be negative")
        if self.insurance_payment > self.amount:
            errors.append("insurance payment cannot exceed the expense amount")
        if self.expense_date is not None and self.expense_date > today:
            errors.append("expense date cannot be in the future")
        _raise_if_errors(errors)

    @classmethod
    def from_dict(cls, data: Dict) -> "MedicalExpense":
        try:
            is_recurring = parse_bool(data.get("is_recurring"))
            frequency = Frequency.parse(data.get("frequency", "monthly" if is_recurring else "one-time"))
            return cls(
                id=str(data.get("id", "")),
                profile_id=str(data.get("profile_id", "")),
                amount=parse_amount(data["amount"]),
                category=MedicalExpenseCategory(str(data.get("category", "doctor_visit")).lower()),
                description=data.get("description", ""),
                is_recurring=is_recurring,
                frequency=frequency,
                is_covered=parse_bool(data.get("is_covered")),
                insurance_payment=parse_amount(data.get("insurance_payment")),
                expense_date=parse_date(data.get("date", data.get("expense_date"))),
            )
        except UnrecognizedFrequency:
            raise
        except KeyError as e:
            raise MissingHealthField(f"medical expense is missing required field {e}") from e
        except ValueError as e:
            raise InvalidHealthData(f"invalid medical expense: {e}") from e


@dataclass
class InsurancePolicy:
    """
    An insurance policy with running deductible and out-of-pocket counters.

    The counters are the only mutable state the engine touches. Coverage
    calculations return an updated copy with version incremented; callers
    persist it with a version check.
    """
    id: str
    profile_id: str
    provider: str
    policy_number: str
    policy_type: PolicyType
    monthly_premium: float
    deductible: float
    out_of_pocket_max: float
    coverage_percentage: float
    start_date: date
    end_date: Optional[date] = None
    deductible_met: float = 0.0
    out_of_pocket_current: float = 0.0
    is_active: bool = True
    is_primary: bool = False
    version: int = 0

    def is_in_force(self, on: Optional[date] = None) -> bool:
        """True when the policy is active and `on` falls within its date range."""
        on = on or date.today()
        if not self.is_active:
            return False
        if on < self.start_date:
            return False
        return self.end_date is None or on <= self.end_date

    @property
    def remaining_deductible(self) -> float:
        return max(0.0, self.deductible - self.deductible_met)

    @property
    def remaining_out_of_pocket(self) -> float:
        return max(0.0, self.out_of_pocket_max - self.out_of_pocket_current)

    @property
    def annual_premium(self) -> float:
        return self.monthly_premium * 12

    def validate(self) -> None:
        errors = []
        if not self.profile_id:
            errors.append("profile ID is required")
        if not self.provider:
            errors.append("provider is required")
        if not self.policy_number:
            errors.append("policy number is required")
        if not isinstance(self.policy_type, PolicyType):
            errors.append(f"unknown policy type: {self.policy_type!r}")
        if self.monthly_premium < 0:
            errors.append("monthly premium cannot be negative")
        if self.deductible < 0:
            errors.append("deductible cannot be negative")
        if self.deductible_met < 0 or self.deductible_met > self.deductible:
            errors.append("deductible met must be between 0 and the deductible")
        if self.out_of_pocket_max < 0:
            errors.append("out-of-pocket max cannot be negative")
        if self.out_of_pocket_current < 0 or self.out_of_pocket_current > self.out_of_pocket_max:
            errors.append("out-of-pocket current must be between 0 and the out-of-pocket max")
        if self.deductible > self.out_of_pocket_max:
            errors.append("deductible cannot exceed out-of-pocket max")
        if self.coverage_percentage < 0 or self.coverage_percentage > 100:
            errors.append("coverage percentage must be between 0 and 100")
        if self.end_date is not None and self.end_date < self.start_date:
            errors.append("end date cannot be before start date")
        _raise_if_errors(errors)

    @classmethod
    def from_dict(cls, data: Dict) -> "InsurancePolicy":
        try:
            return cls(
                id=str(data.get("id", "")),
                profile_id=str(data.get("profile_id", "")),
                provider=data.get("provider", ""),
                policy_number=str(data.get("policy_number", "")),
                policy_type=PolicyType(str(data.get("type", data.get("policy_type", "health"))).lower()),
                monthly_premium=parse_amount(data.get("monthly_premium")),
                deductible=parse_amount(data.get("deductible")),
                out_of_pocket_max=parse_amount(data.get("out_of_pocket_max")),
                coverage_percentage=parse_amount(data.get("coverage_percentage")),
                start_date=parse_date(data["start_date"]),
                end_date=parse_date(data.get("end_date")),
                deductible_met=parse_amount(data.get("deductible_met")),
                out_of_pocket_current=parse_amount(data.get("out_of_pocket_current")),
                is_active=parse_bool(data.get("is_active"), default=True),
                is_primary=parse_bool(data.get("is_primary")),
                version=int(data.get("version", 0)),
            )
        except KeyError as e:
            raise MissingHealthField(f"insurance policy is missing required field {e}") from e
        except ValueError as e:
            raise InvalidHealthData(f"invalid insurance policy: {e}") from e

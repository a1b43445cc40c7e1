"""
Enumerations shared by the record models and calculators.
"""

from enum import Enum
from typing import Union

from ..config.engine_config import FREQUENCY_CONFIG
from ..errors import UnrecognizedFrequency


class Frequency(Enum):
    """Cadence at which an amount recurs."""
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"
    ONE_TIME = "one-time"

    @classmethod
    def parse(cls, value: Union["Frequency", str]) -> "Frequency":
        """
        Resolve a Frequency from an enum member or a string.

        Accepts the alias spellings listed in FREQUENCY_CONFIG.

        Raises:
            UnrecognizedFrequency: If the value is not a known cadence
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise UnrecognizedFrequency(value)

        key = value.strip().lower()
        key = FREQUENCY_CONFIG["aliases"].get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnrecognizedFrequency(value) from None


class FinancialHealth(Enum):
    """Financial health tiers."""
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


class ExpenseCategory(Enum):
    HOUSING = "housing"
    FOOD = "food"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"
    INSURANCE = "insurance"
    HEALTHCARE = "healthcare"
    OTHER = "other"


class LoanType(Enum):
    MORTGAGE = "mortgage"
    AUTO = "auto"
    PERSONAL = "personal"
    STUDENT = "student"


class Severity(Enum):
    """Medical condition severity."""
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    CRITICAL = "critical"


class ConditionCategory(Enum):
    CHRONIC = "chronic"
    ACUTE = "acute"
    MENTAL_HEALTH = "mental_health"
    PREVENTIVE = "preventive"


class MedicalExpenseCategory(Enum):
    DOCTOR_VISIT = "doctor_visit"
    MEDICATION = "medication"
    HOSPITAL = "hospital"
    LAB_TEST = "lab_test"
    THERAPY = "therapy"
    EQUIPMENT = "equipment"


class PolicyType(Enum):
    HEALTH = "health"
    DENTAL = "dental"
    VISION = "vision"
    COMPREHENSIVE = "comprehensive"


class RiskLevel(Enum):
    """Health risk level classifications."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class Vulnerability(Enum):
    """Financial vulnerability to health costs."""
    SECURE = "secure"
    MODERATE = "moderate"
    VULNERABLE = "vulnerable"
    CRITICAL = "critical"

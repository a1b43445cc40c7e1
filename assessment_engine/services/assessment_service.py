"""
Combined assessment: finance summary, optional health summary and the
health-adjusted purchase affordability for one user.
"""

import logging
from typing import Dict, Optional
from dataclasses import dataclass
from datetime import date

from ..errors import ProfileNotFound
from ..finance.affordability import get_max_affordable_amount
from ..finance.aggregator import FinanceSummary
from ..health.summary import HealthSummary
from .finance_service import FinanceService
from .health_service import HealthService

# Initialize logger for this module
logger = logging.getLogger(__name__)


@dataclass
class Assessment:
    finance_summary: FinanceSummary
    health_summary: Optional[HealthSummary]
    priority_adjustment: float
    max_affordable_amount: float

    def to_dict(self) -> Dict:
        return {
            "finance_summary": self.finance_summary.to_dict(),
            "health_summary": self.health_summary.to_dict() if self.health_summary else None,
            "priority_adjustment": self.priority_adjustment,
            "max_affordable_amount": self.max_affordable_amount,
        }


class AssessmentService:
    """Runs finance and health assessment for a user."""

    def __init__(self, finance_service: FinanceService, health_service: HealthService):
        self.finance_service = finance_service
        self.health_service = health_service

    def assess(self, user_id: str, as_of: Optional[date] = None) -> Assessment:
        """
        Assess a user. Without a health profile the priority adjustment is 1.0.
        """
        finance_summary = self.finance_service.calculate_finance_summary(user_id)

        try:
            health_summary = self.health_service.calculate_health_summary(
                user_id,
                monthly_income=finance_summary.monthly_income,
                monthly_expenses=finance_summary.monthly_expenses,
                as_of=as_of,
            )
        except ProfileNotFound:
            logger.info(f"No health profile for user {user_id}, using default priority adjustment")
            health_summary = None

        priority_adjustment = health_summary.priority_adjustment if health_summary else 1.0

        return Assessment(
            finance_summary=finance_summary,
            health_summary=health_summary,
            priority_adjustment=priority_adjustment,
            max_affordable_amount=get_max_affordable_amount(finance_summary, priority_adjustment),
        )

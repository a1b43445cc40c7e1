"""Repositories and services that feed records to the calculators."""

from .repositories import InMemoryFinanceRepository, InMemoryHealthRepository
from .finance_service import FinanceService
from .health_service import HealthService, RecordedExpense
from .assessment_service import AssessmentService, Assessment

__all__ = [
    'InMemoryFinanceRepository',
    'InMemoryHealthRepository',
    'FinanceService',
    'HealthService',
    'RecordedExpense',
    'AssessmentService',
    'Assessment',
]

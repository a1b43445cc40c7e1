"""
Health calculators: risk scoring, medical cost analysis, insurance coverage
and the health summary.
"""

from .risk_scorer import (
    HealthRiskScorer,
    RiskScoreBreakdown,
    calculate_health_risk_score,
    estimate_risk_factor,
)
from .medical_costs import MedicalCostAnalyzer, CostReductionOpportunity
from .insurance import (
    InsuranceEvaluator,
    PolicyOrder,
    CoverageResult,
    MultiPolicyCoverage,
    CoverageGap,
    PolicyRecommendation,
    apply_insurance_coverage,
    apply_coverage_to_policies,
)
from .summary import (
    HealthSummary,
    HealthSummaryComposer,
    assess_financial_vulnerability,
    calculate_health_summary,
)

__all__ = [
    'HealthRiskScorer',
    'RiskScoreBreakdown',
    'calculate_health_risk_score',
    'estimate_risk_factor',
    'MedicalCostAnalyzer',
    'CostReductionOpportunity',
    'InsuranceEvaluator',
    'PolicyOrder',
    'CoverageResult',
    'MultiPolicyCoverage',
    'CoverageGap',
    'PolicyRecommendation',
    'apply_insurance_coverage',
    'apply_coverage_to_policies',
    'HealthSummary',
    'HealthSummaryComposer',
    'assess_financial_vulnerability',
    'calculate_health_summary',
]

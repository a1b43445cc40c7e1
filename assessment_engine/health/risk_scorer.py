"""
Health Risk Scorer.
Additive point model over age, BMI, active condition severities and family
size, producing a 0-100 score and a risk level.
"""

import logging
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from ..config.engine_config import HEALTH_CONFIG
from ..models.enums import RiskLevel, Severity
from ..models.health import HealthProfile, MedicalCondition

# Initialize logger for this module
logger = logging.getLogger(__name__)


@dataclass
class RiskScoreBreakdown:
    """Capped sub-scores making up a health risk score."""
    age_points: int = 0
    bmi_points: int = 0
    condition_points: int = 0
    family_size_points: int = 0
    total_score: int = 0
    risk_level: RiskLevel = RiskLevel.LOW
    condition_details: List[str] = field(default_factory=list)


class HealthRiskScorer:
    """Scores health risk from a profile and its conditions."""

    def __init__(self, config: Optional[Dict] = None):
        self.health_config = config or HEALTH_CONFIG
        self.caps = self.health_config["sub_score_caps"]
        self.max_score = self.health_config["max_score"]

    def score(self, profile: HealthProfile, conditions: List[MedicalCondition]) -> RiskScoreBreakdown:
        """
        Calculate the full risk score breakdown.

        Args:
            profile: Health profile (age, height, weight, family size)
            conditions: Medical conditions; inactive ones score 0

        Returns:
            RiskScoreBreakdown with total clamped to [0, max_score]
        """
        breakdown = RiskScoreBreakdown()

        breakdown.age_points = min(self._age_points(profile.age), self.caps["age"])
        breakdown.bmi_points = min(self._bmi_points(profile.bmi), self.caps["bmi"])

        condition_points = 0
        for condition in conditions:
            if not condition.is_active:
                continue
            points = self._severity_points(condition.severity)
            condition_points += points
            breakdown.condition_details.append(f"{condition.name} ({condition.severity.value}): +{points}")
        breakdown.condition_points = min(condition_points, self.caps["conditions"])

        breakdown.family_size_points = min(
            self._family_size_points(profile.family_size), self.caps["family_size"]
        )

        total = (
            breakdown.age_points
            + breakdown.bmi_points
            + breakdown.condition_points
            + breakdown.family_size_points
        )
        breakdown.total_score = max(0, min(self.max_score, total))
        breakdown.risk_level = self.determine_risk_level(breakdown.total_score)

        logger.debug(
            f"Risk score for profile {profile.id}: age={breakdown.age_points}, bmi={breakdown.bmi_points}, "
            f"conditions={breakdown.condition_points}, family={breakdown.family_size_points}, "
            f"total={breakdown.total_score}"
        )
        return breakdown

    def determine_risk_level(self, score: int) -> RiskLevel:
        """Map a score to its level; bounds are inclusive upper limits."""
        for band in self.health_config["risk_levels"]:
            if score <= band["max_score"]:
                return RiskLevel(band["level"])
        return RiskLevel.CRITICAL

    def _age_points(self, age: int) -> int:
        for band in self.health_config["age_points"]:
            if band["max_age"] is None or age < band["max_age"]:
                return band["points"]
        return 0

    def _bmi_points(self, bmi: float) -> int:
        rules = self.health_config["bmi_points"]
        if rules["underweight_below"] <= bmi <= rules["normal_max"]:
            return rules["normal"]
        if rules["normal_max"] < bmi <= rules["overweight_max"]:
            return rules["overweight"]
        return rules["outside_range"]

    def _severity_points(self, severity: Severity) -> int:
        return self.health_config["severity_points"].get(severity.value, 0)

    def _family_size_points(self, family_size: int) -> int:
        for band in self.health_config["family_size_points"]:
            if family_size >= band["min_size"]:
                return band["points"]
        return 0


def calculate_health_risk_score(
    profile: HealthProfile,
    conditions: List[MedicalCondition],
) -> Tuple[int, RiskLevel]:
    """
    Calculate a 0-100 health risk score and its level.

    Returns:
        Tuple of (score, RiskLevel)
    """
    breakdown = HealthRiskScorer().score(profile, conditions)
    return breakdown.total_score, breakdown.risk_level


def estimate_risk_factor(severity: Severity) -> float:
    """Default per-condition risk factor for a severity when none was recorded."""
    return HEALTH_CONFIG["severity_risk_factors"].get(Severity(severity).value, 0.0)

"""
Assessment configuration.
Contains normalization factors, classification thresholds, point tables and
recommendation limits used by the finance and health calculators.
"""

# Frequency normalization (multiplier to reach a monthly equivalent)
FREQUENCY_CONFIG = {
    "monthly_factors": {
        "daily": 30,
        "weekly": 4.33,
        "biweekly": 2.17,
        "monthly": 1,
        "quarterly": 1 / 3,
        "semiannual": 1 / 6,
        "annual": 1 / 12,
        "one-time": 0,
    },
    # Spellings seen in imported records
    "aliases": {
        "bi-weekly": "biweekly",
        "semi-annually": "semiannual",
        "semiannually": "semiannual",
        "annually": "annual",
        "yearly": "annual",
        "one_time": "one-time",
        "onetime": "one-time",
    },
}

# Finance Configuration
FINANCE_CONFIG = {
    # Health tier thresholds (ratios, upper bound exclusive)
    "health_thresholds": {
        "excellent_max_dti": 0.28,
        "excellent_min_savings_rate": 0.20,
        "good_max_dti": 0.36,
        "fair_max_dti": 0.50,
    },

    # Purchase affordability multiplier of monthly disposable income, by tier
    "affordability_multipliers": {
        "Excellent": 3.5,
        "Good": 3.0,
        "Fair": 1.5,
        "Poor": 0.0,
    },

    # Savings rate levels used for descriptive labels
    "savings_levels": {
        "excellent": 0.20,
        "good": 0.15,
        "fair": 0.10,
    },

    "emergency_fund_months": 6,
}

# Health Risk Configuration
HEALTH_CONFIG = {
    "age_points": [
        {"max_age": 30, "points": 0},
        {"max_age": 40, "points": 5},
        {"max_age": 50, "points": 10},
        {"max_age": 60, "points": 15},
        {"max_age": None, "points": 20},
    ],

    "bmi_points": {
        "underweight_below": 18.5,
        "normal_max": 25.0,
        "overweight_max": 30.0,
        "normal": 0,
        "overweight": 8,
        "outside_range": 15,
    },

    "severity_points": {
        "mild": 2,
        "moderate": 5,
        "severe": 10,
        "critical": 15,
    },

    "family_size_points": [
        {"min_size": 5, "points": 10},
        {"min_size": 3, "points": 5},
        {"min_size": 0, "points": 0},
    ],

    "sub_score_caps": {
        "age": 20,
        "bmi": 15,
        "conditions": 100,
        "family_size": 10,
    },

    "max_score": 100,

    # Inclusive upper bounds of each risk level
    "risk_levels": [
        {"max_score": 25, "level": "low"},
        {"max_score": 50, "level": "moderate"},
        {"max_score": 75, "level": "high"},
        {"max_score": 100, "level": "critical"},
    ],

    # Default per-condition risk factor when none was recorded
    "severity_risk_factors": {
        "mild": 0.1,
        "moderate": 0.25,
        "severe": 0.4,
        "critical": 0.6,
    },

    # Health cost share of income (%) -> financial vulnerability, upper bound exclusive
    "vulnerability_thresholds": [
        {"max_pct": 5, "tier": "secure"},
        {"max_pct": 10, "tier": "moderate"},
        {"max_pct": 20, "tier": "vulnerable"},
        {"max_pct": None, "tier": "critical"},
    ],

    "emergency_fund_months": 6,
}

# Medical Cost Configuration
MEDICAL_COST_CONFIG = {
    "trailing_window_days": 365,

    # Candidates for cost reduction
    "candidate_min_amount": 250.0,
    "candidate_max_coverage_ratio": 0.2,

    # Annual medication estimate when a condition has no recorded cost
    "severity_annual_estimates": {
        "mild": 1200.0,
        "moderate": 2400.0,
        "severe": 4800.0,
        "critical": 7200.0,
    },

    "opportunity_rules": {
        "generic_medication_min": 200.0,
        "generic_savings_rate": 0.40,
        "lab_bundle_min": 300.0,
        "lab_bundle_savings_rate": 0.15,
        "insurance_gap_oop_ratio": 0.80,
        "insurance_gap_savings_rate": 0.30,
        "preventive_min_total": 1000.0,
        "preventive_savings_rate": 0.20,
        "medication_share": 0.30,
        "medication_review_savings_rate": 0.25,
        "shopping_min_total": 3000.0,
        "shopping_savings_rate": 0.15,
    },

    "preventive_descriptions": ["annual checkup", "physical", "preventive"],

    "trend_rules": {
        "category_concentration_pct": 40,
        "out_of_pocket_burden_pct": 60,
        "dominance_ratio": 2,
        "medication_dependency_share": 0.40,
    },
}

# Insurance Configuration
INSURANCE_CONFIG = {
    # Policy types that pay for medical conditions
    "condition_covering_types": ["health", "comprehensive"],

    # Exposure assumed for a missing policy type
    "missing_policy_exposure": {
        "health": {"risk_level": "critical", "exposure": 50000.0},
        "dental": {"risk_level": "moderate", "exposure": 3000.0},
        "vision": {"risk_level": "low", "exposure": 1000.0},
    },

    "uncovered_condition_exposure": {
        "mild": {"risk_level": "moderate", "exposure": 2000.0},
        "moderate": {"risk_level": "moderate", "exposure": 5000.0},
        "severe": {"risk_level": "high", "exposure": 10000.0},
        "critical": {"risk_level": "critical", "exposure": 20000.0},
    },

    "high_out_of_pocket_ratio": 0.6,

    "recommendation_rules": {
        "low_deductible_utilization": 0.3,
        "high_deductible_min": 2000.0,
        "premium_savings_rate": 0.15,
        "high_deductible_utilization": 0.8,
        "reduction_deductible_min": 1000.0,
        "reduction_target_deductible": 500.0,
        "reduction_savings_rate": 0.7,
        "high_oop_utilization": 0.8,
        "supplemental_savings_rate": 0.3,
        "min_coverage_percentage": 70.0,
        "high_medication_total": 3000.0,
        "prescription_savings_rate": 0.3,
    },
}

# Budget Configuration
BUDGET_CONFIG = {
    # Recommended maximum share of monthly income per expense category
    "category_limits": {
        "housing": 0.30,
        "transport": 0.15,
        "food": 0.12,
        "utilities": 0.08,
        "insurance": 0.05,
        "entertainment": 0.05,
        "healthcare": 0.05,
        "other": 0.05,
    },

    # 50/30/20 rule
    "allocation_rule": {
        "needs": 0.50,
        "wants": 0.30,
        "savings": 0.20,
    },

    "min_optimizable_amount": 5.0,

    # category -> (reduction rate, optimization type, priority, min monthly amount)
    "optimization_rules": {
        "entertainment": {"rate": 0.25, "type": "Reduce", "priority": 3, "min_amount": 0.0,
                          "reasoning": "Entertainment expenses can often be reduced without major lifestyle changes"},
        "food": {"rate": 0.10, "type": "Reduce", "priority": 2, "min_amount": 400.0,
                 "reasoning": "Meal planning and fewer meals out lower food spending"},
        "transport": {"rate": 0.15, "type": "Substitute", "priority": 2, "min_amount": 300.0,
                      "reasoning": "Consider carpooling, public transit, or more fuel-efficient transportation"},
        "utilities": {"rate": 0.10, "type": "Reduce", "priority": 2, "min_amount": 100.0,
                      "reasoning": "Reduce utility costs through energy-efficient practices"},
        "other": {"rate": 0.30, "type": "Reduce", "priority": 4, "min_amount": 0.0,
                  "reasoning": "Non-essential purchases can be reduced by being more selective"},
    },
}

# Debt Configuration
DEBT_CONFIG = {
    # Months reported when a payment never covers the interest
    "unpayable_months": 999,

    # Interest rate (%) above which a loan of this type counts as high interest
    "high_interest_thresholds": {
        "mortgage": 6.0,
        "auto": 8.0,
        "personal": 15.0,
        "student": 7.0,
    },

    # Avalanche is recommended when it beats snowball by more than this
    "avalanche_min_interest_advantage": 500.0,
    "avalanche_min_months_advantage": 6,

    "recommended_extra_payment_rate": 0.125,
    "near_payoff_months": 12,

    # Months assumed when no payoff can be projected
    "default_payoff_months": 360,

    # Debt health status rules
    "health_rules": {
        "poor_min_dti": 0.50,
        "poor_min_avg_rate": 20.0,
        "poor_debt_income_multiple": 10,
        "fair_min_dti": 0.36,
        "fair_min_avg_rate": 10.0,
        "good_min_dti": 0.20,
        "good_min_avg_rate": 6.0,
    },

    "consolidation_min_avg_rate": 15.0,
    "avalanche_rate_ratio": 1.5,
    "extra_payment_min_disposable": 100.0,
    "extra_payment_disposable_share": 0.5,
}

"""Allowances and capped deductions.

Allowances (status based):
    Personal                      60,000
    Spouse without income         60,000
    Per child                     30,000
    Per parent (age ≥ 60, income ≤ 30,000)   30,000
    Per disabled dependent        60,000

Contributions (amount based, capped):
    Social security               ≤ 9,000
    Mortgage interest             ≤ 100,000
    Life ≤ 100,000, health ≤ 25,000, both together ≤ 100,000
    Provident fund ≤ min(15 % of salary, 500,000); PVD + RMF + pension ≤ 500,000
    Donations                     no cap

Negative amounts are clamped to zero before any cap is applied.
"""

from __future__ import annotations
import math
from taxcalc.config import settings
from taxcalc.models.schemas import (
    DeductionBreakdown,
    DeductionInputs,
    DependentInfo,
    IncomeInputs,
)


def _non_negative(value: float) -> float:
    return max(0.0, value)


def _count(value: float) -> int:
    """Whole, non-negative head count."""
    return int(math.floor(_non_negative(value)))


def parent_qualifies(parent: DependentInfo) -> bool:
    """Parent allowance applies to a present parent aged 60+ earning ≤ 30,000."""
    return (
        parent.present
        and parent.age >= settings.PARENT_MIN_AGE
        and _non_negative(parent.annualIncome) <= settings.PARENT_MAX_INCOME
    )


def calculate_life_health(life: float, health: float) -> float:
    """min(min(life, 100k) + min(health, 25k), 100k)."""
    life_deduct = min(_non_negative(life), settings.LIFE_INSURANCE_CAP)
    health_deduct = min(_non_negative(health), settings.HEALTH_INSURANCE_CAP)
    return min(life_deduct + health_deduct, settings.LIFE_HEALTH_COMBINED_CAP)


def calculate_provident_fund(contribution: float, salary: float) -> float:
    """Eligible PVD = min(contribution, 15 % of salary, 500,000)."""
    return min(
        _non_negative(contribution),
        settings.PROVIDENT_FUND_SALARY_SHARE * _non_negative(salary),
        settings.RETIREMENT_COMBINED_CAP,
    )


def calculate_retirement(
    provident_fund: float,
    retirement_fund: float,
    pension_insurance: float,
    salary: float,
) -> float:
    """Capped PVD plus uncapped RMF and pension, re-capped at 500,000."""
    combined = (
        calculate_provident_fund(provident_fund, salary)
        + _non_negative(retirement_fund)
        + _non_negative(pension_insurance)
    )
    return min(combined, settings.RETIREMENT_COMBINED_CAP)


def compute_deductions(income: IncomeInputs, ded: DeductionInputs) -> DeductionBreakdown:
    """Map income and deduction inputs to the full deduction breakdown.

    Each category is capped independently; the only cross-category
    interactions are the life+health combined cap and the retirement
    bucket (which also depends on salary).
    """
    personal = settings.PERSONAL_ALLOWANCE
    spouse = settings.SPOUSE_ALLOWANCE if ded.spouseHasNoIncome else 0.0
    children = _count(ded.numChildren) * settings.CHILD_ALLOWANCE

    parents = 0.0
    for parent in (ded.father, ded.mother):
        if parent_qualifies(parent):
            parents += settings.PARENT_ALLOWANCE

    disabled = _count(ded.numDisabledDependents) * settings.DISABLED_ALLOWANCE

    social_security = min(_non_negative(ded.socialSecurity), settings.SOCIAL_SECURITY_CAP)
    mortgage = min(_non_negative(ded.mortgageInterest), settings.MORTGAGE_INTEREST_CAP)
    life_health = calculate_life_health(ded.lifeInsurance, ded.healthInsurance)
    retirement = calculate_retirement(
        ded.providentFund,
        ded.retirementFund,
        ded.pensionInsurance,
        salary=income.salary,
    )
    donations = _non_negative(ded.donations)

    total_allowances = personal + spouse + children + parents + disabled
    total_other = social_security + mortgage + life_health + retirement + donations

    return DeductionBreakdown(
        personalAllowance=personal,
        spouseAllowance=spouse,
        childrenAllowance=children,
        parentsAllowance=parents,
        disabledAllowance=disabled,
        socialSecurityDeduct=social_security,
        mortgageDeduct=mortgage,
        lifeHealthCombined=life_health,
        retirementCombined=retirement,
        donationsDeduct=donations,
        totalAllowances=total_allowances,
        totalOther=total_other,
        totalDeductions=total_allowances + total_other,
    )

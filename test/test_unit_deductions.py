# Test type: Unit Test
# Validation to be executed: Validates allowances, per-category caps, the
#   life+health and retirement combined caps, and negative-input clamping.
# Command: pytest test/test_unit_deductions.py -v

"""Unit tests for taxcalc.services.deduction_service module."""

import pytest

from taxcalc.models.schemas import DeductionInputs, DependentInfo, IncomeInputs
from taxcalc.services.deduction_service import (
    calculate_life_health,
    calculate_provident_fund,
    calculate_retirement,
    compute_deductions,
    parent_qualifies,
)


def deduct(salary: float = 0, **fields):
    return compute_deductions(IncomeInputs(salary=salary), DeductionInputs(**fields))


class TestAllowances:

    def test_personal_only(self):
        result = deduct()
        assert result.personalAllowance == 60_000
        assert result.totalAllowances == 60_000
        assert result.totalOther == 0
        assert result.totalDeductions == 60_000

    def test_spouse_without_income(self):
        assert deduct(spouseHasNoIncome=True).spouseAllowance == 60_000
        assert deduct(spouseHasNoIncome=False).spouseAllowance == 0

    def test_children_30k_each(self):
        assert deduct(numChildren=3).childrenAllowance == 90_000

    def test_children_floored(self):
        assert deduct(numChildren=2.7).childrenAllowance == 60_000

    def test_negative_children_clamped(self):
        assert deduct(numChildren=-3).childrenAllowance == 0

    def test_disabled_60k_each(self):
        assert deduct(numDisabledDependents=2).disabledAllowance == 120_000
        assert deduct(numDisabledDependents=-1).disabledAllowance == 0


class TestParents:
    """30,000 per parent who is present, 60+ and earns ≤ 30,000."""

    def test_both_qualify(self):
        parent = {"present": True, "age": 70, "annualIncome": 0}
        assert deduct(father=parent, mother=parent).parentsAllowance == 60_000

    def test_evaluated_independently(self):
        result = deduct(
            father={"present": True, "age": 61, "annualIncome": 10_000},
            mother={"present": True, "age": 59, "annualIncome": 0},
        )
        assert result.parentsAllowance == 30_000

    def test_age_60_is_inclusive(self):
        assert parent_qualifies(DependentInfo(present=True, age=60, annualIncome=0))

    def test_income_30k_is_inclusive(self):
        assert parent_qualifies(DependentInfo(present=True, age=65, annualIncome=30_000))
        assert not parent_qualifies(DependentInfo(present=True, age=65, annualIncome=30_001))

    def test_absent_parent_never_counts(self):
        assert not parent_qualifies(DependentInfo(present=False, age=80, annualIncome=0))


class TestSimpleCaps:

    def test_social_security_cap(self):
        assert deduct(socialSecurity=5_000).socialSecurityDeduct == 5_000
        assert deduct(socialSecurity=18_000).socialSecurityDeduct == 9_000

    def test_social_security_cap_idempotent(self):
        """Doubling an amount already above the cap changes nothing."""
        once = deduct(socialSecurity=20_000).socialSecurityDeduct
        twice = deduct(socialSecurity=40_000).socialSecurityDeduct
        assert once == twice == 9_000

    def test_mortgage_cap(self):
        assert deduct(mortgageInterest=150_000).mortgageDeduct == 100_000
        assert deduct(mortgageInterest=80_000).mortgageDeduct == 80_000

    def test_donations_uncapped(self):
        assert deduct(donations=2_000_000).donationsDeduct == 2_000_000


class TestLifeHealth:

    def test_combined_cap_dominates(self):
        """100,000 life + 25,000 health → 100,000, not 125,000."""
        assert deduct(lifeInsurance=100_000, healthInsurance=25_000).lifeHealthCombined == 100_000

    def test_health_individually_capped(self):
        assert calculate_life_health(50_000, 40_000) == 75_000

    def test_life_individually_capped(self):
        assert calculate_life_health(250_000, 0) == 100_000

    def test_under_all_caps(self):
        assert calculate_life_health(20_000, 10_000) == 30_000


class TestRetirement:

    def test_provident_fund_capped_at_15_percent_of_salary(self):
        """PVD 600,000 on a 1,000,000 salary → min(600k, 150k, 500k) = 150,000."""
        assert calculate_provident_fund(600_000, 1_000_000) == 150_000
        assert deduct(salary=1_000_000, providentFund=600_000).retirementCombined == 150_000

    def test_provident_fund_absolute_cap(self):
        assert calculate_provident_fund(900_000, 10_000_000) == 500_000

    def test_combined_cap(self):
        """150,000 PVD + 400,000 RMF → capped at 500,000."""
        result = deduct(salary=1_000_000, providentFund=600_000, retirementFund=400_000)
        assert result.retirementCombined == 500_000

    def test_rmf_and_pension_not_individually_capped(self):
        assert calculate_retirement(0, 200_000, 150_000, salary=0) == 350_000

    def test_no_salary_no_provident_fund(self):
        assert calculate_retirement(10_000, 0, 0, salary=0) == 0


class TestNegativeClamping:
    """Negative normalised amounts contribute nothing."""

    @pytest.mark.parametrize("field,output", [
        ("socialSecurity", "socialSecurityDeduct"),
        ("mortgageInterest", "mortgageDeduct"),
        ("donations", "donationsDeduct"),
        ("lifeInsurance", "lifeHealthCombined"),
        ("healthInsurance", "lifeHealthCombined"),
        ("retirementFund", "retirementCombined"),
        ("pensionInsurance", "retirementCombined"),
    ])
    def test_negative_amount_clamped(self, field, output):
        result = deduct(salary=500_000, **{field: -50_000})
        assert getattr(result, output) == 0

    def test_negative_does_not_offset_other_amounts(self):
        result = deduct(lifeInsurance=40_000, healthInsurance=-30_000)
        assert result.lifeHealthCombined == 40_000

    def test_totals_never_negative(self):
        result = deduct(salary=-100, socialSecurity=-1, donations="-999")
        assert result.totalOther == 0
        assert result.totalDeductions == 60_000


class TestFullBreakdown:

    def test_family_scenario(self, sample_income, family_deductions):
        result = compute_deductions(sample_income, family_deductions)

        assert result.personalAllowance == 60_000
        assert result.spouseAllowance == 60_000
        assert result.childrenAllowance == 60_000
        assert result.parentsAllowance == 30_000
        assert result.disabledAllowance == 60_000
        assert result.totalAllowances == 270_000

        assert result.socialSecurityDeduct == 9_000
        assert result.mortgageDeduct == 100_000
        assert result.lifeHealthCombined == 100_000
        # PVD 50,000 ≤ 15 % of 400,000 → 50,000 + RMF 100,000
        assert result.retirementCombined == 150_000
        assert result.donationsDeduct == 5_000
        assert result.totalOther == 364_000

        assert result.totalDeductions == 634_000

    def test_string_inputs(self):
        income = IncomeInputs(salary="1,000,000")
        ded = DeductionInputs(providentFund="600,000 THB", socialSecurity="9,000.00")
        result = compute_deductions(income, ded)
        assert result.retirementCombined == 150_000
        assert result.socialSecurityDeduct == 9_000

"""Pydantic value objects and request / response schemas.

Every input model normalises its raw numeric fields on construction
(see ``taxcalc.utils.helpers.parse_number``), so malformed numbers degrade
to zero instead of failing validation.  All models are frozen: a changed
input is a new object and a fresh calculation.
"""

from __future__ import annotations
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from taxcalc.utils.helpers import parse_flag, parse_number, parse_upper_bound


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ── Inputs ────────────────────────────────────────────────────────────────

class IncomeInputs(FrozenModel):
    """Annual income figures."""
    salary: float = Field(0.0, description="Annual salary")
    bonus: float = Field(0.0, description="Annual bonus")
    otherIncome: float = Field(0.0, description="Any other assessable income")

    @field_validator("salary", "bonus", "otherIncome", mode="before")
    @classmethod
    def _normalise_amount(cls, value: Any) -> float:
        return parse_number(value)


class DependentInfo(FrozenModel):
    """A parent who may qualify for the parental allowance."""
    present: bool = False
    age: float = Field(0.0, description="Age in years")
    annualIncome: float = Field(0.0, description="Parent's own annual income")

    @field_validator("present", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return parse_flag(value)

    @field_validator("age", "annualIncome", mode="before")
    @classmethod
    def _normalise_number(cls, value: Any) -> float:
        return parse_number(value)


class DeductionInputs(FrozenModel):
    """Family status and contribution amounts used for deductions."""
    spouseHasNoIncome: bool = False
    numChildren: float = Field(0.0, description="Number of children")
    numDisabledDependents: float = Field(0.0, description="Number of disabled dependents")
    father: DependentInfo = Field(default_factory=DependentInfo)
    mother: DependentInfo = Field(default_factory=DependentInfo)

    providentFund: float = Field(0.0, description="Provident-fund contribution")
    retirementFund: float = Field(0.0, description="Retirement-mutual-fund contribution")
    pensionInsurance: float = Field(0.0, description="Pension-insurance premium")
    socialSecurity: float = Field(0.0, description="Social-security contribution")
    mortgageInterest: float = Field(0.0, description="Home-loan interest paid")
    lifeInsurance: float = Field(0.0, description="Life-insurance premium")
    healthInsurance: float = Field(0.0, description="Health-insurance premium")
    donations: float = Field(0.0, description="Donations")

    @field_validator("spouseHasNoIncome", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return parse_flag(value)

    @field_validator("father", "mother", mode="before")
    @classmethod
    def _absent_parent(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator(
        "numChildren",
        "numDisabledDependents",
        "providentFund",
        "retirementFund",
        "pensionInsurance",
        "socialSecurity",
        "mortgageInterest",
        "lifeInsurance",
        "healthInsurance",
        "donations",
        mode="before",
    )
    @classmethod
    def _normalise_number(cls, value: Any) -> float:
        return parse_number(value)


class TaxBracket(FrozenModel):
    """One band of a progressive schedule.

    ``upperBound`` is ``None`` for the open-ended top band; ``rate`` is a
    percentage (``5`` means 5 %).
    """
    id: int = Field(0, description="Caller-assigned stable identity")
    upperBound: Optional[float] = Field(None, description="Inclusive upper bound, null = unbounded")
    rate: float = Field(0.0, description="Marginal rate in percent")

    @field_validator("id", mode="before")
    @classmethod
    def _normalise_id(cls, value: Any) -> int:
        return int(parse_number(value))

    @field_validator("upperBound", mode="before")
    @classmethod
    def _normalise_bound(cls, value: Any) -> Optional[float]:
        return parse_upper_bound(value)

    @field_validator("rate", mode="before")
    @classmethod
    def _normalise_rate(cls, value: Any) -> float:
        return parse_number(value)

    @property
    def is_unbounded(self) -> bool:
        return self.upperBound is None


# ── Outputs ───────────────────────────────────────────────────────────────

class DeductionBreakdown(FrozenModel):
    personalAllowance: float
    spouseAllowance: float
    childrenAllowance: float
    parentsAllowance: float
    disabledAllowance: float
    socialSecurityDeduct: float
    mortgageDeduct: float
    lifeHealthCombined: float = Field(..., description="Life + health after the combined cap")
    retirementCombined: float = Field(..., description="PVD + RMF + pension after the combined cap")
    donationsDeduct: float
    totalAllowances: float
    totalOther: float
    totalDeductions: float


class BandBreakdown(FrozenModel):
    """Portion of taxable income that fell into one band."""
    lowerBound: float
    upperBound: Optional[float] = Field(None, description="null = unbounded")
    amountTaxedInBand: float
    rate: float
    taxInBand: float


class TaxComputation(FrozenModel):
    perBandBreakdown: List[BandBreakdown]
    totalTax: float


class TaxResult(FrozenModel):
    gross: float = Field(..., description="salary + bonus + otherIncome")
    taxableIncome: float = Field(..., description="max(0, gross − totalDeductions)")
    perBandBreakdown: List[BandBreakdown]
    totalTax: float
    netIncome: float = Field(..., description="gross − totalTax")
    effectiveRatePercent: float = Field(..., description="totalTax / gross × 100, 0 when gross is 0")
    deductions: DeductionBreakdown


# ── 1. Calculation endpoints  (/tax:calculate, /tax:deductions, /tax:brackets)

class CalculateRequest(BaseModel):
    income: IncomeInputs = Field(default_factory=IncomeInputs)
    deductions: DeductionInputs = Field(default_factory=DeductionInputs)
    brackets: Optional[List[TaxBracket]] = Field(
        None, description="Rate schedule; the default schedule is used when omitted",
    )


class DeductionsRequest(BaseModel):
    income: IncomeInputs = Field(default_factory=IncomeInputs)
    deductions: DeductionInputs = Field(default_factory=DeductionInputs)


class BracketTaxRequest(BaseModel):
    taxableIncome: float = Field(0.0, description="Amount to run through the schedule")
    brackets: Optional[List[TaxBracket]] = None

    @field_validator("taxableIncome", mode="before")
    @classmethod
    def _normalise_amount(cls, value: Any) -> float:
        return parse_number(value)


# ── 2. Schedule endpoints  (/schedules:*) ────────────────────────────────

class ScheduleRequest(BaseModel):
    brackets: List[TaxBracket] = Field(default_factory=list)


class ScheduleRemoveRequest(ScheduleRequest):
    id: int = Field(..., description="Identity of the band to remove")


class ScheduleUpdateRequest(ScheduleRequest):
    id: int = Field(..., description="Identity of the band to update")
    field: Literal["upperBound", "rate"]
    value: Any = Field(None, description="New value; '∞' / 'inf' / null for an unbounded upper bound")


class ScheduleResponse(BaseModel):
    brackets: List[TaxBracket]


class ScheduleValidationResponse(BaseModel):
    valid: bool
    issues: List[str]

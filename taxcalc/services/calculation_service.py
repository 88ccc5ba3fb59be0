"""Full tax pipeline: income → deductions → progressive tax → summary."""

from __future__ import annotations
import logging
from typing import Optional, Sequence

from taxcalc.models.schemas import (
    DeductionBreakdown,
    DeductionInputs,
    IncomeInputs,
    TaxBracket,
    TaxComputation,
    TaxResult,
)
from taxcalc.services.deduction_service import compute_deductions
from taxcalc.services.tax_service import compute_tax

logger = logging.getLogger(__name__)


def gross_income(income: IncomeInputs) -> float:
    return income.salary + income.bonus + income.otherIncome


def taxable_income(gross: float, deductions: DeductionBreakdown) -> float:
    """Gross minus total deductions, never below zero."""
    return max(0.0, gross - deductions.totalDeductions)


def aggregate_result(
    gross: float,
    taxable: float,
    deductions: DeductionBreakdown,
    tax: TaxComputation,
) -> TaxResult:
    """Derive net income and effective rate from the pipeline outputs."""
    effective_rate = (tax.totalTax / gross) * 100 if gross > 0 else 0.0
    return TaxResult(
        gross=gross,
        taxableIncome=taxable,
        perBandBreakdown=tax.perBandBreakdown,
        totalTax=tax.totalTax,
        netIncome=gross - tax.totalTax,
        effectiveRatePercent=effective_rate,
        deductions=deductions,
    )


def calculate_tax_result(
    income: IncomeInputs,
    deductions: DeductionInputs,
    schedule: Sequence[TaxBracket],
    policy: Optional[str] = None,
) -> TaxResult:
    """Run the whole calculation for one set of inputs.

    Raises ``ScheduleValidationError`` only when the ``reject`` policy is in
    force and *schedule* is degenerate.
    """
    gross = gross_income(income)
    breakdown = compute_deductions(income, deductions)
    taxable = taxable_income(gross, breakdown)
    tax = compute_tax(taxable, schedule, policy=policy)

    logger.debug(
        "gross=%.2f deductions=%.2f taxable=%.2f tax=%.2f bands=%d",
        gross,
        breakdown.totalDeductions,
        taxable,
        tax.totalTax,
        len(tax.perBandBreakdown),
    )
    return aggregate_result(gross, taxable, breakdown, tax)

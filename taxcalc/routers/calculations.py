"""Routers for the calculation endpoints:
    POST  /taxcalc/v1/tax:calculate
    POST  /taxcalc/v1/tax:deductions
    POST  /taxcalc/v1/tax:brackets
"""

from __future__ import annotations
import json
from fastapi import APIRouter, HTTPException

from taxcalc.database import record_audit
from taxcalc.models.db_models import CalculationAudit
from taxcalc.models.schemas import (
    BracketTaxRequest,
    CalculateRequest,
    DeductionBreakdown,
    DeductionsRequest,
    TaxComputation,
    TaxResult,
)
from taxcalc.services.calculation_service import calculate_tax_result
from taxcalc.services.deduction_service import compute_deductions
from taxcalc.services.schedule_service import default_schedule
from taxcalc.services.tax_service import compute_tax
from taxcalc.utils.helpers import round_currency

router = APIRouter(
    prefix="/taxcalc/v1",
    tags=["Calculations"],
)


def _audit_row(endpoint: str, bracket_count: int, result: TaxResult) -> CalculationAudit:
    return CalculationAudit(
        endpoint=endpoint,
        bracket_count=bracket_count,
        gross=round_currency(result.gross),
        taxable_income=round_currency(result.taxableIncome),
        total_tax=round_currency(result.totalTax),
        summary=json.dumps({
            "totalDeductions": round_currency(result.deductions.totalDeductions),
            "netIncome": round_currency(result.netIncome),
            "effectiveRatePercent": round_currency(result.effectiveRatePercent),
            "bands": len(result.perBandBreakdown),
        }),
    )


# ── 1. Full calculation ──────────────────────────────────────────────────

@router.post(
    "/tax:calculate",
    response_model=TaxResult,
    summary="Compute deductions, progressive tax, net income and effective rate",
)
async def tax_calculate(body: CalculateRequest) -> TaxResult:
    """Run the whole pipeline for one set of inputs.

    When ``brackets`` is omitted the default schedule is used.  Malformed
    numbers are normalised to zero rather than rejected.
    """
    schedule = body.brackets if body.brackets is not None else default_schedule()

    try:
        result = calculate_tax_result(body.income, body.deductions, schedule)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    await record_audit(_audit_row("/tax:calculate", len(schedule), result))
    return result


# ── 2. Deductions only ───────────────────────────────────────────────────

@router.post(
    "/tax:deductions",
    response_model=DeductionBreakdown,
    summary="Allowances and capped deductions for the given inputs",
)
async def tax_deductions(body: DeductionsRequest) -> DeductionBreakdown:
    return compute_deductions(body.income, body.deductions)


# ── 3. Progressive tax only ──────────────────────────────────────────────

@router.post(
    "/tax:brackets",
    response_model=TaxComputation,
    summary="Allocate a taxable amount across a rate schedule",
)
async def tax_brackets(body: BracketTaxRequest) -> TaxComputation:
    """Per-band breakdown and total tax for ``taxableIncome``."""
    schedule = body.brackets if body.brackets is not None else default_schedule()
    try:
        return compute_tax(body.taxableIncome, schedule)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

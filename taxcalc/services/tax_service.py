"""Progressive income-tax calculation over a caller-supplied rate schedule.

A schedule is a list of bands identified only by their upper bound; each
band's lower bound is the previous band's upper bound (0 for the first).
With the default schedule:

    0         – 120,000     → 0 %
    120,001   – 300,000     → 5 %
    300,001   – 500,000     → 10 %
    500,001   – 750,000     → 15 %
    750,001   – 1,000,000   → 20 %
    Above 1,000,000         → 25 %

Schedules are sorted defensively and never trusted to arrive in order.
Degenerate schedules are handled according to the configured policy:
``passthrough`` taxes them literally, ``reject`` raises
:class:`ScheduleValidationError`, ``repair`` cleans them first.
"""

from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from taxcalc.config import settings
from taxcalc.models.schemas import BandBreakdown, TaxBracket, TaxComputation

logger = logging.getLogger(__name__)

POLICIES = ("passthrough", "reject", "repair")


class ScheduleValidationError(ValueError):
    """Raised under the ``reject`` policy for a degenerate schedule."""

    def __init__(self, issues: List[str]):
        self.issues = issues
        super().__init__("Invalid tax bracket schedule: " + "; ".join(issues))


def sort_schedule(schedule: Sequence[TaxBracket]) -> Tuple[TaxBracket, ...]:
    """Ascending by upper bound, unbounded bands after every finite one."""
    return tuple(
        sorted(
            schedule,
            key=lambda b: (b.is_unbounded, b.upperBound or 0.0),
        )
    )


def find_schedule_issues(schedule: Sequence[TaxBracket]) -> List[str]:
    """Describe everything that makes *schedule* degenerate.

    An empty schedule is not reported: it simply taxes nothing.
    """
    if not schedule:
        return []

    issues: list[str] = []
    ordered = sort_schedule(schedule)
    finite = [b.upperBound for b in ordered if not b.is_unbounded]

    for bound in finite:
        if bound <= 0:
            issues.append(f"upper bound {bound:g} is not positive")
    duplicates = sorted({b for b in finite if finite.count(b) > 1})
    for bound in duplicates:
        issues.append(f"upper bound {bound:g} appears more than once")

    unbounded = sum(1 for b in ordered if b.is_unbounded)
    if unbounded == 0:
        issues.append("no unbounded top band; income above the highest bound is untaxed")
    elif unbounded > 1:
        issues.append(f"{unbounded} unbounded bands; only the first can ever apply")

    for b in ordered:
        if b.rate < 0:
            issues.append(f"band {b.id} has negative rate {b.rate:g}")
    return issues


def repair_schedule(schedule: Sequence[TaxBracket]) -> Tuple[TaxBracket, ...]:
    """Return a cleaned, sorted copy of *schedule*.

    Drops non-positive bounds, duplicate bounds (first band wins) and extra
    unbounded bands, floors negative rates at 0, and appends an unbounded
    band at the top rate when none is left.
    """
    repaired: list[TaxBracket] = []
    seen: set[float] = set()
    has_unbounded = False

    for bracket in sort_schedule(schedule):
        bound = bracket.upperBound
        if bracket.is_unbounded:
            if has_unbounded:
                continue
            has_unbounded = True
        elif bound <= 0 or bound in seen:
            continue
        else:
            seen.add(bound)
        if bracket.rate < 0:
            bracket = bracket.model_copy(update={"rate": 0.0})
        repaired.append(bracket)

    if repaired and not has_unbounded:
        next_id = max(b.id for b in schedule) + 1
        repaired.append(TaxBracket(id=next_id, upperBound=None, rate=repaired[-1].rate))
    return tuple(repaired)


def apply_schedule_policy(
    schedule: Sequence[TaxBracket],
    policy: Optional[str] = None,
) -> Tuple[TaxBracket, ...]:
    """Check *schedule* against the configured policy and return the one to use."""
    policy = (policy or settings.BRACKET_SCHEDULE_POLICY).lower()
    if policy not in POLICIES:
        raise ValueError(
            f"Unknown bracket schedule policy '{policy}'. Expected one of {', '.join(POLICIES)}."
        )

    issues = find_schedule_issues(schedule)
    if not issues:
        return tuple(schedule)

    if policy == "reject":
        raise ScheduleValidationError(issues)
    if policy == "repair":
        logger.info("Repairing bracket schedule: %s", "; ".join(issues))
        return repair_schedule(schedule)

    logger.warning("Using degenerate bracket schedule as given: %s", "; ".join(issues))
    return tuple(schedule)


def compute_tax(
    taxable_income: float,
    schedule: Sequence[TaxBracket],
    policy: Optional[str] = None,
) -> TaxComputation:
    """Allocate *taxable_income* across the bands of *schedule*.

    Parameters
    ----------
    taxable_income:
        Income after deductions; negative values are treated as 0.
    schedule:
        Bands in any order.
    policy:
        Overrides ``settings.BRACKET_SCHEDULE_POLICY`` for this call.

    Returns
    -------
    TaxComputation
        Itemised bands that received a positive amount, and the total tax.
    """
    return allocate_bands(taxable_income, sort_schedule(apply_schedule_policy(schedule, policy)))


def allocate_bands(taxable_income: float, ordered: Iterable[TaxBracket]) -> TaxComputation:
    """Walk already-sorted bands, stopping as soon as the income is used up.

    *ordered* is consumed lazily; bands after the one that exhausts the
    income are never read.
    """
    remaining = max(0.0, taxable_income)
    lower = 0.0
    total_tax = 0.0
    bands: list[BandBreakdown] = []

    for bracket in ordered:
        if bracket.is_unbounded:
            amount = remaining
        else:
            amount = min(remaining, max(0.0, bracket.upperBound - lower))
        tax = amount * bracket.rate / 100

        if amount > 0:
            bands.append(
                BandBreakdown(
                    lowerBound=lower,
                    upperBound=bracket.upperBound,
                    amountTaxedInBand=amount,
                    rate=bracket.rate,
                    taxInBand=tax,
                )
            )

        total_tax += tax
        remaining -= amount
        if not bracket.is_unbounded:
            lower = bracket.upperBound
        if remaining <= 0:
            break

    return TaxComputation(perBandBreakdown=bands, totalTax=total_tax)

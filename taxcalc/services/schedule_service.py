"""Default rate schedule and the edits a caller can make to a schedule.

Every operation returns a new tuple and leaves its input untouched; the
caller owns the schedule and sends it back on each calculation.
"""

from __future__ import annotations
from typing import Any, Sequence, Tuple

from taxcalc.models.schemas import TaxBracket
from taxcalc.utils.helpers import parse_number, parse_upper_bound

# (id, upper_bound, rate %); None marks the open top band
_DEFAULT_BANDS: list[tuple[int, float | None, float]] = [
    (1, 120_000.0, 0.0),
    (2, 300_000.0, 5.0),
    (3, 500_000.0, 10.0),
    (4, 750_000.0, 15.0),
    (5, 1_000_000.0, 20.0),
    (6, None, 25.0),
]

UPDATABLE_FIELDS = ("upperBound", "rate")


def default_schedule() -> Tuple[TaxBracket, ...]:
    return tuple(
        TaxBracket(id=bracket_id, upperBound=upper, rate=rate)
        for bracket_id, upper, rate in _DEFAULT_BANDS
    )


def reset_schedule() -> Tuple[TaxBracket, ...]:
    """Discard all edits and return to the default schedule."""
    return default_schedule()


def add_bracket(schedule: Sequence[TaxBracket]) -> Tuple[TaxBracket, ...]:
    """Append an unbounded 0 % band with the next free id."""
    next_id = max([0, *(b.id for b in schedule)]) + 1
    return (*schedule, TaxBracket(id=next_id, upperBound=None, rate=0.0))


def remove_bracket(schedule: Sequence[TaxBracket], bracket_id: int) -> Tuple[TaxBracket, ...]:
    """Drop the band(s) with *bracket_id*; an unknown id changes nothing."""
    return tuple(b for b in schedule if b.id != bracket_id)


def update_bracket(
    schedule: Sequence[TaxBracket],
    bracket_id: int,
    field: str,
    value: Any,
) -> Tuple[TaxBracket, ...]:
    """Set ``upperBound`` or ``rate`` on the band with *bracket_id*.

    ``upperBound`` accepts the unbounded tokens (``∞``, ``inf``, ``None`` …)
    as well as numbers; both fields are normalised like any other raw input.
    Raises ``ValueError`` for any other field name.
    """
    if field == "upperBound":
        parsed = parse_upper_bound(value)
    elif field == "rate":
        parsed = parse_number(value)
    else:
        raise ValueError(
            f"Cannot update field '{field}'. Expected one of {', '.join(UPDATABLE_FIELDS)}."
        )

    return tuple(
        b.model_copy(update={field: parsed}) if b.id == bracket_id else b
        for b in schedule
    )

"""Personal deduction lookup table (OUG 16/2022).

The table has 41 income bands. The first band covers 1 lei up to the
minimum wage, every following band is 50 lei wide. Each dependents tier
starts from its own base percentage and loses 0.5 percentage points per
band, floored at 0.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from salarizare.domain.entities import DeductionTableRow

FIRST_ROW_NUMBER = 4
BAND_COUNT = 41
BAND_WIDTH = 50
TABLE_MIN_WAGE = 4050
BASE_INCOME = 1

# Base percentage for 0, 1, 2, 3 and 4+ dependents.
BASE_PERCENTAGES = (
    Decimal("20.0"),
    Decimal("25.0"),
    Decimal("30.0"),
    Decimal("35.0"),
    Decimal("45.0"),
)
STEP = Decimal("0.5")


@lru_cache(maxsize=1)
def generate_deduction_table() -> tuple[DeductionTableRow, ...]:
    """Generate the deduction lookup table.

    Returns:
        Tuple of table rows, ordered by income band
    """
    rows = []
    for i in range(BAND_COUNT):
        income_from = BASE_INCOME if i == 0 else TABLE_MIN_WAGE + (i - 1) * BAND_WIDTH + 1
        income_to = TABLE_MIN_WAGE + i * BAND_WIDTH
        percentages = tuple(max(Decimal(0), base - i * STEP) for base in BASE_PERCENTAGES)
        rows.append(
            DeductionTableRow(
                row=FIRST_ROW_NUMBER + i,
                income_from=income_from,
                income_to=income_to,
                percentages=percentages,
            )
        )
    return tuple(rows)


def lookup_deduction_percentage(income: Decimal | int, num_dependents: int) -> Optional[Decimal]:
    """Look up the personal deduction percentage.

    Args:
        income: Monthly income used for the deduction (gross plus meal tickets)
        num_dependents: Number of dependents; 4 or more share one tier

    Returns:
        Percentage (e.g. Decimal("19.5")), or None when the income falls
        outside every band or the percentage has decayed to zero
    """
    income = Decimal(str(income))
    row = next(
        (r for r in generate_deduction_table() if r.income_from <= income <= r.income_to),
        None,
    )
    if row is None:
        return None

    tier = min(max(num_dependents, 0), len(BASE_PERCENTAGES) - 1)
    percentage = row.percentages[tier]
    return percentage if percentage > 0 else None

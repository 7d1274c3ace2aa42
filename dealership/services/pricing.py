"""
Pure money helpers shared by the payment, debt and sales workflows.
Nothing here touches the database.
"""
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Protocol, Tuple

from dealership.core.dates import parse_date
from dealership.core.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TERM_MONTHS = 12

_INT_RE = re.compile(r"^[+-]?\d+$")

SKIP_QUANTITY_MISSING = "quantity missing"
SKIP_QUANTITY_INVALID = "quantity is not an integer"
SKIP_QUANTITY_NOT_POSITIVE = "quantity is not positive"
SKIP_PRICE_INVALID = "unit price is not positive"


class PromotionLike(Protocol):
    id: int
    description: str
    start_date: Optional[str]
    end_date: Optional[str]
    discount_rate: Optional[str]


@dataclass(frozen=True)
class LineAmount:
    """Amount of one order line, or the reason the line does not count."""
    amount: float = 0.0
    skip_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.skip_reason is None


@dataclass(frozen=True)
class AppliedPromotion:
    promo_id: int
    description: str
    percent: float
    total_after: float


def parse_quantity(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    text = str(raw).strip()
    if not _INT_RE.match(text):
        return None
    return int(text)


def line_amount(quantity: Optional[str], unit_price: Optional[float]) -> LineAmount:
    """quantity * unit_price for a line that may legitimately be counted."""
    if quantity is None or not str(quantity).strip():
        return LineAmount(skip_reason=SKIP_QUANTITY_MISSING)
    qty = parse_quantity(quantity)
    if qty is None:
        return LineAmount(skip_reason=SKIP_QUANTITY_INVALID)
    if qty <= 0:
        return LineAmount(skip_reason=SKIP_QUANTITY_NOT_POSITIVE)
    if unit_price is None or unit_price <= 0:
        return LineAmount(skip_reason=SKIP_PRICE_INVALID)
    return LineAmount(amount=qty * unit_price)


def strict_total(lines: Iterable[Tuple[Optional[str], Optional[float]]]) -> Optional[float]:
    """
    Sum of quantity * unit_price over every line.
    Returns None as soon as one quantity is not an integer: no partial totals.
    """
    total = 0.0
    for quantity, unit_price in lines:
        qty = parse_quantity(quantity)
        if qty is None:
            return None
        total += qty * (unit_price or 0.0)
    return total


def discount_percent(raw: Optional[str]) -> Optional[float]:
    """
    Stored rate as a percent value.
    Values strictly between 0 and 1 are fractions ("0.1" -> 10), anything else
    is already a percent ("10", "10%"). Blank or non-numeric -> None.
    """
    if raw is None:
        return None
    text = str(raw).replace("%", "").strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if 0 < value < 1:
        value = value * 100
    return value


def is_promotion_active(start_date: Optional[str], end_date: Optional[str], today: date) -> bool:
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start is None or end is None:
        return False
    return start <= today <= end


def apply_promotions(
    total: float, promotions: Iterable[PromotionLike], today: date
) -> Tuple[float, List[AppliedPromotion]]:
    """Apply every active promotion cumulatively, in promotion id order."""
    applied: List[AppliedPromotion] = []
    for promo in sorted(promotions, key=lambda p: p.id):
        if parse_date(promo.start_date) is None or parse_date(promo.end_date) is None:
            logger.warning("Promotion %s skipped: unreadable dates %r..%r", promo.id, promo.start_date, promo.end_date)
            continue
        if not is_promotion_active(promo.start_date, promo.end_date, today):
            continue
        percent = discount_percent(promo.discount_rate)
        if percent is None:
            logger.warning("Promotion %s skipped: unreadable rate %r", promo.id, promo.discount_rate)
            continue
        total = total * (1 - percent / 100.0)
        applied.append(AppliedPromotion(promo.id, promo.description, percent, total))
    return total, applied


def monthly_payment(total: float, term_months: Optional[int]) -> float:
    term = DEFAULT_TERM_MONTHS if term_months is None else term_months
    if term <= 0:
        term = 1
    return total / term

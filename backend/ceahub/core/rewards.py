# backend/ceahub/core/rewards.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable, Protocol

from ceahub.core.config import Settings
from ceahub.core.statuses import SaleStatus


class _SaleLike(Protocol):
    sale_count: int
    sale_names: str
    status: str


@dataclass(frozen=True)
class RewardPolicy:
    """
    Flat per-sale rate picked by a single volume threshold.

    The rate applies to the WHOLE batch once the threshold is reached
    (10 units -> 10 * base, 11 units -> 11 * bonus); it is not marginal.
    """

    threshold: int = 11
    base_rate: Decimal = Decimal("200")
    bonus_rate: Decimal = Decimal("400")
    currency_prefix: str = "R"

    @classmethod
    def from_settings(cls, s: Settings) -> "RewardPolicy":
        return cls(
            threshold=s.REWARD_TIER_THRESHOLD,
            base_rate=Decimal(s.REWARD_BASE_RATE),
            bonus_rate=Decimal(s.REWARD_BONUS_RATE),
            currency_prefix=s.CURRENCY_PREFIX,
        )

    def rate_for(self, total_units: int) -> Decimal:
        return self.bonus_rate if total_units >= self.threshold else self.base_rate

    def amount_for(self, total_units: int) -> Decimal:
        return (Decimal(total_units) * self.rate_for(total_units)).quantize(Decimal("1.00"))

    def format_amount(self, amount: Decimal) -> str:
        return f"{self.currency_prefix}{amount:.2f}"


def total_units(sales: Iterable[_SaleLike]) -> int:
    return sum(int(s.sale_count) for s in sales)


def describe_sales(sales: Iterable[_SaleLike]) -> str:
    # "Alice;Bob (15); Carol (2)"
    return "; ".join(f"{s.sale_names} ({s.sale_count})" for s in sales)


def period_label(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime("%B %Y")


@dataclass(frozen=True)
class SalesSummary:
    period: str
    pending_sales: int
    confirmed_sales: int
    amount_earned: str


def summarize_sales(
    sales: Iterable[_SaleLike],
    policy: RewardPolicy,
    now: datetime | None = None,
) -> SalesSummary:
    """
    Bucket sale_count by status. Only pending and confirmed are counted;
    rejected and payout_pending rows are ignored.
    """
    pending = 0
    confirmed = 0
    for s in sales:
        if s.status == SaleStatus.PENDING.value:
            pending += int(s.sale_count)
        elif s.status == SaleStatus.CONFIRMED.value:
            confirmed += int(s.sale_count)

    return SalesSummary(
        period=period_label(now),
        pending_sales=pending,
        confirmed_sales=confirmed,
        amount_earned=policy.format_amount(policy.amount_for(confirmed)),
    )

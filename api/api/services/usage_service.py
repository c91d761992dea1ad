"""Generation accounting against plan allowances.

Plan defaults::

    ai-pack:          250 generations in total, no monthly window
    studio-founding:  100 per monthly window
    studio-standard:  250 per monthly window

When a plan has a monthly window the monthly allowance is enforced and the
total allowance is informational; otherwise the total is enforced.

The counter row is read with ``SELECT ... FOR UPDATE`` so two concurrent
generations for the same user serialise on PostgreSQL.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from dateutil.relativedelta import relativedelta
from sqlalchemy.ext.asyncio import AsyncSession
from studio_core.errors import UsageLimitExceededError
from studio_core.models.enums import SubscriptionPlan
from studio_core.state.repository import UsageHistoryRepository, UserUsageRepository
from studio_core.state.tables import UserUsageTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanAllowance:
    total: int
    monthly: int | None = None


# Studio totals are the yearly equivalent of the monthly window.
PLAN_ALLOWANCES: dict[str, PlanAllowance] = {
    SubscriptionPlan.AI_PACK.value: PlanAllowance(total=250),
    SubscriptionPlan.STUDIO_FOUNDING.value: PlanAllowance(total=1_200, monthly=100),
    SubscriptionPlan.STUDIO_STANDARD.value: PlanAllowance(total=3_000, monthly=250),
}


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes.
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class UsageService:
    """Records billable generations for one user."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._usage_repo = UserUsageRepository(session)
        self._history_repo = UsageHistoryRepository(session)

    async def get_or_create_usage(self, user_id: str, plan: str, *, now: datetime | None = None) -> UserUsageTable:
        """Return the (locked) counter row, creating it from plan defaults."""
        row = await self._usage_repo.get(user_id, plan, for_update=True)
        if row is not None:
            return row

        allowance = PLAN_ALLOWANCES.get(plan)
        if allowance is None:
            raise ValueError(f"Unknown plan: {plan!r}")

        start = now or datetime.now(UTC)
        return await self._usage_repo.create(
            user_id,
            plan,
            total_generations_allowed=allowance.total,
            monthly_generations_allowed=allowance.monthly,
            current_period_start=start if allowance.monthly is not None else None,
            current_period_end=start + relativedelta(months=1) if allowance.monthly is not None else None,
        )

    @classmethod
    def roll_period(cls, row: UserUsageTable, now: datetime) -> bool:
        """Advance the monthly window until it contains *now*.

        Returns True when the window moved.  The monthly counter restarts and
        ``is_limit_reached`` is recomputed for the new window.
        """
        if row.monthly_generations_allowed is None or row.current_period_end is None:
            return False
        end = _as_utc(row.current_period_end)
        if now < end:
            return False
        start = _as_utc(row.current_period_start) if row.current_period_start else end - relativedelta(months=1)
        while end <= now:
            start, end = end, end + relativedelta(months=1)
        row.current_period_start = start
        row.current_period_end = end
        row.monthly_generations_used = 0
        used, allowed = cls._enforced(row)
        row.is_limit_reached = used >= allowed
        logger.info("Usage window rolled for user %s plan %s -> %s", row.user_id, row.plan, end.isoformat())
        return True

    @staticmethod
    def _enforced(row: UserUsageTable) -> tuple[int, int]:
        if row.monthly_generations_allowed is not None:
            return row.monthly_generations_used, row.monthly_generations_allowed
        return row.total_generations_used, row.total_generations_allowed

    async def record_generation(
        self,
        user_id: str,
        *,
        plan: str,
        cost: Decimal,
        resource_used: str,
        action_type: str = "generation",
        details: dict[str, Any] | None = None,
        generated_image_id: int | None = None,
        now: datetime | None = None,
    ) -> UserUsageTable:
        """Count one generation and append it to the usage history.

        Raises
        ------
        ValueError
            *cost* is negative or *plan* is unknown.
        UsageLimitExceededError
            The enforced allowance is already used up; nothing is written.
        """
        if cost < 0:
            raise ValueError("cost must be non-negative")

        current = now or datetime.now(UTC)
        row = await self.get_or_create_usage(user_id, plan, now=current)
        self.roll_period(row, current)

        used, allowed = self._enforced(row)
        if used >= allowed:
            logger.warning("Generation limit reached for user %s plan %s (%d/%d)", user_id, plan, used, allowed)
            raise UsageLimitExceededError(user_id, plan, used, allowed)

        row.total_generations_used += 1
        if row.monthly_generations_allowed is not None:
            row.monthly_generations_used += 1
        row.total_cost_incurred = (row.total_cost_incurred or Decimal("0")) + cost
        row.last_generation_at = current
        used, allowed = self._enforced(row)
        row.is_limit_reached = used >= allowed
        await self._session.flush()

        await self._history_repo.append(
            user_id,
            action_type=action_type,
            resource_used=resource_used,
            cost=cost,
            details=details,
            generated_image_id=generated_image_id,
        )
        return row

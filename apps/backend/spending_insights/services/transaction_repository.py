from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from spending_insights import models
from spending_insights.analytics.aggregation import TransactionRecord
from spending_insights.core.errors import StorageFailure, UserNotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerchantTotal:
    merchant: str
    merchant_category: Optional[str]
    total: float
    count: int


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float
    count: int
    average: float


class TransactionRepository:
    """Read-only access to stored transactions for the insights engine.

    Every query is scoped to one user except the global category usage list.
    SQLAlchemy errors are logged here with full detail and re-raised as
    ``StorageFailure``; no retries are attempted.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            logger.exception("storage read failed: %s", operation)
            raise StorageFailure(operation) from exc

    def get_user(self, user_id: int) -> models.User | None:
        with self._guard("load user"):
            return self.db.query(models.User).filter(models.User.id == user_id).first()

    def require_user(self, user_id: int) -> models.User:
        user = self.get_user(user_id)
        if not user:
            raise UserNotFound(user_id)
        return user

    def _category_filter(self, category: str):
        needle = category.strip().lower()
        return or_(
            func.lower(models.Transaction.category).contains(needle, autoescape=True),
            func.lower(models.Transaction.merchant_category).contains(needle, autoescape=True),
        )

    def find_transactions(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
        category: str | None = None,
    ) -> list[TransactionRecord]:
        """Transactions of ``user_id`` dated within ``[start, end]``, oldest first.

        ``category`` is a case-insensitive substring matched against either the
        transaction category or the merchant category.
        """
        with self._guard("load transactions"):
            q = self.db.query(models.Transaction).filter(
                models.Transaction.user_id == user_id,
                models.Transaction.occurred_at >= start,
                models.Transaction.occurred_at <= end,
            )
            if category:
                q = q.filter(self._category_filter(category))
            rows = q.order_by(models.Transaction.occurred_at.asc(), models.Transaction.id.asc()).all()
        logger.debug(
            "loaded %d transactions for user %s between %s and %s (category=%r)",
            len(rows),
            user_id,
            start.isoformat(),
            end.isoformat(),
            category,
        )
        return [TransactionRecord.from_model(row) for row in rows]

    def observed_categories(self) -> list[tuple[str, Optional[str], int]]:
        """Distinct (category, merchant category) pairs across all users with counts."""
        with self._guard("load categories"):
            rows = (
                self.db.query(
                    models.Transaction.category,
                    models.Transaction.merchant_category,
                    func.count(models.Transaction.id),
                )
                .group_by(models.Transaction.category, models.Transaction.merchant_category)
                .order_by(models.Transaction.category.asc())
                .all()
            )
        return [(category, merchant_category, int(count)) for category, merchant_category, count in rows]

    def top_merchants(
        self,
        user_id: int,
        start: datetime,
        end: datetime,
        *,
        limit: int,
        category: str | None = None,
    ) -> list[MerchantTotal]:
        total_col = func.sum(models.Transaction.amount).label("total")
        with self._guard("load merchants"):
            q = self.db.query(
                models.Transaction.merchant,
                models.Transaction.merchant_category,
                total_col,
                func.count(models.Transaction.id).label("count"),
            ).filter(
                models.Transaction.user_id == user_id,
                models.Transaction.occurred_at >= start,
                models.Transaction.occurred_at <= end,
            )
            if category:
                q = q.filter(self._category_filter(category))
            rows = (
                q.group_by(models.Transaction.merchant, models.Transaction.merchant_category)
                .order_by(total_col.desc(), models.Transaction.merchant.asc())
                .limit(limit)
                .all()
            )
        return [
            MerchantTotal(
                merchant=row.merchant,
                merchant_category=row.merchant_category,
                total=float(row.total or 0),
                count=int(row.count),
            )
            for row in rows
        ]

    def category_totals(
        self,
        user_id: int,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 10,
    ) -> tuple[float, list[CategoryTotal]]:
        """Top categories by spend plus the grand total over all categories."""
        total_col = func.sum(models.Transaction.amount).label("total")
        conditions = [models.Transaction.user_id == user_id]
        if start is not None:
            conditions.append(models.Transaction.occurred_at >= start)
        if end is not None:
            conditions.append(models.Transaction.occurred_at <= end)

        with self._guard("load category totals"):
            grand_total = (
                self.db.query(func.sum(models.Transaction.amount)).filter(*conditions).scalar()
            )
            rows = (
                self.db.query(
                    models.Transaction.category,
                    total_col,
                    func.count(models.Transaction.id).label("count"),
                )
                .filter(*conditions)
                .group_by(models.Transaction.category)
                .order_by(total_col.desc(), models.Transaction.category.asc())
                .limit(limit)
                .all()
            )
        items: list[CategoryTotal] = []
        for row in rows:
            total = float(row.total or 0)
            count = int(row.count)
            items.append(
                CategoryTotal(
                    category=row.category,
                    total=total,
                    count=count,
                    average=total / count if count else 0.0,
                )
            )
        return float(grand_total or 0), items

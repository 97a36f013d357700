from __future__ import annotations

from datetime import timedelta

from sqlalchemy.orm import Session

from .core.database import SessionLocal
from .models import Transaction, User, now_local_naive

DEMO_EMAIL = "demo@example.com"

# (days ago, amount, category, merchant, merchant category)
_SAMPLE_TRANSACTIONS = (
    (2, 12.50, "Food & Dining", "Blue Bottle Coffee", "Food & Dining"),
    (5, 64.30, "Food & Dining", "Whole Foods Grocery", "Food & Dining"),
    (9, 45.00, "Transportation", "Shell Gas", "Transportation"),
    (16, 15.99, "Subscriptions", "Netflix", "Entertainment"),
    (23, 120.00, "Shopping", "Target", "Shopping"),
    (38, 89.10, "Healthcare", "CVS Pharmacy", "Healthcare"),
    (44, 33.25, "Food & Dining", "Thai Basil Restaurant", "Food & Dining"),
    (71, 210.00, "Travel", "Airbnb", "Travel"),
)


def seed(db: Session | None = None, *, with_samples: bool = True) -> User:
    """Create the demo user and, optionally, a handful of recent transactions.

    Safe to run repeatedly: the user is reused and samples are only added when
    the user has no transactions yet.
    """
    owns_session = db is None
    db = db or SessionLocal()
    try:
        user = db.query(User).filter_by(email=DEMO_EMAIL).first()
        if not user:
            user = User(email=DEMO_EMAIL, name="Demo", is_active=True)
            db.add(user)
            db.flush()

        has_rows = db.query(Transaction.id).filter(Transaction.user_id == user.id).first() is not None
        if with_samples and not has_rows:
            now = now_local_naive().replace(hour=12, minute=0, second=0, microsecond=0)
            for days_ago, amount, category, merchant, merchant_category in _SAMPLE_TRANSACTIONS:
                db.add(
                    Transaction(
                        user_id=user.id,
                        occurred_at=now - timedelta(days=days_ago),
                        amount=amount,
                        category=category,
                        merchant=merchant,
                        merchant_category=merchant_category,
                        source="seed",
                    )
                )

        db.commit()
        db.refresh(user)
        return user
    except Exception:
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    seed()

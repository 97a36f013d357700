from __future__ import annotations

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from spending_insights.core.database import get_db
from spending_insights import models
from spending_insights.services.transaction_repository import TransactionRepository


def get_current_user(
    user_id: int = Query(..., ge=1, description="User key injected by the upstream auth layer"),
    db: Session = Depends(get_db),
) -> models.User:
    """Resolve the user key to a stored user.

    Authentication happens upstream; this only checks that the key refers to a
    known user. Tests may override this dependency to simulate other users.
    """
    return TransactionRepository(db).require_user(user_id)

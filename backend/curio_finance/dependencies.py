"""
FastAPI dependencies.
"""

import hmac
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from curio_finance.ai.call_log import LLMCallLog
from curio_finance.config import settings
from curio_finance.database import get_db
from curio_finance.models.user import User


def get_current_user(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the signed-in user.

    Session handling lives in front of this service, which forwards the
    authenticated user's id in ``X-User-Id``.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    user = db.query(User).filter(User.id == x_user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user


def get_llm_call_log(request: Request) -> LLMCallLog:
    return request.app.state.llm_call_log


def verify_cron_secret(authorization: Optional[str] = Header(None)) -> None:
    """Only the scheduler, holding ``CRON_SECRET``, may trigger processing."""
    expected = f"Bearer {settings.cron_secret}" if settings.cron_secret else None
    if not expected or not authorization or not hmac.compare_digest(
        authorization.encode("utf-8"), expected.encode("utf-8")
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")


def require_debug() -> None:
    if not settings.debug:
        raise HTTPException(status_code=403, detail="Not available in production")

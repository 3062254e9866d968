"""
Scheduled trigger endpoints.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from curio_finance.dependencies import get_db, verify_cron_secret
from curio_finance.schemas.recurring import CronRunResponse, ProcessingReportResponse
from curio_finance.services import recurring_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["cron"])


@router.get("/recurring", response_model=CronRunResponse, dependencies=[Depends(verify_cron_secret)])
def process_recurring_transactions(db: Session = Depends(get_db)):
    """
    Realize due recurring expenses and incomes.

    Safe to call repeatedly: each definition is only realized when its
    persisted next_process_date is due.
    """
    reports = recurring_service.process_all(db)
    return CronRunResponse(
        message="Recurring transactions processed successfully",
        expenses=ProcessingReportResponse(**reports["expenses"].to_dict()),
        incomes=ProcessingReportResponse(**reports["incomes"].to_dict()),
    )

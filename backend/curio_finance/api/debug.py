"""
Debug endpoints for the LLM call log, available only when DEBUG is on.
"""

from fastapi import APIRouter, Depends

from curio_finance.ai.call_log import LLMCallLog
from curio_finance.dependencies import get_llm_call_log, require_debug

router = APIRouter(prefix="/debug", tags=["debug"], dependencies=[Depends(require_debug)])


@router.get("/llm-logs")
def get_llm_logs(call_log: LLMCallLog = Depends(get_llm_call_log)):
    """Recorded LLM calls, oldest first."""
    return {"logs": [entry.to_dict() for entry in call_log.entries()]}


@router.delete("/llm-logs")
def clear_llm_logs(call_log: LLMCallLog = Depends(get_llm_call_log)):
    drained = call_log.drain()
    return {"message": "Logs cleared", "cleared": len(drained)}

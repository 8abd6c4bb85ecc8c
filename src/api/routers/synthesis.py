import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.dependencies import get_orchestrator, get_task_store
from api.metrics import FALLBACKS_TOTAL, LATENCY_SECONDS, REQUESTS_TOTAL, TASKS_CREATED_TOTAL
from synthesis.orchestrator import TaskSynthesisOrchestrator
from task_synthesis.errors import PersistenceFailure, SynthesisFailed
from task_synthesis.models import InputSource, RawInput

router = APIRouter()
logger = logging.getLogger(__name__)


class SynthesizeIn(BaseModel):
    text: str
    source: InputSource = "typed"
    locale: str = "he"


def _count(status: str, start: float) -> None:
    # Prometheus counters (best-effort)
    try:
        REQUESTS_TOTAL.labels(status=status).inc()
        LATENCY_SECONDS.observe(time.time() - start)
    except Exception:
        pass


@router.post("/synthesize")
async def synthesize(
    payload: SynthesizeIn,
    orchestrator: TaskSynthesisOrchestrator = Depends(get_orchestrator),
) -> dict:
    start = time.time()
    raw = RawInput(text=payload.text, source=payload.source, locale=payload.locale)

    try:
        result = await orchestrator.synthesize(raw)
    except SynthesisFailed as e:
        _count("rejected", start)
        raise HTTPException(status_code=422, detail=e.reason)
    except PersistenceFailure as e:
        logger.error(f"Task store failure after {len(e.created)} write(s): {e}")
        _count("persistence_failure", start)
        raise HTTPException(
            status_code=502,
            detail={
                "error": e.kind.value,
                "message": e.message,
                "created": [r.model_dump(mode="json") for r in e.created],
            },
        )

    _count("degraded" if result.degraded else "ok", start)
    try:
        TASKS_CREATED_TOTAL.inc(result.total_tasks_created)
        for analysis in result.degraded:
            FALLBACKS_TOTAL.labels(analysis=analysis).inc()
    except Exception:
        pass

    return {
        **result.model_dump(mode="json"),
        "total_tasks_created": result.total_tasks_created,
        "is_high_confidence": result.is_high_confidence,
    }


@router.get("/tasks")
async def list_tasks(store=Depends(get_task_store)) -> dict:
    tasks = [t.model_dump(mode="json") for t in store.list()]
    return {"tasks": tasks, "total": len(tasks)}

from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api.dependencies import get_gateway
from llm.gateway import LanguageModelGateway

router = APIRouter()


@router.get("/health")
async def health_check(gateway: LanguageModelGateway = Depends(get_gateway)) -> dict:
    """Health check endpoint for container orchestration."""
    providers = gateway.provider_names
    return {
        # without providers every request still succeeds, on fallbacks only
        "status": "healthy" if providers else "degraded",
        "providers": providers,
    }


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

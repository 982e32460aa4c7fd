# storefront/api/endpoints/health.py
from fastapi import APIRouter, Request, Response
from ...api import schemas
from ...config import Config

router = APIRouter(tags=["Service"])


@router.get("/health", response_model=schemas.HealthRead)
def health():
    return {"status": "ok"}


@router.get("/status", response_model=schemas.StatusRead, summary="Service and enhancement status")
def service_status(request: Request):
    enhancer = request.app.state.enhancer
    cache = enhancer.cache
    return {
        "service": Config.SERVICE_NAME,
        "version": Config.VERSION,
        "ai_enhancement": enhancer.enabled,
        "cache_mode": cache.mode if cache is not None else None,
        "cached_descriptions": cache.size() if cache is not None else 0,
    }


@router.get("/metrics", include_in_schema=False)
def metrics(request: Request):
    payload, content_type = request.app.state.metrics.exposition()
    return Response(content=payload, media_type=content_type)

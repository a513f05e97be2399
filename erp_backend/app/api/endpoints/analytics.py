# erp_backend/app/api/endpoints/analytics.py
from loguru import logger
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from erp_backend.app.core.errors import ANALYTICS_FAILURE_MESSAGE
from erp_backend.app.services.analytics_service import (
    get_analytics_service_instance,
    AnalyticsService,
)
from erp_backend.app.api.schemas import ErrorResponse
from erp_backend.app.services.schemas import AnalyticsResponse

router = APIRouter()


@router.get(
    "/excel",
    response_model=AnalyticsResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Aggregate the legacy spreadsheet exports into analytics summaries",
)
async def get_excel_analytics_endpoint(
    analytics_svc: AnalyticsService = Depends(get_analytics_service_instance),
):
    logger.debug("API GET /analytics/excel called.")
    try:
        return await run_in_threadpool(analytics_svc.get_analytics)
    except Exception as e:
        logger.opt(exception=e).error(f"Error processing analytics: {e}")
        return JSONResponse(
            status_code=500, content={"error": ANALYTICS_FAILURE_MESSAGE}
        )

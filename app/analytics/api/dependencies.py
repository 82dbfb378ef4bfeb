from typing import Annotated

from fastapi import Depends, HTTPException, Request

from app.analytics.api.handler import AnalyticsHandler
from app.core.errors import GENERIC_ERROR_MESSAGE


def get_analytics_handler(request: Request) -> AnalyticsHandler:
    """Get analytics handler from app state."""
    if hasattr(request.app.state, "analytics_handler"):
        return request.app.state.analytics_handler

    if not hasattr(request.app.state, "analytics_service"):
        raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)

    analytics_handler = AnalyticsHandler(request.app.state.analytics_service, request.app.state.logger)
    request.app.state.analytics_handler = analytics_handler
    return analytics_handler


AnalyticsHandlerDep = Annotated[AnalyticsHandler, Depends(get_analytics_handler)]

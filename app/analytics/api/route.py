from typing import Optional

from fastapi import APIRouter, Header, Request

from app.analytics.api.dependencies import AnalyticsHandlerDep
from app.analytics.api.dto import LogConnectionDTO, LogConnectionResponse, UserInfoResponse
from app.analytics.api.handler import resolve_client_ip

analytics_router = APIRouter(prefix="/api", tags=["Analytics"])


@analytics_router.get("/user-info", response_model=UserInfoResponse)
async def get_user_info(
    request: Request,
    handler: AnalyticsHandlerDep,
    x_forwarded_for: Optional[str] = Header(default=None),
):
    """City and country of the calling client."""
    remote_addr = request.client.host if request.client else None
    ip = resolve_client_ip(x_forwarded_for, remote_addr)
    return await handler.get_user_info(ip)


@analytics_router.post("/log-connection", status_code=201, response_model=LogConnectionResponse)
async def log_connection(body: LogConnectionDTO, handler: AnalyticsHandlerDep):
    """Append one access log entry."""
    return await handler.log_connection(body)

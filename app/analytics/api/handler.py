import logging
from typing import Optional

from fastapi import HTTPException

from app.analytics.api.dto import LogConnectionDTO, LogConnectionResponse, UserInfoResponse
from app.analytics.service.service import AnalyticsService
from app.core.errors import AppError, GENERIC_ERROR_MESSAGE, ValidationError, to_http_exception


def resolve_client_ip(forwarded_for: Optional[str], remote_addr: Optional[str]) -> Optional[str]:
    """First X-Forwarded-For entry, falling back to the socket peer address."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return remote_addr or None


class AnalyticsHandler:
    def __init__(self, analytics_service: AnalyticsService, logger: logging.Logger):
        self.analytics_service = analytics_service
        self.logger = logger

    async def get_user_info(self, ip: Optional[str]) -> UserInfoResponse:
        try:
            location = await self.analytics_service.lookup_user(ip)
            return UserInfoResponse(ip=location.ip, city=location.city, country=location.country)
        except AppError as e:
            self.logger.error(f"Error in /api/user-info: {e.message}")
            raise to_http_exception(e)
        except Exception as e:
            self.logger.error(f"Unexpected error in /api/user-info: {e!s}", exc_info=True)
            raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)

    async def log_connection(self, body: LogConnectionDTO) -> LogConnectionResponse:
        try:
            log_id = await self.analytics_service.log_connection(body.ip, body.city, body.timestamp)
            return LogConnectionResponse(message="Log saved", logId=log_id)
        except ValidationError as e:
            raise to_http_exception(e)
        except AppError as e:
            self.logger.error(f"Error in /api/log-connection: {e.message}")
            raise HTTPException(status_code=500, detail="Error saving log.")
        except Exception as e:
            self.logger.error(f"Unexpected error in /api/log-connection: {e!s}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error saving log.")

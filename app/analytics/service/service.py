from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from app.analytics.entity.access_log import AccessLogEntry
from app.core.errors import UpstreamError, ValidationError
from app.core.logger import get_logger
from pkg.geoip_client.client import GeoIPClient, GeoLocation, GeoLookupError

logger = get_logger(__name__)


class IAccessLogRepository(ABC):
    @abstractmethod
    async def insert_log(self, entry: AccessLogEntry) -> str:
        """Insert one entry and return its generated id."""
        pass


class AnalyticsService:
    """Visitor geolocation and connection logging."""

    def __init__(self, access_log_repository: IAccessLogRepository, geo_client: GeoIPClient):
        self.access_log_repository = access_log_repository
        self.geo_client = geo_client

    async def lookup_user(self, ip: Optional[str]) -> GeoLocation:
        if not ip:
            raise ValidationError("Unable to identify the client IP address.")
        try:
            return await self.geo_client.lookup(ip)
        except GeoLookupError as e:
            raise UpstreamError(e.service_message or "Geolocation lookup failed.", expose=True) from e

    async def log_connection(
        self,
        ip: Optional[str],
        city: Optional[str],
        timestamp: Optional[datetime],
    ) -> str:
        if not (ip and ip.strip()) or not (city and city.strip()) or timestamp is None:
            raise ValidationError("Incomplete data (ip, city and timestamp are required).")

        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        entry = AccessLogEntry(
            ipAddress=ip.strip(),
            city=city.strip(),
            connectionTime=timestamp,
            createdAt=datetime.now(timezone.utc),
        )
        log_id = await self.access_log_repository.insert_log(entry)
        logger.info(f"Access log inserted: {log_id}")
        return log_id

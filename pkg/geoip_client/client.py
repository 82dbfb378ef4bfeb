from dataclasses import dataclass

import httpx

from pkg.log.logger import get_logger

logger = get_logger(__name__)

LOOKUP_FIELDS = "status,message,country,city,query"


@dataclass
class GeoLocation:
    ip: str
    city: str | None
    country: str | None


class GeoLookupError(Exception):
    """Raised when the lookup service is unreachable or rejects the IP."""

    def __init__(self, message: str, service_message: str | None = None):
        super().__init__(message)
        # Message reported by the lookup service itself, if it sent one
        self.service_message = service_message


class GeoIPClient:
    """Thin async client for the ip-api.com JSON endpoint."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = "http://ip-api.com/json"):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    async def lookup(self, ip: str) -> GeoLocation:
        url = f"{self.base_url}/{ip}"
        try:
            res = await self.http_client.get(url, params={"fields": LOOKUP_FIELDS})
        except httpx.HTTPError as e:
            logger.error(f"Geolocation request for {ip} failed: {e!s}")
            raise GeoLookupError(f"Geolocation request failed: {e!s}") from e

        try:
            data = res.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if res.status_code != 200:
            service_message = data.get("message")
            logger.error(f"Geolocation service returned status={res.status_code} for {ip}")
            raise GeoLookupError(
                f"Geolocation service returned status {res.status_code}",
                service_message=service_message,
            )

        if data.get("status") != "success":
            logger.warning(f"Geolocation lookup for {ip} failed: {data.get('message')}")
            raise GeoLookupError("Geolocation lookup failed", service_message=data.get("message"))

        return GeoLocation(ip=data.get("query") or ip, city=data.get("city"), country=data.get("country"))

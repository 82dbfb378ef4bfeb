from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class LogConnectionDTO(BaseModel):
    """DTO for recording a visitor connection"""

    ip: Optional[str] = None
    city: Optional[str] = None
    timestamp: Optional[datetime] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _blank_timestamp_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class LogConnectionResponse(BaseModel):
    message: str
    logId: str


class UserInfoResponse(BaseModel):
    ip: str
    city: Optional[str] = None
    country: Optional[str] = None

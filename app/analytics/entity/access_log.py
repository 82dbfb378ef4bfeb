from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel


class AccessLogEntry(BaseModel):
    """One recorded visit. Append-only."""
    ipAddress: str
    city: str
    connectionTime: datetime
    createdAt: datetime

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump()

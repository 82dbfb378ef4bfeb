# app/llm/service/tools.py
from datetime import datetime
from typing import Any, Callable, Dict, List
from zoneinfo import ZoneInfo

from app.core.logger import get_logger

logger = get_logger("LocalTools")

CURRENT_TIME_DECLARATION = {
    "name": "getCurrentTime",
    "description": "Retorna a data e hora atual no formato pt-BR",
}


def get_current_time(timezone: str = "America/Sao_Paulo") -> Dict[str, Any]:
    """Current local time, formatted the way pt-BR locales print it."""
    now = datetime.now(ZoneInfo(timezone))
    return {"currentTime": now.strftime("%d/%m/%Y, %H:%M:%S")}


class LocalTools:
    """Functions the model may call, plus their declarations for the request."""

    def __init__(self, timezone: str = "America/Sao_Paulo"):
        self.timezone = timezone
        self._functions: Dict[str, Callable[..., Dict[str, Any]]] = {
            "getCurrentTime": lambda **_: get_current_time(self.timezone),
        }
        self._declarations: List[Dict[str, Any]] = [CURRENT_TIME_DECLARATION]

    @property
    def declarations(self) -> List[Dict[str, Any]]:
        return list(self._declarations)

    def call(self, name: str, args: Dict[str, Any] | None = None) -> Dict[str, Any]:
        fn = self._functions.get(name)
        if fn is None:
            logger.warning(f"Model requested unknown function: {name}")
            return {"error": f"Unknown function: {name}"}
        logger.info(f"Local function {name}() called")
        return fn(**(args or {}))

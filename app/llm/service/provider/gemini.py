from typing import Any, Dict, List, Optional, Sequence

import httpx

from .base_provider import BaseProvider
from app.chat.entity.chat import ChatMessage
from app.core.errors import AuthError, ContentBlockedError, UpstreamError
from app.core.logger import get_logger
from app.llm.service.prompt import SAFETY_SETTINGS, STYLIST_SYSTEM_PROMPT
from app.llm.service.tools import LocalTools

MAX_TOOL_ROUNDS = 3

AUTH_ERROR_MESSAGE = "Invalid or misconfigured Gemini API key."
SAFETY_BLOCK_MESSAGE = "The response was blocked by the safety settings. Try a different question."


def build_contents(message: str, history: Sequence[ChatMessage]) -> List[Dict[str, Any]]:
    """Replay the client's history, then append the new user message.

    Entries without text are skipped; Gemini rejects empty text parts.
    """
    contents = [
        {"role": entry.role.value, "parts": [{"text": entry.content}]}
        for entry in history
        if entry.has_text
    ]
    contents.append({"role": "user", "parts": [{"text": message}]})
    return contents


class GeminiProvider(BaseProvider):
    """Handles Google Gemini models through the generateContent REST API."""

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient,
        model: str = "gemini-1.5-flash",
        endpoint: str = "https://generativelanguage.googleapis.com",
        system_instruction: str = STYLIST_SYSTEM_PROMPT,
        tools: Optional[LocalTools] = None,
    ):
        self.name = "gemini"
        self.api_key = api_key
        self.http_client = http_client
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self.system_instruction = system_instruction
        self.tools = tools
        self._enabled = bool(api_key)
        self._logger = get_logger("GeminiProvider")

    def is_enabled(self) -> bool:
        return self._enabled

    def build_payload(self, contents: List[Dict[str, Any]]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": self.system_instruction}]},
            "contents": contents,
            "safetySettings": SAFETY_SETTINGS,
        }
        if self.tools is not None:
            payload["tools"] = [{"functionDeclarations": self.tools.declarations}]
        return payload

    async def complete(self, message: str, history: Sequence[ChatMessage]) -> str:
        contents = build_contents(message, history)
        self._logger.info(f"Sending message to Gemini (history={len(history)}): {message}")

        for _ in range(MAX_TOOL_ROUNDS + 1):
            data = await self._generate(self.build_payload(contents))
            candidate = self._first_candidate(data)
            parts = candidate.get("content", {}).get("parts", [])
            calls = [p["functionCall"] for p in parts if "functionCall" in p]

            if not calls or self.tools is None:
                text = "".join(p.get("text", "") for p in parts if "text" in p)
                self._logger.info(f"Gemini response: {text}")
                return text

            # Feed the function results back for a follow-up completion
            contents.append({"role": "model", "parts": parts})
            contents.append({
                "role": "user",
                "parts": [
                    {
                        "functionResponse": {
                            "name": call.get("name"),
                            "response": self.tools.call(call.get("name"), call.get("args")),
                        }
                    }
                    for call in calls
                ],
            })

        raise UpstreamError(f"Gemini kept requesting function calls after {MAX_TOOL_ROUNDS} rounds")

    async def _generate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.endpoint}/v1beta/models/{self.model}:generateContent"
        try:
            res = await self.http_client.post(url, json=payload, headers={"x-goog-api-key": self.api_key})
        except httpx.HTTPError as e:
            self._logger.error(f"Gemini request failed: {e!s}")
            raise UpstreamError(f"Gemini request failed: {e!s}") from e

        if res.status_code != 200:
            self._raise_for_error(res)

        try:
            return res.json()
        except ValueError as e:
            raise UpstreamError(f"Gemini returned a malformed body: {res.text[:200]}") from e

    def _raise_for_error(self, res: httpx.Response) -> None:
        try:
            body = res.json()
        except ValueError:
            body = None
        message = res.text
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message") or res.text
        self._logger.error(f"Gemini API error: status={res.status_code} message={message}")

        if res.status_code in (401, 403) or "API key not valid" in message:
            raise AuthError(AUTH_ERROR_MESSAGE)
        if "SAFETY" in message.upper():
            raise ContentBlockedError(SAFETY_BLOCK_MESSAGE)
        raise UpstreamError(f"Gemini API error (status {res.status_code}): {message}")

    def _first_candidate(self, data: Dict[str, Any]) -> Dict[str, Any]:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise ContentBlockedError(f"The response was blocked: {block_reason}")

        candidates = data.get("candidates") or []
        if not candidates:
            raise UpstreamError("Gemini returned no candidates")

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        if candidate.get("finishReason") == "SAFETY" and not any(p.get("text") for p in parts):
            raise ContentBlockedError(SAFETY_BLOCK_MESSAGE)
        return candidate

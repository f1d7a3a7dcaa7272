"""HTTP access to the hosted responses API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from services.errors import AuthError, MalformedJsonError, RequestError
from settings import DEFAULT_MODEL, DEFAULT_RESPONSES_URL

logger = logging.getLogger(__name__)

# Web search round trips exceed httpx's 5s default.
REQUEST_TIMEOUT = 60.0

PROMPT = (
    "Use web_search to find the most recent global atmospheric CO2 concentration "
    'in parts per million (ppm). Respond with JSON containing fields "ppm" (number), '
    '"source" (string URL), and "timestamp" (ISO 8601 date of the measurement).'
)

READING_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "ppm": {"type": "number"},
        "source": {"type": "string"},
        "timestamp": {"type": "string", "format": "date-time"},
    },
    "required": ["ppm", "source", "timestamp"],
    "additionalProperties": False,
}


def build_request_body(model: str = DEFAULT_MODEL) -> Dict[str, Any]:
    return {
        "model": model,
        "input": [
            {
                "role": "user",
                "content": [{"type": "input_text", "text": PROMPT}],
            }
        ],
        "tools": [{"type": "web_search"}],
        "text": {
            "format": {
                "type": "json_schema",
                "json_schema": {
                    "name": "co2_reading",
                    "schema": READING_SCHEMA,
                    "strict": True,
                },
            }
        },
    }


class ReadingFetcher:
    """Issue the single reading request and return the decoded body.

    The credential is handed in by the caller; nothing here reads the
    environment. A missing credential is reported by :meth:`fetch` without
    touching the network.
    """

    def __init__(
        self,
        api_key: Optional[str],
        endpoint: str = DEFAULT_RESPONSES_URL,
        model: str = DEFAULT_MODEL,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.api_key = api_key.strip() if api_key else None
        self.endpoint = endpoint
        self.model = model
        self._client = client or httpx.Client(timeout=REQUEST_TIMEOUT)

    def close(self) -> None:
        self._client.close()

    def fetch(self) -> Dict[str, Any]:
        if not self.api_key:
            raise AuthError(
                "Missing OpenAI API key. Provide EXPO_PUBLIC_OPENAI_API_KEY or "
                "OPENAI_API_KEY in your environment or set expo.extra.openaiApiKey "
                "in app.json."
            )

        logger.info("Requesting latest CO2 reading", extra={"model": self.model})
        try:
            response = self._client.post(
                self.endpoint,
                json=build_request_body(self.model),
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.api_key}",
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            raise RequestError(f"OpenAI request failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedJsonError("OpenAI response body was not valid JSON.") from exc

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        status_code = exc.response.status_code
        reason = exc.response.reason_phrase
        body = exc.response.text
        logger.warning(
            "Reading request rejected",
            extra={"status": status_code, "reason": reason},
        )
        raise RequestError(
            f"OpenAI request failed: {status_code} {reason} - {body}",
            status_code=status_code,
            reason=reason,
            body=body,
        ) from exc

import logging
from typing import Dict, Optional

import httpx
from pydantic import ValidationError

from wire import ChatRequest, ChatResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAIClientError(Exception):
    """Base class for errors raised by OpenAIClient.chat."""


class TransportError(OpenAIClientError):
    """The request never produced an HTTP status (connect failure, timeout, ...)."""


class ApiError(OpenAIClientError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"OpenAI API error ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


class DeserializationError(OpenAIClientError):
    """A success status whose body is not a chat completion."""

    def __init__(self, message: str, body: str):
        super().__init__(message)
        self.body = body


class OpenAIClient:
    """Async client for a single OpenAI-compatible chat completions endpoint.

    The client holds no per-call state and can be shared between concurrent
    callers. Pass ``client`` to reuse (or mock) an ``httpx.AsyncClient``;
    otherwise one is created on first use and owned by this instance.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None

    def __repr__(self) -> str:
        return f"OpenAIClient(base_url={self._base_url!r}, api_key='***')"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url)
        return self._client

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Send one chat completion request and return the typed response.

        Raises TransportError when no response was received, ApiError with the
        raw body for a non-2xx status, and DeserializationError when a 2xx body
        does not match ChatResponse.
        """
        client = self._get_client()
        logger.debug("POST /chat/completions model=%s messages=%d", request.model, len(request.messages))

        try:
            resp = await client.post(
                f"{self._base_url}/chat/completions",
                headers=self._headers(),
                content=request.model_dump_json(),
            )
        except httpx.TransportError as e:
            raise TransportError(str(e) or type(e).__name__) from e

        logger.debug("chat/completions responded with status %s", resp.status_code)
        if not resp.is_success:
            raise ApiError(resp.status_code, resp.text)

        try:
            return ChatResponse.model_validate_json(resp.content)
        except ValidationError as e:
            raise DeserializationError(f"Unexpected chat completion body: {e}", resp.text) from e

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "OpenAIClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

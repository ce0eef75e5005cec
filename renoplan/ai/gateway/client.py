"""Client for the OpenAI-compatible AI gateway.

Function calls and image generation go through the OpenAI SDK pointed at the
gateway; the chat relay needs the raw `text/event-stream` bytes, so it uses
httpx directly.
"""

import json
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from renoplan.ai.gateway.config import GatewaySettings, get_gateway_settings
from renoplan.ai.gateway.exceptions import (
    GatewayBadRequestError,
    GatewayConfigurationError,
    GatewayError,
    GatewayNoToolCallError,
    GatewayPaymentRequiredError,
    GatewayRateLimitError,
)
from renoplan.utils.logger import logger


def error_for_status(status_code: int, body: bytes | str | dict | None = None) -> GatewayError:
    """Map a gateway HTTP status to the matching exception."""
    if status_code == 429:
        return GatewayRateLimitError()
    if status_code == 402:
        return GatewayPaymentRequiredError()
    if status_code == 400:
        return GatewayBadRequestError(_error_message(body) or "Bad request")
    return GatewayError(f"AI gateway error: {status_code}", status_code=status_code)


def _error_message(body: bytes | str | dict | None) -> str | None:
    if body is None:
        return None
    if isinstance(body, (bytes, str)):
        try:
            body = json.loads(body)
        except json.JSONDecodeError:
            text = body.decode(errors="replace") if isinstance(body, bytes) else body
            return text.strip() or None
    if not isinstance(body, dict):
        return None
    error = body.get("error", body)
    if isinstance(error, dict):
        return error.get("message")
    return error if isinstance(error, str) else None


class GatewayClient:
    """Async client for the AI gateway.

    Owns one httpx client (shared with the OpenAI SDK) created lazily and
    released by `close()`.
    """

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or get_gateway_settings()
        self._http_client = http_client
        self._openai: AsyncOpenAI | None = None

    def _ensure_http_client(self) -> httpx.AsyncClient:
        if not self.settings.api_key:
            raise GatewayConfigurationError("AI gateway API key is not configured")
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(float(self.settings.request_timeout), connect=10.0)
            )
        return self._http_client

    def _get_openai(self) -> AsyncOpenAI:
        if self._openai is None:
            self._openai = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                http_client=self._ensure_http_client(),
                max_retries=0,
            )
            logger.info("AI gateway client initialized", base_url=self.settings.base_url)
        return self._openai

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self._openai = None

    async def open_chat_stream(
        self, model: str, messages: list[dict[str, Any]]
    ) -> httpx.Response:
        """Start a streaming chat completion.

        The caller owns the returned response and must `aclose()` it after
        reading `aiter_bytes()`.

        Raises:
            GatewayError: If the gateway refuses the request
        """
        client = self._ensure_http_client()
        request = client.build_request(
            "POST",
            f"{self.settings.base_url.rstrip('/')}/chat/completions",
            headers={"Authorization": f"Bearer {self.settings.api_key}"},
            json={"model": model, "messages": messages, "stream": True},
            timeout=httpx.Timeout(None, connect=10.0),
        )

        try:
            response = await client.send(request, stream=True)
        except httpx.RequestError as e:
            raise GatewayError(f"Request error: {e}", original_error=e) from e

        if response.status_code >= 400:
            body = await response.aread()
            await response.aclose()
            logger.error(
                "AI gateway rejected chat stream",
                status_code=response.status_code,
                body=body.decode(errors="replace")[:500],
            )
            raise error_for_status(response.status_code, body)

        return response

    async def call_function(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tool: dict[str, Any],
    ) -> dict[str, Any]:
        """Run a chat completion that must answer through one function.

        Args:
            model: Gateway model name
            messages: Chat-completions messages, system prompt included
            tool: Function tool definition (`{"type": "function", "function": ...}`)

        Returns:
            dict: Parsed function arguments

        Raises:
            GatewayNoToolCallError: If the model did not call the function
            GatewayError: For gateway failures
        """
        function_name = tool["function"]["name"]
        try:
            response = await self._get_openai().chat.completions.create(
                model=model,
                messages=messages,
                tools=[tool],
                tool_choice={"type": "function", "function": {"name": function_name}},
            )
        except openai.APIStatusError as e:
            raise self._from_sdk_error(e) from e
        except openai.APIError as e:
            raise GatewayError(f"AI gateway request failed: {e}", original_error=e) from e

        message = response.choices[0].message if response.choices else None
        tool_calls = message.tool_calls if message else None
        if not tool_calls:
            raise GatewayNoToolCallError(f"No {function_name} call in AI response")

        arguments = tool_calls[0].function.arguments
        try:
            parsed = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise GatewayError(f"Invalid {function_name} arguments", original_error=e) from e

        logger.info("AI function call completed", function=function_name, model=model)
        return parsed

    async def generate_image(self, messages: list[dict[str, Any]]) -> str | None:
        """Ask the image model for a picture.

        Returns:
            str | None: The first returned image as a data URL, None if the
            model returned no image
        """
        try:
            response = await self._get_openai().chat.completions.create(
                model=self.settings.image_model,
                messages=messages,
                extra_body={"modalities": ["image", "text"]},
            )
        except openai.APIStatusError as e:
            raise self._from_sdk_error(e) from e
        except openai.APIError as e:
            raise GatewayError(f"AI gateway request failed: {e}", original_error=e) from e

        if not response.choices:
            return None
        images = (response.choices[0].message.model_extra or {}).get("images") or []
        if not images:
            return None
        return (images[0].get("image_url") or {}).get("url")

    @staticmethod
    def _from_sdk_error(error: openai.APIStatusError) -> GatewayError:
        mapped = error_for_status(error.status_code, error.body)
        mapped.original_error = error
        logger.error(
            "AI gateway returned an error",
            status_code=error.status_code,
            error=str(error),
        )
        return mapped


_gateway_client: GatewayClient | None = None


def get_gateway_client() -> GatewayClient:
    """FastAPI dependency returning the shared gateway client."""
    global _gateway_client
    if _gateway_client is None:
        _gateway_client = GatewayClient()
    return _gateway_client


async def close_gateway_client() -> None:
    global _gateway_client
    if _gateway_client is not None:
        await _gateway_client.close()
        _gateway_client = None

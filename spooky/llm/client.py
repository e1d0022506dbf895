"""OpenAI-compatible chat completion client over httpx."""

from typing import Optional

import httpx

from core.exceptions import UpstreamServiceError
from core.logger import get_logger

logger = get_logger("llm_client")


class ChatCompletionClient:
    """Minimal async client for ``POST /chat/completions``.

    Any transport error, non-2xx status or empty completion is raised as
    ``UpstreamServiceError`` so generators can fall back to templates.

    Example:
        >>> client = ChatCompletionClient(api_key="sk-...", model="gpt-3.5-turbo")
        >>> text = await client.complete("Tell me a spooky fact", system="Be brief")
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-3.5-turbo",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def complete(
        self,
        prompt: str,
        system: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 2000,
    ) -> str:
        """Send one chat completion and return the first message content.

        Raises:
            UpstreamServiceError: On request failure or an empty completion
        """
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.warning("AI request failed", model=self.model, error=str(e))
            raise UpstreamServiceError(f"AI request failed: {e}") from e
        except ValueError as e:
            raise UpstreamServiceError("AI service returned invalid JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamServiceError("AI response has no completion") from e

        if not content or not content.strip():
            raise UpstreamServiceError("AI service returned an empty completion")
        return content.strip()

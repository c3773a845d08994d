"""
Completion dispatchers for the two LLM providers.

Both expose ``complete(prompt, ...) -> str`` and translate every provider
failure into the ``kisanai.errors`` taxonomy, so the pipelines never see
httpx or openai exceptions.
"""
import base64
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import openai
from openai import AsyncOpenAI

from kisanai.config import ProviderConfig
from kisanai.errors import (
    EmptyCompletionError,
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    error_for_status,
)

logger = logging.getLogger(__name__)


class CompletionDispatcher(ABC):
    provider = "LLM"
    credential_env = "API_KEY"

    def __init__(self, config: ProviderConfig):
        if not config.api_key:
            raise MissingCredentialError(
                f"{self.provider} API key is not configured. "
                f"Please set the {self.credential_env} environment variable."
            )
        self.config = config

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.config.connect_timeout,
            read=self.config.timeout,
            write=self.config.timeout,
            pool=self.config.timeout,
        )

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        image_bytes: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
    ) -> str:
        """Send one completion request and return the raw completion text."""
        pass

    async def aclose(self) -> None:
        """Release clients owned by the dispatcher. Per-request clients need nothing."""
        pass


class GeminiDispatcher(CompletionDispatcher):
    """Image + text completions through the Generative Language REST API."""
    provider = "Gemini"
    credential_env = "GEMINI_API_KEY"

    def __init__(self, config: ProviderConfig, http_client: Optional[httpx.AsyncClient] = None):
        super().__init__(config)
        self._http_client = http_client

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/{self.config.model}:generateContent"

    def build_payload(
        self,
        prompt: str,
        image_bytes: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
    ) -> Dict[str, Any]:
        parts = [{"text": prompt}]
        if image_bytes:
            parts.append({
                "inline_data": {
                    "mime_type": mime_type,
                    "data": base64.b64encode(image_bytes).decode("utf-8"),
                }
            })

        generation_config = {
            "temperature": self.config.temperature,
            "topP": self.config.top_p,
            "maxOutputTokens": self.config.max_output_tokens,
        }
        if self.config.top_k is not None:
            generation_config["topK"] = self.config.top_k

        return {"contents": [{"parts": parts}], "generationConfig": generation_config}

    async def _post(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> httpx.Response:
        return await client.post(
            self.endpoint,
            params={"key": self.config.api_key},
            json=payload,
            headers={"Content-Type": "application/json"},
        )

    async def complete(
        self,
        prompt: str,
        image_bytes: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
    ) -> str:
        payload = self.build_payload(prompt, image_bytes, mime_type)

        try:
            if self._http_client is not None:
                response = await self._post(self._http_client, payload)
            else:
                async with httpx.AsyncClient(timeout=self._timeout()) as client:
                    response = await self._post(client, payload)
        except httpx.TimeoutException as e:
            logger.error(f"Gemini API timeout after {self.config.timeout} seconds")
            raise NetworkError(f"Gemini request timed out after {self.config.timeout:.0f}s") from e
        except httpx.HTTPError as e:
            logger.error(f"Gemini HTTP error: {e}")
            raise NetworkError(f"Could not reach Gemini API: {e}") from e

        if response.status_code >= 300:
            logger.error(f"Gemini API error: {response.status_code} - {response.text[:200]}")
            raise error_for_status(response.status_code, self.provider, response.text[:200])

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError("Gemini returned a non-JSON envelope") from e

        text = self._candidate_text(data)
        if not text or not text.strip():
            raise EmptyCompletionError("Empty response from Gemini API")

        logger.info(f"Gemini raw response: {text[:200]}...")
        return text

    @staticmethod
    def _candidate_text(data: Any) -> Optional[str]:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
        return text if isinstance(text, str) else None


class GroqDispatcher(CompletionDispatcher):
    """Text-only chat completions through Groq's OpenAI-compatible endpoint."""
    provider = "Groq"
    credential_env = "GROQ_API_KEY"

    def __init__(
        self,
        config: ProviderConfig,
        system_prompt: str,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(config)
        self.system_prompt = system_prompt
        self.client = AsyncOpenAI(
            base_url=config.base_url,
            api_key=config.api_key,
            http_client=http_client or httpx.AsyncClient(timeout=self._timeout()),
            max_retries=0,
        )
        logger.info(f"Groq client initialized ({config.model}, {config.timeout:.0f}s timeout)")

    async def complete(
        self,
        prompt: str,
        image_bytes: Optional[bytes] = None,
        mime_type: str = "image/jpeg",
    ) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.config.model,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.config.temperature,
                max_tokens=self.config.max_output_tokens,
                top_p=self.config.top_p,
                stream=False,
            )
        except openai.APIStatusError as e:
            logger.error(f"Groq API error: {e.status_code} - {e.message}")
            raise error_for_status(e.status_code, self.provider, e.message) from e
        except openai.APIConnectionError as e:
            logger.error(f"Groq connection error: {e}")
            raise NetworkError(f"Could not reach Groq API: {e}") from e

        content = None
        if completion.choices:
            content = completion.choices[0].message.content
        if not content or not content.strip():
            raise EmptyCompletionError("Empty response from Groq API")

        logger.info(f"Groq raw response: {content[:200]}...")
        return content.strip()

    async def aclose(self) -> None:
        await self.client.close()
        logger.info("Groq client closed")

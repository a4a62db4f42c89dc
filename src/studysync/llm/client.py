"""LLM client for hosted and local chat-completion providers.

All providers are reached through the OpenAI-compatible chat API:
- googleai: Gemini via its OpenAI-compatible endpoint (default)
- openai: OpenAI API
- lmstudio: Local LM Studio server
"""

from __future__ import annotations

import json
import re
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

import structlog
from openai import OpenAI

if TYPE_CHECKING:
    from studysync.config.app_config import AppConfig

logger = structlog.get_logger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

Provider = Literal["googleai", "openai", "lmstudio"]

# Providers that accept response_format={"type": "json_object"}
JSON_OBJECT_PROVIDERS: frozenset[str] = frozenset({"openai", "googleai"})

JSON_REPAIR_PROMPT = """Fix the following text and return ONLY valid JSON:
<<<
{invalid_output}
>>>

Reply with the corrected JSON only, no explanations and no markdown."""

# Reasoning blocks some models emit before the answer
SANITIZE_PATTERNS = [
    re.compile(r"<think>.*?</think>", re.DOTALL | re.IGNORECASE),
    re.compile(r"<analysis>.*?</analysis>", re.DOTALL | re.IGNORECASE),
    re.compile(r"<reasoning>.*?</reasoning>", re.DOTALL | re.IGNORECASE),
]


def _sanitize_for_json(text: str) -> str:
    """Remove thinking/reasoning tags before JSON parsing."""
    result = text
    for pattern in SANITIZE_PATTERNS:
        result = pattern.sub("", result)
    return result.strip()


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class LLMConfig:
    """Configuration for LLM client."""

    provider: Provider = "googleai"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    model: str = "gemini-2.0-flash"
    temperature: float = 0.7
    max_tokens: int = 4096
    timeout: int = 120
    api_key: str | None = None
    # None -> decided by provider
    supports_json_object: bool | None = None

    @classmethod
    def from_app_config(
        cls,
        app_config: AppConfig | None = None,
        provider: str | None = None,
        model: str | None = None,
    ) -> LLMConfig:
        """Build client settings from the application config.

        Args:
            app_config: Loaded config (loads the default one if not provided)
            provider: Override the configured default provider
            model: Override the provider's default model
        """
        if app_config is None:
            from studysync.config.app_config import load_app_config

            app_config = load_app_config()

        assistant = app_config.assistant
        provider_name = provider or assistant.default_provider
        provider_config = app_config.providers.get(provider_name)
        if provider_config is None:
            raise LLMError(f"Unknown LLM provider: {provider_name}")

        return cls(
            provider=provider_name,  # type: ignore[arg-type]
            base_url=provider_config.base_url or "",
            model=model or provider_config.default_model,
            temperature=assistant.temperature,
            max_tokens=assistant.max_tokens,
            timeout=assistant.timeout,
            api_key=provider_config.get_api_key(),
        )


@dataclass
class Message:
    """A chat message."""

    role: Literal["system", "user", "assistant"]
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class LLMResponse:
    """Response from LLM."""

    content: str
    model: str
    provider: str
    usage: dict[str, int] = field(default_factory=dict)
    latency_ms: int = 0

    @property
    def total_tokens(self) -> int:
        return self.usage.get("total_tokens", 0)


class LLMError(Exception):
    """Error during LLM interaction."""

    pass


class LLMConnectionError(LLMError):
    """Error connecting to LLM server."""

    pass


class LLMResponseError(LLMError):
    """Error in LLM response."""

    pass


# =============================================================================
# LLM CLIENT
# =============================================================================


class LLMClient:
    """Chat-completion client over the OpenAI SDK."""

    def __init__(self, config: LLMConfig | None = None):
        if config is None:
            config = LLMConfig.from_app_config()

        self.config = config
        self._client = OpenAI(
            base_url=self.config.base_url or None,
            api_key=self.config.api_key or "not-needed",
            timeout=self.config.timeout,
        )

        logger.info(
            "llm_client_initialized",
            provider=self.config.provider,
            model=self.config.model,
            base_url=self.config.base_url,
        )

    def _supports_json_object(self) -> bool:
        if self.config.supports_json_object is not None:
            return self.config.supports_json_object
        return self.config.provider in JSON_OBJECT_PROVIDERS

    def chat(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Send a chat completion request.

        Raises:
            LLMConnectionError: If the server cannot be reached
            LLMResponseError: If the response has no choices
            LLMError: For any other API failure
        """
        request_kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": [m.to_dict() for m in messages],
            "temperature": self.config.temperature if temperature is None else temperature,
            "max_tokens": self.config.max_tokens if max_tokens is None else max_tokens,
        }
        if json_mode and self._supports_json_object():
            request_kwargs["response_format"] = {"type": "json_object"}

        start_time = time.time()
        try:
            response = self._client.chat.completions.create(**request_kwargs)
        except Exception as e:
            error_msg = str(e)
            if "connect" in error_msg.lower():
                raise LLMConnectionError(
                    f"Could not connect to {self.config.provider} at {self.config.base_url}: {e}"
                ) from e
            raise LLMError(f"LLM call failed: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)

        if not response.choices:
            raise LLMResponseError("Empty response from LLM")

        content = response.choices[0].message.content or ""

        usage = {}
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        logger.debug(
            "llm_response",
            provider=self.config.provider,
            model=response.model,
            tokens=usage.get("total_tokens", 0),
            latency_ms=latency_ms,
        )

        return LLMResponse(
            content=content,
            model=response.model,
            provider=self.config.provider,
            usage=usage,
            latency_ms=latency_ms,
        )

    def _try_parse_json(self, content: str) -> dict[str, Any] | None:
        """Parse a JSON object out of model output.

        Tries, in order: the whole text, a ```json fenced block, and the
        span from the first ``{`` to the last ``}``.
        """
        content = _sanitize_for_json(content)

        candidates = [content]
        fenced = re.search(r"```(?:json)?\s*([\s\S]*?)```", content)
        if fenced:
            candidates.append(fenced.group(1).strip())
        start = content.find("{")
        end = content.rfind("}") + 1
        if start >= 0 and end > start:
            candidates.append(content[start:end])

        for candidate in candidates:
            try:
                parsed = json.loads(candidate)
            except json.JSONDecodeError:
                continue
            if isinstance(parsed, dict):
                return parsed
        return None

    def chat_json(
        self,
        messages: list[Message],
        temperature: float | None = None,
        max_tokens: int | None = None,
        max_retries: int = 1,
    ) -> dict[str, Any]:
        """Chat expecting a JSON object, with one repair round on bad output.

        Raises:
            LLMResponseError: If no valid JSON object is obtained
        """
        response = self.chat(
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=True,
        )
        parsed = self._try_parse_json(response.content)
        if parsed is not None:
            return parsed

        if max_retries > 0:
            logger.warning(
                "json_parse_failed_retrying",
                content=response.content[:100],
                provider=self.config.provider,
            )
            repair_prompt = JSON_REPAIR_PROMPT.format(invalid_output=response.content[:1000])
            retry_response = self.chat(
                messages + [Message(role="user", content=repair_prompt)],
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=True,
            )
            parsed = self._try_parse_json(retry_response.content)
            if parsed is not None:
                logger.info("json_parse_recovered_after_retry")
                return parsed

        raise LLMResponseError(f"Could not obtain valid JSON: {response.content[:200]}...")

    def simple_json(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> dict[str, Any]:
        """Single-turn chat expecting a JSON object."""
        messages = [
            Message(role="system", content=system_prompt),
            Message(role="user", content=user_message),
        ]
        return self.chat_json(messages=messages, temperature=temperature, max_tokens=max_tokens)

    def is_available(self) -> bool:
        """Check whether the provider answers a model listing."""
        try:
            self._client.models.list()
            return True
        except Exception as e:
            logger.debug("llm_unavailable", provider=self.config.provider, error=str(e))
            return False

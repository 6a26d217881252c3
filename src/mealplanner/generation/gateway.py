"""Generation gateway: a single prompt in, raw text out."""

from abc import ABC, abstractmethod

import httpx
from openai import AsyncOpenAI, OpenAIError

from mealplanner.config import Settings, get_settings
from mealplanner.logging_config import get_logger

logger = get_logger(__name__)

SYSTEM_MESSAGE = (
    "You are a nutrition coach who writes simple, everyday recipes. "
    "Always answer with the exact JSON structure you are asked for."
)


class GenerationError(Exception):
    """Raised when a generation call fails or returns nothing usable."""

    def __init__(self, message: str, generator: str | None = None):
        super().__init__(message)
        self.generator = generator


class TextGenerator(ABC):
    """
    Abstract text-generation capability.

    Implementations perform transport only: parsing and validation of the
    returned text is the caller's job.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return generator name for logging and identification."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check whether the capability is configured at all.

        This is a precondition check, not a health check: it must not make
        a network call.
        """
        pass

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Send one prompt and return the raw response text.

        Args:
            prompt: The full natural-language request.

        Returns:
            Raw, unparsed response text.

        Raises:
            GenerationError: On transport failure, timeout or empty output.
        """
        pass


class OpenAIGenerator(TextGenerator):
    """Generator backed by an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        temperature: float | None = None,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ):
        settings = settings or get_settings()
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.generation_model
        self.base_url = base_url or settings.openai_base_url
        self.timeout = timeout or settings.generation_timeout
        self.temperature = (
            temperature if temperature is not None else settings.generation_temperature
        )
        self._client = client

    @property
    def name(self) -> str:
        return f"openai:{self.model}"

    def is_available(self) -> bool:
        return self._client is not None or bool(self.api_key and self.api_key.strip())

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the API client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                max_retries=0,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def generate(self, prompt: str) -> str:
        if not self.is_available():
            raise GenerationError("Generation capability is not configured", self.name)

        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=[
                    {"role": "system", "content": SYSTEM_MESSAGE},
                    {"role": "user", "content": prompt},
                ],
            )
        except (OpenAIError, httpx.HTTPError) as e:
            raise GenerationError(f"Generation request failed: {e}", self.name) from e

        if not response.choices:
            raise GenerationError("Generation returned no choices", self.name)

        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise GenerationError("Generation returned empty text", self.name)

        logger.debug(f"Generated {len(text)} characters with {self.name}")
        return text

"""Unit tests for the OpenAI-backed generation gateway."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from mealplanner.config import Settings
from mealplanner.generation.gateway import SYSTEM_MESSAGE, GenerationError, OpenAIGenerator


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def mock_client():
    """AsyncOpenAI stand-in with a mocked chat completions endpoint."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=_completion('{"title": "Soup"}'))
    client.close = AsyncMock()
    return client


@pytest.fixture
def generator(test_settings, mock_client):
    return OpenAIGenerator(settings=test_settings, client=mock_client)


class TestOpenAIGenerator:
    """Tests for OpenAIGenerator."""

    def test_settings_applied(self, test_settings):
        """Test defaults come from settings."""
        gen = OpenAIGenerator(settings=test_settings)
        assert gen.model == test_settings.generation_model
        assert gen.name == f"openai:{test_settings.generation_model}"
        assert gen.is_available()

    def test_unavailable_without_key(self):
        """Test a blank key means the capability is not configured."""
        settings = Settings(_env_file=None, openai_api_key="  ")
        assert not OpenAIGenerator(settings=settings).is_available()

    @pytest.mark.asyncio
    async def test_generate(self, generator, mock_client):
        """Test a prompt is sent with the system message and the text returned."""
        text = await generator.generate("Make soup")

        assert text == '{"title": "Soup"}'
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["messages"] == [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": "Make soup"},
        ]
        assert kwargs["model"] == generator.model

    @pytest.mark.asyncio
    async def test_transport_error(self, generator, mock_client):
        """Test httpx failures become GenerationError."""
        mock_client.chat.completions.create.side_effect = httpx.ConnectError("refused")

        with pytest.raises(GenerationError) as exc_info:
            await generator.generate("Make soup")

        assert exc_info.value.generator == generator.name

    @pytest.mark.asyncio
    async def test_api_error(self, generator, mock_client):
        """Test SDK errors become GenerationError."""
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        mock_client.chat.completions.create.side_effect = openai.APIConnectionError(
            request=request
        )

        with pytest.raises(GenerationError):
            await generator.generate("Make soup")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_text(self, generator, mock_client, content):
        """Test empty output is a failure."""
        mock_client.chat.completions.create.return_value = _completion(content)

        with pytest.raises(GenerationError):
            await generator.generate("Make soup")

    @pytest.mark.asyncio
    async def test_no_choices(self, generator, mock_client):
        """Test a response without choices is a failure."""
        mock_client.chat.completions.create.return_value = SimpleNamespace(choices=[])

        with pytest.raises(GenerationError):
            await generator.generate("Make soup")

    @pytest.mark.asyncio
    async def test_not_configured(self):
        """Test generate refuses to run without credentials."""
        gen = OpenAIGenerator(settings=Settings(_env_file=None, openai_api_key=""))

        with pytest.raises(GenerationError):
            await gen.generate("Make soup")

    @pytest.mark.asyncio
    async def test_close(self, generator, mock_client):
        """Test close releases the client."""
        await generator.close()

        mock_client.close.assert_awaited_once()
        assert generator._client is None

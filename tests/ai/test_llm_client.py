"""Tests for LLM client module."""

from unittest.mock import MagicMock, patch

import pytest

from studysync.config.app_config import load_app_config
from studysync.llm.client import (
    LLMClient,
    LLMConfig,
    LLMConnectionError,
    LLMError,
    LLMResponse,
    LLMResponseError,
    Message,
)


def _completion(content: str, model: str = "test-model") -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    response.model = model
    response.usage.prompt_tokens = 10
    response.usage.completion_tokens = 20
    response.usage.total_tokens = 30
    return response


class TestLLMConfig:
    """Tests for LLMConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = LLMConfig()

        assert config.provider == "googleai"
        assert config.model == "gemini-2.0-flash"
        assert config.temperature == 0.7
        assert config.max_tokens == 4096
        assert config.timeout == 120

    def test_from_app_config_defaults(self):
        """Default provider comes from the assistant config."""
        with patch.dict("os.environ", {"GEMINI_API_KEY": "test-key"}):
            config = LLMConfig.from_app_config(load_app_config())

        assert config.provider == "googleai"
        assert "generativelanguage.googleapis.com" in config.base_url
        assert config.api_key == "test-key"

    def test_from_app_config_overrides(self):
        """Provider and model can be overridden."""
        config = LLMConfig.from_app_config(provider="lmstudio", model="qwen2.5-7b")

        assert config.provider == "lmstudio"
        assert config.base_url == "http://localhost:1234/v1"
        assert config.model == "qwen2.5-7b"
        assert config.api_key is None

    def test_from_app_config_unknown_provider(self):
        with pytest.raises(LLMError, match="Unknown LLM provider"):
            LLMConfig.from_app_config(provider="nope")


class TestMessageAndResponse:
    def test_message_to_dict(self):
        """Test message serialization."""
        msg = Message(role="user", content="Hello, world!")

        assert msg.to_dict() == {"role": "user", "content": "Hello, world!"}

    def test_response_empty_usage(self):
        """Test response with no usage data."""
        response = LLMResponse(content="Test", model="test", provider="lmstudio")

        assert response.total_tokens == 0


class TestLLMClientMocked:
    """Tests for LLMClient using mocks (no real API calls)."""

    @pytest.fixture
    def mock_openai_client(self):
        """Create a mock OpenAI client."""
        with patch("studysync.llm.client.OpenAI") as mock:
            mock_instance = MagicMock()
            mock.return_value = mock_instance
            yield mock_instance

    def test_client_initialization(self, mock_openai_client):
        """Test client initializes with config."""
        client = LLMClient(config=LLMConfig(provider="lmstudio", model="test-model"))

        assert client.config.provider == "lmstudio"
        assert client.config.model == "test-model"

    def test_chat_success(self, mock_openai_client):
        """Test successful chat completion."""
        mock_openai_client.chat.completions.create.return_value = _completion("Test response")

        client = LLMClient(config=LLMConfig())
        response = client.chat([Message(role="user", content="Hello")])

        assert response.content == "Test response"
        assert response.total_tokens == 30
        mock_openai_client.chat.completions.create.assert_called_once()

    def test_chat_empty_response(self, mock_openai_client):
        """Test handling of empty response."""
        response = MagicMock()
        response.choices = []
        mock_openai_client.chat.completions.create.return_value = response

        client = LLMClient(config=LLMConfig())

        with pytest.raises(LLMResponseError, match="Empty response"):
            client.chat([Message(role="user", content="Hello")])

    def test_chat_connection_error(self, mock_openai_client):
        """Test handling of connection error."""
        mock_openai_client.chat.completions.create.side_effect = Exception("Connection refused")

        client = LLMClient(config=LLMConfig())

        with pytest.raises(LLMConnectionError, match="Could not connect"):
            client.chat([Message(role="user", content="Hello")])

    def test_chat_other_error(self, mock_openai_client):
        mock_openai_client.chat.completions.create.side_effect = Exception("quota exceeded")

        client = LLMClient(config=LLMConfig())

        with pytest.raises(LLMError, match="quota exceeded"):
            client.chat([Message(role="user", content="Hello")])

    def test_chat_json_success(self, mock_openai_client):
        """Test chat_json parses JSON response."""
        mock_openai_client.chat.completions.create.return_value = _completion(
            '{"key": "value", "number": 42}'
        )

        client = LLMClient(config=LLMConfig())

        assert client.chat_json([Message(role="user", content="JSON")]) == {
            "key": "value",
            "number": 42,
        }

    def test_chat_json_extracts_from_text(self, mock_openai_client):
        """Test chat_json can extract JSON from surrounding text."""
        mock_openai_client.chat.completions.create.return_value = _completion(
            'Here is the result:\n{"data": "test"}\nEnd of response.'
        )

        client = LLMClient(config=LLMConfig())

        assert client.chat_json([Message(role="user", content="JSON")]) == {"data": "test"}

    def test_chat_json_extracts_from_markdown_block(self, mock_openai_client):
        """Should extract JSON from ```json ... ``` blocks."""
        mock_openai_client.chat.completions.create.return_value = _completion(
            'Sure!\n```json\n{"summary": "ok"}\n```'
        )

        client = LLMClient(config=LLMConfig())

        assert client.chat_json([Message(role="user", content="JSON")]) == {"summary": "ok"}

    def test_chat_json_strips_think_tags(self, mock_openai_client):
        mock_openai_client.chat.completions.create.return_value = _completion(
            '<think>Let me {reason} about this</think>{"answer": 1}'
        )

        client = LLMClient(config=LLMConfig())

        assert client.chat_json([Message(role="user", content="JSON")]) == {"answer": 1}

    def test_chat_json_repairs_once(self, mock_openai_client):
        """Invalid output triggers one repair request."""
        mock_openai_client.chat.completions.create.side_effect = [
            _completion("Not valid JSON at all"),
            _completion('{"fixed": true}'),
        ]

        client = LLMClient(config=LLMConfig())

        assert client.chat_json([Message(role="user", content="JSON")]) == {"fixed": True}
        assert mock_openai_client.chat.completions.create.call_count == 2

    def test_chat_json_invalid(self, mock_openai_client):
        """Test chat_json raises error for invalid JSON."""
        mock_openai_client.chat.completions.create.return_value = _completion(
            "Not valid JSON at all"
        )

        client = LLMClient(config=LLMConfig())

        with pytest.raises(LLMResponseError, match="Could not obtain valid JSON"):
            client.chat_json([Message(role="user", content="JSON")])

    def test_json_array_is_not_an_object(self, mock_openai_client):
        """Only JSON objects are accepted."""
        mock_openai_client.chat.completions.create.return_value = _completion("[1, 2, 3]")

        client = LLMClient(config=LLMConfig())

        with pytest.raises(LLMResponseError):
            client.chat_json([Message(role="user", content="JSON")], max_retries=0)

    def test_simple_json(self, mock_openai_client):
        """Test simple_json convenience method."""
        mock_openai_client.chat.completions.create.return_value = _completion(
            '{"greeting": "hello"}'
        )

        client = LLMClient(config=LLMConfig())
        result = client.simple_json(system_prompt="Return JSON", user_message="Greet")

        assert result == {"greeting": "hello"}
        messages = mock_openai_client.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "user"]

    def test_is_available_true(self, mock_openai_client):
        mock_openai_client.models.list.return_value = []

        assert LLMClient(config=LLMConfig()).is_available() is True

    def test_is_available_false(self, mock_openai_client):
        mock_openai_client.models.list.side_effect = Exception("Connection refused")

        assert LLMClient(config=LLMConfig()).is_available() is False


class TestJsonObjectSupport:
    """response_format json_object is only sent to providers that accept it."""

    @pytest.fixture
    def mock_openai_client(self):
        with patch("studysync.llm.client.OpenAI") as mock:
            mock_instance = MagicMock()
            mock.return_value = mock_instance
            mock_instance.chat.completions.create.return_value = _completion('{"test": true}')
            yield mock_instance

    @pytest.mark.parametrize("provider", ["googleai", "openai"])
    def test_response_format_sent(self, mock_openai_client, provider):
        client = LLMClient(config=LLMConfig(provider=provider))

        client.chat([Message(role="user", content="test")], json_mode=True)

        call_kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
        assert call_kwargs["response_format"] == {"type": "json_object"}

    def test_no_response_format_for_lmstudio(self, mock_openai_client):
        client = LLMClient(config=LLMConfig(provider="lmstudio"))

        client.chat([Message(role="user", content="test")], json_mode=True)

        call_kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
        assert "response_format" not in call_kwargs

    def test_explicit_override(self, mock_openai_client):
        client = LLMClient(config=LLMConfig(provider="openai", supports_json_object=False))

        client.chat([Message(role="user", content="test")], json_mode=True)

        call_kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
        assert "response_format" not in call_kwargs

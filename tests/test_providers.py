"""
Tests for translation providers.

HTTP sessions and the OpenAI client are replaced with mocks; nothing here
touches the network.
"""

from unittest.mock import Mock

import pytest
import requests

from translate_ai.translate.base import (
    APIError,
    BatchSizeMismatchError,
    DummyProvider,
    MissingCredentialError,
    ProviderConfig,
    TranslationError,
    split_batch,
)
from translate_ai.translate.deepl import DEEPL_API_URL, DeepLProvider
from translate_ai.translate.llm import GeminiProvider, OpenAIProvider


def http_response(status_code=200, payload=None, reason="OK"):
    response = Mock()
    response.ok = status_code < 400
    response.status_code = status_code
    response.reason = reason
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def openai_client(content):
    client = Mock()
    message = Mock()
    message.content = content
    choice = Mock()
    choice.message = message
    client.chat.completions.create.return_value = Mock(choices=[choice])
    return client


class TestSplitBatch:
    """Test batch answer splitting."""

    def test_split_and_trim(self):
        assert split_batch(" Bonjour ||| Au revoir ", 2, "test") == ["Bonjour", "Au revoir"]

    def test_numbering_and_quotes_removed(self):
        answer = '1. "Bonjour" ||| 2. "Au revoir"'
        assert split_batch(answer, 2, "test") == ["Bonjour", "Au revoir"]

    def test_trailing_separator(self):
        assert split_batch("Oui ||| Non |||", 2, "test") == ["Oui", "Non"]

    def test_count_mismatch(self):
        with pytest.raises(BatchSizeMismatchError) as exc:
            split_batch("Bonjour", 2, "test")
        assert exc.value.expected == 2
        assert exc.value.received == 1


class TestDummyProvider:
    """Test the offline provider."""

    @pytest.mark.parametrize("mode,expected", [
        ("echo", "Hello"),
        ("upper", "HELLO"),
        ("reverse", "olleH"),
        ("prefix", "[fr] Hello"),
    ])
    def test_modes(self, mode, expected):
        assert DummyProvider(mode=mode).translate("Hello", "FR") == expected

    def test_batch_keeps_order(self):
        provider = DummyProvider(mode="upper")
        assert provider.translate_batch(["a b", "c d"], "fr") == ["A B", "C D"]

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            DummyProvider(mode="shout")


class TestOpenAIProvider:
    """Test the OpenAI provider with a mocked client."""

    def test_translate(self):
        client = openai_client('"Enregistrer"')
        provider = OpenAIProvider(api_key="sk-test", client=client)

        assert provider.translate("Save", "FR", context="<Button>") == "Enregistrer"

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        user_prompt = kwargs["messages"][1]["content"]
        assert "to fr" in user_prompt
        assert "<Button>" in user_prompt

    def test_batch(self):
        client = openai_client("Enregistrer ||| Annuler")
        provider = OpenAIProvider(api_key="sk-test", client=client)

        assert provider.translate_batch(["Save", "Cancel"], "fr") == ["Enregistrer", "Annuler"]
        kwargs = client.chat.completions.create.call_args.kwargs
        assert "|||" in kwargs["messages"][0]["content"]
        assert kwargs["max_tokens"] == ProviderConfig().batch_max_tokens

    def test_batch_mismatch_raises(self):
        provider = OpenAIProvider(api_key="sk-test", client=openai_client("Enregistrer"))

        with pytest.raises(BatchSizeMismatchError):
            provider.translate_batch(["Save", "Cancel"], "fr")

    def test_empty_answer_keeps_original(self):
        client = Mock()
        client.chat.completions.create.return_value = Mock(choices=[])
        provider = OpenAIProvider(api_key="sk-test", client=client)

        assert provider.translate("Save", "fr") == "Save"
        assert provider.translate_batch(["Save", "Cancel"], "fr") == ["Save", "Cancel"]

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        provider = OpenAIProvider()

        with pytest.raises(MissingCredentialError):
            provider.translate("Save", "fr")

    def test_model_from_config(self):
        client = openai_client("Hallo")
        provider = OpenAIProvider(api_key="sk-test", config=ProviderConfig(model="gpt-4o"), client=client)
        provider.translate("Hello", "de")

        assert client.chat.completions.create.call_args.kwargs["model"] == "gpt-4o"


class TestGeminiProvider:
    """Test the Gemini provider with a mocked session."""

    def make(self, response):
        session = Mock()
        session.post.return_value = response
        return GeminiProvider(api_key="gm-test", session=session), session

    def test_translate(self):
        payload = {"candidates": [{"content": {"parts": [{"text": "Bonjour"}]}}]}
        provider, session = self.make(http_response(payload=payload))

        assert provider.translate("Hello", "fr") == "Bonjour"

        url = session.post.call_args.args[0]
        assert url.endswith("/models/gemini-2.5-flash:generateContent")
        assert session.post.call_args.kwargs["headers"]["x-goog-api-key"] == "gm-test"

    def test_http_error(self):
        provider, _ = self.make(http_response(429, reason="Too Many Requests"))

        with pytest.raises(APIError) as exc:
            provider.translate("Hello", "fr")
        assert exc.value.status_code == 429
        assert exc.value.retryable
        assert exc.value.provider == "gemini"

    def test_client_error_not_retryable(self):
        provider, _ = self.make(http_response(400, reason="Bad Request"))

        with pytest.raises(APIError) as exc:
            provider.translate("Hello", "fr")
        assert not exc.value.retryable

    def test_missing_candidates_keeps_original(self):
        provider, _ = self.make(http_response(payload={"candidates": []}))

        assert provider.translate("Hello", "fr") == "Hello"

    def test_invalid_json_keeps_original(self):
        provider, _ = self.make(http_response(payload=ValueError("not json")))

        assert provider.translate("Hello", "fr") == "Hello"

    def test_network_error(self):
        session = Mock()
        session.post.side_effect = requests.ConnectionError("down")
        provider = GeminiProvider(api_key="gm-test", session=session)

        with pytest.raises(TranslationError) as exc:
            provider.translate("Hello", "fr")
        assert exc.value.retryable


class TestDeepLProvider:
    """Test the DeepL provider with a mocked session."""

    def make(self, response, api_key="abc:fx", **kwargs):
        session = Mock()
        session.post.return_value = response
        return DeepLProvider(api_key=api_key, session=session, **kwargs), session

    def test_free_key_uses_free_endpoint(self):
        provider, _ = self.make(http_response(payload={"translations": []}))
        assert provider.url == DEEPL_API_URL["free"]

    def test_pro_key_uses_pro_endpoint(self):
        provider, _ = self.make(http_response(payload={"translations": []}), api_key="abc")
        assert provider.url == DEEPL_API_URL["pro"]

    def test_explicit_pro_flag(self):
        provider, _ = self.make(http_response(payload={"translations": []}), pro=False, api_key="abc")
        assert provider.url == DEEPL_API_URL["free"]

    @pytest.mark.parametrize("lang,expected", [
        ("fr", "FR"),
        ("DE", "DE"),
        ("pt-br", "PT-BR"),
        ("nl", "NL"),
    ])
    def test_language_codes(self, lang, expected):
        provider, _ = self.make(http_response())
        assert provider.normalize_language(lang) == expected

    def test_batch_request(self):
        payload = {"translations": [{"text": "Enregistrer"}, {"text": "Annuler"}]}
        provider, session = self.make(http_response(payload=payload))

        assert provider.translate_batch(["Save", "Cancel"], "fr") == ["Enregistrer", "Annuler"]

        kwargs = session.post.call_args.kwargs
        assert ("text", "Save") in kwargs["data"]
        assert ("text", "Cancel") in kwargs["data"]
        assert ("target_lang", "FR") in kwargs["data"]
        assert kwargs["headers"]["Authorization"] == "DeepL-Auth-Key abc:fx"

    def test_batch_mismatch(self):
        payload = {"translations": [{"text": "Enregistrer"}]}
        provider, _ = self.make(http_response(payload=payload))

        with pytest.raises(BatchSizeMismatchError):
            provider.translate_batch(["Save", "Cancel"], "fr")

    def test_missing_text_keeps_original(self):
        provider, _ = self.make(http_response(payload={"translations": [{}]}))

        assert provider.translate("Save", "fr") == "Save"

    def test_forbidden(self):
        provider, _ = self.make(http_response(403, reason="Forbidden"))

        with pytest.raises(APIError) as exc:
            provider.translate("Save", "fr")
        assert exc.value.status_code == 403
        assert not exc.value.retryable

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("DEEPL_API_KEY", raising=False)
        provider = DeepLProvider(session=Mock())

        with pytest.raises(MissingCredentialError) as exc:
            provider.translate("Save", "fr")
        assert exc.value.env_var == "DEEPL_API_KEY"

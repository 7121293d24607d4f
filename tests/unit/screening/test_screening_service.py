"""Tests for ScreeningService with the language model call replaced."""

from types import SimpleNamespace

import litellm
import pytest

from champions.core.modules.screening.models import ScreeningAttachment
from champions.errors import UpstreamError, ValidationError


def completion(text):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(prompt_tokens=120, completion_tokens=30, total_tokens=150),
    )


def chunk(text=None, usage=None):
    choices = [SimpleNamespace(delta=SimpleNamespace(content=text))] if text is not None else []
    return SimpleNamespace(choices=choices, usage=usage)


@pytest.fixture
def screening(core):
    return core.services.screening


@pytest.fixture
def logs(database):
    return database.get_collection("screening_logs")


class TestAnalyze:
    async def test_returns_text_and_usage(self, screening, learner, logs, monkeypatch):
        calls = []

        async def fake_acompletion(**kwargs):
            calls.append(kwargs)
            return completion("AI Assessment (Not a Diagnosis): Low risk.")

        monkeypatch.setattr(litellm, "acompletion", fake_acompletion)

        result = await screening.analyze(learner, "occasional cramps", None)

        assert result.text.startswith("AI Assessment")
        assert result.model == "gemini/gemini-2.5-flash"
        assert result.usage.total_tokens == 150
        assert calls[0]["api_key"] == "test-key"
        assert calls[0]["temperature"] == 0.2
        assert len(logs.documents) == 1
        assert logs.documents[0]["user_id"] == learner.id
        assert logs.documents[0]["error_message"] is None

    async def test_empty_input_rejected(self, screening, learner, logs):
        with pytest.raises(ValidationError):
            await screening.analyze(learner, "   ", None)
        assert logs.documents == []

    async def test_missing_api_key(self, screening, learner, config):
        config.llm_api_key = ""
        with pytest.raises(ValidationError, match="not configured"):
            await screening.analyze(learner, "history", None)

    async def test_empty_file_rejected(self, screening, learner):
        with pytest.raises(ValidationError, match="empty"):
            await screening.analyze(learner, "", ScreeningAttachment(content=b"", mime_type="image/png"))

    async def test_oversized_file_rejected(self, screening, learner, config):
        config.max_upload_size = 4
        with pytest.raises(ValidationError, match="too large"):
            await screening.analyze(learner, "", ScreeningAttachment(content=b"12345", mime_type="image/png"))

    async def test_upstream_failure_is_logged(self, screening, learner, logs, monkeypatch):
        async def failing_acompletion(**kwargs):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(litellm, "acompletion", failing_acompletion)

        with pytest.raises(UpstreamError):
            await screening.analyze(learner, "history", None)
        assert logs.documents[0]["error_message"] == "quota exceeded"


class TestStream:
    async def test_relays_chunks_and_logs_full_text(self, screening, learner, logs, monkeypatch):
        async def stream_chunks():
            yield chunk("AI Assessment ")
            yield chunk("(Not a Diagnosis): ")
            yield chunk("")
            yield chunk("Medium risk.")
            yield chunk(usage=SimpleNamespace(prompt_tokens=10, completion_tokens=7, total_tokens=17))

        async def fake_acompletion(**kwargs):
            assert kwargs["stream"] is True
            return stream_chunks()

        monkeypatch.setattr(litellm, "acompletion", fake_acompletion)

        iterator = await screening.stream(learner, "history", None)
        parts = [part async for part in iterator]

        assert "".join(parts) == "AI Assessment (Not a Diagnosis): Medium risk."
        assert logs.documents[0]["response_text"] == "AI Assessment (Not a Diagnosis): Medium risk."
        assert logs.documents[0]["total_tokens"] == 17
        assert logs.documents[0]["streamed"] is True

    async def test_validation_happens_before_streaming(self, screening, learner):
        with pytest.raises(ValidationError):
            await screening.stream(learner, "", None)

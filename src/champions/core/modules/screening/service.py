import time
from collections.abc import AsyncIterator
from typing import Any

import litellm
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from champions.core.core import Service
from champions.core.modules.access.models import Actor
from champions.core.modules.screening.models import ScreeningAttachment, ScreeningLog, ScreeningResult, ScreeningUsage
from champions.core.modules.screening.prompts import build_screening_messages
from champions.core.pagination import PaginationResult
from champions.errors import UpstreamError, ValidationError

logger = structlog.get_logger(__name__)


def _usage_of(response: Any) -> ScreeningUsage:
    usage = getattr(response, "usage", None)
    if not usage:
        return ScreeningUsage()
    return ScreeningUsage(
        prompt_tokens=usage.prompt_tokens,
        completion_tokens=usage.completion_tokens,
        total_tokens=usage.total_tokens,
    )


class ScreeningService(Service):
    """AI-assisted PAD screening: prompt templating and relay to the generative model."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("screening_logs")

    async def on_start(self) -> None:
        await self._collection.create_index([("user_id", 1)])
        await self._collection.create_index([("created_at", -1)])

    async def get_logs(self, limit: int = 50, offset: int = 0) -> PaginationResult[ScreeningLog]:
        """Get paginated screening logs, newest first."""
        total = await self._collection.count_documents({})
        cursor = self._collection.find({}).sort("created_at", -1).skip(offset).limit(limit)
        items = await ScreeningLog.list_cursor(cursor)
        return PaginationResult(items=items, total=total, limit=limit, offset=offset)

    def _prepare(self, medical_history: str, attachment: ScreeningAttachment | None) -> list[dict[str, Any]]:
        if not self.core.config.llm_api_key:
            raise ValidationError("AI screening is not configured")
        if not medical_history.strip() and attachment is None:
            raise ValidationError("Provide a medical history or a file to analyze")
        if attachment is not None:
            if not attachment.content:
                raise ValidationError("Uploaded file is empty")
            self.core.services.storage.ensure_size(attachment.content)
        return build_screening_messages(medical_history, attachment)

    async def analyze(self, actor: Actor, medical_history: str, attachment: ScreeningAttachment | None) -> ScreeningResult:
        """Run a screening and return the whole assessment."""
        messages = self._prepare(medical_history, attachment)
        model = self.core.config.llm_model
        logger.info("screening_started", model=model, has_file=attachment is not None, streamed=False)

        start_time = time.time()
        text: str | None = None
        usage = ScreeningUsage()
        error_message: str | None = None
        try:
            response = await litellm.acompletion(
                model=model,
                messages=messages,
                api_key=self.core.config.llm_api_key,
                temperature=self.core.config.llm_temperature,
            )
            usage = _usage_of(response)
            text = response.choices[0].message.content
            if not text:
                raise ValidationError("AI model returned an empty response")  # noqa: TRY301
            return ScreeningResult(text=text, model=model, usage=usage)
        except ValidationError as e:
            error_message = str(e)
            raise
        except Exception as e:
            error_message = str(e)
            logger.exception("screening_failed", model=model)
            raise UpstreamError(f"Failed to generate assessment: {e}") from e
        finally:
            await self._log(actor, medical_history, attachment, False, text, usage, error_message, start_time)

    async def stream(self, actor: Actor, medical_history: str, attachment: ScreeningAttachment | None) -> AsyncIterator[str]:
        """Validate the request, then return an iterator relaying text chunks as they arrive."""
        messages = self._prepare(medical_history, attachment)
        model = self.core.config.llm_model
        logger.info("screening_started", model=model, has_file=attachment is not None, streamed=True)

        start_time = time.time()
        try:
            response = await litellm.acompletion(
                model=model,
                messages=messages,
                api_key=self.core.config.llm_api_key,
                temperature=self.core.config.llm_temperature,
                stream=True,
                stream_options={"include_usage": True},
            )
        except Exception as e:
            logger.exception("screening_failed", model=model)
            await self._log(actor, medical_history, attachment, True, None, ScreeningUsage(), str(e), start_time)
            raise UpstreamError(f"Failed to generate assessment: {e}") from e
        return self._relay(actor, medical_history, attachment, response, start_time)

    async def _relay(
        self,
        actor: Actor,
        medical_history: str,
        attachment: ScreeningAttachment | None,
        response: Any,
        start_time: float,
    ) -> AsyncIterator[str]:
        chunks: list[str] = []
        usage = ScreeningUsage()
        error_message: str | None = None
        try:
            async for chunk in response:
                if getattr(chunk, "usage", None):
                    usage = _usage_of(chunk)
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    chunks.append(delta)
                    yield delta
        except Exception as e:
            error_message = str(e)
            logger.exception("screening_stream_failed")
            raise
        finally:
            text = "".join(chunks) or None
            await self._log(actor, medical_history, attachment, True, text, usage, error_message, start_time)

    async def _log(
        self,
        actor: Actor,
        medical_history: str,
        attachment: ScreeningAttachment | None,
        streamed: bool,
        text: str | None,
        usage: ScreeningUsage,
        error_message: str | None,
        start_time: float,
    ) -> None:
        log = ScreeningLog(
            user_id=actor.id,
            model=self.core.config.llm_model,
            streamed=streamed,
            medical_history=medical_history,
            attachment_mime_type=attachment.mime_type if attachment else None,
            attachment_size=len(attachment.content) if attachment else None,
            response_text=text,
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
            error_message=error_message,
            duration_ms=int((time.time() - start_time) * 1000),
        )
        await self._collection.insert_one(log.to_mongo())

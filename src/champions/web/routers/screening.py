"""AI screening helper: relays medical history and an optional document to the language model."""

from typing import Annotated

from fastapi import APIRouter, Form, Query, UploadFile
from fastapi.responses import StreamingResponse

from champions.core.modules.screening.models import ScreeningAttachment, ScreeningLog, ScreeningResult
from champions.core.pagination import PaginationResult
from champions.web.deps import AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router = APIRouter(tags=["screening"])

SCREENING_ERRORS = {
    400: {"model": ErrorResponse, "description": "Empty input, file too large or model not configured"},
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    502: {"model": ErrorResponse, "description": "Language model request failed"},
}


async def read_attachment(file: UploadFile | None) -> ScreeningAttachment | None:
    if file is None:
        return None
    content = await file.read()
    return ScreeningAttachment(content=content, mime_type=file.content_type or "application/octet-stream")


@router.post(
    "/screening/analyze",
    summary="Analyze",
    description="Run the vascular screening prompt and return the full assessment.",
    operation_id="analyzeScreening",
    responses={200: {"description": "Assessment text and token usage"}, **SCREENING_ERRORS},
)
async def analyze(
    app: AppDep,
    auth_token: AuthTokenDep,
    medical_history: Annotated[str, Form(alias="medicalHistory")] = "",
    file: UploadFile | None = None,
) -> ScreeningResult:
    attachment = await read_attachment(file)
    return await app.analyze_screening(auth_token, medical_history, attachment)


@router.post(
    "/screening/stream",
    summary="Analyze (streaming)",
    description="Same as analyze, but the assessment is streamed as plain text while it is generated.",
    operation_id="streamScreening",
    response_class=StreamingResponse,
    responses={200: {"description": "Assessment text", "content": {"text/plain": {}}}, **SCREENING_ERRORS},
)
async def stream(
    app: AppDep,
    auth_token: AuthTokenDep,
    medical_history: Annotated[str, Form(alias="medicalHistory")] = "",
    file: UploadFile | None = None,
) -> StreamingResponse:
    attachment = await read_attachment(file)
    chunks = await app.stream_screening(auth_token, medical_history, attachment)
    return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")


@router.get(
    "/screening/logs",
    summary="List screening logs",
    description="Audit trail of screening calls, newest first. Admin only.",
    operation_id="listScreeningLogs",
    responses={
        200: {"description": "Paginated screening logs"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def list_logs(
    app: AppDep,
    auth_token: AuthTokenDep,
    limit: Annotated[int, Query(ge=1, le=200, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[ScreeningLog]:
    return await app.get_screening_logs(auth_token, limit, offset)

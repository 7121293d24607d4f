import json

import pytest

from champions.errors import (
    AccessDeniedError,
    AuthenticationError,
    FailedPreconditionError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from champions.web.error_handlers import resolve_error_status, user_error_handler


@pytest.mark.parametrize(
    ("error", "status_code", "error_type"),
    [
        (AuthenticationError(), 401, "authentication_error"),
        (AccessDeniedError("no"), 403, "access_denied"),
        (NotFoundError(), 404, "not_found"),
        (ValidationError("bad"), 400, "validation_error"),
        (FailedPreconditionError("Folder is not empty"), 409, "failed_precondition"),
        (UpstreamError("model down"), 502, "upstream_error"),
    ],
)
def test_status_mapping(error, status_code, error_type):
    assert resolve_error_status(error) == (status_code, error_type)


async def test_message_shown_verbatim():
    response = await user_error_handler(None, FailedPreconditionError("Folder is not empty. Please delete contents first."))  # type: ignore[arg-type]
    assert response.status_code == 409
    assert json.loads(response.body) == {
        "message": "Folder is not empty. Please delete contents first.",
        "type": "failed_precondition",
    }

"""JSON helpers shared by the routers: Result -> response, error -> HTTP status."""
from typing import Any, Dict, List

from fastapi.responses import JSONResponse

from recipebook.domain.Errors import (
    BackendError, NotFoundError, PartialReplaceError, StorageFullError, ValidationError
)
from recipebook.domain.Result import Result

_STATUS = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (StorageFullError, 507),
    (PartialReplaceError, 500),
    (BackendError, 502),
)


def status_for(error: Exception) -> int:
    for error_type, status in _STATUS:
        if isinstance(error, error_type):
            return status
    return 500


def warnings_json(result: Result) -> List[Dict[str, str]]:
    return [{"type": w.code, "message": str(w)} for w in result.warnings]


def error_response(result: Result) -> JSONResponse:
    error = result.error
    content: Dict[str, Any] = {"status": "error", "error": error.code, "message": str(error)}
    field = getattr(error, "field", None)
    if field:
        content["field"] = field
    if result.warnings:
        content["warnings"] = warnings_json(result)
    return JSONResponse(status_code=status_for(error), content=content)


def success(result: Result, **content: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"status": "success"}
    body.update(content)
    body["warnings"] = warnings_json(result)
    return body

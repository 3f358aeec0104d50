# fiesta/errors.py
from fastapi import HTTPException


class WorkflowError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreError(WorkflowError):
    """The record store rejected or failed a call."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.code = code


class ValidationFailed(WorkflowError):
    status_code = 400

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []


class NotFound(WorkflowError):
    status_code = 404


class Forbidden(WorkflowError):
    status_code = 403


class DuplicateQuote(WorkflowError):
    status_code = 409


class RequestClosed(WorkflowError):
    """The request no longer takes quotes."""

    status_code = 409


def http_error(e: WorkflowError) -> HTTPException:
    if isinstance(e, StoreError):
        # store details stay in the logs
        return HTTPException(status_code=500, detail="No se pudo completar la operación")
    if isinstance(e, ValidationFailed) and e.fields:
        return HTTPException(status_code=400, detail={"message": e.message, "fields": e.fields})
    return HTTPException(status_code=e.status_code, detail=e.message)

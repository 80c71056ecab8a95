"""Errors raised by the bill store and mapped to JSON responses."""


class BillSplitError(Exception):
    """Base error. `status_code` is used by the HTTP error handler."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {"error": self.message}


class ValidationError(BillSplitError):
    status_code = 400


class NotFoundError(BillSplitError):
    status_code = 404


class PermissionDeniedError(BillSplitError):
    status_code = 403


class LimitExceededError(BillSplitError):
    status_code = 403


class ConflictError(BillSplitError):
    status_code = 409

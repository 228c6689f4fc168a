"""
Error kinds raised by the elective allocation core.

Each error carries a stable `error_code` and the HTTP status the service
layer answers with. No Flask imports here.
"""


class ElectiveError(Exception):
    """Base class for every failure scoped to a single core operation."""

    error_code = "ELECTIVE_ERROR"
    http_status = 400

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code

    def to_error_payload(self) -> dict:
        return {
            "mode": "error",
            "error": {"error_code": self.error_code, "message": self.message},
        }


class InvalidRequestError(ElectiveError):
    """An enrollment request failed validation. Nothing was stored."""

    error_code = "INVALID_REQUEST"


class InvalidInputError(ElectiveError):
    """A course/student definition or a report argument is malformed."""

    error_code = "INVALID_INPUT"


class DuplicateEntryError(ElectiveError):
    """A course name or student id is already defined."""

    error_code = "DUPLICATE_ENTRY"
    http_status = 409


class NotFoundError(ElectiveError):
    """No course or student is registered under the given key."""

    error_code = "NOT_FOUND"
    http_status = 404


class AllocationStateError(ElectiveError):
    """The one-shot allocation pass was invoked out of order."""

    error_code = "ALLOCATION_ALREADY_RUN"
    http_status = 409

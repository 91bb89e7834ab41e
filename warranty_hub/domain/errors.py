# warranty_hub/domain/errors.py
from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    INVALID_FORMAT = "invalid_format"
    DUPLICATE_IN_BATCH = "duplicate_in_batch"
    CONFLICT = "conflict"
    ALREADY_REGISTERED = "already_registered"
    INVALID_STATUS = "invalid_status"
    UNAUTHORIZED = "unauthorized"
    SERVER_ERROR = "server_error"


class ServiceError(Exception):
    """
    Bazowy błąd domenowy.

    Niesie rodzaj błędu (kind), status HTTP, którym odpowiada warstwa API,
    oraz kody seriali, których błąd dotyczy.
    """

    kind = ErrorKind.SERVER_ERROR
    status_code = 500

    def __init__(self, message: str, codes: Iterable[str] | None = None):
        super().__init__(message)
        self.message = message
        self.codes = list(codes or [])

    def to_detail(self) -> dict:
        detail = {"error": self.kind.value, "message": self.message}
        if self.codes:
            detail["codes"] = self.codes
        return detail


class NotFound(ServiceError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404


class InvalidFormat(ServiceError):
    kind = ErrorKind.INVALID_FORMAT
    status_code = 400


class DuplicateInBatch(ServiceError):
    kind = ErrorKind.DUPLICATE_IN_BATCH
    status_code = 400


class Conflict(ServiceError):
    kind = ErrorKind.CONFLICT
    status_code = 409


class AlreadyRegistered(Conflict):
    kind = ErrorKind.ALREADY_REGISTERED


class InvalidStatus(ServiceError):
    kind = ErrorKind.INVALID_STATUS
    status_code = 400


class Unauthorized(ServiceError):
    kind = ErrorKind.UNAUTHORIZED
    status_code = 401


class ServerError(ServiceError):
    pass

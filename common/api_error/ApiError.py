# common/api_error/ApiError.py
class AppError(Exception):
    """Base error for all application-specific issues."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(self.message)


class ValidationError(AppError):
    """Input is well-formed JSON but breaks a domain rule."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR"):
        super().__init__(message, status_code=422, code=code)


class NotFoundError(AppError):
    """Unknown doctor, patient, user or appointment id."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} '{entity_id}' not found",
            status_code=404,
            code="NOT_FOUND",
        )


class ConflictError(AppError):
    """Duplicate registration, double-booking or a stale write."""

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message, status_code=409, code=code)


class InvalidTransitionError(ConflictError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move appointment from '{current}' to '{target}'",
            code="INVALID_TRANSITION",
        )


class SlotUnavailableError(ConflictError):
    def __init__(self, message: str):
        super().__init__(message, code="SLOT_UNAVAILABLE")


class PermissionDeniedError(AppError):
    def __init__(self, message: str):
        super().__init__(message, status_code=403, code="PERMISSION_DENIED")


class PersistenceError(AppError):
    """Storage unavailable. Safe to retry."""

    retryable = True

    def __init__(self, message: str):
        super().__init__(message, status_code=503, code="PERSISTENCE_ERROR")


class ConfigurationError(RuntimeError):
    """
    Raised when application configuration is invalid.
    """

    pass


__all__ = [
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "InvalidTransitionError",
    "SlotUnavailableError",
    "PermissionDeniedError",
    "PersistenceError",
    "ConfigurationError",
]

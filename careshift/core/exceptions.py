"""
Domain error taxonomy

Every error is raised where the violation is detected and reaches the caller
unchanged. The HTTP layer maps each kind to its status code.
"""

from fastapi import status


class CareShiftError(Exception):
    """Base class for all domain errors"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CareShiftError):
    """Malformed or out-of-range input"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(CareShiftError):
    """No resolvable principal"""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class PermissionDeniedError(CareShiftError):
    """Authenticated but not authorized for the operation"""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class NotFoundError(CareShiftError):
    """Referenced entity is absent"""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(CareShiftError):
    """Invariant violation, e.g. a second active shift"""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"

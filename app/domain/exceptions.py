"""Domain exceptions for the dispatch authorization service.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class DispatchException(Exception):
    """Base exception for all application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(DispatchException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(DispatchException):
    """Raised when authentication fails (e.g. invalid or expired token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(DispatchException):
    """Raised when the guard chain denies a request.

    Carries no detail about which requirement failed so callers cannot
    enumerate permission keys.
    """

    def __init__(self) -> None:
        super().__init__("Forbidden", "FORBIDDEN")


class ResourceNotFoundException(DispatchException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'role', 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class RoleAlreadyExistsException(DispatchException):
    """Raised when creating or renaming a role onto an existing name or slug."""

    def __init__(self, name: str) -> None:
        super().__init__(
            "A role with this name already exists",
            "ROLE_ALREADY_EXISTS",
            {"name": name},
        )


class SystemRoleProtectedException(DispatchException):
    """Raised when an operation would delete a system role or edit admin grants."""

    def __init__(self, message: str, role_id: str) -> None:
        super().__init__(message, "SYSTEM_ROLE_PROTECTED", {"role_id": role_id})


class RoleInUseException(DispatchException):
    """Raised when deleting a role that still has users assigned."""

    def __init__(self, role_id: str, user_count: int) -> None:
        super().__init__(
            f"Cannot delete role: {user_count} user(s) are assigned to it",
            "ROLE_IN_USE",
            {"role_id": role_id, "user_count": user_count},
        )


class InvalidPermissionKeysException(DispatchException):
    """Raised when a grant request names keys that are not in the registry."""

    def __init__(self, invalid_keys: list[str]) -> None:
        super().__init__(
            f"Invalid permission keys: {', '.join(invalid_keys)}",
            "INVALID_PERMISSION_KEYS",
            {"invalid_keys": invalid_keys},
        )


class SqlNotConfiguredException(DispatchException):
    """Raised when an operation requires the database but DATABASE_URL is unset."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )

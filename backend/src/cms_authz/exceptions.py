"""Domain-specific exceptions for the role authorization core.

Every failure raised by the services derives from ``CmsAuthzError`` and
belongs to one of four kinds: invalid argument, illegal state, not found and
unauthorized. Callers map those kinds to their own transport.
"""

from typing import Any


class CmsAuthzError(Exception):
    """Base exception for all role authorization errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Resource Not Found Errors
# =============================================================================


class NotFoundError(CmsAuthzError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, what: str, identifier: Any) -> None:
        self.what = what
        self.identifier = identifier
        super().__init__(
            f"Could not find '{what}' with identifier '{identifier}'",
            {"what": what, "identifier": str(identifier)},
        )


class RoleNotFoundError(NotFoundError):
    """Raised when a role cannot be found."""

    def __init__(self, identifier: Any) -> None:
        super().__init__("role", identifier)


class UserNotFoundError(NotFoundError):
    """Raised when a user cannot be found."""

    def __init__(self, identifier: Any) -> None:
        super().__init__("user", identifier)


class UserGroupNotFoundError(NotFoundError):
    """Raised when a user group cannot be found."""

    def __init__(self, identifier: Any) -> None:
        super().__init__("user group", identifier)


class PersistenceNotFoundError(NotFoundError):
    """Raised by persistence handlers when a stored record is missing.

    Services never let this escape; they re-raise it as their own not found
    kind so callers see a single failure type per entity.
    """


# =============================================================================
# Validation Errors (invalid argument)
# =============================================================================


class ValidationError(CmsAuthzError):
    """Base class for validation errors."""

    pass


class InvalidArgumentValueError(ValidationError):
    """Raised when an argument has an empty or malformed value."""

    def __init__(self, argument: str, value: Any, where: str | None = None) -> None:
        self.argument = argument
        self.value = value
        message = f"Argument '{argument}' is invalid: '{value}' is wrong value"
        if where:
            message += f" in class '{where}'"
        details: dict[str, Any] = {"argument": argument, "value": repr(value)}
        if where:
            details["where"] = where
        super().__init__(message, details)


class InvalidArgumentError(ValidationError):
    """Raised when an argument is well formed but not acceptable."""

    def __init__(self, argument: str, reason: str) -> None:
        self.argument = argument
        super().__init__(f"Argument '{argument}' is invalid: {reason}", {"argument": argument})


# =============================================================================
# Conflict Errors (illegal state)
# =============================================================================


class ConflictError(CmsAuthzError):
    """Base class for resource conflict errors."""

    pass


class IllegalStateError(ConflictError):
    """Raised when an operation would break a business rule."""

    def __init__(self, argument: str, value: Any) -> None:
        self.argument = argument
        self.value = value
        super().__init__(
            f"Argument '{argument}' is invalid: '{value}' conflicts with existing data",
            {"argument": argument, "value": str(value)},
        )


class RoleAlreadyExistsError(IllegalStateError):
    """Raised when a role identifier is already taken."""

    def __init__(self, identifier: str) -> None:
        super().__init__("identifier", identifier)


class UserAlreadyExistsError(IllegalStateError):
    """Raised when a user login is already taken."""

    def __init__(self, login: str) -> None:
        super().__init__("login", login)


# =============================================================================
# Permission Errors
# =============================================================================


class UnauthorizedError(CmsAuthzError):
    """Raised when the current caller may not perform an operation."""

    def __init__(self, module: str, function: str) -> None:
        self.module = module
        self.function = function
        super().__init__(
            f"User does not have access to '{function}' '{module}'",
            {"module": module, "function": function},
        )

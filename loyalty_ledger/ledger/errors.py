"""Error conventions for the token ledger.

The ledger raises typed exceptions; the service layer turns them into
standardized error dicts so callers can switch on machine-readable codes.

Usage:
    from loyalty_ledger.ledger.errors import Unauthorized, validation_error

    try:
        ledger.mint("mallory", "alice")
    except Unauthorized as e:
        return e.to_response()
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - VALIDATION: Caller provided bad input
    - PERMISSION: Caller not authorized, or operation disabled
    - RESOURCE: Token not found, already burnt
    - SYSTEM: Internal invariant breach
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    RESOURCE = "resource"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    MISSING_ARGUMENT = "missing_argument"
    INVALID_ARGUMENT = "invalid_argument"
    UNKNOWN_METHOD = "unknown_method"

    # Permission errors
    NOT_AUTHORIZED = "not_authorized"
    NOT_TRANSFERABLE = "not_transferable"

    # Resource errors
    NOT_FOUND = "not_found"
    ALREADY_BURNT = "already_burnt"

    # System errors
    ALREADY_EXISTS = "already_exists"
    INTERNAL_ERROR = "internal_error"


@dataclass
class ErrorResponse:
    """Standardized error response.

    Backwards compatible with the plain {"success": False, "error": "..."}
    pattern used by simple callers.
    """

    success: bool = False  # Always False for errors
    error: str = ""  # Human-readable message
    code: str = ""  # Machine-readable error code
    category: str = ""  # Error category (validation, permission, etc.)
    retriable: bool = False  # Whether the operation should be retried
    details: dict[str, object] | None = None  # Optional additional context

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# EXCEPTIONS
# =============================================================================


class LedgerError(Exception):
    """Base class for every failure surfaced by the token ledger.

    A raised LedgerError means the operation was a no-op on ledger state.
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    category: ErrorCategory = ErrorCategory.SYSTEM
    retriable: bool = False

    def __init__(self, message: str, **details: object) -> None:
        self.message = message
        self.details = dict(details)
        super().__init__(message)

    def to_response(self) -> dict[str, object]:
        """Convert to a standardized error dict."""
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=self.retriable,
            details=self.details or None,
        ).to_dict()


class Unauthorized(LedgerError):
    """Caller lacks the privilege required for the operation."""

    code = ErrorCode.NOT_AUTHORIZED
    category = ErrorCategory.PERMISSION

    def __init__(self, caller: str | None, action: str, **details: object) -> None:
        self.caller = caller
        self.action = action
        super().__init__(
            f"'{caller}' is not authorized to {action}",
            caller=caller,
            action=action,
            **details,
        )


class InvalidRecipient(LedgerError):
    """Target identity is null or empty."""

    code = ErrorCode.INVALID_ARGUMENT
    category = ErrorCategory.VALIDATION

    def __init__(self, recipient: object) -> None:
        self.recipient = recipient
        super().__init__(f"Invalid recipient: {recipient!r}", recipient=recipient)


class AlreadyBurnt(LedgerError):
    """Token identifier has been permanently revoked."""

    code = ErrorCode.ALREADY_BURNT
    category = ErrorCategory.RESOURCE

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Token {token_id} is already burnt", token_id=token_id)


class DuplicateIdentifier(LedgerError):
    """Registry already holds the identifier being minted.

    Unreachable under correct counter discipline. Treat as fatal.
    """

    code = ErrorCode.ALREADY_EXISTS
    category = ErrorCategory.SYSTEM

    def __init__(self, token_id: int, holder: str) -> None:
        self.token_id = token_id
        self.holder = holder
        super().__init__(
            f"Token {token_id} is already registered to '{holder}'",
            token_id=token_id,
            holder=holder,
        )


class NotTransferable(LedgerError):
    """Transfer attempted while the transferability flag is off."""

    code = ErrorCode.NOT_TRANSFERABLE
    category = ErrorCategory.PERMISSION

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(
            f"Token {token_id} cannot be transferred: transfers are disabled",
            token_id=token_id,
        )


class UnknownIdentifier(LedgerError):
    """Registry has no record for the identifier."""

    code = ErrorCode.NOT_FOUND
    category = ErrorCategory.RESOURCE

    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"Token {token_id} does not exist", token_id=token_id)


# =============================================================================
# FACTORY FUNCTIONS
# =============================================================================


def validation_error(
    message: str,
    code: ErrorCode = ErrorCode.INVALID_ARGUMENT,
    **details: object,
) -> dict[str, object]:
    """Create a validation error response.

    Args:
        message: Human-readable error message
        code: Specific error code (default: INVALID_ARGUMENT)
        **details: Additional context (e.g., required=["token_id"])

    Returns:
        Error response dict with success=False
    """
    return ErrorResponse(
        error=message,
        code=code.value,
        category=ErrorCategory.VALIDATION.value,
        retriable=False,
        details=dict(details) if details else None,
    ).to_dict()

# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error kinds shared by every service.

Services raise their own exception hierarchies (for example
MemberServiceError and its subclasses). Every leaf of those hierarchies
also inherits exactly one of the kinds below, so the API layer can map
any service failure to an HTTP status without knowing the service.

Example:
    >>> class MemberLimitReachedError(MemberServiceError, LimitExceededError):
    ...     pass
    >>> isinstance(MemberLimitReachedError("full"), LimitExceededError)
    True
"""

from sqlalchemy.exc import IntegrityError

# SQLSTATE for unique_violation on PostgreSQL
PG_UNIQUE_VIOLATION = "23505"


class DomainError(Exception):
    """Base class for all domain error kinds.

    Attributes:
        kind: Stable machine-readable error code.
        message: Human-readable description safe to show to clients.
    """

    kind = "unknown"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or self.kind


class NotFoundError(DomainError):
    """Requested row does not exist in the caller's organization."""

    kind = "not_found"


class ConflictError(DomainError):
    """Write conflicts with an existing row."""

    kind = "conflict"


UniqueViolationError = ConflictError


class LimitExceededError(DomainError):
    """Subscription plan ceiling reached."""

    kind = "limit_exceeded"


class ValidationFailedError(DomainError):
    """Input is well-formed but violates a business rule."""

    kind = "validation_failed"


class PermissionDeniedError(DomainError):
    """Caller's role does not allow the action."""

    kind = "permission_denied"


class UnknownDomainError(DomainError):
    """Unexpected store failure."""

    kind = "unknown"


def is_unique_violation(error: IntegrityError) -> bool:
    """Check whether an IntegrityError was caused by a unique constraint.

    Works for asyncpg (SQLSTATE 23505) and SQLite ("UNIQUE constraint failed").

    Args:
        error: The SQLAlchemy integrity error.

    Returns:
        True if a unique or primary key constraint was violated.
    """
    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == PG_UNIQUE_VIOLATION:
        return True
    return "unique constraint" in str(orig).lower()


def translate_integrity_error(error: IntegrityError, message: str) -> DomainError:
    """Map a store integrity error to a domain error kind.

    The backend message is discarded; only the caller-provided
    message reaches the client.

    Args:
        error: The SQLAlchemy integrity error.
        message: Client-facing description of the conflict.

    Returns:
        ConflictError for unique violations, UnknownDomainError otherwise.
    """
    if is_unique_violation(error):
        return ConflictError(message)
    return UnknownDomainError("The operation could not be completed")

"""Exceptions shared by the dataset lifecycle and access control modules."""

from typing import Optional


class ServiceError(Exception):
    """Base exception for errors surfaced to API callers."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_detail(self) -> dict:
        detail = {"message": self.message}
        if self.field:
            detail["field"] = self.field
        return detail


class InvalidInputError(ServiceError):
    """Raised when wizard input, a permission value or a sharing request is invalid."""

    pass


class NotFoundError(ServiceError):
    """Raised when a dataset, user, team, grant or workflow does not exist."""

    pass


class AccessDeniedError(ServiceError):
    """Raised when the resolved permission is below the required level."""

    pass


class UpstreamFailureError(ServiceError):
    """Raised when the analysis engine times out, fails or answers with a malformed body."""

    pass


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    pass


class PartialArtifactFailure(Exception):
    """Raised when a single artifact cannot be decoded or stored.

    Never escapes the orchestrator: the artifact is logged and skipped.
    """

    def __init__(self, message: str, category: Optional[str] = None) -> None:
        super().__init__(message)
        self.category = category

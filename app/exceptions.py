"""
Error taxonomy for the service layer.

Services raise these at the point of detection; ``app.main`` installs a
single exception handler that renders any ``BlogError`` as the
``{"message", "statusCode"}`` envelope with the variant's status code.
"""


class BlogError(Exception):
    """Base class for rejected blog operations."""

    status_code: int = 500
    default_message: str = "request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(BlogError):
    """Unknown id, or a comment addressed through the wrong post."""

    status_code = 404
    default_message = "resource not found"


class PermissionDeniedError(BlogError):
    """Actor may not perform the operation (not owner/admin, or self-like)."""

    status_code = 400
    default_message = "permission denied"


class ConflictError(BlogError):
    """Duplicate like, missing like on unlike, or a unique-key collision."""

    status_code = 409
    default_message = "conflict"

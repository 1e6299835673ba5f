"""Error types raised by the review service and repository."""


class BikeReviewError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BikeReviewError):
    """Missing or out-of-range input."""

    status_code = 400
    default_message = "All required fields must be provided"


class NotFoundError(BikeReviewError):
    status_code = 404
    default_message = "Bike review not found"


class StorageError(BikeReviewError):
    """Database, filesystem, object store or image processing failure."""

    status_code = 500

"""Review submission: validation, image placement, persistence and broadcast."""

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError

from bike_reviews.config import ALLOWED_IMAGE_TYPES, MAX_IMAGE_SIZE, MAX_IMAGES, MIN_IMAGES
from bike_reviews.db.review_repository import ReviewRepository, review_repository
from bike_reviews.errors import ValidationError
from bike_reviews.models import Review, ReviewSubmission, UploadedImage
from bike_reviews.services.image_store import ImageStore, build_image_store, grouping_key
from bike_reviews.services.notifications import NEW_REVIEW_EVENT, connection_manager

logger = logging.getLogger(__name__)

Publisher = Callable[[str, Any], Awaitable[None]]


def check_upload_limits(sizes: list[int | None]):
    """Reject too many files or oversized files; unknown sizes are checked again once read."""
    if len(sizes) > MAX_IMAGES:
        raise ValidationError(f"No more than {MAX_IMAGES} images are allowed")
    for size in sizes:
        if size is not None and size > MAX_IMAGE_SIZE:
            raise ValidationError(f"Images must not exceed the {MAX_IMAGE_SIZE // (1024 * 1024)}MB limit")


class ReviewService:
    def __init__(self, repository: ReviewRepository, image_store: ImageStore, publish: Publisher):
        self.repository = repository
        self.image_store = image_store
        self.publish = publish

    def _validate_fields(self, fields: Mapping[str, Any]) -> ReviewSubmission:
        # Blank form values count as missing so defaults apply
        data = {key: value for key, value in fields.items() if value not in (None, "")}
        try:
            return ReviewSubmission.model_validate(data)
        except PydanticValidationError as e:
            invalid = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            logger.warning(f"Rejected review submission, invalid fields: {invalid}")
            raise ValidationError() from e

    def _validate_images(self, images: list[UploadedImage]):
        if len(images) < MIN_IMAGES:
            raise ValidationError(f"At least {MIN_IMAGES} images are required")
        check_upload_limits([image.size for image in images])

        for image in images:
            if image.content_type not in ALLOWED_IMAGE_TYPES:
                raise ValidationError("Invalid file type. Only JPEG, PNG, and GIF are allowed.")

    async def submit(self, fields: Mapping[str, Any], images: list[UploadedImage]) -> Review:
        """
        Validate and store a new review, then announce it to live listeners.

        Args:
            fields: Raw form fields keyed by their wire names (riderName, bikeName, ...)
            images: Uploaded photos, in the order they were sent

        Returns:
            The stored review

        Raises:
            ValidationError: Bad field values, wrong image count, type or size
            StorageError: Image placement or database insert failed
        """
        submission = self._validate_fields(fields)
        self._validate_images(images)

        # Images already written stay in place if a later one fails.
        # Resizing, uploads and inserts block, so they run off the event loop.
        group = grouping_key(submission.bike_name, submission.model_name)
        locators = [
            await run_in_threadpool(self.image_store.store, group, image.data, image.extension) for image in images
        ]

        review = await run_in_threadpool(self.repository.insert, submission, locators)
        logger.info(f"Created review {review.id} for {group} with {len(locators)} images")

        await self.publish(NEW_REVIEW_EVENT, review.model_dump(mode="json", by_alias=True))
        return review


# Singleton instance
review_service = ReviewService(review_repository, build_image_store(), connection_manager.broadcast)

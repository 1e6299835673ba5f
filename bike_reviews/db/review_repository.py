"""Review storage on top of the MongoDB 'bikes' collection."""

import logging
import re
from datetime import datetime, timezone

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from bike_reviews.config import SEARCH_LIMIT
from bike_reviews.db.mongodb_client import REVIEWS_COLLECTION, mongo_client
from bike_reviews.errors import NotFoundError, StorageError, ValidationError
from bike_reviews.models import Review, ReviewSubmission

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision BSON dates keep."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class ReviewRepository:
    def __init__(self, collection: Collection):
        self.collection = collection

    def insert(self, submission: ReviewSubmission, images: list[str]) -> Review:
        """
        Persist a new review.

        Args:
            submission: Validated rider input
            images: Image locators, in upload order

        Returns:
            The stored review with its assigned id and creation time
        """
        doc = submission.model_dump(by_alias=True, mode="json")
        doc["images"] = list(images)
        doc["createdAt"] = _utc_now()

        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Error inserting review for {submission.bike_name} {submission.model_name}: {e}")
            raise StorageError() from e

        doc["_id"] = result.inserted_id
        return Review.model_validate(doc)

    def list_recent(self) -> list[Review]:
        """All reviews, newest first."""
        try:
            docs = list(self.collection.find().sort("createdAt", DESCENDING))
        except PyMongoError as e:
            logger.error(f"Error fetching reviews: {e}")
            raise StorageError() from e
        return [Review.model_validate(doc) for doc in docs]

    def search(self, query: str | None) -> list[Review]:
        """Case-insensitive substring match on bike or model name, newest first."""
        if not query:
            raise ValidationError("Search query is required")

        pattern = {"$regex": re.escape(query), "$options": "i"}
        criteria = {"$or": [{"bikeName": pattern}, {"modelName": pattern}]}

        try:
            docs = list(self.collection.find(criteria).sort("createdAt", DESCENDING).limit(SEARCH_LIMIT))
        except PyMongoError as e:
            logger.error(f"Error searching reviews for '{query}': {e}")
            raise StorageError() from e
        return [Review.model_validate(doc) for doc in docs]

    def get_by_id(self, review_id: str) -> Review:
        # A malformed id can never match a stored review
        if not ObjectId.is_valid(review_id):
            raise NotFoundError()

        try:
            doc = self.collection.find_one({"_id": ObjectId(review_id)})
        except PyMongoError as e:
            logger.error(f"Error fetching review {review_id}: {e}")
            raise StorageError() from e

        if doc is None:
            raise NotFoundError()
        return Review.model_validate(doc)


# Singleton instance
review_repository = ReviewRepository(mongo_client.get_collection(REVIEWS_COLLECTION))
